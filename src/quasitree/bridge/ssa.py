"""
Versioning SSA Translator.

Reference implementation of ``SSATranslator``. Every binding occurrence on the
left of an ``=`` operation gets a fresh version; later references carry the
version of the binding they see. Versions are written to the ``version``
metadata key, so names and contexts are unchanged and scope lookups keep
working on the translated tree.

Transformation::

    x = 1; x = x + 1; x
Becomes (versions in brackets)::

    x[0] = 1; x[1] = x[0] + 1; x[1]
"""

from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

from quasitree.bridge.interface import SSATranslator
from quasitree.tree import WILDCARD, Operation, Symbol, VariableRef, is_pair, postwalk

ASSIGN = Symbol("=")

_Key = Tuple[Symbol, Optional[Symbol]]


class VersioningSSA(SSATranslator):
  """
  Assigns single-assignment versions to variables in evaluation order.
  """

  def from_canonical(self, tree: Any) -> Any:
    versions: Dict[_Key, int] = {}
    return self._rename(tree, versions)

  def _rename(self, node: Any, versions: Dict[_Key, int]) -> Any:
    if isinstance(node, Operation):
      if node.operator == ASSIGN and len(node.children) == 2:
        target, value = node.children
        # The right-hand side sees the versions from before this binding
        value = self._rename(value, versions)
        target = self._bind(target, versions)
        return Operation(node.operator, node.metadata, [target, value])

      operator = self._rename(node.operator, versions)
      return Operation(operator, node.metadata, [self._rename(c, versions) for c in node.children])

    if isinstance(node, VariableRef):
      key = (node.name, node.context)
      if key in versions:
        return replace(node, metadata={**node.metadata, "version": versions[key]})
      return node

    if isinstance(node, list):
      return [self._rename(c, versions) for c in node]

    if is_pair(node):
      return (self._rename(node[0], versions), self._rename(node[1], versions))

    return node

  def _bind(self, target: Any, versions: Dict[_Key, int]) -> Any:
    """Gives every variable in an assignment target a fresh version."""

    def _fresh(node: Any) -> Any:
      if isinstance(node, VariableRef) and node.name != WILDCARD:
        key = (node.name, node.context)
        versions[key] = versions.get(key, -1) + 1
        return replace(node, metadata={**node.metadata, "version": versions[key]})
      return node

    return postwalk(target, _fresh)
