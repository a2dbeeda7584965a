"""
Qualifying Canonical Translator.

Reference implementation of ``CanonicalTranslator``. The canonical form
qualifies every operation whose operator is imported from a module:

Transformation::

    x + 1            (with imports {'+': 'Kernel'})
Becomes::

    .(Kernel, +)(x, 1)

``from_canonical`` reverses the qualification for operators that the
environment still imports, both on live trees and on escaped/pattern trees
(where the operator slot is itself a ``{}`` raw-node).
"""

from typing import Any, Optional

from quasitree.bridge.interface import CanonicalTranslator
from quasitree.errors import TranslationError
from quasitree.tree import (
  DOT,
  RAW_NODE,
  Operation,
  Symbol,
  VariableRef,
  is_atom,
  is_pair,
  is_raw,
  postwalk,
)


class QualifyingTranslator(CanonicalTranslator):
  """
  Qualifies imported operators into ``.(module, name)`` calls.
  """

  def to_canonical(self, tree: Any, env: Any) -> Any:
    """
    Qualifies imported operators throughout ``tree``.

    Raises:
        TranslationError: For operators or values the canonical form cannot express.
    """
    imports = getattr(env, "imports", {}) or {}
    return self._qualify(tree, imports)

  def _qualify(self, node: Any, imports: Any) -> Any:
    if isinstance(node, Operation):
      operator = node.operator
      children = [self._qualify(c, imports) for c in node.children]
      if isinstance(operator, Symbol):
        module = imports.get(operator.name)
        if module is not None and operator != RAW_NODE:
          operator = Operation(DOT, {}, [Symbol(module), operator])
      elif isinstance(operator, Operation):
        operator = self._qualify(operator, imports)
      elif not isinstance(operator, VariableRef):
        raise TranslationError("to_canonical", f"cannot qualify operator {operator!r}", node)
      return Operation(operator, node.metadata, children)

    if isinstance(node, list):
      return [self._qualify(c, imports) for c in node]

    if is_pair(node):
      return (self._qualify(node[0], imports), self._qualify(node[1], imports))

    if isinstance(node, VariableRef) or is_atom(node):
      return node

    raise TranslationError("to_canonical", f"unsupported value {type(node).__name__}", node)

  def from_canonical(self, tree: Any, env: Any) -> Any:
    """
    Replaces qualified calls of still-imported operators by their bare name.
    """
    imports = getattr(env, "imports", {}) or {}

    def _unqualify(node: Any) -> Any:
      if is_raw(node) and isinstance(node.children[2], list):
        name = _qualified_name(node.children[0], imports, escaped=True)
        if name is not None:
          return Operation(RAW_NODE, node.metadata, [name, node.children[1], node.children[2]])
        return node
      if isinstance(node, Operation):
        name = _qualified_name(node.operator, imports, escaped=False)
        if name is not None:
          return Operation(name, node.metadata, node.children)
      return node

    return postwalk(tree, _unqualify)


def _qualified_name(operator: Any, imports: Any, escaped: bool) -> Optional[Symbol]:
  """
  Extracts ``name`` from a ``.(module, name)`` operator when ``name`` is imported from ``module``.

  Args:
      operator: A live ``.`` operation, or its raw-node mirror when ``escaped``.
      imports: Operator name to module map.
      escaped: Whether the operator is in escaped (raw-node) shape.

  Returns:
      Optional[Symbol]: The bare operator, or None.
  """
  if escaped:
    if not (is_raw(operator) and operator.children[0] == DOT and isinstance(operator.children[2], list)):
      return None
    parts = operator.children[2]
  else:
    if not (isinstance(operator, Operation) and operator.operator == DOT):
      return None
    parts = operator.children

  if len(parts) != 2:
    return None
  module, name = parts
  if not (isinstance(module, Symbol) and isinstance(name, Symbol)):
    return None
  if imports.get(name.name) != module.name:
    return None
  return name
