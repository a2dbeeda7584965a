"""
Template Instantiation.

Evaluates templates produced by ``build_template``: raw-nodes construct
operations and variables, live variable references are replaced by the
caller-supplied values.
"""

from typing import Any, Mapping

from quasitree.errors import UnboundVariableError, UnsupportedTreeShapeError
from quasitree.tree import Operation, VariableRef, is_atom, is_pair, is_raw


def instantiate(template: Any, values: Mapping[Any, Any]) -> Any:
  """
  Builds the tree described by ``template``.

  Args:
      template: A template built by the engine.
      values: Values for the captured variables, keyed by name (str or Symbol).

  Returns:
      Any: The resulting tree.

  Raises:
      UnboundVariableError: If a captured variable has no value.
      UnsupportedTreeShapeError: If the template contains a live operation.
  """
  env = {str(k): v for k, v in values.items()}
  return _eval(template, env)


def _eval(node: Any, values: Mapping[str, Any]) -> Any:
  if isinstance(node, VariableRef):
    key = node.name.name
    if key not in values:
      raise UnboundVariableError(key)
    return values[key]

  if is_raw(node):
    operator, meta, rest = (_eval(c, values) for c in node.children)
    if isinstance(rest, list):
      return Operation(operator, meta, rest)
    return VariableRef(operator, meta, rest)

  if isinstance(node, list):
    return [_eval(c, values) for c in node]

  if is_pair(node):
    return (_eval(node[0], values), _eval(node[1], values))

  if isinstance(node, dict):
    return dict(node)

  if is_atom(node):
    return node

  raise UnsupportedTreeShapeError(node, "template")
