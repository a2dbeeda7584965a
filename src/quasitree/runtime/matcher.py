"""
Pattern Matcher.

Runs the patterns produced by ``build_pattern`` against runtime tree values.

Pattern language:
- ``VariableRef``: binds the value (a repeated name must see an equal value).
- ``_``: matches anything, binds nothing.
- ``{}(op, meta, rest)``: matches an ``Operation`` (``rest`` against its
  children) or a ``VariableRef`` (``rest`` against its context).
- live operations (from ``quote``/``splice``): operator and children are
  matched recursively, metadata is ignored.
- lists: element-wise; a trailing ``head | tail`` matches the remainder.
- pairs, literals and metadata dicts: structural equality.
"""

from typing import Any, Dict, Optional

from quasitree.errors import UnsupportedTreeShapeError
from quasitree.tree import WILDCARD, Operation, VariableRef, is_atom, is_cons, is_pair, is_raw

Bindings = Dict[str, Any]


def match(pattern: Any, value: Any) -> Optional[Bindings]:
  """
  Matches ``value`` against ``pattern``.

  Args:
      pattern: A pattern built by the engine.
      value: The runtime tree.

  Returns:
      Optional[Dict[str, Any]]: Name to value bindings, or None on mismatch.

  Raises:
      UnsupportedTreeShapeError: If the pattern contains a construct the matcher cannot run.
  """
  bindings: Bindings = {}
  if _match(pattern, value, bindings):
    return bindings
  return None


def matches(pattern: Any, value: Any) -> bool:
  """Boolean shorthand for ``match``."""
  return match(pattern, value) is not None


def _match(pattern: Any, value: Any, bindings: Bindings) -> bool:
  if isinstance(pattern, VariableRef):
    if pattern.name == WILDCARD:
      return True
    key = pattern.name.name
    if key in bindings:
      return _same(bindings[key], value)
    bindings[key] = value
    return True

  if is_raw(pattern):
    operator, meta, rest = pattern.children
    if isinstance(value, Operation):
      parts = (value.operator, value.metadata, value.children)
    elif isinstance(value, VariableRef):
      parts = (value.name, value.metadata, value.context)
    else:
      return False
    return all(_match(p, v, bindings) for p, v in zip((operator, meta, rest), parts))

  if isinstance(pattern, Operation):
    # Concrete sub-tree from quote or splice; metadata is not compared
    if not isinstance(value, Operation):
      return False
    return _match(pattern.operator, value.operator, bindings) and _match(pattern.children, value.children, bindings)

  if isinstance(pattern, list):
    return _match_list(pattern, value, bindings)

  if is_pair(pattern):
    return is_pair(value) and _match(pattern[0], value[0], bindings) and _match(pattern[1], value[1], bindings)

  if isinstance(pattern, dict) or is_atom(pattern):
    return _same(pattern, value)

  raise UnsupportedTreeShapeError(pattern, "pattern")


def _match_list(pattern: list, value: Any, bindings: Bindings) -> bool:
  if not isinstance(value, list):
    return False

  if pattern and is_cons(pattern[-1]):
    fixed = pattern[:-1]
    head, tail = pattern[-1].children
    if len(value) < len(fixed) + 1:
      return False
    for p, v in zip(fixed, value):
      if not _match(p, v, bindings):
        return False
    return _match(head, value[len(fixed)], bindings) and _match(tail, value[len(fixed) + 1 :], bindings)

  if len(pattern) != len(value):
    return False
  return all(_match(p, v, bindings) for p, v in zip(pattern, value))


def _same(left: Any, right: Any) -> bool:
  """Equality that keeps ``True``/``1``/``1.0`` apart."""
  if is_atom(left) or is_atom(right):
    return type(left) is type(right) and left == right
  return left == right
