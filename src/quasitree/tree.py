"""
Tree Model.

This module defines the closed, three-variant shape every component of the
engine operates on:

- ``Operation``: an operator (a ``Symbol`` or a nested node), a metadata bag
  and an ordered list of children.
- ``VariableRef``: a named reference with metadata and a disambiguation context.
- Literals: numbers, strings, booleans, ``None``, ``Symbol`` atoms, and lists or
  2-tuples (pairs) built from the other kinds.

Metadata is an opaque ``dict`` (positions, hints). It never participates in
matching and can always be erased.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Union

Metadata = Dict[str, Any]


@dataclass(frozen=True)
class Symbol:
  """
  An interned-by-value atom, distinct from string literals.
  """

  name: str
  """The atom text (e.g. '+', 'ok')."""

  def __repr__(self) -> str:
    return f":{self.name}"

  def __str__(self) -> str:
    return self.name


@dataclass
class Operation:
  """
  An operation node: ``operator(children...)`` with attached metadata.
  """

  operator: Any
  """A ``Symbol`` or a nested node (e.g. a qualified ``.`` operation)."""

  metadata: Metadata = field(default_factory=dict)
  """Opaque metadata bag."""

  children: List[Any] = field(default_factory=list)
  """Ordered child nodes."""


@dataclass
class VariableRef:
  """
  A variable reference leaf.
  """

  name: Symbol
  """Variable identifier."""

  metadata: Metadata = field(default_factory=dict)
  """Opaque metadata bag."""

  context: Optional[Symbol] = None
  """Disambiguation context (hygiene), ``None`` for user code."""


Node = Union[Operation, VariableRef, int, float, str, bool, None, Symbol, list, tuple]

# Reserved symbols
RAW_NODE = Symbol("{}")
CONS = Symbol("|")
WILDCARD = Symbol("_")
DOT = Symbol(".")
STAR = Symbol("*")


def sym(name: Union[str, Symbol]) -> Symbol:
  """Coerces a string into a ``Symbol``."""
  if isinstance(name, Symbol):
    return name
  return Symbol(name)


def op(operator: Union[str, Symbol, Any], *children: Any, meta: Optional[Metadata] = None) -> Operation:
  """
  Shorthand constructor for operations.

  Args:
      operator: Operator symbol (strings are coerced) or nested operator node.
      *children: Child nodes.
      meta: Optional metadata bag.

  Returns:
      Operation: The new node.
  """
  if isinstance(operator, str):
    operator = Symbol(operator)
  return Operation(operator, dict(meta or {}), list(children))


def var(name: Union[str, Symbol], context: Union[str, Symbol, None] = None, meta: Optional[Metadata] = None) -> VariableRef:
  """Shorthand constructor for variable references."""
  ctx = sym(context) if context is not None else None
  return VariableRef(sym(name), dict(meta or {}), ctx)


def wildcard() -> VariableRef:
  """Returns the non-binding ``_`` variable."""
  return VariableRef(WILDCARD, {}, None)


def is_atom(value: Any) -> bool:
  """True for scalar literal values."""
  return value is None or isinstance(value, (bool, int, float, str, Symbol))


def is_pair(value: Any) -> bool:
  """True for 2-tuples."""
  return isinstance(value, tuple) and len(value) == 2


def cons(head: Any, tail: Any) -> Operation:
  """Builds the improper-tail element ``head | tail`` used as the last item of a list."""
  return Operation(CONS, {}, [head, tail])


def is_cons(value: Any) -> bool:
  """True for a ``head | tail`` element."""
  return isinstance(value, Operation) and value.operator == CONS and len(value.children) == 2


def is_raw(value: Any) -> bool:
  """True when ``value`` is a ``{}`` raw-node operation with three slots."""
  return isinstance(value, Operation) and value.operator == RAW_NODE and len(value.children) == 3


def is_variable_shape(value: Any) -> bool:
  """
  True when ``value`` is an escaped variable: ``{}(name, meta, context)``.

  The third slot of an escaped operation is a list of children, while the
  third slot of an escaped variable is a context symbol or ``None``.
  """
  if not is_raw(value):
    return False
  name, meta, context = value.children
  return isinstance(name, Symbol) and isinstance(meta, dict) and (context is None or isinstance(context, Symbol))


def prewalk(node: Any, fn: Callable[[Any], Any]) -> Any:
  """
  Pre-order rewrite: applies ``fn`` to a node, then recurses into the result.

  Descends into operators and children of operations, list elements and pair
  members. Metadata and variable leaves are not descended into.

  Args:
      node: The tree to rewrite.
      fn: Rewrite function, called once per visited node.

  Returns:
      Any: A new tree.
  """
  node = fn(node)
  if isinstance(node, Operation):
    return Operation(prewalk(node.operator, fn), node.metadata, [prewalk(c, fn) for c in node.children])
  if isinstance(node, list):
    return [prewalk(c, fn) for c in node]
  if is_pair(node):
    return (prewalk(node[0], fn), prewalk(node[1], fn))
  return node


def postwalk(node: Any, fn: Callable[[Any], Any]) -> Any:
  """Post-order counterpart of ``prewalk``: children are rewritten first."""
  if isinstance(node, Operation):
    node = Operation(postwalk(node.operator, fn), node.metadata, [postwalk(c, fn) for c in node.children])
  elif isinstance(node, list):
    node = [postwalk(c, fn) for c in node]
  elif is_pair(node):
    node = (postwalk(node[0], fn), postwalk(node[1], fn))
  return fn(node)


def strip_metadata(node: Any) -> Any:
  """Returns a copy of ``node`` with every metadata bag emptied."""

  def _strip(n: Any) -> Any:
    if isinstance(n, Operation):
      return Operation(n.operator, {}, n.children)
    if isinstance(n, VariableRef):
      return replace(n, metadata={})
    return n

  return prewalk(node, _strip)


def equal_modulo_metadata(left: Any, right: Any) -> bool:
  """Structural equality ignoring metadata."""
  return strip_metadata(left) == strip_metadata(right)
