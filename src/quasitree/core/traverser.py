"""
Pattern/Template Traverser.

Rewrites a resolved escaped tree into its final form.

Pattern direction (``to_pattern``):
- ``quote(x)`` switches to reverse-escape mode for ``x``.
- ``quote(op, meta, children)`` builds a raw-node from three reverse-escaped parts.
- ``splice(xs)`` as the last list element matches a prefix plus the rest.
- Any other raw-node keeps its operator and children (recursively) while its
  metadata slot becomes the ``_`` wildcard.

Template direction (``to_template``) only applies the metadata post pass; the
escaper and resolver already did the rest.
"""

from typing import Any, List, Optional

from quasitree.core.context import Environment
from quasitree.core.markers import MarkerKind, classify
from quasitree.errors import MalformedMarkerError, UnsupportedTreeShapeError
from quasitree.tree import (
  RAW_NODE,
  STAR,
  Operation,
  Symbol,
  VariableRef,
  cons,
  is_cons,
  is_pair,
  is_raw,
  is_variable_shape,
  prewalk,
  wildcard,
)


def to_pattern(escaped: Any, env: Optional[Environment] = None, isolate: bool = False) -> Any:
  """
  Turns a resolved escaped tree into a pattern.

  Args:
      escaped: The escaped tree (variables already resolved).
      env: Environment used for macro expansion inside ``quote``.
      isolate: If True, variables revived inside ``quote`` stay structural.

  Returns:
      Any: The pattern.

  Raises:
      MalformedMarkerError: On misused ``quote``/``splice`` markers.
  """
  kind = classify(escaped)

  if kind is MarkerKind.INLINE_QUOTE:
    return reverse_escape(escaped.children[2][0], env, isolate)

  if kind is MarkerKind.INLINE_QUOTE_PARTS:
    operator, meta, children = escaped.children[2]
    return Operation(
      RAW_NODE,
      {},
      [
        reverse_escape(operator, env, isolate),
        reverse_escape(meta, env, isolate),
        reverse_escape(children, env, isolate),
      ],
    )

  if kind is MarkerKind.SPLICE:
    raise MalformedMarkerError("splice", "only allowed as the last element of a list", escaped)

  if kind is MarkerKind.GENERIC:
    operator, _, args = escaped.children
    return Operation(RAW_NODE, {}, [to_pattern(operator, env, isolate), wildcard(), to_pattern(args, env, isolate)])

  if isinstance(escaped, list):
    return _list_pattern(escaped, env, isolate)

  if is_pair(escaped):
    return (to_pattern(escaped[0], env, isolate), to_pattern(escaped[1], env, isolate))

  return escaped


def _list_pattern(items: List[Any], env: Optional[Environment], isolate: bool) -> Any:
  """Pattern-izes list elements, handling a trailing ``splice`` marker."""
  prefix: List[Any] = []
  for position, item in enumerate(items):
    if classify(item) is MarkerKind.SPLICE:
      if position != len(items) - 1:
        raise MalformedMarkerError("splice", "only allowed as the last element of a list", item)
      return _splice(item, prefix, env, isolate)
    prefix.append(to_pattern(item, env, isolate))
  return prefix


def _splice(marker: Operation, prefix: List[Any], env: Optional[Environment], isolate: bool) -> Any:
  """
  Builds ``[*prefix, *spliced | tail]`` for a ``splice`` marker.

  A spliced list without an explicit tail (``| rest`` or a trailing ``*rest``)
  gets a wildcard tail. A spliced variable becomes the tail itself.
  """
  spliced = reverse_escape(marker.children[2][0], env, isolate)

  if isinstance(spliced, list):
    if spliced and is_cons(spliced[-1]):
      return prefix + spliced
    if spliced and _is_starred(spliced[-1]):
      return _with_tail(prefix + spliced[:-1], spliced[-1].children[0])
    return _with_tail(prefix + spliced, wildcard())

  if isinstance(spliced, VariableRef) or is_variable_shape(spliced):
    return _with_tail(prefix, spliced)

  raise MalformedMarkerError("splice", f"expected a list or a variable, got {spliced!r}", marker)


def _is_starred(node: Any) -> bool:
  return isinstance(node, Operation) and node.operator == STAR and len(node.children) == 1


def _with_tail(items: List[Any], tail: Any) -> Any:
  """Attaches ``tail`` as the improper tail of ``items``."""
  if not items:
    return tail
  return items[:-1] + [cons(items[-1], tail)]


def reverse_escape(escaped: Any, env: Optional[Environment] = None, isolate: bool = False) -> Any:
  """
  Fully converts escaped data back into a live tree.

  Raw-nodes become live operations (expanded against ``env.macros``) or live
  variables. Metadata is carried through unchanged.

  Args:
      escaped: Escaped tree.
      env: Optional environment providing macros.
      isolate: If True, escaped variables stay structural (wildcard metadata)
          instead of becoming live binders.

  Returns:
      Any: The live tree.

  Raises:
      UnsupportedTreeShapeError: If a raw-node operator slot revives to a non-operator.
  """
  if isinstance(escaped, list):
    return [reverse_escape(c, env, isolate) for c in escaped]

  if is_pair(escaped):
    return (reverse_escape(escaped[0], env, isolate), reverse_escape(escaped[1], env, isolate))

  if not is_raw(escaped):
    return escaped

  if is_variable_shape(escaped):
    name, meta, context = escaped.children
    if isolate:
      return Operation(RAW_NODE, {}, [name, wildcard(), context])
    return VariableRef(name, meta, context)

  operator, meta, children = (reverse_escape(c, env, isolate) for c in escaped.children)
  if not isinstance(children, list):
    raise UnsupportedTreeShapeError(escaped, "reverse_escape")
  if not isinstance(operator, (Symbol, Operation, VariableRef)):
    raise UnsupportedTreeShapeError(operator, "operator slot")

  node = Operation(operator, meta, children)
  return env.expand(node) if env is not None else node


def to_template(escaped: Any, keep_metadata: bool = True) -> Any:
  """
  Applies the template post pass.

  Args:
      escaped: The resolved escaped tree.
      keep_metadata: If False, every raw-node metadata slot becomes ``{}``.

  Returns:
      Any: The template.
  """
  if keep_metadata:
    return escaped

  def _drop_metadata(node: Any) -> Any:
    if is_raw(node):
      operator, _, args = node.children
      return Operation(RAW_NODE, node.metadata, [operator, {}, args])
    return node

  return prewalk(escaped, _drop_metadata)
