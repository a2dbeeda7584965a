"""
Escaper.

Converts a live tree into inert data: a tree which, when instantiated,
rebuilds the original. Every operation and variable becomes a ``{}`` raw-node
whose three slots hold the escaped operator (or variable name), the metadata
and the escaped children (or the variable context).

Transformation::

    x + 1
Becomes::

    {}(:+, meta, [{}(:x, meta, nil), 1])
"""

from typing import Any

from quasitree.core.markers import UNQUOTE
from quasitree.errors import MalformedMarkerError, UnsupportedTreeShapeError
from quasitree.tree import RAW_NODE, Operation, VariableRef, is_atom, is_pair, is_variable_shape, strip_metadata


def escape(node: Any, prune_metadata: bool = False, unquote: bool = False) -> Any:
  """
  Escapes a live tree into its data-level mirror.

  Args:
      node: The live tree.
      prune_metadata: If True, metadata bags are replaced by ``{}``.
      unquote: If True, ``unquote(expr)`` is not descended and ``expr`` is kept live
          (with its metadata emptied when pruning).

  Returns:
      Any: The escaped tree.

  Raises:
      MalformedMarkerError: If ``unquote`` does not wrap exactly one child.
      UnsupportedTreeShapeError: If the input is outside the Tree Model.
  """
  if isinstance(node, Operation):
    if unquote and node.operator == UNQUOTE:
      if len(node.children) != 1:
        raise MalformedMarkerError("unquote", f"expected 1 argument, got {len(node.children)}", node)
      return strip_metadata(node.children[0]) if prune_metadata else node.children[0]

    meta = {} if prune_metadata else dict(node.metadata)
    return Operation(
      RAW_NODE,
      {},
      [
        escape(node.operator, prune_metadata, unquote),
        meta,
        [escape(c, prune_metadata, unquote) for c in node.children],
      ],
    )

  if isinstance(node, VariableRef):
    meta = {} if prune_metadata else dict(node.metadata)
    return Operation(RAW_NODE, {}, [node.name, meta, node.context])

  if isinstance(node, list):
    return [escape(c, prune_metadata, unquote) for c in node]

  if is_pair(node):
    return (escape(node[0], prune_metadata, unquote), escape(node[1], prune_metadata, unquote))

  if is_atom(node):
    return node

  raise UnsupportedTreeShapeError(node, "escape")


def unescape(escaped: Any) -> Any:
  """
  Totally reverses ``escape``.

  Every raw-node becomes a live operation or variable again; metadata is
  carried through, so ``unescape(escape(n)) == n``.

  Args:
      escaped: An escaped tree.

  Returns:
      Any: The live tree.
  """
  if is_variable_shape(escaped):
    name, meta, context = escaped.children
    return VariableRef(name, meta, context)

  if isinstance(escaped, Operation) and escaped.operator == RAW_NODE and len(escaped.children) == 3:
    operator, meta, children = escaped.children
    return Operation(unescape(operator), meta, unescape(children))

  if isinstance(escaped, Operation):
    return Operation(unescape(escaped.operator), escaped.metadata, [unescape(c) for c in escaped.children])

  if isinstance(escaped, list):
    return [unescape(c) for c in escaped]

  if is_pair(escaped):
    return (unescape(escaped[0]), unescape(escaped[1]))

  return escaped
