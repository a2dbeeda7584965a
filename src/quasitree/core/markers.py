"""
Marker Forms.

Markers are ordinary operations recognized by their operator symbol:

- ``quote(x)`` / ``quote(op, meta, children)``: inside a pattern, splice a
  reverse-escaped (live) sub-tree in place of a structural pattern.
- ``splice(xs)``: as the last element of a list, match a prefix plus the rest.
- ``unquote(x)``: while escaping, keep ``x`` live.

``classify`` performs the single up-front check on an escaped node so the
traverser can dispatch on a ``MarkerKind`` instead of sniffing symbols.
"""

from enum import Enum
from typing import Any

from quasitree.errors import MalformedMarkerError
from quasitree.tree import Symbol, is_raw

QUOTE = Symbol("quote")
SPLICE = Symbol("splice")
UNQUOTE = Symbol("unquote")


class MarkerKind(str, Enum):
  """
  Classification of an escaped node at the start of a traversal step.
  """

  INLINE_QUOTE = "inline_quote"  # quote(x)
  INLINE_QUOTE_PARTS = "inline_quote_parts"  # quote(op, meta, children)
  SPLICE = "splice"  # splice(xs)
  GENERIC = "generic"  # any other raw-node
  OTHER = "other"  # lists, pairs, literals, live nodes


def classify(escaped: Any) -> MarkerKind:
  """
  Determines which traversal rule applies to ``escaped``.

  Args:
      escaped: A node of an escaped tree.

  Returns:
      MarkerKind: The matching kind.

  Raises:
      MalformedMarkerError: If a marker carries an unsupported number of arguments.
  """
  if not is_raw(escaped):
    return MarkerKind.OTHER

  operator, _, args = escaped.children
  if not isinstance(args, list):
    # Escaped variable, even one named like a marker
    return MarkerKind.GENERIC

  if operator == QUOTE:
    if len(args) == 1:
      return MarkerKind.INLINE_QUOTE
    if len(args) == 3:
      return MarkerKind.INLINE_QUOTE_PARTS
    raise MalformedMarkerError("quote", f"expected 1 or 3 arguments, got {len(args)}", escaped)

  if operator == SPLICE:
    if len(args) != 1:
      raise MalformedMarkerError("splice", f"expected exactly 1 list argument, got {len(args)}", escaped)
    return MarkerKind.SPLICE

  return MarkerKind.GENERIC
