"""
Error Taxonomy.

Every failure raised by the engine derives from ``QuasitreeError`` and from
the builtin exception that best matches its category, so callers may catch
either the specific class or the familiar builtin.

- ``MalformedMarkerError``: a ``quote``/``splice``/``unquote`` marker used
  with the wrong argument shape.
- ``TranslationError``: any failure of the canonical or SSA collaborators.
- ``UnsupportedTreeShapeError``: a value outside the Tree Model domain.
- ``UnboundVariableError``: a template references a name with no value.
"""

from typing import Any, Optional


class QuasitreeError(Exception):
  """Base class for all engine errors."""


class MalformedMarkerError(QuasitreeError, ValueError):
  """
  Raised when a marker form is applied to an argument shape it does not accept.

  Attributes:
      marker (str): The marker name (e.g. 'splice').
      node (Any): The offending sub-tree.
  """

  def __init__(self, marker: str, reason: str, node: Any = None) -> None:
    self.marker = marker
    self.node = node
    super().__init__(f"Malformed '{marker}' marker: {reason}")


class TranslationError(QuasitreeError, RuntimeError):
  """
  Raised when an external translator cannot convert a tree.

  Attributes:
      stage (str): Which translation was running ('to_canonical', 'from_canonical', 'to_ssa').
  """

  def __init__(self, stage: str, reason: str, node: Any = None) -> None:
    self.stage = stage
    self.node = node
    super().__init__(f"{stage} failed: {reason}")


class UnsupportedTreeShapeError(QuasitreeError, TypeError):
  """Raised for values outside the closed Tree Model."""

  def __init__(self, value: Any, where: Optional[str] = None, description: Optional[str] = None) -> None:
    self.value = value
    location = f" in {where}" if where else ""
    shown = description or f"{type(value).__name__} {value!r}"
    super().__init__(f"Unsupported tree shape{location}: {shown}")


class UnboundVariableError(QuasitreeError, KeyError):
  """Raised when instantiating a template that references an unknown name."""

  def __init__(self, name: str) -> None:
    self.name = name
    super().__init__(name)

  def __str__(self) -> str:
    return f"Variable '{self.name}' has no value"
