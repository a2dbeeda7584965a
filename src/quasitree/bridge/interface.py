"""
Translator Protocols.

Defines the abstract interfaces of the collaborators the Translation Bridge
calls out to. Concrete implementations live alongside (``canonical``, ``ssa``)
or are supplied by the surrounding compiler through the ``Environment``.
"""

from abc import ABC, abstractmethod
from typing import Any


class CanonicalTranslator(ABC):
  """
  Two-way bridge between surface trees and the canonical form.
  """

  @abstractmethod
  def to_canonical(self, tree: Any, env: Any) -> Any:
    """
    Converts a surface tree into canonical form.

    Args:
        tree (Any): The surface tree.
        env (Environment): The lexical environment of the invocation.

    Returns:
        Any: The canonical tree.

    Raises:
        TranslationError: If the tree cannot be normalized.
    """
    pass

  @abstractmethod
  def from_canonical(self, tree: Any, env: Any) -> Any:
    """
    Renders a canonical tree (live or already pattern-ized) back into surface shape.

    Args:
        tree (Any): The canonical tree.
        env (Environment): The lexical environment of the invocation.

    Returns:
        Any: The surface tree.
    """
    pass


class SSATranslator(ABC):
  """
  One-way translator from canonical form to single-assignment form.
  """

  @abstractmethod
  def from_canonical(self, tree: Any) -> Any:
    """
    Converts a canonical tree into SSA form.

    Args:
        tree (Any): The canonical tree.

    Returns:
        Any: The SSA tree.
    """
    pass
