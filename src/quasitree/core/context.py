"""
Lexical Environment Module.

This module provides the read-only inputs an invocation consults:

- ``ScopeTable``: which ``(name, context)`` pairs are bound, with their versions.
- ``Environment``: the scope table plus the matching flag, macro table,
  import map used by the canonical translator, declaration defaults and the
  external collaborators (translators, inspector).

Nothing here is mutated by the engine; ``with_changes`` returns copies.
"""

from dataclasses import dataclass, field, replace
from collections.abc import Mapping as MappingABC
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple, Union

from quasitree.tree import Operation, Symbol, sym

ScopeKey = Tuple[Symbol, Optional[Symbol]]
Macro = Callable[[Operation], Any]


class ScopeTable(MappingABC):
  """
  Immutable mapping of ``(name, context)`` to a binding version.
  """

  def __init__(self, entries: Optional[Mapping[Any, int]] = None) -> None:
    """
    Initializes the table.

    Args:
        entries: Mapping whose keys are names or ``(name, context)`` pairs.
            Plain names are bound with a ``None`` context.
    """
    self._entries: Dict[ScopeKey, int] = {}
    for key, version in (entries or {}).items():
      self._entries[_normalize_key(key)] = version

  @classmethod
  def of(cls, *names: Union[str, Symbol, Tuple[Any, Any]]) -> "ScopeTable":
    """
    Builds a table binding each given name at version 0.

    Args:
        *names: Names or ``(name, context)`` pairs.

    Returns:
        ScopeTable: The populated table.
    """
    return cls({name: 0 for name in names})

  def bind(self, name: Union[str, Symbol], context: Union[str, Symbol, None] = None) -> "ScopeTable":
    """
    Returns a new table with ``(name, context)`` bound at the next version.
    """
    key = _normalize_key((name, context))
    entries = dict(self._entries)
    entries[key] = entries.get(key, -1) + 1
    return ScopeTable(entries)

  def __getitem__(self, key: Any) -> int:
    return self._entries[_normalize_key(key)]

  def __contains__(self, key: Any) -> bool:
    return _normalize_key(key) in self._entries

  def __iter__(self) -> Iterator[ScopeKey]:
    return iter(self._entries)

  def __len__(self) -> int:
    return len(self._entries)

  def __repr__(self) -> str:
    return f"ScopeTable({self._entries!r})"


def _normalize_key(key: Any) -> ScopeKey:
  """Coerces ``name`` or ``(name, context)`` into a symbol pair."""
  if isinstance(key, tuple):
    name, context = key
    return sym(name), (sym(context) if context is not None else None)
  return sym(key), None


def _default_inspector(node: Any, label: Optional[str] = None) -> Any:
  from quasitree.utils.printer import inspect_tree

  return inspect_tree(node, label=label)


def _default_canonical() -> Any:
  from quasitree.bridge.canonical import QualifyingTranslator

  return QualifyingTranslator()


def _default_ssa() -> Any:
  from quasitree.bridge.ssa import VersioningSSA

  return VersioningSSA()


@dataclass(frozen=True)
class Environment:
  """
  The lexical environment an invocation runs in.
  """

  in_match: bool = False
  """True when the invocation sits in a match/destructuring position."""

  scope: ScopeTable = field(default_factory=ScopeTable)
  """Variables bound around the invocation."""

  macros: Mapping[str, Macro] = field(default_factory=dict)
  """Name-keyed expanders applied during reverse escaping."""

  imports: Mapping[str, str] = field(default_factory=dict)
  """Operator name to defining module, used to build canonical qualified calls."""

  declaration_defaults: Mapping[str, Any] = field(default_factory=dict)
  """Default options of the enclosing declaration."""

  canonical: Any = field(default_factory=_default_canonical)
  """``CanonicalTranslator`` collaborator."""

  ssa: Any = field(default_factory=_default_ssa)
  """``SSATranslator`` collaborator."""

  inspector: Callable[..., Any] = field(default=_default_inspector)
  """Debug passthrough ``inspector(node, label=None)``."""

  def with_changes(self, **changes: Any) -> "Environment":
    """Returns a copy with the given fields replaced."""
    return replace(self, **changes)

  def macro_for(self, node: Any) -> Optional[Macro]:
    """Returns the macro expanding ``node``, if its operator names one."""
    if isinstance(node, Operation) and isinstance(node.operator, Symbol):
      return self.macros.get(node.operator.name)
    return None

  def expand(self, node: Any) -> Any:
    """
    Expands ``node`` until its operator no longer names a macro.

    Only the outermost node is expanded; sub-trees are left as produced.

    Args:
        node: A live tree.

    Returns:
        Any: The expanded tree.
    """
    macro = self.macro_for(node)
    while macro is not None:
      node = macro(node)
      macro = self.macro_for(node)
    return node
