"""
Scope-Aware Variable Resolver.

Decides, per escaped variable, whether it stays inert data or becomes a live
variable reference again:

- Pattern rule (no scope table): always reverse, so the name binds.
- Template rule (scope table given): reverse only when ``(name, context)``,
  or failing that ``(name, None)``, is bound. The fallback normalizes the
  context of the resulting reference to ``None``.
"""

from typing import Any, Optional

from quasitree.core.context import ScopeTable
from quasitree.tree import VariableRef, is_variable_shape, prewalk


def maybe_unescape(escaped: Any, scope: Optional[ScopeTable] = None) -> Any:
  """
  Reverses a single escaped variable when the active rule allows it.

  Args:
      escaped: Any node of an escaped tree.
      scope: The scope table (template rule) or None (pattern rule).

  Returns:
      Any: A live ``VariableRef`` or ``escaped`` unchanged.
  """
  if not is_variable_shape(escaped):
    return escaped

  name, meta, context = escaped.children

  if scope is None:
    return VariableRef(name, meta, context)

  if (name, context) in scope:
    return VariableRef(name, meta, context)

  if (name, None) in scope:
    return VariableRef(name, meta, None)

  return escaped


def resolve_variables(escaped: Any, scope: Optional[ScopeTable] = None, isolate: bool = False) -> Any:
  """
  Applies ``maybe_unescape`` depth-first over a whole escaped tree.

  Args:
      escaped: The escaped tree.
      scope: The scope table for the template rule, None for the pattern rule.
      isolate: If True, nothing is reversed.

  Returns:
      Any: The resolved tree.
  """
  if isolate:
    return escaped
  return prewalk(escaped, lambda node: maybe_unescape(node, scope))
