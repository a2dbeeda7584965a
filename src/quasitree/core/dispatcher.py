"""
Mode Dispatcher.

Entry points of the engine. ``build`` resolves options, picks the pattern or
template pipeline from ``env.in_match`` and runs the optional debug hook.

Pattern pipeline::

    force-canonical -> escape(prune, unquote) -> resolve -> to_pattern -> untranslate

Template pipeline::

    translate -> escape -> resolve(scope) -> metadata post pass
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from quasitree.bridge.translate import maybe_force_canonical, maybe_translate, maybe_untranslate
from quasitree.config import Options, OptionsLike
from quasitree.core.context import Environment, ScopeTable
from quasitree.core.escaper import escape
from quasitree.core.resolver import resolve_variables
from quasitree.core.traverser import to_pattern, to_template
from quasitree.enums import Direction

logger = logging.getLogger(__name__)

ScopeLike = Union[ScopeTable, Mapping[Any, int], Iterable[Any], None]


def build(tree: Any, options: OptionsLike = None, env: Optional[Environment] = None) -> Any:
  """
  Builds a pattern or a template from ``tree``.

  Args:
      tree: The live source tree.
      options: Call-site options; they win over ``env.declaration_defaults``.
      env: The lexical environment. ``env.in_match`` selects the direction.

  Returns:
      Any: The pattern (matching context) or template (evaluating context).
  """
  env = env or Environment()
  opts = Options.merge(options, env.declaration_defaults)
  direction = Direction.PATTERN if env.in_match else Direction.TEMPLATE
  logger.debug("Building %s with %r", direction.value, opts)

  if direction is Direction.PATTERN:
    result = _build_pattern(tree, opts, env)
  else:
    result = _build_template(tree, opts, env)

  if opts.debug:
    env.inspector(result, opts.debug_label)

  return result


def build_pattern(
  tree: Any,
  options: OptionsLike = None,
  scope: ScopeLike = None,
  env: Optional[Environment] = None,
  defaults: OptionsLike = None,
) -> Any:
  """
  Builds a pattern, as for an invocation inside a match position.

  Args:
      tree: The live source tree.
      options: Call-site options.
      scope: Variables bound around the invocation (not consulted by the pattern rule).
      env: Base environment (macros, collaborators, defaults).
      defaults: Declaration defaults, overriding ``env.declaration_defaults``.

  Returns:
      Any: The pattern.
  """
  return build(tree, options, _prepare(env, scope, defaults, in_match=True))


def build_template(
  tree: Any,
  options: OptionsLike = None,
  scope: ScopeLike = None,
  env: Optional[Environment] = None,
  defaults: OptionsLike = None,
) -> Any:
  """
  Builds a template, as for an invocation in an evaluating position.

  Args:
      tree: The live source tree.
      options: Call-site options.
      scope: Variables bound around the invocation; only these are captured.
      env: Base environment (macros, collaborators, defaults).
      defaults: Declaration defaults, overriding ``env.declaration_defaults``.

  Returns:
      Any: The template.
  """
  return build(tree, options, _prepare(env, scope, defaults, in_match=False))


def _prepare(env: Optional[Environment], scope: ScopeLike, defaults: OptionsLike, in_match: bool) -> Environment:
  """Derives the invocation environment from the entry point arguments."""
  changes = {"in_match": in_match}
  if scope is not None:
    changes["scope"] = _as_scope(scope)
  if defaults is not None:
    changes["declaration_defaults"] = Options.merge(defaults).model_dump(exclude_unset=True)
  return (env or Environment()).with_changes(**changes)


def _as_scope(scope: ScopeLike) -> ScopeTable:
  """Accepts a ScopeTable, a mapping of keys to versions, or an iterable of keys."""
  if isinstance(scope, ScopeTable):
    return scope
  if isinstance(scope, Mapping):
    return ScopeTable(scope)
  return ScopeTable.of(*scope)


def _build_pattern(tree: Any, opts: Options, env: Environment) -> Any:
  source = maybe_force_canonical(tree, env, opts)
  escaped = escape(source, prune_metadata=True, unquote=True)
  resolved = resolve_variables(escaped, None, opts.isolate)
  pattern = to_pattern(resolved, env, opts.isolate)
  return maybe_untranslate(pattern, env, opts)


def _build_template(tree: Any, opts: Options, env: Environment) -> Any:
  source = maybe_translate(tree, env, opts)
  escaped = escape(source)
  resolved = resolve_variables(escaped, env.scope, opts.isolate)
  return to_template(resolved, opts.keep_metadata)
