"""
Translation Bridge.

Orchestrates the calls into the canonical-form and SSA collaborators held by
the ``Environment``, honoring the ``to_canonical``/``to_ssa`` options.
Collaborator errors are not caught here; they reach the caller unchanged.
"""

import logging
from typing import Any

from quasitree.config import Options
from quasitree.enums import TranslationMode

logger = logging.getLogger(__name__)


def maybe_translate(node: Any, env: Any, options: Options) -> Any:
  """
  Template direction: surface tree -> canonical form (-> SSA form).

  ``True`` and ``"force"`` behave the same here. ``to_ssa`` is ignored when
  ``to_canonical`` is off.

  Args:
      node: The surface tree.
      env: The invocation environment (provides ``canonical`` and ``ssa``).
      options: Resolved options.

  Returns:
      Any: The translated (or untouched) tree.
  """
  if options.translation_mode is TranslationMode.SKIP:
    return node

  logger.debug("Translating template source to canonical form")
  canonical = env.canonical.to_canonical(node, env)

  if options.to_ssa:
    logger.debug("Translating canonical form to SSA form")
    return env.ssa.from_canonical(canonical)
  return canonical


def maybe_untranslate(node: Any, env: Any, options: Options) -> Any:
  """
  Pattern direction: renders a pattern-ized canonical tree back into surface shape.

  Args:
      node: The pattern.
      env: The invocation environment.
      options: Resolved options.

  Returns:
      Any: The surface-shaped pattern.
  """
  if options.translation_mode is TranslationMode.SKIP:
    return node

  logger.debug("Rendering pattern back from canonical form")
  return env.canonical.from_canonical(node, env)


def maybe_force_canonical(node: Any, env: Any, options: Options) -> Any:
  """
  Pattern direction: normalizes the pattern source before escaping when ``to_canonical`` is ``"force"``.

  Raises:
      TranslationError: If the collaborator cannot normalize the input.
  """
  if options.translation_mode is not TranslationMode.FORCE:
    return node

  logger.debug("Forcing pattern source into canonical form")
  return env.canonical.to_canonical(node, env)
