"""
CLI Command Handlers.

Each handler parses the expression, builds through the engine with the
project defaults from ``pyproject.toml`` and prints the result. Handlers
return an exit code and report failures through the logger.
"""

from typing import Any, Dict, List, Optional

from libcst import ParserSyntaxError
from rich.markup import escape

from quasitree.config import load_project_defaults
from quasitree.core.dispatcher import build_pattern, build_template
from quasitree.errors import QuasitreeError
from quasitree.frontends.python import parse_expression
from quasitree.runtime.matcher import match
from quasitree.utils.console import console, log_error, log_success, log_warning
from quasitree.utils.printer import format_tree


def handle_pattern(code: str, options: Dict[str, Any], against: Optional[str] = None, positions: bool = True) -> int:
  """
  Builds and prints a pattern, optionally matching it against a second expression.

  Args:
      code: Pattern source.
      options: Explicit call-site options.
      against: Optional source of a value to match.
      positions: Whether parsed nodes carry position metadata.

  Returns:
      int: 0 on success (and on a successful match), 1 otherwise.
  """
  try:
    pattern = build_pattern(parse_expression(code, positions), options, defaults=load_project_defaults())
    console.print(format_tree(pattern), markup=False, emoji=False, soft_wrap=True)

    if against is None:
      return 0

    bindings = match(pattern, parse_expression(against, positions))
  except (ParserSyntaxError, QuasitreeError, ValueError) as e:
    log_error(f"Pattern failed: {escape(str(e))}")
    return 1

  if bindings is None:
    log_warning("No match")
    return 1

  log_success("Matched")
  for name, value in bindings.items():
    console.print(f"{name} = {format_tree(value)}", markup=False, emoji=False, soft_wrap=True)
  return 0


def handle_template(code: str, options: Dict[str, Any], bind: List[str], positions: bool = True) -> int:
  """
  Builds and prints a template.

  Args:
      code: Template source.
      options: Explicit call-site options.
      bind: Names bound in the surrounding scope.
      positions: Whether parsed nodes carry position metadata.

  Returns:
      int: Exit code.
  """
  try:
    template = build_template(
      parse_expression(code, positions),
      options,
      scope=bind,
      defaults=load_project_defaults(),
    )
  except (ParserSyntaxError, QuasitreeError, ValueError) as e:
    log_error(f"Template failed: {escape(str(e))}")
    return 1

  console.print(format_tree(template), markup=False, emoji=False, soft_wrap=True)
  return 0
