"""
Main Entry Point for the quasitree CLI.

This module handles argument parsing and dispatches to the command handlers
defined in ``quasitree.cli.commands``.
"""

import argparse
from typing import Any, Dict, List, Optional

from quasitree import __version__
from quasitree.cli import commands
from quasitree.utils.console import configure_logging


def _add_build_arguments(cmd: argparse.ArgumentParser) -> None:
  """Registers the options shared by ``pattern`` and ``template``."""
  cmd.add_argument("code", help="A single Python expression, e.g. 'f(x, 1) + y'")
  cmd.add_argument("--isolate", action="store_true", default=None, help="Never capture from the ambient scope")
  cmd.add_argument(
    "--canonical",
    choices=["true", "force"],
    default=None,
    help="Translate through the canonical form ('force' normalizes pattern input too)",
  )
  cmd.add_argument(
    "--debug",
    nargs="?",
    const=True,
    default=None,
    metavar="LABEL",
    help="Print the result through the debug inspector, optionally labelled",
  )
  cmd.add_argument("--no-positions", action="store_true", help="Do not attach line/column metadata")
  cmd.add_argument("-v", "--verbose", action="store_true", help="Show engine debug logs")


def _collect_options(args: argparse.Namespace) -> Dict[str, Any]:
  """Keeps only the options given explicitly, so project defaults can fill the rest."""
  options: Dict[str, Any] = {}
  if args.isolate:
    options["isolate"] = True
  if args.canonical is not None:
    options["to_canonical"] = args.canonical
  if args.debug is not None:
    options["debug"] = args.debug
  if getattr(args, "no_meta", False):
    options["keep_metadata"] = False
  if getattr(args, "ssa", False):
    options["to_ssa"] = True
  return options


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="quasitree: patterns and templates from code")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: PATTERN ---
  cmd_pattern = subparsers.add_parser("pattern", help="Build a match pattern from an expression")
  _add_build_arguments(cmd_pattern)
  cmd_pattern.add_argument("--against", default=None, help="Expression to match the pattern against")

  # --- Command: TEMPLATE ---
  cmd_template = subparsers.add_parser("template", help="Build a template from an expression")
  _add_build_arguments(cmd_template)
  cmd_template.add_argument(
    "--bind",
    action="append",
    default=[],
    metavar="NAME",
    help="Variable bound in the surrounding scope (repeatable)",
  )
  cmd_template.add_argument("--no-meta", action="store_true", help="Drop node metadata from the template")
  cmd_template.add_argument("--ssa", action="store_true", help="Pass the canonical form through the SSA translator")

  args = parser.parse_args(argv)
  configure_logging(args.verbose)
  options = _collect_options(args)

  if args.command == "pattern":
    return commands.handle_pattern(args.code, options, args.against, not args.no_positions)

  elif args.command == "template":
    return commands.handle_template(args.code, options, args.bind, not args.no_positions)

  return 0


if __name__ == "__main__":
  raise SystemExit(main())
