"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console capture so inspector/CLI output can be asserted on.
- Logging isolation between tests.
"""

import logging
import sys
from pathlib import Path

import pytest
from rich.console import Console

# Add src to path so we can import 'quasitree' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from quasitree.utils.console import _THEME, reset_console, set_console  # noqa: E402


@pytest.fixture
def recorded_console():
  """
  Installs a recording console for the duration of a test.

  Yields:
      Console: The recording console (use ``export_text()`` to read output).
  """
  recorder = Console(record=True, width=200, color_system=None, theme=_THEME)
  set_console(recorder)
  yield recorder
  reset_console()


@pytest.fixture(autouse=True)
def isolate_logging():
  """Removes handlers installed by a test (e.g. via the CLI) from the root logger."""
  root = logging.getLogger()
  handlers = list(root.handlers)
  level = root.level
  yield
  for handler in list(root.handlers):
    if handler not in handlers:
      root.removeHandler(handler)
  root.setLevel(level)
