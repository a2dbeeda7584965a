"""
Console and Logging Utilities.

Routes the package's output through a swappable ``rich`` console:

1.  **Logging**: ``configure_logging`` attaches a ``RichHandler`` bound to the
    active console; engine modules log through ``logging.getLogger(__name__)``.
2.  **Console Proxy**: ``console`` forwards to a backend that tests (or an
    embedding application) can replace with ``set_console`` to capture output.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_THEME = Theme(
  {
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "label": "bold magenta",
    "tree.operator": "bold blue",
    "tree.variable": "green",
    "tree.literal": "yellow",
  }
)


class _ConsoleProxy:
  """
  Stable module-level handle on the active ``rich.console.Console``.

  Attributes:
      _backend (Console): The console all output is forwarded to.
      _level (Optional[int]): Logging level installed by ``configure_logging``.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._level: Optional[int] = None

  @property
  def backend(self) -> Console:
    """The active console."""
    return self._backend

  def set_backend(self, new_console: Console) -> None:
    """
    Swaps the backend, re-binding the logging handler if one was installed.

    Args:
        new_console (Console): The console to use from now on.
    """
    self._backend = new_console
    if self._level is not None:
      self.configure_logging(self._level)

  def configure_logging(self, level: int = logging.INFO) -> None:
    """
    Installs a single ``RichHandler`` writing to the active backend on the root logger.

    Args:
        level (int): Root logger level.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
      if isinstance(handler, RichHandler):
        root_logger.removeHandler(handler)

    root_logger.addHandler(
      RichHandler(
        console=self._backend,
        show_time=False,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
      )
    )
    root_logger.setLevel(level)
    self._level = level

  def print(self, *args: Any, **kwargs: Any) -> None:
    """Forwards ``print`` to the backend."""
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Replaces the console used by the package (e.g. with a recording console in tests).

  Args:
      new_console (Console): The console to install.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Restores a fresh standard output console."""
  console.set_backend(Console(theme=_THEME))


def configure_logging(verbose: bool = False) -> None:
  """
  Enables rich logging output; DEBUG when ``verbose``, INFO otherwise.

  Args:
      verbose (bool): Whether to show engine debug traces.
  """
  console.configure_logging(logging.DEBUG if verbose else logging.INFO)


def log_success(msg: str) -> None:
  """Logs a success message at INFO level with success styling."""
  logging.info(f"[success]{msg}[/success]", extra={"markup": True})


def log_warning(msg: str) -> None:
  """Logs a warning message."""
  logging.warning(msg, extra={"markup": True})


def log_error(msg: str) -> None:
  """Logs an error message."""
  logging.error(msg, extra={"markup": True})
