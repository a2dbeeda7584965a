"""
Options Record and Default Resolution.

Options are resolved in three layers, highest priority first:

1. Call-site options passed to ``build_pattern``/``build_template``.
2. Declaration defaults, read from the ``__quasitree_opts__`` attribute of the
   enclosing module, class or function (or loaded from ``pyproject.toml``).
3. The documented defaults of ``Options``.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from quasitree.enums import TranslationMode

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

logger = logging.getLogger(__name__)

DECLARATION_ATTRIBUTE = "__quasitree_opts__"
"""Attribute name holding declaration-level default options."""

OptionsLike = Union["Options", Mapping[str, Any], Iterable[Tuple[str, Any]], None]


class Options(BaseModel):
  """
  Fixed option record for a single pattern/template build.
  """

  model_config = ConfigDict(extra="forbid", frozen=True)

  debug: Union[bool, str] = Field(False, description="Inspect the result; a string is used as the label.")
  to_canonical: Union[bool, Literal["force"]] = Field(
    False, description="Translate through the canonical form ('force' also normalizes pattern input)."
  )
  to_ssa: bool = Field(False, description="Pass the canonical form through the SSA translator (templates only).")
  isolate: bool = Field(False, description="Never capture from or leak into the ambient scope.")
  keep_metadata: bool = Field(True, description="Keep node metadata in templates.")

  @field_validator("to_canonical", mode="before")
  @classmethod
  def validate_to_canonical(cls, v: Any) -> Any:
    """
    Accepts textual spellings coming from TOML or the CLI.

    Args:
        v: Raw value.

    Returns:
        Any: ``True``, ``False`` or ``"force"``.

    Raises:
        ValueError: If the spelling is unknown.
    """
    if isinstance(v, str):
      clean = v.lower().strip()
      if clean in ("true", "yes", "1"):
        return True
      if clean in ("false", "no", "0", ""):
        return False
      if clean == "force":
        return "force"
      raise ValueError(f"to_canonical must be true, false or 'force', got '{v}'")
    return v

  @property
  def translation_mode(self) -> TranslationMode:
    """
    Normalized view of ``to_canonical``.

    Returns:
        TranslationMode: SKIP, BEST_EFFORT or FORCE.
    """
    if self.to_canonical == "force":
      return TranslationMode.FORCE
    if self.to_canonical:
      return TranslationMode.BEST_EFFORT
    return TranslationMode.SKIP

  @property
  def debug_label(self) -> Optional[str]:
    """The inspector label, or None when ``debug`` is a plain boolean."""
    if isinstance(self.debug, bool):
      return None
    return self.debug

  @classmethod
  def merge(cls, call_site: OptionsLike = None, defaults: OptionsLike = None) -> "Options":
    """
    Merges call-site options over declaration defaults.

    Keys present at the call site win; missing keys fall back to the
    defaults, then to the field defaults of this model.

    Args:
        call_site: Options given at the invocation.
        defaults: Declaration-level defaults.

    Returns:
        Options: The resolved record.
    """
    merged = {**_as_dict(defaults), **_as_dict(call_site)}
    return cls.model_validate(merged)


def _as_dict(value: OptionsLike) -> Dict[str, Any]:
  """Normalizes the accepted option spellings into a plain dict of explicit keys."""
  if value is None:
    return {}
  if isinstance(value, Options):
    return value.model_dump(exclude_unset=True)
  if isinstance(value, Mapping):
    return dict(value)
  # Keyword-list style: first occurrence of a key wins
  result: Dict[str, Any] = {}
  for key, val in value:
    result.setdefault(key, val)
  return result


def declaration_defaults(declaration: Any) -> Dict[str, Any]:
  """
  Reads declaration-level defaults from ``__quasitree_opts__``.

  Args:
      declaration: A module, class or function (or None).

  Returns:
      Dict[str, Any]: The declared defaults, empty when absent.
  """
  if declaration is None:
    return {}
  return _as_dict(getattr(declaration, DECLARATION_ATTRIBUTE, None))


def load_project_defaults(search_path: Optional[Path] = None) -> Dict[str, Any]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts ``[tool.quasitree]``.

  Args:
      search_path: Directory to start the search from (defaults to cwd).

  Returns:
      Dict[str, Any]: The config table, empty if none was found.
  """
  current = (search_path or Path.cwd()).resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring unreadable %s: %s", toml_path, e)
        return {}
      return dict(data.get("tool", {}).get("quasitree", {}))

  return {}
