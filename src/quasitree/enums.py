"""
Enumerations for quasitree.

This module defines the standard enumerations shared by the engine and the
translation bridge.
"""

from enum import Enum


class Direction(str, Enum):
  """
  Which artifact the engine is building.

  Chosen by the caller from the lexical environment (matching vs evaluating).
  """

  PATTERN = "pattern"
  TEMPLATE = "template"


class TranslationMode(str, Enum):
  """
  Normalized form of the ``to_canonical`` option.
  """

  SKIP = "skip"  # false: trees are used as given
  BEST_EFFORT = "best_effort"  # true: translate results, never pre-normalize pattern input
  FORCE = "force"  # "force": also normalize pattern input before escaping
