"""
Translation Bridge Package.

Interfaces of the external canonical/SSA translators, reference
implementations of both, and the orchestration used by the dispatcher.
"""

from quasitree.bridge.interface import CanonicalTranslator, SSATranslator
from quasitree.bridge.canonical import QualifyingTranslator
from quasitree.bridge.ssa import VersioningSSA
from quasitree.bridge.translate import maybe_force_canonical, maybe_translate, maybe_untranslate

__all__ = [
  "CanonicalTranslator",
  "QualifyingTranslator",
  "SSATranslator",
  "VersioningSSA",
  "maybe_force_canonical",
  "maybe_translate",
  "maybe_untranslate",
]
