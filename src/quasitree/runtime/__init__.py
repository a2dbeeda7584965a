"""
Runtime Package.

Executes what the engine builds: ``match`` for patterns and ``instantiate``
for templates.
"""

from quasitree.runtime.evaluator import instantiate
from quasitree.runtime.matcher import match, matches

__all__ = ["instantiate", "match", "matches"]
