"""
Engine Core Package.

- ``escaper``: live tree -> inert data.
- ``resolver``: selective reversal of escaped variables.
- ``traverser``: pattern/template rewriting and reverse escaping.
- ``dispatcher``: option resolution, direction choice, debug hook.
"""

from quasitree.core.context import Environment, ScopeTable
from quasitree.core.dispatcher import build, build_pattern, build_template
from quasitree.core.escaper import escape, unescape
from quasitree.core.resolver import maybe_unescape, resolve_variables
from quasitree.core.traverser import reverse_escape, to_pattern, to_template

__all__ = [
  "Environment",
  "ScopeTable",
  "build",
  "build_pattern",
  "build_template",
  "escape",
  "maybe_unescape",
  "resolve_variables",
  "reverse_escape",
  "to_pattern",
  "to_template",
  "unescape",
]
