"""
quasitree Package.

A quasiquotation and structural-pattern engine for code trees. From a snippet
of code it builds either a *pattern* that matches tree values at runtime, or a
*template* that rebuilds a tree from literal and captured pieces.

Usage
-----

Matching
^^^^^^^^

.. code-block:: python

    import quasitree as qt

    pattern = qt.build_pattern(qt.parse_expression("x + y"))
    qt.match(pattern, qt.parse_expression("1 + f(2)"))
    # {'x': 1, 'y': f(2)}

Building
^^^^^^^^

.. code-block:: python

    template = qt.build_template(qt.parse_expression("x + 1"), scope=["x"])
    qt.instantiate(template, {"x": qt.var("a")})
    # a + 1

Inside a pattern, ``quote(...)`` embeds a live sub-pattern and
``splice(xs)`` (last list element) matches a prefix plus the rest.
"""

from quasitree.config import Options, declaration_defaults, load_project_defaults
from quasitree.core.context import Environment, ScopeTable
from quasitree.core.dispatcher import build, build_pattern, build_template
from quasitree.core.escaper import escape, unescape
from quasitree.core.traverser import reverse_escape
from quasitree.errors import (
  MalformedMarkerError,
  QuasitreeError,
  TranslationError,
  UnboundVariableError,
  UnsupportedTreeShapeError,
)
from quasitree.frontends.python import parse_expression
from quasitree.runtime import instantiate, match, matches
from quasitree.tree import Operation, Symbol, VariableRef, op, sym, var
from quasitree.utils.printer import format_tree

__version__ = "0.0.1"

__all__ = [
  "Environment",
  "MalformedMarkerError",
  "Operation",
  "Options",
  "QuasitreeError",
  "ScopeTable",
  "Symbol",
  "TranslationError",
  "UnboundVariableError",
  "UnsupportedTreeShapeError",
  "VariableRef",
  "__version__",
  "build",
  "build_pattern",
  "build_template",
  "declaration_defaults",
  "escape",
  "format_tree",
  "instantiate",
  "load_project_defaults",
  "match",
  "matches",
  "op",
  "parse_expression",
  "reverse_escape",
  "sym",
  "unescape",
  "var",
]
