"""
Frontends Package.

Readers that turn source text into the Tree Model.
"""

from quasitree.frontends.python import parse_expression

__all__ = ["parse_expression"]
