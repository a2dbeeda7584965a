"""
Tests for the lexical Environment and error messages.
"""

import pytest

from quasitree.core.context import Environment, ScopeTable
from quasitree.errors import (
  MalformedMarkerError,
  QuasitreeError,
  TranslationError,
  UnboundVariableError,
  UnsupportedTreeShapeError,
)
from quasitree.tree import op, var


def test_expand_repeats_on_outermost_node():
  env = Environment(
    macros={
      "twice": lambda node: op("double", *node.children),
      "double": lambda node: op("+", node.children[0], node.children[0]),
    }
  )

  assert env.expand(op("twice", var("x"))) == op("+", var("x"), var("x"))
  assert env.expand(op("f", op("twice", 1))) == op("f", op("twice", 1))


def test_with_changes_returns_copy():
  env = Environment()
  changed = env.with_changes(in_match=True, scope=ScopeTable.of("x"))

  assert changed.in_match and "x" in changed.scope
  assert not env.in_match and "x" not in env.scope


@pytest.mark.parametrize(
  "error, builtin",
  [
    (MalformedMarkerError("splice", "bad"), ValueError),
    (TranslationError("to_ssa", "bad"), RuntimeError),
    (UnsupportedTreeShapeError(object()), TypeError),
    (UnboundVariableError("x"), KeyError),
  ],
)
def test_errors_share_base_and_builtin(error, builtin):
  assert isinstance(error, QuasitreeError)
  assert isinstance(error, builtin)


def test_error_messages():
  assert str(MalformedMarkerError("splice", "bad")) == "Malformed 'splice' marker: bad"
  assert str(TranslationError("to_ssa", "bad")) == "to_ssa failed: bad"
  assert str(UnsupportedTreeShapeError({1}, "escape")) == "Unsupported tree shape in escape: set {1}"
  assert str(UnboundVariableError("x")) == "Variable 'x' has no value"
