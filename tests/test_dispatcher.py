"""
Tests for the Mode Dispatcher.

Verifies that:
1. ``build`` picks the pattern or template pipeline from the environment.
2. Call-site options win over declaration defaults, which win over field defaults.
3. ``debug`` routes the result through the inspector without changing it.
4. Pattern output does not depend on source metadata, marker forms included
   (property based).
"""

from unittest.mock import MagicMock

import pytest
from hypothesis import given, settings, strategies as st
from pydantic import ValidationError

from quasitree.core.context import Environment, ScopeTable
from quasitree.core.dispatcher import build, build_pattern, build_template
from quasitree.tree import RAW_NODE, Operation, Symbol, op, strip_metadata, var, wildcard


def _raw(operator, meta, rest):
  return Operation(RAW_NODE, {}, [operator, meta, rest])


def test_build_dispatches_on_in_match():
  tree = op("+", var("x"), 1)

  pattern = build(tree, env=Environment(in_match=True))
  template = build(tree, env=Environment(in_match=False, scope=ScopeTable.of("x")))

  assert pattern == _raw(Symbol("+"), wildcard(), [var("x"), 1])
  assert template == _raw(Symbol("+"), {}, [var("x"), 1])


def test_template_escapes_unbound_names():
  template = build_template(op("+", var("x"), 1), scope=[])
  assert template == _raw(Symbol("+"), {}, [_raw(Symbol("x"), {}, None), 1])


def test_pattern_ignores_scope():
  tree = op("f", var("x"))
  assert build_pattern(tree, scope=["y"]) == build_pattern(tree)


def test_template_respects_isolate():
  template = build_template(op("f", var("x")), {"isolate": True}, scope=["x"])
  assert template.children[2] == [_raw(Symbol("x"), {}, None)]


def test_template_keep_metadata_option():
  tree = op("f", meta={"line": 1})

  assert build_template(tree).children[1] == {"line": 1}
  assert build_template(tree, {"keep_metadata": False}).children[1] == {}


def test_declaration_defaults_apply():
  env = Environment(declaration_defaults={"keep_metadata": False})
  template = build_template(op("f", meta={"line": 1}), env=env)

  assert template.children[1] == {}


def test_call_site_wins_over_declaration_defaults():
  tree = op("f", meta={"line": 1})
  template = build_template(tree, {"keep_metadata": True}, defaults={"keep_metadata": False})

  assert template.children[1] == {"line": 1}


def test_keyword_list_options_first_occurrence_wins():
  tree = op("f", meta={"line": 1})
  template = build_template(tree, [("keep_metadata", False), ("keep_metadata", True)])

  assert template.children[1] == {}


def test_unknown_option_is_rejected():
  with pytest.raises(ValidationError):
    build_pattern(op("f"), {"colour": "red"})


@pytest.mark.parametrize("debug, label", [(True, None), ("my-pattern", "my-pattern")])
def test_debug_is_transparent(debug, label):
  inspector = MagicMock(side_effect=lambda node, label=None: node)
  env = Environment(inspector=inspector)
  tree = op("f", var("x"), [1, 2])

  with_debug = build_pattern(tree, {"debug": debug}, env=env)

  assert with_debug == build_pattern(tree)
  inspector.assert_called_once_with(with_debug, label)


def test_debug_uses_default_inspector(recorded_console):
  build_template(op("f", 1), {"debug": "tpl"})
  assert "tpl: {:f, {}, [1]}" in recorded_console.export_text()


names = st.sampled_from(["a", "b", "f", "g"])
positions = st.fixed_dictionaries({"line": st.integers(1, 99), "column": st.integers(0, 80)})
variables = st.builds(var, names, st.none(), positions)
leaves = st.one_of(st.integers(), variables)


def _with_markers(children):
  calls = st.builds(lambda n, m, a: op(n, *a, meta=m), names, positions, st.lists(children, max_size=3))
  unquoted = st.builds(lambda m, c: op("unquote", c, meta=m), positions, children)
  quoted = st.builds(lambda m, c: op("quote", c, meta=m), positions, children)
  spliced = st.builds(
    lambda items, m, arg: items + [op("splice", arg, meta=m)],
    st.lists(children, max_size=2),
    positions,
    st.one_of(variables, st.lists(children, max_size=2)),
  )
  return st.one_of(calls, unquoted, quoted, spliced, st.lists(children, max_size=3))


trees = st.recursive(leaves, _with_markers, max_leaves=10)


@given(tree=trees)
@settings(max_examples=100)
def test_pattern_independent_of_metadata(tree):
  assert build_pattern(tree) == build_pattern(strip_metadata(tree))


def test_unquoted_subtree_loses_metadata():
  tree = op("f", op("unquote", op("g", var("x", meta={"line": 4}), meta={"line": 4})))
  assert build_pattern(tree) == build_pattern(strip_metadata(tree))
