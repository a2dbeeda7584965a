"""
End-to-end tests: build with the engine, then run the result.

Verifies that:
1. Patterns bind sub-trees and reject structurally different values.
2. Templates capture only bound names and rebuild the tree.
3. ``quote`` and ``splice`` behave as binders in patterns.
"""

import pytest

from quasitree.core.dispatcher import build_pattern, build_template
from quasitree.errors import UnboundVariableError, UnsupportedTreeShapeError
from quasitree.frontends.python import parse_expression
from quasitree.runtime import instantiate, match, matches
from quasitree.tree import Symbol, VariableRef, equal_modulo_metadata, op, var


@pytest.fixture
def sum_pattern():
  return build_pattern(parse_expression("x + y"))


def test_pattern_binds_operands(sum_pattern):
  bindings = match(sum_pattern, op("+", 1, 2, meta={"line": 9}))
  assert bindings == {"x": 1, "y": 2}


def test_pattern_binds_subtrees(sum_pattern):
  value = op("+", var("a"), op("*", 2, 3))
  bindings = match(sum_pattern, value)

  assert bindings["x"] == var("a")
  assert bindings["y"] == op("*", 2, 3)


def test_pattern_rejects_other_operator(sum_pattern):
  assert match(sum_pattern, op("-", 1, 2)) is None
  assert not matches(sum_pattern, op("+", 1))
  assert not matches(sum_pattern, 3)


def test_repeated_binder_requires_equal_values():
  pattern = build_pattern(parse_expression("x + x"))

  assert matches(pattern, op("+", 1, 1))
  assert not matches(pattern, op("+", 1, 2))
  assert not matches(pattern, op("+", 1, True))


def test_wildcard_binds_nothing():
  pattern = build_pattern(parse_expression("f(_, y)"))
  assert match(pattern, op("f", 1, 2)) == {"y": 2}


def test_pattern_matches_variables():
  pattern = build_pattern(parse_expression("f(x)"), {"isolate": True})

  assert matches(pattern, op("f", var("x")))
  assert not matches(pattern, op("f", var("x", "hyg")))
  assert not matches(pattern, op("f", 1))


def test_splice_binds_remaining_arguments():
  pattern = build_pattern(parse_expression("f(a, splice(rest))"))
  assert match(pattern, op("f", 1, 2, 3)) == {"a": 1, "rest": [2, 3]}
  assert not matches(pattern, op("f"))


def test_splice_in_list_literal():
  pattern = build_pattern(parse_expression("[a, splice([b, *t])]"))
  assert match(pattern, [1, 2, 3, 4]) == {"a": 1, "b": 2, "t": [3, 4]}


def test_quote_parts_bind_operator_and_metadata():
  pattern = build_pattern(parse_expression("quote(name, meta, args)"))
  bindings = match(pattern, op("g", 1, meta={"line": 3}))

  assert bindings == {"name": Symbol("g"), "meta": {"line": 3}, "args": [1]}


def test_quoted_subtree_matches_concretely():
  pattern = build_pattern(parse_expression("h(quote(g(1)))"))

  assert match(pattern, op("h", op("g", 1, meta={"line": 2}))) == {}
  assert not matches(pattern, op("h", op("g", 2)))
  assert not matches(pattern, op("h", 1))


def test_quoted_subtree_binds_nested_variables():
  pattern = build_pattern(parse_expression("quote(f(x, 1))"))

  assert match(pattern, op("f", var("a"), 1)) == {"x": var("a")}
  assert not matches(pattern, op("g", var("a"), 1))


def test_splice_list_of_calls():
  pattern = build_pattern(parse_expression("[splice([f(a), b])]"))

  assert match(pattern, [op("f", 1), 2, 3]) == {"a": 1, "b": 2}
  assert not matches(pattern, [op("g", 1), 2])


def test_splice_prefix_with_empty_remainder():
  pattern = build_pattern(parse_expression("[splice([a, b])]"))

  assert match(pattern, [1, 2]) == {"a": 1, "b": 2}
  assert match(pattern, [1, 2, 3, 4]) == {"a": 1, "b": 2}
  assert match(pattern, [1]) is None
  assert match(pattern, []) is None


def test_unrunnable_pattern_values():
  with pytest.raises(UnsupportedTreeShapeError):
    match(object(), 1)


def test_template_with_bound_name():
  template = build_template(parse_expression("x + 1"), scope=["x"])
  result = instantiate(template, {"x": 5})

  assert equal_modulo_metadata(result, op("+", 5, 1))
  assert result.metadata == {"line": 1, "column": 0}


def test_template_without_bound_name_is_literal_code():
  template = build_template(parse_expression("x + 1"), scope=[])
  result = instantiate(template, {})

  assert equal_modulo_metadata(result, op("+", var("x"), 1))


def test_instantiate_accepts_symbol_keys():
  template = build_template(parse_expression("f(x)"), scope=["x"])
  assert instantiate(template, {Symbol("x"): 1}).children == [1]


def test_instantiate_reports_missing_value():
  template = build_template(parse_expression("f(x)"), scope=["x"])
  with pytest.raises(UnboundVariableError, match="'x' has no value"):
    instantiate(template, {})


def test_instantiate_rebuilds_variables():
  template = build_template(var("x", "hyg"))
  assert instantiate(template, {}) == VariableRef(Symbol("x"), {}, Symbol("hyg"))
