"""
Tests for the Pattern/Template Traverser.

Verifies that:
1. Generic raw-nodes keep operator and children, with a wildcard metadata slot.
2. ``quote`` with one or three arguments, and its arity errors.
3. ``splice`` in last list position (lists, explicit tails, variables) and
   its misuse.
4. Macro expansion during reverse escaping.
5. The template metadata post pass.
"""

import pytest

from quasitree.core.context import Environment
from quasitree.core.escaper import escape
from quasitree.core.resolver import resolve_variables
from quasitree.core.traverser import reverse_escape, to_pattern, to_template
from quasitree.errors import MalformedMarkerError, UnsupportedTreeShapeError
from quasitree.tree import RAW_NODE, Operation, Symbol, cons, op, var, wildcard


def _pattern(tree, env=None, isolate=False):
  escaped = escape(tree, prune_metadata=True, unquote=True)
  return to_pattern(resolve_variables(escaped, None, isolate), env, isolate)


def _raw(operator, meta, rest):
  return Operation(RAW_NODE, {}, [operator, meta, rest])


def test_generic_operation():
  assert _pattern(op("f", var("x"), 1)) == _raw(Symbol("f"), wildcard(), [var("x"), 1])


def test_nested_operator_is_patternized():
  tree = Operation(op(".", Symbol("m"), Symbol("f")), {}, [var("x")])
  expected = _raw(_raw(Symbol("."), wildcard(), [Symbol("m"), Symbol("f")]), wildcard(), [var("x")])

  assert _pattern(tree) == expected


def test_inline_quote_is_live():
  pattern = _pattern(op("f", op("quote", op("g", var("y")))))
  assert pattern.children[2] == [op("g", var("y"))]


def test_inline_quote_parts_builds_raw_node():
  pattern = _pattern(op("quote", var("name"), var("meta"), var("args")))
  assert pattern == _raw(var("name"), var("meta"), var("args"))


@pytest.mark.parametrize("args", [[], [1, 2], [1, 2, 3, 4]])
def test_quote_arity(args):
  with pytest.raises(MalformedMarkerError) as excinfo:
    _pattern(op("quote", *args))
  assert excinfo.value.marker == "quote"


def test_splice_variable_becomes_tail():
  pattern = _pattern([var("a"), op("splice", var("rest"))])
  assert pattern == [cons(var("a"), var("rest"))]


def test_splice_alone_is_the_tail():
  assert _pattern([op("splice", var("rest"))]) == var("rest")


def test_splice_list_gets_wildcard_tail():
  pattern = _pattern([var("a"), op("splice", [var("b"), var("c")])])
  assert pattern == [var("a"), var("b"), cons(var("c"), wildcard())]


def test_splice_list_with_explicit_tail():
  pattern = _pattern([op("splice", [var("b"), cons(var("c"), var("t"))])])
  assert pattern == [var("b"), cons(var("c"), var("t"))]


def test_splice_list_with_starred_tail():
  pattern = _pattern([var("a"), op("splice", [var("b"), op("*", var("t"))])])
  assert pattern == [var("a"), cons(var("b"), var("t"))]


def test_splice_in_call_arguments():
  pattern = _pattern(op("f", var("a"), op("splice", var("rest"))))
  assert pattern == _raw(Symbol("f"), wildcard(), [cons(var("a"), var("rest"))])


def test_splice_must_be_last():
  with pytest.raises(MalformedMarkerError, match="last element"):
    _pattern([op("splice", var("xs")), var("a")])


def test_splice_outside_list():
  with pytest.raises(MalformedMarkerError):
    _pattern((1, op("splice", var("xs"))))


@pytest.mark.parametrize("args", [[], [var("a"), var("b")]])
def test_splice_arity(args):
  with pytest.raises(MalformedMarkerError, match="exactly 1"):
    _pattern([op("splice", *args)])


def test_splice_rejects_non_list_argument():
  with pytest.raises(MalformedMarkerError, match="list or a variable"):
    _pattern([op("splice", 1)])


def test_variable_named_like_marker_is_plain():
  assert _pattern([var("splice")]) == [var("splice")]


def test_isolate_keeps_variables_structural():
  pattern = _pattern(op("f", var("x")), isolate=True)
  assert pattern == _raw(Symbol("f"), wildcard(), [_raw(Symbol("x"), wildcard(), None)])


def test_isolate_inside_quote():
  pattern = _pattern(op("quote", var("x")), isolate=True)
  assert pattern == _raw(Symbol("x"), wildcard(), None)


def test_reverse_escape_expands_macros():
  env = Environment(macros={"double": lambda node: op("*", 2, *node.children)})
  escaped = escape(op("double", 21))

  assert reverse_escape(escaped, env) == op("*", 2, 21)


def test_reverse_escape_keeps_metadata():
  tree = op("f", var("x", meta={"line": 1}), meta={"line": 1})
  assert reverse_escape(escape(tree)) == tree


def test_reverse_escape_rejects_bad_operator():
  with pytest.raises(UnsupportedTreeShapeError):
    reverse_escape(_raw(1, {}, []))


def test_template_keeps_metadata_by_default():
  escaped = escape(op("f", meta={"line": 1}))
  assert to_template(escaped) == escaped


def test_template_drops_metadata():
  escaped = escape(op("f", var("x", meta={"line": 2}), meta={"line": 1}))
  template = to_template(escaped, keep_metadata=False)

  assert template == _raw(Symbol("f"), {}, [_raw(Symbol("x"), {}, None)])
