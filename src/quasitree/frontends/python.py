"""
Python Frontend.

Wraps the LibCST parser to read a single Python expression into the Tree
Model, so patterns and templates can be written as ordinary Python source::

    parse_expression("f(x, 1) + y")
    # +( f(x, 1), y ) with {'line': 1, 'column': ...} metadata on every node

Mapping:
- Names become variables; ``True``/``False``/``None`` become literals.
- ``sym("ok")`` is the symbol literal ``:ok``.
- Operators become operations on their symbol (``a | b`` uses ``bor``, since
  ``|`` is reserved for improper list tails).
- Calls use the callee name as operator (or the callee tree); keyword
  arguments are collected into a trailing list of ``(:key, value)`` pairs.
- ``a.b`` is ``.(a, :b)``, ``a[i]`` is ``[](a, i)``, ``*x`` is ``*(x)``.
- Lists stay lists, 2-tuples are pairs, other tuples are ``tuple(...)``.
"""

from typing import Any, Dict, List, Type

import libcst as cst
from libcst.metadata import MetadataWrapper, PositionProvider

from quasitree.errors import UnsupportedTreeShapeError
from quasitree.tree import DOT, Operation, Symbol, VariableRef

_BINARY: Dict[Type[cst.CSTNode], str] = {
  cst.Add: "+",
  cst.Subtract: "-",
  cst.Multiply: "*",
  cst.Divide: "/",
  cst.FloorDivide: "//",
  cst.Modulo: "%",
  cst.Power: "**",
  cst.MatrixMultiply: "@",
  cst.LeftShift: "<<",
  cst.RightShift: ">>",
  cst.BitAnd: "&",
  cst.BitOr: "bor",
  cst.BitXor: "^",
  cst.And: "and",
  cst.Or: "or",
}

_UNARY: Dict[Type[cst.CSTNode], str] = {
  cst.Minus: "-",
  cst.Plus: "+",
  cst.Not: "not",
  cst.BitInvert: "~",
}

_COMPARISON: Dict[Type[cst.CSTNode], str] = {
  cst.Equal: "==",
  cst.NotEqual: "!=",
  cst.LessThan: "<",
  cst.LessThanEqual: "<=",
  cst.GreaterThan: ">",
  cst.GreaterThanEqual: ">=",
  cst.In: "in",
  cst.NotIn: "not in",
  cst.Is: "is",
  cst.IsNot: "is not",
}

_CONSTANTS = {"True": True, "False": False, "None": None}


def parse_expression(code: str, positions: bool = True) -> Any:
  """
  Parses one Python expression into a tree.

  Args:
      code: Source text containing exactly one expression statement.
      positions: If True, nodes carry ``line``/``column`` metadata.

  Returns:
      Any: The tree.

  Raises:
      libcst.ParserSyntaxError: If the source does not parse.
      ValueError: If the source is not a single expression.
      UnsupportedTreeShapeError: For syntax outside the supported subset.
  """
  module = cst.parse_module(code.strip())
  wrapper = MetadataWrapper(module)
  position_map = wrapper.resolve(PositionProvider) if positions else {}

  body = wrapper.module.body
  if len(body) != 1 or not isinstance(body[0], cst.SimpleStatementLine) or len(body[0].body) != 1:
    raise ValueError("Expected exactly one expression")
  statement = body[0].body[0]
  if not isinstance(statement, cst.Expr):
    raise ValueError(f"Expected an expression, got {type(statement).__name__}")

  return _TreeBuilder(position_map).build(statement.value)


class _TreeBuilder:
  """
  Converts LibCST expression nodes into Tree Model nodes.
  """

  def __init__(self, position_map: Any) -> None:
    self._positions = position_map

  def _meta(self, node: cst.CSTNode) -> Dict[str, Any]:
    position = self._positions.get(node) if self._positions else None
    if position is None:
      return {}
    return {"line": position.start.line, "column": position.start.column}

  def _op(self, operator: Any, node: cst.CSTNode, children: List[Any]) -> Operation:
    if isinstance(operator, str):
      operator = Symbol(operator)
    return Operation(operator, self._meta(node), children)

  def build(self, node: cst.BaseExpression) -> Any:
    if isinstance(node, cst.Name):
      if node.value in _CONSTANTS:
        return _CONSTANTS[node.value]
      return VariableRef(Symbol(node.value), self._meta(node), None)

    if isinstance(node, (cst.Integer, cst.Float)):
      return node.evaluated_value

    if isinstance(node, (cst.SimpleString, cst.ConcatenatedString)):
      value = node.evaluated_value
      if not isinstance(value, str):
        raise UnsupportedTreeShapeError(node, "python source", "bytes literal")
      return value

    if isinstance(node, cst.Ellipsis):
      return Symbol("...")

    if isinstance(node, (cst.BinaryOperation, cst.BooleanOperation)):
      name = _lookup(_BINARY, node.operator)
      return self._op(name, node, [self.build(node.left), self.build(node.right)])

    if isinstance(node, cst.UnaryOperation):
      return self._unary(node)

    if isinstance(node, cst.Comparison):
      return self._comparison(node)

    if isinstance(node, cst.Call):
      return self._call(node)

    if isinstance(node, cst.Attribute):
      return self._op(DOT, node, [self.build(node.value), Symbol(node.attr.value)])

    if isinstance(node, cst.Subscript):
      return self._subscript(node)

    if isinstance(node, cst.List):
      return [self._element(e) for e in node.elements]

    if isinstance(node, cst.Tuple):
      items = [self._element(e) for e in node.elements]
      if len(items) == 2:
        return (items[0], items[1])
      return self._op("tuple", node, items)

    if isinstance(node, cst.Dict):
      return self._dict(node)

    if isinstance(node, cst.NamedExpr):
      return self._op("=", node, [self.build(node.target), self.build(node.value)])

    if isinstance(node, cst.IfExp):
      return self._op("if", node, [self.build(node.test), self.build(node.body), self.build(node.orelse)])

    raise UnsupportedTreeShapeError(node, "python source", type(node).__name__)

  def _unary(self, node: cst.UnaryOperation) -> Any:
    name = _lookup(_UNARY, node.operator)
    operand = self.build(node.expression)
    # Fold negative numeric literals
    if name == "-" and isinstance(operand, (int, float)) and not isinstance(operand, bool):
      return -operand
    return self._op(name, node, [operand])

  def _comparison(self, node: cst.Comparison) -> Any:
    left = self.build(node.left)
    tests = []
    for target in node.comparisons:
      right = self.build(target.comparator)
      tests.append(self._op(_lookup(_COMPARISON, target.operator), node, [left, right]))
      left = right

    result = tests[0]
    for test in tests[1:]:
      result = self._op("and", node, [result, test])
    return result

  def _call(self, node: cst.Call) -> Any:
    func = node.func

    # sym("name") is the symbol literal :name
    if isinstance(func, cst.Name) and func.value == "sym" and len(node.args) == 1:
      value = self.build(node.args[0].value)
      if isinstance(value, str):
        return Symbol(value)

    if isinstance(func, cst.Name):
      operator: Any = Symbol(func.value)
    else:
      operator = self.build(func)

    children: List[Any] = []
    keywords: List[Any] = []
    for arg in node.args:
      value = self.build(arg.value)
      if arg.keyword is not None:
        keywords.append((Symbol(arg.keyword.value), value))
      elif arg.star:
        children.append(self._op(arg.star, arg, [value]))
      else:
        children.append(value)

    if keywords:
      children.append(keywords)
    return self._op(operator, node, children)

  def _subscript(self, node: cst.Subscript) -> Any:
    children = [self.build(node.value)]
    for element in node.slice:
      if not isinstance(element.slice, cst.Index):
        raise UnsupportedTreeShapeError(element, "python source", "slice")
      children.append(self.build(element.slice.value))
    return self._op("[]", node, children)

  def _element(self, element: cst.BaseElement) -> Any:
    if isinstance(element, cst.StarredElement):
      return self._op("*", element, [self.build(element.value)])
    return self.build(element.value)

  def _dict(self, node: cst.Dict) -> Any:
    items: List[Any] = []
    for element in node.elements:
      if isinstance(element, cst.StarredDictElement):
        items.append(self._op("**", element, [self.build(element.value)]))
      else:
        items.append((self.build(element.key), self.build(element.value)))
    return self._op("dict", node, items)


def _lookup(table: Dict[Type[cst.CSTNode], str], operator: cst.CSTNode) -> str:
  """Maps a LibCST operator node to its symbol name."""
  for kind, name in table.items():
    if isinstance(operator, kind):
      return name
  raise UnsupportedTreeShapeError(operator, "python source", type(operator).__name__)
