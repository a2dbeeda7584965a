"""
Tree Printer and Debug Inspector.

Renders trees, escaped trees and patterns as compact code-like text:

- ``x + 1`` for infix operations, ``f(a, b)`` for calls, ``m.f`` for ``.``
- ``{op, meta, rest}`` for raw-nodes
- ``[a, b | rest]`` for lists with an improper tail
- ``:ok`` for symbol literals
"""

from typing import Any, Optional

from rich.text import Text

from quasitree.tree import CONS, DOT, RAW_NODE, Operation, Symbol, VariableRef, is_cons, is_pair
from quasitree.utils.console import console

INFIX = frozenset(
  ["+", "-", "*", "/", "//", "%", "**", "@", "==", "!=", "<", "<=", ">", ">=", "and", "or", "in", "not in", "is", "is not", "="]
  + ["&", "^", "<<", ">>"]
)
PREFIX = frozenset(["-", "+", "not", "~", "*", "**"])


def format_tree(node: Any) -> str:
  """
  Renders ``node`` as text.

  Args:
      node: Any tree-shaped value.

  Returns:
      str: The rendering.
  """
  if isinstance(node, VariableRef):
    if node.context is not None:
      return f"{node.name.name}@{node.context.name}"
    return node.name.name

  if isinstance(node, Symbol):
    return repr(node)

  if isinstance(node, list):
    return _format_list(node)

  if is_pair(node):
    return f"({format_tree(node[0])}, {format_tree(node[1])})"

  if isinstance(node, dict):
    inner = ", ".join(f"{k}: {format_tree(v)}" for k, v in node.items())
    return "{" + inner + "}"

  if isinstance(node, Operation):
    return _format_operation(node)

  return repr(node)


def _format_list(items: list) -> str:
  if items and is_cons(items[-1]):
    head, tail = items[-1].children
    parts = [format_tree(i) for i in items[:-1]] + [format_tree(head)]
    return f"[{', '.join(parts)} | {format_tree(tail)}]"
  return "[" + ", ".join(format_tree(i) for i in items) + "]"


def _format_operation(node: Operation) -> str:
  operator, children = node.operator, node.children

  if operator == RAW_NODE and len(children) == 3:
    return "{" + ", ".join(format_tree(c) for c in children) + "}"

  if isinstance(operator, Symbol):
    name = operator.name
    if operator == DOT and len(children) == 2:
      base, attr = children
      base_text = base.name if isinstance(base, Symbol) else _operand(base)
      attr_text = attr.name if isinstance(attr, Symbol) else format_tree(attr)
      return f"{base_text}.{attr_text}"
    if operator == CONS and len(children) == 2:
      return f"{format_tree(children[0])} | {format_tree(children[1])}"
    if name in INFIX and len(children) == 2:
      return f"{_operand(children[0])} {name} {_operand(children[1])}"
    if name in PREFIX and len(children) == 1:
      spacer = " " if name.isalpha() else ""
      return f"{name}{spacer}{_operand(children[0])}"
    callee = name
  else:
    callee = _operand(operator)

  return f"{callee}({', '.join(format_tree(c) for c in children)})"


def _operand(node: Any) -> str:
  """Parenthesizes nested infix/prefix operations."""
  text = format_tree(node)
  if isinstance(node, Operation) and isinstance(node.operator, Symbol):
    name = node.operator.name
    if (name in INFIX and len(node.children) == 2) or (name in PREFIX and len(node.children) == 1):
      return f"({text})"
  return text


def inspect_tree(node: Any, label: Optional[str] = None) -> Any:
  """
  Prints ``node`` to the package console and returns it unchanged.

  Args:
      node: The value to show.
      label: Optional prefix.

  Returns:
      Any: ``node`` itself.
  """
  text = Text()
  if label is not None:
    text.append(f"{label}: ", style="label")
  text.append(format_tree(node))
  console.print(text)
  return node
