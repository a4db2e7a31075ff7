"""
Symbolic differentiation.

One rule per node shape, applied by structural recursion. Results are not
simplified; call `.simplify()` on the result when a compact form matters.
"""

from typing import Callable, Dict, Union

from ..expression_tree.core.node import (
  Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode,
  ComparisonNode, ConditionalNode, variable_name
)

ZERO = ConstantNode(0.0)
ONE = ConstantNode(1.0)
TWO = ConstantNode(2.0)


def _sq(u: Node) -> Node:
  return BinaryOpNode('^', u, TWO)


# Outer derivative f'(u) of each named function, before the chain-rule factor u'
DERIVATIVE_TABLE: Dict[str, Callable[[Node], Node]] = {
  'sin': lambda u: UnaryOpNode('cos', u),
  'cos': lambda u: UnaryOpNode('neg', UnaryOpNode('sin', u)),
  'tan': lambda u: _sq(UnaryOpNode('sec', u)),
  'sec': lambda u: BinaryOpNode('*', UnaryOpNode('sec', u), UnaryOpNode('tan', u)),
  'csc': lambda u: UnaryOpNode('neg', BinaryOpNode('*', UnaryOpNode('csc', u), UnaryOpNode('cot', u))),
  'cot': lambda u: UnaryOpNode('neg', _sq(UnaryOpNode('csc', u))),
  'exp': lambda u: UnaryOpNode('exp', u),
  'ln': lambda u: BinaryOpNode('/', ONE, u),
  'sqrt': lambda u: BinaryOpNode('/', ONE, BinaryOpNode('*', TWO, UnaryOpNode('sqrt', u))),
  'asin': lambda u: BinaryOpNode('/', ONE, UnaryOpNode('sqrt', BinaryOpNode('-', ONE, _sq(u)))),
  'acos': lambda u: UnaryOpNode('neg', BinaryOpNode('/', ONE, UnaryOpNode('sqrt', BinaryOpNode('-', ONE, _sq(u))))),
  'atan': lambda u: BinaryOpNode('/', ONE, BinaryOpNode('+', ONE, _sq(u))),
}


def differentiate(node: Node, variable: Union[str, VariableNode]) -> Node:
  """
  Partial derivative of `node` with respect to `variable`; every other
  variable is treated as a constant.

  Raises:
      TypeError: `node` is not a known node class
  """
  return _derive(node, variable_name(variable))


def _derive(node: Node, v: str) -> Node:
  if isinstance(node, ConstantNode):
    return ZERO
  if isinstance(node, VariableNode):
    return ONE if node.name == v else ZERO
  if isinstance(node, BinaryOpNode):
    return _derive_binary(node, v)
  if isinstance(node, UnaryOpNode):
    if node.operator == 'neg':
      return UnaryOpNode('neg', _derive(node.operand, v))
    # Chain rule
    u = node.operand
    return BinaryOpNode('*', DERIVATIVE_TABLE[node.operator](u), _derive(u, v))
  if isinstance(node, ConditionalNode):
    return ConditionalNode(node.condition, _derive(node.if_true, v), _derive(node.if_false, v))
  if isinstance(node, ComparisonNode):
    # Piecewise-constant indicator
    return ZERO
  raise TypeError(f"Cannot differentiate node of type {type(node).__name__}")


def _derive_binary(node: BinaryOpNode, v: str) -> Node:
  f, g = node.left, node.right
  if node.operator in ('+', '-'):
    return BinaryOpNode(node.operator, _derive(f, v), _derive(g, v))
  if node.operator == '*':
    return BinaryOpNode('+',
                        BinaryOpNode('*', _derive(f, v), g),
                        BinaryOpNode('*', f, _derive(g, v)))
  if node.operator == '/':
    numerator = BinaryOpNode('-',
                             BinaryOpNode('*', _derive(f, v), g),
                             BinaryOpNode('*', f, _derive(g, v)))
    return BinaryOpNode('/', numerator, BinaryOpNode('*', g, g))
  return _derive_power(node, v)


def _derive_power(node: BinaryOpNode, v: str) -> Node:
  base, exponent = node.base, node.exponent

  if not exponent.contains_variable(v):
    if isinstance(exponent, ConstantNode):
      reduced = ConstantNode(exponent.value - 1)
    else:
      reduced = BinaryOpNode('-', exponent, ONE)
    outer = BinaryOpNode('*', exponent, BinaryOpNode('^', base, reduced))
    return BinaryOpNode('*', outer, _derive(base, v))

  if not base.contains_variable(v):
    return BinaryOpNode('*', node, BinaryOpNode('*', UnaryOpNode('ln', base), _derive(exponent, v)))

  # Logarithmic differentiation: d(f^g) = f^g * (g' ln f + g f'/f)
  log_term = BinaryOpNode('*', _derive(exponent, v), UnaryOpNode('ln', base))
  ratio_term = BinaryOpNode('/', BinaryOpNode('*', exponent, _derive(base, v)), base)
  return BinaryOpNode('*', node, BinaryOpNode('+', log_term, ratio_term))
