"""
Readable constructors for expression trees.

    >>> from symbolic_calculus.expression_tree.builders import var, sin, mul, const
    >>> str(mul(const(2), sin(var('x'))))
    '(2 * sin(x))'

Builders never simplify; numbers and strings are promoted with `as_node`.
"""

from .core.node import (
  Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode,
  ComparisonNode, ConditionalNode, as_node
)


def var(name: str) -> VariableNode:
  return VariableNode(name)


def const(value: float) -> ConstantNode:
  return ConstantNode(value)


def add(left, right) -> BinaryOpNode:
  return BinaryOpNode('+', as_node(left), as_node(right))


def sub(left, right) -> BinaryOpNode:
  return BinaryOpNode('-', as_node(left), as_node(right))


def mul(left, right) -> BinaryOpNode:
  return BinaryOpNode('*', as_node(left), as_node(right))


def div(left, right) -> BinaryOpNode:
  return BinaryOpNode('/', as_node(left), as_node(right))


def power(base, exponent) -> BinaryOpNode:
  return BinaryOpNode('^', as_node(base), as_node(exponent))


def neg(operand) -> UnaryOpNode:
  return UnaryOpNode('neg', as_node(operand))


def _function(name: str):
  def build(operand) -> UnaryOpNode:
    return UnaryOpNode(name, as_node(operand))
  build.__name__ = name
  build.__doc__ = f"Build {name}(operand)"
  return build


sin = _function('sin')
cos = _function('cos')
tan = _function('tan')
sec = _function('sec')
csc = _function('csc')
cot = _function('cot')
exp = _function('exp')
ln = _function('ln')
sqrt = _function('sqrt')
asin = _function('asin')
acos = _function('acos')
atan = _function('atan')


def less_than(left, right) -> ComparisonNode:
  return ComparisonNode('<', as_node(left), as_node(right))


def less_equal(left, right) -> ComparisonNode:
  return ComparisonNode('<=', as_node(left), as_node(right))


def greater_than(left, right) -> ComparisonNode:
  return ComparisonNode('>', as_node(left), as_node(right))


def greater_equal(left, right) -> ComparisonNode:
  return ComparisonNode('>=', as_node(left), as_node(right))


def equal_to(left, right) -> ComparisonNode:
  return ComparisonNode('==', as_node(left), as_node(right))


def not_equal(left, right) -> ComparisonNode:
  return ComparisonNode('!=', as_node(left), as_node(right))


def conditional(condition: Node, if_true, if_false) -> ConditionalNode:
  return ConditionalNode(condition, as_node(if_true), as_node(if_false))


__all__ = [
  'as_node', 'var', 'const', 'add', 'sub', 'mul', 'div', 'power', 'neg',
  'sin', 'cos', 'tan', 'sec', 'csc', 'cot', 'exp', 'ln', 'sqrt',
  'asin', 'acos', 'atan',
  'less_than', 'less_equal', 'greater_than', 'greater_equal', 'equal_to', 'not_equal',
  'conditional',
]
