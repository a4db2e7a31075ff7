from typing import Optional

from ...expression_tree.core.node import Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode
from .base import IntegrationStrategy, StrategyKind, is_variable, constant_value

TWO = ConstantNode(2.0)


def _is_function_of(node: Node, name: str, variable: str) -> bool:
  return isinstance(node, UnaryOpNode) and node.operator == name and is_variable(node.operand, variable)


def _is_squared_function_of(node: Node, name: str, variable: str) -> bool:
  return (isinstance(node, BinaryOpNode) and node.operator == '^' and node.exponent == TWO
          and _is_function_of(node.base, name, variable))


class BasicTrigStrategy(IntegrationStrategy):
  """Table integrals of trigonometric functions of the bare variable"""

  name = 'Basic Trigonometric'
  kind = StrategyKind.BASIC_TRIG

  def try_integrate(self, node: Node, variable: str, pipeline=None) -> Optional[Node]:
    x = VariableNode(variable)
    if _is_function_of(node, 'sin', variable):
      return UnaryOpNode('neg', UnaryOpNode('cos', x))
    if _is_function_of(node, 'cos', variable):
      return UnaryOpNode('sin', x)
    if _is_squared_function_of(node, 'sec', variable):
      return UnaryOpNode('tan', x)
    if _is_squared_function_of(node, 'csc', variable):
      return UnaryOpNode('neg', UnaryOpNode('cot', x))
    return None


class ExponentialStrategy(IntegrationStrategy):
  """exp(x) -> exp(x) and a^x -> a^x / ln(a) for a positive base other than 1"""

  name = 'Exponential'
  kind = StrategyKind.EXPONENTIAL

  def try_integrate(self, node: Node, variable: str, pipeline=None) -> Optional[Node]:
    if _is_function_of(node, 'exp', variable):
      return node
    if (isinstance(node, BinaryOpNode) and node.operator == '^'
        and is_variable(node.exponent, variable)
        and not node.base.contains_variable(variable)):
      base_value = constant_value(node.base)
      if base_value == 1:
        return VariableNode(variable)
      # ln(a) is undefined or zero outside a > 0, a != 1
      if base_value is not None and base_value <= 0:
        return None
      return BinaryOpNode('/', node, UnaryOpNode('ln', node.base))
    return None
