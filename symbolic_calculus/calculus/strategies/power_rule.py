from typing import Optional

from ...expression_tree.core.node import Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode
from .base import (
  IntegrationStrategy, StrategyKind, try_sub_integral, is_variable, is_power_of, constant_value
)

ONE = ConstantNode(1.0)
TWO = ConstantNode(2.0)


def _log_term(coefficient: Node, x: VariableNode) -> Node:
  log_x = UnaryOpNode('ln', x)
  if coefficient == ONE:
    return log_x
  return BinaryOpNode('*', coefficient, log_x)


class PowerRuleStrategy(IntegrationStrategy):
  """
  Power rule and its neighbours:

    x          -> x^2 / 2
    x^n        -> x^(n+1) / (n+1),   x^-1 -> ln(x)
    k          -> k * x              (k free of x)
    c*f, f*c   -> c * integral(f)
    c/x^n      -> c * x^(1-n) / (1-n),   c/x -> c * ln(x)
  """

  name = 'Power Rule'
  kind = StrategyKind.POWER_RULE

  def try_integrate(self, node: Node, variable: str, pipeline=None) -> Optional[Node]:
    x = VariableNode(variable)

    if is_variable(node, variable):
      return BinaryOpNode('/', BinaryOpNode('^', x, TWO), TWO)

    if is_power_of(node, variable):
      n = constant_value(node.exponent)
      if n is not None:
        if n == -1:
          return UnaryOpNode('ln', x)
        raised = ConstantNode(n + 1)
        return BinaryOpNode('/', BinaryOpNode('^', x, raised), raised)

    if not node.contains_variable(variable):
      return BinaryOpNode('*', node, x)

    if isinstance(node, BinaryOpNode) and node.operator == '*':
      for coefficient, factor in ((node.left, node.right), (node.right, node.left)):
        if not coefficient.contains_variable(variable):
          inner = try_sub_integral(pipeline, factor, variable)
          if inner is None:
            return None
          return BinaryOpNode('*', coefficient, inner)

    if (isinstance(node, BinaryOpNode) and node.operator == '/'
        and not node.left.contains_variable(variable)):
      return self._reciprocal_power(node.left, node.right, x)

    return None

  def _reciprocal_power(self, coefficient: Node, denominator: Node, x: VariableNode) -> Optional[Node]:
    if is_variable(denominator, x.name):
      return _log_term(coefficient, x)
    if not is_power_of(denominator, x.name):
      return None

    n = constant_value(denominator.exponent)
    if n is None:
      return None
    if n == 1:
      return _log_term(coefficient, x)

    raised = ConstantNode(1 - n)
    term = BinaryOpNode('/', BinaryOpNode('^', x, raised), raised)
    if coefficient == ONE:
      return term
    return BinaryOpNode('*', coefficient, term)
