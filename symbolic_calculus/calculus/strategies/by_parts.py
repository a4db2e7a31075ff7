from typing import Optional

from ...exceptions import UnsupportedExpression, EvaluationError
from ...expression_tree.core.node import Node, ConstantNode, BinaryOpNode, UnaryOpNode
from ...expression_tree.utils.simplifier import ExpressionSimplifier
from ...expression_tree.utils.tree_utils import build_product
from ..differentiation import differentiate
from .base import IntegrationStrategy, StrategyKind, integrate_with, is_variable

# dv candidates: trigonometric or exponential functions
INTEGRABLE_FACTORS = frozenset(('sin', 'cos', 'tan', 'exp'))


def is_polynomial_like(node: Node, variable: str) -> bool:
  """x, or x raised to a positive integer literal"""
  if is_variable(node, variable):
    return True
  if isinstance(node, BinaryOpNode) and node.operator == '^' and is_variable(node.base, variable):
    exponent = node.exponent
    return (isinstance(exponent, ConstantNode) and exponent.value > 0
            and float(exponent.value).is_integer())
  return False


def is_integrable_factor(node: Node, variable: str) -> bool:
  return (isinstance(node, UnaryOpNode) and node.operator in INTEGRABLE_FACTORS
          and node.operand.contains_variable(variable))


class IntegrationByPartsStrategy(IntegrationStrategy):
  """
  integral(u dv) = u*V - integral(V du) for a polynomial-like u and a
  trigonometric or exponential dv. Both orderings of the product are tried.
  """

  name = 'Integration by Parts'
  kind = StrategyKind.INTEGRATION_BY_PARTS

  def try_integrate(self, node: Node, variable: str, pipeline=None) -> Optional[Node]:
    if not (isinstance(node, BinaryOpNode) and node.operator == '*'):
      return None

    for u, dv in ((node.left, node.right), (node.right, node.left)):
      if not (is_polynomial_like(u, variable) and is_integrable_factor(dv, variable)):
        continue
      try:
        du = ExpressionSimplifier.simplify(differentiate(u, variable))
        v = integrate_with(pipeline, dv, variable)
        remainder = integrate_with(pipeline, build_product([v, du]), variable)
      except (UnsupportedExpression, EvaluationError):
        continue
      return BinaryOpNode('-', BinaryOpNode('*', u, v), remainder)

    return None
