from typing import Optional

from ...expression_tree.core.node import Node, BinaryOpNode
from .base import IntegrationStrategy, StrategyKind, try_sub_integral


class SumDifferenceStrategy(IntegrationStrategy):
  """Linearity over + and -; both terms must integrate or nothing is returned"""

  name = 'Sum/Difference'
  kind = StrategyKind.SUM_DIFFERENCE

  def try_integrate(self, node: Node, variable: str, pipeline=None) -> Optional[Node]:
    if not (isinstance(node, BinaryOpNode) and node.operator in ('+', '-')):
      return None
    left = try_sub_integral(pipeline, node.left, variable)
    if left is None:
      return None
    right = try_sub_integral(pipeline, node.right, variable)
    if right is None:
      return None
    return BinaryOpNode(node.operator, left, right)
