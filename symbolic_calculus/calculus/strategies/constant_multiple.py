from typing import Optional

from ...expression_tree.core.node import Node, BinaryOpNode, UnaryOpNode
from .base import IntegrationStrategy, StrategyKind, try_sub_integral


class ConstantMultipleStrategy(IntegrationStrategy):
  """integral(c*f) = c * integral(f), integral(-f) = -integral(f), integral(f/c) = integral(f) / c"""

  name = 'Constant Multiple'
  kind = StrategyKind.CONSTANT_MULTIPLE

  def try_integrate(self, node: Node, variable: str, pipeline=None) -> Optional[Node]:
    if isinstance(node, UnaryOpNode) and node.operator == 'neg':
      inner = try_sub_integral(pipeline, node.operand, variable)
      return None if inner is None else UnaryOpNode('neg', inner)

    if not isinstance(node, BinaryOpNode):
      return None

    if node.operator == '*':
      left_free = not node.left.contains_variable(variable)
      right_free = not node.right.contains_variable(variable)
      if left_free == right_free:
        return None
      coefficient, factor = (node.left, node.right) if left_free else (node.right, node.left)
      inner = try_sub_integral(pipeline, factor, variable)
      return None if inner is None else BinaryOpNode('*', coefficient, inner)

    if node.operator == '/' and not node.right.contains_variable(variable):
      inner = try_sub_integral(pipeline, node.left, variable)
      return None if inner is None else BinaryOpNode('/', inner, node.right)

    return None
