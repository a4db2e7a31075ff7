import numpy as np
from ..core.node import (
  Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode, ComparisonNode, ConditionalNode
)
from ..core.operators import evaluate_binary_op, evaluate_unary_op, evaluate_comparison_op

ZERO = ConstantNode(0.0)
ONE = ConstantNode(1.0)


def _is_value(node: Node, value: float) -> bool:
  return isinstance(node, ConstantNode) and node.value == value


class ExpressionSimplifier:
  """Structural rewriting with constant folding; never raises for a well-formed tree"""

  @staticmethod
  def simplify(node: Node) -> Node:
    if isinstance(node, (ConstantNode, VariableNode)):
      return node
    if isinstance(node, BinaryOpNode):
      left = ExpressionSimplifier.simplify(node.left)
      right = ExpressionSimplifier.simplify(node.right)
      return ExpressionSimplifier._simplify_binary(node.operator, left, right)
    if isinstance(node, UnaryOpNode):
      operand = ExpressionSimplifier.simplify(node.operand)
      return ExpressionSimplifier._simplify_unary(node.operator, operand)
    if isinstance(node, ComparisonNode):
      left = ExpressionSimplifier.simplify(node.left)
      right = ExpressionSimplifier.simplify(node.right)
      if isinstance(left, ConstantNode) and isinstance(right, ConstantNode):
        held = evaluate_comparison_op(np.array([left.value]), np.array([right.value]), node.operator)[0]
        return ONE if held else ZERO
      return ComparisonNode(node.operator, left, right)
    if isinstance(node, ConditionalNode):
      condition = ExpressionSimplifier.simplify(node.condition)
      if_true = ExpressionSimplifier.simplify(node.if_true)
      if_false = ExpressionSimplifier.simplify(node.if_false)
      if isinstance(condition, ConstantNode):
        return if_true if condition.value != 0 else if_false
      return ConditionalNode(condition, if_true, if_false)
    return node

  @staticmethod
  def _fold_binary(operator: str, left: ConstantNode, right: ConstantNode):
    with np.errstate(all='ignore'):
      result = evaluate_binary_op(np.array([left.value]), np.array([right.value]), operator)[0]
    if np.isfinite(result):
      return ConstantNode(result)
    return None

  @staticmethod
  def _simplify_binary(operator: str, left: Node, right: Node) -> Node:
    if isinstance(left, ConstantNode) and isinstance(right, ConstantNode):
      folded = ExpressionSimplifier._fold_binary(operator, left, right)
      if folded is not None:
        return folded

    if operator == '+':
      if _is_value(right, 0):
        return left  # x + 0 = x
      if _is_value(left, 0):
        return right  # 0 + x = x

    elif operator == '-':
      if _is_value(right, 0):
        return left  # x - 0 = x
      if _is_value(left, 0):
        return ExpressionSimplifier._simplify_unary('neg', right)  # 0 - x = -x
      if left == right:
        return ZERO  # x - x = 0

    elif operator == '*':
      if _is_value(left, 0) or _is_value(right, 0):
        return ZERO
      if _is_value(right, 1):
        return left
      if _is_value(left, 1):
        return right
      # Constants go in front
      if isinstance(right, ConstantNode):
        left, right = right, left
      if _is_value(left, -1):
        return ExpressionSimplifier._simplify_unary('neg', right)
      # c1 * (c2 * f) = (c1*c2) * f
      if (isinstance(left, ConstantNode) and isinstance(right, BinaryOpNode)
          and right.operator == '*' and isinstance(right.left, ConstantNode)):
        coefficient = ExpressionSimplifier._fold_binary('*', left, right.left)
        if coefficient is not None:
          return ExpressionSimplifier._simplify_binary('*', coefficient, right.right)

    elif operator == '/':
      if _is_value(right, 1):
        return left  # x / 1 = x
      if _is_value(left, 0) and not _is_value(right, 0):
        return ZERO  # 0 / x = 0
      if left == right and not _is_value(right, 0):
        return ONE  # x / x = 1

    elif operator == '^':
      if _is_value(right, 0):
        return ONE  # x ^ 0 = 1
      if _is_value(right, 1):
        return left  # x ^ 1 = x
      if _is_value(left, 1):
        return ONE  # 1 ^ x = 1

    return BinaryOpNode(operator, left, right)

  @staticmethod
  def _simplify_unary(operator: str, operand: Node) -> Node:
    if operator == 'neg':
      if isinstance(operand, UnaryOpNode) and operand.operator == 'neg':
        return operand.operand  # --x = x
      if isinstance(operand, ConstantNode):
        return ConstantNode(-operand.value)
      return UnaryOpNode('neg', operand)

    # Functions of constants fold only when the value is exact
    if isinstance(operand, ConstantNode):
      with np.errstate(all='ignore'):
        result = evaluate_unary_op(np.array([operand.value]), operator)[0]
      if np.isfinite(result) and float(result).is_integer():
        return ConstantNode(result)

    return UnaryOpNode(operator, operand)
