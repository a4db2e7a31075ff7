"""
Higher-level symbolic calculus built on differentiation and integration:
partial derivatives, definite integrals, Taylor/Maclaurin series and
numeric limits.
"""

import math
from typing import List, Union

import numpy as np

from ..exceptions import EvaluationError
from ..expression_tree.core.node import Node, VariableNode, ConstantNode, BinaryOpNode, as_node, variable_name
from ..expression_tree.utils.simplifier import ExpressionSimplifier
from ..logging_system import LogLevel, log_info
from .differentiation import differentiate
from .integration import integrate

# Taylor terms with a smaller coefficient are dropped
COEFFICIENT_TOLERANCE = 1e-10
# Step sizes for the numeric limit, coarse to fine
LIMIT_STEPS = (1e-2, 1e-3, 1e-4, 1e-5, 1e-6, 1e-7, 1e-8)
# Two one-sided limits closer than this are considered equal
LIMIT_AGREEMENT = 1e-4

Variable = Union[str, VariableNode]


class SymbolicCalculus:
  """Static helpers over expression trees"""

  @staticmethod
  def partial_derivative(expr, variable: Variable) -> Node:
    """Derivative with every other variable held constant"""
    return differentiate(as_node(expr), variable)

  @staticmethod
  def indefinite_integral(expr, variable: Variable) -> Node:
    return integrate(as_node(expr), variable)

  @staticmethod
  def definite_integral(expr, variable: Variable, a: float, b: float) -> float:
    """
    F(b) - F(a) for an antiderivative F.

    Raises:
        UnsupportedExpression: no antiderivative was found
        EvaluationError: F is undefined at a bound
    """
    antiderivative = integrate(as_node(expr), variable)
    name = variable_name(variable)
    return antiderivative.evaluate({name: b}) - antiderivative.evaluate({name: a})

  @staticmethod
  def taylor_series(expr, variable: Variable, point: float, order: int) -> Node:
    """
    Taylor polynomial sum f^(n)(a) (x - a)^n / n! for n = 0..order.

    Expansion stops early at the first derivative that cannot be evaluated
    at the point.
    """
    if order < 0:
      raise ValueError("Order must be non-negative")

    name = variable_name(variable)
    x = VariableNode(name)
    shift = x if point == 0 else BinaryOpNode('-', x, ConstantNode(point))

    result: Node = ConstantNode(0.0)
    derivative = as_node(expr)
    for n in range(order + 1):
      try:
        value = derivative.evaluate({name: point})
      except EvaluationError:
        log_info(f"Taylor expansion of {expr} stopped at order {n}: derivative undefined at {point}",
                 LogLevel.DETAILED)
        break

      if abs(value) > COEFFICIENT_TOLERANCE:
        coefficient = ConstantNode(value / math.factorial(n))
        if n == 0:
          term = coefficient
        elif n == 1:
          term = BinaryOpNode('*', coefficient, shift)
        else:
          term = BinaryOpNode('*', coefficient, BinaryOpNode('^', shift, ConstantNode(n)))
        result = BinaryOpNode('+', result, term)

      if n < order:
        derivative = ExpressionSimplifier.simplify(differentiate(derivative, name))

    return ExpressionSimplifier.simplify(result)

  @staticmethod
  def maclaurin_series(expr, variable: Variable, order: int) -> Node:
    return SymbolicCalculus.taylor_series(expr, variable, 0, order)

  @staticmethod
  def limit(expr, variable: Variable, value: float, direction: str = 'both') -> float:
    """
    Numeric limit as `variable` approaches `value`.

    Args:
        direction: 'left', 'right' or 'both'

    Returns:
        The limit, or NaN when it cannot be established (no finite samples,
        or the one-sided limits disagree)
    """
    if direction not in ('left', 'right', 'both'):
      raise ValueError(f"Invalid direction: {direction}")

    node = as_node(expr)
    name = variable_name(variable)

    if direction == 'right':
      return SymbolicCalculus._one_sided_limit(node, name, value, 1.0)
    if direction == 'left':
      return SymbolicCalculus._one_sided_limit(node, name, value, -1.0)

    right = SymbolicCalculus._one_sided_limit(node, name, value, 1.0)
    left = SymbolicCalculus._one_sided_limit(node, name, value, -1.0)
    if np.isnan(right) or np.isnan(left) or abs(right - left) >= LIMIT_AGREEMENT:
      return float('nan')
    return (right + left) / 2

  @staticmethod
  def _one_sided_limit(node: Node, name: str, value: float, sign: float) -> float:
    samples: List[float] = []
    for h in LIMIT_STEPS:
      try:
        samples.append(node.evaluate({name: value + sign * h}))
      except EvaluationError:
        continue
    return samples[-1] if samples else float('nan')
