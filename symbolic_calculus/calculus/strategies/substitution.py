import numpy as np
from typing import Callable, Dict, Optional, Tuple

from ...exceptions import EvaluationError
from ...expression_tree.core.node import Node, ConstantNode, BinaryOpNode, UnaryOpNode
from ...expression_tree.utils.simplifier import ExpressionSimplifier
from ...expression_tree.utils.tree_utils import flatten_product, build_product
from ..differentiation import differentiate
from .base import IntegrationStrategy, StrategyKind

ONE = ConstantNode(1.0)

DEFAULT_N_SAMPLES = 8
DEFAULT_RTOL = 1e-9
DEFAULT_SEED = 0
# Sample interval for the numeric ratio check; inside the domain of ln, sqrt, asin and acos
SAMPLE_INTERVAL = (0.1, 0.9)

# Antiderivative of the outer function, evaluated at the inner expression u
OUTER_ANTIDERIVATIVES: Dict[str, Callable[[Node], Node]] = {
  'sin': lambda u: UnaryOpNode('neg', UnaryOpNode('cos', u)),
  'cos': lambda u: UnaryOpNode('sin', u),
  'exp': lambda u: UnaryOpNode('exp', u),
}


def canonical_form(node: Node, variable: str) -> str:
  """Whitespace-free rendering with (x^1) collapsed to x"""
  return node.to_string().replace(' ', '').replace(f'({variable}^1)', variable)


def peel_coefficient(node: Node) -> Tuple[float, Optional[Node]]:
  """Split a literal coefficient off a product; a bare literal is all coefficient"""
  if isinstance(node, ConstantNode):
    return node.value, None
  if isinstance(node, UnaryOpNode) and node.operator == 'neg':
    coefficient, remainder = peel_coefficient(node.operand)
    return -coefficient, remainder
  if isinstance(node, BinaryOpNode) and node.operator == '*':
    if isinstance(node.left, ConstantNode):
      return node.left.value, node.right
    if isinstance(node.right, ConstantNode):
      return node.right.value, node.left
  return 1.0, node


class SubstitutionStrategy(IntegrationStrategy):
  """
  u-substitution for f'(x) * g(f(x)) with g in {sin, cos, exp}.

  The cofactor of g(f(x)) must equal f'(x) up to a constant factor k; the
  result is k * G(f(x)). The factor is found by comparing canonical strings,
  then by peeling literal coefficients, then (when numeric_fallback is set)
  by sampling both sides at random points.
  """

  name = 'U-Substitution'
  kind = StrategyKind.SUBSTITUTION

  def __init__(self, numeric_fallback: bool = False, n_samples: int = DEFAULT_N_SAMPLES,
               rtol: float = DEFAULT_RTOL, seed: int = DEFAULT_SEED):
    if n_samples < 2:
      raise ValueError("n_samples must be at least 2")
    self.numeric_fallback = numeric_fallback
    self.n_samples = n_samples
    self.rtol = rtol
    self.seed = seed

  def __repr__(self) -> str:
    return (f"SubstitutionStrategy(numeric_fallback={self.numeric_fallback}, "
            f"n_samples={self.n_samples}, rtol={self.rtol}, seed={self.seed})")

  def try_integrate(self, node: Node, variable: str, pipeline=None) -> Optional[Node]:
    factors = flatten_product(node)
    for index, factor in enumerate(factors):
      if not (isinstance(factor, UnaryOpNode) and factor.operator in OUTER_ANTIDERIVATIVES
              and factor.operand.contains_variable(variable)):
        continue

      inner = factor.operand
      rest = factors[:index] + factors[index + 1:]
      candidate = build_product(rest) if rest else ONE

      ratio = self.match_ratio(candidate, inner, variable)
      if ratio is None:
        continue

      antiderivative = OUTER_ANTIDERIVATIVES[factor.operator](inner)
      if ratio == 1:
        return antiderivative
      return BinaryOpNode('*', ConstantNode(ratio), antiderivative)
    return None

  def match_ratio(self, candidate: Node, inner: Node, variable: str) -> Optional[float]:
    """Constant k with candidate == k * d(inner)/d(variable), or None"""
    candidate = ExpressionSimplifier.simplify(candidate)
    derivative = ExpressionSimplifier.simplify(differentiate(inner, variable))

    if canonical_form(candidate, variable) == canonical_form(derivative, variable):
      return 1.0

    candidate_coefficient, candidate_rest = peel_coefficient(candidate)
    derivative_coefficient, derivative_rest = peel_coefficient(derivative)
    if derivative_coefficient != 0 and self._same_remainder(candidate_rest, derivative_rest, variable):
      return candidate_coefficient / derivative_coefficient

    if self.numeric_fallback:
      return self._sampled_ratio(candidate, derivative)
    return None

  @staticmethod
  def _same_remainder(first: Optional[Node], second: Optional[Node], variable: str) -> bool:
    if first is None or second is None:
      return first is None and second is None
    return canonical_form(first, variable) == canonical_form(second, variable)

  def _sampled_ratio(self, candidate: Node, derivative: Node) -> Optional[float]:
    names = sorted(candidate.variable_names() | derivative.variable_names())
    rng = np.random.default_rng(self.seed)
    low, high = SAMPLE_INTERVAL
    bindings = {name: rng.uniform(low, high, self.n_samples) for name in names}
    try:
      numerator = np.broadcast_to(candidate.evaluate(bindings), (self.n_samples,))
      denominator = np.broadcast_to(derivative.evaluate(bindings), (self.n_samples,))
    except EvaluationError:
      return None

    if np.any(denominator == 0):
      return None
    ratios = numerator / denominator
    ratio = float(ratios[0])
    if ratio == 0 or not np.all(np.isfinite(ratios)):
      return None
    if not np.allclose(ratios, ratio, rtol=self.rtol, atol=0.0):
      return None

    nearest = round(ratio)
    if abs(ratio - nearest) <= self.rtol * max(1.0, abs(ratio)):
      return float(nearest)
    return ratio
