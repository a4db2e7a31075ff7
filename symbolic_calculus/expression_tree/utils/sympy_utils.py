import sympy as sp
from sympy.parsing.sympy_parser import (
  parse_expr, standard_transformations, implicit_multiplication, convert_xor
)
from tokenize import TokenError
from typing import Dict, Any, Optional, Sequence

from ..core.node import (
  Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode, ComparisonNode, ConditionalNode
)
from ...logging_system import log_debug

_PARSE_TRANSFORMATIONS = standard_transformations + (implicit_multiplication, convert_xor)

_PARSE_NAMES = {
  'e': sp.E, 'E': sp.E, 'pi': sp.pi,
  'ln': sp.log, 'log': sp.log,
}

_FUNCTION_TYPES = (
  (sp.sin, 'sin'), (sp.cos, 'cos'), (sp.tan, 'tan'),
  (sp.sec, 'sec'), (sp.csc, 'csc'), (sp.cot, 'cot'),
  (sp.exp, 'exp'), (sp.log, 'ln'),
  (sp.asin, 'asin'), (sp.acos, 'acos'), (sp.atan, 'atan'),
)


def from_sympy(expr) -> Node:
  """
  Convert a SymPy expression into an expression tree.

  Sums and products are folded left-associatively, negative coefficients
  become subtraction or negation and negative powers become division.

  Raises:
      ValueError: the expression uses a construct with no node equivalent
  """
  expr = sp.sympify(expr)

  if isinstance(expr, sp.Symbol):
    return VariableNode(expr.name)

  if expr.is_Number or expr.is_NumberSymbol:
    if not expr.is_finite or not expr.is_real:
      raise ValueError(f"Non-finite or complex constant: {expr}")
    return ConstantNode(float(expr))

  if isinstance(expr, sp.Add):
    terms = list(expr.args)
    result = from_sympy(terms[0])
    for term in terms[1:]:
      if term.could_extract_minus_sign():
        result = BinaryOpNode('-', result, from_sympy(-term))
      else:
        result = BinaryOpNode('+', result, from_sympy(term))
    return result

  if isinstance(expr, sp.Mul):
    coefficient, _ = expr.as_coeff_Mul()
    if coefficient.is_Number and coefficient < 0:
      return UnaryOpNode('neg', from_sympy(-expr))
    numerator, denominator = sp.fraction(expr)
    if denominator != 1:
      return BinaryOpNode('/', from_sympy(numerator), from_sympy(denominator))
    factors = list(expr.args)
    result = from_sympy(factors[0])
    for factor in factors[1:]:
      result = BinaryOpNode('*', result, from_sympy(factor))
    return result

  if isinstance(expr, sp.Pow):
    base, exponent = expr.args
    if exponent == sp.S.Half:
      return UnaryOpNode('sqrt', from_sympy(base))
    if exponent.is_Number and exponent < 0:
      return BinaryOpNode('/', ConstantNode(1.0), from_sympy(sp.Pow(base, -exponent)))
    return BinaryOpNode('^', from_sympy(base), from_sympy(exponent))

  for function_type, name in _FUNCTION_TYPES:
    if isinstance(expr, function_type):
      return UnaryOpNode(name, from_sympy(expr.args[0]))

  if isinstance(expr, sp.Piecewise):
    pieces = list(expr.args)
    last_value, last_condition = pieces[-1]
    if last_condition != sp.true:
      raise ValueError(f"Piecewise without a default branch: {expr}")
    result = from_sympy(last_value)
    for value, condition in reversed(pieces[:-1]):
      result = ConditionalNode(from_sympy(condition), from_sympy(value), result)
    return result

  if isinstance(expr, sp.core.relational.Relational):
    return ComparisonNode(expr.rel_op, from_sympy(expr.lhs), from_sympy(expr.rhs))

  raise ValueError(f"Unsupported SymPy construct: {type(expr).__name__} in {expr}")


def parse_expression(text: str) -> Node:
  """
  Parse standard formula syntax (`^` or `**` for powers, `ln`, `e`, `pi`,
  implicit multiplication such as `2x`).

  Raises:
      ValueError: malformed or unsupported input
  """
  if not isinstance(text, str) or not text.strip():
    raise ValueError("Cannot parse an empty expression")
  try:
    sympy_expr = parse_expr(text, local_dict=dict(_PARSE_NAMES),
                            transformations=_PARSE_TRANSFORMATIONS)
  except (SyntaxError, TokenError, TypeError, AttributeError, sp.SympifyError) as e:
    raise ValueError(f"Cannot parse expression {text!r}: {e}") from e
  return from_sympy(sympy_expr)


def are_equivalent(first: Node, second: Node) -> bool:
  """Symbolic equivalence via sympy.simplify of the difference"""
  return sp.simplify(first.to_sympy() - second.to_sympy()) == 0


def latex_representation(node: Node) -> str:
  return sp.latex(node.to_sympy())


class SymPySimplifier:
  """SymPy-based simplifier that keeps the least complex of several rewrites"""

  DEFAULT_STRATEGIES = ('simplify', 'expand', 'factor', 'trigsimp', 'logcombine')

  def __init__(self, strategies: Optional[Sequence[str]] = None):
    self.simplification_strategies = list(strategies or self.DEFAULT_STRATEGIES)

  def simplify_expression(self, node: Node) -> Dict[str, Any]:
    """
    Simplify a node using multiple SymPy strategies

    Returns:
        Dict with the simplified node and metadata
    """
    sympy_expr = node.to_sympy()
    original_complexity = self._calculate_complexity(sympy_expr)

    best_node = node
    best_complexity = original_complexity
    best_strategy = 'none'

    for strategy in self.simplification_strategies:
      rewrite = getattr(sp, strategy, None)
      if rewrite is None:
        raise ValueError(f"Unknown SymPy simplification strategy: {strategy}")
      try:
        simplified = rewrite(sympy_expr)
        candidate = from_sympy(simplified)
      except (ValueError, TypeError, NotImplementedError, sp.PolynomialError) as e:
        log_debug(f"SymPy strategy {strategy} skipped for {node}: {e}")
        continue

      complexity = self._calculate_complexity(simplified)
      if complexity < best_complexity:
        best_node = candidate
        best_complexity = complexity
        best_strategy = strategy

    return {
      'simplified': best_node,
      'strategy_used': best_strategy,
      'complexity_reduction': original_complexity - best_complexity,
      'original_complexity': original_complexity,
      'simplified_complexity': best_complexity
    }

  def simplify(self, node: Node) -> Node:
    return self.simplify_expression(node)['simplified']

  def _calculate_complexity(self, expr) -> int:
    """Calculate expression complexity for SymPy expressions"""
    return len(expr.free_symbols) + len(expr.atoms(sp.Function)) + expr.count_ops()
