"""
Bridge between symbolic results and numerical methods, used to validate the
symbolic engine and to fall back to numerics when it gives up.
"""

from typing import Any, Dict, Union

from scipy import integrate as scipy_integrate

from ..exceptions import UnsupportedExpression, EvaluationError
from ..expression_tree.core.node import VariableNode, as_node, variable_name
from ..logging_system import log_warning, log_milestone, log_comparison_summary
from .symbolic_calculus import SymbolicCalculus

DEFAULT_STEP = 1e-3
QUAD_LIMIT = 200
QUAD_EPSABS = 1.49e-10
QUAD_EPSREL = 1.49e-10

Variable = Union[str, VariableNode]


class HybridCalculus:
  """Numeric counterparts of the symbolic operations"""

  def __init__(self, step: float = DEFAULT_STEP, quad_limit: int = QUAD_LIMIT,
               epsabs: float = QUAD_EPSABS, epsrel: float = QUAD_EPSREL):
    if step <= 0:
      raise ValueError("step must be positive")
    self.step = step
    self.quad_limit = quad_limit
    self.epsabs = epsabs
    self.epsrel = epsrel

  def evaluate_derivative(self, expr, variable: Variable, at: float) -> float:
    """Five-point central difference"""
    node = as_node(expr)
    name = variable_name(variable)
    h = self.step

    def f(x):
      return node.evaluate({name: x})

    return (-f(at + 2 * h) + 8 * f(at + h) - 8 * f(at - h) + f(at - 2 * h)) / (12 * h)

  def evaluate_integral(self, expr, variable: Variable, a: float, b: float) -> float:
    """Adaptive quadrature with scipy.integrate.quad"""
    node = as_node(expr)
    name = variable_name(variable)
    value, _ = scipy_integrate.quad(lambda x: node.evaluate({name: x}), a, b,
                                    limit=self.quad_limit, epsabs=self.epsabs, epsrel=self.epsrel)
    return float(value)

  def definite_integral(self, expr, variable: Variable, a: float, b: float) -> float:
    """Symbolic definite integral, or quadrature when the symbolic route fails"""
    try:
      return SymbolicCalculus.definite_integral(expr, variable, a, b)
    except (UnsupportedExpression, EvaluationError) as e:
      log_warning(f"Symbolic integration failed ({e}); using numerical quadrature on [{a}, {b}]")
      return self.evaluate_integral(expr, variable, a, b)

  def compare_results(self, expr, variable: Variable, at: float,
                      a: float = 0.0, b: float = 1.0) -> Dict[str, Dict[str, Any]]:
    """
    Symbolic versus numerical derivative at `at` and integral over [a, b].

    Returns:
        {'derivative': {...}, 'integral': {...}}, each with 'symbolic',
        'numerical' and 'error' (absolute difference)
    """
    node = as_node(expr)
    name = variable_name(variable)

    symbolic_derivative = SymbolicCalculus.partial_derivative(node, name).evaluate({name: at})
    numerical_derivative = self.evaluate_derivative(node, name, at)

    symbolic_integral = SymbolicCalculus.definite_integral(node, name, a, b)
    numerical_integral = self.evaluate_integral(node, name, a, b)

    results = {
      'derivative': {
        'symbolic': symbolic_derivative,
        'numerical': numerical_derivative,
        'error': abs(symbolic_derivative - numerical_derivative),
      },
      'integral': {
        'symbolic': symbolic_integral,
        'numerical': numerical_integral,
        'error': abs(symbolic_integral - numerical_integral),
      },
    }
    log_milestone(f"Compared symbolic and numerical results for {node} in {name}")
    log_comparison_summary(results)
    return results
