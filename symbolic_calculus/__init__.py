"""Symbolic Calculus Package

Immutable expression trees with symbolic differentiation and a
multi-strategy symbolic integration pipeline.
"""

from .expression_tree import (
  Expression, Node, VariableNode, ConstantNode,
  BinaryOpNode, UnaryOpNode, ComparisonNode, ConditionalNode,
  ExpressionSimplifier, SymPySimplifier, parse_expression, from_sympy, builders
)
from .calculus import (
  differentiate, integrate, SymbolicIntegration, DEFAULT_STRATEGIES,
  IntegrationStrategy, StrategyKind, SymbolicCalculus, HybridCalculus
)
from .exceptions import (
  SymbolicCalculusError, UnsupportedExpression, EvaluationError, UnboundVariableError
)
from .logging_system import LogLevel, configure_logging, set_log_level, get_logger

__version__ = "0.1.0"
__all__ = [
  "Expression", "Node", "VariableNode", "ConstantNode",
  "BinaryOpNode", "UnaryOpNode", "ComparisonNode", "ConditionalNode",
  "ExpressionSimplifier", "SymPySimplifier", "parse_expression", "from_sympy", "builders",
  "differentiate", "integrate", "SymbolicIntegration", "DEFAULT_STRATEGIES",
  "IntegrationStrategy", "StrategyKind", "SymbolicCalculus", "HybridCalculus",
  "SymbolicCalculusError", "UnsupportedExpression", "EvaluationError", "UnboundVariableError",
  "LogLevel", "configure_logging", "set_log_level", "get_logger"
]
