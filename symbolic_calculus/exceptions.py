"""
Exception hierarchy for symbolic calculus.

Strategies report a routine non-match by returning None; the classes here are
reserved for conditions a caller has to see.
"""

from typing import Optional


class SymbolicCalculusError(Exception):
    """Base class for all errors raised by this package"""


class UnsupportedExpression(SymbolicCalculusError):
    """Raised when no integration strategy can handle an expression"""

    def __init__(self, expression, variable=None, message: Optional[str] = None):
        self.expression = expression
        self.variable = variable
        if message is None:
            message = (f"Cannot symbolically integrate: {expression}\n"
                       f"Consider using numerical integration instead.")
        super().__init__(message)


class EvaluationError(SymbolicCalculusError, ValueError):
    """Raised when an expression has no finite value for the given bindings"""


class UnboundVariableError(EvaluationError):
    """Raised when evaluation reaches a variable without a binding"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Variable {name} not found in evaluation context")
