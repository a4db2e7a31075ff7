"""Expression Tree Module

Immutable expression trees for symbolic calculus.
"""

from .expression import Expression
from .core.node import (
    Node,
    VariableNode,
    ConstantNode,
    BinaryOpNode,
    UnaryOpNode,
    ComparisonNode,
    ConditionalNode,
    as_node
)
from .core.operators import (
    NodeType,
    OpType,
    BINARY_OP_MAP,
    UNARY_OP_MAP,
    COMPARISON_OP_MAP,
    evaluate_binary_op,
    evaluate_unary_op,
    evaluate_comparison_op
)
from .utils import ExpressionSimplifier, SymPySimplifier, from_sympy, parse_expression
from . import builders

__all__ = [
    "Expression",
    "Node", "VariableNode", "ConstantNode", "BinaryOpNode", "UnaryOpNode",
    "ComparisonNode", "ConditionalNode", "as_node",
    "NodeType", "OpType",
    "BINARY_OP_MAP", "UNARY_OP_MAP", "COMPARISON_OP_MAP",
    "evaluate_binary_op", "evaluate_unary_op", "evaluate_comparison_op",
    "ExpressionSimplifier", "SymPySimplifier", "from_sympy", "parse_expression",
    "builders"
]
