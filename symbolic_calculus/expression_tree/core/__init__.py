"""Core expression tree components."""

from .node import (
    Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode,
    ComparisonNode, ConditionalNode, as_node, variable_name, format_number
)
from .operators import (
    NodeType, OpType, BINARY_OP_MAP, UNARY_OP_MAP, COMPARISON_OP_MAP,
    FUNCTION_NAMES, TRIGONOMETRIC_FUNCTIONS,
    evaluate_binary_op, evaluate_unary_op, evaluate_comparison_op
)

__all__ = [
    'Node', 'VariableNode', 'ConstantNode', 'BinaryOpNode', 'UnaryOpNode',
    'ComparisonNode', 'ConditionalNode', 'as_node', 'variable_name', 'format_number',
    'NodeType', 'OpType', 'BINARY_OP_MAP', 'UNARY_OP_MAP', 'COMPARISON_OP_MAP',
    'FUNCTION_NAMES', 'TRIGONOMETRIC_FUNCTIONS',
    'evaluate_binary_op', 'evaluate_unary_op', 'evaluate_comparison_op'
]
