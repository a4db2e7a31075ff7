"""Utilities for expression trees."""

from .simplifier import ExpressionSimplifier
from .sympy_utils import (
    SymPySimplifier, from_sympy, parse_expression, are_equivalent, latex_representation
)
from .tree_utils import (
    get_all_nodes, calculate_tree_depth, find_nodes_by_type, find_nodes_by_operator,
    get_constants, get_variables, contains_variable, flatten_product, build_product,
    substitute
)

__all__ = [
    'ExpressionSimplifier', 'SymPySimplifier',
    'from_sympy', 'parse_expression', 'are_equivalent', 'latex_representation',
    'get_all_nodes', 'calculate_tree_depth', 'find_nodes_by_type', 'find_nodes_by_operator',
    'get_constants', 'get_variables', 'contains_variable', 'flatten_product', 'build_product',
    'substitute'
]
