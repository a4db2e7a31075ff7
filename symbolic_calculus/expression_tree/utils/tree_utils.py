"""
Tree Utility Functions

Traversal, search and product regrouping helpers shared by the simplifier and
the integration strategies.
"""

from typing import List, Type, TypeVar, Union

from ..core.node import (
    Node, BinaryOpNode, UnaryOpNode, ConstantNode, VariableNode, ComparisonNode, ConditionalNode,
    as_node, variable_name
)

T = TypeVar('T', bound=Node)


def get_all_nodes(node: Node, traversal_order: str = 'breadth_first') -> List[Node]:
    """
    Get all nodes in the tree using specified traversal order.

    Args:
        node: Root node of the tree
        traversal_order: 'breadth_first' (default) or 'depth_first'

    Returns:
        List of all nodes in the tree
    """
    if traversal_order == 'breadth_first':
        return _breadth_first_traversal(node)
    elif traversal_order == 'depth_first':
        return _depth_first_traversal(node)
    else:
        raise ValueError(f"Invalid traversal_order: {traversal_order}")


def _breadth_first_traversal(node: Node) -> List[Node]:
    nodes_to_visit = [node]
    all_nodes = []

    while nodes_to_visit:
        current_node = nodes_to_visit.pop(0)  # FIFO for breadth-first
        all_nodes.append(current_node)
        nodes_to_visit.extend(current_node.children())

    return all_nodes


def _depth_first_traversal(node: Node) -> List[Node]:
    nodes = [node]
    for child in node.children():
        nodes.extend(_depth_first_traversal(child))
    return nodes


def calculate_tree_depth(node: Node) -> int:
    """Maximum depth of the tree (leaf nodes have depth 1)"""
    if isinstance(node, (ConstantNode, VariableNode)):
        return 1
    elif isinstance(node, UnaryOpNode):
        return 1 + calculate_tree_depth(node.operand)
    elif isinstance(node, (BinaryOpNode, ComparisonNode)):
        return 1 + max(calculate_tree_depth(node.left), calculate_tree_depth(node.right))
    elif isinstance(node, ConditionalNode):
        return 1 + max(calculate_tree_depth(child) for child in node.children())
    else:
        return 1


def find_nodes_by_type(node: Node, node_type: Type[T]) -> List[T]:
    return [n for n in get_all_nodes(node) if isinstance(n, node_type)]


def find_nodes_by_operator(node: Node, operator: str) -> List[Node]:
    """Binary, unary or comparison nodes carrying the given operator"""
    return [n for n in get_all_nodes(node)
            if isinstance(n, (BinaryOpNode, UnaryOpNode, ComparisonNode)) and n.operator == operator]


def get_constants(node: Node) -> List[ConstantNode]:
    return find_nodes_by_type(node, ConstantNode)


def get_variables(node: Node) -> List[VariableNode]:
    return find_nodes_by_type(node, VariableNode)


def contains_variable(node: Node, variable: Union[str, VariableNode]) -> bool:
    return variable_name(variable) in node.variable_names()


def flatten_product(node: Node) -> List[Node]:
    """Factors of a nested product, left to right: ((a*b)*c) -> [a, b, c]"""
    if isinstance(node, BinaryOpNode) and node.operator == '*':
        return flatten_product(node.left) + flatten_product(node.right)
    return [node]


def build_product(factors: List[Node]) -> Node:
    """
    Multiply factors back together with every constant merged into a single
    leading coefficient and negations pulled into that coefficient.

        [x, 2, -(exp(x)), 3] -> ((-6) * (x * exp(x)))
    """
    coefficient = 1.0
    remaining: List[Node] = []

    for factor in factors:
        for part in flatten_product(factor):
            while isinstance(part, UnaryOpNode) and part.operator == 'neg':
                coefficient = -coefficient
                part = part.operand
            if isinstance(part, ConstantNode):
                coefficient *= part.value
            else:
                remaining.append(part)

    if coefficient == 0 or not remaining:
        return ConstantNode(coefficient)

    product = remaining[0]
    for factor in remaining[1:]:
        product = BinaryOpNode('*', product, factor)

    if coefficient == 1:
        return product
    if coefficient == -1:
        return UnaryOpNode('neg', product)
    return BinaryOpNode('*', ConstantNode(coefficient), product)


def substitute(node: Node, old, new) -> Node:
    """Replace every occurrence of `old` (a node, or a variable name) with `new`"""
    return node.substitute(as_node(old), as_node(new))
