import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest

from symbolic_calculus.calculus import differentiate, DERIVATIVE_TABLE
from symbolic_calculus.expression_tree import Node, ConstantNode
from symbolic_calculus.expression_tree.builders import (
    var, const, add, sub, mul, div, power, neg, sin, cos, tan, sec, csc, cot,
    exp, ln, sqrt, asin, acos, atan, conditional, greater_than, less_than
)

x = var('x')
y = var('y')


def numeric_derivative(node, point, h=1e-5, **others):
    plus = node.evaluate({'x': point + h, **others})
    minus = node.evaluate({'x': point - h, **others})
    return (plus - minus) / (2 * h)


def test_leaves():
    assert differentiate(const(5), 'x') == ConstantNode(0)
    assert differentiate(x, 'x') == ConstantNode(1)
    assert differentiate(y, 'x') == ConstantNode(0)
    assert differentiate(x, var('x')) == ConstantNode(1)


def test_linear_rules_are_structural():
    assert str(differentiate(add(x, y), 'x')) == "(1 + 0)"
    assert str(differentiate(sub(x, 3), 'x')) == "(1 - 0)"
    assert str(differentiate(mul(x, y), 'x')) == "((1 * y) + (x * 0))"
    assert str(differentiate(neg(x), 'x')) == "(-1)"


def test_quotient_rule():
    node = div(x, add(x, 1))
    assert np.isclose(differentiate(node, 'x').evaluate({'x': 1.0}), 0.25)


def test_power_rule_spot_checks():
    assert differentiate(power(x, 3), 'x').evaluate({'x': 2}) == 12.0
    assert np.isclose(differentiate(sin(mul(2, x)), 'x').evaluate({'x': 0}), 2.0)
    assert str(differentiate(power(x, 3), 'x')) == "((3 * (x ^ 2)) * 1)"


def test_power_with_symbolic_exponent():
    node = power(x, y)
    assert str(differentiate(node, 'x')) == "((y * (x ^ (y - 1))) * 1)"
    assert np.isclose(differentiate(node, 'x').evaluate({'x': 2.0, 'y': 3.0}), 12.0)


def test_exponential_base():
    node = power(2, x)
    assert np.isclose(differentiate(node, 'x').evaluate({'x': 1.0}), 2 * np.log(2))


def test_variable_base_and_exponent():
    node = power(x, x)
    derivative = differentiate(node, 'x')
    assert np.isclose(derivative.evaluate({'x': 2.0}), 4 * (np.log(2) + 1))
    assert derivative.evaluate({'x': 2.0}) != 0


@pytest.mark.parametrize('function', [sin, cos, tan, sec, csc, cot, exp, ln, sqrt, asin, acos, atan])
def test_derivative_table_matches_finite_differences(function):
    node = function(mul(2, x))
    symbolic = differentiate(node, 'x').evaluate({'x': 0.3})
    assert np.isclose(symbolic, numeric_derivative(node, 0.3), rtol=1e-6)


def test_derivative_table_covers_every_function():
    assert set(DERIVATIVE_TABLE) == {
        'sin', 'cos', 'tan', 'sec', 'csc', 'cot', 'exp', 'ln', 'sqrt', 'asin', 'acos', 'atan'
    }


def test_partial_derivatives_hold_other_variables_constant():
    node = mul(x, power(y, 2))
    assert differentiate(node, 'y').evaluate({'x': 3.0, 'y': 2.0}) == 12.0
    assert differentiate(node, 'x').evaluate({'x': 3.0, 'y': 2.0}) == 4.0
    assert differentiate(power(y, 2), 'x').evaluate({'y': 3.0}) == 0.0


def test_conditional_differentiates_branches():
    node = conditional(greater_than(x, 0), power(x, 2), neg(x))
    derivative = differentiate(node, 'x')
    assert derivative.condition == node.condition
    assert derivative.evaluate({'x': 2.0}) == 4.0
    assert derivative.evaluate({'x': -1.0}) == -1.0


def test_comparison_differentiates_to_zero():
    assert differentiate(less_than(x, 1), 'x') == ConstantNode(0)


def test_unknown_node_is_a_type_error():
    with pytest.raises(TypeError):
        differentiate("x", 'x')


def test_total_over_catalogue():
    catalogue = [
        const(1), x, y, add(x, y), sub(mul(x, x), y), div(sin(x), cos(x)),
        power(x, x), power(y, x), power(x, y), neg(exp(ln(x))),
        sqrt(add(power(x, 2), 1)), atan(div(1, x)),
        conditional(less_than(x, y), asin(x), acos(x)),
    ]
    for node in catalogue:
        before = str(node)
        assert isinstance(differentiate(node, 'x'), Node)
        assert str(node) == before


def test_node_method_delegates():
    assert power(x, 2).differentiate('x').evaluate({'x': 3}) == 6.0
    simplified = power(x, 3).differentiate('x').simplify()
    assert str(simplified) == "(3 * (x ^ 2))"


if __name__ == "__main__":
    test_leaves()
    test_power_rule_spot_checks()
    test_variable_base_and_exponent()
    print("Differentiation tests passed")
