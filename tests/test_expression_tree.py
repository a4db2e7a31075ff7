import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest

from symbolic_calculus import Expression, EvaluationError, UnboundVariableError
from symbolic_calculus.expression_tree import (
    ConstantNode, BinaryOpNode, UnaryOpNode, ExpressionSimplifier, SymPySimplifier
)
from symbolic_calculus.expression_tree.builders import (
    var, const, add, sub, mul, div, power, neg, sin, cos, exp, ln,
    less_than, greater_than, conditional, as_node
)
from symbolic_calculus.expression_tree.utils import (
    from_sympy, are_equivalent, flatten_product, build_product, get_all_nodes,
    calculate_tree_depth, get_constants, find_nodes_by_operator
)

x = var('x')
y = var('y')


def test_canonical_strings():
    assert str(mul(const(2), sin(x))) == "(2 * sin(x))"
    assert str(neg(x)) == "(-x)"
    assert str(power(x, 2.0)) == "(x ^ 2)"
    assert str(const(0.5)) == "0.5"
    assert str(conditional(greater_than(x, 0), x, neg(x))) == "((x > 0) ? x : (-x))"
    assert str(const(-2)) == "-2"
    assert str(power(const(-2), x)) == "((-2) ^ x)"
    assert str(power(x, -1)) == "(x ^ (-1))"
    assert str(less_than(x, -1)) == "(x < (-1))"


def test_nodes_are_immutable():
    node = add(x, 1)
    with pytest.raises(AttributeError):
        node.operator = '-'
    with pytest.raises(AttributeError):
        x.name = 'y'
    with pytest.raises(AttributeError):
        const(1).value = 2.0


def test_constructor_validation():
    with pytest.raises(ValueError):
        BinaryOpNode('%', x, y)
    with pytest.raises(ValueError):
        UnaryOpNode('cosh', x)
    with pytest.raises(TypeError):
        BinaryOpNode('+', x, 1)
    with pytest.raises(ValueError):
        ConstantNode(float('inf'))
    with pytest.raises(TypeError):
        as_node(True)


def test_scalar_evaluation():
    value = add(power(x, 2), 1).evaluate({'x': 3})
    assert isinstance(value, float)
    assert value == 10.0
    assert mul(x, y).evaluate({x: 2, 'y': 4}) == 8.0
    assert np.isclose(sin(x).evaluate({'x': np.pi / 2}), 1.0)


def test_array_evaluation():
    values = add(power(x, 2), 1).evaluate({'x': np.array([1.0, 2.0, 3.0])})
    assert np.allclose(values, [2.0, 5.0, 10.0])

    absolute = conditional(greater_than(x, 0), x, neg(x))
    assert np.allclose(absolute.evaluate({'x': np.array([-2.0, 3.0])}), [2.0, 3.0])
    assert absolute.evaluate({'x': -4}) == 4.0


def test_evaluation_errors():
    with pytest.raises(EvaluationError):
        div(1, x).evaluate({'x': 0})
    with pytest.raises(EvaluationError):
        ln(x).evaluate({'x': -1})
    with pytest.raises(UnboundVariableError) as excinfo:
        add(x, y).evaluate({'x': 1})
    assert excinfo.value.name == 'y'
    assert isinstance(excinfo.value, ValueError)


def test_comparison_evaluates_to_indicator():
    assert less_than(x, 1).evaluate({'x': 0}) == 1.0
    assert less_than(x, 1).evaluate({'x': 2}) == 0.0


def test_structural_equality_and_hash():
    assert const(2) == const(2.0)
    assert hash(const(2)) == hash(const(2.0))
    assert add(x, 1) == add(var('x'), const(1))
    assert add(x, 1) != add(1, x)
    assert len({sin(x), sin(var('x')), cos(x)}) == 2


def test_operator_overloads_build_raw_nodes():
    node = 2 * x + 1
    assert isinstance(node, BinaryOpNode)
    assert str(node) == "((2 * x) + 1)"
    assert str(x ** 2) == "(x ^ 2)"
    assert str(-x) == "(-x)"
    assert str(1 - x / 'y') == "(1 - (x / y))"


def test_variable_terms():
    node = add(mul(x, y), sin(var('z')))
    assert node.get_variable_terms() == frozenset({x, y, var('z')})
    assert node.contains_variable('y')
    assert not node.contains_variable(var('w'))
    assert const(3).get_variable_terms() == frozenset()


def test_size_depth_and_substitute():
    node = add(x, mul(2, y))
    assert node.size() == 5
    assert node.depth() == 3
    assert calculate_tree_depth(node) == 3
    assert str(node.substitute('y', add(x, 1))) == "(x + (2 * (x + 1)))"
    assert node.substitute(var('w'), 1) is node


def test_structural_simplifier():
    simplify = ExpressionSimplifier.simplify
    assert simplify(add(mul(x, 1), 0)) == x
    assert simplify(sub(x, x)) == const(0)
    assert str(simplify(mul(x, 3))) == "(3 * x)"
    assert str(simplify(mul(2, mul(3, x)))) == "(6 * x)"
    assert str(simplify(mul(-1, x))) == "(-x)"
    assert simplify(cos(0)) == const(1)
    assert simplify(ln(1)) == const(0)
    assert simplify(sin(1)) == sin(1)
    assert simplify(neg(neg(x))) == x
    assert simplify(power(x, 1)) == x
    assert simplify(power(x, 0)) == const(1)
    assert simplify(div(0, x)) == const(0)
    assert simplify(div(x, x)) == const(1)
    assert simplify(conditional(less_than(1, 2), x, y)) == x
    assert x.simplify() is x


def test_simplifier_keeps_undefined_constants():
    node = div(1, 0)
    assert ExpressionSimplifier.simplify(node) == node


def test_tree_utils():
    a, b, c = var('a'), var('b'), var('c')
    assert flatten_product(mul(mul(a, b), c)) == [a, b, c]
    product = build_product([x, const(2), neg(exp(x)), const(3)])
    assert str(product) == "((-6) * (x * exp(x)))"
    assert build_product([const(2), const(0.5)]) == const(1)
    assert build_product([neg(x)]) == neg(x)
    assert len(get_all_nodes(add(x, mul(2, y)))) == 5
    assert get_constants(add(x, mul(2, y))) == [const(2)]
    assert len(find_nodes_by_operator(add(x, add(y, 1)), '+')) == 2


def test_sympy_round_trip():
    node = add(mul(2, x), div(sin(x), power(x, 3)))
    back = from_sympy(node.to_sympy())
    for point in (0.3, 0.7, 1.9):
        assert np.isclose(back.evaluate({'x': point}), node.evaluate({'x': point}))
    assert are_equivalent(mul(2, x), add(x, x))
    assert not are_equivalent(mul(2, x), power(x, 2))


def test_parse_standard_syntax():
    assert Expression.from_string("x^2 + 2*x").evaluate(x=3) == 15.0
    assert np.isclose(Expression.from_string("sin(2x)").evaluate(x=0.5), np.sin(1.0))
    assert np.isclose(Expression.from_string("e^x + ln(x)").evaluate(x=2.0), np.exp(2.0) + np.log(2.0))
    assert np.isclose(Expression.from_string("pi * x**2").evaluate(x=1.0), np.pi)


def test_parse_rejects_bad_input():
    for text in ("", "x +", "sin(x", "floor(x)"):
        with pytest.raises(ValueError):
            Expression.from_string(text)


def test_expression_facade():
    expression = Expression(add(power(x, 2), y))
    assert expression.get_variables() == ['x', 'y']
    assert expression.to_string() == "((x ^ 2) + y)"
    assert expression == Expression(add(power(x, 2), y))
    assert expression.differentiate('x').evaluate(x=2, y=0) == 4.0
    assert Expression(power(x, 2)).to_latex() == "x^{2}"
    compiled = Expression(mul(x, y)).lambdify(['x', 'y'])
    assert compiled(2.0, 3.0) == 6.0


def test_sympy_simplifier_picks_least_complex():
    node = add(power(sin(x), 2), power(cos(x), 2))
    result = SymPySimplifier().simplify_expression(node)
    assert result['simplified'] == const(1)
    assert result['complexity_reduction'] > 0
    assert Expression(node).simplify(advanced=True).root == const(1)


if __name__ == "__main__":
    test_canonical_strings()
    test_scalar_evaluation()
    test_structural_simplifier()
    print("Expression tree tests passed")
