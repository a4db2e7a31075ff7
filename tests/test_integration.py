import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest

from symbolic_calculus import UnsupportedExpression
from symbolic_calculus.calculus import (
    integrate, differentiate, SymbolicIntegration, DEFAULT_STRATEGIES, DEFAULT_PIPELINE,
    StrategyKind, PowerRuleStrategy, BasicTrigStrategy, ExponentialStrategy,
    ConstantMultipleStrategy, SubstitutionStrategy, IntegrationByPartsStrategy,
    SumDifferenceStrategy
)
from symbolic_calculus.expression_tree.builders import (
    var, const, add, sub, mul, div, power, neg, sin, cos, sec, csc, exp
)

x = var('x')
y = var('y')

SAMPLE_POINTS = (0.25, 0.5, 0.8, 1.3)


def assert_antiderivative(integrand, antiderivative):
    """d/dx of the antiderivative agrees with the integrand at sample points"""
    derivative = differentiate(antiderivative, 'x')
    for point in SAMPLE_POINTS:
        assert np.isclose(derivative.evaluate({'x': point}), integrand.evaluate({'x': point}),
                          rtol=1e-9, atol=1e-12)


def test_strategy_order_is_fixed():
    kinds = [strategy.kind for strategy in DEFAULT_STRATEGIES]
    assert kinds == sorted(kinds)
    assert [type(strategy) for strategy in DEFAULT_STRATEGIES] == [
        PowerRuleStrategy, BasicTrigStrategy, ExponentialStrategy, ConstantMultipleStrategy,
        SubstitutionStrategy, IntegrationByPartsStrategy, SumDifferenceStrategy
    ]
    assert StrategyKind.POWER_RULE < StrategyKind.SUBSTITUTION < StrategyKind.SUM_DIFFERENCE


def test_power_rule():
    assert str(integrate(x, 'x')) == "((x ^ 2) / 2)"
    assert str(integrate(power(x, 3), 'x')) == "((x ^ 4) / 4)"
    assert str(integrate(power(x, -1), 'x')) == "ln(x)"
    assert str(integrate(const(5), 'x')) == "(5 * x)"
    assert str(integrate(y, 'x')) == "(y * x)"
    assert str(integrate(mul(3, power(x, 2)), 'x')) == "(3 * ((x ^ 3) / 3))"
    assert str(integrate(power(x, add(1, 1)), 'x')) == "((x ^ 3) / 3)"
    assert str(integrate(div(3, power(x, add(1, 1))), 'x')) == "(3 * ((x ^ (-1)) / (-1)))"


def test_power_rule_needs_a_constant_exponent():
    assert PowerRuleStrategy().try_integrate(power(x, y), 'x') is None
    with pytest.raises(UnsupportedExpression):
        integrate(power(x, y), 'x')


def test_power_rule_reciprocals():
    assert str(integrate(div(1, x), 'x')) == "ln(x)"
    assert str(integrate(div(2, x), 'x')) == "(2 * ln(x))"
    assert str(integrate(div(1, power(x, 2)), 'x')) == "((x ^ (-1)) / (-1))"
    assert str(integrate(div(1, power(x, 1)), 'x')) == "ln(x)"
    assert str(integrate(div(3, power(x, 3)), 'x')) == "(3 * ((x ^ (-2)) / (-2)))"


def test_basic_trig():
    assert str(integrate(sin(x), 'x')) == "(-cos(x))"
    assert str(integrate(cos(x), 'x')) == "sin(x)"
    assert str(integrate(power(sec(x), 2), 'x')) == "tan(x)"
    assert str(integrate(power(csc(x), 2), 'x')) == "(-cot(x))"


def test_exponential():
    assert str(integrate(exp(x), 'x')) == "exp(x)"
    assert str(integrate(power(2, x), 'x')) == "((2 ^ x) / ln(2))"
    assert str(integrate(power(1, x), 'x')) == "x"


def test_exponential_rejects_non_positive_bases():
    assert ExponentialStrategy().try_integrate(power(const(-2), x), 'x') is None
    assert ExponentialStrategy().try_integrate(power(const(0), x), 'x') is None
    with pytest.raises(UnsupportedExpression):
        integrate(power(const(-2), x), 'x')
    with pytest.raises(UnsupportedExpression):
        integrate(power(const(0), x), 'x')


def test_constant_multiple():
    assert str(integrate(neg(sin(x)), 'x')) == "(-(-cos(x)))"
    assert str(integrate(div(sin(x), 2), 'x')) == "((-cos(x)) / 2)"
    assert str(integrate(mul(cos(x), y), 'x')) == "(y * sin(x))"


def test_select_strategy():
    assert isinstance(DEFAULT_PIPELINE.select_strategy(x, 'x'), PowerRuleStrategy)
    assert isinstance(DEFAULT_PIPELINE.select_strategy(exp(x), 'x'), ExponentialStrategy)
    assert isinstance(DEFAULT_PIPELINE.select_strategy(neg(sin(x)), 'x'), ConstantMultipleStrategy)
    assert isinstance(DEFAULT_PIPELINE.select_strategy(exp(mul(3, x)), 'x'), SubstitutionStrategy)
    assert isinstance(DEFAULT_PIPELINE.select_strategy(mul(x, exp(x)), 'x'), IntegrationByPartsStrategy)
    assert isinstance(DEFAULT_PIPELINE.select_strategy(add(x, cos(x)), 'x'), SumDifferenceStrategy)
    assert DEFAULT_PIPELINE.select_strategy(mul(sin(x), cos(x)), 'x') is None


def test_substitution_exact_match():
    integrand = mul(mul(2, x), sin(power(x, 2)))
    result = integrate(integrand, 'x')
    assert str(result) == "(-cos((x ^ 2)))"
    assert_antiderivative(integrand, result)


def test_substitution_scales_by_constant_ratio():
    integrand = mul(x, cos(power(x, 2)))
    result = integrate(integrand, 'x')
    assert str(result) == "(0.5 * sin((x ^ 2)))"
    assert_antiderivative(integrand, result)

    lone = exp(mul(3, x))
    assert_antiderivative(lone, integrate(lone, 'x'))


def test_substitution_numeric_fallback_is_opt_in():
    integrand = mul(add(x, x), cos(power(x, 2)))
    with pytest.raises(UnsupportedExpression):
        integrate(integrand, 'x')

    sampling = SymbolicIntegration(tuple(
        SubstitutionStrategy(numeric_fallback=True) if strategy.kind == StrategyKind.SUBSTITUTION
        else strategy
        for strategy in DEFAULT_STRATEGIES
    ))
    assert str(sampling.integrate(integrand, 'x')) == "sin((x ^ 2))"


def test_integration_by_parts():
    assert str(integrate(mul(x, exp(x)), 'x')) == "((x * exp(x)) - exp(x))"
    assert str(integrate(mul(exp(x), x), 'x')) == "((x * exp(x)) - exp(x))"
    for integrand in (mul(x, sin(x)), mul(x, cos(x)), mul(power(x, 2), exp(x)),
                      mul(power(x, 2), cos(x)), mul(x, sin(mul(2, x)))):
        assert_antiderivative(integrand, integrate(integrand, 'x'))


def test_sum_and_difference():
    assert str(integrate(add(x, cos(x)), 'x')) == "(((x ^ 2) / 2) + sin(x))"
    assert str(integrate(sub(x, sin(x)), 'x')) == "(((x ^ 2) / 2) - (-cos(x)))"
    with pytest.raises(UnsupportedExpression):
        integrate(add(x, mul(sin(x), cos(x))), 'x')


def test_unsupported_expression_is_explicit():
    with pytest.raises(UnsupportedExpression) as excinfo:
        integrate(mul(sin(x), cos(x)), 'x')
    assert "Cannot symbolically integrate" in str(excinfo.value)
    assert "numerical integration" in str(excinfo.value)
    assert excinfo.value.variable == 'x'

    with pytest.raises(UnsupportedExpression):
        integrate(power(x, x), 'x')
    assert DEFAULT_PIPELINE.try_integrate(mul(sin(x), cos(x)), 'x') is None


def test_integration_is_deterministic():
    integrand = add(mul(x, exp(x)), mul(mul(2, x), sin(power(x, 2))))
    first = integrate(integrand, 'x')
    second = integrate(integrand, var('x'))
    assert first == second
    assert str(first) == str(second)


def test_depth_limit():
    shallow = SymbolicIntegration(max_depth=1)
    with pytest.raises(UnsupportedExpression):
        shallow.integrate(add(x, x), 'x')
    assert str(SymbolicIntegration().integrate(add(x, x), 'x')) == "(((x ^ 2) / 2) + ((x ^ 2) / 2))"
    with pytest.raises(ValueError):
        SymbolicIntegration(max_depth=0)


def test_node_method_delegates():
    assert str(sin(x).integrate('x')) == "(-cos(x))"


@pytest.mark.parametrize('integrand', [
    x, power(x, 3), const(5), sin(x), cos(x), exp(x), power(2, x),
    mul(3, power(x, 2)), div(1, x), div(1, power(x, 2)),
    power(sec(x), 2), power(csc(x), 2), neg(sin(x)), div(sin(x), 2),
    mul(x, exp(x)), mul(x, sin(x)), mul(x, cos(x)), mul(power(x, 2), exp(x)),
    mul(mul(2, x), sin(power(x, 2))), mul(x, cos(power(x, 2))), exp(mul(3, x)),
    cos(add(mul(4, x), 1)), add(x, cos(x)), sub(power(x, 2), exp(x)),
])
def test_derivative_of_antiderivative_recovers_integrand(integrand):
    assert_antiderivative(integrand, integrate(integrand, 'x'))


if __name__ == "__main__":
    test_power_rule()
    test_substitution_exact_match()
    test_integration_by_parts()
    print("Integration tests passed")
