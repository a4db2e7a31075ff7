"""Integration strategies, one technique per class."""

from .base import IntegrationStrategy, StrategyKind
from .power_rule import PowerRuleStrategy
from .trigonometric import BasicTrigStrategy, ExponentialStrategy
from .constant_multiple import ConstantMultipleStrategy
from .substitution import SubstitutionStrategy
from .by_parts import IntegrationByPartsStrategy
from .sum_difference import SumDifferenceStrategy

__all__ = [
    'IntegrationStrategy', 'StrategyKind',
    'PowerRuleStrategy', 'BasicTrigStrategy', 'ExponentialStrategy',
    'ConstantMultipleStrategy', 'SubstitutionStrategy',
    'IntegrationByPartsStrategy', 'SumDifferenceStrategy'
]
