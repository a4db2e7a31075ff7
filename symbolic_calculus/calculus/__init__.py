"""Symbolic differentiation and integration."""

from .differentiation import differentiate, DERIVATIVE_TABLE
from .integration import (
    SymbolicIntegration, DEFAULT_STRATEGIES, DEFAULT_PIPELINE, DEFAULT_MAX_DEPTH, integrate
)
from .strategies import (
    IntegrationStrategy, StrategyKind, PowerRuleStrategy, BasicTrigStrategy,
    ExponentialStrategy, ConstantMultipleStrategy, SubstitutionStrategy,
    IntegrationByPartsStrategy, SumDifferenceStrategy
)
from .symbolic_calculus import SymbolicCalculus
from .hybrid import HybridCalculus

__all__ = [
    'differentiate', 'DERIVATIVE_TABLE',
    'SymbolicIntegration', 'DEFAULT_STRATEGIES', 'DEFAULT_PIPELINE', 'DEFAULT_MAX_DEPTH', 'integrate',
    'IntegrationStrategy', 'StrategyKind', 'PowerRuleStrategy', 'BasicTrigStrategy',
    'ExponentialStrategy', 'ConstantMultipleStrategy', 'SubstitutionStrategy',
    'IntegrationByPartsStrategy', 'SumDifferenceStrategy',
    'SymbolicCalculus', 'HybridCalculus'
]
