"""
Symbolic integration pipeline.

Strategies are tried in `StrategyKind` order and the first one that returns a
result wins; there is no backtracking. When every strategy declines, the
pipeline raises `UnsupportedExpression` so the caller can fall back to
numerical integration.
"""

import threading
from typing import Optional, Sequence, Tuple, Union

from ..exceptions import UnsupportedExpression
from ..expression_tree.core.node import Node, VariableNode, as_node, variable_name
from ..logging_system import log_debug
from .strategies import (
  IntegrationStrategy, PowerRuleStrategy, BasicTrigStrategy, ExponentialStrategy,
  ConstantMultipleStrategy, SubstitutionStrategy, IntegrationByPartsStrategy,
  SumDifferenceStrategy
)

DEFAULT_MAX_DEPTH = 32

DEFAULT_STRATEGIES: Tuple[IntegrationStrategy, ...] = tuple(sorted((
  PowerRuleStrategy(),
  BasicTrigStrategy(),
  ExponentialStrategy(),
  ConstantMultipleStrategy(),
  SubstitutionStrategy(),
  IntegrationByPartsStrategy(),
  SumDifferenceStrategy(),
), key=lambda strategy: strategy.kind))


class SymbolicIntegration:
  """Ordered, greedy integration pipeline"""

  def __init__(self, strategies: Sequence[IntegrationStrategy] = DEFAULT_STRATEGIES,
               max_depth: int = DEFAULT_MAX_DEPTH):
    if max_depth < 1:
      raise ValueError("max_depth must be positive")
    self.strategies: Tuple[IntegrationStrategy, ...] = tuple(strategies)
    self.max_depth = max_depth
    self._local = threading.local()

  def integrate(self, node, variable: Union[str, VariableNode]) -> Node:
    """
    Antiderivative of `node` with respect to `variable` (no constant of integration).

    Raises:
        UnsupportedExpression: no strategy applies, or nesting exceeded max_depth
    """
    node = as_node(node)
    name = variable_name(variable)

    depth = getattr(self._local, 'depth', 0)
    if depth >= self.max_depth:
      raise UnsupportedExpression(
        node, name, f"Integration depth limit ({self.max_depth}) reached for: {node}")

    self._local.depth = depth + 1
    try:
      for strategy in self.strategies:
        log_debug(f"[{depth}] {strategy.name}: trying {node} d{name}")
        result = strategy.try_integrate(node, name, self)
        if result is not None:
          log_debug(f"[{depth}] {strategy.name}: {node} -> {result}")
          return result
    finally:
      self._local.depth = depth

    raise UnsupportedExpression(node, name)

  def try_integrate(self, node, variable: Union[str, VariableNode]) -> Optional[Node]:
    """Like `integrate`, but None instead of UnsupportedExpression"""
    try:
      return self.integrate(node, variable)
    except UnsupportedExpression:
      return None

  def select_strategy(self, node, variable: Union[str, VariableNode]) -> Optional[IntegrationStrategy]:
    """The strategy that claims `node`, or None when none does"""
    node = as_node(node)
    name = variable_name(variable)
    for strategy in self.strategies:
      if strategy.try_integrate(node, name, self) is not None:
        return strategy
    return None


DEFAULT_PIPELINE = SymbolicIntegration()


def integrate(node, variable: Union[str, VariableNode]) -> Node:
  """Integrate with the shared default pipeline"""
  return DEFAULT_PIPELINE.integrate(node, variable)
