from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Optional

from ...exceptions import UnsupportedExpression, EvaluationError
from ...expression_tree.core.node import Node, VariableNode, BinaryOpNode, ConstantNode


class StrategyKind(IntEnum):
  """Strategy priority: lower values are tried first"""
  POWER_RULE = 0
  BASIC_TRIG = 1
  EXPONENTIAL = 2
  CONSTANT_MULTIPLE = 3
  SUBSTITUTION = 4
  INTEGRATION_BY_PARTS = 5
  SUM_DIFFERENCE = 6


class IntegrationStrategy(ABC):
  """
  A single integration technique.

  Strategies are stateless. `try_integrate` returns an antiderivative, or None
  when the technique does not apply; sub-integrals go back through the
  pipeline that invoked the strategy.
  """

  name: str = 'strategy'
  kind: StrategyKind

  @abstractmethod
  def try_integrate(self, node: Node, variable: str, pipeline=None) -> Optional[Node]:
    pass

  def __repr__(self) -> str:
    return f"{type(self).__name__}()"


def integrate_with(pipeline, node: Node, variable: str) -> Node:
  """Integrate through `pipeline`, or the shared default pipeline when None"""
  if pipeline is None:
    from ..integration import DEFAULT_PIPELINE
    pipeline = DEFAULT_PIPELINE
  return pipeline.integrate(node, variable)


def try_sub_integral(pipeline, node: Node, variable: str) -> Optional[Node]:
  try:
    return integrate_with(pipeline, node, variable)
  except (UnsupportedExpression, EvaluationError):
    return None


def is_variable(node: Node, variable: str) -> bool:
  return isinstance(node, VariableNode) and node.name == variable


def is_power_of(node: Node, variable: str) -> bool:
  """variable ^ exponent with an exponent free of the variable"""
  return (isinstance(node, BinaryOpNode) and node.operator == '^'
          and is_variable(node.base, variable)
          and not node.exponent.contains_variable(variable))


def constant_value(node: Node) -> Optional[float]:
  """Literal value, else the closed-form value of a variable-free node, else None"""
  if isinstance(node, ConstantNode):
    return node.value
  try:
    return node.evaluate()
  except EvaluationError:
    return None
