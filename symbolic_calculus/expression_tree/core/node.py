import numpy as np
import sympy as sp
from abc import ABC, abstractmethod
from typing import Optional, Dict, FrozenSet, Mapping, Tuple, Union
from .operators import (
  NodeType, BINARY_OP_MAP, UNARY_OP_MAP, COMPARISON_OP_MAP,
  as_float_array, evaluate_binary_op, evaluate_unary_op, evaluate_comparison_op
)
from ...exceptions import EvaluationError, UnboundVariableError

Bindings = Optional[Mapping[Union[str, 'VariableNode'], object]]

# Lazily computed per-node caches; the only attributes that may be written
# after construction.
_CACHE_SLOTS = frozenset(('_hash_cache', '_size_cache', '_variables_cache', '_string_cache'))

_SYMPY_FUNCTIONS = {
  'sin': sp.sin, 'cos': sp.cos, 'tan': sp.tan,
  'sec': sp.sec, 'csc': sp.csc, 'cot': sp.cot,
  'exp': sp.exp, 'ln': sp.log, 'sqrt': sp.sqrt,
  'asin': sp.asin, 'acos': sp.acos, 'atan': sp.atan,
}

_SYMPY_RELATIONS = {
  '<': sp.Lt, '<=': sp.Le, '>': sp.Gt, '>=': sp.Ge, '==': sp.Eq, '!=': sp.Ne,
}


def format_number(value: float) -> str:
  """Integral values print without a decimal point so 2 and 2.0 render alike"""
  value = float(value)
  if value.is_integer() and abs(value) < 1e15:
    return str(int(value))
  return repr(value)


def _operand_string(node: 'Node') -> str:
  """Negative literals are parenthesized inside operators: (x ^ (-1)), not (x ^ -1)"""
  if isinstance(node, ConstantNode) and node.value < 0:
    return f"({node.to_string()})"
  return node.to_string()


def variable_name(variable) -> str:
  if isinstance(variable, VariableNode):
    return variable.name
  if isinstance(variable, str) and variable:
    return variable
  raise TypeError(f"Expected a variable name or VariableNode, got {type(variable).__name__}")


def as_node(value) -> 'Node':
  """Promote numbers to constants and strings to variables"""
  if isinstance(value, Node):
    return value
  if isinstance(value, str):
    return VariableNode(value)
  if isinstance(value, (bool, np.bool_)):
    raise TypeError("Booleans cannot be used as expression values")
  if isinstance(value, (int, float, np.integer, np.floating)):
    return ConstantNode(value)
  raise TypeError(f"Cannot convert value of type {type(value).__name__} to an expression node")


def _normalize_bindings(bindings: Bindings) -> Tuple[Dict[str, np.ndarray], bool]:
  values: Dict[str, np.ndarray] = {}
  scalar = True
  for key, value in (bindings or {}).items():
    if np.ndim(value) > 0:
      scalar = False
    values[variable_name(key)] = as_float_array(value)
  return values, scalar


def _broadcast(left_val: np.ndarray, right_val: np.ndarray):
  left_val, right_val = np.broadcast_arrays(left_val, right_val)
  return (np.ascontiguousarray(left_val, dtype=np.float64),
          np.ascontiguousarray(right_val, dtype=np.float64))


class Node(ABC):
  """Immutable expression tree node with cached hash, size and variable set"""

  __slots__ = ('_hash_cache', '_size_cache', '_variables_cache', '_string_cache')

  def __init__(self):
    self._hash_cache: Optional[int] = None
    self._size_cache: Optional[int] = None
    self._variables_cache: Optional[FrozenSet[str]] = None
    self._string_cache: Optional[str] = None

  def __setattr__(self, name, value):
    if name not in _CACHE_SLOTS and hasattr(self, name):
      raise AttributeError(f"{type(self).__name__} is immutable; cannot reassign '{name}'")
    object.__setattr__(self, name, value)

  def __delattr__(self, name):
    raise AttributeError(f"{type(self).__name__} is immutable; cannot delete '{name}'")

  # Evaluation

  def evaluate(self, bindings: Bindings = None):
    """
    Evaluate the expression numerically.

    Args:
        bindings: mapping of variable names (or VariableNodes) to numbers or arrays

    Returns:
        float when every binding is a scalar, otherwise a float64 array

    Raises:
        UnboundVariableError: a free variable has no binding
        EvaluationError: the value is undefined (division by zero, log of a
            non-positive number, overflow, ...)
    """
    values, scalar = _normalize_bindings(bindings)
    with np.errstate(all='ignore'):
      result = np.asarray(self._evaluate(values), dtype=np.float64)
    if not np.all(np.isfinite(result)):
      raise EvaluationError(f"Expression {self.to_string()} is undefined for the given bindings")
    if scalar:
      return float(result.reshape(-1)[0])
    return result

  @abstractmethod
  def _evaluate(self, values: Dict[str, np.ndarray]) -> np.ndarray:
    pass

  # Structure

  @abstractmethod
  def children(self) -> Tuple['Node', ...]:
    pass

  @abstractmethod
  def with_children(self, children: Tuple['Node', ...]) -> 'Node':
    pass

  def size(self) -> int:
    """Node count"""
    if self._size_cache is None:
      self._size_cache = 1 + sum(child.size() for child in self.children())
    return self._size_cache

  def depth(self) -> int:
    children = self.children()
    if not children:
      return 1
    return 1 + max(child.depth() for child in children)

  def variable_names(self) -> FrozenSet[str]:
    if self._variables_cache is None:
      names = set()
      for child in self.children():
        names |= child.variable_names()
      self._variables_cache = frozenset(names)
    return self._variables_cache

  def get_variable_terms(self) -> FrozenSet['VariableNode']:
    """Free variables reachable from this node"""
    return frozenset(VariableNode(name) for name in self.variable_names())

  def contains_variable(self, variable) -> bool:
    return variable_name(variable) in self.variable_names()

  def substitute(self, old, new) -> 'Node':
    """Replace every occurrence of the subtree `old` with `new`"""
    old, new = as_node(old), as_node(new)
    if self == old:
      return new
    children = self.children()
    if not children:
      return self
    replaced = tuple(child.substitute(old, new) for child in children)
    if all(a is b for a, b in zip(replaced, children)):
      return self
    return self.with_children(replaced)

  # Calculus (delegated)

  def differentiate(self, variable) -> 'Node':
    from ...calculus.differentiation import differentiate
    return differentiate(self, variable)

  def integrate(self, variable) -> 'Node':
    from ...calculus.integration import integrate
    return integrate(self, variable)

  def simplify(self) -> 'Node':
    from ..utils.simplifier import ExpressionSimplifier
    return ExpressionSimplifier.simplify(self)

  # Rendering

  def to_string(self) -> str:
    if self._string_cache is None:
      self._string_cache = self._render()
    return self._string_cache

  @abstractmethod
  def _render(self) -> str:
    pass

  @abstractmethod
  def to_sympy(self) -> sp.Basic:
    pass

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"<{type(self).__name__} {self.to_string()}>"

  # Equality

  def __hash__(self) -> int:
    if self._hash_cache is None:
      self._hash_cache = self._compute_hash()
    return self._hash_cache

  @abstractmethod
  def _compute_hash(self) -> int:
    pass

  def __eq__(self, other) -> bool:
    if not isinstance(other, Node):
      return NotImplemented
    if self is other:
      return True
    if type(self) is not type(other) or hash(self) != hash(other):
      return False
    return self._same_fields(other) and self.children() == other.children()

  def _same_fields(self, other) -> bool:
    return True

  # Operator sugar: builds raw nodes, never simplifies

  def __add__(self, other):
    return BinaryOpNode('+', self, as_node(other))

  def __radd__(self, other):
    return BinaryOpNode('+', as_node(other), self)

  def __sub__(self, other):
    return BinaryOpNode('-', self, as_node(other))

  def __rsub__(self, other):
    return BinaryOpNode('-', as_node(other), self)

  def __mul__(self, other):
    return BinaryOpNode('*', self, as_node(other))

  def __rmul__(self, other):
    return BinaryOpNode('*', as_node(other), self)

  def __truediv__(self, other):
    return BinaryOpNode('/', self, as_node(other))

  def __rtruediv__(self, other):
    return BinaryOpNode('/', as_node(other), self)

  def __pow__(self, other):
    return BinaryOpNode('^', self, as_node(other))

  def __rpow__(self, other):
    return BinaryOpNode('^', as_node(other), self)

  def __neg__(self):
    return UnaryOpNode('neg', self)


class VariableNode(Node):
  __slots__ = ('name',)

  def __init__(self, name: str):
    super().__init__()
    if not isinstance(name, str) or not name:
      raise TypeError("Variable name must be a non-empty string")
    self.name = name

  def _evaluate(self, values):
    if self.name not in values:
      raise UnboundVariableError(self.name)
    return values[self.name]

  def children(self):
    return ()

  def with_children(self, children):
    return self

  def variable_names(self):
    if self._variables_cache is None:
      self._variables_cache = frozenset((self.name,))
    return self._variables_cache

  def _render(self) -> str:
    return self.name

  def to_sympy(self):
    return sp.Symbol(self.name)

  def _compute_hash(self) -> int:
    return hash((NodeType.VARIABLE, self.name))

  def _same_fields(self, other) -> bool:
    return self.name == other.name


class ConstantNode(Node):
  __slots__ = ('value',)

  def __init__(self, value: float):
    super().__init__()
    value = float(value)
    if not np.isfinite(value):
      raise ValueError(f"Constant must be finite, got {value}")
    self.value = value

  def _evaluate(self, values):
    return np.array([self.value], dtype=np.float64)

  def children(self):
    return ()

  def with_children(self, children):
    return self

  def is_integer(self) -> bool:
    return self.value.is_integer()

  def _render(self) -> str:
    return format_number(self.value)

  def to_sympy(self):
    if self.is_integer():
      return sp.Integer(int(self.value))
    return sp.Float(self.value)

  def _compute_hash(self) -> int:
    return hash((NodeType.CONSTANT, self.value))

  def _same_fields(self, other) -> bool:
    return self.value == other.value


class BinaryOpNode(Node):
  __slots__ = ('operator', 'left', 'right')

  def __init__(self, operator: str, left: Node, right: Node):
    super().__init__()
    if operator not in BINARY_OP_MAP:
      raise ValueError(f"Unknown binary operator: {operator}")
    if not isinstance(left, Node) or not isinstance(right, Node):
      raise TypeError("Binary operands must be expression nodes")
    self.operator = operator
    self.left = left
    self.right = right

  @property
  def base(self) -> Node:
    return self.left

  @property
  def exponent(self) -> Node:
    return self.right

  def _evaluate(self, values):
    left_val, right_val = _broadcast(self.left._evaluate(values), self.right._evaluate(values))
    return evaluate_binary_op(left_val, right_val, self.operator)

  def children(self):
    return (self.left, self.right)

  def with_children(self, children):
    return BinaryOpNode(self.operator, children[0], children[1])

  def _render(self) -> str:
    return f"({_operand_string(self.left)} {self.operator} {_operand_string(self.right)})"

  def to_sympy(self):
    left = self.left.to_sympy()
    right = self.right.to_sympy()
    if self.operator == '+':
      return sp.Add(left, right)
    elif self.operator == '-':
      return sp.Add(left, sp.Mul(-1, right))
    elif self.operator == '*':
      return sp.Mul(left, right)
    elif self.operator == '/':
      return sp.Mul(left, sp.Pow(right, -1))
    elif self.operator == '^':
      return sp.Pow(left, right)
    raise ValueError(f"to_sympy reached unexpected operation: {self.operator}")

  def _compute_hash(self) -> int:
    return hash((NodeType.BINARY_OP, self.operator, hash(self.left), hash(self.right)))

  def _same_fields(self, other) -> bool:
    return self.operator == other.operator


class UnaryOpNode(Node):
  __slots__ = ('operator', 'operand')

  def __init__(self, operator: str, operand: Node):
    super().__init__()
    if operator not in UNARY_OP_MAP:
      raise ValueError(f"Unknown unary operator: {operator}")
    if not isinstance(operand, Node):
      raise TypeError("Unary operand must be an expression node")
    self.operator = operator
    self.operand = operand

  def _evaluate(self, values):
    operand_val = np.ascontiguousarray(self.operand._evaluate(values), dtype=np.float64)
    return evaluate_unary_op(operand_val, self.operator)

  def children(self):
    return (self.operand,)

  def with_children(self, children):
    return UnaryOpNode(self.operator, children[0])

  def _render(self) -> str:
    if self.operator == 'neg':
      return f"(-{self.operand.to_string()})"
    return f"{self.operator}({self.operand.to_string()})"

  def to_sympy(self):
    operand = self.operand.to_sympy()
    if self.operator == 'neg':
      return -operand
    return _SYMPY_FUNCTIONS[self.operator](operand)

  def _compute_hash(self) -> int:
    return hash((NodeType.UNARY_OP, self.operator, hash(self.operand)))

  def _same_fields(self, other) -> bool:
    return self.operator == other.operator


class ComparisonNode(Node):
  """Boolean condition; evaluates to 1.0 where it holds and 0.0 elsewhere"""

  __slots__ = ('operator', 'left', 'right')

  def __init__(self, operator: str, left: Node, right: Node):
    super().__init__()
    if operator not in COMPARISON_OP_MAP:
      raise ValueError(f"Unknown comparison operator: {operator}")
    if not isinstance(left, Node) or not isinstance(right, Node):
      raise TypeError("Comparison operands must be expression nodes")
    self.operator = operator
    self.left = left
    self.right = right

  def _evaluate(self, values):
    left_val, right_val = _broadcast(self.left._evaluate(values), self.right._evaluate(values))
    return evaluate_comparison_op(left_val, right_val, self.operator)

  def children(self):
    return (self.left, self.right)

  def with_children(self, children):
    return ComparisonNode(self.operator, children[0], children[1])

  def _render(self) -> str:
    return f"({_operand_string(self.left)} {self.operator} {_operand_string(self.right)})"

  def to_sympy(self):
    return _SYMPY_RELATIONS[self.operator](self.left.to_sympy(), self.right.to_sympy())

  def _compute_hash(self) -> int:
    return hash((NodeType.COMPARISON, self.operator, hash(self.left), hash(self.right)))

  def _same_fields(self, other) -> bool:
    return self.operator == other.operator


class ConditionalNode(Node):
  __slots__ = ('condition', 'if_true', 'if_false')

  def __init__(self, condition: Node, if_true: Node, if_false: Node):
    super().__init__()
    if not all(isinstance(part, Node) for part in (condition, if_true, if_false)):
      raise TypeError("Conditional parts must be expression nodes")
    self.condition = condition
    self.if_true = if_true
    self.if_false = if_false

  def _evaluate(self, values):
    mask = np.asarray(self.condition._evaluate(values)) != 0
    # Only the taken branch is evaluated when the choice is uniform
    if mask.all():
      return self.if_true._evaluate(values)
    if not mask.any():
      return self.if_false._evaluate(values)
    return np.where(mask, self.if_true._evaluate(values), self.if_false._evaluate(values))

  def children(self):
    return (self.condition, self.if_true, self.if_false)

  def with_children(self, children):
    return ConditionalNode(children[0], children[1], children[2])

  def _render(self) -> str:
    return f"({self.condition.to_string()} ? {self.if_true.to_string()} : {self.if_false.to_string()})"

  def to_sympy(self):
    return sp.Piecewise((self.if_true.to_sympy(), self.condition.to_sympy()),
                        (self.if_false.to_sympy(), True))

  def _compute_hash(self) -> int:
    return hash((NodeType.CONDITIONAL, hash(self.condition), hash(self.if_true), hash(self.if_false)))
