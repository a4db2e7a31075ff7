import numpy as np
import numba
from enum import IntEnum

class NodeType(IntEnum):
  VARIABLE = 0
  CONSTANT = 1
  BINARY_OP = 2
  UNARY_OP = 3
  COMPARISON = 4
  CONDITIONAL = 5

class OpType(IntEnum):
  # Binary ops
  ADD = 0
  SUB = 1
  MUL = 2
  DIV = 3
  POW = 4
  # Unary ops
  NEG = 5
  SIN = 6
  COS = 7
  TAN = 8
  SEC = 9
  CSC = 10
  COT = 11
  EXP = 12
  LN = 13
  SQRT = 14
  ASIN = 15
  ACOS = 16
  ATAN = 17
  # Comparisons
  LT = 18
  LE = 19
  GT = 20
  GE = 21
  EQ = 22
  NE = 23

# Mapping dictionaries
BINARY_OP_MAP = {'+': OpType.ADD, '-': OpType.SUB, '*': OpType.MUL, '/': OpType.DIV, '^': OpType.POW}
UNARY_OP_MAP = {
    'neg': OpType.NEG,
    'sin': OpType.SIN, 'cos': OpType.COS, 'tan': OpType.TAN,
    'sec': OpType.SEC, 'csc': OpType.CSC, 'cot': OpType.COT,
    'exp': OpType.EXP, 'ln': OpType.LN, 'sqrt': OpType.SQRT,
    'asin': OpType.ASIN, 'acos': OpType.ACOS, 'atan': OpType.ATAN
}
COMPARISON_OP_MAP = {
    '<': OpType.LT, '<=': OpType.LE, '>': OpType.GT,
    '>=': OpType.GE, '==': OpType.EQ, '!=': OpType.NE
}

# Named functions (everything unary except negation)
FUNCTION_NAMES = frozenset(name for name in UNARY_OP_MAP if name != 'neg')
TRIGONOMETRIC_FUNCTIONS = frozenset(('sin', 'cos', 'tan', 'sec', 'csc', 'cot'))


def as_float_array(value) -> np.ndarray:
  """Coerce a scalar or array-like into a contiguous 1-D float64 array"""
  return np.ascontiguousarray(np.atleast_1d(np.asarray(value, dtype=np.float64)))


# Kernels follow numpy semantics: undefined points come back as nan/inf and
# the node layer decides what to do with them.

@numba.njit(cache=True, error_model='numpy')
def evaluate_binary_op(left_val, right_val, operator):
  if operator == '+':
    return left_val + right_val
  elif operator == '-':
    return left_val - right_val
  elif operator == '*':
    return left_val * right_val
  elif operator == '/':
    return left_val / right_val
  elif operator == '^':
    return np.power(left_val, right_val)
  return np.full_like(left_val, np.nan)

@numba.njit(cache=True, error_model='numpy')
def evaluate_unary_op(operand_val, operator):
  if operator == 'neg':
    return -operand_val
  elif operator == 'sin':
    return np.sin(operand_val)
  elif operator == 'cos':
    return np.cos(operand_val)
  elif operator == 'tan':
    return np.tan(operand_val)
  elif operator == 'sec':
    return 1.0 / np.cos(operand_val)
  elif operator == 'csc':
    return 1.0 / np.sin(operand_val)
  elif operator == 'cot':
    return np.cos(operand_val) / np.sin(operand_val)
  elif operator == 'exp':
    return np.exp(operand_val)
  elif operator == 'ln':
    return np.log(operand_val)
  elif operator == 'sqrt':
    return np.sqrt(operand_val)
  elif operator == 'asin':
    return np.arcsin(operand_val)
  elif operator == 'acos':
    return np.arccos(operand_val)
  elif operator == 'atan':
    return np.arctan(operand_val)
  return np.full_like(operand_val, np.nan)

@numba.njit(cache=True)
def evaluate_comparison_op(left_val, right_val, operator):
  if operator == '<':
    return left_val < right_val
  elif operator == '<=':
    return left_val <= right_val
  elif operator == '>':
    return left_val > right_val
  elif operator == '>=':
    return left_val >= right_val
  elif operator == '==':
    return left_val == right_val
  elif operator == '!=':
    return left_val != right_val
  return np.zeros(left_val.shape, dtype=np.bool_)
