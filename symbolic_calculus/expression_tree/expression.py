import sympy as sp
from typing import Callable, List, Optional, Sequence
from .core.node import Node, as_node, variable_name


class Expression:
  """Expression wrapper with a cached canonical string"""

  __slots__ = ('root', '_string_cache')

  def __init__(self, root):
    if isinstance(root, Expression):
      root = root.root
    self.root: Node = as_node(root)
    self._string_cache: Optional[str] = None

  def evaluate(self, bindings=None, **kwargs):
    """Evaluate with a bindings mapping and/or keyword bindings: e.evaluate(x=2)"""
    values = dict(bindings or {})
    values.update(kwargs)
    return self.root.evaluate(values)

  def differentiate(self, variable) -> 'Expression':
    return Expression(self.root.differentiate(variable))

  def integrate(self, variable) -> 'Expression':
    return Expression(self.root.integrate(variable))

  def simplify(self, advanced: bool = False) -> 'Expression':
    """Structural simplification; `advanced` additionally runs the SymPy strategies"""
    node = self.root.simplify()
    if advanced:
      from .utils.sympy_utils import SymPySimplifier
      node = SymPySimplifier().simplify(node)
    return Expression(node)

  def substitute(self, old, new) -> 'Expression':
    return Expression(self.root.substitute(old, new))

  def get_variables(self) -> List[str]:
    return sorted(self.root.variable_names())

  def to_string(self) -> str:
    if self._string_cache is None:
      self._string_cache = self.root.to_string()
    return self._string_cache

  def size(self) -> int:
    """Node count"""
    return self.root.size()

  def depth(self) -> int:
    return self.root.depth()

  def to_sympy(self) -> sp.Expr:
    return self.root.to_sympy()

  def to_latex(self) -> str:
    from .utils.sympy_utils import latex_representation
    return latex_representation(self.root)

  def lambdify(self, variables: Optional[Sequence] = None) -> Callable:
    """
    Compile to a numpy function of the given variables (default: all free
    variables in sorted order).
    """
    names = [variable_name(v) for v in variables] if variables is not None else self.get_variables()
    symbols = [sp.Symbol(name) for name in names]
    return sp.lambdify(symbols, self.to_sympy(), modules='numpy')

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"Expression({self.to_string()!r})"

  def __hash__(self) -> int:
    return hash(self.root)

  def __eq__(self, other) -> bool:
    if not isinstance(other, Expression):
      return False
    return self.root == other.root

  @classmethod
  def from_string(cls, expr_str: str) -> 'Expression':
    """
    Parse formula text such as "x^2 + sin(2x)".

    Raises:
        ValueError: malformed or unsupported input
    """
    from .utils.sympy_utils import parse_expression
    return cls(parse_expression(expr_str))

  @classmethod
  def from_sympy(cls, sympy_expr) -> 'Expression':
    from .utils.sympy_utils import from_sympy
    return cls(from_sympy(sympy_expr))

