"""
Core operator semantics
Unary and binary operators over already-evaluated values
"""

from typing import Callable, Dict
import operator

from utilities import (
  binary_arithmetic_op,
  binary_comparison_op,
  truncating_div,
  truncating_mod,
  unary_operand_error,
  operation_error
)
from values import make_bool, make_int


# ============================================================================
# UNARY OPERATORS
# ============================================================================

def core_neg(v: Dict) -> Dict:
  """Integer negation"""
  if v['type'] != "Int":
    raise unary_operand_error("Neg", v)
  return make_int(-v['value'])


def core_not(v: Dict) -> Dict:
  """Boolean negation"""
  if v['type'] != "Bool":
    raise unary_operand_error("Not", v)
  return make_bool(not v['value'])


UNARY_IMPLEMENTATIONS: Dict[str, Callable[[Dict], Dict]] = {
    'Neg': core_neg,
    'Not': core_not,
}


# ============================================================================
# BINARY OPERATORS
# ============================================================================

# Both operands are evaluated before these run, so And/Or never short-circuit.
BINARY_IMPLEMENTATIONS: Dict[str, Callable[[Dict, Dict], Dict]] = {
    'Plus': binary_arithmetic_op(operator.add, "Plus"),
    'Minus': binary_arithmetic_op(operator.sub, "Minus"),
    'Times': binary_arithmetic_op(operator.mul, "Times"),
    'Div': binary_arithmetic_op(truncating_div, "Div", checks_zero=True),
    'Mod': binary_arithmetic_op(truncating_mod, "Mod", checks_zero=True),
    'And': binary_comparison_op(lambda b0, b1: b0 and b1, "And", "Bool"),
    'Or': binary_comparison_op(lambda b0, b1: b0 or b1, "Or", "Bool"),
    'Eq': binary_comparison_op(operator.eq, "Eq", "Any"),
    'Ne': binary_comparison_op(operator.ne, "Ne", "Any"),
    'Lt': binary_comparison_op(operator.lt, "Lt"),
    'Le': binary_comparison_op(operator.le, "Le"),
    'Gt': binary_comparison_op(operator.gt, "Gt"),
    'Ge': binary_comparison_op(operator.ge, "Ge"),
}


# ============================================================================
# ENTRY POINTS
# ============================================================================

def apply_unary(op: str, v: Dict) -> Dict:
  """Apply the meaning of unary operator `op` to `v`"""
  impl = UNARY_IMPLEMENTATIONS.get(op)
  if impl is None:
    raise unary_operand_error(op, v)
  return impl(v)


def apply_binary(op: str, v0: Dict, v1: Dict) -> Dict:
  """Apply the meaning of binary operator `op` to `v0` and `v1`"""
  impl = BINARY_IMPLEMENTATIONS.get(op)
  if impl is None:
    raise operation_error(op, v0, v1)
  return impl(v0, v1)
