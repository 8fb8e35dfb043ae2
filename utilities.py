"""
Utilities module for the Core interpreter
Error message builders and factories for operator implementations
"""

from typing import Any, Callable, Dict

from error_handling import CoreTypeError, DivisionByZero
from values import describe_value, make_bool, make_int


# ==================== ERROR MESSAGE BUILDERS ====================

def unary_operand_error(op: str, operand: Dict) -> CoreTypeError:
  """
  Generate error for a unary operator applied to the wrong shape

  Examples:
    unary_operand_error("Neg", {"type": "Bool", "value": True})
      -> CoreTypeError("Neg cannot be applied to Bool true")
  """
  return CoreTypeError(f"{op} cannot be applied to {describe_value(operand)}")


def operation_error(op: str, left: Dict, right: Dict) -> CoreTypeError:
  """
  Generate error for a binary operator applied to the wrong shapes

  Examples:
    operation_error("Plus", true_val, one_val)
      -> CoreTypeError("Plus cannot be applied to Bool true and Int 1")
  """
  return CoreTypeError(
    f"{op} cannot be applied to {describe_value(left)} and {describe_value(right)}"
  )


def call_error(callee: Dict, position: str = "call") -> CoreTypeError:
  """
  Generate error for applying something that is not a function

  Args:
    callee: The value found in function position
    position: Where the value came from, for the message
  """
  return CoreTypeError(
    f"attempt to call a non-function in {position}: {describe_value(callee)}"
  )


# ==================== INTEGER ARITHMETIC ====================

def truncating_div(n0: int, n1: int) -> int:
  """Integer quotient rounded toward zero"""
  quotient = abs(n0) // abs(n1)
  return quotient if (n0 >= 0) == (n1 >= 0) else -quotient


def truncating_mod(n0: int, n1: int) -> int:
  """Remainder whose sign follows the dividend"""
  return n0 - n1 * truncating_div(n0, n1)


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(
  op: Callable[[int, int], int],
  op_name: str,
  checks_zero: bool = False
) -> Callable[[Dict, Dict], Dict]:
  """
  Factory for Int x Int -> Int operations

  Args:
    op: Python function on the integer payloads
    op_name: Operator name for error messages
    checks_zero: Reject a zero right operand with DivisionByZero

  Examples:
    core_plus = binary_arithmetic_op(operator.add, "Plus")
    core_plus(make_int(1), make_int(2)) -> make_int(3)
  """
  def arithmetic(x: Dict, y: Dict) -> Dict:
    if x['type'] != "Int" or y['type'] != "Int":
      raise operation_error(op_name, x, y)
    if checks_zero and y['value'] == 0:
      raise DivisionByZero(f"{op_name} by zero: {x['value']} and 0")
    return make_int(op(x['value'], y['value']))

  return arithmetic


def binary_comparison_op(
  op: Callable[[Any, Any], bool],
  op_name: str,
  allowed_type: str = "Int"
) -> Callable[[Dict, Dict], Dict]:
  """
  Factory for operations producing a Bool from two operands of one type

  Args:
    op: Python function on the payloads
    op_name: Operator name for error messages
    allowed_type: "Int", "Bool", or "Any" for either (both sides must still match)

  Examples:
    core_lt = binary_comparison_op(operator.lt, "Lt")
    core_lt(make_int(1), make_int(2)) -> make_bool(True)
  """
  def comparison(x: Dict, y: Dict) -> Dict:
    if x['type'] != y['type']:
      raise operation_error(op_name, x, y)
    if allowed_type == "Any":
      if x['type'] not in ("Int", "Bool"):
        raise operation_error(op_name, x, y)
    elif x['type'] != allowed_type:
      raise operation_error(op_name, x, y)
    return make_bool(op(x['value'], y['value']))

  return comparison
