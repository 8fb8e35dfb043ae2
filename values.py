"""
Core runtime values
Integers, booleans and closures as tagged immutable dictionaries
"""

from typing import Any, Dict, Sequence


# ============================================================================
# CONSTRUCTORS
# ============================================================================

def make_value(value: Any, type_name: str) -> Dict:
  """Create an immutable runtime value"""
  return {
      'value': value,
      'type': type_name
  }


def make_int(n: int) -> Dict:
  return make_value(n, "Int")


def make_bool(b: bool) -> Dict:
  return make_value(bool(b), "Bool")


def make_closure(params: Sequence[str], body: Any, closure_env: Dict) -> Dict:
  """Create a function value capturing the environment of its definition"""
  return {
      'type': 'Closure',
      'params': tuple(params),
      'body': body,
      'closure_env': closure_env
  }


# ============================================================================
# PREDICATES
# ============================================================================

def is_int(val: Dict) -> bool:
  return val.get('type') == "Int"


def is_bool(val: Dict) -> bool:
  return val.get('type') == "Bool"


def is_closure(val: Dict) -> bool:
  return val.get('type') == "Closure"


# ============================================================================
# DISPLAY
# ============================================================================

def describe_value(val: Dict) -> str:
  """Short description of a value for error messages, e.g. `Int 3`"""
  if is_int(val):
    return f"Int {val['value']}"
  elif is_bool(val):
    return f"Bool {value_to_string(val)}"
  elif is_closure(val):
    return f"Closure {value_to_string(val)}"
  return f"<{val.get('type', 'Unknown')}>"


def value_to_string(val: Dict) -> str:
  """Render a value the way the driver prints results"""
  if is_int(val):
    return str(val['value'])
  elif is_bool(val):
    return "true" if val['value'] else "false"
  elif is_closure(val):
    return f"<fun/{len(val['params'])}>"
  return f"<{val.get('type', 'Unknown')}>"
