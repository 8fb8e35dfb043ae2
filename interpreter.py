"""
Core Interpreter - Pure Functional Style
Strict call-by-value evaluation of Core expressions over persistent environments
"""

from typing import Any, Dict, List, Optional, Sequence

from syntax import (
  Var, Int, Bool, UnaryOp, BinaryOp, If, Let, Fun, Call, FunDef, Program, Expr
)
from environment import (
  empty_env,
  env_contains,
  env_extend,
  env_extend_all,
  env_lookup
)
from values import (
  make_bool,
  make_closure,
  make_int,
  is_bool,
  is_closure,
  describe_value,
  value_to_string
)
from operators import apply_binary, apply_unary
from utilities import call_error
from error_handling import CoreRuntimeError, CoreTypeError, UndefinedFunction


# ============================================================================
# EXECUTION CONTEXT
# ============================================================================

def make_execution_context(functions: Optional[Dict[str, FunDef]] = None) -> Dict:
  """
  Create the context threaded through evaluation.
  `functions` is the top-level function table of a program; None means
  closure-only evaluation, where every callee is an ordinary value.
  """
  return {
      'functions': functions
  }


def make_function_table(fundefs: Sequence[FunDef]) -> Dict[str, FunDef]:
  """Index top-level definitions by name; a later definition replaces an earlier one"""
  return {fundef.name: fundef for fundef in fundefs}


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_ast(expr: Expr, env: Dict, debug: bool = False, context: Optional[Dict] = None) -> Dict:
  """
  Evaluate an expression in an environment and return its value.
  Any error aborts the whole evaluation; there is no local recovery.
  """
  if context is None:
    context = make_execution_context()

  if debug:
    print(f"Evaluating: {type(expr).__name__}")

  if isinstance(expr, Var):
    return env_lookup(env, expr.name)
  elif isinstance(expr, Int):
    return make_int(expr.value)
  elif isinstance(expr, Bool):
    return make_bool(expr.value)
  elif isinstance(expr, UnaryOp):
    return eval_unary(expr, env, debug, context)
  elif isinstance(expr, BinaryOp):
    return eval_binary(expr, env, debug, context)
  elif isinstance(expr, If):
    return eval_if(expr, env, debug, context)
  elif isinstance(expr, Let):
    return eval_let(expr, env, debug, context)
  elif isinstance(expr, Fun):
    return make_closure(expr.params, expr.body, env)
  elif isinstance(expr, Call):
    return eval_call(expr, env, debug, context)
  else:
    raise CoreRuntimeError(f"Unknown expression node: {expr!r}")


def eval_unary(expr: UnaryOp, env: Dict, debug: bool, context: Dict) -> Dict:
  """Evaluate unary operation"""
  value = eval_ast(expr.operand, env, debug, context)
  return apply_unary(expr.op, value)


def eval_binary(expr: BinaryOp, env: Dict, debug: bool, context: Dict) -> Dict:
  """Evaluate binary operation, left operand first, both always"""
  left_val = eval_ast(expr.left, env, debug, context)
  right_val = eval_ast(expr.right, env, debug, context)
  return apply_binary(expr.op, left_val, right_val)


def eval_if(expr: If, env: Dict, debug: bool, context: Dict) -> Dict:
  """Evaluate conditional; only the selected branch is evaluated"""
  guard = eval_ast(expr.cond, env, debug, context)
  if not is_bool(guard):
    raise CoreTypeError(f"if guard must be Bool, got {describe_value(guard)}")

  if guard['value']:
    return eval_ast(expr.then_branch, env, debug, context)
  return eval_ast(expr.else_branch, env, debug, context)


def eval_let(expr: Let, env: Dict, debug: bool, context: Dict) -> Dict:
  """Evaluate let; the bound expression does not see its own name"""
  bound_val = eval_ast(expr.bound, env, debug, context)
  return eval_ast(expr.body, env_extend(env, expr.name, bound_val), debug, context)


def eval_call(expr: Call, env: Dict, debug: bool, context: Dict) -> Dict:
  """Evaluate function application: callee, then arguments left to right"""
  fn_value = eval_callee(expr.fn, env, debug, context)
  args = [eval_ast(arg, env, debug, context) for arg in expr.args]
  return apply_function(fn_value, args, debug, context)


def eval_callee(fn_expr: Expr, env: Dict, debug: bool, context: Dict) -> Dict:
  """Resolve the expression in function position"""
  functions = context.get('functions')
  if functions is not None and isinstance(fn_expr, Var) and not env_contains(env, fn_expr.name):
    fundef = functions.get(fn_expr.name)
    if fundef is None:
      raise UndefinedFunction(fn_expr.name)
    return make_closure(fundef.params, fundef.body, empty_env())

  return eval_ast(fn_expr, env, debug, context)


# ============================================================================
# FUNCTION APPLICATION
# ============================================================================

def apply_function(fn_value: Dict, args: Sequence[Dict], debug: bool = False,
                   context: Optional[Dict] = None) -> Dict:
  """
  Apply a closure to argument values, resolving arity mismatches.

  Args:
      fn_value: Value in function position
      args: Evaluated arguments
      debug: Print a trace line per application step
      context: Execution context (function table)

  Returns:
      - with as many arguments as parameters: the value of the body
      - with fewer: a closure over the remaining parameters
      - with more: the body's value (which must be a closure) applied to the rest

  Raises:
      CoreTypeError if a non-function ends up in function position
  """
  if context is None:
    context = make_execution_context()

  remaining: List[Dict] = list(args)
  position = "call"

  while True:
    if not is_closure(fn_value):
      raise call_error(fn_value, position)

    params = fn_value['params']
    if debug:
      print(f"Applying {value_to_string(fn_value)} to {len(remaining)} argument(s)")

    call_env = env_extend_all(fn_value['closure_env'], params, remaining)

    if len(params) > len(remaining):
      return make_closure(params[len(remaining):], fn_value['body'], call_env)

    result = eval_ast(fn_value['body'], call_env, debug, context)
    if len(params) == len(remaining):
      return result

    fn_value = result
    remaining = remaining[len(params):]
    position = "over-application"


# ============================================================================
# PROGRAM EVALUATION
# ============================================================================

def evaluate(expr: Expr, env: Optional[Dict] = None, debug: bool = False) -> Dict:
  """Evaluate a closure-only expression, by default in the empty environment"""
  if env is None:
    env = empty_env()
  return eval_ast(expr, env, debug, make_execution_context())


def eval_program(program: Program, debug: bool = False) -> Dict:
  """
  Evaluate a program: top-level definitions form the function table and the
  main expression is evaluated in the empty environment.
  """
  functions = make_function_table(program.fundefs)
  if debug:
    print(f"Defined {len(functions)} top-level function(s): {', '.join(functions)}")
  return eval_ast(program.main, empty_env(), debug, make_execution_context(functions))


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

def create_interpreter(debug: bool = False) -> Any:
  """Factory function returning an interpreter"""
  return type('Interpreter', (), {
      'debug': debug,
      'evaluate': lambda self, expr, env=None: evaluate(expr, env, debug),
      'interpret_program': lambda self, program: eval_program(program, debug),
      'apply': lambda self, fn_value, args: apply_function(fn_value, args, debug),
      'eval_in_context': lambda self, expr, env, functions=None: eval_ast(
          expr, env, debug, make_execution_context(functions)),
  })()


def create_debug_interpreter() -> Any:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
