"""
Core Programming Language - Main Entry Point
A strict expression language with integers, booleans and first-class functions
"""

import sys
import argparse
from typing import Dict, Optional
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from parsing import create_parser, create_debug_parser
from syntax import pretty_print_ast
from interpreter import create_interpreter, create_debug_interpreter
from environment import empty_env, env_bindings, env_extend
from values import value_to_string
from error_handling import CoreParseError, CoreRuntimeError


VERSION = "0.1.0"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='core-interp',
      description='Core Programming Language - strict expressions with closures',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.core                  # Run a Core program
  %(prog)s -e "let x = 5 in x + 1"      # Evaluate an expression
  %(prog)s --parse script.core          # Parse and show AST
  %(prog)s -i                           # Interactive mode
  %(prog)s --debug script.core          # Run with evaluation trace
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Core program file to execute'
  )

  parser.add_argument(
      '-e', '--eval',
      metavar='EXPR',
      help='Evaluate an expression given on the command line'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse and show the AST instead of evaluating'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=f'Core v{VERSION}'
  )

  return parser


def report_runtime_error(error: CoreRuntimeError, source_name: str) -> None:
  """Print a runtime error banner to stderr"""
  print(f"Runtime error in '{source_name}': {type(error).__name__}: {error.message}",
        file=sys.stderr)


def run_source(source: str, source_name: str, parse_only: bool = False, debug: bool = False) -> int:
  """Parse and run program text; returns the process exit status"""
  parser = create_debug_parser() if debug else create_parser()
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  try:
    program = parser.parse_string(source, source_name)
    if parse_only:
      print(pretty_print_ast(program), end='')
      return 0

    result = interpreter.interpret_program(program)
    print(value_to_string(result))
    return 0

  except CoreParseError as e:
    print(f"{e}", file=sys.stderr)
    return 1
  except CoreRuntimeError as e:
    report_runtime_error(e, source_name)
    return 1
  except RecursionError:
    print(f"Resource error in '{source_name}': evaluation exceeded the host recursion limit",
          file=sys.stderr)
    return 1


def run_script_file(script_path: str, parse_only: bool = False, debug: bool = False) -> int:
  """Run a Core program file"""
  try:
    with open(script_path, 'r', encoding='utf-8') as f:
      source = f.read()
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found", file=sys.stderr)
    print("  Hint: Check the file path and make sure the file exists", file=sys.stderr)
    return 1
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'", file=sys.stderr)
    return 1
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}", file=sys.stderr)
    print("  Hint: Make sure the file is a text file with UTF-8 encoding", file=sys.stderr)
    return 1

  if debug:
    print(f"Running {script_path}...")
  return run_source(source, script_path, parse_only, debug)


def setup_readline() -> None:
  """Setup readline with history and keyword completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser("~/.core_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet

  readline.set_history_length(1000)

  completions = [
      "let", "in", "if", "then", "else", "fun", "def",
      "true", "false", "not", "mod", "and", "or",
      ":parse", ":env", ":help", "exit."
  ]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def print_repl_help() -> None:
  print("REPL Commands:")
  print("  :parse <expr>     - Show parsed AST")
  print("  :env              - Show session bindings")
  print("  :help             - Show this help")
  print("  exit.             - Exit REPL")
  print()
  print("Language features:")
  print("  let x = 5                       - Session binding")
  print("  def add(x, y) = x + y           - Top-level function")
  print("  let f = fun (x) -> x * 2 in f(4)")
  print("  add(1)(2)                       - Partial application")
  print("  if 1 < 2 then 10 else 20")


def handle_repl_line(line: str, session: Dict, parser, interpreter) -> Optional[str]:
  """
  Process one line of interactive input against the session state.
  Returns the text to show, or None when there is nothing to print.
  """
  code = line.strip()

  if code.startswith(":parse "):
    return pretty_print_ast(parser.parse_expression(code[len(":parse "):], "<repl>")).rstrip('\n')

  if code == ":env":
    names = [f"  {name} = {value_to_string(value)}"
             for name, value in env_bindings(session['env']).items()]
    names += [f"  {name}/{len(fundef.params)} (def)" for name, fundef in session['functions'].items()]
    return "\n".join(names) if names else "  (no bindings)"

  kind, parsed = parser.parse_repl_input(code)
  if kind == 'DEF':
    session['functions'][parsed.name] = parsed
    return f"Defined function: {parsed.name}"
  if kind == 'BIND':
    name, expr = parsed
    value = interpreter.eval_in_context(expr, session['env'], session['functions'])
    session['env'] = env_extend(session['env'], name, value)
    return f"Bound: {name} = {value_to_string(value)}"

  value = interpreter.eval_in_context(parsed, session['env'], session['functions'])
  return f"=> {value_to_string(value)}"


def run_interactive_mode(debug: bool = False) -> None:
  """Run Core in interactive mode"""
  print(f"Core v{VERSION} - Interactive Mode")
  print("Type 'exit.' to quit, ':help' for commands")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_debug_parser() if debug else create_parser()
  interpreter = create_debug_interpreter() if debug else create_interpreter()
  session = {'env': empty_env(), 'functions': {}}

  while True:
    try:
      code = input("core> ")
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if code.strip() == "exit.":
      break
    if not code.strip():
      continue
    if code.strip() == ":help":
      print_repl_help()
      continue

    try:
      output = handle_repl_line(code, session, parser, interpreter)
      if output is not None:
        print(output)
    except CoreParseError as e:
      print(f"{e}")
    except CoreRuntimeError as e:
      print(f"Runtime error: {type(e).__name__}: {e.message}")
    except RecursionError:
      print("Resource error: evaluation exceeded the host recursion limit")


def main(argv=None) -> int:
  """Main entry point for Core"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.eval is not None:
    return run_source(args.eval, "<eval>", args.parse, args.debug)

  if args.script:
    return run_script_file(args.script, args.parse, args.debug)

  if args.interactive:
    run_interactive_mode(debug=args.debug)
    return 0

  arg_parser.print_help()
  return 0


if __name__ == "__main__":
  sys.exit(main())
