"""
End-to-end tests: concrete syntax through evaluation and the command line
"""

import pytest
from pathlib import Path
from main import main, handle_repl_line
from environment import empty_env
from values import make_bool, make_int, value_to_string
from error_handling import CoreTypeError, UnboundVariable, UndefinedFunction


def run(parser, interpreter, text):
  return interpreter.interpret_program(parser.parse_string(text))


class TestSourcePrograms:
  """Programs written in concrete syntax"""

  @pytest.mark.parametrize("text, expected", [
      ("1 + 2 * 3", make_int(7)),
      ("if (1 < 2) then 10 else 20", make_int(10)),
      ("let x = 5 in x + 1", make_int(6)),
      ("-7 / 2", make_int(-3)),
      ("7 mod -2", make_int(1)),
      ("1 = 1 && not (2 < 1)", make_bool(True)),
      ("true <> false", make_bool(True)),
  ])
  def test_expressions(self, parser, interpreter, text, expected):
    assert run(parser, interpreter, text) == expected

  def test_static_scoping(self, parser, interpreter):
    text = "let y = 10 in let f = fun (x) -> y in let y = 1 in f(2)"
    assert run(parser, interpreter, text) == make_int(10)

  def test_currying(self, parser, interpreter):
    text = """
    let add = fun (a, b) -> a + b in
    let inc = add(1) in
    inc(41) = add(1, 41)
    """
    assert run(parser, interpreter, text) == make_bool(True)

  def test_over_application(self, parser, interpreter):
    text = "(fun (a, b, c) -> fun (d) -> a * b * c * d)(1, 2, 3, 4)"
    assert run(parser, interpreter, text) == make_int(24)

  def test_closure_result(self, parser, interpreter):
    value = run(parser, interpreter, "let k = 3 in fun (x, y) -> x + y + k")
    assert value_to_string(value) == "<fun/2>"

  def test_recursive_program(self, parser, interpreter):
    text = """
    # Fibonacci through the top-level function table
    def fib(n) = if n < 2 then n else fib(n - 1) + fib(n - 2);
    fib(10)
    """
    assert run(parser, interpreter, text) == make_int(55)

  def test_higher_order_top_level(self, parser, interpreter):
    text = """
    def compose(f, g) = fun (x) -> f(g(x));
    def inc(x) = x + 1;
    def double(x) = x * 2;
    let inc_fn = fun (x) -> inc(x) in
    let double_fn = fun (x) -> double(x) in
    compose(inc_fn, double_fn)(5)
    """
    assert run(parser, interpreter, text) == make_int(11)

  def test_type_error(self, parser, interpreter):
    with pytest.raises(CoreTypeError):
      run(parser, interpreter, "true + 1")

  def test_unbound_variable(self, parser, interpreter):
    with pytest.raises(UnboundVariable):
      run(parser, interpreter, "let x = 1 in y")

  def test_undefined_function(self, parser, interpreter):
    with pytest.raises(UndefinedFunction):
      run(parser, interpreter, "def f(x) = x; g(1)")

  def test_interpreter_evaluate_is_closure_only(self, parser, interpreter):
    with pytest.raises(UnboundVariable):
      interpreter.evaluate(parser.parse_expression("g(1)"))


class TestCommandLine:
  """main() exit codes and output"""

  def test_eval_option(self, capsys):
    assert main(["-e", "let x = 5 in x + 1"]) == 0
    assert capsys.readouterr().out.strip() == "6"

  def test_boolean_output(self, capsys):
    assert main(["-e", "1 < 2"]) == 0
    assert capsys.readouterr().out.strip() == "true"

  def test_script_file(self, tmp_path, capsys):
    script = tmp_path / "square.core"
    script.write_text("def square(x) = x * x;\nsquare(12)\n", encoding="utf-8")
    assert main([str(script)]) == 0
    assert capsys.readouterr().out.strip() == "144"

  def test_parse_option(self, capsys):
    assert main(["--parse", "-e", "1 + 2"]) == 0
    out = capsys.readouterr().out
    assert "BinaryOp(Plus)" in out
    assert "Program" in out

  def test_runtime_error_exit_status(self, capsys):
    assert main(["-e", "5 / 0"]) == 1
    err = capsys.readouterr().err
    assert "DivisionByZero" in err

  def test_parse_error_exit_status(self, capsys):
    assert main(["-e", "let x = in"]) == 1
    assert "Parse error" in capsys.readouterr().err

  def test_missing_script(self, tmp_path, capsys):
    assert main([str(tmp_path / "nope.core")]) == 1
    assert "not found" in capsys.readouterr().err

  def test_debug_trace(self, capsys):
    assert main(["--debug", "-e", "1 + 1"]) == 0
    assert "Evaluating: BinaryOp" in capsys.readouterr().out

  def test_deep_recursion_is_reported(self, capsys):
    assert main(["-e", "def loop(n) = loop(n + 1); loop(0)"]) == 1
    assert "recursion limit" in capsys.readouterr().err


class TestRepl:
  """Interactive session handling"""

  @pytest.fixture
  def session(self):
    return {'env': empty_env(), 'functions': {}}

  def test_binding_persists(self, session, parser, interpreter):
    assert handle_repl_line("let x = 20", session, parser, interpreter) == "Bound: x = 20"
    assert handle_repl_line("x + 1", session, parser, interpreter) == "=> 21"

  def test_definition_persists(self, session, parser, interpreter):
    assert handle_repl_line("def sq(x) = x * x", session, parser, interpreter) == "Defined function: sq"
    assert handle_repl_line("sq(9)", session, parser, interpreter) == "=> 81"

  def test_env_command(self, session, parser, interpreter):
    handle_repl_line("let flag = true", session, parser, interpreter)
    handle_repl_line("def id(x) = x", session, parser, interpreter)
    listing = handle_repl_line(":env", session, parser, interpreter)
    assert "flag = true" in listing
    assert "id/1 (def)" in listing

  def test_empty_env_command(self, session, parser, interpreter):
    assert handle_repl_line(":env", session, parser, interpreter) == "  (no bindings)"

  def test_parse_command(self, session, parser, interpreter):
    assert handle_repl_line(":parse 1", session, parser, interpreter) == "Int(1)"

  def test_errors_propagate(self, session, parser, interpreter):
    with pytest.raises(UnboundVariable):
      handle_repl_line("missing + 1", session, parser, interpreter)


class TestExamplePrograms:
  """Shipped example programs run cleanly"""

  EXAMPLES_DIR = Path(__file__).parent.parent / "examples"

  @pytest.mark.parametrize("name, expected", [
      ("factorial.core", "3628800"),
      ("currying.core", "true"),
      ("closures.core", "10"),
  ])
  def test_example(self, name, expected, capsys):
    assert main([str(self.EXAMPLES_DIR / name)]) == 0
    assert capsys.readouterr().out.strip() == expected
