"""
Parsing tests for Core concrete syntax
"""

import pytest
from syntax import Var, Int, Bool, UnaryOp, BinaryOp, If, Let, Fun, Call, FunDef, Program
from syntax import pretty_print_ast
from error_handling import CoreParseError


class TestAtoms:
  """Literals and identifiers"""

  def test_integer(self, parser):
    assert parser.parse_expression("42") == Int(42)

  def test_booleans(self, parser):
    assert parser.parse_expression("true") == Bool(True)
    assert parser.parse_expression("false") == Bool(False)

  def test_identifier(self, parser):
    assert parser.parse_expression("x_1'") == Var("x_1'")

  def test_keyword_prefix_is_identifier(self, parser):
    assert parser.parse_expression("iffy") == Var("iffy")
    assert parser.parse_expression("model") == Var("model")

  def test_parenthesized(self, parser):
    assert parser.parse_expression("((7))") == Int(7)


class TestOperators:
  """Precedence and associativity"""

  def test_multiplication_binds_tighter(self, parser):
    expected = BinaryOp("Plus", Int(1), BinaryOp("Times", Int(2), Int(3)))
    assert parser.parse_expression("1 + 2 * 3") == expected

  def test_subtraction_is_left_associative(self, parser):
    expected = BinaryOp("Minus", BinaryOp("Minus", Int(10), Int(3)), Int(2))
    assert parser.parse_expression("10 - 3 - 2") == expected

  def test_parentheses_override_precedence(self, parser):
    expected = BinaryOp("Times", BinaryOp("Plus", Int(1), Int(2)), Int(3))
    assert parser.parse_expression("(1 + 2) * 3") == expected

  def test_mod_keyword(self, parser):
    assert parser.parse_expression("7 mod 2") == BinaryOp("Mod", Int(7), Int(2))

  def test_unary_minus(self, parser):
    expected = BinaryOp("Times", UnaryOp("Neg", Int(2)), Int(3))
    assert parser.parse_expression("-2 * 3") == expected

  def test_not(self, parser):
    expected = UnaryOp("Not", UnaryOp("Not", Bool(True)))
    assert parser.parse_expression("not not true") == expected

  @pytest.mark.parametrize("text, op", [
      ("a = b", "Eq"),
      ("a != b", "Ne"),
      ("a <> b", "Ne"),
      ("a < b", "Lt"),
      ("a <= b", "Le"),
      ("a > b", "Gt"),
      ("a >= b", "Ge"),
      ("a && b", "And"),
      ("a and b", "And"),
      ("a || b", "Or"),
      ("a or b", "Or"),
  ])
  def test_binary_operator_tokens(self, parser, text, op):
    assert parser.parse_expression(text) == BinaryOp(op, Var("a"), Var("b"))

  def test_comparison_below_arithmetic(self, parser):
    expected = BinaryOp("Lt", BinaryOp("Plus", Var("a"), Int(1)), Var("b"))
    assert parser.parse_expression("a + 1 < b") == expected

  def test_and_binds_tighter_than_or(self, parser):
    expected = BinaryOp("Or", Var("a"), BinaryOp("And", Var("b"), Var("c")))
    assert parser.parse_expression("a || b && c") == expected


class TestBindingForms:
  """let, if and fun"""

  def test_let(self, parser):
    expected = Let("x", Int(5), BinaryOp("Plus", Var("x"), Int(1)))
    assert parser.parse_expression("let x = 5 in x + 1") == expected

  def test_if(self, parser):
    expected = If(BinaryOp("Lt", Int(1), Int(2)), Int(10), Int(20))
    assert parser.parse_expression("if (1 < 2) then 10 else 20") == expected

  def test_fun(self, parser):
    expected = Fun(("x", "y"), BinaryOp("Plus", Var("x"), Var("y")))
    assert parser.parse_expression("fun (x, y) -> x + y") == expected

  def test_fun_without_params(self, parser):
    assert parser.parse_expression("fun () -> 1") == Fun((), Int(1))

  def test_let_as_right_operand(self, parser):
    expected = BinaryOp("Plus", Int(1), Let("x", Int(2), BinaryOp("Times", Var("x"), Int(3))))
    assert parser.parse_expression("1 + let x = 2 in x * 3") == expected

  def test_duplicate_parameters_rejected(self, parser):
    with pytest.raises(CoreParseError) as exc_info:
      parser.parse_expression("fun (x, x) -> x")
    assert "Duplicate parameter" in str(exc_info.value)


class TestApplication:
  """Call syntax"""

  def test_call(self, parser):
    assert parser.parse_expression("f(1, 2)") == Call(Var("f"), (Int(1), Int(2)))

  def test_call_without_arguments(self, parser):
    assert parser.parse_expression("f()") == Call(Var("f"), ())

  def test_chained_call(self, parser):
    expected = Call(Call(Var("f"), (Int(1),)), (Int(2),))
    assert parser.parse_expression("f(1)(2)") == expected

  def test_call_binds_tighter_than_operators(self, parser):
    expected = BinaryOp("Plus", Call(Var("f"), (Int(1),)), Int(2))
    assert parser.parse_expression("f(1) + 2") == expected

  def test_immediately_applied_literal(self, parser):
    expected = Call(Fun(("x",), Var("x")), (Int(3),))
    assert parser.parse_expression("(fun (x) -> x)(3)") == expected


class TestPrograms:
  """Top-level definitions and comments"""

  def test_program_with_definitions(self, parser):
    text = """
    # doubling
    def double(x) = x * 2;
    def apply(f, x) = f(x);
    apply(double, 4)
    """
    program = parser.parse_string(text)
    assert program == Program(
        (FunDef("double", ("x",), BinaryOp("Times", Var("x"), Int(2))),
         FunDef("apply", ("f", "x"), Call(Var("f"), (Var("x"),)))),
        Call(Var("apply"), (Var("double"), Int(4)))
    )

  def test_program_without_definitions(self, parser):
    assert parser.parse_string("1") == Program((), Int(1))

  def test_parse_file(self, parser, tmp_path):
    source = tmp_path / "prog.core"
    source.write_text("def id(x) = x;\nid(5)\n", encoding="utf-8")
    assert parser.parse_file(str(source)).main == Call(Var("id"), (Int(5),))

  def test_missing_file(self, parser, tmp_path):
    with pytest.raises(CoreParseError) as exc_info:
      parser.parse_file(str(tmp_path / "absent.core"))
    assert "File not found" in str(exc_info.value)


class TestErrors:
  """Parse error reporting"""

  def test_incomplete_let(self, parser):
    with pytest.raises(CoreParseError) as exc_info:
      parser.parse_expression("let x = 1")
    assert "'in'" in str(exc_info.value)

  def test_error_reports_position(self, parser):
    with pytest.raises(CoreParseError) as exc_info:
      parser.parse_string("def f(x) = x;\nf(1) )")
    error = exc_info.value
    assert error.line == 2
    assert "line 2" in str(error)

  def test_trailing_garbage(self, parser):
    with pytest.raises(CoreParseError):
      parser.parse_expression("1 2")

  def test_keyword_is_not_an_identifier(self, parser):
    with pytest.raises(CoreParseError):
      parser.parse_expression("let in = 1 in in")


class TestReplInput:
  """Classification of interactive input"""

  def test_session_binding(self, parser):
    assert parser.parse_repl_input("let x = 1 + 1") == ('BIND', ("x", BinaryOp("Plus", Int(1), Int(1))))

  def test_let_expression(self, parser):
    kind, expr = parser.parse_repl_input("let x = 1 in x")
    assert kind == 'EXPR'
    assert expr == Let("x", Int(1), Var("x"))

  def test_definition_without_semicolon(self, parser):
    assert parser.parse_repl_input("def id(x) = x") == ('DEF', FunDef("id", ("x",), Var("x")))

  def test_plain_expression(self, parser):
    assert parser.parse_repl_input("2 * 3") == ('EXPR', BinaryOp("Times", Int(2), Int(3)))


class TestPrettyPrint:
  """AST rendering for --parse"""

  def test_pretty_print(self, parser):
    text = pretty_print_ast(parser.parse_expression("let x = 1 in f(x)"))
    assert text.splitlines() == [
        "Let('x')",
        "  Int(1)",
        "  Call",
        "    Var('f')",
        "    Var('x')",
    ]
