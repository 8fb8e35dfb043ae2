"""
Core Programming Language Parser
Concrete syntax to AST using pyparsing
"""

from typing import Tuple, Union
import re

from pyparsing import (
    Forward, Group, Keyword, Literal, Opt, Regex, Suppress, ZeroOrMore,
    DelimitedList, OpAssoc, ParseBaseException, ParseFatalException,
    ParserElement, alphanums, infix_notation, one_of
)

from syntax import (
    Var, Int, Bool, UnaryOp, BinaryOp, If, Let, Fun, Call, FunDef, Program, Expr
)
from error_handling import CoreParseError, parse_error_from_exception

# Enable packrat parsing for performance
ParserElement.enable_packrat()


IDENT_CHARS = alphanums + "_'"

KEYWORDS = (
    "let", "in", "if", "then", "else", "fun", "def",
    "true", "false", "not", "mod", "and", "or",
)

UNARY_TOKENS = {
    '-': 'Neg',
    'not': 'Not',
}

BINARY_TOKENS = {
    '+': 'Plus', '-': 'Minus',
    '*': 'Times', '/': 'Div', 'mod': 'Mod',
    '&&': 'And', 'and': 'And',
    '||': 'Or', 'or': 'Or',
    '=': 'Eq', '!=': 'Ne', '<>': 'Ne',
    '<': 'Lt', '<=': 'Le', '>': 'Gt', '>=': 'Ge',
}

COMMENT_PATTERN = re.compile(r'#.*$', re.MULTILINE)


# ============================================================================
# PARSE ACTIONS
# ============================================================================

def _distinct_params(source: str, loc: int, params) -> Tuple[str, ...]:
    """Parameter names as a tuple; a repeated name is a fatal parse error"""
    params = tuple(params)
    seen = set()
    for name in params:
        if name in seen:
            raise ParseFatalException(source, loc, f"Duplicate parameter name '{name}'")
        seen.add(name)
    return params


def _make_fun(source, loc, tokens):
    return Fun(_distinct_params(source, loc, tokens[0]), tokens[1])


def _make_fundef(source, loc, tokens):
    return FunDef(tokens[0], _distinct_params(source, loc, tokens[1]), tokens[2])


def _make_application(tokens):
    """Fold `f(a)(b, c)` into nested calls, innermost first"""
    result = tokens[0]
    for arg_group in tokens[1:]:
        result = Call(result, tuple(arg_group))
    return result


def _make_unary(tokens):
    op, operand = tokens[0]
    return UnaryOp(UNARY_TOKENS[op], operand)


def _make_binary(tokens):
    """Left-associative fold of `a op b op c`"""
    items = tokens[0]
    result = items[0]
    for i in range(1, len(items), 2):
        result = BinaryOp(BINARY_TOKENS[items[i]], result, items[i + 1])
    return result


# ============================================================================
# GRAMMAR
# ============================================================================

class CoreGrammar:
    """Core grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup the Core grammar"""

        def kw(word: str) -> Keyword:
            return Keyword(word, ident_chars=IDENT_CHARS)

        expression = Forward()

        # Keywords
        any_keyword = kw(KEYWORDS[0])
        for word in KEYWORDS[1:]:
            any_keyword = any_keyword | kw(word)

        # Identifiers, excluding keywords
        identifier = ~any_keyword + Regex(r"[A-Za-z_][A-Za-z0-9_']*")

        # Literals
        integer = Regex(r"\d+").set_parse_action(lambda t: Int(int(t[0])))
        boolean = (kw("true") | kw("false")).set_parse_action(lambda t: Bool(t[0] == "true"))
        variable = identifier.copy().set_parse_action(lambda t: Var(t[0]))

        parenthesized = Suppress("(") + expression + Suppress(")")
        primary = integer | boolean | variable | parenthesized

        # Application: f(a, b)(c)
        arg_list = Group(Suppress("(") + Opt(DelimitedList(expression)) + Suppress(")"))
        application = (primary + ZeroOrMore(arg_list)).set_parse_action(_make_application)

        param_list = Group(Suppress("(") + Opt(DelimitedList(identifier)) + Suppress(")"))

        # Binding forms extend as far right as possible
        let_expr = (
            kw("let").suppress() + identifier + Suppress("=") + expression +
            kw("in").suppress() + expression
        ).set_parse_action(lambda t: Let(t[0], t[1], t[2]))

        if_expr = (
            kw("if").suppress() + expression +
            kw("then").suppress() + expression +
            kw("else").suppress() + expression
        ).set_parse_action(lambda t: If(t[0], t[1], t[2]))

        fun_expr = (
            kw("fun").suppress() + param_list + Suppress("->") + expression
        ).set_parse_action(_make_fun)

        operand = let_expr | if_expr | fun_expr | application

        # Operators, tightest first
        unary_op = Literal("-") | kw("not")
        mul_op = Literal("*") | Literal("/") | kw("mod")
        add_op = one_of("+ -")
        cmp_op = one_of("<= >= <> != < > =")
        and_op = Literal("&&") | kw("and")
        or_op = Literal("||") | kw("or")

        expression <<= infix_notation(operand, [
            (unary_op, 1, OpAssoc.RIGHT, _make_unary),
            (mul_op, 2, OpAssoc.LEFT, _make_binary),
            (add_op, 2, OpAssoc.LEFT, _make_binary),
            (cmp_op, 2, OpAssoc.LEFT, _make_binary),
            (and_op, 2, OpAssoc.LEFT, _make_binary),
            (or_op, 2, OpAssoc.LEFT, _make_binary),
        ])

        # Top-level definitions
        fundef_body = (
            kw("def").suppress() + identifier + param_list + Suppress("=") + expression
        )
        fundef = (fundef_body + Suppress(";")).set_parse_action(_make_fundef)
        repl_fundef = (fundef_body + Opt(Suppress(";"))).set_parse_action(_make_fundef)

        program = (Group(ZeroOrMore(fundef)) + expression).set_parse_action(
            lambda t: Program(tuple(t[0]), t[1])
        )

        # REPL session binding: `let x = e` without a body
        repl_binding = Group(
            kw("let").suppress() + identifier + Suppress("=") + expression
        )

        # Store the main parsers
        self.program = program
        self.expression = expression
        self.fundef = fundef
        self.repl_fundef = repl_fundef
        self.repl_binding = repl_binding
        self.identifier = identifier

    def _preprocess_text(self, text: str) -> str:
        """Strip `#` comments, keeping line structure so positions stay accurate"""
        return COMMENT_PATTERN.sub('', text)

    def _parse(self, element: ParserElement, text: str, filename: str):
        source = self._preprocess_text(text)
        try:
            return element.parse_string(source, parse_all=True)[0]
        except ParseBaseException as e:
            raise parse_error_from_exception(e, source, filename) from e

    def parse_program(self, text: str, filename: str = "<input>") -> Program:
        """Parse a complete Core program"""
        if self.debug:
            print(f"Parsing program from {filename}")
        return self._parse(self.program, text, filename)

    def parse_expression(self, text: str, filename: str = "<input>") -> Expr:
        """Parse a single Core expression"""
        if self.debug:
            print(f"Parsing expression from {filename}")
        return self._parse(self.expression, text, filename)


class CoreParser:
    """Main Core parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = CoreGrammar(debug)

    def parse_file(self, filepath: str) -> Program:
        """Parse a Core source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise CoreParseError(f"File not found: {filepath}", filename=filepath)
        except UnicodeDecodeError as e:
            raise CoreParseError(f"Cannot decode file {filepath}: {e}", filename=filepath)
        return self.grammar.parse_program(content, filepath)

    def parse_string(self, text: str, filename: str = "<input>") -> Program:
        """Parse a Core program from string"""
        return self.grammar.parse_program(text, filename)

    def parse_expression(self, text: str, filename: str = "<input>") -> Expr:
        """Parse a single Core expression"""
        return self.grammar.parse_expression(text, filename)

    def parse_repl_input(self, text: str) -> Tuple[str, Union[FunDef, Tuple[str, Expr], Expr]]:
        """
        Classify one line of interactive input.

        Returns ('DEF', FunDef), ('BIND', (name, expr)) or ('EXPR', expr).
        """
        stripped = text.strip()
        if re.match(r"def\b", stripped):
            return 'DEF', self.grammar._parse(self.grammar.repl_fundef, stripped, "<repl>")

        if re.match(r"let\b", stripped):
            try:
                name, bound = self.grammar._parse(self.grammar.repl_binding, stripped, "<repl>")
                return 'BIND', (name, bound)
            except CoreParseError:
                pass  # `let ... in ...` is an ordinary expression

        return 'EXPR', self.grammar.parse_expression(stripped, "<repl>")


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> CoreParser:
    """Create a Core parser"""
    return CoreParser(debug=debug)


def create_debug_parser() -> CoreParser:
    """Create a Core parser with debug enabled"""
    return CoreParser(debug=True)

