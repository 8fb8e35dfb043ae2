"""
Core abstract syntax tree
Immutable node types produced by the parser and consumed by the interpreter
"""

from typing import Tuple, Union
from dataclasses import dataclass


UNARY_OPERATORS = frozenset({"Neg", "Not"})

BINARY_OPERATORS = frozenset({
    "Plus", "Minus", "Times", "Div", "Mod",
    "And", "Or",
    "Eq", "Ne",
    "Lt", "Le", "Gt", "Ge",
})


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class Var:
    """Variable reference"""
    name: str


@dataclass(frozen=True)
class Int:
    """Integer literal"""
    value: int


@dataclass(frozen=True)
class Bool:
    """Boolean literal"""
    value: bool


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: 'Expr'


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: 'Expr'
    right: 'Expr'


@dataclass(frozen=True)
class If:
    cond: 'Expr'
    then_branch: 'Expr'
    else_branch: 'Expr'


@dataclass(frozen=True)
class Let:
    """Non-recursive binding: `bound` is evaluated without `name` in scope"""
    name: str
    bound: 'Expr'
    body: 'Expr'


@dataclass(frozen=True)
class Fun:
    """Function literal; evaluates to a closure over the current environment"""
    params: Tuple[str, ...]
    body: 'Expr'


@dataclass(frozen=True)
class Call:
    fn: 'Expr'
    args: Tuple['Expr', ...]


Expr = Union[Var, Int, Bool, UnaryOp, BinaryOp, If, Let, Fun, Call]


# ============================================================================
# PROGRAMS
# ============================================================================

@dataclass(frozen=True)
class FunDef:
    """Top-level function definition"""
    name: str
    params: Tuple[str, ...]
    body: Expr


@dataclass(frozen=True)
class Program:
    """Top-level function definitions followed by the main expression"""
    fundefs: Tuple[FunDef, ...]
    main: Expr


# ============================================================================
# DEBUG OUTPUT
# ============================================================================

def pretty_print_ast(node, indent: int = 0) -> str:
    """Pretty print an AST node as an indented tree"""
    pad = "  " * indent

    if isinstance(node, Program):
        result = f"{pad}Program\n"
        for fundef in node.fundefs:
            result += pretty_print_ast(fundef, indent + 1)
        return result + pretty_print_ast(node.main, indent + 1)
    if isinstance(node, FunDef):
        result = f"{pad}FunDef({node.name!r}, params={list(node.params)!r})\n"
        return result + pretty_print_ast(node.body, indent + 1)
    if isinstance(node, Var):
        return f"{pad}Var({node.name!r})\n"
    if isinstance(node, Int):
        return f"{pad}Int({node.value})\n"
    if isinstance(node, Bool):
        return f"{pad}Bool({'true' if node.value else 'false'})\n"
    if isinstance(node, UnaryOp):
        return f"{pad}UnaryOp({node.op})\n" + pretty_print_ast(node.operand, indent + 1)
    if isinstance(node, BinaryOp):
        return (f"{pad}BinaryOp({node.op})\n"
                + pretty_print_ast(node.left, indent + 1)
                + pretty_print_ast(node.right, indent + 1))
    if isinstance(node, If):
        return (f"{pad}If\n"
                + pretty_print_ast(node.cond, indent + 1)
                + pretty_print_ast(node.then_branch, indent + 1)
                + pretty_print_ast(node.else_branch, indent + 1))
    if isinstance(node, Let):
        return (f"{pad}Let({node.name!r})\n"
                + pretty_print_ast(node.bound, indent + 1)
                + pretty_print_ast(node.body, indent + 1))
    if isinstance(node, Fun):
        return f"{pad}Fun(params={list(node.params)!r})\n" + pretty_print_ast(node.body, indent + 1)
    if isinstance(node, Call):
        result = f"{pad}Call\n" + pretty_print_ast(node.fn, indent + 1)
        for arg in node.args:
            result += pretty_print_ast(arg, indent + 1)
        return result

    raise ValueError(f"Not an AST node: {node!r}")
