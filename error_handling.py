"""
Error taxonomy for the Core interpreter and enhanced parse error reporting
Runtime errors abort evaluation immediately; parse errors carry source context
"""

from typing import List, Optional, Dict
from pyparsing import ParseBaseException
import re


# ============================================================================
# RUNTIME ERRORS
# ============================================================================

class CoreRuntimeError(Exception):
    """Base class for every error raised while evaluating an expression"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnboundVariable(CoreRuntimeError):
    """A variable reference has no binding in the current environment"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unbound variable: {name}")


class UndefinedFunction(CoreRuntimeError):
    """A call names a function that is neither bound nor defined at top level"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Undefined function: {name}")


class CoreTypeError(CoreRuntimeError):
    """An operator or application was given operands of the wrong shape"""
    pass


class DivisionByZero(CoreTypeError):
    """Integer division or modulo with a zero divisor"""
    pass


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context,
        'suggestions': suggestions or []
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    error_msg = f"Parse error at line {error['line']}, column {error['column']}:\n"
    error_msg += f"  {error['message']}\n"

    if error['expected']:
        error_msg += f"  Expected: {', '.join(error['expected'])}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"  Context:\n{error['context']}\n"

    if error['suggestions']:
        error_msg += "  Suggestions:\n"
        for suggestion in error['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg.rstrip('\n')


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 1) -> str:
    """Get context lines around the error with a caret under the column"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^")

    return '\n'.join(context_parts)


def extract_expected(exc: ParseBaseException) -> List[str]:
    """Extract expected tokens from exception"""
    msg = str(exc)
    expected_match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(at|$)", msg)
    if expected_match:
        return [expected_match.group(1)]
    return []


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if 0 < line_num <= len(lines):
        error_line = lines[line_num - 1]
        start = max(0, col_num - 1)
        got_text = error_line[start:start + 10].strip()
        if got_text:
            return f"'{got_text}'"
        if line_num == len(lines):
            return "end of input"
        return "end of line"
    return "end of input"


def generate_suggestions(got: str, source_text: str) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []

    if ";" in got:
        suggestions.append("';' only terminates a top-level 'def' - remove it after expressions")

    if "{" in got or "}" in got:
        suggestions.append("Use parentheses () instead of braces {} for grouping")

    if "==" in got:
        suggestions.append("Equality is written '=' (and inequality '!=' or '<>')")

    if "=>" in got:
        suggestions.append("Function literals use '->', as in fun (x) -> x + 1")

    if re.search(r"\blet\b", source_text) and not re.search(r"\bin\b", source_text):
        suggestions.append("Every 'let x = e' needs an 'in' followed by its body")

    if re.search(r"\bif\b", source_text) and not re.search(r"\belse\b", source_text):
        suggestions.append("'if' expressions need both a 'then' and an 'else' branch")

    return suggestions


def enhance_parse_exception_dict(exc: ParseBaseException, source_text: str) -> Dict:
    """Convert pyparsing exception to an enhanced Core error dict"""
    line_num = exc.lineno
    col_num = exc.column

    got = extract_got(source_text, line_num, col_num)

    return make_parse_error(
        message=exc.msg,
        location=exc.loc,
        line=line_num,
        column=col_num,
        expected=extract_expected(exc),
        got=got,
        context=get_context_lines(source_text, line_num, col_num),
        suggestions=generate_suggestions(got, source_text)
    )


# ============================================================================
# PARSE ERROR
# ============================================================================

class CoreParseError(Exception):
    """Parse error with source position and helpful context"""
    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None,
                 filename: str = "<input>"):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        self.filename = filename
        super().__init__(message)

    def __str__(self) -> str:
        if not self.line:
            return f"Parse error in {self.filename}: {self.message}"
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.expected, self.got, self.context, self.suggestions
        )
        return format_parse_error(error_dict)


def parse_error_from_exception(exc: ParseBaseException, source_text: str,
                               filename: str = "<input>") -> CoreParseError:
    """Build a CoreParseError from a pyparsing exception"""
    error_dict = enhance_parse_exception_dict(exc, source_text)
    return CoreParseError(
        message=error_dict['message'],
        location=error_dict['location'],
        line=error_dict['line'],
        column=error_dict['column'],
        expected=error_dict['expected'],
        got=error_dict['got'],
        context=error_dict['context'],
        suggestions=error_dict['suggestions'],
        filename=filename
    )
