"""Syntax tree of the CF language and its JSON dump."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Span:
    """Half-open range of source positions."""

    begin: int
    end: int

    def to_json(self) -> str:
        """Return the span as a JSON array of two numbers."""
        return f"[{self.begin}, {self.end}]"


class AstType(enum.Enum):
    """Builtin primitive types."""

    I32 = "i32"
    U32 = "u32"
    F32 = "f32"
    VOID = "void"

    def __str__(self) -> str:
        return self.value


class DeclarationType(enum.Enum):
    """Kind of a top-level declaration."""

    FN = "fn"
    LET = "let"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FunctionParam:
    """A named, typed function parameter."""

    name: str
    type: AstType
    span: Span


@dataclass(frozen=True)
class Function:
    """A function declaration with its optional body."""

    name: str
    inputs: Tuple[FunctionParam, ...]
    output_type: AstType
    signature_span: Span
    span: Span
    impl: Optional["Block"] = None


@dataclass(frozen=True)
class Variable:
    """A variable declaration with an optional initializer."""

    name: str
    type: AstType
    span: Span
    init: Optional["Expression"] = None


@dataclass(frozen=True)
class Declaration:
    """A function or variable declaration."""

    type: DeclarationType
    span: Span
    fn: Optional[Function] = None
    let: Optional[Variable] = None

    def __post_init__(self) -> None:
        if self.type is DeclarationType.FN and self.fn is None:
            raise ValueError("function declaration requires a function")
        if self.type is DeclarationType.LET and self.let is None:
            raise ValueError("variable declaration requires a variable")


class StatementType(enum.Enum):
    """Kind of a statement."""

    EXPRESSION = enum.auto()
    DECLARATION = enum.auto()
    BLOCK = enum.auto()
    IF = enum.auto()
    WHILE = enum.auto()
    RETURN = enum.auto()


@dataclass(frozen=True)
class Statement:
    """A statement; which fields are set depends on its type.

    EXPRESSION uses expression, DECLARATION declaration, BLOCK block,
    IF condition, block_then and block_else, WHILE condition and block,
    RETURN the optional expression.
    """

    type: StatementType
    span: Span
    expression: Optional["Expression"] = None
    declaration: Optional[Declaration] = None
    block: Optional["Block"] = None
    condition: Optional["Expression"] = None
    block_then: Optional["Block"] = None
    block_else: Optional["Block"] = None


@dataclass(frozen=True)
class Block:
    """A curly-brace enclosed sequence of statements."""

    span: Span
    statements: Tuple[Statement, ...] = ()


class ExpressionType(enum.Enum):
    """Kind of an expression."""

    INTEGER = enum.auto()
    FLOATING = enum.auto()
    IDENTIFIER = enum.auto()
    CALL = enum.auto()
    CONVERSION = enum.auto()
    ASSIGNMENT = enum.auto()
    BINARY_OPERATOR = enum.auto()


class AssignmentOperator(enum.Enum):
    """Operation combined with an assignment."""

    NONE = enum.auto()
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()


class BinaryOperator(enum.Enum):
    """Binary operators."""

    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    DIV = enum.auto()
    EQ = enum.auto()
    NE = enum.auto()
    LT = enum.auto()
    GT = enum.auto()
    LE = enum.auto()
    GE = enum.auto()


@dataclass(frozen=True)
class Expression:
    """An expression; which fields are set depends on its type.

    INTEGER, FLOATING and IDENTIFIER keep their payload in value.
    CALL uses callee and arguments, CONVERSION operand and target_type,
    ASSIGNMENT op, destination and operand, BINARY_OPERATOR op, lhs and rhs.
    """

    type: ExpressionType
    span: Span
    value: Union[int, float, str, None] = None
    callee: Optional["Expression"] = None
    arguments: Tuple["Expression", ...] = ()
    operand: Optional["Expression"] = None
    target_type: Optional[AstType] = None
    op: Union[AssignmentOperator, BinaryOperator, None] = None
    destination: Optional[str] = None
    lhs: Optional["Expression"] = None
    rhs: Optional["Expression"] = None


class ParseStatus(enum.Enum):
    """Outcome of building a syntax tree."""

    OK = 0
    INTERNAL_ERROR = 1
    UNEXPECTED_TOKEN_TYPE = 2
    EXPR_BRACKET_INTERNALS_MISSING = 3
    EXPR_RHS_MISSING = 4
    EXPR_ASSIGNMENT_VALUE_MISSING = 5
    IF_CONDITION_MISSING = 6
    IF_BLOCK_MISSING = 7
    ELSE_BLOCK_MISSING = 8
    WHILE_CONDITION_MISSING = 9
    WHILE_BLOCK_MISSING = 10
    VARIABLE_TYPE_MISSING = 11
    VARIABLE_INIT_MISSING = 12


_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\r": "\\r", "\t": "\\t", "\b": "\\b", "\f": "\\f"}


def _shield(text: str) -> str:
    parts = []
    for ch in text:
        if ch in _ESCAPES:
            parts.append(_ESCAPES[ch])
        elif ord(ch) < 0x20:
            parts.append(f"\\u{ord(ch):04x}")
        else:
            parts.append(ch)
    return "".join(parts)


@dataclass(frozen=True)
class Ast:
    """A parsed source file: its top-level declarations."""

    declarations: Tuple[Declaration, ...] = field(default_factory=tuple)

    def dump_json(self) -> str:
        """Return the declarations as JSON-like text.

        Function declarations are written with their type and span only.
        """
        lines = ["{", '    "declarations": [']
        last = len(self.declarations) - 1
        for index, decl in enumerate(self.declarations):
            lines.append(" " * 8 + "{")
            lines.append(" " * 12 + f'"type": "{_shield(str(decl.type))}",')
            lines.append(" " * 12 + f'"span": {decl.span.to_json()},')
            if decl.type is DeclarationType.LET:
                lines.append(" " * 12 + f'"name": "{_shield(decl.let.name)}",')
                lines.append(" " * 12 + f'"type": "{_shield(str(decl.let.type))}"')
            lines.append("        }" + ("" if index == last else ","))
        lines.append("    ]")
        lines.append("}")
        return "\n".join(lines) + "\n"