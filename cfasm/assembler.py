"""Assembler that turns assembly text into a relocatable object."""

from __future__ import annotations

import enum
import math
import struct
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from cfasm.lexer import LineLexer, SourceLine, Token, TokenType, iter_lines
from cfasm.status import AssemblyError, AssemblyStatus

LABEL_MAX = 32
"""Labels must be strictly shorter than this many characters."""

_UINT32_MASK = 0xFFFFFFFF
_UNRESOLVED = b"\xff" * 4


class Opcode(enum.IntEnum):
    """Instruction opcodes."""

    UNREACHABLE = 0
    SYSCALL = enum.auto()
    HALT = enum.auto()
    ADD = enum.auto()
    SUB = enum.auto()
    SHL = enum.auto()
    SHR = enum.auto()
    SAR = enum.auto()
    OR = enum.auto()
    XOR = enum.auto()
    AND = enum.auto()
    IMUL = enum.auto()
    MUL = enum.auto()
    IDIV = enum.auto()
    DIV = enum.auto()
    FADD = enum.auto()
    FSUB = enum.auto()
    FMUL = enum.auto()
    FDIV = enum.auto()
    FTOI = enum.auto()
    ITOF = enum.auto()
    FSIN = enum.auto()
    FCOS = enum.auto()
    FNEG = enum.auto()
    FSQRT = enum.auto()
    PUSH = enum.auto()
    POP = enum.auto()
    CMP = enum.auto()
    ICMP = enum.auto()
    FCMP = enum.auto()
    JMP = enum.auto()
    JLE = enum.auto()
    JL = enum.auto()
    JGE = enum.auto()
    JG = enum.auto()
    JE = enum.auto()
    JNE = enum.auto()
    CALL = enum.auto()
    RET = enum.auto()
    VSM = enum.auto()
    VRS = enum.auto()
    MEOW = enum.auto()
    TIME = enum.auto()
    MGS = enum.auto()
    IGKS = enum.auto()
    IWKD = enum.auto()


_MNEMONICS: Sequence[Tuple[str, Opcode]] = (
    ("unreachable", Opcode.UNREACHABLE),
    ("syscall", Opcode.SYSCALL),
    ("halt", Opcode.HALT),
    ("add", Opcode.ADD),
    ("sub", Opcode.SUB),
    ("shl", Opcode.SHL),
    ("shr", Opcode.SHR),
    ("sar", Opcode.SAR),
    ("or", Opcode.OR),
    ("xor", Opcode.XOR),
    ("and", Opcode.AND),
    ("imul", Opcode.IMUL),
    ("mul", Opcode.MUL),
    ("idiv", Opcode.IDIV),
    ("div", Opcode.DIV),
    ("fadd", Opcode.FADD),
    ("fsub", Opcode.FSUB),
    ("fmul", Opcode.FMUL),
    ("fdiv", Opcode.FDIV),
    ("ftoi", Opcode.FTOI),
    ("itof", Opcode.ITOF),
    ("fsin", Opcode.FSIN),
    ("fcos", Opcode.FCOS),
    ("fneg", Opcode.FNEG),
    ("fsqrt", Opcode.FSQRT),
    ("push", Opcode.PUSH),
    ("pop", Opcode.POP),
    ("cmp", Opcode.CMP),
    ("icmp", Opcode.ICMP),
    ("fcmp", Opcode.FCMP),
    ("jmp", Opcode.JMP),
    ("jle", Opcode.JLE),
    ("jl", Opcode.JL),
    ("jge", Opcode.JGE),
    ("jg", Opcode.JG),
    ("je", Opcode.JE),
    ("jne", Opcode.JNE),
    ("call", Opcode.CALL),
    ("ret", Opcode.RET),
    ("vsm", Opcode.VSM),
    ("vrs", Opcode.VRS),
    ("meow", Opcode.MEOW),
    ("time", Opcode.TIME),
    ("mgs", Opcode.MGS),
    ("igks", Opcode.IGKS),
    ("iwkd", Opcode.IWKD),
)


def _opcode_key(name: str) -> str:
    # Opcodes are told apart by their first four characters only.
    return name[:4].ljust(4, "\0")


_OPCODE_BY_KEY = {}
for _name, _opcode in _MNEMONICS:
    _OPCODE_BY_KEY.setdefault(_opcode_key(_name), _opcode)

_REGISTERS = {name: index for index, name in enumerate(("cz", "fl", "ax", "bx", "cx", "dx", "ex", "fx"))}

_JUMPS = frozenset(
    {Opcode.JMP, Opcode.JLE, Opcode.JL, Opcode.JGE, Opcode.JG, Opcode.JE, Opcode.JNE, Opcode.CALL}
)


def parse_opcode(identifier: str) -> Optional[Opcode]:
    """Return the opcode an identifier names, or None.

    Only the first four characters are compared, so longer spellings sharing
    a mnemonic's prefix are accepted as well.
    """
    if not identifier:
        return None
    return _OPCODE_BY_KEY.get(_opcode_key(identifier))


def parse_register(identifier: str) -> Optional[int]:
    """Return the index of the register an identifier names, or None."""
    return _REGISTERS.get(identifier)


@dataclass
class PushPopInfo:
    """Operand description byte of push and pop instructions."""

    register_index: int = 0
    do_read_immediate: bool = False
    is_memory_access: bool = False

    def to_byte(self) -> int:
        """Pack the description into its single-byte encoding."""
        return (
            int(self.do_read_immediate)
            | (int(self.is_memory_access) << 1)
            | ((self.register_index & 0x3F) << 2)
        )


@dataclass(frozen=True)
class Link:
    """A reference from code to a label that the linker must resolve."""

    label: str
    source_line: int
    code_offset: int


@dataclass(frozen=True)
class Label:
    """A label or constant declared in the source."""

    label: str
    source_line: int
    value: int
    is_relative: bool


@dataclass(frozen=True)
class AssembledObject:
    """Result of assembling one source text."""

    source_name: str
    code: bytes
    links: Tuple[Link, ...] = field(default_factory=tuple)
    labels: Tuple[Label, ...] = field(default_factory=tuple)


def _float_bits(value: float) -> int:
    try:
        packed = struct.pack("<f", value)
    except OverflowError:
        packed = struct.pack("<f", math.copysign(math.inf, value))
    return int.from_bytes(packed, "little")


@dataclass
class _Operand:
    info: PushPopInfo = field(default_factory=PushPopInfo)
    literal: Optional[int] = None
    label: Optional[str] = None


class _Assembler:
    def __init__(self) -> None:
        self.output = bytearray()
        self.links: List[Link] = []
        self.labels: List[Label] = []
        self.line = SourceLine(0, "")

    def fail(self, status: AssemblyStatus) -> AssemblyError:
        return AssemblyError(status, self.line.index, self.line.text)

    def run(self, text: str) -> None:
        for line in iter_lines(text):
            self.line = line
            lexer = LineLexer(line)
            first = lexer.next_token()
            if first is None:
                continue

            opcode = parse_opcode(first.value) if first.type is TokenType.IDENTIFIER else None
            if opcode is None:
                self._declaration(first, lexer)
            else:
                self.output += self._instruction(opcode, lexer)

            if not lexer.at_end():
                raise self.fail(AssemblyStatus.UNEXPECTED_CHARACTERS)

    def _instruction(self, opcode: Opcode, lexer: LineLexer) -> bytes:
        if opcode is Opcode.SYSCALL:
            argument = lexer.next_token()
            if argument is None:
                raise self.fail(AssemblyStatus.SYSCALL_ARGUMENT_MISSING)
            if argument.type is not TokenType.INTEGER:
                raise self.fail(AssemblyStatus.INVALID_SYSCALL_ARGUMENT)
            return bytes([opcode]) + (argument.value & _UINT32_MASK).to_bytes(4, "little")

        if opcode in (Opcode.PUSH, Opcode.POP):
            operand = self._push_pop_operand(lexer)
            head = bytes([opcode, operand.info.to_byte()])
            if not operand.info.do_read_immediate:
                return head
            if operand.label is None:
                return head + operand.literal.to_bytes(4, "little")
            self.links.append(Link(operand.label, self.line.index, len(self.output) + 2))
            return head + _UNRESOLVED

        if opcode in _JUMPS:
            target = lexer.next_token()
            if target is None:
                raise self.fail(AssemblyStatus.JUMP_ARGUMENT_MISSING)
            if target.type is not TokenType.IDENTIFIER:
                raise self.fail(AssemblyStatus.INVALID_JUMP_ARGUMENT)
            if len(target.value) >= LABEL_MAX:
                raise self.fail(AssemblyStatus.TOO_LONG_LABEL)
            self.links.append(Link(target.value, self.line.index, len(self.output) + 1))
            return bytes([opcode]) + _UNRESOLVED

        return bytes([opcode])

    def _declaration(self, name_token: Token, lexer: LineLexer) -> None:
        separator = lexer.next_token()
        if separator is None or name_token.type is not TokenType.IDENTIFIER:
            raise self.fail(AssemblyStatus.UNKNOWN_INSTRUCTION)
        name = name_token.value
        if len(name) >= LABEL_MAX:
            raise self.fail(AssemblyStatus.TOO_LONG_LABEL)

        if separator.type is TokenType.COLON:
            self.labels.append(Label(name, self.line.index, len(self.output), True))
        elif separator.type is TokenType.EQUAL:
            value_token = lexer.next_token()
            if value_token is None:
                raise self.fail(AssemblyStatus.INVALID_CONSTANT_VALUE)
            if value_token.type is TokenType.INTEGER:
                value = value_token.value & _UINT32_MASK
            elif value_token.type is TokenType.FLOATING:
                value = _float_bits(value_token.value)
            else:
                raise self.fail(AssemblyStatus.INVALID_CONSTANT_VALUE)
            self.labels.append(Label(name, self.line.index, value, False))
        else:
            raise self.fail(AssemblyStatus.UNKNOWN_INSTRUCTION)

    def _immediate(self, token: Token, operand: _Operand) -> bool:
        if token.type is TokenType.INTEGER:
            operand.literal = token.value & _UINT32_MASK
            operand.label = None
            return True
        if token.type is TokenType.FLOATING:
            operand.literal = _float_bits(token.value)
            operand.label = None
            return True
        if token.type is TokenType.IDENTIFIER:
            if len(token.value) >= LABEL_MAX:
                raise self.fail(AssemblyStatus.TOO_LONG_LABEL)
            operand.label = token.value
            return True
        return False

    def _immediate_or_register(self, token: Token, operand: _Operand) -> None:
        register = parse_register(token.value) if token.type is TokenType.IDENTIFIER else None
        if register is not None:
            operand.info.do_read_immediate = False
            operand.info.register_index = register
        elif self._immediate(token, operand):
            operand.info.do_read_immediate = True
            operand.info.register_index = 0
        else:
            raise self.fail(AssemblyStatus.INVALID_PUSHPOP_ARGUMENT)

    def _required_register(self, token: Token) -> int:
        register = parse_register(token.value)
        if register is None:
            raise self.fail(AssemblyStatus.UNKNOWN_REGISTER)
        return register

    def _push_pop_operand(self, lexer: LineLexer) -> _Operand:
        tokens: List[Token] = []
        while len(tokens) < 5:
            token = lexer.next_token()
            if token is None:
                break
            tokens.append(token)
        types = [token.type for token in tokens]
        operand = _Operand()
        info = operand.info

        if len(tokens) == 5:
            if (
                types[0] is not TokenType.LEFT_SQUARE_BRACKET
                or types[1] is not TokenType.IDENTIFIER
                or types[2] is not TokenType.PLUS
                or not self._immediate(tokens[3], operand)
                or types[4] is not TokenType.RIGHT_SQUARE_BRACKET
            ):
                raise self.fail(AssemblyStatus.INVALID_PUSHPOP_ARGUMENT)
            info.register_index = self._required_register(tokens[1])
            info.is_memory_access = True
            info.do_read_immediate = True
            return operand

        if len(tokens) == 3:
            if types[0] is TokenType.LEFT_SQUARE_BRACKET and types[2] is TokenType.RIGHT_SQUARE_BRACKET:
                info.is_memory_access = True
                self._immediate_or_register(tokens[1], operand)
            elif (
                types[0] is TokenType.IDENTIFIER
                and types[1] is TokenType.PLUS
                and self._immediate(tokens[2], operand)
            ):
                info.register_index = self._required_register(tokens[0])
                info.is_memory_access = False
                info.do_read_immediate = True
            else:
                raise self.fail(AssemblyStatus.INVALID_PUSHPOP_ARGUMENT)
            return operand

        if len(tokens) == 1:
            info.is_memory_access = False
            self._immediate_or_register(tokens[0], operand)
            return operand

        raise self.fail(AssemblyStatus.INVALID_PUSHPOP_ARGUMENT)


def assemble(text: str, source_name: str) -> AssembledObject:
    """Assemble text into an object.

    Raises AssemblyError describing the first problem found.
    """
    assembler = _Assembler()
    assembler.run(text)
    return AssembledObject(
        source_name=source_name,
        code=bytes(assembler.output),
        links=tuple(assembler.links),
        labels=tuple(assembler.labels),
    )