"""Assembly status codes and the error raised when assembling fails."""

from __future__ import annotations

import enum


class AssemblyStatus(enum.Enum):
    """Outcome of assembling a piece of text."""

    OK = 0
    INTERNAL_ERROR = 1
    UNKNOWN_INSTRUCTION = 2
    UNEXPECTED_TEXT_END = 3
    UNKNOWN_REGISTER = 4
    INVALID_PUSHPOP_ARGUMENT = 5
    UNKNOWN_OPCODE = 6
    UNKNOWN_TOKEN = 7
    INVALID_SYSCALL_ARGUMENT = 8
    SYSCALL_ARGUMENT_MISSING = 9
    INVALID_JUMP_ARGUMENT = 10
    JUMP_ARGUMENT_MISSING = 11
    EMPTY_LABEL = 12
    TOO_LONG_LABEL = 13
    INVALID_CONSTANT_VALUE = 14
    UNEXPECTED_CHARACTERS = 15

    def __str__(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    AssemblyStatus.OK: "ok",
    AssemblyStatus.INTERNAL_ERROR: "internal error",
    AssemblyStatus.UNKNOWN_INSTRUCTION: "unknown instruction",
    AssemblyStatus.UNEXPECTED_TEXT_END: "unexpected text end",
    AssemblyStatus.UNKNOWN_REGISTER: "unknown register",
    AssemblyStatus.INVALID_PUSHPOP_ARGUMENT: "invalid pushpop argument",
    AssemblyStatus.UNKNOWN_OPCODE: "unknown opcode",
    AssemblyStatus.UNKNOWN_TOKEN: "unknown token",
    AssemblyStatus.INVALID_SYSCALL_ARGUMENT: "invalid syscall argument",
    AssemblyStatus.SYSCALL_ARGUMENT_MISSING: "syscall argument missing",
    AssemblyStatus.INVALID_JUMP_ARGUMENT: "invalid jump argument",
    AssemblyStatus.JUMP_ARGUMENT_MISSING: "jump argument missing",
    AssemblyStatus.EMPTY_LABEL: "label is empty",
    AssemblyStatus.TOO_LONG_LABEL: "label is too long",
    AssemblyStatus.INVALID_CONSTANT_VALUE: "invalid constant value",
    AssemblyStatus.UNEXPECTED_CHARACTERS: "unexpected characters",
}


class AssemblyError(Exception):
    """Raised when assembling stops on an error.

    Carries the status, the index of the source line and that line's contents.
    """

    def __init__(self, status: AssemblyStatus, line: int = 0, contents: str = "") -> None:
        super().__init__(status, line, contents)
        self.status = status
        self.line = line
        self.contents = contents

    def __str__(self) -> str:
        return f'{self.status} at {self.line}: "{self.contents}"'