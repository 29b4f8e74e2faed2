"""Assembler for CF assembly text, with CF language syntax tree types."""

__version__ = "0.1.0"

__all__ = ["status", "lexer", "assembler", "syntax"]