import pytest

from cfasm.lexer import LineLexer, SourceLine, Token, TokenType, iter_lines
from cfasm.status import AssemblyError, AssemblyStatus


def _tokens(text, index=1):
    return list(LineLexer(SourceLine(index, text)))


def test_iter_lines_skips_blank_and_comment_lines():
    text = "push 1\n\n   ; only a comment\nhalt ; stop\n"
    lines = list(iter_lines(text))
    assert [line.text for line in lines] == ["push 1", "halt"]


def test_iter_lines_indices_count_physical_lines():
    lines = list(iter_lines("add\n\nsub"))
    assert [line.index for line in lines] == [1, 3]


def test_iter_lines_strips_inline_spaces():
    lines = list(iter_lines("\t  mul  \r\n"))
    assert lines == [SourceLine(1, "mul")]


def test_iter_lines_empty_text():
    assert list(iter_lines("")) == []


def test_single_character_tokens():
    types = [token.type for token in _tokens("[ ] + : =")]
    assert types == [
        TokenType.LEFT_SQUARE_BRACKET,
        TokenType.RIGHT_SQUARE_BRACKET,
        TokenType.PLUS,
        TokenType.COLON,
        TokenType.EQUAL,
    ]


def test_identifier_and_integer():
    assert _tokens("push 12") == [
        Token(TokenType.IDENTIFIER, "push"),
        Token(TokenType.INTEGER, 12),
    ]


def test_hexadecimal_integer():
    assert _tokens("0x1F") == [Token(TokenType.INTEGER, 31)]


def test_floating_number():
    assert _tokens("1.5") == [Token(TokenType.FLOATING, 1.5)]


def test_exponent_makes_floating():
    (token,) = _tokens("2e3")
    assert token.type is TokenType.FLOATING
    assert token.value == float("2e3")


def test_memory_operand_tokens():
    tokens = _tokens("[ax+8]")
    assert [token.type for token in tokens] == [
        TokenType.LEFT_SQUARE_BRACKET,
        TokenType.IDENTIFIER,
        TokenType.PLUS,
        TokenType.INTEGER,
        TokenType.RIGHT_SQUARE_BRACKET,
    ]
    assert tokens[1].value == "ax"
    assert tokens[3].value == 8


def test_label_tokens():
    assert _tokens("_loop_1:") == [
        Token(TokenType.IDENTIFIER, "_loop_1"),
        Token(TokenType.COLON),
    ]


def test_at_end_after_consuming():
    lexer = LineLexer(SourceLine(1, "ret"))
    assert not lexer.at_end()
    assert lexer.next_token() == Token(TokenType.IDENTIFIER, "ret")
    assert lexer.at_end()
    assert lexer.next_token() is None


def test_unknown_token_raises_with_line_details():
    lexer = LineLexer(SourceLine(5, "push $"))
    assert lexer.next_token() == Token(TokenType.IDENTIFIER, "push")
    with pytest.raises(AssemblyError) as info:
        lexer.next_token()
    assert info.value.status is AssemblyStatus.UNKNOWN_TOKEN
    assert info.value.line == 5
    assert info.value.contents == "push $"