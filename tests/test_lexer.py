import pytest

from relanote.lexer import Lexer, lex
from relanote.tokens import (
    Accidental,
    IntervalData,
    IntervalQuality,
    Span,
    TokenKind,
)


def kinds(text):
    return [t.kind for t in lex(text)]


def test_scale_definition():
    tokens = lex("scale Major = { R, M2, M3, P4, P5, M6, M7 }")
    assert tokens[0].kind == TokenKind.SCALE
    assert (tokens[1].kind, tokens[1].value) == (TokenKind.IDENT, "Major")
    assert tokens[2].kind == TokenKind.EQ
    assert tokens[3].kind == TokenKind.LBRACE
    assert tokens[4].kind == TokenKind.ROOT


def test_block_with_articulations():
    k = kinds("| R* M3^ P5~ |")
    assert k[:5] == [
        TokenKind.PIPE,
        TokenKind.ROOT,
        TokenKind.STACCATO,
        TokenKind.INTERVAL,
        TokenKind.ACCENT,
    ]


def test_function_application():
    tokens = lex("melody_motif |> repeat(2)")
    assert tokens[0].value == "melody_motif"
    assert tokens[1].kind == TokenKind.PIPE_OP
    assert (tokens[2].kind, tokens[2].value) == (TokenKind.IDENT, "repeat")
    assert tokens[3].kind == TokenKind.LPAREN
    assert (tokens[4].kind, tokens[4].value) == (TokenKind.INTEGER, 2)
    assert tokens[5].kind == TokenKind.RPAREN


def test_section():
    tokens = lex('section "Intro" { layer [ ] }')
    assert tokens[0].kind == TokenKind.SECTION
    assert (tokens[1].kind, tokens[1].value) == (TokenKind.STRING, "Intro")
    assert tokens[2].kind == TokenKind.LBRACE
    assert tokens[3].kind == TokenKind.LAYER


def test_with_keyword():
    k = kinds("Major with { P4+ }")
    assert k[:3] == [TokenKind.IDENT, TokenKind.WITH, TokenKind.LBRACE]


def test_env():
    tokens = lex("env(pp, mf, 4bars)")
    assert tokens[0].kind == TokenKind.ENV
    assert tokens[1].kind == TokenKind.LPAREN
    assert (tokens[2].kind, tokens[2].value) == (TokenKind.IDENT, "pp")


def test_let_lambda():
    tokens = lex(r"let f = \x -> x")
    assert [t.kind for t in tokens] == [
        TokenKind.LET,
        TokenKind.IDENT,
        TokenKind.EQ,
        TokenKind.LAMBDA,
        TokenKind.IDENT,
        TokenKind.ARROW,
        TokenKind.IDENT,
        TokenKind.EOF,
    ]
    assert tokens[1].value == "f"
    assert tokens[4].value == "x"


def test_pipe_operator():
    tokens = lex("x |> reverse")
    assert [t.kind for t in tokens] == [
        TokenKind.IDENT,
        TokenKind.PIPE_OP,
        TokenKind.IDENT,
        TokenKind.EOF,
    ]
    assert tokens[2].value == "reverse"


def test_let_in():
    tokens = lex("let x = 42 in x")
    assert [t.kind for t in tokens] == [
        TokenKind.LET,
        TokenKind.IDENT,
        TokenKind.EQ,
        TokenKind.INTEGER,
        TokenKind.IN,
        TokenKind.IDENT,
        TokenKind.EOF,
    ]
    assert tokens[3].value == 42


def test_newline_preserved():
    k = kinds("let x = 42\nx")
    assert k[:6] == [
        TokenKind.LET,
        TokenKind.IDENT,
        TokenKind.EQ,
        TokenKind.INTEGER,
        TokenKind.NEWLINE,
        TokenKind.IDENT,
    ]


def test_multiple_newlines():
    k = kinds("a\n\nb")
    assert k[:4] == [
        TokenKind.IDENT,
        TokenKind.NEWLINE,
        TokenKind.NEWLINE,
        TokenKind.IDENT,
    ]


def test_comment_skipped():
    tokens = lex("a ; this is a comment\nb")
    assert [t.kind for t in tokens] == [
        TokenKind.IDENT,
        TokenKind.NEWLINE,
        TokenKind.IDENT,
        TokenKind.EOF,
    ]
    assert tokens[2].value == "b"


def test_intervals():
    k = kinds("R M2 m3 P4 A5 d7")
    assert k[0] == TokenKind.ROOT
    assert k[1:6] == [TokenKind.INTERVAL] * 5


def test_interval_with_modifiers():
    tokens = lex("P5+ M3- P8++")
    assert [t.kind for t in tokens[:3]] == [TokenKind.INTERVAL] * 3
    assert tokens[0].value == IntervalData(
        IntervalQuality.PERFECT, 5, (Accidental.SHARP,)
    )


def test_absolute_pitches():
    tokens = lex("C4 D4 Bb3 F#5")
    assert [t.kind for t in tokens[:4]] == [TokenKind.ABSOLUTE_PITCH] * 4
    assert tokens[0].value.to_midi_note() == 60


def test_concat_operator():
    k = kinds("a ++ b")
    assert k[:3] == [TokenKind.IDENT, TokenKind.PLUS_PLUS, TokenKind.IDENT]


def test_comparison_operators():
    k = kinds("a < b > c")
    assert k[1] == TokenKind.LANGLE
    assert k[3] == TokenKind.RANGLE


def test_logical_keywords_are_identifiers():
    tokens = lex("a and b or not c")
    assert [t.value for t in tokens[:6]] == ["a", "and", "b", "or", "not", "c"]
    assert all(t.kind == TokenKind.IDENT for t in tokens[:6])


def test_scale_degree():
    tokens = lex("| <1> <3> <5> |")
    assert tokens[0].kind == TokenKind.PIPE
    assert tokens[1].kind == TokenKind.LANGLE
    assert (tokens[2].kind, tokens[2].value) == (TokenKind.INTEGER, 1)
    assert tokens[3].kind == TokenKind.RANGLE


def test_rest():
    k = kinds("| R - M3 |")
    assert k[:3] == [TokenKind.PIPE, TokenKind.ROOT, TokenKind.MINUS]


def test_duration():
    tokens = lex("| R:2 M3:4 |")
    assert [t.kind for t in tokens[:3]] == [
        TokenKind.PIPE,
        TokenKind.ROOT,
        TokenKind.COLON,
    ]
    assert tokens[3].value == 2


def test_control_flow_keywords():
    k = kinds("if true then a else b")
    assert k[0] == TokenKind.IF
    assert k[1] == TokenKind.TRUE
    assert k[2] == TokenKind.THEN
    assert k[4] == TokenKind.ELSE


def test_match_expression():
    k = kinds("match x with | a -> b")
    assert k[0] == TokenKind.MATCH
    assert k[2] == TokenKind.WITH
    assert k[3] == TokenKind.PIPE
    assert k[5] == TokenKind.ARROW


def test_synth_definition():
    tokens = lex("synth Lead = { osc: Saw }")
    assert tokens[0].kind == TokenKind.SYNTH
    assert (tokens[1].kind, tokens[1].value) == (TokenKind.IDENT, "Lead")


def test_integers():
    tokens = lex("0 42 123")
    assert [(t.kind, t.value) for t in tokens[:3]] == [
        (TokenKind.INTEGER, 0),
        (TokenKind.INTEGER, 42),
        (TokenKind.INTEGER, 123),
    ]


def test_floats():
    tokens = lex("0.0 3.14 0.5")
    assert [(t.kind, t.value) for t in tokens[:3]] == [
        (TokenKind.FLOAT, 0.0),
        (TokenKind.FLOAT, 3.14),
        (TokenKind.FLOAT, 0.5),
    ]


def test_strings():
    tokens = lex('"hello" "world"')
    assert [(t.kind, t.value) for t in tokens[:2]] == [
        (TokenKind.STRING, "hello"),
        (TokenKind.STRING, "world"),
    ]


def test_brackets():
    k = kinds("( ) [ ] { }")
    assert k[:6] == [
        TokenKind.LPAREN,
        TokenKind.RPAREN,
        TokenKind.LBRACKET,
        TokenKind.RBRACKET,
        TokenKind.LBRACE,
        TokenKind.RBRACE,
    ]


def test_set_binding():
    k = kinds("set Key = C4")
    assert k[:3] == [TokenKind.SET, TokenKind.KEY, TokenKind.EQ]


def test_set_tempo():
    tokens = lex("set tempo = 120")
    assert tokens[0].kind == TokenKind.SET
    assert (tokens[1].kind, tokens[1].value) == (TokenKind.IDENT, "tempo")


def test_peek_does_not_consume():
    lexer = Lexer("let x")
    first = lexer.peek()
    assert lexer.peek() == first
    assert lexer.next_token() == first
    assert lexer.next_token().value == "x"
    assert lexer.next_token() is None
    assert lexer.peek() is None


def test_iteration_matches_tokenize_without_eof():
    text = "let melody = | R M3 P5 | |> reverse"
    assert list(Lexer(text)) == lex(text)[:-1]


def test_empty_input_yields_only_eof():
    assert lex("") == [lex("")[0]]
    assert lex("")[0].kind == TokenKind.EOF
    assert lex("")[0].span == Span(0, 0)


def test_eof_span_at_end_of_input():
    text = "x |> reverse"
    eof = lex(text)[-1]
    assert eof.kind == TokenKind.EOF
    assert eof.span.start == eof.span.end == len(text)


def test_source_id_is_carried_on_spans():
    tokens = Lexer("a b", source_id=7).tokenize()
    assert all(t.span.source_id == 7 for t in tokens)


def test_spans_cover_lexemes():
    text = "let melody = 42"
    for token in lex(text)[:-1]:
        lexeme = text[token.span.start:token.span.end]
        if token.kind == TokenKind.IDENT:
            assert lexeme == token.value
        assert lexeme.strip() == lexeme and lexeme


@pytest.mark.parametrize("text", ["a $ b", "a @ b", "a ? b"])
def test_invalid_characters_are_skipped(text):
    tokens = lex(text)
    assert [(t.kind, t.value) for t in tokens[:-1]] == [
        (TokenKind.IDENT, "a"),
        (TokenKind.IDENT, "b"),
    ]
    assert tokens[-1].kind == TokenKind.EOF


def test_next_after_exhaustion_raises_stop_iteration():
    lexer = Lexer("a")
    assert next(lexer).value == "a"
    with pytest.raises(StopIteration):
        next(lexer)