"""Token definitions and the raw scanner for relanote source text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Iterator, NamedTuple


@dataclass(frozen=True)
class Span:
    """A half-open byte range ``[start, end)`` inside one source."""

    start: int
    end: int
    source_id: int = 0


class IntervalQuality(Enum):
    """Interval quality prefix."""

    MAJOR = "M"
    MINOR = "m"
    PERFECT = "P"
    DIMINISHED = "d"
    AUGMENTED = "A"


class Accidental(Enum):
    """Accidental modifier written after an interval."""

    SHARP = "+"
    FLAT = "-"


@dataclass(frozen=True)
class IntervalData:
    """A parsed interval such as ``M3`` or ``P5+``."""

    quality: IntervalQuality
    degree: int
    accidentals: tuple[Accidental, ...] = ()


_NOTE_OFFSETS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}


@dataclass(frozen=True)
class AbsolutePitchData:
    """An absolute pitch such as ``C4``, ``D#3`` or ``Bb5``."""

    note: str
    accidental: int
    octave: int

    def to_midi_note(self) -> int:
        """Return the MIDI note number (C4 = 60), clamped to 0..127."""
        base = _NOTE_OFFSETS.get(self.note, 0)
        midi = 12 * (self.octave + 1) + base + self.accidental
        return max(0, min(127, midi))


_U8_MAX = 255
_I64_MAX = 2**63 - 1
_INTERVAL_SHAPE = re.compile(r"(.)([0-9]*)(.*)", re.DOTALL)
_OCTAVE_SHAPE = re.compile(r"\+?[0-9]+")


def parse_interval(text: str) -> IntervalData:
    """Parse interval text like ``m7-``; raise ValueError if it is not one."""
    match = _INTERVAL_SHAPE.fullmatch(text)
    if match is None:
        raise ValueError(f"not an interval: {text!r}")
    quality_char, degree_text, rest = match.groups()
    try:
        quality = IntervalQuality(quality_char)
    except ValueError:
        raise ValueError(f"unknown interval quality in {text!r}") from None
    if not degree_text or int(degree_text) > _U8_MAX:
        raise ValueError(f"invalid interval degree in {text!r}")
    try:
        accidentals = tuple(Accidental(c) for c in rest)
    except ValueError:
        raise ValueError(f"invalid accidental in {text!r}") from None
    return IntervalData(quality, int(degree_text), accidentals)


def parse_absolute_pitch(text: str) -> AbsolutePitchData:
    """Parse pitch text like ``Bb3``; raise ValueError if it is not one."""
    if not text or text[0] not in _NOTE_OFFSETS:
        raise ValueError(f"not an absolute pitch: {text!r}")
    note, rest = text[0], text[1:]
    accidental = 0
    if rest.startswith("#"):
        accidental, rest = 1, rest[1:]
    elif rest.startswith("b"):
        accidental, rest = -1, rest[1:]
    if _OCTAVE_SHAPE.fullmatch(rest) is None or int(rest) > _U8_MAX:
        raise ValueError(f"invalid octave in {text!r}")
    return AbsolutePitchData(note, accidental, int(rest))


class TokenKind(Enum):
    """The kind of a token produced by the scanner."""

    # Keywords
    LET = auto()
    SET = auto()
    IN = auto()
    IF = auto()
    THEN = auto()
    ELSE = auto()
    MATCH = auto()
    WITH = auto()
    SCALE = auto()
    CHORD = auto()
    SECTION = auto()
    LAYER = auto()
    PART = auto()
    SYNTH = auto()
    OSC = auto()
    FILTER = auto()
    ENV = auto()
    IMPORT = auto()
    EXPORT = auto()
    FROM = auto()
    AS = auto()
    MOD = auto()
    USE = auto()
    TRUE = auto()
    FALSE = auto()
    RENDER = auto()
    CONTEXT = auto()
    KEY = auto()
    # Music primitives
    ROOT = auto()
    INTERVAL = auto()
    ABSOLUTE_PITCH = auto()
    BARS = auto()
    BEATS = auto()
    # Articulations
    STACCATO = auto()
    ACCENT = auto()
    PORTAMENTO = auto()
    # Delimiters
    PIPE = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    LPAREN = auto()
    RPAREN = auto()
    LANGLE = auto()
    RANGLE = auto()
    # Operators
    PIPE_OP = auto()
    COMPOSE = auto()
    ARROW = auto()
    LAMBDA = auto()
    EQ = auto()
    COLON_COLON = auto()
    COLON = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS_PLUS = auto()
    PLUS = auto()
    # Literals and identifiers
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    IDENT = auto()
    LINE_COMMENT = auto()
    NEWLINE = auto()
    EOF = auto()
    # Input the scanner could not recognise
    ERROR = auto()

    def is_keyword(self) -> bool:
        return self in _KEYWORD_KINDS

    def is_operator(self) -> bool:
        return self in _OPERATOR_KINDS

    def is_articulation(self) -> bool:
        return self in _ARTICULATION_KINDS


_KEYWORD_KINDS = frozenset(
    {
        TokenKind.LET, TokenKind.SET, TokenKind.IN, TokenKind.IF,
        TokenKind.THEN, TokenKind.ELSE, TokenKind.MATCH, TokenKind.WITH,
        TokenKind.SCALE, TokenKind.CHORD, TokenKind.SECTION, TokenKind.LAYER,
        TokenKind.PART, TokenKind.SYNTH, TokenKind.OSC, TokenKind.FILTER,
        TokenKind.ENV, TokenKind.IMPORT, TokenKind.EXPORT, TokenKind.FROM,
        TokenKind.AS, TokenKind.MOD, TokenKind.USE, TokenKind.TRUE,
        TokenKind.FALSE,
    }
)

_OPERATOR_KINDS = frozenset(
    {
        TokenKind.PIPE_OP, TokenKind.ARROW, TokenKind.LAMBDA, TokenKind.EQ,
        TokenKind.COLON_COLON, TokenKind.COLON, TokenKind.COMMA,
        TokenKind.DOT, TokenKind.MINUS, TokenKind.PLUS,
    }
)

_ARTICULATION_KINDS = frozenset(
    {TokenKind.STACCATO, TokenKind.ACCENT, TokenKind.PORTAMENTO}
)


@dataclass(frozen=True)
class Token:
    """A token with its span and, for literal kinds, its value."""

    kind: TokenKind
    span: Span
    value: Any = None

    @classmethod
    def eof(cls, span: Span) -> Token:
        return cls(TokenKind.EOF, span)


class _Rule(NamedTuple):
    kind: TokenKind
    pattern: re.Pattern[str]
    priority: int
    convert: Callable[[str], Any] | None


def _parse_integer(text: str) -> int:
    value = int(text)
    if value > _I64_MAX:
        raise ValueError(f"integer literal out of range: {text}")
    return value


_LITERALS: list[tuple[str, TokenKind, int | None]] = [
    ("let", TokenKind.LET, None),
    ("set", TokenKind.SET, None),
    ("in", TokenKind.IN, None),
    ("if", TokenKind.IF, None),
    ("then", TokenKind.THEN, None),
    ("else", TokenKind.ELSE, None),
    ("match", TokenKind.MATCH, None),
    ("with", TokenKind.WITH, None),
    ("scale", TokenKind.SCALE, None),
    ("chord", TokenKind.CHORD, None),
    ("section", TokenKind.SECTION, None),
    ("layer", TokenKind.LAYER, None),
    ("part", TokenKind.PART, None),
    ("synth", TokenKind.SYNTH, None),
    ("osc", TokenKind.OSC, None),
    ("filter", TokenKind.FILTER, None),
    ("env", TokenKind.ENV, None),
    ("import", TokenKind.IMPORT, None),
    ("export", TokenKind.EXPORT, None),
    ("from", TokenKind.FROM, None),
    ("as", TokenKind.AS, None),
    ("mod", TokenKind.MOD, None),
    ("use", TokenKind.USE, None),
    ("true", TokenKind.TRUE, None),
    ("false", TokenKind.FALSE, None),
    ("render", TokenKind.RENDER, None),
    ("Context", TokenKind.CONTEXT, None),
    ("Key", TokenKind.KEY, None),
    ("R", TokenKind.ROOT, 3),
    ("*", TokenKind.STACCATO, None),
    ("^", TokenKind.ACCENT, None),
    ("~", TokenKind.PORTAMENTO, None),
    ("|", TokenKind.PIPE, None),
    ("{", TokenKind.LBRACE, None),
    ("}", TokenKind.RBRACE, None),
    ("[", TokenKind.LBRACKET, None),
    ("]", TokenKind.RBRACKET, None),
    ("(", TokenKind.LPAREN, None),
    (")", TokenKind.RPAREN, None),
    ("<", TokenKind.LANGLE, None),
    (">", TokenKind.RANGLE, None),
    ("|>", TokenKind.PIPE_OP, 3),
    (">>", TokenKind.COMPOSE, 3),
    ("->", TokenKind.ARROW, None),
    ("\\", TokenKind.LAMBDA, None),
    ("=", TokenKind.EQ, None),
    ("::", TokenKind.COLON_COLON, None),
    (":", TokenKind.COLON, None),
    (",", TokenKind.COMMA, None),
    (".", TokenKind.DOT, None),
    ("-", TokenKind.MINUS, None),
    ("++", TokenKind.PLUS_PLUS, None),
    ("+", TokenKind.PLUS, None),
    ("\n", TokenKind.NEWLINE, None),
]

_RULES: list[_Rule] = [
    _Rule(kind, re.compile(re.escape(text)), 2 * len(text) if prio is None else prio, None)
    for text, kind, prio in _LITERALS
] + [
    _Rule(TokenKind.INTERVAL, re.compile(r"[MPmAd][1-9][0-9]*[+-]*"), 3, parse_interval),
    _Rule(
        TokenKind.ABSOLUTE_PITCH,
        re.compile(r"(?:[CDEFGB][#b]?|A[#b])[0-9]"),
        4,
        parse_absolute_pitch,
    ),
    _Rule(TokenKind.BARS, re.compile(r"[0-9]+bars?"), 1, None),
    _Rule(TokenKind.BEATS, re.compile(r"[0-9]+beats?"), 1, None),
    _Rule(TokenKind.INTEGER, re.compile(r"[0-9]+"), 1, _parse_integer),
    _Rule(TokenKind.FLOAT, re.compile(r"[0-9]+\.[0-9]+"), 4, float),
    _Rule(TokenKind.STRING, re.compile(r'"[^"]*"'), 4, lambda s: s[1:-1]),
    _Rule(TokenKind.IDENT, re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*"), 1, str),
    _Rule(TokenKind.LINE_COMMENT, re.compile(r";[^\n]*"), 2, str),
]

_WHITESPACE = re.compile(r"[ \t\r]+")


def scan(text: str) -> Iterator[Token]:
    """Yield every token of ``text``, comments and errors included.

    The longest match wins; among matches of equal length the rule with the
    highest priority wins. Unrecognised input yields ``TokenKind.ERROR``
    tokens whose value is the offending text. No EOF token is produced.
    """
    pos = 0
    length = len(text)
    while pos < length:
        ws = _WHITESPACE.match(text, pos)
        if ws is not None:
            pos = ws.end()
            continue

        best: tuple[int, int, _Rule] | None = None
        for rule in _RULES:
            match = rule.pattern.match(text, pos)
            if match is None or match.end() == pos:
                continue
            candidate = (match.end(), rule.priority, rule)
            if best is None or candidate[:2] > best[:2]:
                best = candidate

        if best is None:
            yield Token(TokenKind.ERROR, Span(pos, pos + 1), text[pos])
            pos += 1
            continue

        end, _, rule = best
        lexeme = text[pos:end]
        span = Span(pos, end)
        if rule.convert is None:
            yield Token(rule.kind, span)
        else:
            try:
                value = rule.convert(lexeme)
            except ValueError:
                yield Token(TokenKind.ERROR, span, lexeme)
            else:
                yield Token(rule.kind, span, value)
        pos = end