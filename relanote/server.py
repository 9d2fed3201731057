"""Editor support for relanote documents: open documents and hover text."""

from __future__ import annotations

from dataclasses import dataclass

from relanote.docs import builtin_docs, interval_semitones, keyword_docs
from relanote.lexer import Lexer
from relanote.tokens import Accidental, IntervalData, Token, TokenKind

_QUALITY_NAMES = {
    "P": "Perfect",
    "M": "Major",
    "m": "Minor",
    "A": "Augmented",
    "d": "Diminished",
}

_DEGREE_NAMES = {
    1: "Unison",
    2: "Second",
    3: "Third",
    4: "Fourth",
    5: "Fifth",
    6: "Sixth",
    7: "Seventh",
    8: "Octave",
    9: "Ninth",
    10: "Tenth",
    11: "Eleventh",
    12: "Twelfth",
    13: "Thirteenth",
}

_KEYWORD_TOKENS = {
    TokenKind.LET: "let",
    TokenKind.LAYER: "layer",
    TokenKind.SCALE: "scale",
    TokenKind.CHORD: "chord",
    TokenKind.SECTION: "section",
    TokenKind.PART: "Part",
    TokenKind.IF: "if",
    TokenKind.MATCH: "match",
}

_FIXED_HOVERS = {
    TokenKind.ROOT: (
        "**R** (Root)\n\nThe root of the current scale/chord, or a rest when used "
        "alone.\n\n- Semitones: `0`\n- Cents: `0`"
    ),
    TokenKind.STACCATO: (
        "**Staccato** (`*`)\n\nShortens the note to 50% of its duration."
    ),
    TokenKind.ACCENT: (
        "**Accent** (`^`)\n\nEmphasizes the note with increased velocity."
    ),
    TokenKind.PORTAMENTO: (
        "**Portamento/Slur** (`~`)\n\nSmooth transition between notes."
    ),
    TokenKind.PIPE_OP: (
        "**Pipe Operator** (`|>`)\n\nPasses the left value as the last argument "
        "to the right function.\n\n```rela\nmelody |> transpose(P5) |> reverse\n```"
    ),
}


@dataclass(frozen=True)
class Hover:
    """Markdown hover text and the zero-based ``(line, character)`` range it covers."""

    value: str
    start: tuple[int, int]
    end: tuple[int, int]


def _lines(content: str) -> list[str]:
    """Split into lines on ``\\n``, dropping one trailing ``\\r`` per line."""
    if not content:
        return []
    pieces = content.split("\n")
    if content.endswith("\n"):
        pieces.pop()
    return [p[:-1] if p.endswith("\r") else p for p in pieces]


def position_to_offset(content: str, line: int, character: int) -> int:
    """Convert a zero-based line and character into an offset in ``content``.

    The character is clamped to the length of its line. A line past the end
    gives an offset past every line.
    """
    offset = 0
    for index, text in enumerate(_lines(content)):
        if index == line:
            return offset + min(character, len(text))
        offset += len(text) + 1
    return offset


def _location(content: str, offset: int) -> tuple[int, int]:
    before = content[:offset]
    line = before.count("\n")
    column = offset - (before.rfind("\n") + 1)
    return line, column


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _code_block(signature: str, description: str) -> str:
    return f"```rela\n{signature}\n```\n\n{description}"


def _interval_hover(data: IntervalData) -> str:
    quality = data.quality.value
    degree_name = _DEGREE_NAMES.get(data.degree, "Interval")
    semitones = interval_semitones(quality, data.degree)
    semitones += sum(1.0 if acc is Accidental.SHARP else -1.0 for acc in data.accidentals)
    cents = semitones * 100.0
    return (
        f"**{_QUALITY_NAMES[quality]} {degree_name}**\n\n"
        f"- Semitones: `{_format_number(semitones)}`\n"
        f"- Cents: `{_format_number(cents)}`"
    )


def _hover_text(token: Token) -> str | None:
    kind = token.kind
    if kind is TokenKind.IDENT:
        docs = builtin_docs(token.value)
        if docs is not None:
            return _code_block(*docs)
        return _code_block(token.value, "Identifier")
    if kind in _KEYWORD_TOKENS:
        docs = keyword_docs(_KEYWORD_TOKENS[kind])
        return None if docs is None else _code_block(*docs)
    if kind is TokenKind.INTERVAL:
        return _interval_hover(token.value)
    return _FIXED_HOVERS.get(kind)


def hover(content: str, line: int, character: int) -> Hover | None:
    """Return hover information for the token at a position, or None."""
    offset = position_to_offset(content, line, character)
    for token in Lexer(content):
        if not token.span.start <= offset <= token.span.end:
            continue
        text = _hover_text(token)
        if text is not None:
            return Hover(
                text,
                _location(content, token.span.start),
                _location(content, token.span.end),
            )
    return None


@dataclass
class _Document:
    content: str
    version: int


class DocumentStore:
    """The documents an editor has open, keyed by URI."""

    def __init__(self) -> None:
        self._documents: dict[str, _Document] = {}

    def __contains__(self, uri: object) -> bool:
        return uri in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def open(self, uri: str, content: str, version: int) -> None:
        """Record a newly opened document, replacing any earlier copy."""
        self._documents[uri] = _Document(content, version)

    def change(self, uri: str, content: str, version: int) -> None:
        """Replace the text of an open document; unknown URIs are ignored."""
        document = self._documents.get(uri)
        if document is not None:
            document.content = content
            document.version = version

    def close(self, uri: str) -> None:
        """Forget a document."""
        self._documents.pop(uri, None)

    def hover(self, uri: str, line: int, character: int) -> Hover | None:
        """Return hover information inside an open document, or None."""
        document = self._documents.get(uri)
        if document is None:
            return None
        return hover(document.content, line, character)