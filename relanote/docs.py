"""Reference documentation for relanote builtins, keywords and intervals."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from relanote.tokens import IntervalQuality

_BUILTINS: dict[str, tuple[str, str]] = {
    "reverse": (
        "reverse : Block -> Block",
        "Reverses the order of slots in a block.\n\n**Example:**\n```rela\n"
        "| R M3 P5 | |> reverse  -- becomes | P5 M3 R |\n```",
    ),
    "repeat": (
        "repeat : (Int, Block) -> Block",
        "Repeats a block n times.\n\n**Example:**\n```rela\n"
        "| R M3 | |> repeat(4)  -- plays the phrase 4 times\n```",
    ),
    "transpose": (
        "transpose : (Interval, Block) -> Block",
        "Transposes all notes in a block by the given interval.\n\n**Example:**\n```rela\n"
        "| R M3 P5 | |> transpose(P5)  -- transposes up a fifth\n```",
    ),
    "metronome": (
        "metronome : (Int, Int) -> Part",
        "Generates a metronome click track.\n\nParameters:\n- `bars`: Number of bars\n"
        "- `beats_per_bar`: Beats per bar (time signature)\n\n**Example:**\n```rela\n"
        "layer [\n  melody,\n  metronome(8, 4) |> volume(0.3)\n]\n```",
    ),
    "swing": (
        "swing : (Float, Block) -> Block",
        "Applies swing feel to a block.\n\nThe ratio determines the swing amount "
        "(0.5 = straight, 0.67 = triplet swing).\n\n**Example:**\n```rela\n"
        "| R M3 P5 M3 | |> swing(0.6)\n```",
    ),
    "double_time": (
        "double_time : Block -> Block",
        "Doubles the tempo of a block (halves durations).\n\n**Example:**\n```rela\n"
        "melody |> double_time  -- plays twice as fast\n```",
    ),
    "reverb": (
        "reverb : (Float, Block) -> Part",
        "Applies reverb with specified level (0.0-1.0).\n\n**Example:**\n```rela\n"
        "melody |> reverb(0.5)  -- 50% reverb send\n```",
    ),
    "hall_reverb": (
        "hall_reverb : Block -> Part",
        "Applies hall reverb preset (high reverb level).\n\n**Example:**\n```rela\n"
        "melody |> hall_reverb\n```",
    ),
    "room_reverb": (
        "room_reverb : Block -> Part",
        "Applies room reverb preset (medium reverb level).\n\n**Example:**\n```rela\n"
        "melody |> room_reverb\n```",
    ),
    "plate_reverb": (
        "plate_reverb : Block -> Part",
        "Applies plate reverb preset (bright, metallic reverb).\n\n**Example:**\n```rela\n"
        "melody |> plate_reverb\n```",
    ),
    "dry": (
        "dry : Block -> Part",
        "No reverb (dry signal only).\n\n**Example:**\n```rela\nmelody |> dry\n```",
    ),
    "volume": (
        "volume : (Float, Block | Part) -> Part",
        "Sets volume level (0.0-1.0 or 0-100).\n\nCan be chained with other effects.\n\n"
        "**Example:**\n```rela\nmelody |> reverb(0.5) |> volume(0.8)\n"
        "metronome(8, 4) |> volume(0.25)\n```",
    ),
}

_KEYWORDS: dict[str, tuple[str, str]] = {
    "let": (
        "let <pattern> = <expr> in <body>",
        "Binds a value to a name.\n\n**Example:**\n```rela\n"
        "let melody = | R M3 P5 | in melody |> transpose(P5)\n```",
    ),
    "layer": (
        "layer [ <parts...> ]",
        "Combines multiple parts to play simultaneously.\n\n**Example:**\n```rela\n"
        "layer [\n  melody |> room_reverb,\n  bass |> volume(0.8),\n  drums\n]\n```",
    ),
    "scale": (
        "scale <name> { <intervals...> }",
        "Defines a scale with intervals from root.\n\n**Example:**\n```rela\n"
        "scale major { R M2 M3 P4 P5 M6 M7 }\nscale minor { R M2 m3 P4 P5 m6 m7 }\n```",
    ),
    "chord": (
        "chord <name> { <intervals...> }",
        "Defines a chord with intervals from root.\n\n**Example:**\n```rela\n"
        "chord maj7 { R M3 P5 M7 }\nchord m7b5 { R m3 d5 m7 }\n```",
    ),
    "section": (
        "section <name> { <content> }",
        "Defines a named section of music.\n\n**Example:**\n```rela\n"
        'section "Verse" {\n  Part "Piano" { melody }\n}\n```',
    ),
    "Part": (
        "Part <instrument> { <blocks...> }",
        "Defines a part with an instrument name.\n\n**Example:**\n```rela\n"
        'Part "Piano" { melody ++ bridge ++ melody }\n```',
    ),
    "if": (
        "if <cond> then <expr> else <expr>",
        "Conditional expression.\n\n**Example:**\n```rela\n"
        "if n > 0 then melody else rest\n```",
    ),
    "match": (
        "match <expr> with | <pattern> -> <expr> ...",
        "Pattern matching expression.\n\n**Example:**\n```rela\n"
        'match mode with\n  | "major" -> major_scale\n  | "minor" -> minor_scale\n```',
    ),
}

# Semitones above the root of the major/perfect interval of each degree.
_DEGREE_SEMITONES = {
    1: 0.0, 2: 2.0, 3: 4.0, 4: 5.0, 5: 7.0, 6: 9.0, 7: 11.0,
    8: 12.0, 9: 14.0, 10: 16.0, 11: 17.0, 12: 19.0, 13: 21.0,
}

_PERFECT_DEGREES = frozenset({1, 4, 5, 8})


def builtin_docs(name: str) -> tuple[str, str] | None:
    """Return ``(signature, description)`` for a builtin function, or None."""
    return _BUILTINS.get(name)


def keyword_docs(keyword: str) -> tuple[str, str] | None:
    """Return ``(syntax, description)`` for a keyword, or None."""
    return _KEYWORDS.get(keyword)


def interval_semitones(quality: str | IntervalQuality, degree: int) -> float:
    """Return the size in semitones of an interval of ``quality`` and ``degree``.

    ``quality`` is one of ``P``, ``M``, ``m``, ``A``, ``d``; any other value
    gives the major/perfect size.
    """
    if isinstance(quality, IntervalQuality):
        quality = quality.value
    base = _DEGREE_SEMITONES.get(degree, (degree - 1) * 2.0)
    if quality == "m":
        return base - 1.0
    if quality == "A":
        return base + 1.0
    if quality == "d":
        return base - 1.0 if degree in _PERFECT_DEGREES else base - 2.0
    return base


class CompletionItemKind(IntEnum):
    """Completion item kinds as numbered by the language server protocol."""

    FUNCTION = 3
    KEYWORD = 14


@dataclass(frozen=True)
class CompletionItem:
    """A completion suggestion offered to an editor."""

    label: str
    kind: CompletionItemKind
    detail: str


_COMPLETIONS = (
    CompletionItem("scale", CompletionItemKind.KEYWORD, "Define a scale"),
    CompletionItem("chord", CompletionItemKind.KEYWORD, "Define a chord"),
    CompletionItem("let", CompletionItemKind.KEYWORD, "Define a binding"),
    CompletionItem("section", CompletionItemKind.KEYWORD, "Define a section"),
    CompletionItem("layer", CompletionItemKind.KEYWORD, "Define a layer"),
    CompletionItem("Part", CompletionItemKind.KEYWORD, "Define a part"),
    CompletionItem("reverse", CompletionItemKind.FUNCTION, "Reverse a block"),
    CompletionItem(
        "transpose", CompletionItemKind.FUNCTION, "Transpose a block by an interval"
    ),
    CompletionItem("repeat", CompletionItemKind.FUNCTION, "Repeat a block n times"),
)


def completion_items() -> list[CompletionItem]:
    """Return the keyword and builtin completions, in a fixed order."""
    return list(_COMPLETIONS)