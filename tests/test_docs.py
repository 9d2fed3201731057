import pytest

from relanote.docs import (
    CompletionItem,
    CompletionItemKind,
    builtin_docs,
    completion_items,
    interval_semitones,
    keyword_docs,
)
from relanote.tokens import IntervalQuality

BUILTINS = [
    "reverse", "repeat", "transpose", "metronome", "swing", "double_time",
    "reverb", "hall_reverb", "room_reverb", "plate_reverb", "dry", "volume",
]
KEYWORDS = ["let", "layer", "scale", "chord", "section", "Part", "if", "match"]


def test_builtin_reverse_signature():
    signature, description = builtin_docs("reverse")
    assert signature == "reverse : Block -> Block"
    assert description.startswith("Reverses the order of slots in a block.")


def test_builtin_volume_signature():
    assert builtin_docs("volume")[0] == "volume : (Float, Block | Part) -> Part"


@pytest.mark.parametrize("name", BUILTINS)
def test_builtin_signature_names_function(name):
    signature, description = builtin_docs(name)
    assert signature.startswith(f"{name} : ")
    assert "```rela" in description


@pytest.mark.parametrize("name", ["unknown", "Reverse", "", "let"])
def test_builtin_unknown_is_none(name):
    assert builtin_docs(name) is None


def test_keyword_let_syntax():
    assert keyword_docs("let")[0] == "let <pattern> = <expr> in <body>"


def test_keyword_part_is_case_sensitive():
    assert keyword_docs("Part")[0] == "Part <instrument> { <blocks...> }"
    assert keyword_docs("part") is None


@pytest.mark.parametrize("keyword", KEYWORDS)
def test_keyword_syntax_starts_with_keyword(keyword):
    syntax, description = keyword_docs(keyword)
    assert syntax.split()[0] == keyword
    assert "**Example:**" in description


@pytest.mark.parametrize("keyword", ["then", "reverse", "with"])
def test_keyword_unknown_is_none(keyword):
    assert keyword_docs(keyword) is None


def test_perfect_fifth_and_octave():
    assert interval_semitones("P", 5) == 7.0
    assert interval_semitones("P", 8) == 12.0


def test_unison_is_zero():
    assert interval_semitones("P", 1) == 0.0


@pytest.mark.parametrize("degree", range(1, 20))
def test_major_equals_perfect(degree):
    assert interval_semitones("M", degree) == interval_semitones("P", degree)


@pytest.mark.parametrize("degree", range(1, 20))
def test_minor_and_augmented_offsets(degree):
    major = interval_semitones("M", degree)
    assert interval_semitones("m", degree) == major - 1.0
    assert interval_semitones("A", degree) == major + 1.0


@pytest.mark.parametrize("degree", [1, 4, 5, 8])
def test_diminished_perfect_degrees(degree):
    assert interval_semitones("d", degree) == interval_semitones("P", degree) - 1.0


@pytest.mark.parametrize("degree", [2, 3, 6, 7, 9, 10, 11, 12, 13])
def test_diminished_major_degrees(degree):
    assert interval_semitones("d", degree) == interval_semitones("M", degree) - 2.0


def test_degrees_increase_within_table():
    sizes = [interval_semitones("M", d) for d in range(1, 14)]
    assert sizes == sorted(sizes)
    assert len(set(sizes)) == len(sizes)


@pytest.mark.parametrize("degree", range(14, 20))
def test_degrees_beyond_table_step_by_whole_tones(degree):
    assert interval_semitones("M", degree + 1) - interval_semitones("M", degree) == 2.0


def test_unknown_quality_uses_base():
    assert interval_semitones("x", 6) == interval_semitones("M", 6)


@pytest.mark.parametrize("quality", list(IntervalQuality))
def test_accepts_quality_enum(quality):
    assert interval_semitones(quality, 3) == interval_semitones(quality.value, 3)


def test_completion_labels_in_order():
    labels = [item.label for item in completion_items()]
    assert labels == [
        "scale", "chord", "let", "section", "layer", "Part",
        "reverse", "transpose", "repeat",
    ]


def test_completion_kinds():
    items = completion_items()
    assert all(item.kind is CompletionItemKind.KEYWORD for item in items[:6])
    assert all(item.kind is CompletionItemKind.FUNCTION for item in items[6:])


def test_completion_details():
    by_label = {item.label: item for item in completion_items()}
    assert by_label["transpose"] == CompletionItem(
        "transpose", CompletionItemKind.FUNCTION, "Transpose a block by an interval"
    )
    assert by_label["let"].detail == "Define a binding"


def test_completion_list_is_fresh_copy():
    first = completion_items()
    first.clear()
    assert len(completion_items()) == 9


def test_function_completions_have_builtin_docs():
    for item in completion_items():
        if item.kind is CompletionItemKind.FUNCTION:
            assert builtin_docs(item.label)[0].startswith(item.label)