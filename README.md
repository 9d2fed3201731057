# relanote

Tools for **relanote**, a small language for writing music as intervals
relative to a root rather than as absolute pitches.

The package has no dependencies outside the standard library and provides:

- `relanote.tokens` – the `TokenKind` enumeration, `Token` and `Span`,
  interval and absolute-pitch parsing (`parse_interval`,
  `parse_absolute_pitch`) and a low-level `scan` generator that yields every
  token, comments and unrecognised characters included.
- `relanote.lexer` – a `Lexer` that skips line comments and unrecognised
  characters, keeps newlines, and whose `tokenize()` ends with an EOF token;
  `lex(text)` is a shortcut for that.
- `relanote.midi` – value classes for songs, sections, parts, blocks and
  slots, and a `MidiRenderer` that writes a format-1 Standard MIDI File.
- `relanote.docs` – documentation for built-in functions and keywords
  (`builtin_docs`, `keyword_docs`), interval sizes (`interval_semitones`) and
  editor completion items (`completion_items`).
- `relanote.server` – an in-memory `DocumentStore` and a `hover` function that
  produce hover text for the token under the cursor.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Lexing

```python
from relanote.lexer import lex

for token in lex("let motif = | R M3 P5 | |> repeat(2)"):
    print(token.kind, token.span, token.value)
```

Intervals such as `M3`, `P5+` or `m7-` come out as `TokenKind.INTERVAL`
tokens whose value is an `IntervalData` (quality, degree, accidentals).
Pitches such as `C4`, `Bb3` or `F#5` come out as `TokenKind.ABSOLUTE_PITCH`
with an `AbsolutePitchData` value; `to_midi_note()` gives its MIDI number
(C4 = 60). `A4` is an augmented fourth, while `A#4` and `Ab4` are pitches.
Words such as `pp`, `and` or `tempo` are plain identifiers.

`parse_interval` and `parse_absolute_pitch` raise `ValueError` for text that
is not an interval or a pitch.

## Rendering MIDI

```python
from relanote.midi import (
    BlockValue, IntervalValue, NoteSlot, RestSlot,
    PartValue, SectionValue, SongValue, render_to_midi,
)

block = BlockValue(
    slots=(
        NoteSlot(IntervalValue(0.0)),
        NoteSlot(IntervalValue(400.0)),
        RestSlot(),
        NoteSlot(IntervalValue(700.0)),
    ),
    beats=4.0,
)
song = SongValue(sections=(SectionValue(parts=(PartValue("Piano", (block,)),)),))

with open("motif.mid", "wb") as out:
    out.write(render_to_midi(song))
```

How a song is rendered:

- The first track holds the tempo; each part of each section gets its own
  track, on the channel given by its position within its section.
- Slots without an explicit duration share the block's beats equally; a
  `TupletSlot` spreads its slots over `target_beats` beats.
- Cents that fall between semitones become pitch bends (one per channel, so a
  chord uses the bend of its first interval). Staccato halves the sounding
  length.
- A part's `volume_level` sets controller 7 and scales velocity;
  `reverb_level` sets controller 91. A `SynthValue` becomes controllers for
  filter cutoff and resonance, attack, decay, release and, for detune, the
  modulation wheel.

`MidiRenderer(MidiConfig(...))` changes the tempo, ticks per beat, base note
or pitch-bend range. The defaults are 120 BPM, 480 ticks per beat, middle C
(MIDI note 60) as the root and a bend range of 2 semitones. `render` raises
`ValueError` for a tempo that is not positive.

## Hover text

```python
from relanote.server import DocumentStore, hover

info = hover("let x = | R M3 P5 |", 0, 12)
print(info.value)            # "**Major Third** ..." with semitones and cents
print(info.start, info.end)  # (0, 12) (0, 14)

store = DocumentStore()
store.open("file:///song.rela", "x |> reverse", 1)
print(store.hover("file:///song.rela", 0, 7).value)
```

Hover text is given for built-in functions, other identifiers, the keywords
`let`, `layer`, `scale`, `chord`, `section`, `part`, `if` and `match`,
intervals, `R`, the articulations `*`, `^` and `~`, and the pipe operator
`|>`. Positions are zero-based lines and characters.

## What it does not do

The package reads relanote text only as far as tokens. It has no parser,
type checker or evaluator, so it cannot turn a `.rela` file into a song:
songs for the MIDI renderer are built from the value classes directly.
For the same reason hover text for an identifier does not show its type,
and there is no formatter. `DocumentStore` keeps documents in memory and
answers hover requests, but the package does not speak the language server
protocol over stdio or any other transport, and it has no command-line
program.