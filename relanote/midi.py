"""Rendering of evaluated relanote songs to Standard MIDI File bytes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

# MIDI controller numbers used for synth parameters and mixing.
CC_MODULATION = 1
CC_VOLUME = 7
CC_RESONANCE = 71
CC_RELEASE = 72
CC_ATTACK = 73
CC_CUTOFF = 74
CC_DECAY = 75
CC_REVERB = 91

PITCH_BEND_CENTER = 8192

_U8_MAX = 0xFF
_U32_MAX = 0xFFFFFFFF
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class Articulation(Enum):
    """Articulation marks attached to a note or chord."""

    STACCATO = auto()
    ACCENT = auto()
    PORTAMENTO = auto()


@dataclass(frozen=True)
class IntervalValue:
    """An interval measured in cents above the base note."""

    cents: float


@dataclass(frozen=True)
class NoteSlot:
    """A single sounding note."""

    interval: IntervalValue
    articulations: tuple[Articulation, ...] = ()
    duration: float | None = None

    def duration_beats(self) -> float | None:
        return self.duration


@dataclass(frozen=True)
class RestSlot:
    """A silent slot."""

    duration: float | None = None

    def duration_beats(self) -> float | None:
        return self.duration


@dataclass(frozen=True)
class ChordSlot:
    """Several intervals sounding together."""

    intervals: tuple[IntervalValue, ...]
    articulations: tuple[Articulation, ...] = ()
    duration: float | None = None

    def duration_beats(self) -> float | None:
        return self.duration


@dataclass(frozen=True)
class TupletSlot:
    """A group of slots squeezed evenly into ``target_beats`` beats."""

    slots: tuple[Slot, ...]
    target_beats: int

    def duration_beats(self) -> float | None:
        return None


Slot = Union[NoteSlot, RestSlot, ChordSlot, TupletSlot]


@dataclass(frozen=True)
class BlockValue:
    """A block of slots sharing ``beats`` beats of time."""

    slots: tuple[Slot, ...] = ()
    beats: float = 4.0


@dataclass(frozen=True)
class FilterValue:
    """Filter settings of a synth."""

    cutoff: float
    resonance: float


@dataclass(frozen=True)
class EnvelopeValue:
    """ADSR envelope; times in seconds, sustain as a level."""

    attack: float
    decay: float
    sustain: float
    release: float


@dataclass(frozen=True)
class SynthValue:
    """Synth parameters carried by a part."""

    envelope: EnvelopeValue
    filter: FilterValue | None = None
    detune_cents: float = 0.0
    name: str = ""


@dataclass(frozen=True)
class PartValue:
    """An instrument part: blocks played in sequence plus mix settings."""

    instrument: str
    blocks: tuple[BlockValue, ...] = ()
    volume_level: float | None = None
    reverb_level: float | None = None
    synth: SynthValue | None = None


@dataclass(frozen=True)
class SectionValue:
    """A named section holding parts."""

    parts: tuple[PartValue, ...] = ()
    name: str = ""


@dataclass(frozen=True)
class SongValue:
    """A whole song as a list of sections."""

    sections: tuple[SectionValue, ...] = ()


@dataclass
class MidiConfig:
    """Settings for MIDI rendering."""

    ticks_per_beat: int = 480
    tempo: int = 120
    base_note: int = 60
    pitch_bend_range: float = 2.0


@dataclass(frozen=True)
class TrackEvent:
    """A timed event: ``delta`` ticks after the previous one.

    ``message`` holds the full status byte and data, or for meta events the
    ``FF type length data`` sequence.
    """

    delta: int
    message: bytes


def _round(x: float) -> float:
    """Round half away from zero, leaving non-finite values untouched."""
    if not math.isfinite(x):
        return x
    return math.copysign(math.floor(abs(x) + 0.5), x)


def _cast(x: float, lo: int, hi: int) -> int:
    """Convert a float to an integer range the way a saturating cast does."""
    if math.isnan(x):
        return 0
    return int(max(lo, min(hi, x)))


def _varlen(value: int) -> bytes:
    value &= 0x0FFFFFFF
    out = [value & 0x7F]
    value >>= 7
    while value:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(out))


def _midi(delta: int, status: int, channel: int, *data: int) -> TrackEvent:
    return TrackEvent(delta, bytes([status | (channel & 0x0F), *(d & 0x7F for d in data)]))


def _controller(channel: int, controller: int, value: int) -> TrackEvent:
    return _midi(0, 0xB0, channel, controller, value)


def _pitch_bend(delta: int, channel: int, bend: int) -> TrackEvent:
    bend &= 0x3FFF
    return _midi(delta, 0xE0, channel, bend & 0x7F, bend >> 7)


def _meta(kind: int, data: bytes = b"") -> TrackEvent:
    return TrackEvent(0, bytes([0xFF, kind]) + _varlen(len(data)) + data)


def _level_to_cc(level: float) -> int:
    return _cast(_round(level * 127.0), 0, _U8_MAX) & 0x7F


def cents_to_midi(base_note: int, cents: float, pitch_bend_range: float) -> tuple[int, int]:
    """Return ``(note, pitch_bend)``; the bend is 0..16383 centred on 8192."""
    note_float = base_note + cents / 100.0
    note = _cast(_round(note_float), _I32_MIN, _I32_MAX)
    fractional = note_float - note
    note = max(0, min(127, note))
    bend = _cast(fractional / pitch_bend_range * 8192.0 + 8192.0, 0, 16383)
    return note, bend


def cutoff_to_cc(cutoff_hz: float) -> int:
    """Map a cutoff in Hz logarithmically: 20 Hz -> 0, 20000 Hz -> 127."""
    min_freq, max_freq = 20.0, 20000.0
    clamped = min(max(cutoff_hz, min_freq), max_freq)
    normalized = (math.log(clamped) - math.log(min_freq)) / (
        math.log(max_freq) - math.log(min_freq)
    )
    return _cast(_round(normalized * 127.0), 0, _U8_MAX)


def resonance_to_cc(resonance: float) -> int:
    """Map a resonance of 0.0..1.0 to 0..127."""
    return _cast(_round(min(max(resonance, 0.0), 1.0) * 127.0), 0, _U8_MAX)


def adsr_time_to_cc(time_seconds: float) -> int:
    """Map an envelope time logarithmically: 0.001 s -> 0, 4 s -> 127."""
    min_time, max_time = 0.001, 4.0
    clamped = min(max(time_seconds, min_time), max_time)
    normalized = (math.log(clamped) - math.log(min_time)) / (
        math.log(max_time) - math.log(min_time)
    )
    return _cast(_round(normalized * 127.0), 0, _U8_MAX)


def synth_to_cc_events(synth: SynthValue, channel: int) -> list[TrackEvent]:
    """Return the controller events that describe ``synth`` on ``channel``."""
    events = []
    if synth.filter is not None:
        events.append(_controller(channel, CC_CUTOFF, cutoff_to_cc(synth.filter.cutoff)))
        events.append(
            _controller(channel, CC_RESONANCE, resonance_to_cc(synth.filter.resonance))
        )
    events.append(_controller(channel, CC_ATTACK, adsr_time_to_cc(synth.envelope.attack)))
    events.append(_controller(channel, CC_DECAY, adsr_time_to_cc(synth.envelope.decay)))
    events.append(_controller(channel, CC_RELEASE, adsr_time_to_cc(synth.envelope.release)))
    if abs(synth.detune_cents) > 0.1:
        depth = _cast(min(abs(synth.detune_cents) / 100.0 * 64.0, 127.0), 0, _U8_MAX)
        events.append(_controller(channel, CC_MODULATION, depth))
    return events


def _encode_track(events: list[TrackEvent]) -> bytes:
    body = bytearray()
    running: int | None = None
    for event in events:
        body += _varlen(event.delta)
        status = event.message[0]
        if status >= 0xF0:
            running = None
            body += event.message
        elif status == running:
            body += event.message[1:]
        else:
            running = status
            body += event.message
    return b"MTrk" + len(body).to_bytes(4, "big") + bytes(body)


class MidiRenderer:
    """Renders songs to format-1 Standard MIDI Files."""

    def __init__(self, config: MidiConfig | None = None) -> None:
        self.config = config if config is not None else MidiConfig()

    def render(self, song: SongValue) -> bytes:
        """Return the MIDI file bytes for ``song``."""
        if self.config.tempo <= 0:
            raise ValueError("tempo must be positive")
        tempo_us = (60_000_000 // self.config.tempo) & 0xFFFFFF
        tracks = [[_meta(0x51, tempo_us.to_bytes(3, "big")), _meta(0x2F)]]
        for section in song.sections:
            for index, part in enumerate(section.parts):
                tracks.append(self._render_part(part, index & 0x0F))

        division = self.config.ticks_per_beat & 0x7FFF
        header = (
            b"MThd"
            + (6).to_bytes(4, "big")
            + (1).to_bytes(2, "big")
            + len(tracks).to_bytes(2, "big")
            + division.to_bytes(2, "big")
        )
        return header + b"".join(_encode_track(track) for track in tracks)

    def _ticks(self, beats: float) -> int:
        return _cast(_round(beats * self.config.ticks_per_beat), 0, _U32_MAX)

    def _velocity(self, scale: float) -> int:
        return min(127, max(1, _cast(_round(100.0 * scale), 0, _U8_MAX)))

    def _render_part(self, part: PartValue, channel: int) -> list[TrackEvent]:
        track = [_meta(0x03, part.instrument.encode("utf-8"))]
        if part.volume_level is not None:
            track.append(_controller(channel, CC_VOLUME, _level_to_cc(part.volume_level)))
        if part.reverb_level is not None:
            track.append(_controller(channel, CC_REVERB, _level_to_cc(part.reverb_level)))
        if part.synth is not None:
            track.extend(synth_to_cc_events(part.synth, channel))

        velocity = self._velocity(
            part.volume_level if part.volume_level is not None else 1.0
        )
        time = 0
        for block in part.blocks:
            time = self._render_block(track, block, time, channel, velocity)
        track.append(_meta(0x2F))
        return track

    def _render_block(
        self,
        track: list[TrackEvent],
        block: BlockValue,
        time: int,
        channel: int,
        velocity: int,
    ) -> int:
        default_duration = self._ticks(block.beats) // len(block.slots) if block.slots else 0
        for slot in block.slots:
            beats = slot.duration_beats()
            duration = default_duration if beats is None else self._ticks(beats)
            if isinstance(slot, TupletSlot):
                total = slot.target_beats * self.config.ticks_per_beat
                inner_duration = total // max(len(slot.slots), 1)
                for inner in slot.slots:
                    if not isinstance(inner, TupletSlot):
                        time += self._render_slot(track, inner, inner_duration, channel, velocity)
            else:
                time += self._render_slot(track, slot, duration, channel, velocity)
        return time

    def _render_slot(
        self,
        track: list[TrackEvent],
        slot: NoteSlot | RestSlot | ChordSlot,
        duration: int,
        channel: int,
        velocity: int,
    ) -> int:
        if isinstance(slot, NoteSlot):
            return self._render_chord(
                track, (slot.interval,), slot.articulations, duration, channel, velocity
            )
        if isinstance(slot, ChordSlot):
            return self._render_chord(
                track, slot.intervals, slot.articulations, duration, channel, velocity
            )
        return duration

    def _render_chord(
        self,
        track: list[TrackEvent],
        intervals: tuple[IntervalValue, ...],
        articulations: tuple[Articulation, ...],
        duration: int,
        channel: int,
        velocity: int,
    ) -> int:
        staccato = Articulation.STACCATO in articulations
        note_duration = duration // 2 if staccato else duration
        rest_duration = duration - note_duration

        # One pitch bend per channel: the first interval's bend applies to all.
        config = self.config
        pitches = [
            cents_to_midi(config.base_note, interval.cents, config.pitch_bend_range)
            for interval in intervals
        ]
        first_bend = pitches[0][1] if pitches else PITCH_BEND_CENTER
        if first_bend != PITCH_BEND_CENTER:
            track.append(_pitch_bend(0, channel, first_bend))

        track.extend(_midi(0, 0x90, channel, note, velocity) for note, _ in pitches)
        track.extend(
            _midi(note_duration if i == 0 else 0, 0x80, channel, note, 0)
            for i, (note, _) in enumerate(pitches)
        )

        if first_bend != PITCH_BEND_CENTER or staccato:
            track.append(_pitch_bend(rest_duration, channel, PITCH_BEND_CENTER))
        return duration


def render_to_midi(song: SongValue) -> bytes:
    """Render ``song`` with the default configuration."""
    return MidiRenderer(MidiConfig()).render(song)