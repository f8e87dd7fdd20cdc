"""Note model: rhythmic values, pitched notes, rests and duration decorators.

Every note exposes a ``frequency`` in Hz and a ``duration(tempo)`` in whole
milliseconds. Decorators never change the frequency of the note they wrap.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from .config import FERMATA_FACTOR
from .errors import InvalidParameterError, InvalidTempoError, MissingValueError, TieError
from .pitch import NotePitch, PitchTable, default_pitch_table

MS_PER_MINUTE = 60_000
BEATS_PER_WHOLE = 4


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_tempo(tempo: int) -> None:
    if tempo <= 0:
        raise InvalidTempoError(f"Tempo must be > 0, got {tempo}")


@runtime_checkable
class Note(Protocol):
    @property
    def frequency(self) -> float: ...

    def duration(self, tempo: int) -> int: ...


class NoteValue(Enum):
    """Rhythmic denominations as (fraction of a whole note, canonical name)."""

    WHOLE = (1.0, "whole")
    HALF = (0.5, "half")
    QUARTER = (0.25, "quarter")
    EIGHTH = (0.125, "eighth")
    SIXTEENTH = (0.0625, "16th")
    THIRTY_SECOND = (0.03125, "32nd")
    SIXTY_FOURTH = (0.015625, "64th")
    ONE_HUNDRED_TWENTY_EIGHTH = (0.0078125, "128th")
    TWO_HUNDRED_FIFTY_SIXTH = (0.00390625, "256th")

    @property
    def fraction(self) -> float:
        return self.value[0]

    @property
    def type_name(self) -> str:
        return self.value[1]

    def duration(self, tempo: int) -> int:
        """Milliseconds at ``tempo`` beats per minute, truncated."""
        _check_tempo(tempo)
        whole_note_ms = MS_PER_MINUTE * BEATS_PER_WHOLE / tempo
        return int(whole_note_ms * self.fraction)

    @classmethod
    def from_string(cls, name: str) -> "NoteValue":
        lowered = name.lower()
        for value in cls:
            if value.type_name == lowered:
                return value
        raise InvalidParameterError(f"No note value with type {name!r}")


@dataclass(frozen=True, slots=True)
class PitchedNote:
    pitch: NotePitch
    value: NoteValue

    def __post_init__(self) -> None:
        if self.pitch is None:
            raise MissingValueError("pitch must not be None")
        if self.value is None:
            raise MissingValueError("value must not be None")

    @property
    def frequency(self) -> float:
        return self.pitch.frequency

    def duration(self, tempo: int) -> int:
        return self.value.duration(tempo)


class Rest:
    """A silence, optionally dotted and tied with further silences.

    Each dot adds half of the previous addition, so the base duration is
    scaled by ``2 - 0.5 ** dots``. Tied rests add their own durations.
    """

    def __init__(self, value: NoteValue, dots: int = 0) -> None:
        if value is None:
            raise MissingValueError("value must not be None")
        if dots < 0:
            raise InvalidParameterError(f"dots must be >= 0, got {dots}")
        self._value = value
        self._dots = dots
        self._tied: list[Note] = []

    @property
    def value(self) -> NoteValue:
        return self._value

    @property
    def dots(self) -> int:
        return self._dots

    @property
    def tied_notes(self) -> tuple[Note, ...]:
        return tuple(self._tied)

    @property
    def frequency(self) -> float:
        return 0.0

    def add_dot(self) -> None:
        self._dots += 1

    def add_dots(self, count: int) -> None:
        if count < 0:
            raise InvalidParameterError(f"count must be >= 0, got {count}")
        self._dots += count

    def tie_with(self, other: Note) -> "Rest":
        if other is None:
            raise MissingValueError("cannot tie with None")
        if other.frequency != 0.0:
            raise TieError("Can only tie with silence (frequency = 0).")
        self._tied.append(other)
        return self

    def duration(self, tempo: int) -> int:
        _check_tempo(tempo)
        base = self._value.duration(tempo)
        total = round_half_up(base * (2.0 - 0.5**self._dots))
        return total + sum(note.duration(tempo) for note in self._tied)

    def __repr__(self) -> str:
        return f"Rest(value={self._value.name}, dots={self._dots}, tied={len(self._tied)})"


class NoteDecorator:
    """Wraps one note and forwards to it unless a subclass says otherwise."""

    def __init__(self, note: Note) -> None:
        if note is None:
            raise MissingValueError("note must not be None")
        self._note = note

    @property
    def note(self) -> Note:
        return self._note

    @property
    def frequency(self) -> float:
        return self._note.frequency

    def duration(self, tempo: int) -> int:
        return self._note.duration(tempo)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._note!r})"


class DottedNote(NoteDecorator):
    def duration(self, tempo: int) -> int:
        return round_half_up(self._note.duration(tempo) * 1.5)


class FermataNote(NoteDecorator):
    factor = FERMATA_FACTOR

    def duration(self, tempo: int) -> int:
        return self._note.duration(tempo) * self.factor


class TiedNotes:
    """Notes played as one event: first note's pitch, summed durations."""

    def __init__(self, notes: Iterable[Note]) -> None:
        if notes is None:
            raise MissingValueError("notes must not be None")
        collected = tuple(notes)
        if any(note is None for note in collected):
            raise MissingValueError("tied notes must not contain None")
        self._notes = collected

    @property
    def notes(self) -> tuple[Note, ...]:
        return self._notes

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    @property
    def frequency(self) -> float:
        if not self._notes:
            return 0.0
        return self._notes[0].frequency

    def duration(self, tempo: int) -> int:
        return sum(note.duration(tempo) for note in self._notes)

    def __repr__(self) -> str:
        return f"TiedNotes({list(self._notes)!r})"


class NoteFactory:
    """Construction surface used by score readers to build note values."""

    def __init__(self, pitch_table: PitchTable | None = None) -> None:
        self._pitch_table = pitch_table if pitch_table is not None else default_pitch_table()

    @property
    def pitch_table(self) -> PitchTable:
        return self._pitch_table

    def create_pitch(self, name: str, octave: int, alteration: int = 0) -> NotePitch:
        return self._pitch_table.parse(name, octave, alteration)

    def create_rest(self, value: NoteValue) -> Rest:
        return Rest(value)

    def create_note(self, pitch: NotePitch, value: NoteValue) -> PitchedNote:
        return PitchedNote(pitch, value)

    def create_dotted_note(self, note: Note) -> DottedNote:
        return DottedNote(note)

    def create_fermata_on(self, note: Note) -> FermataNote:
        return FermataNote(note)

    def create_tied_notes(self, *notes: Note | Iterable[Note]) -> TiedNotes:
        # A single non-note argument is treated as the iterable of notes.
        if len(notes) == 1 and not isinstance(notes[0], Note) and isinstance(notes[0], Iterable):
            return TiedNotes(notes[0])
        return TiedNotes(notes)  # type: ignore[arg-type]
