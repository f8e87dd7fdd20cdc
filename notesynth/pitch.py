"""Equal-temperament pitch lookup.

Pitches are value objects memoized per (pitch class, octave) inside a
:class:`PitchTable`. Asking a table twice for the same normalized key returns
the very same :class:`NotePitch` instance, so pitches can be compared by
identity.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from .config import MAX_OCTAVE, MIN_OCTAVE, REFERENCE_FREQUENCY, REFERENCE_OCTAVE
from .errors import InvalidParameterError, MissingValueError, PitchRangeError

_LOGGER = logging.getLogger("notesynth.pitch")

SEMITONES_PER_OCTAVE = 12


class PitchClass(Enum):
    """The twelve chromatic pitch classes, in ascending order from C."""

    C = 0
    C_SHARP = 1
    D = 2
    D_SHARP = 3
    E = 4
    F = 5
    F_SHARP = 6
    G = 7
    G_SHARP = 8
    A = 9
    A_SHARP = 10
    B = 11

    @property
    def ordinal(self) -> int:
        return self.value

    @classmethod
    def from_ordinal(cls, ordinal: int) -> "PitchClass":
        return _BY_ORDINAL[ordinal % SEMITONES_PER_OCTAVE]

    @classmethod
    def from_name(cls, name: str) -> "PitchClass":
        """Resolve a spelled name such as ``"C#"`` or ``"Bb"``."""

        if not name:
            raise InvalidParameterError(f"No pitch class with name {name!r}")
        letter, accidental = name[0].upper(), name[1:]
        key = letter + accidental.lower()
        try:
            return _BY_NAME[key]
        except KeyError:
            raise InvalidParameterError(f"No pitch class with name {name!r}") from None


_BY_ORDINAL: tuple[PitchClass, ...] = tuple(PitchClass)

_BY_NAME: Mapping[str, PitchClass] = MappingProxyType(
    {
        "C": PitchClass.C,
        "C#": PitchClass.C_SHARP,
        "Db": PitchClass.C_SHARP,
        "D": PitchClass.D,
        "D#": PitchClass.D_SHARP,
        "Eb": PitchClass.D_SHARP,
        "E": PitchClass.E,
        "F": PitchClass.F,
        "F#": PitchClass.F_SHARP,
        "Gb": PitchClass.F_SHARP,
        "G": PitchClass.G,
        "G#": PitchClass.G_SHARP,
        "Ab": PitchClass.G_SHARP,
        "A": PitchClass.A,
        "A#": PitchClass.A_SHARP,
        "Bb": PitchClass.A_SHARP,
        "B": PitchClass.B,
    }
)


def equal_temperament_frequency(pitch_class: PitchClass, octave: int) -> float:
    """Frequency in Hz of a pitch relative to A4 = 440 Hz."""
    offset = (
        pitch_class.ordinal
        - PitchClass.A.ordinal
        + (octave - REFERENCE_OCTAVE) * SEMITONES_PER_OCTAVE
    )
    return REFERENCE_FREQUENCY * 2 ** (offset / SEMITONES_PER_OCTAVE)


@dataclass(frozen=True, slots=True)
class NotePitch:
    """A pitch class in a given octave, with its precomputed frequency."""

    pitch_class: PitchClass
    octave: int
    frequency: float = field(compare=False)
    table: "PitchTable" = field(compare=False, repr=False)

    def alter(self, alteration: int) -> "NotePitch":
        return self.table.of(self.pitch_class, self.octave, alteration)

    def sharp(self) -> "NotePitch":
        return self.alter(1)

    def flat(self) -> "NotePitch":
        return self.alter(-1)

    def __str__(self) -> str:
        return f"{self.pitch_class.name}{self.octave}"


class PitchTable:
    """Append-only cache of :class:`NotePitch` instances.

    Entries are created on first request and never evicted. Population is
    guarded by a lock so concurrent first lookups yield one instance.
    """

    def __init__(self) -> None:
        self._pitches: dict[tuple[PitchClass, int], NotePitch] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._pitches)

    def of(self, pitch_class: PitchClass, octave: int, alteration: int = 0) -> NotePitch:
        if pitch_class is None:
            raise MissingValueError("pitch_class must not be None")
        carry, ordinal = divmod(pitch_class.ordinal + alteration, SEMITONES_PER_OCTAVE)
        real_octave = octave + carry
        if not MIN_OCTAVE <= real_octave <= MAX_OCTAVE:
            raise PitchRangeError("Pitch is too low or too high")

        key = (PitchClass.from_ordinal(ordinal), real_octave)
        cached = self._pitches.get(key)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._pitches.get(key)
            if cached is None:
                cached = NotePitch(
                    pitch_class=key[0],
                    octave=real_octave,
                    frequency=equal_temperament_frequency(key[0], real_octave),
                    table=self,
                )
                self._pitches[key] = cached
                _LOGGER.debug("Cached pitch %s at %.3f Hz", cached, cached.frequency)
        return cached

    frequency_of = of

    def parse(self, name: str, octave: int, alteration: int = 0) -> NotePitch:
        return self.of(PitchClass.from_name(name), octave, alteration)


@lru_cache(maxsize=1)
def default_pitch_table() -> PitchTable:
    """Process-wide table for callers that do not inject their own."""
    return PitchTable()
