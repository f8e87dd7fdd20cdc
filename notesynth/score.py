from __future__ import annotations

from collections.abc import Iterable, Iterator

from .errors import InvalidTempoError, MissingValueError
from .instruments import Instrument
from .notes import Note


class Score:
    """The notes played by one instrument, in playback order."""

    def __init__(self, instrument: Instrument, notes: Iterable[Note] = ()) -> None:
        if instrument is None:
            raise MissingValueError("instrument must not be None")
        self._instrument = instrument
        self._notes: list[Note] = []
        for note in notes:
            self.add_note(note)

    @property
    def instrument(self) -> Instrument:
        return self._instrument

    @property
    def notes(self) -> tuple[Note, ...]:
        return tuple(self._notes)

    def add_note(self, note: Note) -> None:
        if note is None:
            raise MissingValueError("note must not be None")
        self._notes.append(note)

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def __repr__(self) -> str:
        return f"Score(instrument={self._instrument.name}, notes={len(self._notes)})"


class MusicPiece:
    """A tempo and the scores played together at that tempo."""

    def __init__(self, tempo: int, scores: Iterable[Score] = ()) -> None:
        if tempo <= 0:
            raise InvalidTempoError(f"Tempo must be > 0, got {tempo}")
        self._tempo = tempo
        self._scores: list[Score] = []
        for score in scores:
            self.add_score(score)

    @property
    def tempo(self) -> int:
        return self._tempo

    @property
    def scores(self) -> tuple[Score, ...]:
        return tuple(self._scores)

    def add_score(self, score: Score) -> None:
        if score is None:
            raise MissingValueError("score must not be None")
        self._scores.append(score)

    def __iter__(self) -> Iterator[Score]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    def __repr__(self) -> str:
        return f"MusicPiece(tempo={self._tempo}, scores={len(self._scores)})"
