from __future__ import annotations

from dataclasses import dataclass

import pytest

from notesynth.errors import (
    InvalidParameterError,
    InvalidTempoError,
    MissingValueError,
    TieError,
)
from notesynth.notes import (
    DottedNote,
    FermataNote,
    Note,
    NoteFactory,
    NoteValue,
    PitchedNote,
    Rest,
    TiedNotes,
    round_half_up,
)
from notesynth.pitch import PitchClass, PitchTable, default_pitch_table


@dataclass(frozen=True)
class _FakeNote:
    frequency: float
    duration_ms: int

    def duration(self, tempo: int) -> int:
        return self.duration_ms


@pytest.fixture
def table() -> PitchTable:
    return PitchTable()


class TestNoteValue:
    def test_reference_durations(self) -> None:
        assert NoteValue.QUARTER.duration(120) == 500
        assert NoteValue.EIGHTH.duration(120) == 250
        assert NoteValue.WHOLE.duration(120) == 2000

    @pytest.mark.parametrize("tempo", [40, 60, 97, 120, 200])
    @pytest.mark.parametrize("value", list(NoteValue))
    def test_duration_law(self, value: NoteValue, tempo: int) -> None:
        expected = int((60000 * 4 / tempo) * value.fraction)
        assert value.duration(tempo) == expected
        assert value.duration(tempo) > 0

    def test_from_string(self) -> None:
        assert NoteValue.from_string("16th") is NoteValue.SIXTEENTH
        assert NoteValue.from_string("QUARTER") is NoteValue.QUARTER
        assert NoteValue.from_string("256th") is NoteValue.TWO_HUNDRED_FIFTY_SIXTH

    def test_from_string_rejects_unknown(self) -> None:
        with pytest.raises(InvalidParameterError):
            NoteValue.from_string("breve")

    def test_non_positive_tempo(self) -> None:
        with pytest.raises(InvalidTempoError):
            NoteValue.HALF.duration(0)


class TestPitchedNote:
    def test_delegates(self, table: PitchTable) -> None:
        note = PitchedNote(table.of(PitchClass.A, 4), NoteValue.QUARTER)
        assert note.frequency == 440.0
        assert note.duration(120) == 500

    def test_equality_by_pitch_and_value(self, table: PitchTable) -> None:
        a4 = table.of(PitchClass.A, 4)
        assert PitchedNote(a4, NoteValue.HALF) == PitchedNote(a4, NoteValue.HALF)
        assert PitchedNote(a4, NoteValue.HALF) != PitchedNote(a4, NoteValue.QUARTER)
        assert len({PitchedNote(a4, NoteValue.HALF), PitchedNote(a4, NoteValue.HALF)}) == 1

    def test_missing_fields(self, table: PitchTable) -> None:
        with pytest.raises(MissingValueError):
            PitchedNote(None, NoteValue.HALF)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            PitchedNote(table.of(PitchClass.A, 4), None)  # type: ignore[arg-type]

    def test_satisfies_note_protocol(self, table: PitchTable) -> None:
        assert isinstance(PitchedNote(table.of(PitchClass.A, 4), NoteValue.HALF), Note)
        assert isinstance(Rest(NoteValue.HALF), Note)


class TestDecorators:
    def test_dotted_quarter_and_half(self, table: PitchTable) -> None:
        a4 = table.of(PitchClass.A, 4)
        assert DottedNote(PitchedNote(a4, NoteValue.QUARTER)).duration(120) == 750
        assert DottedNote(PitchedNote(a4, NoteValue.HALF)).duration(120) == 1500

    def test_dotted_rounds_half_up(self) -> None:
        assert DottedNote(_FakeNote(440.0, 333)).duration(120) == 500

    def test_fermata_doubles(self) -> None:
        assert FermataNote(_FakeNote(440.0, 1000)).duration(120) == 2000
        assert FermataNote.factor == 2

    def test_frequency_passes_through(self) -> None:
        base = _FakeNote(329.63, 1000)
        assert DottedNote(base).frequency == 329.63
        assert FermataNote(base).frequency == 329.63
        assert DottedNote(base).note is base

    def test_nesting(self, table: PitchTable) -> None:
        quarter = PitchedNote(table.of(PitchClass.C, 5), NoteValue.QUARTER)
        assert FermataNote(DottedNote(quarter)).duration(120) == 1500

    def test_missing_note(self) -> None:
        with pytest.raises(MissingValueError):
            DottedNote(None)  # type: ignore[arg-type]
        with pytest.raises(MissingValueError):
            FermataNote(None)  # type: ignore[arg-type]


class TestTiedNotes:
    def test_empty(self) -> None:
        tied = TiedNotes([])
        assert tied.frequency == 0.0
        assert tied.duration(120) == 0

    def test_frequency_of_first(self) -> None:
        tied = TiedNotes([_FakeNote(440.0, 500), _FakeNote(261.63, 500)])
        assert tied.frequency == 440.0

    def test_duration_sums(self) -> None:
        tied = TiedNotes([_FakeNote(440.0, 500), _FakeNote(440.0, 250)])
        assert tied.duration(120) == 750
        assert len(tied) == 2

    def test_rejects_missing(self) -> None:
        with pytest.raises(MissingValueError):
            TiedNotes(None)  # type: ignore[arg-type]
        with pytest.raises(MissingValueError):
            TiedNotes([_FakeNote(440.0, 1), None])  # type: ignore[list-item]


class TestRest:
    def test_is_silent(self) -> None:
        assert Rest(NoteValue.QUARTER).frequency == 0.0

    def test_dots_follow_geometric_series(self) -> None:
        rest = Rest(NoteValue.QUARTER)
        assert rest.duration(120) == 500
        rest.add_dot()
        assert rest.duration(120) == 750
        rest.add_dot()
        assert rest.duration(120) == 875

    def test_add_dots(self) -> None:
        rest = Rest(NoteValue.QUARTER)
        rest.add_dots(3)
        assert rest.dots == 3
        assert rest.duration(120) == 938
        with pytest.raises(InvalidParameterError):
            rest.add_dots(-1)

    def test_constructor_validation(self) -> None:
        with pytest.raises(MissingValueError):
            Rest(None)  # type: ignore[arg-type]
        with pytest.raises(InvalidParameterError):
            Rest(NoteValue.QUARTER, dots=-2)
        assert Rest(NoteValue.QUARTER, dots=1).duration(120) == 750

    def test_tempo_validation(self) -> None:
        rest = Rest(NoteValue.QUARTER)
        with pytest.raises(InvalidTempoError):
            rest.duration(0)
        with pytest.raises(ValueError):
            rest.duration(-1)

    def test_tie_with_rests(self) -> None:
        rest = Rest(NoteValue.QUARTER)
        assert rest.tie_with(_FakeNote(0.0, 250)) is rest
        assert rest.duration(120) == 750
        rest.tie_with(Rest(NoteValue.EIGHTH))
        assert rest.duration(120) == 1000
        assert len(rest.tied_notes) == 2
        assert isinstance(rest.tied_notes, tuple)

    def test_dots_apply_before_ties(self) -> None:
        rest = Rest(NoteValue.QUARTER, dots=1).tie_with(_FakeNote(0.0, 100))
        assert rest.duration(120) == 850

    def test_tie_validation(self) -> None:
        rest = Rest(NoteValue.QUARTER)
        with pytest.raises(MissingValueError):
            rest.tie_with(None)  # type: ignore[arg-type]
        with pytest.raises(TieError):
            rest.tie_with(_FakeNote(440.0, 250))
        assert rest.tied_notes == ()


class TestNoteFactory:
    def test_builds_each_variant(self, table: PitchTable) -> None:
        factory = NoteFactory(table)
        a4 = factory.create_pitch("A", 4)
        assert a4 is table.of(PitchClass.A, 4)
        note = factory.create_note(a4, NoteValue.QUARTER)
        assert isinstance(note, PitchedNote)
        assert isinstance(factory.create_rest(NoteValue.EIGHTH), Rest)
        assert factory.create_dotted_note(note).duration(120) == 750
        assert factory.create_fermata_on(note).duration(120) == 1000

    def test_keeps_an_injected_empty_table(self) -> None:
        table = PitchTable()
        factory = NoteFactory(table)
        assert factory.pitch_table is table
        pitch = factory.create_pitch("G", 3)
        assert pitch is table.of(PitchClass.G, 3)
        assert pitch is not default_pitch_table().of(PitchClass.G, 3)

    def test_defaults_to_the_shared_table(self) -> None:
        assert NoteFactory().pitch_table is default_pitch_table()

    def test_tied_notes_accepts_varargs_or_iterable(self, table: PitchTable) -> None:
        factory = NoteFactory(table)
        a4 = factory.create_note(factory.create_pitch("A", 4), NoteValue.QUARTER)
        e4 = factory.create_note(factory.create_pitch("E", 4), NoteValue.EIGHTH)
        from_args = factory.create_tied_notes(a4, e4)
        from_list = factory.create_tied_notes([a4, e4])
        assert from_args.notes == from_list.notes
        assert from_args.duration(120) == 750
        assert from_args.frequency == 440.0

    def test_single_tied_note(self, table: PitchTable) -> None:
        factory = NoteFactory(table)
        a4 = factory.create_note(factory.create_pitch("A", 4), NoteValue.QUARTER)
        assert factory.create_tied_notes(a4).notes == (a4,)

    def test_pitch_with_alteration(self, table: PitchTable) -> None:
        factory = NoteFactory(table)
        assert factory.create_pitch("B", 4, 1) is table.of(PitchClass.C, 5)
        assert factory.pitch_table is table


def test_round_half_up() -> None:
    assert round_half_up(937.5) == 938
    assert round_half_up(936.5) == 937
    assert round_half_up(0.49) == 0
