from __future__ import annotations

from .audio import Audio
from .config import DEFAULT_VOLUME, FERMATA_FACTOR, SAMPLE_RATE, RenderSettings
from .errors import (
    InvalidConfigError,
    InvalidParameterError,
    InvalidTempoError,
    MissingValueError,
    NotesynthError,
    PitchRangeError,
    TieError,
)
from .instruments import Instrument, InstrumentRegistry, default_registry
from .logging_utils import configure_logging
from .mixer import mix, render_piece
from .notes import (
    DottedNote,
    FermataNote,
    Note,
    NoteDecorator,
    NoteFactory,
    NoteValue,
    PitchedNote,
    Rest,
    TiedNotes,
)
from .percussion import (
    BassDrumSynthesizer,
    CymbalSynthesizer,
    SnareDrumSynthesizer,
    TimpaniSynthesizer,
    TriangleSynthesizer,
    XylophoneSynthesizer,
)
from .pitch import NotePitch, PitchClass, PitchTable, default_pitch_table
from .score import MusicPiece, Score
from .synth import (
    ADSRSynthesizer,
    ComplexHarmonicSynthesizer,
    HarmonicSynthesizer,
    NoteSynthesizer,
    PureSound,
    SynthesizerDecorator,
    VibratoSynthesizer,
    WhiteNoiseSynthesizer,
)
from .track import render_track, to_pcm16

__all__ = [
    "SAMPLE_RATE",
    "DEFAULT_VOLUME",
    "FERMATA_FACTOR",
    "ADSRSynthesizer",
    "Audio",
    "BassDrumSynthesizer",
    "ComplexHarmonicSynthesizer",
    "CymbalSynthesizer",
    "DottedNote",
    "FermataNote",
    "HarmonicSynthesizer",
    "Instrument",
    "InstrumentRegistry",
    "InvalidConfigError",
    "InvalidParameterError",
    "InvalidTempoError",
    "MissingValueError",
    "MusicPiece",
    "Note",
    "NoteDecorator",
    "NoteFactory",
    "NotePitch",
    "NoteSynthesizer",
    "NoteValue",
    "NotesynthError",
    "PitchClass",
    "PitchRangeError",
    "PitchTable",
    "PitchedNote",
    "PureSound",
    "RenderSettings",
    "Rest",
    "Score",
    "SnareDrumSynthesizer",
    "SynthesizerDecorator",
    "TieError",
    "TiedNotes",
    "TimpaniSynthesizer",
    "TriangleSynthesizer",
    "VibratoSynthesizer",
    "WhiteNoiseSynthesizer",
    "XylophoneSynthesizer",
    "configure_logging",
    "default_pitch_table",
    "default_registry",
    "mix",
    "render_piece",
    "render_track",
    "to_pcm16",
]

__version__ = "0.1.0"

configure_logging()
