from __future__ import annotations


class NotesynthError(Exception):
    """Base error for the notesynth library."""


class MissingValueError(NotesynthError, TypeError):
    """Raised when a required note, strategy or value is missing."""


class PitchRangeError(NotesynthError, ValueError):
    """Raised when a pitch falls outside the supported octave range."""


class InvalidParameterError(NotesynthError, ValueError):
    """Raised when a construction parameter is out of its valid range."""


class InvalidTempoError(NotesynthError, ValueError):
    """Raised when a tempo is not strictly positive."""


class TieError(NotesynthError, ValueError):
    """Raised when a rest is tied with a note that is not silent."""


class InvalidConfigError(NotesynthError):
    """Raised when render settings cannot be parsed or validated."""
