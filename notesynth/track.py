from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np

from .config import DEFAULT_VOLUME
from .errors import InvalidTempoError, MissingValueError
from .notes import Note
from .synth import FloatArray, NoteSynthesizer

_LOGGER = logging.getLogger("notesynth.track")

PCM16_SCALE = 32767
_PCM16_MIN = -32768
_PCM16_MAX = 32767


def render_track(
    tempo: int,
    notes: Iterable[Note],
    strategy: NoteSynthesizer,
    *,
    volume: float = DEFAULT_VOLUME,
) -> FloatArray:
    """Render ``notes`` one after another into a single buffer.

    Consecutive notes are butted together without overlap. A note that fails
    to render aborts the whole track.
    """
    if tempo <= 0:
        raise InvalidTempoError(f"Tempo must be > 0, got {tempo}")
    if strategy is None:
        raise MissingValueError("strategy must not be None")

    buffers = [strategy.render(note, tempo, volume) for note in notes]
    if not buffers:
        return np.zeros(0, dtype=np.float64)
    samples = np.concatenate(buffers).astype(np.float64, copy=False)
    _LOGGER.debug(
        "Rendered %d notes into %d samples with %s",
        len(buffers),
        samples.size,
        type(strategy).__name__,
    )
    return samples


def to_pcm16(samples: FloatArray) -> bytes:
    """Quantize to signed 16-bit little-endian mono PCM.

    Each sample becomes ``round(sample * 32767)``; values beyond the 16-bit
    range are clipped instead of wrapping around.
    """
    scaled = np.floor(np.asarray(samples, dtype=np.float64) * PCM16_SCALE + 0.5)
    clipped = np.clip(scaled, _PCM16_MIN, _PCM16_MAX)
    overflow = int(np.count_nonzero(clipped != scaled))
    if overflow:
        _LOGGER.warning("Clipped %d samples outside the 16-bit range", overflow)
    return clipped.astype("<i2").tobytes()
