from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike

from .audio import Audio
from .config import RenderSettings
from .instruments import InstrumentRegistry, default_registry
from .logging_utils import log_exception
from .score import MusicPiece
from .synth import FloatArray
from .track import render_track

_LOGGER = logging.getLogger("notesynth.mixer")


def mix(tracks: Sequence[ArrayLike]) -> FloatArray:
    """Average tracks sample by sample over the length of the longest one.

    Shorter tracks contribute zero past their end; the sum is divided by the
    number of tracks, not peak-normalized.
    """
    arrays = [np.asarray(track, dtype=np.float64).reshape(-1) for track in tracks]
    if not arrays:
        return np.zeros(0, dtype=np.float64)
    mixed = np.zeros(max(array.size for array in arrays), dtype=np.float64)
    for array in arrays:
        mixed[: array.size] += array
    return mixed / len(arrays)


def render_piece(
    piece: MusicPiece,
    registry: InstrumentRegistry | None = None,
    settings: RenderSettings | None = None,
) -> Audio:
    """Render every score of ``piece`` with its instrument and mix the results."""
    registry = registry if registry is not None else default_registry()
    if settings is None:
        settings = RenderSettings(sample_rate=registry.sample_rate)
    if settings.sample_rate != registry.sample_rate:
        _LOGGER.warning(
            "Settings sample rate %d differs from registry %d; using the registry's",
            settings.sample_rate,
            registry.sample_rate,
        )

    tracks: list[FloatArray] = []
    for score in piece:
        strategy = registry.strategy(score.instrument)
        try:
            tracks.append(render_track(piece.tempo, score, strategy, volume=settings.volume))
        except Exception as exc:
            _LOGGER.warning("Rendering %s score failed: %s", score.instrument.name, exc)
            log_exception(f"render {score.instrument.name} score", exc)
            raise
    _LOGGER.debug("Mixing %d tracks at tempo %d", len(tracks), piece.tempo)
    return Audio(samples=mix(tracks), sample_rate=registry.sample_rate)
