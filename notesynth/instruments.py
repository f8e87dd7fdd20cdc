"""Closed set of instruments, each bound to one prebuilt synthesis pipeline.

ADSR times are in milliseconds; vibrato depth is in sample units and speed
in Hz.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from enum import Enum
from functools import lru_cache
from types import MappingProxyType

import numpy as np

from .config import SAMPLE_RATE
from .errors import MissingValueError
from .percussion import (
    BassDrumSynthesizer,
    CymbalSynthesizer,
    SnareDrumSynthesizer,
    TimpaniSynthesizer,
    TriangleSynthesizer,
    XylophoneSynthesizer,
)
from .synth import (
    ADSRSynthesizer,
    ComplexHarmonicSynthesizer,
    FloatArray,
    HarmonicSynthesizer,
    NoteSynthesizer,
    PureSound,
    VibratoSynthesizer,
    WhiteNoiseSynthesizer,
)

_LOGGER = logging.getLogger("notesynth.instruments")


class Instrument(Enum):
    BASS_DRUM = "bass_drum"
    SNARE_DRUM = "snare_drum"
    CYMBAL = "cymbal"
    TRIANGLE = "triangle"
    TIMPANI = "timpani"
    XYLOPHONE = "xylophone"
    VIOLIN = "violin"
    GUITAR = "guitar"
    PIANO = "piano"
    FRENCH_HORN = "french_horn"
    ACCORDION = "accordion"
    GASBA = "gasba"
    FLUTE = "flute"
    BANJO = "banjo"
    HARP = "harp"
    PURE = "pure"

    @property
    def strategy(self) -> NoteSynthesizer:
        """The pipeline bound to this instrument in the default registry."""
        return default_registry().strategy(self)


def _linear_index(harmonic: int) -> int:
    return harmonic


def _odd_index(harmonic: int) -> int:
    return 2 * harmonic - 1


def _piano_amplitude(harmonic: int, t: FloatArray) -> FloatArray:
    return np.exp(-2 * harmonic * t) / harmonic


def _flute_amplitude(harmonic: int, t: FloatArray) -> float:
    return 1.0 / 3 ** (harmonic - 1)


def _harp_amplitude(harmonic: int, t: FloatArray) -> FloatArray:
    return 0.7 ** (harmonic - 1) * np.exp(-t * (harmonic - 1) * 0.5)


def _build_pipelines(sample_rate: int, seed: int | None) -> dict[Instrument, NoteSynthesizer]:
    snare_seed, cymbal_seed, gasba_seed, flute_seed = np.random.SeedSequence(seed).spawn(4)

    def pure() -> PureSound:
        return PureSound(sample_rate)

    return {
        Instrument.BASS_DRUM: BassDrumSynthesizer(sample_rate),
        Instrument.SNARE_DRUM: SnareDrumSynthesizer(
            sample_rate, rng=np.random.default_rng(snare_seed)
        ),
        Instrument.CYMBAL: CymbalSynthesizer(sample_rate, rng=np.random.default_rng(cymbal_seed)),
        Instrument.TRIANGLE: TriangleSynthesizer(sample_rate),
        Instrument.TIMPANI: TimpaniSynthesizer(sample_rate),
        Instrument.XYLOPHONE: XylophoneSynthesizer(sample_rate),
        Instrument.VIOLIN: VibratoSynthesizer(
            ADSRSynthesizer(HarmonicSynthesizer(pure(), 10), 100, 200, 0.7, 300),
            depth=0.01,
            speed=5,
        ),
        Instrument.GUITAR: VibratoSynthesizer(
            ADSRSynthesizer(HarmonicSynthesizer(pure(), 8), 8, 50, 0.2, 2500),
            depth=0.02,
            speed=3,
        ),
        Instrument.PIANO: ADSRSynthesizer(
            ComplexHarmonicSynthesizer(pure(), 10, _linear_index, _piano_amplitude),
            10,
            300,
            0.2,
            500,
        ),
        Instrument.FRENCH_HORN: VibratoSynthesizer(
            ADSRSynthesizer(HarmonicSynthesizer(pure(), 11), 100, 80, 0.75, 900),
            depth=0.012,
            speed=3.8,
        ),
        Instrument.ACCORDION: VibratoSynthesizer(
            ADSRSynthesizer(HarmonicSynthesizer(pure(), 8), 40, 20, 0.85, 500),
            depth=0.015,
            speed=4.2,
        ),
        Instrument.GASBA: WhiteNoiseSynthesizer(
            VibratoSynthesizer(
                ADSRSynthesizer(HarmonicSynthesizer(pure(), 4), 100, 50, 0.55, 1200),
                depth=0.012,
                speed=4.0,
            ),
            0.015,
            rng=np.random.default_rng(gasba_seed),
        ),
        Instrument.FLUTE: VibratoSynthesizer(
            ComplexHarmonicSynthesizer(
                ADSRSynthesizer(
                    WhiteNoiseSynthesizer(pure(), 0.003, rng=np.random.default_rng(flute_seed)),
                    90,
                    0,
                    1.0,
                    300,
                ),
                5,
                _odd_index,
                _flute_amplitude,
            ),
            depth=0.01,
            speed=5.0,
        ),
        Instrument.BANJO: ADSRSynthesizer(HarmonicSynthesizer(pure(), 12), 3, 150, 0.3, 1800),
        Instrument.HARP: ComplexHarmonicSynthesizer(
            ADSRSynthesizer(pure(), 1, 100, 0.3, 1500),
            10,
            _linear_index,
            _harp_amplitude,
        ),
        Instrument.PURE: pure(),
    }


class InstrumentRegistry:
    """Read-only mapping from every :class:`Instrument` to its pipeline.

    All pipelines are built once at construction with one shared sample rate.
    ``seed`` makes the noise-based strategies reproducible.
    """

    def __init__(self, sample_rate: int = SAMPLE_RATE, *, seed: int | None = None) -> None:
        self._sample_rate = sample_rate
        self._strategies: Mapping[Instrument, NoteSynthesizer] = MappingProxyType(
            _build_pipelines(sample_rate, seed)
        )
        _LOGGER.debug(
            "Built %d instrument pipelines at %d Hz", len(self._strategies), sample_rate
        )

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def strategy(self, instrument: Instrument) -> NoteSynthesizer:
        if instrument is None:
            raise MissingValueError("instrument must not be None")
        return self._strategies[instrument]

    def __getitem__(self, instrument: Instrument) -> NoteSynthesizer:
        return self.strategy(instrument)

    def __iter__(self) -> Iterator[Instrument]:
        return iter(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)


@lru_cache(maxsize=1)
def default_registry() -> InstrumentRegistry:
    return InstrumentRegistry()
