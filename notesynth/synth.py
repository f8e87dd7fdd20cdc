"""
Architecture:

1. Primitives: sample counts, time axes, sine generation, ADSR envelope
2. Strategies: a base oscillator rendering one note into a sample buffer
3. Decorators: strategies wrapping another strategy to add harmonics,
   shape amplitude, modulate or inject noise

Every strategy in one pipeline shares the sample rate of its innermost
strategy. Notes with a frequency <= 0 always render to a zero-filled buffer
of the note's length.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Callable, TypeAlias

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import SAMPLE_RATE
from .errors import InvalidParameterError, MissingValueError
from .notes import Note, round_half_up

FloatArray: TypeAlias = NDArray[np.float64]
HarmonicIndexFn: TypeAlias = Callable[[int], float]
HarmonicAmplitudeFn: TypeAlias = Callable[[int, FloatArray], "FloatArray | float"]


# =============================================================================
# PART 1: SYNTHESIS PRIMITIVES
# =============================================================================


def sample_count(duration_ms: int, sr: int = SAMPLE_RATE) -> int:
    """Number of samples covering ``duration_ms`` milliseconds."""
    return max(0, round_half_up(duration_ms / 1000.0 * sr))


def time_axis(num_samples: int, sr: int = SAMPLE_RATE) -> FloatArray:
    """Sample times in seconds, ``t_i = i / sr``."""
    return np.arange(num_samples, dtype=np.float64) / sr


def generate_sine(
    freq: float, num_samples: int, sr: int = SAMPLE_RATE, amp: float = 1.0
) -> FloatArray:
    """Generate a sine wave starting at phase zero."""
    t = time_axis(num_samples, sr)
    return amp * np.sin(2 * np.pi * freq * t)


def adsr_envelope(
    t_ms: ArrayLike,
    duration_ms: float,
    attack: float,
    decay: float,
    sustain: float,
    release: float,
    volume: float = 1.0,
) -> FloatArray:
    """Piecewise-linear ADSR gain at times ``t_ms`` (milliseconds), scaled by ``volume``.

    Phases are tested in order (attack, decay, sustain, release) so that a
    short note whose release window overlaps the decay keeps the decay ramp.
    """
    t = np.atleast_1d(np.asarray(t_ms, dtype=np.float64))
    env = np.zeros_like(t)
    pending = np.ones(t.shape, dtype=bool)

    in_attack = pending & (t >= 0) & (t < attack)
    env[in_attack] = t[in_attack] / attack
    pending &= ~in_attack

    in_decay = pending & (t >= attack) & (t < attack + decay)
    env[in_decay] = 1.0 - ((t[in_decay] - attack) / decay) * (1.0 - sustain)
    pending &= ~in_decay

    release_start = duration_ms - release
    in_sustain = pending & (t >= attack + decay) & (t < release_start)
    env[in_sustain] = sustain
    pending &= ~in_sustain

    in_release = pending & (t >= release_start) & (t < duration_ms)
    env[in_release] = sustain * (1.0 - (t[in_release] - release_start) / release)

    return volume * env


# =============================================================================
# PART 2: STRATEGIES
# =============================================================================


class NoteSynthesizer(ABC):
    """Renders one note at a tempo and volume into a sample buffer."""

    def __init__(self, sample_rate: int = SAMPLE_RATE) -> None:
        if sample_rate <= 0:
            raise InvalidParameterError(f"sample_rate must be > 0, got {sample_rate}")
        self._sample_rate = sample_rate

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def buffer_length(self, note: Note, tempo: int) -> int:
        return sample_count(note.duration(tempo), self.sample_rate)

    def render(self, note: Note, tempo: int, volume: float) -> FloatArray:
        if note is None:
            raise MissingValueError("note must not be None")
        num_samples = self.buffer_length(note, tempo)
        if num_samples == 0 or note.frequency <= 0:
            return np.zeros(num_samples, dtype=np.float64)
        return self._render(note, tempo, volume, num_samples)

    @abstractmethod
    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        """Render a sounding note of ``num_samples`` samples."""


class PureSound(NoteSynthesizer):
    """Plain sine oscillator at the note frequency."""

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        return generate_sine(note.frequency, num_samples, self.sample_rate, volume)


class SynthesizerDecorator(NoteSynthesizer):
    """Wraps one strategy and forwards to it unless overridden."""

    def __init__(self, synthesizer: NoteSynthesizer) -> None:
        if synthesizer is None:
            raise MissingValueError("synthesizer must not be None")
        super().__init__(synthesizer.sample_rate)
        self._synthesizer = synthesizer

    @property
    def wrapped(self) -> NoteSynthesizer:
        return self._synthesizer

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        return self._synthesizer.render(note, tempo, volume)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._synthesizer!r})"


class HarmonicSynthesizer(SynthesizerDecorator):
    """Additive overtones 2..N of the note frequency, weighted by 1/sqrt(k).

    The wrapped strategy only fixes the buffer length; its samples are
    replaced by the overtone sum scaled by ``volume / N``.
    """

    def __init__(self, synthesizer: NoteSynthesizer, number_of_harmonics: int) -> None:
        super().__init__(synthesizer)
        if number_of_harmonics < 1:
            raise InvalidParameterError("number_of_harmonics must be >= 1")
        self._harmonics = number_of_harmonics

    @property
    def number_of_harmonics(self) -> int:
        return self._harmonics

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        base = self._synthesizer.render(note, tempo, volume)
        t = time_axis(len(base), self.sample_rate)
        freq = note.frequency
        value = np.zeros(len(base), dtype=np.float64)
        for harmonic in range(2, self._harmonics + 1):
            value += np.sin(2 * np.pi * harmonic * freq * t) / math.sqrt(harmonic)
        return (volume / self._harmonics) * value


class ComplexHarmonicSynthesizer(SynthesizerDecorator):
    """Additive partials with pluggable index and time-varying amplitude.

    Partial ``k`` (1..N) sounds at ``index_of(k) * f`` with gain
    ``amplitude_of(k, t)``; ``amplitude_of`` receives the whole time axis in
    seconds and may return an array or a scalar.
    """

    def __init__(
        self,
        synthesizer: NoteSynthesizer,
        number_of_harmonics: int,
        index_of: HarmonicIndexFn,
        amplitude_of: HarmonicAmplitudeFn,
    ) -> None:
        super().__init__(synthesizer)
        if number_of_harmonics < 1:
            raise InvalidParameterError("number_of_harmonics must be >= 1")
        if index_of is None or amplitude_of is None:
            raise MissingValueError("index_of and amplitude_of must not be None")
        self._harmonics = number_of_harmonics
        self._index_of = index_of
        self._amplitude_of = amplitude_of

    @property
    def number_of_harmonics(self) -> int:
        return self._harmonics

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        base = self._synthesizer.render(note, tempo, volume)
        t = time_axis(len(base), self.sample_rate)
        freq = note.frequency
        value = np.zeros(len(base), dtype=np.float64)
        for harmonic in range(1, self._harmonics + 1):
            index = self._index_of(harmonic)
            amplitude = self._amplitude_of(harmonic, t)
            value += amplitude * np.sin(2 * np.pi * index * freq * t)
        return (volume / self._harmonics) * value


class ADSRSynthesizer(SynthesizerDecorator):
    """Attack/decay/sustain/release amplitude envelope (times in milliseconds).

    The envelope is scaled by ``volume`` on top of the wrapped strategy's own
    volume scaling, so the output is proportional to ``volume ** 2``.
    """

    def __init__(
        self,
        synthesizer: NoteSynthesizer,
        attack: float,
        decay: float,
        sustain: float,
        release: float,
    ) -> None:
        super().__init__(synthesizer)
        if attack < 0 or decay < 0 or release < 0:
            raise InvalidParameterError("attack, decay and release must be >= 0")
        if not 0.0 <= sustain <= 1.0:
            raise InvalidParameterError(f"sustain must be within [0, 1], got {sustain}")
        self.attack = attack
        self.decay = decay
        self.sustain = sustain
        self.release = release

    def envelope(self, t_ms: ArrayLike, duration_ms: float, volume: float = 1.0) -> FloatArray:
        return adsr_envelope(
            t_ms, duration_ms, self.attack, self.decay, self.sustain, self.release, volume
        )

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        sound = self._synthesizer.render(note, tempo, volume)
        if sound.size == 0:
            return sound
        duration_ms = note.duration(tempo)
        t_ms = duration_ms * np.arange(sound.size, dtype=np.float64) / sound.size
        return sound * self.envelope(t_ms, duration_ms, volume)


class VibratoSynthesizer(SynthesizerDecorator):
    """Adds ``depth * sin(2*pi*speed*t)`` to every sample."""

    def __init__(self, synthesizer: NoteSynthesizer, depth: float, speed: float) -> None:
        super().__init__(synthesizer)
        if depth < 0 or speed < 0:
            raise InvalidParameterError("depth and speed must be >= 0")
        self.depth = depth
        self.speed = speed

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        sound = self._synthesizer.render(note, tempo, volume)
        t = time_axis(len(sound), self.sample_rate)
        return sound + self.depth * np.sin(2 * np.pi * self.speed * t)


class WhiteNoiseSynthesizer(SynthesizerDecorator):
    """Adds uniform noise in ``[-amplitude, amplitude)`` to every sample.

    The random generator is owned by this instance and is not thread-safe.
    """

    def __init__(
        self,
        synthesizer: NoteSynthesizer,
        amplitude: float,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(synthesizer)
        if amplitude < 0:
            raise InvalidParameterError("amplitude must be >= 0")
        self.amplitude = amplitude
        self._rng = rng if rng is not None else np.random.default_rng()

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        sound = self._synthesizer.render(note, tempo, volume)
        if self.amplitude == 0:
            return sound
        return sound + self._rng.uniform(-self.amplitude, self.amplitude, size=len(sound))
