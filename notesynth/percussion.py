"""Self-contained percussion and fixed-timbre strategies.

Each model is an exponential decay envelope applied to an oscillating or
noisy carrier. Instances hold no per-note state apart from their random
generator, so one instance can serve every note of a process.
"""

from __future__ import annotations

import math

import numpy as np

from .config import SAMPLE_RATE
from .notes import Note
from .synth import FloatArray, NoteSynthesizer, time_axis


def _attack_then_decay(t: FloatArray, attack: float, decay_rate: float) -> FloatArray:
    """Linear ramp over ``attack`` seconds, then ``exp(-decay_rate * (t - attack))``."""
    if attack <= 0:
        return np.exp(-decay_rate * t)
    return np.where(t < attack, t / attack, np.exp(decay_rate * (attack - t)))


class BassDrumSynthesizer(NoteSynthesizer):
    """Sine whose frequency glides from ``start_frequency`` to ``end_frequency``."""

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        *,
        start_frequency: float = 60.0,
        end_frequency: float = 40.0,
        decay_rate: float = 5.0,
    ) -> None:
        super().__init__(sample_rate)
        self.start_frequency = start_frequency
        self.end_frequency = end_frequency
        self.decay_rate = decay_rate

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        duration = note.duration(tempo) / 1000.0
        t = time_axis(num_samples, self.sample_rate)
        freq = self.start_frequency + t * (self.end_frequency - self.start_frequency) / duration
        signal = volume * np.exp(-self.decay_rate * t) * np.sin(2 * np.pi * freq * t)
        return np.where(freq > 0, signal, 0.0)


class SnareDrumSynthesizer(NoteSynthesizer):
    """Uniform noise under a 10 ms attack and a fast exponential decay."""

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        *,
        attack: float = 0.01,
        decay_rate: float = 15.0,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(sample_rate)
        self.attack = attack
        self.decay_rate = decay_rate
        self._rng = rng if rng is not None else np.random.default_rng()

    def envelope(self, t: FloatArray) -> FloatArray:
        return _attack_then_decay(t, self.attack, self.decay_rate)

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        t = time_axis(num_samples, self.sample_rate)
        noise = self._rng.uniform(-1.0, 1.0, size=num_samples)
        return volume * self.envelope(t) * noise


class CymbalSynthesizer(NoteSynthesizer):
    """Noise ring-modulated by a 2 kHz sine, with a slower decay than the snare."""

    RING_FREQUENCY = 2000.0

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        *,
        attack: float = 0.01,
        decay: float = 0.2,
        rng: np.random.Generator | None = None,
    ) -> None:
        super().__init__(sample_rate)
        self.attack = attack
        self.decay = decay
        self._rng = rng if rng is not None else np.random.default_rng()

    def envelope(self, t: FloatArray) -> FloatArray:
        return _attack_then_decay(t, self.attack, 1.0 / self.decay)

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        t = time_axis(num_samples, self.sample_rate)
        noise = self._rng.uniform(-1.0, 1.0, size=num_samples)
        ring = np.sin(2 * np.pi * self.RING_FREQUENCY * t)
        return volume * self.envelope(t) * noise * ring


class TimpaniSynthesizer(NoteSynthesizer):
    """Pitched drum gliding down from the note frequency to ``end_ratio`` of it.

    Rendering stops at the first sample whose glide frequency is <= 0; the
    remaining samples stay silent.
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        *,
        end_ratio: float = 0.6,
        decay_rate: float = 5.0,
    ) -> None:
        super().__init__(sample_rate)
        self.end_ratio = end_ratio
        self.decay_rate = decay_rate

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        start = note.frequency
        duration = note.duration(tempo) / 1000.0
        t = time_axis(num_samples, self.sample_rate)
        freq = start + t * (self.end_ratio * start - start) / duration
        signal = volume * np.exp(-self.decay_rate * t) * np.sin(2 * np.pi * freq * t)
        stopped = np.flatnonzero(freq <= 0)
        if stopped.size:
            signal[stopped[0] :] = 0.0
        return signal


class TriangleSynthesizer(NoteSynthesizer):
    """Bright metallic partials at fixed frequencies, independent of the note pitch."""

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        *,
        partials: int = 8,
        decay_rate: float = 4.0,
    ) -> None:
        super().__init__(sample_rate)
        self.decay_rate = decay_rate
        # (frequency in Hz, weight) for partial j = 1..partials
        self.partials: tuple[tuple[float, float], ...] = tuple(
            (2.0 * (2000.0 + 800.0 * j), math.exp(-5.0 * (0.5 + 0.3 * j)))
            for j in range(1, partials + 1)
        )

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        t = time_axis(num_samples, self.sample_rate)
        value = np.zeros(num_samples, dtype=np.float64)
        for freq, weight in self.partials:
            value += weight * np.sin(2 * np.pi * freq * t)
        return volume * np.exp(-self.decay_rate * t) * value


class XylophoneSynthesizer(NoteSynthesizer):
    """Octave partials ``2**i * f`` with weights ``exp(-(2i + 1))`` under a decay.

    Partials at or above the Nyquist frequency are skipped.
    """

    def __init__(
        self,
        sample_rate: int = SAMPLE_RATE,
        *,
        harmonics: int = 8,
        decay_rate: float = 3.0,
    ) -> None:
        super().__init__(sample_rate)
        self.harmonics = harmonics
        self.decay_rate = decay_rate

    def _render(self, note: Note, tempo: int, volume: float, num_samples: int) -> FloatArray:
        t = time_axis(num_samples, self.sample_rate)
        nyquist = self.sample_rate / 2
        value = np.zeros(num_samples, dtype=np.float64)
        for i in range(self.harmonics):
            freq = 2.0**i * note.frequency
            if freq >= nyquist:
                break
            value += np.sin(2 * np.pi * freq * t) * math.exp(-(2 * i + 1))
        return volume * np.exp(-self.decay_rate * t) * value
