from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf  # type: ignore[import]
from pydantic import ValidationError

from notesynth.audio import Audio
from notesynth.track import to_pcm16


def test_samples_are_flattened_to_float64() -> None:
    audio = Audio(samples=np.array([[0.5], [-0.5]], dtype=np.float32), sample_rate=8000)
    assert audio.samples.shape == (2,)
    assert audio.samples.dtype == np.float64
    assert len(audio) == 2
    assert np.asarray(audio).shape == (2,)


def test_duration() -> None:
    audio = Audio(samples=np.zeros(22_050), sample_rate=44_100)
    assert audio.duration == pytest.approx(0.5)


def test_rejects_bad_sample_rate() -> None:
    with pytest.raises(ValidationError):
        Audio(samples=np.zeros(4), sample_rate=0)


def test_is_immutable() -> None:
    audio = Audio(samples=np.zeros(4))
    with pytest.raises(ValidationError):
        audio.sample_rate = 8000  # type: ignore[misc]


def test_pcm_matches_track_quantization() -> None:
    samples = np.array([0.0, 0.25, -1.0, 1.0])
    assert Audio(samples=samples).to_pcm16() == to_pcm16(samples)


def test_save_writes_pcm16_wav(tmp_path: Path) -> None:
    samples = np.sin(np.linspace(0, 2 * np.pi, 800, endpoint=False)) * 0.5
    audio = Audio(samples=samples, sample_rate=8000)
    target = audio.save(tmp_path / "tone.wav")

    assert target == tmp_path / "tone.wav"
    data, sample_rate = sf.read(target, dtype="int16")
    assert sample_rate == 8000
    assert sf.info(target).subtype == "PCM_16"
    np.testing.assert_array_equal(data, np.frombuffer(audio.to_pcm16(), dtype="<i2"))


def test_array_protocol_honours_copy() -> None:
    audio = Audio(samples=np.linspace(-1.0, 1.0, 5))
    assert np.shares_memory(audio.__array__(), audio.samples)
    copied = audio.__array__(copy=True)
    assert not np.shares_memory(copied, audio.samples)
    np.testing.assert_array_equal(copied, audio.samples)
    assert audio.__array__(dtype=np.float32).dtype == np.float32
