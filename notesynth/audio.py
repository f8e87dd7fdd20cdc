from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import soundfile as sf  # type: ignore[import]
from numpy.typing import DTypeLike, NDArray
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import SAMPLE_RATE
from .synth import FloatArray
from .track import to_pcm16

_LOGGER = logging.getLogger("notesynth.audio")


class Audio(BaseModel):
    """Mono float samples nominally in [-1, 1] at a fixed sample rate."""

    samples: FloatArray
    sample_rate: int = Field(default=SAMPLE_RATE, gt=0)

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    @model_validator(mode="after")
    def _flatten(self) -> "Audio":
        flat = np.asarray(self.samples, dtype=np.float64).reshape(-1)
        object.__setattr__(self, "samples", flat)
        return self

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.samples.size / self.sample_rate

    def to_numpy(self) -> FloatArray:
        return self.samples

    def __array__(
        self, dtype: DTypeLike | None = None, copy: bool | None = None
    ) -> NDArray[np.generic]:
        return np.array(self.samples, dtype=dtype, copy=copy)

    def __len__(self) -> int:
        return int(self.samples.size)

    def to_pcm16(self) -> bytes:
        return to_pcm16(self.samples)

    def save(self, path: str | Path) -> Path:
        """Write a 16-bit PCM WAV file holding exactly :meth:`to_pcm16`."""
        target = Path(path)
        pcm = np.frombuffer(self.to_pcm16(), dtype="<i2")
        sf.write(target, pcm, self.sample_rate, subtype="PCM_16")
        _LOGGER.debug("Wrote %d samples to %s", pcm.size, target)
        return target
