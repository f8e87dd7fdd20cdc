from __future__ import annotations

import logging
import os
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidConfigError

_LOGGER = logging.getLogger("notesynth.config")

SAMPLE_RATE = 44_100
DEFAULT_VOLUME = 0.5

# Equal temperament anchor: A4 = 440 Hz.
REFERENCE_FREQUENCY = 440.0
REFERENCE_OCTAVE = 4
MIN_OCTAVE = 0
MAX_OCTAVE = 8

FERMATA_FACTOR = 2

_SAMPLE_RATE_ENV = "NOTESYNTH_SAMPLE_RATE"
_VOLUME_ENV = "NOTESYNTH_VOLUME"


class RenderSettings(BaseModel):
    """Values shared by every strategy in one rendering pipeline."""

    sample_rate: int = Field(default=SAMPLE_RATE, gt=0)
    volume: float = Field(default=DEFAULT_VOLUME, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RenderSettings":
        """Build settings from ``NOTESYNTH_*`` variables, falling back to defaults."""

        env = os.environ if environ is None else environ
        raw: dict[str, str] = {}
        if _SAMPLE_RATE_ENV in env:
            raw["sample_rate"] = env[_SAMPLE_RATE_ENV]
        if _VOLUME_ENV in env:
            raw["volume"] = env[_VOLUME_ENV]
        try:
            settings = cls.model_validate(raw)
        except ValidationError as exc:
            raise InvalidConfigError(f"Invalid render settings in environment: {exc}") from exc
        _LOGGER.debug("Loaded render settings: %s", settings)
        return settings
