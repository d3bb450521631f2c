"""Runtime configuration with environment overrides."""

import math
import os
from dataclasses import dataclass, fields

from longform_tts.constants import (
    BACKOFF_MULTIPLIER,
    CONCURRENCY_LIMIT,
    ENV_PREFIX,
    GEMINI_TTS_MODEL,
    INTERVAL_CEILING,
    INTERVAL_FLOOR,
    MAX_SEGMENT_LENGTH,
    PROGRESS_CEILING,
    RATE_LIMIT_BACKOFF_BASE,
    RATE_LIMIT_BACKOFF_JITTER,
    RELAX_STEP,
    RESERVE_JITTER,
    THROTTLE_STEP,
    TRANSIENT_BACKOFF_BASE,
    TTS_MAX_RETRIES,
)


def _env_str(name: str, default: str) -> str:
    """Read string env var with trim + fallback."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip()
    return value if value else default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float | None) -> float | None:
    """Read a finite float env var, falling back on anything unparseable."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        return default
    return value if math.isfinite(value) else default


@dataclass(frozen=True)
class DispatchConfig:
    """Bundles every tunable of the dispatch core."""

    model: str = GEMINI_TTS_MODEL
    max_segment_length: int = MAX_SEGMENT_LENGTH
    concurrency: int = CONCURRENCY_LIMIT
    max_retries: int = TTS_MAX_RETRIES
    interval_floor: float = INTERVAL_FLOOR
    interval_ceiling: float = INTERVAL_CEILING
    throttle_step: float = THROTTLE_STEP
    relax_step: float = RELAX_STEP
    reserve_jitter: float = RESERVE_JITTER
    rate_limit_backoff_base: float = RATE_LIMIT_BACKOFF_BASE
    rate_limit_jitter: float = RATE_LIMIT_BACKOFF_JITTER
    transient_backoff_base: float = TRANSIENT_BACKOFF_BASE
    backoff_multiplier: float = BACKOFF_MULTIPLIER
    progress_ceiling: float = PROGRESS_CEILING
    job_timeout: float | None = None

    def __post_init__(self):
        if self.max_segment_length < 1:
            raise ValueError("max_segment_length must be at least 1")
        if self.concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")
        if self.interval_floor > self.interval_ceiling:
            raise ValueError("interval_floor must not exceed interval_ceiling")
        if not 0 <= self.progress_ceiling <= 100:
            raise ValueError("progress_ceiling must be within [0, 100]")
        if self.job_timeout is not None and self.job_timeout <= 0:
            raise ValueError("job_timeout must be positive")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @classmethod
    def from_env(cls) -> "DispatchConfig":
        """Build config from LONGFORM_TTS_* variables, e.g. LONGFORM_TTS_CONCURRENCY=3."""
        values = {}
        for field in fields(cls):
            name = ENV_PREFIX + field.name.upper()
            default = field.default
            if field.name == "model":
                values[field.name] = _env_str(name, default)
            elif field.type in (int, "int"):
                values[field.name] = _env_int(name, default)
            else:
                values[field.name] = _env_float(name, default)
        return cls(**values)


def api_key_from_env() -> str | None:
    """Gemini API key from GEMINI_API_KEY, falling back to GOOGLE_API_KEY."""
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY"):
        value = _env_str(name, "")
        if value:
            return value
    return None
