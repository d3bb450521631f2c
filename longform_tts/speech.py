"""Job entry point: text in, WAV bytes out."""

import asyncio
import logging
import time
from typing import Optional

from longform_tts.assembly import assemble
from longform_tts.config import DispatchConfig
from longform_tts.dispatcher import ProgressCallback, dispatch
from longform_tts.errors import JobTimeoutError
from longform_tts.governor import RateGovernor
from longform_tts.models import VoiceProfile
from longform_tts.segmenter import segment_text

logger = logging.getLogger(__name__)


async def synthesize_speech(
    text: str,
    profile: VoiceProfile,
    client,
    governor: Optional[RateGovernor] = None,
    config: Optional[DispatchConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[asyncio.Event] = None,
) -> bytes:
    """Synthesize `text` with `profile` and return a WAV file.

    Pass the same governor to consecutive jobs to carry throttling memory
    between them; a fresh one is built from config otherwise. Progress reaches
    100 only after the WAV has been assembled.

    Raises ValueError for blank text, AllSegmentsFailedError when no segment
    produced audio, JobCancelledError and JobTimeoutError as their names say.
    """
    config = config or DispatchConfig()
    if not text.strip():
        raise ValueError("Text is empty")

    if governor is None:
        governor = RateGovernor.from_config(config)
    interval = governor.relax()

    segments = segment_text(text, config.max_segment_length)
    logger.info(
        "Synthesizing %d chars as %d segments with voice %s (interval %.1fs)",
        len(text), len(segments), profile.voice, interval,
    )

    started = time.monotonic()
    job = dispatch(segments, client, governor, profile, config, on_progress, cancel_event)
    if config.job_timeout is None:
        results = await job
    else:
        try:
            results = await asyncio.wait_for(job, timeout=config.job_timeout)
        except asyncio.TimeoutError as e:
            raise JobTimeoutError(config.job_timeout) from e

    wav = assemble(results)
    if on_progress is not None:
        on_progress(100.0)

    logger.info("Job finished in %.1fs, %d bytes of audio", time.monotonic() - started, len(wav))
    return wav
