"""Concurrent segment dispatch with ordered result collection.

A fixed pool of workers pulls segments from a queue, so at most
`config.concurrency` segments are in flight and a finished worker picks up the
next pending segment straight away. Results land in a slot list by segment
index, which makes completion order irrelevant to the output.

Per-segment failures are recorded as empty results and never abort the job.
Only a job where every segment failed raises AllSegmentsFailedError.
"""

import asyncio
import logging
import random
from typing import Callable, Optional

from longform_tts.config import DispatchConfig
from longform_tts.errors import AllSegmentsFailedError, JobCancelledError
from longform_tts.governor import RateGovernor
from longform_tts.models import JobOutcome, Segment, SegmentResult, VoiceProfile
from longform_tts.tts import synthesize_segment

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


async def dispatch(
    segments: list[Segment],
    client,
    governor: RateGovernor,
    profile: VoiceProfile,
    config: DispatchConfig,
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[asyncio.Event] = None,
    rng: Optional[random.Random] = None,
) -> list[SegmentResult]:
    """Synthesize all segments and return one SegmentResult per segment, in index order.

    Args:
        segments: Segments with dense 0-based indices.
        client: Object with `async synthesize(text, voice) -> bytes`.
        governor: Call spacing shared by every worker of this job.
        profile: Resolved voice and style prefix.
        config: Concurrency, retry and progress settings.
        on_progress: Called after every finished segment with a percentage
            that never exceeds `config.progress_ceiling`.
        cancel_event: When set, no further segments are started; segments
            already in flight finish and JobCancelledError is raised.
        rng: Random source for backoff jitter; the `random` module when None.

    Raises:
        AllSegmentsFailedError: every segment exhausted its retries.
        JobCancelledError: cancel_event was set before all segments ran.
    """
    total = len(segments)
    if total == 0:
        return []

    results: list[SegmentResult | None] = [None] * total
    outcome = JobOutcome(total=total)

    queue: asyncio.Queue = asyncio.Queue(maxsize=total)
    for segment in segments:
        queue.put_nowait(segment)

    def record(result: SegmentResult, error: Exception | None = None) -> None:
        results[result.index] = result
        outcome.completed_count += 1
        if error is not None:
            outcome.failed_count += 1
            outcome.last_error = error
        if on_progress is not None:
            on_progress(outcome.completed_count / total * config.progress_ceiling)

    async def worker(worker_id: int) -> None:
        while cancel_event is None or not cancel_event.is_set():
            try:
                segment = queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            logger.debug("Worker %d took segment %d (%d chars)", worker_id, segment.index, len(segment.text))
            try:
                audio = await synthesize_segment(client, governor, segment, profile, config, rng=rng)
            except Exception as e:
                logger.error("Segment %d failed, skipping: %s", segment.index, e)
                record(SegmentResult(index=segment.index, audio=b"", ok=False), e)
            else:
                record(SegmentResult(index=segment.index, audio=audio, ok=True))

    pool_size = min(config.concurrency, total)
    logger.info("Dispatching %d segments with %d workers", total, pool_size)
    await asyncio.gather(*(worker(i) for i in range(pool_size)))

    if any(result is None for result in results):
        logger.info("Job cancelled after %d/%d segments", outcome.completed_count, total)
        raise JobCancelledError(outcome.completed_count, total)

    if outcome.all_failed:
        raise AllSegmentsFailedError(total, outcome.last_error)

    if outcome.failed_count:
        logger.warning("%d of %d segments failed and were left out", outcome.failed_count, total)

    return list(results)
