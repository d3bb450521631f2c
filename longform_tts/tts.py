"""Per-segment speech synthesis with governor spacing and retry logic."""

import asyncio
import logging
import random

from longform_tts.config import DispatchConfig
from longform_tts.errors import (
    PolicyBlockedError,
    RateLimitedError,
    RemoteError,
    SegmentExhaustedError,
    TransientRemoteError,
)
from longform_tts.governor import RateGovernor
from longform_tts.models import Segment, VoiceProfile

logger = logging.getLogger(__name__)


def backoff_delay(
    error: RemoteError,
    attempt: int,
    config: DispatchConfig,
    rng: random.Random | None = None,
) -> float:
    """Seconds to wait before retrying after `error` on 0-based `attempt`.

    Rate limits back off from a higher base and add jitter so retrying workers
    spread out. Other failures use the lower base without jitter.
    """
    if isinstance(error, RateLimitedError):
        jitter = (rng or random).uniform(0, config.rate_limit_jitter)
        return config.rate_limit_backoff_base * config.backoff_multiplier ** attempt + jitter
    return config.transient_backoff_base * config.backoff_multiplier ** attempt


async def synthesize_segment(
    client,
    governor: RateGovernor,
    segment: Segment,
    profile: VoiceProfile,
    config: DispatchConfig,
    rng: random.Random | None = None,
) -> bytes:
    """Synthesize one segment, retrying until it succeeds or attempts run out.

    `client` is anything with `async synthesize(text, voice) -> bytes`. Every
    attempt waits for a governor slot first. A policy-blocked segment returns
    empty audio instead of failing. Any other exception is retried as a
    transient failure. Raises SegmentExhaustedError carrying the
    last failure once `config.max_attempts` attempts have failed.
    """
    text = f"{profile.prompt_prefix}{segment.text}"
    last_error = None

    for attempt in range(config.max_attempts):
        wait = governor.reserve_slot()
        if wait > 0:
            await asyncio.sleep(wait)

        try:
            return await client.synthesize(text, profile.voice)
        except PolicyBlockedError as e:
            logger.warning("Segment %d blocked by safety filter, skipping: %s", segment.index, e)
            return b""
        except RateLimitedError as e:
            last_error = e
            governor.report_throttled()
        except RemoteError as e:
            last_error = e
        except Exception as e:
            logger.debug("Segment %d raised %s", segment.index, type(e).__name__, exc_info=True)
            last_error = TransientRemoteError(str(e) or type(e).__name__)
            last_error.__cause__ = e

        if attempt < config.max_attempts - 1:
            delay = backoff_delay(last_error, attempt, config, rng)
            logger.warning(
                "Segment %d attempt %d/%d failed (%s), retrying in %.1fs",
                segment.index, attempt + 1, config.max_attempts, last_error.error_kind, delay,
            )
            await asyncio.sleep(delay)

    logger.error("Segment %d failed after %d attempts", segment.index, config.max_attempts)
    raise SegmentExhaustedError(segment.index, config.max_attempts, last_error) from last_error
