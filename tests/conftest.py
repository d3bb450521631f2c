"""Shared fixtures for longform TTS tests."""

import asyncio

import pytest

from longform_tts.config import DispatchConfig
from longform_tts.governor import RateGovernor
from longform_tts.models import Segment, VoiceProfile


class FakeSpeechClient:
    """Scripted stand-in for GeminiSpeechClient.

    `responses` maps text to a list of outcomes (bytes or an exception) used in
    order; the last outcome repeats. Unscripted text returns its own UTF-8
    bytes. `delays` maps text to seconds slept before answering.
    """

    def __init__(self, responses=None, delays=None, on_call=None):
        self.responses = {k: list(v) for k, v in (responses or {}).items()}
        self.delays = delays or {}
        self.on_call = on_call
        self.calls = []
        self.completed = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def synthesize(self, text, voice):
        self.calls.append((text, voice))
        if self.on_call is not None:
            self.on_call(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(text, 0))
            script = self.responses.get(text)
            if script:
                outcome = script.pop(0) if len(script) > 1 else script[0]
            else:
                outcome = text.encode()
            if isinstance(outcome, BaseException):
                raise outcome
            return outcome
        finally:
            self.in_flight -= 1
            self.completed.append(text)


@pytest.fixture
def fast_config():
    """Zero spacing and millisecond backoff so retries run instantly."""
    return DispatchConfig(
        max_segment_length=50,
        max_retries=2,
        interval_floor=0.0,
        interval_ceiling=0.05,
        throttle_step=0.01,
        relax_step=0.01,
        reserve_jitter=0.0,
        rate_limit_backoff_base=0.001,
        rate_limit_jitter=0.0,
        transient_backoff_base=0.001,
        backoff_multiplier=1.0,
    )


@pytest.fixture
def governor(fast_config):
    return RateGovernor.from_config(fast_config)


@pytest.fixture
def profile():
    return VoiceProfile(voice="Kore")


@pytest.fixture
def sample_segments():
    """Pre-built segments for worker, dispatcher and assembly tests."""
    return [
        Segment(index=0, text="It was dark."),
        Segment(index=1, text="Who is there?"),
        Segment(index=2, text="Nobody answered."),
    ]
