"""Gemini TTS remote client.

Wraps `google-genai` behind a single `synthesize(text, voice) -> bytes` call and
translates SDK responses and exceptions into this package's error types, so the
dispatch core never inspects raw service payloads.
"""

import asyncio
import base64
import binascii
import logging

import httpx
from google import genai
from google.genai import errors, types

from longform_tts.constants import GEMINI_TTS_MODEL
from longform_tts.errors import (
    ERROR_KIND_NETWORK,
    ERROR_KIND_UNAVAILABLE,
    ERROR_KIND_UNKNOWN,
    EmptyResponseError,
    PolicyBlockedError,
    RateLimitedError,
    RemoteError,
    TransientRemoteError,
)

logger = logging.getLogger(__name__)

POLICY_FINISH_REASONS = {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII"}
UNAVAILABLE_STATUSES = {"UNAVAILABLE", "INTERNAL", "DEADLINE_EXCEEDED"}

# Markers seen in Gemini quota error payloads
_QUOTA_MARKERS = (
    "resource_exhausted",
    "quotafailure",
    "exceeded your current quota",
    "quotaid",
    "quotametric",
)


def _enum_name(value) -> str:
    return str(getattr(value, "value", value) or "").upper()


def is_rate_limited(code, status: str, message: str) -> bool:
    if code == 429 or status.upper() == "RESOURCE_EXHAUSTED":
        return True
    lowered = message.lower()
    return "429" in lowered or any(marker in lowered for marker in _QUOTA_MARKERS)


def classify_api_error(error: errors.APIError) -> RemoteError:
    """Map an SDK APIError onto rate-limited or transient failure."""
    code = getattr(error, "code", None)
    status = str(getattr(error, "status", "") or "")
    message = str(getattr(error, "message", "") or error)

    if is_rate_limited(code, status, message):
        return RateLimitedError(message)
    if (isinstance(code, int) and code >= 500) or status.upper() in UNAVAILABLE_STATUSES:
        return TransientRemoteError(message, error_kind=ERROR_KIND_UNAVAILABLE)
    return TransientRemoteError(message, error_kind=ERROR_KIND_UNKNOWN)


def extract_audio(response) -> bytes:
    """Pull raw PCM out of a generate_content response.

    Raises PolicyBlockedError when the safety filter withheld the content and
    EmptyResponseError when no audio came back for any other reason.
    """
    feedback = getattr(response, "prompt_feedback", None)
    if feedback is not None and getattr(feedback, "block_reason", None):
        raise PolicyBlockedError(f"Prompt blocked: {_enum_name(feedback.block_reason)}")

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        raise EmptyResponseError("Response had no candidates")

    candidate = candidates[0]
    reason = _enum_name(getattr(candidate, "finish_reason", None))
    if reason in POLICY_FINISH_REASONS:
        raise PolicyBlockedError(f"Content blocked: {reason}")

    content = getattr(candidate, "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        data = getattr(inline, "data", None)
        if data:
            if isinstance(data, str):
                try:
                    data = base64.b64decode(data, validate=True)
                except binascii.Error as e:
                    raise EmptyResponseError(f"Malformed audio payload: {e}") from e
            return data

    raise EmptyResponseError()


class GeminiSpeechClient:
    """Single-voice speech synthesis against the Gemini API."""

    def __init__(self, api_key: str | None = None, model: str = GEMINI_TTS_MODEL, client=None):
        self.model = model
        self._client = client if client is not None else genai.Client(api_key=api_key)

    def _build_config(self, voice: str) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice),
                )
            ),
        )

    async def synthesize(self, text: str, voice: str) -> bytes:
        contents = [types.Content(role="user", parts=[types.Part.from_text(text=text)])]
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=self._build_config(voice),
            )
        except errors.APIError as e:
            raise classify_api_error(e) from e
        except (httpx.TransportError, asyncio.TimeoutError, OSError) as e:
            raise TransientRemoteError(
                str(e) or type(e).__name__, error_kind=ERROR_KIND_NETWORK
            ) from e

        return extract_audio(response)
