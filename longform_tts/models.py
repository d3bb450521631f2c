"""Data models for segment dispatch."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Segment:
    index: int         # 0-based position in the source text
    text: str


@dataclass(frozen=True)
class SegmentResult:
    index: int
    audio: bytes       # raw 16-bit PCM, empty for failed or policy-blocked segments
    ok: bool


@dataclass(frozen=True)
class VoiceProfile:
    voice: str               # prebuilt voice name sent to the remote service
    prompt_prefix: str = ""  # style instruction prepended to every segment


@dataclass
class JobOutcome:
    total: int
    completed_count: int = 0
    failed_count: int = 0
    last_error: Exception | None = None

    @property
    def all_failed(self) -> bool:
        return self.total > 0 and self.failed_count == self.total
