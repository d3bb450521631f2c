"""Split long-form text into bounded segments at sentence boundaries."""

import re

from longform_tts.constants import MAX_SEGMENT_LENGTH
from longform_tts.models import Segment

# A run of non-terminal characters followed by its terminal punctuation,
# or the unterminated tail of the text. Every character lands in some piece.
_SENTENCE_RE = re.compile(r"[^.!?\n]*(?:[.!?\n]+|$)")


def split_sentences(text: str) -> list[str]:
    """Split text into pieces that each keep their trailing punctuation."""
    return [piece for piece in _SENTENCE_RE.findall(text) if piece]


def _pack_sentences(sentences: list[str], max_length: int) -> list[str]:
    """Greedily join consecutive sentences into chunks of at most max_length.

    A single sentence longer than max_length becomes its own oversize chunk.
    """
    chunks = []
    current = ""

    for sentence in sentences:
        if current and len(current) + len(sentence) > max_length:
            chunks.append(current)
            current = ""
        current += sentence

    if current:
        chunks.append(current)

    return chunks


def _hard_slice(text: str, max_length: int) -> list[str]:
    """Cut text into consecutive windows of exactly max_length characters."""
    return [text[i:i + max_length] for i in range(0, len(text), max_length)]


def segment_text(text: str, max_length: int = MAX_SEGMENT_LENGTH) -> list[Segment]:
    """Split text into ordered, trimmed, non-empty Segments.

    Text that already fits is returned whole. Otherwise sentences are packed
    greedily and any chunk that still does not fit is hard-sliced.
    """
    if max_length < 1:
        raise ValueError(f"max_length must be at least 1, got {max_length}")

    if len(text) <= max_length:
        stripped = text.strip()
        return [Segment(index=0, text=stripped)] if stripped else []

    pieces = []
    for chunk in _pack_sentences(split_sentences(text), max_length):
        chunk = chunk.strip()
        if len(chunk) > max_length:
            pieces.extend(_hard_slice(chunk, max_length))
        else:
            pieces.append(chunk)

    texts = [piece.strip() for piece in pieces]
    return [Segment(index=i, text=t) for i, t in enumerate(t for t in texts if t)]
