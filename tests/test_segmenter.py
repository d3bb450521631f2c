"""Tests for segmenter module."""

import random
import re

import pytest

from longform_tts.constants import MAX_SEGMENT_LENGTH
from longform_tts.segmenter import segment_text, split_sentences


def _squash(text):
    return re.sub(r"\s+", "", text)


def test_short_text_single_segment():
    """Text within the limit comes back whole, trimmed."""
    segments = segment_text("  Hello there. How are you?  \n", max_length=100)
    assert len(segments) == 1
    assert segments[0].index == 0
    assert segments[0].text == "Hello there. How are you?"


def test_blank_text_no_segments():
    assert segment_text("   \n  ", max_length=10) == []


def test_default_max_length():
    text = "word " * 400
    segments = segment_text(text)
    assert all(len(s.text) <= MAX_SEGMENT_LENGTH for s in segments)
    assert len(segments) > 1


def test_split_sentences_keeps_punctuation():
    assert split_sentences("One. Two!! Three?\nFour") == ["One.", " Two!!", " Three?\n", "Four"]


def test_split_sentences_leading_punctuation():
    """Punctuation before any words is not dropped."""
    assert split_sentences("...and then") == ["...", "and then"]


def test_packs_sentences_greedily():
    text = "Alpha one. Beta two. Gamma three."
    segments = segment_text(text, max_length=21)
    assert [s.text for s in segments] == ["Alpha one. Beta two.", "Gamma three."]


def test_each_sentence_own_segment_when_tight():
    text = "Alpha one. Beta two. Gamma three."
    segments = segment_text(text, max_length=12)
    assert [s.text for s in segments] == ["Alpha one.", "Beta two.", "Gamma three."]


def test_long_sentence_hard_sliced():
    """A sentence with no break is cut into exact windows."""
    text = "a" * 25
    segments = segment_text(text, max_length=10)
    assert [s.text for s in segments] == ["a" * 10, "a" * 10, "a" * 5]


def test_hard_slice_after_packing():
    text = "Short. " + "b" * 23 + ". End."
    segments = segment_text(text, max_length=10)
    assert all(len(s.text) <= 10 for s in segments)
    assert segments[0].text == "Short."
    assert segments[-1].text == "End."
    assert _squash("".join(s.text for s in segments)) == _squash(text)


def test_newline_is_a_boundary():
    text = "first line\nsecond line\nthird line"
    segments = segment_text(text, max_length=12)
    assert [s.text for s in segments] == ["first line", "second line", "third line"]


def test_indices_dense_and_ordered():
    text = "Sentence number one. " * 20
    segments = segment_text(text, max_length=45)
    assert [s.index for s in segments] == list(range(len(segments)))


def test_invalid_max_length():
    with pytest.raises(ValueError):
        segment_text("text", max_length=0)


@pytest.mark.parametrize("max_length", [1, 5, 17, 64, 300])
def test_random_texts_reconstruct_within_limit(max_length):
    """Segments never exceed the limit and rebuild the text modulo whitespace."""
    rng = random.Random(max_length)
    alphabet = "abcdefghij     .,!?\n"
    for _ in range(50):
        text = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 800)))
        segments = segment_text(text, max_length=max_length)
        assert all(s.text for s in segments)
        assert all(len(s.text) <= max_length for s in segments)
        assert all(s.text == s.text.strip() for s in segments)
        assert _squash("".join(s.text for s in segments)) == _squash(text)
