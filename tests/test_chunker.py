# tests/test_chunker.py
"""
Tests for hopper.ingest.chunking.

Key tests verify that:
1. Window boundaries follow start = end - overlap
2. Whitespace-only windows are dropped
3. Output is deterministic for identical inputs
"""

import pytest

from hopper.ingest.chunking import Chunk, SlidingWindowChunker, split_text


class TestSplitText:
    """Tests for split_text."""

    def test_window_boundaries(self):
        """1205 chars, size 500, overlap 200 -> [0,500) [300,800) [600,1100) [900,1205)."""
        text = "".join(chr(ord("a") + (i % 26)) for i in range(1205))

        chunks = split_text(text, 500, 200)

        assert chunks == [text[0:500], text[300:800], text[600:1100], text[900:1205]]

    def test_short_text_single_chunk(self):
        assert split_text("hello world", 500, 200) == ["hello world"]

    def test_exact_size_single_chunk(self):
        text = "x" * 500
        assert split_text(text, 500, 200) == [text]

    def test_chunks_are_trimmed(self):
        text = "  first  " + " " * 3 + "second"
        chunks = split_text(text, 9, 0)
        assert chunks == ["first", "second"]

    def test_whitespace_windows_dropped(self):
        text = "abc" + " " * 22 + "def"
        chunks = split_text(text, 5, 0)
        assert chunks == ["abc", "def"]

    def test_empty_text(self):
        assert split_text("", 500, 200) == []

    def test_zero_overlap(self):
        assert split_text("abcdefghij", 5, 0) == ["abcde", "fghij"]

    def test_deterministic(self):
        text = "The quick brown fox jumps over the lazy dog. " * 100
        assert split_text(text, 300, 120) == split_text(text, 300, 120)

    @pytest.mark.parametrize("size,overlap", [(0, 0), (10, 10), (10, 20), (10, -1)])
    def test_invalid_parameters(self, size, overlap):
        with pytest.raises(ValueError):
            split_text("abc", size, overlap)


class TestSlidingWindowChunker:
    """Tests for SlidingWindowChunker."""

    def test_chunk_indices_sequential(self):
        chunker = SlidingWindowChunker(chunk_size=500, chunk_overlap=200)
        chunks = chunker.chunk("/data/a.pdf", "word " * 400)

        assert [c.index for c in chunks] == list(range(len(chunks)))
        assert all(c.source_id == "/data/a.pdf" for c in chunks)
        assert all(isinstance(c, Chunk) for c in chunks)

    def test_length_property(self):
        chunk = Chunk(source_id="s", index=0, text="hello")
        assert chunk.length == 5

    def test_blank_text_yields_nothing(self):
        chunker = SlidingWindowChunker()
        assert chunker.chunk("s", "   \n\t ") == []

    def test_chunker_id(self):
        assert SlidingWindowChunker(chunk_size=500, chunk_overlap=200).chunker_id == "sliding:500:200"

    def test_overlap_must_be_below_size(self):
        with pytest.raises(ValueError, match="chunk_overlap"):
            SlidingWindowChunker(chunk_size=100, chunk_overlap=100)
