"""Tests for chunker."""

import pytest

from course_mentor.core.errors import ConfigError, NoExtractableTextError
from course_mentor.ingest.chunker import build_chunks, estimate_chunks, page_hint, split_text


def test_split_text_window_positions() -> None:
    text = "".join(chr(ord("a") + i % 26) for i in range(1200))
    chunks = split_text(text, size=500, overlap=100)
    assert len(chunks) == 3
    assert chunks[0] == text[0:500]
    assert chunks[1] == text[400:900]
    assert chunks[2] == text[800:1200]
    assert len(chunks[2]) == 400


def test_split_text_small_example() -> None:
    assert split_text("ABCDEFGHIJ", size=5, overlap=2) == ["ABCDE", "DEFGH", "GHIJ", "J"]


def test_split_text_reconstructs_text() -> None:
    text = "El plan de negocio describe la propuesta de valor. " * 40
    size, overlap = 120, 30
    chunks = split_text(text, size=size, overlap=overlap)
    rebuilt = chunks[0] + "".join(chunk[overlap:] for chunk in chunks[1:])
    assert rebuilt == text
    assert split_text(text, size=size, overlap=overlap) == chunks


def test_split_text_empty_is_empty() -> None:
    assert split_text("", size=500, overlap=100) == []
    assert split_text("   \n\t  ", size=500, overlap=100) == []
    assert split_text("   \n\t  ", size=3, overlap=1) == []


@pytest.mark.parametrize("size, overlap", [(100, 100), (100, 150), (0, 0), (100, -1)])
def test_invalid_window_raises_config_error(size: int, overlap: int) -> None:
    with pytest.raises(ConfigError):
        split_text("texto", size=size, overlap=overlap)


def test_build_chunks_rejects_blank_text() -> None:
    with pytest.raises(NoExtractableTextError):
        build_chunks("   \n\t ", source_id="vacio.pdf")


def test_build_chunks_metadata_and_pages() -> None:
    text = "x" * 1200
    chunks = build_chunks(text, source_id="clase.pdf", document_id="doc_1", size=500, overlap=100, page_count=3)
    assert [chunk.ordinal for chunk in chunks] == [0, 1, 2]
    assert [chunk.page_hint for chunk in chunks] == [1, 2, 3]
    assert all(chunk.document_id == "doc_1" for chunk in chunks)
    assert chunks[0].metadata == {"source": "clase.pdf", "page": 1}
    assert all(chunk.embedding is None for chunk in chunks)


def test_page_hint_without_page_count() -> None:
    assert page_hint(0, 4, None) is None
    assert page_hint(3, 4, 2) == 2


def test_estimate_matches_split() -> None:
    for length in (1, 399, 400, 401, 1200, 1201):
        assert estimate_chunks(length, 500, 100) == len(split_text("a" * length, 500, 100))
