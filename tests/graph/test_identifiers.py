"""Tests for canonical identifier helpers."""

import pytest

from refgraph.graph.identifiers import (
    doc_type,
    draft_filename_to_doc_id,
    filename_to_doc_id,
    normalize_doc_id,
    rfc_filename,
    rfc_filename_to_id,
    rfc_number,
    storage_stem,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("ETSI EN 319 403", "EN 319 403"),
        ("en 319403", "EN 319 403"),
        ("ETSI TS 119 102-01", "TS 119 102-1"),
        ("TS 119 612-2 V2.1.1", "TS 119 612-2"),
        ("see clause 4", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_doc_id(raw, expected) -> None:
    """Citations collapse to TYPE NNN NNN[-P] or None."""
    assert normalize_doc_id(raw) == expected


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("en_319403v020202p.pdf", "EN 319 403"),
        ("ts_11910201v010201p.pdf", "TS 119 102-1"),
        ("ts_119612002v020101p.pdf", "TS 119 612-2"),
        ("TR_1191000v1.pdf", "TR 1191000"),
        ("readme.pdf", None),
        (None, None),
    ],
)
def test_filename_to_doc_id(filename, expected) -> None:
    """The digit count decides how a file name is split."""
    assert filename_to_doc_id(filename) == expected


@pytest.mark.parametrize(
    "filename, citation",
    [
        ("en_319403v020202p.pdf", "ETSI EN 319 403"),
        ("en_31941201v010401p.pdf", "ETSI EN 319 412-1"),
        ("ts_119612002v020101p.pdf", "ETSI TS 119 612-02"),
        ("tr_119001v010101p.pdf", "ETSI TR 119001"),
    ],
)
def test_filename_and_citation_agree(filename, citation) -> None:
    """A stored file and a citation of the same document share one identifier."""
    from_file = normalize_doc_id(filename_to_doc_id(filename))
    assert from_file is not None
    assert from_file == normalize_doc_id(citation)


def test_degenerate_filename_is_not_decomposable() -> None:
    """Unusual digit counts pass through but cannot be normalized further."""
    assert normalize_doc_id(filename_to_doc_id("ts_1191v1.pdf")) is None


def test_draft_filenames() -> None:
    """Drafts are identified from work-item or loose deliverable names."""
    assert draft_filename_to_doc_id("TS_119_472-2 draft.docx") == "TS 119 472-2"
    assert draft_filename_to_doc_id("EN 319 401.docx") == "EN 319 401"
    assert draft_filename_to_doc_id("ESI-0019472-2v121.docx") == "TS 001 947-2"
    assert draft_filename_to_doc_id("notes.docx") is None


def test_rfc_helpers() -> None:
    """RFC identifiers round-trip through their storage file names."""
    assert rfc_number("RFC 07519") == 7519
    assert rfc_number("ISO 18013-5") is None
    assert rfc_filename("RFC 7519") == "rfc7519.txt"
    assert rfc_filename("W3C vc-data-model") is None
    assert rfc_filename_to_id("rfc7519.txt") == "RFC 7519"
    assert rfc_filename_to_id("notes.txt") is None


def test_storage_stem_and_type() -> None:
    """External identifiers map to file-system safe stems."""
    assert storage_stem("OpenID Connect Core") == "OpenID_Connect_Core"
    assert storage_stem("SD-JWT VC") == "SD-JWT_VC"
    assert storage_stem("OpenID4VC-HAIP") == "OpenID4VC-HAIP"
    assert doc_type("EN 319 403") == "EN"
    assert doc_type("RFC 7519") == "RFC"
