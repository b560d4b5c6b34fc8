"""Identifier helpers for graph node IDs.

This module provides a single place to construct canonical document
identifiers. Two independent entry points must agree on the canonical
form of a deliverable:

* in-text citations such as ``ETSI EN 319 412-01`` (``normalize_doc_id``)
* stored file names such as ``en_31941201v010101p.pdf``
  (``filename_to_doc_id``)

Both yield ``EN 319 412-1``. All helpers are pure and total: input that
cannot be parsed yields ``None`` instead of raising.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional, Union

_CITATION_RE = re.compile(
    r"(EN|TS|TR|ES|EG|SR)\s*(\d{3})\s*(\d{3})(?:-(\d+))?", re.IGNORECASE
)
_FILENAME_RE = re.compile(r"^(en|ts|tr|es|eg|sr)_(\d+)(?:v\d+)?", re.IGNORECASE)
_DRAFT_WORK_ITEM_RE = re.compile(r"ESI-(\d{3})(\d{4,5})-?(\d)?", re.IGNORECASE)
_DRAFT_GENERIC_RE = re.compile(
    r"(TS|TR|EN|ES)[\s_-]*(\d{3})[\s_-]*(\d{3})(?:[\s_-]*(\d+))?", re.IGNORECASE
)
_RFC_RE = re.compile(r"RFC\s*(\d+)", re.IGNORECASE)
_RFC_FILENAME_RE = re.compile(r"^rfc(\d+)\.txt$", re.IGNORECASE)


def _format_doc_id(doc_type: str, first: str, second: str, part: Optional[str]) -> str:
    suffix = f"-{int(part)}" if part else ""
    return f"{doc_type.upper()} {first} {second}{suffix}"


def normalize_doc_id(ref: Optional[str]) -> Optional[str]:
    """Return the canonical ``TYPE NNN NNN[-P]`` form of a citation.

    Args:
        ref: Raw citation text, e.g. ``"ETSI TS 119 102-01"``.

    Returns:
        Canonical identifier, or None when no deliverable number is found.

    Examples:
        >>> normalize_doc_id("ETSI en 319403")
        'EN 319 403'
        >>> normalize_doc_id("TS 119 102-01")
        'TS 119 102-1'
    """
    if not ref or not isinstance(ref, str):
        return None
    match = _CITATION_RE.search(ref)
    if not match:
        return None
    return _format_doc_id(match.group(1), match.group(2), match.group(3), match.group(4))


def filename_to_doc_id(filename: Union[str, Path, None]) -> Optional[str]:
    """Derive the canonical identifier from a published file name.

    The digit group after the type prefix decides the split: six digits
    split 3+3; eight or nine digits split 3+3 with the remainder read as
    an integer part number. Any other length is passed through unsplit.

    Examples:
        >>> filename_to_doc_id("en_319403v020202p.pdf")
        'EN 319 403'
        >>> filename_to_doc_id("ts_11910201v010201p.pdf")
        'TS 119 102-1'
        >>> filename_to_doc_id("tr_1191000v1.pdf")
        'TR 1191000'
    """
    if not filename:
        return None
    name = Path(str(filename)).name
    match = _FILENAME_RE.match(name)
    if not match:
        return None

    doc_type = match.group(1).upper()
    digits = match.group(2)
    if len(digits) == 6:
        return f"{doc_type} {digits[:3]} {digits[3:]}"
    if len(digits) in (8, 9):
        return _format_doc_id(doc_type, digits[:3], digits[3:6], digits[6:])
    return f"{doc_type} {digits}"


def draft_filename_to_doc_id(filename: Union[str, Path, None]) -> Optional[str]:
    """Derive the canonical identifier from a draft document file name.

    Drafts are stored under their work-item name (``ESI-0019472-2v121.docx``)
    or under a loosely formatted deliverable number (``TS_119_472-2.docx``).
    """
    if not filename:
        return None
    name = Path(str(filename)).name

    match = _DRAFT_WORK_ITEM_RE.search(name)
    if match:
        return _format_doc_id("TS", match.group(1), match.group(2)[:3], match.group(3))

    match = _DRAFT_GENERIC_RE.search(name)
    if match:
        return _format_doc_id(match.group(1), match.group(2), match.group(3), match.group(4))
    return None


def rfc_number(identifier: Optional[str]) -> Optional[int]:
    """Return the RFC number of an identifier such as ``RFC 07519``."""
    if not identifier or not isinstance(identifier, str):
        return None
    match = _RFC_RE.search(identifier)
    if not match:
        return None
    return int(match.group(1))


def rfc_id(number: Union[int, str]) -> str:
    """Canonical RFC identifier; leading zeros are dropped."""
    return f"RFC {int(number)}"


def rfc_filename_to_id(filename: Union[str, Path, None]) -> Optional[str]:
    """Map a stored ``rfc<N>.txt`` file back to ``RFC <N>``."""
    if not filename:
        return None
    match = _RFC_FILENAME_RE.match(Path(str(filename)).name)
    return rfc_id(match.group(1)) if match else None


def rfc_filename(identifier: str) -> Optional[str]:
    """Storage file name for an RFC identifier."""
    number = rfc_number(identifier)
    return f"rfc{number}.txt" if number is not None else None


def storage_stem(identifier: str) -> str:
    """File-system safe stem used to store external specifications.

    Examples:
        >>> storage_stem("OpenID Connect Core")
        'OpenID_Connect_Core'
        >>> storage_stem("SD-JWT VC")
        'SD-JWT_VC'
    """
    return re.sub(r"[^\w-]", "", re.sub(r"\s+", "_", identifier))


def doc_type(identifier: str) -> str:
    """First token of an identifier (``EN``, ``RFC``, ``ISO``...)."""
    return identifier.split(" ")[0]
