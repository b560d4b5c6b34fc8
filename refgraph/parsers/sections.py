"""Reference section segmentation.

Standards deliverables list their citations under clause 2, split into
"Normative references" and "Informative references". This module locates
both regions in extracted text so that citations can be classified by
the region they were found in.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger("refgraph.parsers.sections")

# Ordered heading-anchored patterns, first match wins. A region runs until
# the next recognized heading or the end of the text.
NORMATIVE_PATTERNS: Sequence[re.Pattern] = (
    re.compile(
        r"(?:^|\n)\s*2\.?1?\s*Normative\s+references?\s*\n([\s\S]*?)"
        r"(?=\n\s*(?:2\.?2|3|Informative|Definition|Terms|Abbreviation)|\Z)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:^|\n)\s*Normative\s+references?\s*\n([\s\S]*?)"
        r"(?=\n\s*(?:Informative|Definition|Terms|Abbreviation|\d+\s+[A-Z])|\Z)",
        re.IGNORECASE,
    ),
    # RFC and OpenID layout: "10.1.  Normative References"
    re.compile(
        r"(?:^|\n)\s*\d+(?:\.\d+)*\.?\s+Normative\s+References?\s*\n([\s\S]*?)"
        r"(?=\n\s*(?:\d+(?:\.\d+)*\.?\s+[A-Z]|Appendix|Acknowledg|Authors?'?\s+Address)|\Z)",
    ),
)

INFORMATIVE_PATTERNS: Sequence[re.Pattern] = (
    re.compile(
        r"(?:^|\n)\s*2\.?2?\s*Informative\s+references?\s*\n([\s\S]*?)"
        r"(?=\n\s*(?:3|Definition|Terms|Abbreviation|\d+\s+[A-Z])|\Z)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:^|\n)\s*Informative\s+references?\s*\n([\s\S]*?)"
        r"(?=\n\s*(?:Definition|Terms|Abbreviation|\d+\s+[A-Z])|\Z)",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:^|\n)\s*\d+(?:\.\d+)*\.?\s+Informative\s+References?\s*\n([\s\S]*?)"
        r"(?=\n\s*(?:\d+(?:\.\d+)*\.?\s+[A-Z]|Appendix|Acknowledg|Authors?'?\s+Address)|\Z)",
    ),
)


@dataclass(frozen=True)
class ReferenceSections:
    """Reference regions of one document; either may be absent."""

    normative: Optional[str] = None
    informative: Optional[str] = None

    @property
    def has_sections(self) -> bool:
        return self.normative is not None or self.informative is not None


def _first_match(text: str, patterns: Sequence[re.Pattern]) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def segment_references(text: str) -> ReferenceSections:
    """Split document text into normative and informative reference regions.

    Args:
        text: Full extracted text of a document.

    Returns:
        ReferenceSections with each region's body, or None for a region
        whose heading was not found.
    """
    if not text:
        return ReferenceSections()

    sections = ReferenceSections(
        normative=_first_match(text, NORMATIVE_PATTERNS),
        informative=_first_match(text, INFORMATIVE_PATTERNS),
    )
    if not sections.has_sections:
        logger.debug("No reference headings found, whole document will be scanned")
    return sections
