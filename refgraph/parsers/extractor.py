"""Per-document reference extraction.

ReferenceExtractor turns the text of one document into classified
citation sets: one normative set, one informative set and their union
per identifier domain. When a document has no reference headings the
whole text is scanned, for the primary ``etsi`` domain only, and the
matches land in the union set without a classification.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Set

from refgraph.errors import FormatError
from refgraph.graph.schema import Domain
from refgraph.parsers.patterns import empty_matches, match_domain, match_references
from refgraph.parsers.sections import segment_references
from refgraph.parsers.text import DefaultTextExtractor, TextExtractor

if TYPE_CHECKING:
    from refgraph.runtime.workspace import StoredDocument

logger = logging.getLogger("refgraph.parsers.extractor")


@dataclass(frozen=True)
class ClassifiedReferences:
    """Citation sets of one text, keyed by domain.

    Attributes:
        normative: Identifiers found in the normative region.
        informative: Identifiers found in the informative region and not
            in the normative one.
        all: Union of both, or the whole-document matches when no region
            heading was found.
        has_sections: Whether at least one region heading was found.
    """

    normative: Dict[Domain, Set[str]]
    informative: Dict[Domain, Set[str]]
    all: Dict[Domain, Set[str]]
    has_sections: bool = True


@dataclass
class ExtractionResult:
    """Classified references of one stored document."""

    path: Path
    doc_id: Optional[str]
    domain: Domain
    normative: Dict[Domain, Set[str]] = field(default_factory=empty_matches)
    informative: Dict[Domain, Set[str]] = field(default_factory=empty_matches)
    all: Dict[Domain, Set[str]] = field(default_factory=empty_matches)
    is_draft: bool = False
    has_sections: bool = True

    @property
    def normative_count(self) -> int:
        return sum(len(ids) for ids in self.normative.values())

    @property
    def informative_count(self) -> int:
        return sum(len(ids) for ids in self.informative.values())

    @property
    def total_count(self) -> int:
        return sum(len(ids) for ids in self.all.values())

    def to_summary(self) -> Dict[str, Any]:
        """Compact per-document record for the JSON snapshot."""
        return {
            "file": self.path.name,
            "id": self.doc_id,
            "path": str(self.path),
            "source": self.domain.value,
            "isDraft": self.is_draft,
            "hasSections": self.has_sections,
            "normative": {d.value: sorted(ids) for d, ids in self.normative.items() if ids},
            "informative": {d.value: sorted(ids) for d, ids in self.informative.items() if ids},
            "counts": {
                "normative": self.normative_count,
                "informative": self.informative_count,
                "total": self.total_count,
            },
        }


@dataclass
class ExtractionBatch:
    """Outcome of one extraction pass over the document store."""

    results: List[ExtractionResult] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    skipped: List[Path] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.results)


def classify_text(text: str) -> ClassifiedReferences:
    """Segment ``text`` and match citations region by region.

    Normative placement wins: an identifier found in both regions is only
    reported as normative.
    """
    sections = segment_references(text)

    if not sections.has_sections:
        fallback = empty_matches()
        fallback[Domain.ETSI] = match_domain(text, Domain.ETSI)
        return ClassifiedReferences(
            normative=empty_matches(),
            informative=empty_matches(),
            all=fallback,
            has_sections=False,
        )

    normative = match_references(sections.normative or "")
    informative = match_references(sections.informative or "")
    combined = empty_matches()
    for domain in Domain:
        informative[domain] -= normative[domain]
        combined[domain] = normative[domain] | informative[domain]

    return ClassifiedReferences(normative=normative, informative=informative, all=combined)


class ReferenceExtractor:
    """Runs text acquisition and classification over stored documents."""

    def __init__(self, text_extractor: Optional[TextExtractor] = None) -> None:
        self.text_extractor = text_extractor or DefaultTextExtractor()

    def extract_document(self, document: "StoredDocument") -> ExtractionResult:
        """Extract the references of one stored document.

        Raises:
            FormatError: The text of the document could not be obtained.
        """
        text = self.text_extractor.extract(document.path)
        classified = classify_text(text)
        return ExtractionResult(
            path=document.path,
            doc_id=document.doc_id,
            domain=document.domain,
            normative=classified.normative,
            informative=classified.informative,
            all=classified.all,
            is_draft=document.is_draft,
            has_sections=classified.has_sections,
        )

    def extract_all(self, documents: Iterable["StoredDocument"]) -> ExtractionBatch:
        """Extract every document; format failures are recorded, not raised."""
        batch = ExtractionBatch()
        for document in sorted(documents, key=lambda d: str(d.path)):
            if document.doc_id is None:
                logger.info("Skipping %s: file name does not carry an identifier", document.path.name)
                batch.skipped.append(document.path)
                continue

            try:
                result = self.extract_document(document)
            except FormatError as exc:
                logger.warning("Could not read %s: %s", document.path.name, exc.reason)
                batch.errors[str(document.path)] = exc.reason
                continue

            logger.info(
                "%s: %d normative, %d informative reference(s)%s",
                result.doc_id,
                result.normative_count,
                result.informative_count,
                "" if result.has_sections else " (no reference sections)",
            )
            batch.results.append(result)
        return batch
