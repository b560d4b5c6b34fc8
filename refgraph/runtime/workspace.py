"""Document store backed by a directory tree.

Layout under the store root:

* ETSI deliverables anywhere outside the reserved directories, as
  ``*.pdf`` (published) or ``*.docx`` / ``*.doc`` (drafts)
* ``OIDF/<Family_Name>.html`` for OpenID Foundation specifications
* ``IETF/rfc<N>.txt`` for RFCs

The presence of a file for a canonical identifier is the only signal
that a document has been acquired.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from refgraph.graph.identifiers import (
    draft_filename_to_doc_id,
    filename_to_doc_id,
    normalize_doc_id,
    rfc_filename,
    rfc_filename_to_id,
    storage_stem,
)
from refgraph.graph.schema import Domain
from refgraph.parsers.registry import SpecRegistry, get_registry

logger = logging.getLogger("refgraph.workspace")

OIDF_DIR = "OIDF"
IETF_DIR = "IETF"

_PUBLISHED_SUFFIXES = {".pdf"}
_DRAFT_SUFFIXES = {".docx", ".doc"}


@dataclass(frozen=True)
class StoredDocument:
    """A document file found in the store.

    Attributes:
        path: Location of the file.
        doc_id: Canonical identifier, None when the file name is not understood.
        domain: Identifier domain of the document.
        is_draft: Whether the file is a draft rather than a published version.
    """

    path: Path
    doc_id: Optional[str]
    domain: Domain
    is_draft: bool = False


class DocumentStore:
    """Filesystem view over acquired documents."""

    def __init__(self, root: Union[str, Path], registry: Optional[SpecRegistry] = None) -> None:
        self.root = Path(root).expanduser().resolve()
        self.registry = registry or get_registry()

    @property
    def oidf_dir(self) -> Path:
        return self.root / OIDF_DIR

    @property
    def ietf_dir(self) -> Path:
        return self.root / IETF_DIR

    def ensure_layout(self) -> None:
        """Create the store directories used for acquisitions."""
        self.oidf_dir.mkdir(parents=True, exist_ok=True)
        self.ietf_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------
    def scan(self, include_drafts: bool = False) -> List[StoredDocument]:
        """List every stored document, sorted by path.

        Args:
            include_drafts: Also list draft Word documents.

        Returns:
            Documents in a stable order so that downstream assembly is
            deterministic.
        """
        if not self.root.is_dir():
            logger.warning("Document store %s does not exist", self.root)
            return []

        documents: List[StoredDocument] = []
        for path in sorted(p for p in self.root.rglob("*") if p.is_file()):
            document = self._classify(path, include_drafts)
            if document is not None:
                documents.append(document)

        logger.info("Found %d document(s) under %s", len(documents), self.root)
        return documents

    def _classify(self, path: Path, include_drafts: bool) -> Optional[StoredDocument]:
        relative = path.relative_to(self.root)
        top = relative.parts[0] if len(relative.parts) > 1 else ""
        suffix = path.suffix.lower()

        if top == OIDF_DIR:
            if suffix not in (".html", ".htm"):
                return None
            return StoredDocument(path, self.oidf_id_for(path), Domain.OIDF)

        if top == IETF_DIR:
            doc_id = rfc_filename_to_id(path.name)
            if doc_id is None:
                return None
            return StoredDocument(path, doc_id, Domain.IETF)

        if suffix in _PUBLISHED_SUFFIXES:
            return StoredDocument(path, normalize_doc_id(filename_to_doc_id(path.name)), Domain.ETSI)

        if suffix in _DRAFT_SUFFIXES and include_drafts:
            doc_id = normalize_doc_id(filename_to_doc_id(path.name)) or draft_filename_to_doc_id(
                path.name
            )
            return StoredDocument(path, doc_id, Domain.ETSI, is_draft=True)

        return None

    def document_id_for_path(self, path: Union[str, Path]) -> Optional[str]:
        """Canonical identifier of a file inside the store, drafts included."""
        path = Path(path).expanduser().resolve()
        try:
            document = self._classify(path, include_drafts=True)
        except ValueError:
            return None
        return document.doc_id if document is not None else None

    def oidf_id_for(self, path: Path) -> str:
        """Identifier of a stored OpenID Foundation specification."""
        known = self.registry.id_for_storage_stem(path.stem)
        return known if known is not None else path.stem.replace("_", " ")

    # ------------------------------------------------------------------
    # Presence
    # ------------------------------------------------------------------
    def path_for(self, identifier: str, domain: Domain) -> Path:
        """Storage location of an external document.

        Raises:
            ValueError: The domain is not stored by the crawler, or the
                identifier cannot be turned into a file name.
        """
        if domain is Domain.OIDF:
            return self.oidf_dir / f"{storage_stem(identifier)}.html"
        if domain is Domain.IETF:
            filename = rfc_filename(identifier)
            if filename is None:
                raise ValueError(f"Not an RFC identifier: {identifier}")
            return self.ietf_dir / filename
        raise ValueError(f"Documents of domain '{domain.value}' are not acquired")

    def has(self, identifier: str, domain: Domain) -> bool:
        """Whether content for ``identifier`` is already stored."""
        try:
            return self.path_for(identifier, domain).is_file()
        except ValueError:
            return False

    def present_paths(self, documents: List[StoredDocument]) -> Dict[str, Path]:
        """Map identifiers of scanned documents to their files."""
        present: Dict[str, Path] = {}
        for document in documents:
            if document.doc_id and not document.is_draft:
                present.setdefault(document.doc_id, document.path)
        return present
