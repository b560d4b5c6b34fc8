"""Plain-text extraction from stored documents.

The reference engine only needs the text of a document; binary format
handling is delegated to pypdf (published deliverables), python-docx
(drafts) and BeautifulSoup (downloaded HTML specifications). Every
failure surfaces as FormatError so callers can record it per document
and move on.
"""

import logging
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict

import docx
from bs4 import BeautifulSoup
from docx.opc.exceptions import PackageNotFoundError
from lxml.etree import XMLSyntaxError
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from refgraph.errors import FormatError

logger = logging.getLogger("refgraph.parsers.text")

# pypdf is noisy about recoverable structure problems
logging.getLogger("pypdf").setLevel(logging.ERROR)

# Errors raised by the format libraries on malformed input
_FORMAT_ERRORS = (
    PyPdfError,
    PackageNotFoundError,
    XMLSyntaxError,
    zipfile.BadZipFile,
    KeyError,
    ValueError,
    UnicodeDecodeError,
    OSError,
)


class TextExtractor(ABC):
    """Turns a stored document into plain text."""

    @abstractmethod
    def extract(self, path: Path) -> str:
        """Return the text content of ``path``.

        Raises:
            FormatError: The document is malformed or its format unsupported.
        """
        raise NotImplementedError


def _pdf_text(path: Path) -> str:
    reader = PdfReader(str(path), strict=False)
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def _docx_text(path: Path) -> str:
    document = docx.Document(str(path))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _html_text(path: Path) -> str:
    markup = path.read_text(encoding="utf-8", errors="replace")
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup.get_text("\n")


def _plain_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


class DefaultTextExtractor(TextExtractor):
    """Dispatches on file suffix to the matching format library."""

    HANDLERS: Dict[str, Callable[[Path], str]] = {
        ".pdf": _pdf_text,
        ".docx": _docx_text,
        ".html": _html_text,
        ".htm": _html_text,
        ".txt": _plain_text,
    }

    def extract(self, path: Path) -> str:
        path = Path(path)
        handler = self.HANDLERS.get(path.suffix.lower())
        if handler is None:
            raise FormatError(path, f"unsupported document format '{path.suffix}'")

        try:
            text = handler(path)
        except _FORMAT_ERRORS as exc:
            raise FormatError(path, str(exc) or exc.__class__.__name__) from exc

        logger.debug("Extracted %d characters from %s", len(text), path.name)
        return text
