"""Shared fixtures for refgraph tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from refgraph.errors import AcquisitionError, FormatError
from refgraph.fetchers.base import BaseFetcher
from refgraph.graph.schema import Domain
from refgraph.parsers.text import TextExtractor


def etsi_text(title: str, normative: List[str], informative: List[str]) -> str:
    """Render a document body laid out like an ETSI deliverable."""
    lines = [title, "Foreword", "1 Scope", "The present document specifies requirements.", "2 References"]
    lines.append("2.1 Normative references")
    lines.extend(f"[{i}] {ref}" for i, ref in enumerate(normative, start=1))
    if not normative:
        lines.append("Not applicable.")
    lines.append("2.2 Informative references")
    lines.extend(f"[i.{i}] {ref}" for i, ref in enumerate(informative, start=1))
    if not informative:
        lines.append("Not applicable.")
    lines.extend(["3 Definition of terms", "For the purposes of the present document the terms apply."])
    return "\n".join(lines) + "\n"


class PlainTextExtractor(TextExtractor):
    """Reads every stored file as UTF-8 text, whatever its suffix."""

    def __init__(self, failing: Optional[List[str]] = None) -> None:
        self.failing = set(failing or [])
        self.calls: List[Path] = []

    def extract(self, path: Path) -> str:
        self.calls.append(Path(path))
        if Path(path).name in self.failing:
            raise FormatError(path, "broken document")
        return Path(path).read_text(encoding="utf-8")


class FakeFetcher(BaseFetcher):
    """Fetcher serving canned documents without network access.

    Args:
        domain: Domain served by this fetcher.
        documents: Identifier to body; identifiers missing here fail.
        urls: Identifier to location; defaults to a location for every identifier.
    """

    def __init__(
        self,
        domain: Domain,
        documents: Optional[Dict[str, str]] = None,
        urls: Optional[Callable[[str], Optional[str]]] = None,
    ) -> None:
        super().__init__()
        self.domain = domain
        self.documents = dict(documents or {})
        self._urls = urls
        self.calls: List[str] = []

    def locate(self, identifier: str) -> Optional[str]:
        if self._urls is not None:
            return self._urls(identifier)
        return f"https://example.org/{identifier.replace(' ', '_')}"

    def fetch(self, identifier: str, target_path: Path) -> Path:
        self.calls.append(identifier)
        if identifier not in self.documents:
            raise AcquisitionError(f"{identifier}: HTTP 503")
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text(self.documents[identifier], encoding="utf-8")
        return target_path


@pytest.fixture
def specs_root(tmp_path: Path) -> Path:
    """Empty document store."""
    root = tmp_path / "specs"
    root.mkdir()
    return root


@pytest.fixture
def write_doc(specs_root: Path) -> Callable[[str, str], Path]:
    """Write a text document into the store and return its path."""

    def _write(relative: str, text: str) -> Path:
        path = specs_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def no_sleep() -> List[float]:
    """Collects requested delays instead of sleeping."""
    return []


@pytest.fixture
def etsi_doc() -> Callable[..., str]:
    """Factory for ETSI-style document bodies."""
    return etsi_text


@pytest.fixture
def text_extractor() -> PlainTextExtractor:
    return PlainTextExtractor()


@pytest.fixture
def fetcher_factory() -> Callable[..., FakeFetcher]:
    """Factory for network-free fetchers."""
    return FakeFetcher


@pytest.fixture
def extractor_factory() -> Callable[..., PlainTextExtractor]:
    """Factory for text extractors that can be told to fail on given file names."""
    return PlainTextExtractor
