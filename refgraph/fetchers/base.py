"""Base fetcher interface for external document acquisition.

A fetcher knows where the documents of one identifier domain live on the
web and how to store one of them in the document store.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import requests

from refgraph.errors import AcquisitionError
from refgraph.graph.schema import Domain

logger = logging.getLogger("refgraph.fetchers")

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; EUDI-Nexus/1.0)"
DEFAULT_TIMEOUT = 15.0


class BaseFetcher(ABC):
    """Abstract fetcher for one identifier domain.

    Conventions:
    - `locate` is pure and returns None for identifiers with no known source
    - `fetch` performs one download attempt and raises AcquisitionError on failure
    - Retries and rate limiting belong to the caller
    """

    domain: Domain

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session

    @abstractmethod
    def locate(self, identifier: str) -> Optional[str]:
        """Return the download URL of ``identifier``, or None if unknown."""
        raise NotImplementedError

    def fetch(self, identifier: str, target_path: Path) -> Path:
        """Download ``identifier`` to ``target_path``.

        The file only appears at ``target_path`` once the whole body has
        been received.

        Args:
            identifier: Canonical identifier of the document.
            target_path: Destination inside the document store.

        Returns:
            Path: The written file.

        Raises:
            AcquisitionError: No source location, network failure, HTTP
                error status, or the file could not be written.
        """
        url = self.locate(identifier)
        if url is None:
            raise AcquisitionError(f"No source location for {identifier}")

        logger.debug("Downloading %s from %s", identifier, url)
        try:
            response = self._get(url)
            response.raise_for_status()
        except requests.RequestException as e:
            raise AcquisitionError(f"{identifier}: {e}") from e

        partial = target_path.with_name(target_path.name + ".part")
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            partial.write_bytes(response.content)
            partial.replace(target_path)
        except OSError as e:
            raise AcquisitionError(f"{identifier}: cannot write {target_path}: {e}") from e

        logger.info("Stored %s (%.1f KB)", identifier, len(response.content) / 1024)
        return target_path

    def _get(self, url: str) -> requests.Response:
        headers = {"User-Agent": self.user_agent}
        if self.session is not None:
            return self.session.get(url, headers=headers, timeout=self.timeout)
        return requests.get(url, headers=headers, timeout=self.timeout)
