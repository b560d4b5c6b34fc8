"""RFC fetcher backed by the RFC Editor plain-text archive."""

from typing import Optional

from refgraph.fetchers.base import BaseFetcher
from refgraph.graph.identifiers import rfc_number
from refgraph.graph.schema import Domain

RFC_URL_TEMPLATE = "https://www.rfc-editor.org/rfc/rfc{number}.txt"


class IetfFetcher(BaseFetcher):
    """Downloads RFCs by number."""

    domain = Domain.IETF

    def locate(self, identifier: str) -> Optional[str]:
        number = rfc_number(identifier)
        if number is None:
            return None
        return RFC_URL_TEMPLATE.format(number=number)
