"""OpenID Foundation specification fetcher."""

from typing import Optional

from refgraph.fetchers.base import BaseFetcher
from refgraph.graph.schema import Domain
from refgraph.parsers.registry import SpecRegistry, get_registry


class OidfFetcher(BaseFetcher):
    """Downloads foundation specifications listed in the alias registry."""

    domain = Domain.OIDF

    def __init__(self, registry: Optional[SpecRegistry] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.registry = registry or get_registry()

    def locate(self, identifier: str) -> Optional[str]:
        return self.registry.resolve_url(identifier)
