"""Crawl states and termination reasons.

A crawl moves Extracting → FrontierCheck → Acquiring and then either back
to Extracting or to Done.
"""

from enum import Enum, auto


class CrawlState(Enum):
    """States of the crawl controller.

    - EXTRACTING: extract references from every stored document and assemble the graph
    - FRONTIER_CHECK: list referenced documents that could be acquired
    - ACQUIRING: download the frontier into the document store
    - DONE: the crawl has finished
    """

    EXTRACTING = auto()
    FRONTIER_CHECK = auto()
    ACQUIRING = auto()
    DONE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


class Termination(Enum):
    """Why the crawl stopped."""

    EMPTY_FRONTIER = "empty frontier"
    MAX_DEPTH = "maximum depth reached"
    NO_PROGRESS = "no new documents acquired"

    def __str__(self) -> str:
        return self.value
