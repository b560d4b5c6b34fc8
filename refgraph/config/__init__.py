"""Configuration schema and validation for refgraph."""

from .schema import CrawlConfig

__all__ = ["CrawlConfig"]
