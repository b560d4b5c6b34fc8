"""Crawl loop, document store and supporting runtime pieces."""
