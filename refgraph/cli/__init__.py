"""Command implementations for the refgraph CLI."""
