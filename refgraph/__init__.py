"""Reference graph engine and iterative crawler for standards documents."""

__version__ = "0.3.0"
