"""Graph snapshot exporters."""
