"""Download collaborators for external specifications."""
