"""Text extraction, reference section segmentation and citation matching."""
