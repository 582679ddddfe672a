"""Property listing writer service."""
