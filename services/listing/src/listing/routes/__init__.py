"""HTTP routes for the listing service."""
