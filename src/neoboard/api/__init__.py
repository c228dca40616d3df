"""HTTP API for NeoBoard."""
