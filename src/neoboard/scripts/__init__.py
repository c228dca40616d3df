"""Operational scripts for NeoBoard."""
