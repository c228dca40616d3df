"""Pydantic schemas for the NeoBoard API."""
