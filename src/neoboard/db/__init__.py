# src/neoboard/db/__init__.py
"""Database configuration and utilities."""

from .session import SessionLocal, atomic, get_db

__all__ = ["atomic", "get_db", "SessionLocal"]
