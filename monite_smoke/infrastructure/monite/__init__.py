"""Monite infrastructure package."""

from .monite_client import MoniteClient

__all__ = ["MoniteClient"]
