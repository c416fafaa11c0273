"""Durable key-value storage for collections and preferences."""

from .json_store import JsonStore
from .preferences import PreferenceStore

__all__ = ["JsonStore", "PreferenceStore"]
