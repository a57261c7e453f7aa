# docsync/config/__init__.py
"""Configuration schema for the synchronization engine."""

from .schema import CollisionPolicy, SyncConfig

__all__ = ["CollisionPolicy", "SyncConfig"]
