"""Snapshot storage"""
from bodymind.db.memory_store import InMemoryStore

__all__ = ["InMemoryStore"]
