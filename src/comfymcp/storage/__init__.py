"""Storage layer for job records."""

from comfymcp.storage.jobs import JobStore, job_key
from comfymcp.storage.repository import InMemoryKeyValueStore, SQLiteKeyValueStore

__all__ = ["InMemoryKeyValueStore", "JobStore", "SQLiteKeyValueStore", "job_key"]
