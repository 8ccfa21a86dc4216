"""
Record store - Exports for routes and services
"""

from .store import (
    FileRecordStore,
    MemoryRecordStore,
    RecordStore,
    create_store,
    load_seed_dataset,
)

__all__ = ["RecordStore", "FileRecordStore", "MemoryRecordStore", "create_store", "load_seed_dataset"]
