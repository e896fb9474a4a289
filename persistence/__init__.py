from __future__ import annotations

from .backup_store import DiskBackupStore
from .disk_store import DiskHouseholdDocumentStore
from .errors import (
    FormatError,
    InvalidPathError,
    IoError,
    NotFoundError,
    ParseError,
    PersistenceError,
    SerializeError,
)
from .household_state import HouseholdDataDoc, RawText
from .repositories import (
    AsyncDiskHouseholdRepository,
    AsyncHouseholdRepository,
    DiskHouseholdRepository,
)
from .retention import PruneResult, RetentionPolicy, prune_snapshots

__all__ = [
    "DiskBackupStore",
    "DiskHouseholdDocumentStore",
    "DiskHouseholdRepository",
    "AsyncHouseholdRepository",
    "AsyncDiskHouseholdRepository",
    "HouseholdDataDoc",
    "RawText",
    "PruneResult",
    "RetentionPolicy",
    "prune_snapshots",
    "PersistenceError",
    "FormatError",
    "ParseError",
    "SerializeError",
    "IoError",
    "NotFoundError",
    "InvalidPathError",
]
