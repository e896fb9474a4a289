from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Protocol

from .household_state import HouseholdDataDoc, SavePayload
from .snapshots import SnapshotInfo


class DocumentStore(Protocol):
    """
    A single data document persisted under a fixed path.
    """

    def load(self) -> HouseholdDataDoc:
        """Load and return the full document (default document if absent)."""
        ...

    def save(self, payload: SavePayload) -> None:
        """Persist the full document, or verbatim text, overwriting the target."""
        ...


class SnapshotStore(Protocol):
    """
    Point-in-time copies of a data document, kept as sibling files.
    """

    def create(self, path: Path, doc: HouseholdDataDoc, *, now: datetime | None = None) -> Path: ...

    def list(self, directory: Path, stem: str) -> list[SnapshotInfo]: ...

    def restore(self, snapshot_path: Path, target_path: Path) -> None: ...

    def delete(self, snapshot_path: Path) -> None: ...
