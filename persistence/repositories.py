from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel

from .backup_store import DiskBackupStore
from .disk_store import DiskHouseholdDocumentStore
from .errors import PersistenceError
from .household_state import HouseholdDataDoc, SavePayload
from .interfaces import SnapshotStore
from .paths import FileInfo, ensure_dir, file_info, validate_path
from .retention import PruneResult, prune_snapshots
from .snapshots import SnapshotInfo, snapshot_dir, snapshot_stem

logger = logging.getLogger(__name__)


class SaveOutcome(BaseModel):
    path: str
    backup_path: str | None = None
    pruned: PruneResult | None = None
    backup_error: dict[str, str] | None = None


class DiskHouseholdRepository:
    """
    Every operation the dashboard needs from disk, each taking explicit paths.

    No state is kept between calls apart from the snapshot store and the
    auto-backup switch.
    """

    def __init__(self, backups: SnapshotStore | None = None, *, auto_backup_on_save: bool = True) -> None:
        self._backups = backups or DiskBackupStore()
        self._auto_backup_on_save = auto_backup_on_save

    def load_document(self, path: Path) -> HouseholdDataDoc:
        return DiskHouseholdDocumentStore(Path(path)).load()

    def save_document(self, path: Path, payload: SavePayload) -> None:
        DiskHouseholdDocumentStore(Path(path)).save(payload)

    def save_document_with_backup(self, path: Path, doc: HouseholdDataDoc) -> SaveOutcome:
        """
        Save `doc`, snapshotting it first when the document asks for auto-backup
        and there is already a file at `path`.

        The snapshot records the version being saved, not the file it replaces;
        it is not a pre-overwrite copy of what was on disk.

        Backup or pruning trouble is reported in the outcome; it never blocks the save.
        """
        path = Path(path)
        outcome = SaveOutcome(path=str(path))
        if self._auto_backup_on_save and doc.settings.auto_backup and path.exists():
            try:
                outcome.backup_path = str(self._backups.create(path, doc))
            except PersistenceError as e:
                logger.warning("AUTO BACKUP: failed for %s: %r", path, e)
                outcome.backup_error = e.to_payload()
            else:
                outcome.pruned = prune_snapshots(
                    self._backups, snapshot_dir(path), snapshot_stem(path), doc.settings.backup_count
                )
        self.save_document(path, doc)
        return outcome

    def create_backup(self, path: Path, doc: HouseholdDataDoc, *, now: datetime | None = None) -> Path:
        return self._backups.create(Path(path), doc, now=now)

    def list_backups(self, directory: Path, stem: str) -> list[SnapshotInfo]:
        return self._backups.list(Path(directory), stem)

    def prune_backups(self, directory: Path, stem: str, keep_count: int) -> PruneResult:
        return prune_snapshots(self._backups, Path(directory), stem, keep_count)

    def restore_backup(self, snapshot_path: Path, target_path: Path) -> None:
        self._backups.restore(Path(snapshot_path), Path(target_path))

    def delete_backup(self, snapshot_path: Path) -> None:
        self._backups.delete(Path(snapshot_path))

    def validate_path(self, path: Path | str) -> bool:
        return validate_path(path)

    def file_info(self, path: Path | str) -> FileInfo:
        return file_info(path)

    def create_directory(self, path: Path | str) -> None:
        ensure_dir(Path(path))


class AsyncHouseholdRepository(Protocol):
    async def load_document(self, path: Path) -> HouseholdDataDoc: ...
    async def save_document(self, path: Path, payload: SavePayload) -> None: ...
    async def save_document_with_backup(self, path: Path, doc: HouseholdDataDoc) -> SaveOutcome: ...

    async def create_backup(self, path: Path, doc: HouseholdDataDoc, *, now: datetime | None = None) -> Path: ...
    async def list_backups(self, directory: Path, stem: str) -> list[SnapshotInfo]: ...
    async def prune_backups(self, directory: Path, stem: str, keep_count: int) -> PruneResult: ...
    async def restore_backup(self, snapshot_path: Path, target_path: Path) -> None: ...
    async def delete_backup(self, snapshot_path: Path) -> None: ...

    async def validate_path(self, path: Path | str) -> bool: ...
    async def file_info(self, path: Path | str) -> FileInfo: ...
    async def create_directory(self, path: Path | str) -> None: ...


class AsyncDiskHouseholdRepository(AsyncHouseholdRepository):
    """
    Async wrapper around the disk-backed household repository.
    Uses asyncio.to_thread to avoid blocking the event loop on file I/O.
    """

    def __init__(self, repo: DiskHouseholdRepository | None = None) -> None:
        self._repo = repo or DiskHouseholdRepository()

    async def load_document(self, path: Path) -> HouseholdDataDoc:
        return await asyncio.to_thread(self._repo.load_document, path)

    async def save_document(self, path: Path, payload: SavePayload) -> None:
        await asyncio.to_thread(self._repo.save_document, path, payload)

    async def save_document_with_backup(self, path: Path, doc: HouseholdDataDoc) -> SaveOutcome:
        return await asyncio.to_thread(self._repo.save_document_with_backup, path, doc)

    async def create_backup(self, path: Path, doc: HouseholdDataDoc, *, now: datetime | None = None) -> Path:
        return await asyncio.to_thread(self._repo.create_backup, path, doc, now=now)

    async def list_backups(self, directory: Path, stem: str) -> list[SnapshotInfo]:
        return await asyncio.to_thread(self._repo.list_backups, directory, stem)

    async def prune_backups(self, directory: Path, stem: str, keep_count: int) -> PruneResult:
        return await asyncio.to_thread(self._repo.prune_backups, directory, stem, keep_count)

    async def restore_backup(self, snapshot_path: Path, target_path: Path) -> None:
        await asyncio.to_thread(self._repo.restore_backup, snapshot_path, target_path)

    async def delete_backup(self, snapshot_path: Path) -> None:
        await asyncio.to_thread(self._repo.delete_backup, snapshot_path)

    async def validate_path(self, path: Path | str) -> bool:
        return await asyncio.to_thread(self._repo.validate_path, path)

    async def file_info(self, path: Path | str) -> FileInfo:
        return await asyncio.to_thread(self._repo.file_info, path)

    async def create_directory(self, path: Path | str) -> None:
        await asyncio.to_thread(self._repo.create_directory, path)
