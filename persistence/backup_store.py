from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path

from .errors import IoError, NotFoundError
from .household_state import HouseholdDataDoc
from .interfaces import SnapshotStore
from .json_store import encode_document
from .paths import created_at
from .snapshots import SnapshotInfo, is_snapshot_name, snapshot_path_for

logger = logging.getLogger(__name__)


class DiskBackupStore(SnapshotStore):
    """
    Snapshots live next to the data file they were taken from:

      /data/house.json
      /data/house_backup_2024-03-05_10-15-30.json
      /data/house_backup_2024-03-06_08-00-01.json

    The store owns the snapshot files, never the data file itself.
    """

    def create(self, path: Path, doc: HouseholdDataDoc, *, now: datetime | None = None) -> Path:
        # Serialize before touching disk so a bad document never leaves a partial snapshot.
        text = encode_document(doc)
        instant = now or datetime.now(timezone.utc)
        target = snapshot_path_for(Path(path), instant)
        try:
            target.write_bytes(text.encode("utf-8"))
        except OSError as e:
            raise IoError(f"Failed to create backup: {e}", path=target) from e
        logger.info("BACKUP CREATE: %s -> %s", path, target)
        return target

    def list(self, directory: Path, stem: str) -> list[SnapshotInfo]:
        """
        Snapshots of `stem` in `directory`, newest first.

        A missing directory has no snapshots. Entries whose metadata can't be
        read are skipped.
        """
        directory = Path(directory)
        if not directory.is_dir():
            return []

        found: list[SnapshotInfo] = []
        try:
            with os.scandir(directory) as it:
                for entry in it:
                    if not is_snapshot_name(entry.name, stem):
                        continue
                    try:
                        st = entry.stat()
                    except OSError as e:
                        logger.debug("BACKUP LIST: skipping %s: %r", entry.path, e)
                        continue
                    found.append(
                        SnapshotInfo(
                            filename=entry.name,
                            path=entry.path,
                            created=created_at(st),
                            size=st.st_size,
                        )
                    )
        except OSError as e:
            logger.warning("BACKUP LIST: failed to scan %s: %r", directory, e)
            return []

        found.sort(key=lambda s: s.created, reverse=True)
        return found

    def restore(self, snapshot_path: Path, target_path: Path) -> None:
        snapshot_path = Path(snapshot_path)
        if not snapshot_path.exists():
            raise NotFoundError("Backup file does not exist", path=snapshot_path)
        try:
            shutil.copyfile(snapshot_path, target_path)
        except OSError as e:
            raise IoError(f"Failed to restore backup: {e}", path=target_path) from e
        logger.info("BACKUP RESTORE: %s -> %s", snapshot_path, target_path)

    def delete(self, snapshot_path: Path) -> None:
        snapshot_path = Path(snapshot_path)
        if not snapshot_path.exists():
            raise NotFoundError("Backup file does not exist", path=snapshot_path)
        try:
            snapshot_path.unlink()
        except OSError as e:
            raise IoError(f"Failed to delete backup: {e}", path=snapshot_path) from e
        logger.info("BACKUP DELETE: %s", snapshot_path)
