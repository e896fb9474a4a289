from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from .errors import PersistenceError
from .household_state import DEFAULT_BACKUP_COUNT
from .interfaces import SnapshotStore
from .snapshots import SnapshotInfo

logger = logging.getLogger(__name__)


class PruneResult(BaseModel):
    kept: int = 0
    deleted: int = 0
    skipped: int = 0


class RetentionPolicy(BaseModel):
    """Keep the `keep_count` newest snapshots per stem."""

    keep_count: int = Field(default=DEFAULT_BACKUP_COUNT, ge=0)

    def split(self, newest_first: list[SnapshotInfo]) -> tuple[list[SnapshotInfo], list[SnapshotInfo]]:
        return newest_first[: self.keep_count], newest_first[self.keep_count :]


def prune_snapshots(store: SnapshotStore, directory: Path, stem: str, keep_count: int) -> PruneResult:
    """
    Delete every snapshot of `stem` beyond the newest `keep_count`.

    Best effort: a snapshot that can't be deleted is counted as skipped and the
    rest are still pruned. Never raises for filesystem problems.
    """
    policy = RetentionPolicy(keep_count=keep_count)
    keep, expired = policy.split(store.list(directory, stem))

    result = PruneResult(kept=len(keep))
    for snap in expired:
        try:
            store.delete(Path(snap.path))
        except PersistenceError as e:
            logger.warning("BACKUP PRUNE: could not delete %s: %r", snap.path, e)
            result.skipped += 1
            continue
        result.deleted += 1

    if expired:
        logger.info(
            "BACKUP PRUNE: %s/%s keep=%d deleted=%d skipped=%d",
            directory,
            stem,
            keep_count,
            result.deleted,
            result.skipped,
        )
    return result
