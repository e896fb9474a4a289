from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel

SNAPSHOT_MARKER = "_backup_"
SNAPSHOT_SUFFIX = ".json"
SNAPSHOT_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
FALLBACK_STEM = "backup"


class SnapshotInfo(BaseModel):
    filename: str
    path: str
    created: datetime
    size: int


def snapshot_stem(path: Path) -> str:
    return Path(path).stem or FALLBACK_STEM


def snapshot_dir(path: Path) -> Path:
    path = Path(path)
    parent = path.parent
    # "/" is its own parent
    if parent == path:
        return Path(".")
    return parent


def format_snapshot_timestamp(now: datetime) -> str:
    # Naive datetimes are taken to already be UTC.
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).strftime(SNAPSHOT_TIMESTAMP_FORMAT)


def snapshot_prefix(stem: str) -> str:
    return f"{stem}{SNAPSHOT_MARKER}"


def snapshot_filename(stem: str, now: datetime) -> str:
    return f"{snapshot_prefix(stem)}{format_snapshot_timestamp(now)}{SNAPSHOT_SUFFIX}"


def snapshot_path_for(path: Path, now: datetime) -> Path:
    """
    `/data/house.json` at 2024-03-05T10:15:30Z -> `/data/house_backup_2024-03-05_10-15-30.json`.

    Two snapshots of the same stem within one second share a name; the later
    one overwrites the earlier.
    """
    return snapshot_dir(path) / snapshot_filename(snapshot_stem(path), now)


def is_snapshot_name(filename: str, stem: str) -> bool:
    return filename.startswith(snapshot_prefix(stem)) and filename.endswith(SNAPSHOT_SUFFIX)
