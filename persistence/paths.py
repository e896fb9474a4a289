from __future__ import annotations

import os
import stat as stat_mod
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel

from .errors import InvalidPathError, IoError, NotFoundError


class FileInfo(BaseModel):
    size: int
    modified: datetime
    is_readonly: bool


def project_root() -> Path:
    # persistence/paths.py -> persistence -> project root
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return ensure_dir(project_root() / "data")


def default_data_file() -> Path:
    return data_dir() / "households.json"


def ensure_dir(path: Path) -> Path:
    """Create `path` and any missing ancestors; an existing directory is fine."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(f"Failed to create directory: {e}", path=path) from e
    return path


def validate_path(path: Path | str) -> bool:
    """
    Check that `path` is usable as a data file location.

    Returns whether the file itself exists; raises InvalidPathError if the path
    is relative or its parent directory is missing.
    """
    p = Path(path)
    if not p.is_absolute():
        raise InvalidPathError("Path must be absolute", path=p)
    if not p.parent.exists():
        raise InvalidPathError("Parent directory does not exist", path=p)
    return p.exists()


def created_at(st: os.stat_result) -> datetime:
    # Linux stat() has no birth time; snapshots are never rewritten so mtime is the write instant.
    ts = getattr(st, "st_birthtime", None)
    if ts is None:
        ts = st.st_mtime
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def is_readonly(st: os.stat_result) -> bool:
    return not (st.st_mode & (stat_mod.S_IWUSR | stat_mod.S_IWGRP | stat_mod.S_IWOTH))


def file_info(path: Path | str) -> FileInfo:
    p = Path(path)
    if not p.exists():
        raise NotFoundError("File does not exist", path=p)
    try:
        st = p.stat()
    except OSError as e:
        raise IoError(f"Failed to get file metadata: {e}", path=p) from e
    return FileInfo(
        size=st.st_size,
        modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        is_readonly=is_readonly(st),
    )
