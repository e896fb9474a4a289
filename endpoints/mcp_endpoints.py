from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, TypedDict

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.server import Context
from mcp.server.transport_security import TransportSecuritySettings

from persistence.errors import PersistenceError
from persistence.repositories import AsyncDiskHouseholdRepository, DiskHouseholdRepository
from persistence.snapshots import SnapshotInfo, snapshot_dir, snapshot_stem
from settings import get_settings

SETTINGS = get_settings()

logger = logging.getLogger(__name__)


class ToolTextContent(TypedDict):
    type: Literal["text"]
    text: str


class BackupToolResponse(TypedDict, total=False):
    content: list[ToolTextContent]
    structuredContent: dict[str, Any]


HOUSEHOLD_REPO = AsyncDiskHouseholdRepository(
    DiskHouseholdRepository(auto_backup_on_save=SETTINGS.auto_backup_on_save)
)


def _parse_int_nonneg(value: Any) -> int | None:
    if isinstance(value, bool):  # bool is subclass of int in Python
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.strip() != "":
        try:
            n = int(value)
        except ValueError:
            return None
        return n if n >= 0 else None
    return None


def _data_path(path: str | None) -> Path:
    if isinstance(path, str) and path.strip():
        return Path(path.strip())
    return SETTINGS.data_file


def _reply(
    message: str | None = None,
    *,
    backups: list[SnapshotInfo] | None = None,
    extra: dict[str, Any] | None = None,
) -> BackupToolResponse:
    structured: dict[str, Any] = {
        "backups": [b.model_dump(mode="json") for b in (backups if backups is not None else [])]
    }
    if extra:
        structured.update(extra)
    return {
        "content": ([{"type": "text", "text": message}] if message else []),
        "structuredContent": structured,
    }


def _error_reply(e: PersistenceError) -> BackupToolResponse:
    logger.info("MCP BACKUP TOOL: %s: %s", e.kind, e.message)
    return _reply(f"{e.kind}: {e.message}", extra={"error": e.to_payload()})


async def _backups_for(data_file: Path) -> list[SnapshotInfo]:
    return await HOUSEHOLD_REPO.list_backups(snapshot_dir(data_file), snapshot_stem(data_file))


mcp = FastMCP(
    "Household Review Backups",
    stateless_http=True,
    json_response=True,
    # FastMCP auto-enables DNS rebinding protection when it thinks it's running on
    # localhost, which rejects tunnelled Host headers with a 421.
    transport_security=TransportSecuritySettings(enable_dns_rebinding_protection=False),
)


@mcp.tool()
async def create_backup(path: str | None = None, ctx: Context | None = None) -> BackupToolResponse:
    """
    Takes a timestamped snapshot of the household data file (defaults to the configured file).
    """
    data_file = _data_path(path)
    try:
        doc = await HOUSEHOLD_REPO.load_document(data_file)
        snapshot = await HOUSEHOLD_REPO.create_backup(data_file, doc)
    except PersistenceError as e:
        return _error_reply(e)
    return _reply(
        f"Created backup {snapshot.name} ({len(doc.households)} households).",
        backups=await _backups_for(data_file),
        extra={"created": str(snapshot)},
    )


@mcp.tool()
async def list_backups(path: str | None = None, ctx: Context | None = None) -> BackupToolResponse:
    """
    Lists the snapshots of a data file, newest first.
    """
    data_file = _data_path(path)
    backups = await _backups_for(data_file)
    if not backups:
        return _reply(f"No backups found for {data_file.name}.")
    return _reply(f"{len(backups)} backup(s) for {data_file.name}:", backups=backups)


@mcp.tool()
async def prune_backups(
    keep_count: int | str | None = None,
    path: str | None = None,
    ctx: Context | None = None,
) -> BackupToolResponse:
    """
    Deletes all but the newest `keep_count` snapshots of a data file.
    """
    if keep_count is None:
        keep = SETTINGS.default_backup_count
    else:
        parsed = _parse_int_nonneg(keep_count)
        if parsed is None:
            return _reply("Invalid input: `keep_count` must be an integer >= 0.")
        keep = parsed
    data_file = _data_path(path)
    result = await HOUSEHOLD_REPO.prune_backups(snapshot_dir(data_file), snapshot_stem(data_file), keep)
    skipped = f" {result.skipped} could not be deleted." if result.skipped else ""
    return _reply(
        f"Kept {result.kept} backup(s), deleted {result.deleted}.{skipped}",
        backups=await _backups_for(data_file),
        extra={"pruned": result.model_dump()},
    )


@mcp.tool()
async def restore_backup(backup_path: str, path: str | None = None, ctx: Context | None = None) -> BackupToolResponse:
    """
    Overwrites the data file with the contents of a snapshot.
    """
    if not isinstance(backup_path, str) or not backup_path.strip():
        return _reply("Missing backup path.")
    data_file = _data_path(path)
    try:
        await HOUSEHOLD_REPO.restore_backup(Path(backup_path.strip()), data_file)
    except PersistenceError as e:
        return _error_reply(e)
    return _reply(
        f"Restored {Path(backup_path.strip()).name} onto {data_file.name}.",
        backups=await _backups_for(data_file),
        extra={"restored": str(data_file)},
    )


@mcp.tool()
async def delete_backup(backup_path: str, ctx: Context | None = None) -> BackupToolResponse:
    """
    Deletes one snapshot file.
    """
    if not isinstance(backup_path, str) or not backup_path.strip():
        return _reply("Missing backup path.")
    target = Path(backup_path.strip())
    try:
        await HOUSEHOLD_REPO.delete_backup(target)
    except PersistenceError as e:
        return _error_reply(e)
    return _reply(f"Deleted backup {target.name}.", extra={"deleted": str(target)})
