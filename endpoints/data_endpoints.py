# data_endpoints.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from persistence.errors import (
    FormatError,
    InvalidPathError,
    NotFoundError,
    ParseError,
    PersistenceError,
)
from persistence.household_state import HouseholdDataDoc, RawText
from persistence.repositories import AsyncDiskHouseholdRepository, DiskHouseholdRepository
from settings import get_settings
from system_info import get_app_version, get_system_info

router = APIRouter(prefix="/api", tags=["data"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()

HOUSEHOLD_REPO = AsyncDiskHouseholdRepository(
    DiskHouseholdRepository(auto_backup_on_save=SETTINGS.auto_backup_on_save)
)


class PathBody(BaseModel):
    path: str


class LoadBody(BaseModel):
    path: str | None = None


class SaveBody(BaseModel):
    path: str | None = None
    # A string is written verbatim (CSV export); an object is the data document.
    data: HouseholdDataDoc | str
    auto_backup: bool = False


class BackupBody(BaseModel):
    path: str | None = None
    data: HouseholdDataDoc


class PruneBody(BaseModel):
    directory: str
    stem: str
    keep_count: int | None = Field(default=None, ge=0)


class RestoreBody(BaseModel):
    backup_path: str
    target_path: str


def _status_for(e: PersistenceError) -> int:
    if isinstance(e, NotFoundError):
        return 404
    if isinstance(e, InvalidPathError):
        return 400
    if isinstance(e, (FormatError, ParseError)):
        return 422
    return 500


def _http_error(e: PersistenceError) -> HTTPException:
    status = _status_for(e)
    if status >= 500:
        logger.warning("DATA API: %s failed: %r", e.kind, e)
    return HTTPException(status_code=status, detail=e.to_payload())


def _data_path(raw: str | None) -> Path:
    return Path(raw) if raw else SETTINGS.data_file


# -------------------------------------------------------------------
# DOCUMENT
# -------------------------------------------------------------------
@router.post("/data/load")
async def load_data_file(body: LoadBody) -> dict[str, Any]:
    try:
        doc = await HOUSEHOLD_REPO.load_document(_data_path(body.path))
    except PersistenceError as e:
        raise _http_error(e) from e
    return doc.to_disk_doc()


@router.post("/data/save")
async def save_data_file(body: SaveBody) -> dict[str, Any]:
    path = _data_path(body.path)
    try:
        if isinstance(body.data, str):
            await HOUSEHOLD_REPO.save_document(path, RawText(body.data))
            return {"path": str(path)}
        if body.auto_backup:
            outcome = await HOUSEHOLD_REPO.save_document_with_backup(path, body.data)
            return outcome.model_dump(mode="json")
        await HOUSEHOLD_REPO.save_document(path, body.data)
    except PersistenceError as e:
        raise _http_error(e) from e
    return {"path": str(path)}


# -------------------------------------------------------------------
# BACKUPS
# -------------------------------------------------------------------
@router.post("/backups")
async def create_backup(body: BackupBody) -> dict[str, str]:
    try:
        snapshot = await HOUSEHOLD_REPO.create_backup(_data_path(body.path), body.data)
    except PersistenceError as e:
        raise _http_error(e) from e
    return {"path": str(snapshot)}


@router.get("/backups")
async def list_backups(directory: str = Query(...), stem: str = Query(...)) -> list[dict[str, Any]]:
    snapshots = await HOUSEHOLD_REPO.list_backups(Path(directory), stem)
    return [s.model_dump(mode="json") for s in snapshots]


@router.post("/backups/prune")
async def prune_backups(body: PruneBody) -> dict[str, int]:
    keep = SETTINGS.default_backup_count if body.keep_count is None else body.keep_count
    result = await HOUSEHOLD_REPO.prune_backups(Path(body.directory), body.stem, keep)
    return result.model_dump()


@router.post("/backups/restore")
async def restore_backup(body: RestoreBody) -> dict[str, str]:
    try:
        await HOUSEHOLD_REPO.restore_backup(Path(body.backup_path), Path(body.target_path))
    except PersistenceError as e:
        raise _http_error(e) from e
    return {"path": body.target_path}


@router.delete("/backups")
async def delete_backup(backup_path: str = Query(...)) -> dict[str, str]:
    try:
        await HOUSEHOLD_REPO.delete_backup(Path(backup_path))
    except PersistenceError as e:
        raise _http_error(e) from e
    return {"deleted": backup_path}


# -------------------------------------------------------------------
# PATHS
# -------------------------------------------------------------------
@router.post("/paths/validate")
async def validate_file_path(body: PathBody) -> dict[str, bool]:
    try:
        exists = await HOUSEHOLD_REPO.validate_path(body.path)
    except PersistenceError as e:
        raise _http_error(e) from e
    return {"exists": exists}


@router.get("/paths/info")
async def get_file_info(path: str = Query(...)) -> dict[str, Any]:
    try:
        info = await HOUSEHOLD_REPO.file_info(path)
    except PersistenceError as e:
        raise _http_error(e) from e
    return info.model_dump(mode="json")


@router.post("/paths/mkdir")
async def create_directory(body: PathBody) -> dict[str, str]:
    try:
        await HOUSEHOLD_REPO.create_directory(body.path)
    except PersistenceError as e:
        raise _http_error(e) from e
    return {"path": body.path}


# -------------------------------------------------------------------
# SYSTEM
# -------------------------------------------------------------------
@router.get("/system/info")
async def system_info() -> dict[str, str]:
    return get_system_info().model_dump()


@router.get("/system/version")
async def app_version() -> dict[str, str]:
    return {"version": get_app_version()}
