from __future__ import annotations

import importlib
import os
from datetime import datetime, timezone
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


from persistence.household_state import (  # noqa: E402
    AppSettingsRecord,
    HouseholdDataDoc,
    HouseholdRecord,
    PersonRecord,
)


def make_household(household_id: int = 1, **overrides) -> HouseholdRecord:
    fields = {
        "id": household_id,
        "household_name": f"Household {household_id}",
        "persons": [PersonRecord(name="Ada Lovelace", dob="1815-12-10")],
        "next_review_due": "2024-06-01",
        "review_type": "Periodic",
        "auc": 1250000.5,
        "segment": "Green",
        "last_review_date": None,
        "review_status": "Scheduled",
        "priority_flag": "Standard",
        "assigned_month": "June",
        "created": "2024-01-01T09:00:00Z",
        "updated": "2024-01-02T09:00:00Z",
    }
    fields.update(overrides)
    return HouseholdRecord(**fields)


def make_document(*household_ids: int, **settings) -> HouseholdDataDoc:
    return HouseholdDataDoc(
        households=[make_household(i) for i in household_ids],
        settings=AppSettingsRecord(**settings),
    )


def stamp_mtime(path: Path, when: datetime) -> None:
    ts = when.replace(tzinfo=timezone.utc).timestamp() if when.tzinfo is None else when.timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture
def household_doc() -> HouseholdDataDoc:
    return make_document(1, 2)


@pytest.fixture
def sandbox_project(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """
    Redirect persistence paths to a temp project directory so tests never touch real ./data.
    """
    import persistence.paths as paths

    def _project_root() -> Path:
        return tmp_path

    def _data_dir() -> Path:
        p = tmp_path / "data"
        p.mkdir(parents=True, exist_ok=True)
        return p

    monkeypatch.setattr(paths, "project_root", _project_root)
    monkeypatch.setattr(paths, "data_dir", _data_dir)
    _data_dir()
    monkeypatch.setenv("HOUSEHOLD_DATA_FILE", str(tmp_path / "data" / "households.json"))
    monkeypatch.setenv("DEFAULT_BACKUP_COUNT", "3")
    return tmp_path


@pytest.fixture
def reload_endpoints(sandbox_project: Path) -> Path:
    """
    Endpoints read settings and create repo singletons at import time; reload after sandboxing paths.
    """
    import endpoints.data_endpoints as data_endpoints
    import endpoints.mcp_endpoints as mcp_endpoints

    importlib.reload(data_endpoints)
    importlib.reload(mcp_endpoints)
    return sandbox_project
