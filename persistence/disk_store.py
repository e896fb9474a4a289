from __future__ import annotations

from pathlib import Path

from .household_state import HouseholdDataDoc, SavePayload
from .interfaces import DocumentStore
from .json_store import read_document, write_payload


class DiskHouseholdDocumentStore(DocumentStore):
    """
    Stores the household data document on disk at a fixed path.

    - Missing file loads as the default (empty) document.
    - Malformed files raise instead of being silently replaced.
    - Saves overwrite the whole file.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> HouseholdDataDoc:
        return read_document(self._path)

    def save(self, payload: SavePayload) -> None:
        write_payload(self._path, payload)
