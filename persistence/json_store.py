from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .errors import FormatError, IoError, ParseError, SerializeError
from .household_state import HouseholdDataDoc, RawText, SavePayload, default_document

logger = logging.getLogger(__name__)

JSON_OBJECT_MARKER = "{"


def encode_document(doc: HouseholdDataDoc, *, indent: int = 2) -> str:
    """
    Serialize a document as pretty-printed JSON, fully in memory.

    Field order follows the model declaration, not alphabetical order.
    """
    try:
        return json.dumps(doc.to_disk_doc(), indent=indent, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializeError(f"Failed to serialize data: {e}") from e


def decode_document(raw: str) -> HouseholdDataDoc:
    if not raw.startswith(JSON_OBJECT_MARKER):
        raise FormatError("File is not a recognized data file")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse JSON: {e}") from e
    try:
        return HouseholdDataDoc.from_disk_doc(payload)
    except ValidationError as e:
        raise ParseError(f"Failed to parse JSON: {e}") from e


def render_payload(payload: SavePayload) -> str:
    if isinstance(payload, RawText):
        return payload.text
    return encode_document(payload)


def read_document(path: Path) -> HouseholdDataDoc:
    """
    Read and decode the data file at `path`.

    A missing file is a new, empty document. A file that exists but cannot be
    decoded is an error; it is never replaced with the default.
    """
    if not path.exists():
        logger.debug("DATA LOAD: %s does not exist, using default document", path)
        return default_document()
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise IoError(f"Failed to read file: {e}", path=path) from e
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError("File is not a recognized data file", path=path) from e
    try:
        return decode_document(text)
    except (FormatError, ParseError) as e:
        e.path = str(path)
        raise


def write_text(path: Path, text: str) -> None:
    """
    Overwrite `path` with the UTF-8 bytes of `text`.

    No temp-file/rename step: a failed write may leave the target truncated.
    """
    try:
        path.write_bytes(text.encode("utf-8"))
    except OSError as e:
        raise IoError(f"Failed to write file: {e}", path=path) from e


def write_payload(path: Path, payload: SavePayload) -> None:
    write_text(path, render_payload(payload))
