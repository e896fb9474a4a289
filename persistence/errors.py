from __future__ import annotations

from pathlib import Path


class PersistenceError(Exception):
    """
    Base class for every failure surfaced by the persistence layer.

    `kind` is the stable name collaborators switch on (it is also what the HTTP
    and MCP surfaces report back).
    """

    kind = "PersistenceError"

    def __init__(self, message: str, *, path: Path | str | None = None):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None

    def to_payload(self) -> dict[str, str]:
        payload = {"kind": self.kind, "message": self.message}
        if self.path is not None:
            payload["path"] = self.path
        return payload


class FormatError(PersistenceError):
    kind = "FormatError"


class ParseError(PersistenceError):
    kind = "ParseError"


class SerializeError(PersistenceError):
    kind = "SerializeError"


class IoError(PersistenceError):
    kind = "IoError"


class NotFoundError(PersistenceError):
    kind = "NotFoundError"


class InvalidPathError(PersistenceError):
    kind = "InvalidPathError"
