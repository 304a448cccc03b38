"""Error taxonomy for the route registry.

Load-time failures are recovered locally and only ever logged with one of
these codes. Query-time and lifecycle failures are raised as
``RegistryError`` (or a subclass) and mapped to a response by the caller.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    MISSING_ROOT = "MISSING_ROOT"
    MALFORMED_VERSION_ENTRY = "MALFORMED_VERSION_ENTRY"
    FILE_READ_FAILURE = "FILE_READ_FAILURE"
    PARSE_FAILURE = "PARSE_FAILURE"
    VERSION_CONFLICT = "VERSION_CONFLICT"
    LOOKUP_MISS = "LOOKUP_MISS"
    MALFORMED_QUERY = "MALFORMED_QUERY"
    DRAFT_NOT_FOUND = "DRAFT_NOT_FOUND"
    DRAFT_EXISTS = "DRAFT_EXISTS"
    NO_FREE_VERSION = "NO_FREE_VERSION"


class RegistryError(Exception):
    """Base error carrying a machine-readable code."""

    code: ErrorCode = ErrorCode.LOOKUP_MISS
    recoverable: bool = False

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        recoverable: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if recoverable is not None:
            self.recoverable = recoverable

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "recoverable": self.recoverable,
            }
        }


class MalformedQuery(RegistryError):
    code = ErrorCode.MALFORMED_QUERY


class LookupMiss(RegistryError):
    code = ErrorCode.LOOKUP_MISS


class VersionConflict(RegistryError):
    code = ErrorCode.VERSION_CONFLICT


class DraftNotFound(RegistryError):
    code = ErrorCode.DRAFT_NOT_FOUND


class DraftExists(RegistryError):
    code = ErrorCode.DRAFT_EXISTS
    recoverable = True


class NoFreeVersion(RegistryError):
    code = ErrorCode.NO_FREE_VERSION
