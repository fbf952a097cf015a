# caisse/errors.py
from __future__ import annotations


class PosError(Exception):
    """Base for every error surfaced to callers of the command surface."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class LockFailure(PosError):
    kind = "lock_failure"


class QueryFailure(PosError):
    kind = "query_failure"


class RowMappingFailure(PosError):
    kind = "row_mapping_failure"


class NotFound(PosError):
    kind = "not_found"


class Conflict(PosError):
    kind = "conflict"


class ValidationFailure(PosError):
    kind = "validation_failure"
