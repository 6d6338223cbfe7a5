"""Errors raised while resolving units."""

from __future__ import annotations

from enum import StrEnum


class LoadErrorKind(StrEnum):
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    INIT_FAILED = "init_failed"


class LoadError(Exception):
    """A unit could not be resolved.

    ``unit_ids`` lists the ids the failed request was for; the first entry is
    the one that failed.
    """

    def __init__(self, kind: LoadErrorKind, unit_ids: list[str], message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.unit_ids = list(unit_ids)

    @property
    def failed_id(self) -> str | None:
        return self.unit_ids[0] if self.unit_ids else None
