"""Domain models for channels, units and screen regions."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from aura.services.strings import decamelize

DEFAULT_NAMESPACE = "widgets"


class LoadState(StrEnum):
    LOADING = "loading"
    READY = "ready"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class UnitId(BaseModel):
    """Identifier of a lazily loaded unit: ``<namespace>/<name>``."""

    model_config = ConfigDict(frozen=True)

    namespace: str = DEFAULT_NAMESPACE
    name: str

    @classmethod
    def for_channel(
        cls,
        channel: str,
        namespace: str = DEFAULT_NAMESPACE,
        delimiter: str = "_",
    ) -> UnitId:
        return cls(namespace=namespace, name=decamelize(channel, delimiter))

    @property
    def path(self) -> str:
        return f"{self.namespace}/{self.name}"

    @property
    def main(self) -> str:
        """Id of the unit's entry module."""
        return f"{self.path}/main"


def sweeps(prefix: str, unit_id: str) -> bool:
    """Return True if an unload of *prefix* forgets *unit_id*.

    Matching is plain substring containment, not path-prefix matching:
    ``widgets/todo_list`` also sweeps ``widgets/todo_list_archive/main``.
    Units are expected to keep everything they own under their own path.
    """
    return prefix in unit_id


class LoadedUnit(BaseModel):
    id: str
    module_name: str
    location: str | None = None
    state: LoadState = LoadState.LOADING
    loaded_at: datetime = Field(default_factory=_utcnow)


class Region(BaseModel):
    """A screen region a unit draws into."""

    id: str = Field(default_factory=_new_id)
    channel: str | None = None
    content: list[str] = Field(default_factory=list)
    attached_at: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class PublishRequest(BaseModel):
    args: list[Any] = Field(default_factory=list)


class PublishResponse(BaseModel):
    channel: str
    cold_start: bool
    subscribers: int


class StopRequest(BaseModel):
    element: str | None = None


class UnloadRequest(BaseModel):
    prefix: str = Field(min_length=1)


class UnloadResponse(BaseModel):
    unloaded: list[str]


class ChannelInfo(BaseModel):
    name: str
    subscribers: int
