"""Archived todos, started by the first publish to ``todoListArchive``."""

from __future__ import annotations

from aura.domain.models import Region

CHANNEL = "todoListArchive"
REGION_ID = "todo-list-archive"


def setup(mediator) -> None:
    def archive(items: list | None = None) -> None:
        mediator.regions.attach(
            Region(
                id=REGION_ID,
                channel=CHANNEL,
                content=[str(item) for item in items or []],
            )
        )

    mediator.subscribe(CHANNEL, archive)
