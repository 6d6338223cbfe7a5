"""Rendering for the todo list widget."""

from __future__ import annotations

from aura.domain.models import Region
from aura.repos.memory import RegionRepository

REGION_ID = "todo-list"


class TodoListView:
    def __init__(self, regions: RegionRepository, channel: str) -> None:
        self.regions = regions
        self.channel = channel

    def render(self, items: list | None = None) -> Region:
        """Replace the region's content with one line per item."""
        return self.regions.attach(
            Region(
                id=REGION_ID,
                channel=self.channel,
                content=[str(item) for item in items or []],
            )
        )
