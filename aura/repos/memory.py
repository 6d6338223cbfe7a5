"""In-memory repositories for loaded units and screen regions."""

from __future__ import annotations

from aura.domain.models import LoadedUnit, Region


class LoadedUnitRepository:
    """Dict-backed store for LoadedUnit records, keyed by unit id."""

    def __init__(self) -> None:
        self._store: dict[str, LoadedUnit] = {}

    def add(self, unit: LoadedUnit) -> None:
        self._store[unit.id] = unit

    def get(self, unit_id: str) -> LoadedUnit | None:
        return self._store.get(unit_id)

    def list_ids(self) -> list[str]:
        return list(self._store)

    def list_all(self) -> list[LoadedUnit]:
        return list(self._store.values())

    def remove(self, unit_id: str) -> LoadedUnit | None:
        return self._store.pop(unit_id, None)


class RegionRepository:
    """Dict-backed store for the regions currently on screen."""

    def __init__(self) -> None:
        self._store: dict[str, Region] = {}

    def attach(self, region: Region) -> Region:
        self._store[region.id] = region
        return region

    def get(self, region_id: str) -> Region | None:
        return self._store.get(region_id)

    def list_all(self) -> list[Region]:
        return list(self._store.values())

    def detach(self, element: str | Region | None) -> None:
        """Remove a region by id or instance; unknown regions are ignored."""
        if element is None:
            return
        region_id = element.id if isinstance(element, Region) else element
        self._store.pop(region_id, None)
