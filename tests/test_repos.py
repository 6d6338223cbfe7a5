"""Tests for the in-memory repositories."""

from __future__ import annotations

from aura.domain.models import LoadedUnit, LoadState, Region
from aura.repos.memory import LoadedUnitRepository, RegionRepository


def test_loaded_units_are_replaced_by_id():
    repo = LoadedUnitRepository()
    repo.add(LoadedUnit(id="widgets/todo_list/main", module_name="aura.widgets.todo_list.main"))
    repo.add(
        LoadedUnit(
            id="widgets/todo_list/main",
            module_name="aura.widgets.todo_list.main",
            state=LoadState.READY,
        )
    )

    assert repo.list_ids() == ["widgets/todo_list/main"]
    assert repo.get("widgets/todo_list/main").state == LoadState.READY


def test_remove_returns_the_record_once():
    repo = LoadedUnitRepository()
    repo.add(LoadedUnit(id="widgets/calendar/main", module_name="aura.widgets.calendar.main"))

    assert repo.remove("widgets/calendar/main").id == "widgets/calendar/main"
    assert repo.remove("widgets/calendar/main") is None
    assert repo.list_all() == []


def test_detach_accepts_id_region_or_nothing():
    repo = RegionRepository()
    todo = repo.attach(Region(id="todo-region", channel="todoList"))
    repo.attach(Region(id="calendar-region", channel="calendar"))

    repo.detach(None)
    repo.detach(todo)
    repo.detach("calendar-region")
    repo.detach("never-attached")

    assert repo.list_all() == []
