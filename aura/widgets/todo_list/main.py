"""Todo list widget, started by the first publish to ``todoList``."""

from __future__ import annotations

from aura.widgets.todo_list.views import TodoListView

CHANNEL = "todoList"


def setup(mediator) -> None:
    view = TodoListView(mediator.regions, CHANNEL)
    mediator.subscribe(CHANNEL, view.render)
