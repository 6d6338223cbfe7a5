"""API tests for the mediator surface, driven by the bundled widgets."""

from __future__ import annotations

import sys

import pytest
from fastapi.testclient import TestClient

from aura.main import app, loader, mediator, region_repo


def _reset():
    mediator.bus._channels.clear()
    for unit_id in loader.list_resolved_ids():
        loader.forget(unit_id)
    region_repo._store.clear()
    for name in [n for n in sys.modules if n.startswith("aura.widgets")]:
        del sys.modules[name]


@pytest.fixture()
def client():
    _reset()
    yield TestClient(app)
    _reset()


def _publish(client: TestClient, channel: str, *args):
    return client.post(f"/channels/{channel}/publish", json={"args": list(args)})


def test_cold_start_renders_widget(client: TestClient):
    resp = _publish(client, "todoList", ["milk", "eggs"])

    assert resp.status_code == 200
    assert resp.json() == {"channel": "todoList", "cold_start": True, "subscribers": 1}

    regions = client.get("/regions").json()
    assert [(r["id"], r["content"]) for r in regions] == [("todo-list", ["milk", "eggs"])]

    unit_ids = {u["id"] for u in client.get("/units").json()}
    assert {"widgets/todo_list/main", "widgets/todo_list/views"} <= unit_ids


def test_second_publish_is_warm(client: TestClient):
    _publish(client, "todoList", ["milk"])
    resp = _publish(client, "todoList", ["bread"])

    assert resp.json()["cold_start"] is False
    assert client.get("/regions").json()[0]["content"] == ["bread"]
    assert client.get("/channels").json() == [{"name": "todoList", "subscribers": 1}]


def test_stop_unloads_namespace_and_region(client: TestClient):
    _publish(client, "todoList", ["milk"])
    _publish(client, "todoListArchive", ["old"])

    resp = client.post("/channels/todoList/stop", json={"element": "todo-list"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "stopped"
    assert {
        "widgets/todo_list/main",
        "widgets/todo_list/views",
        "widgets/todo_list_archive/main",
    } <= set(body["unloaded"])

    remaining = {u["id"] for u in client.get("/units").json()}
    assert not [unit_id for unit_id in remaining if "widgets/todo_list" in unit_id]
    assert [r["id"] for r in client.get("/regions").json()] == ["todo-list-archive"]


def test_unload_endpoint(client: TestClient):
    _publish(client, "todoListArchive", [])

    resp = client.post("/units/unload", json={"prefix": "todo_list_archive"})

    assert resp.status_code == 200
    assert "widgets/todo_list_archive/main" in resp.json()["unloaded"]


def test_unload_requires_prefix(client: TestClient):
    resp = client.post("/units/unload", json={"prefix": ""})
    assert resp.status_code == 422


def test_publish_to_missing_unit_returns_404(client: TestClient):
    resp = _publish(client, "nowhereToBeFound")

    assert resp.status_code == 404
    assert "widgets/nowhere_to_be_found/main" in resp.json()["detail"]
    assert client.get("/units").json() == []
