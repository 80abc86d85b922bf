"""Tests for the REST API: level catalog and script runs."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient

from dungeon_script.api.app import create_app
from dungeon_script.core.levels import get_level


@pytest.fixture
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


def _inline_level() -> dict:
    return {
        "name": "Corridor",
        "width": 4,
        "height": 1,
        "character": {"position": {"x": 0, "y": 0}},
        "exit": {"x": 3, "y": 0},
        "collectibles": [
            {"id": "gem1", "type": "gem", "position": {"x": 2, "y": 0}, "value": 5},
        ],
    }


class TestLevels:
    def test_list_levels(self, client):
        resp = client.get("/api/v1/levels")
        assert resp.status_code == 200
        levels = resp.json()
        assert [lvl["id"] for lvl in levels] == [1, 2, 3, 101, 102]
        assert levels[3]["rules"] == "gauntlet"

    def test_get_level(self, client):
        resp = client.get("/api/v1/levels/1")
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "First Steps"
        assert data["exit"] == {"x": 7, "y": 5}
        assert data["starter_code"] == get_level(1).starter_code

    def test_unknown_level(self, client):
        assert client.get("/api/v1/levels/999").status_code == 404


class TestRuns:
    def test_catalog_solution_completes(self, client):
        resp = client.post("/api/v1/runs", json={"level_id": 1, "script": get_level(1).solution})
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "completed"
        assert data["is_complete"] is True
        assert data["final_state"]["character"]["position"] == {"x": 7, "y": 5}
        assert data["frames"][-1]["current_line"] == -1
        assert len(data["frames"]) == 2 * len(data["code_lines"]) + 1

    def test_inline_level(self, client):
        resp = client.post("/api/v1/runs", json={
            "level": _inline_level(),
            "script": "hero.moveRight(3)",
            "include_frames": False,
        })
        assert resp.status_code == 200
        data = resp.json()
        assert data["is_complete"] is True
        assert data["final_state"]["score"] == 5
        assert data["frames"] == []

    def test_failed_script_reports_error(self, client):
        resp = client.post("/api/v1/runs", json={"level_id": 1, "script": "hero.teleport()"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "failed"
        assert data["game_over"] is True
        assert any("Error: Failed to execute" in entry for entry in data["logs"])

    def test_unknown_level_id(self, client):
        resp = client.post("/api/v1/runs", json={"level_id": 999, "script": "hero.moveRight()"})
        assert resp.status_code == 404

    def test_requires_exactly_one_level_source(self, client):
        both = client.post("/api/v1/runs", json={
            "level_id": 1, "level": _inline_level(), "script": "hero.moveRight()",
        })
        neither = client.post("/api/v1/runs", json={"script": "hero.moveRight()"})
        assert both.status_code == 422
        assert neither.status_code == 422

    def test_inline_level_outside_grid(self, client):
        level = _inline_level()
        level["exit"] = {"x": 9, "y": 0}
        resp = client.post("/api/v1/runs", json={"level": level, "script": "hero.moveRight()"})
        assert resp.status_code == 422

    def test_runs_are_independent(self, client):
        first = client.post("/api/v1/runs", json={"level_id": 1, "script": "hero.moveRight()"}).json()
        second = client.post("/api/v1/runs", json={"level_id": 1, "script": "hero.moveRight()"}).json()
        assert first["final_state"]["moves"] == second["final_state"]["moves"] == 1
