"""
Tests for the Flask API in app.py.
"""

import os
import random
import sys
from unittest.mock import MagicMock

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import app as app_module
from main import SnakeGame
from services.game_loop import GameLoop


@pytest.fixture
def loop(monkeypatch):
    # Timers never fire on their own; ticks are driven by the test
    game_loop = GameLoop(SnakeGame(rng=random.Random(3)), timer_factory=MagicMock())
    monkeypatch.setattr(app_module, "game_loop", game_loop)
    return game_loop


@pytest.fixture
def client(loop):
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as client:
        yield client


def fake_renderer():
    """Renderer mock that writes a stub MP4 to the path it is given."""
    def write_video(history, output_path=None):
        with open(output_path, "wb") as f:
            f.write(b"fake-mp4")
        return output_path

    renderer = MagicMock()
    renderer.generate_video.side_effect = write_video
    return renderer


class TestGameEndpoints:
    """Tests for /api/game routes."""

    def test_get_game_before_start(self, client):
        response = client.get("/api/game")
        data = response.get_json()

        assert response.status_code == 200
        assert data["status"] == "IDLE"
        assert data["is_over"] is True
        assert data["board_size"] == 15
        assert len(data["cells"]) == 225
        assert data["cells"][80] == "snake"
        assert data["cells"][85] == "food"

    def test_start_game(self, client, loop):
        response = client.post("/api/game/start")
        data = response.get_json()

        assert response.status_code == 200
        assert data["status"] == "RUNNING"
        assert data["score"] == 0
        assert data["speed"] == 500
        assert data["snake"] == [[5, 5]]
        assert loop.running is True

    def test_start_while_running_conflicts(self, client, loop):
        client.post("/api/game/start")
        loop._fire(loop._generation)
        response = client.post("/api/game/start")

        assert response.status_code == 409
        assert response.get_json() == {"error": "Game is already running"}
        assert loop.game.tick_count == 1

    def test_restart_after_game_over(self, client, loop):
        client.post("/api/game/start")
        loop.on_key("ArrowUp")
        for _ in range(6):
            loop._fire(loop._generation)

        assert client.get("/api/game").get_json()["is_over"] is True
        assert loop.running is False

        response = client.post("/api/game/start")
        assert response.status_code == 200
        assert response.get_json()["snake"] == [[5, 5]]

    def test_key_accepted(self, client, loop):
        client.post("/api/game/start")
        response = client.post("/api/game/key", json={"key": "ArrowDown"})

        assert response.status_code == 200
        assert response.get_json() == {"key": "ArrowDown", "accepted": True}
        assert loop.game.pending_direction == "DOWN"

    def test_unknown_key_ignored(self, client, loop):
        response = client.post("/api/game/key", json={"key": "Space"})

        assert response.status_code == 200
        assert response.get_json()["accepted"] is False
        assert loop.game.pending_direction is None

    def test_missing_key_is_bad_request(self, client):
        response = client.post("/api/game/key", json={})
        assert response.status_code == 400

    def test_frame_png(self, client):
        response = client.get("/api/game/frame.png")

        assert response.status_code == 200
        assert response.mimetype == "image/png"
        assert response.data.startswith(b"\x89PNG")

    def test_video_without_session(self, client):
        response = client.get("/api/game/video")
        assert response.status_code == 404

    def test_video_of_session(self, client, monkeypatch):
        renderer = fake_renderer()
        monkeypatch.setattr(app_module, "renderer", renderer)

        client.post("/api/game/start")
        response = client.get("/api/game/video")

        assert response.status_code == 200
        assert response.mimetype == "video/mp4"
        assert response.data == b"fake-mp4"
        history = renderer.generate_video.call_args[0][0]
        assert len(history) == 1

        response.close()
        output_path = renderer.generate_video.call_args[1]["output_path"]
        assert not os.path.exists(output_path)

    def test_each_video_request_gets_its_own_file(self, client, monkeypatch):
        renderer = fake_renderer()
        monkeypatch.setattr(app_module, "renderer", renderer)

        client.post("/api/game/start")
        first = client.get("/api/game/video")
        second = client.get("/api/game/video")
        first.close()
        second.close()

        paths = [call[1]["output_path"] for call in renderer.generate_video.call_args_list]
        assert len(paths) == 2
        assert paths[0] != paths[1]
        assert all(path.endswith(".mp4") for path in paths)

    def test_failed_video_leaves_no_file_behind(self, client, monkeypatch):
        renderer = MagicMock()
        renderer.generate_video.side_effect = RuntimeError("ffmpeg not found")
        monkeypatch.setattr(app_module, "renderer", renderer)

        client.post("/api/game/start")
        response = client.get("/api/game/video")

        assert response.status_code == 500
        output_path = renderer.generate_video.call_args[1]["output_path"]
        assert not os.path.exists(output_path)
