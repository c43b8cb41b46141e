import random

from fastapi.testclient import TestClient

from tile2048.board import Board
from tile2048.config import GameConfig
from tile2048.controller import GameController
from tile2048.storage import MemoryStore
from tile2048.web_ui import create_app

NO_MOVES = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]]
EMPTY_ROWS = [[0, 0, 0, 0]] * 3


def make_client():
    controller = GameController(GameConfig(), MemoryStore(), random.Random(0))
    return TestClient(create_app(controller)), controller


class TestWebUI:
    """웹 API 테스트"""

    def test_index(self):
        client, _ = make_client()
        res = client.get("/")
        assert res.status_code == 200
        assert "2048" in res.text

    def test_state(self):
        client, controller = make_client()
        data = client.get("/state").json()
        assert data["board"] == controller.session.board.to_list()
        assert data["score"] == 0

    def test_move_and_undo(self):
        client, controller = make_client()
        controller.session.board = Board.from_values([[2, 2, 0, 0]] + EMPTY_ROWS)

        data = client.post("/move", json={"direction": "left"}).json()
        assert data["score"] == 4
        assert data["can_undo"]
        assert data["merged_ids"]

        data = client.post("/undo").json()
        assert data["board"] == [[2, 2, 0, 0]] + EMPTY_ROWS
        assert data["score"] == 0

    def test_invalid_direction_ignored(self):
        client, controller = make_client()
        before = controller.session.board.to_list()
        res = client.post("/move", json={"direction": "nowhere"})
        assert res.status_code == 200
        assert res.json()["board"] == before

    def test_new_game(self):
        client, controller = make_client()
        controller.session.score = 100
        data = client.post("/new").json()
        assert data["score"] == 0
        assert len(data["tiles"]) in (2, 3)

    def test_leaderboard_flow(self):
        client, controller = make_client()
        controller.session.board = Board.from_values(NO_MOVES)
        controller.session.score = 32
        controller.session.game_over = True

        assert client.post("/leaders", json={"name": "   "}).status_code == 400
        assert client.get("/leaders").json() == []

        data = client.post("/leaders", json={"name": "ann"}).json()
        assert data["score_saved"]
        assert client.post("/leaders", json={"name": "ann"}).status_code == 409

        leaders = client.get("/leaders").json()
        assert [(e["name"], e["score"]) for e in leaders] == [("ann", 32)]

        client.delete("/leaders")
        assert client.get("/leaders").json() == []

    def test_submit_during_game_conflict(self):
        client, _ = make_client()
        assert client.post("/leaders", json={"name": "ann"}).status_code == 409
