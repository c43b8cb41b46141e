import random

import numpy as np

from tile2048.board import Board
from tile2048.config import GameConfig
from tile2048.session import GameSession

EMPTY_ROWS = [[0, 0, 0, 0]] * 3
NO_MOVES = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]]


def make_session(values=None, seed=0, **config):
    session = GameSession(GameConfig(**config), random.Random(seed))
    if values is None:
        session.new_game()
    else:
        session.board = Board.from_values(values)
    return session


class TestNewGame:
    def test_new_game_spawns_two_or_three(self):
        for seed in range(30):
            session = make_session(seed=seed)
            tiles = session.board.tiles()
            assert len(tiles) in (2, 3)
            assert all(t.value in (2, 4) for t in tiles)
            assert len({(t.row, t.col) for t in tiles}) == len(tiles)
            assert session.score == 0
            assert not session.game_over
            assert not session.can_undo

    def test_new_game_keeps_best(self):
        session = make_session([[2, 2, 0, 0]] + EMPTY_ROWS)
        session.apply_move("left")
        assert session.best == 4

        session.new_game()

        assert session.score == 0
        assert session.best == 4
        assert session.prev is None


class TestApplyMove:
    """apply_move() 테스트"""

    def test_scenario_merge_left(self):
        session = make_session([[2, 2, 0, 0]] + EMPTY_ROWS)

        outcome = session.apply_move("left")

        assert outcome.moved
        assert outcome.score_gained == 4
        assert session.score == 4
        assert session.board.values[0, 0] == 4
        # 4 하나 + 새 타일 1~2개
        assert np.count_nonzero(session.get_state()) in (2, 3)
        assert len(outcome.new_ids) in (1, 2)
        assert session.can_undo

    def test_ineffective_move_changes_nothing(self):
        session = make_session([[2, 4, 0, 0]] + EMPTY_ROWS)

        outcome = session.apply_move("left")

        assert not outcome.moved
        assert session.score == 0
        assert session.prev is None
        assert session.board.to_list() == [[2, 4, 0, 0]] + EMPTY_ROWS

    def test_repeated_noop_keeps_state(self):
        session = make_session([[0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [2, 4, 8, 16]])
        session.apply_move("down")
        board = session.board.to_list()
        score, prev = session.score, session.prev

        for _ in range(3):
            outcome = session.apply_move("down")
            if outcome.moved:
                break
            assert session.board.to_list() == board
            assert session.score == score
            assert session.prev == prev

    def test_invalid_direction_ignored(self):
        session = make_session([[2, 2, 0, 0]] + EMPTY_ROWS)
        for direction in ("sideways", "", None, 3):
            outcome = session.apply_move(direction)
            assert not outcome.moved
        assert session.board.to_list() == [[2, 2, 0, 0]] + EMPTY_ROWS

    def test_direction_case_insensitive(self):
        session = make_session([[2, 2, 0, 0]] + EMPTY_ROWS)
        assert session.apply_move(" LEFT ").moved

    def test_game_over_after_last_move(self):
        # 왼쪽 이동 후 빈 칸 하나에 새 타일이 생기면 더 움직일 수 없는 보드
        values = [[0, 2, 4, 2], [4, 2, 4, 8], [8, 4, 8, 4], [4, 8, 4, 8]]
        session = make_session(values, four_probability=1.0)

        outcome = session.apply_move("left")

        assert outcome.moved
        assert session.board.to_list() == [
            [2, 4, 2, 4],
            [4, 2, 4, 8],
            [8, 4, 8, 4],
            [4, 8, 4, 8],
        ]
        assert outcome.game_over
        assert session.game_over
        assert not session.can_undo

    def test_no_moves_after_game_over(self):
        session = make_session(NO_MOVES)
        session.game_over = True
        outcome = session.apply_move("left")
        assert not outcome.moved
        assert outcome.game_over

    def test_callbacks(self):
        session = make_session([[2, 2, 0, 0]] + EMPTY_ROWS)
        events = []
        session.on_move_callback = lambda outcome: events.append(("move", outcome.score_gained))
        session.on_score_callback = lambda score, best: events.append(("score", score, best))

        session.apply_move("left")

        assert events == [("move", 4), ("score", 4, 4)]


class TestUndo:
    """undo() 테스트"""

    def test_undo_restores_previous_state(self):
        session = make_session([[2, 2, 0, 0]] + EMPTY_ROWS)
        session.best = 10

        session.apply_move("left")
        assert session.undo()

        assert session.board.to_list() == [[2, 2, 0, 0]] + EMPTY_ROWS
        assert session.score == 0
        assert session.best == 10
        assert not session.can_undo
        session.board.check_consistency()

    def test_second_undo_is_noop(self):
        session = make_session([[2, 2, 0, 0]] + EMPTY_ROWS)
        session.apply_move("left")
        session.undo()
        board = session.board.to_list()

        assert not session.undo()
        assert session.board.to_list() == board

    def test_undo_only_one_level(self):
        session = make_session([[2, 2, 4, 0]] + EMPTY_ROWS)
        session.apply_move("left")
        after_first = session.board.to_list()
        score_first = session.score

        assert session.apply_move("right").moved

        session.undo()
        assert session.board.to_list() == after_first
        assert session.score == score_first
        assert not session.undo()

    def test_undo_rebuilds_ids(self):
        session = make_session([[2, 2, 0, 0]] + EMPTY_ROWS)
        session.apply_move("left")
        session.undo()
        assert [t.id for t in session.board.tiles()] == [1, 2]

    def test_no_undo_after_game_over(self):
        session = make_session([[2, 2, 0, 0]] + EMPTY_ROWS)
        session.apply_move("left")
        session.game_over = True
        assert not session.undo()
