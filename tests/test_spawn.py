import random

from tile2048.board import Board
from tile2048.spawn import spawn


class ScriptedRandom:
    """정해진 값을 차례로 돌려주는 난수원"""

    def __init__(self, randints=(), randoms=(), choices=()):
        self.randints = list(randints)
        self.randoms = list(randoms)
        self.choices = list(choices)

    def randint(self, a, b):
        value = self.randints.pop(0)
        assert a <= value <= b
        return value

    def random(self):
        return self.randoms.pop(0)

    def choice(self, seq):
        index = self.choices.pop(0)
        return seq[index]


class TestSpawn:
    """spawn() 유닛테스트"""

    def test_full_board_spawns_nothing(self):
        board = Board.from_values([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]])
        assert spawn(board, random.Random(0), 1, 2) == set()

    def test_scripted_placement_and_values(self):
        board = Board()
        rng = ScriptedRandom(randints=[1], randoms=[0.5, 0.05], choices=[0, 0])

        new_ids = spawn(board, rng, 1, 2)

        # 빈 칸 목록은 매번 새로 구하므로 두 번째 선택도 첫 빈 칸
        assert board.values[0, 0] == 2
        assert board.values[0, 1] == 4
        assert new_ids == {board.tile_at(0, 0).id, board.tile_at(0, 1).id}

    def test_count_capped_by_empty_cells(self):
        board = Board.from_values([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 0]])
        rng = ScriptedRandom(randints=[1], randoms=[0.5], choices=[0])

        new_ids = spawn(board, rng, 2, 3)

        assert len(new_ids) == 1
        assert board.values[3, 3] == 2

    def test_count_range_and_values(self):
        for seed in range(50):
            board = Board()
            new_ids = spawn(board, random.Random(seed), 2, 3)
            assert len(new_ids) in (2, 3)
            assert len(board.tiles()) == len(new_ids)
            for tile in board.tiles():
                assert tile.value in (2, 4)
            board.check_consistency()

    def test_four_probability_extremes(self):
        board = Board()
        spawn(board, random.Random(1), 16, 16, four_probability=1.0)
        assert set(board.values.flat) == {4}

        board = Board()
        spawn(board, random.Random(1), 16, 16, four_probability=0.0)
        assert set(board.values.flat) == {2}
