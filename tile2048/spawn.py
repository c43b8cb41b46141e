import logging

from .board import Board

log = logging.getLogger(__name__)

FOUR_SPAWN_RATE = 0.1


def spawn(board: Board, rng, count_min: int = 1, count_max: int = 2,
          four_probability: float = FOUR_SPAWN_RATE) -> set[int]:
    """
    빈 칸에 새 타일 생성 (2: 90%, 4: 10%)

    생성 개수는 min(빈 칸 수, count_min + randint(0, count_max - count_min)).
    한 개 놓을 때마다 빈 칸 목록을 다시 구해 균등하게 고릅니다.

    Args:
        board: 제자리에서 수정할 보드
        rng: random.Random 호환 난수원 (randint, choice, random)
        count_min, count_max: 생성 개수 범위
        four_probability: 4가 나올 확률

    Returns:
        새로 만든 타일 id 집합
    """
    empties = board.empty_cells()
    if not empties:
        return set()

    how_many = min(len(empties), count_min + rng.randint(0, count_max - count_min))
    new_ids = set()

    for _ in range(how_many):
        empties_now = board.empty_cells()
        if not empties_now:
            break
        row, col = rng.choice(empties_now)
        value = 4 if rng.random() < four_probability else 2
        new_ids.add(board.place(row, col, value))
        log.debug("spawned %d at (%d, %d)", value, row, col)

    return new_ids
