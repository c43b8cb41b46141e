"""이동/합치기 엔진과 종료 판정"""

import logging

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .board import GRID_SIZE, Board

log = logging.getLogger(__name__)

DIRECTION_UP = "up"
DIRECTION_DOWN = "down"
DIRECTION_LEFT = "left"
DIRECTION_RIGHT = "right"

DIRECTIONS = (DIRECTION_UP, DIRECTION_DOWN, DIRECTION_LEFT, DIRECTION_RIGHT)


class MoveResult(BaseModel):
    """move()의 결과"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    board: Board
    score_gained: int = 0
    merged_ids: set[int] = Field(default_factory=set)
    removed_ids: set[int] = Field(default_factory=set)
    moved: bool = False


def line_coords(direction: str, index: int) -> list[tuple[int, int]]:
    """한 줄의 칸 좌표를 당기는 순서로 반환 (0번 = 이동 방향의 끝)"""
    last = GRID_SIZE - 1
    if direction == DIRECTION_LEFT:
        return [(index, k) for k in range(GRID_SIZE)]
    if direction == DIRECTION_RIGHT:
        return [(index, last - k) for k in range(GRID_SIZE)]
    if direction == DIRECTION_UP:
        return [(k, index) for k in range(GRID_SIZE)]
    if direction == DIRECTION_DOWN:
        return [(last - k, index) for k in range(GRID_SIZE)]
    raise ValueError(f"unknown direction: {direction!r}")


def move(board: Board, direction: str) -> MoveResult:
    """
    보드를 한 방향으로 밀고 합치기

    각 줄(좌/우는 행, 상/하는 열)을 독립적으로 처리합니다.
    1. 당기는 순서로 타일 id를 모음 (빈 칸 건너뜀 = 압축)
    2. 앞에서부터 인접한 같은 값 쌍을 합침. 앞쪽 타일(A)이 id를 유지하고
       값이 두 배가 되며, 뒤쪽 타일(B)은 제거됨. 합친 뒤 두 칸 전진하므로
       한 타일은 한 번의 이동에서 최대 한 번만 합쳐짐
    3. 결과를 줄의 시작부터 다시 채우고 나머지는 비움

    입력 보드는 바꾸지 않고 새 보드를 담아 반환합니다.

    Args:
        board: 현재 보드
        direction: "up" / "down" / "left" / "right"

    Returns:
        MoveResult (moved=False면 아무것도 바뀌지 않은 이동)
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"unknown direction: {direction!r}")

    result = board.copy()
    new_index = np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.int32)
    score_gained = 0
    merged_ids: set[int] = set()
    removed_ids: set[int] = set()
    any_moved = False

    for i in range(GRID_SIZE):
        coords = line_coords(direction, i)
        ids = result._line_ids(coords)

        # 합치기
        out = []
        p = 0
        while p < len(ids):
            tile_a = result.get_tile(ids[p])
            tile_b = result.get_tile(ids[p + 1]) if p + 1 < len(ids) else None

            if tile_b is not None and tile_a.value == tile_b.value:
                tile_a.value *= 2
                score_gained += tile_a.value
                merged_ids.add(tile_a.id)
                removed_ids.add(tile_b.id)
                out.append(tile_a.id)
                any_moved = True
                p += 2
            else:
                out.append(tile_a.id)
                p += 1

        # 줄의 시작부터 다시 채우기
        for (row, col), tile_id in zip(coords, out):
            tile = result.get_tile(tile_id)
            if (tile.row, tile.col) != (row, col):
                any_moved = True
            new_index[row, col] = tile_id

    result._commit(new_index, removed_ids)

    if any_moved:
        log.debug(
            "move %s: gained=%d merged=%s removed=%s",
            direction, score_gained, sorted(merged_ids), sorted(removed_ids),
        )

    return MoveResult(
        board=result,
        score_gained=score_gained,
        merged_ids=merged_ids,
        removed_ids=removed_ids,
        moved=any_moved,
    )


def can_move(board) -> bool:
    """이동 가능 여부 확인

    빈 칸이 있으면 바로 True. 가득 찬 경우 오른쪽/아래쪽 이웃과 같은 값이
    하나라도 있으면 True (같음은 대칭이므로 왼쪽/위쪽은 볼 필요 없음).
    """
    grid = board.values if isinstance(board, Board) else np.asarray(board)

    if np.any(grid == 0):
        return True

    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            v = grid[r, c]
            if r < GRID_SIZE - 1 and grid[r + 1, c] == v:
                return True
            if c < GRID_SIZE - 1 and grid[r, c + 1] == v:
                return True
    return False


def get_valid_directions(board: Board) -> list[str]:
    """실제로 무언가 바뀌는 방향 목록"""
    return [d for d in DIRECTIONS if move(board, d).moved]
