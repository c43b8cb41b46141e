"""보드 모델: 값 격자와 타일 식별자 인덱스

애니메이션을 위해 타일마다 고유 id를 부여하고, 이동 중에도 같은 타일이
같은 id를 유지하도록 합니다. 값 격자와 위치→id 인덱스는 항상 함께
갱신되며 외부에는 값의 복사본과 Tile 조회만 노출합니다.
"""

from dataclasses import dataclass

import numpy as np

GRID_SIZE = 4
# int32 격자에 들어가는 가장 큰 타일
MAX_TILE_VALUE = 2**30


@dataclass
class Tile:
    """숫자 타일 하나"""

    id: int
    value: int
    row: int
    col: int


def is_tile_value(value) -> bool:
    """2, 4, 8, ..., MAX_TILE_VALUE (2의 거듭제곱) 인지 확인"""
    value = int(value)
    return 2 <= value <= MAX_TILE_VALUE and value & (value - 1) == 0


class TileRegistry:
    """타일 id 발급 및 보관

    id는 1부터 단조 증가하며 같은 레지스트리 안에서는 재사용되지 않습니다.
    """

    def __init__(self, next_id: int = 1):
        self._tiles: dict[int, Tile] = {}
        self._next_id = next_id

    def allocate(self) -> int:
        """새 id 발급"""
        tile_id = self._next_id
        self._next_id += 1
        return tile_id

    def add(self, value: int, row: int, col: int) -> Tile:
        tile = Tile(self.allocate(), int(value), row, col)
        self._tiles[tile.id] = tile
        return tile

    def get(self, tile_id: int) -> Tile:
        return self._tiles[tile_id]

    def remove(self, tile_id: int) -> Tile:
        return self._tiles.pop(tile_id)

    def __contains__(self, tile_id) -> bool:
        return tile_id in self._tiles

    def __iter__(self):
        return iter(sorted(self._tiles.values(), key=lambda t: t.id))

    def __len__(self) -> int:
        return len(self._tiles)

    @property
    def next_id(self) -> int:
        return self._next_id

    def copy(self) -> "TileRegistry":
        clone = TileRegistry(self._next_id)
        clone._tiles = {
            tile_id: Tile(t.id, t.value, t.row, t.col) for tile_id, t in self._tiles.items()
        }
        return clone

    @classmethod
    def rebuild_from_grid(cls, values) -> "TileRegistry":
        """값 격자에서 레지스트리 재구성 (행 우선으로 1부터 새 id 부여)

        이전 id 정보는 버려집니다. 되돌리기/불러오기처럼 애니메이션
        연속성이 필요 없는 시점에만 사용합니다.
        """
        grid = _as_grid(values)
        registry = cls()
        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                if grid[row, col] != 0:
                    registry.add(int(grid[row, col]), row, col)
        return registry


def _as_grid(values) -> np.ndarray:
    """4x4 정수 배열로 변환하고 값 검증"""
    try:
        grid = np.array(values, dtype=np.int64)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"board must be a 4x4 integer matrix: {e}") from e

    if grid.shape != (GRID_SIZE, GRID_SIZE):
        raise ValueError(f"board must be {GRID_SIZE}x{GRID_SIZE}, got shape {grid.shape}")

    for value in grid.flat:
        if value != 0 and not is_tile_value(value):
            raise ValueError(f"illegal tile value: {int(value)}")

    return grid.astype(np.int32)


class Board:
    """4x4 게임 보드

    값 격자는 인덱스(위치→타일 id)와 레지스트리에서 파생됩니다.
    인덱스가 0인 칸은 빈 칸입니다.
    """

    def __init__(self, registry: TileRegistry | None = None):
        self._registry = registry if registry is not None else TileRegistry()
        self._index = np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.int32)
        for tile in self._registry:
            if self._index[tile.row, tile.col] != 0:
                raise ValueError(f"two tiles at ({tile.row}, {tile.col})")
            self._index[tile.row, tile.col] = tile.id

    @classmethod
    def from_values(cls, values) -> "Board":
        """값 격자로 보드 생성 (rebuildFromGrid)"""
        return cls(TileRegistry.rebuild_from_grid(values))

    @property
    def values(self) -> np.ndarray:
        """현재 값 격자 (복사본)"""
        grid = np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.int32)
        for tile in self._registry:
            grid[tile.row, tile.col] = tile.value
        return grid

    def to_list(self) -> list[list[int]]:
        return self.values.tolist()

    def tile_at(self, row: int, col: int) -> Tile | None:
        tile_id = int(self._index[row, col])
        if tile_id == 0:
            return None
        return self._registry.get(tile_id)

    def tiles(self) -> list[Tile]:
        """모든 타일 (id 순)"""
        return list(self._registry)

    def has_tile(self, tile_id: int) -> bool:
        return tile_id in self._registry

    def get_tile(self, tile_id: int) -> Tile:
        return self._registry.get(tile_id)

    def empty_cells(self) -> list[tuple[int, int]]:
        rows, cols = np.where(self._index == 0)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def max_tile(self) -> int:
        return max((t.value for t in self._registry), default=0)

    def place(self, row: int, col: int, value: int) -> int:
        """빈 칸에 새 타일 배치, 새 id 반환"""
        if self._index[row, col] != 0:
            raise ValueError(f"cell ({row}, {col}) is occupied")
        if not is_tile_value(value):
            raise ValueError(f"illegal tile value: {value}")
        tile = self._registry.add(value, row, col)
        self._index[row, col] = tile.id
        return tile.id

    def copy(self) -> "Board":
        return Board(self._registry.copy())

    # ---- 이동 엔진 전용 ----

    def _line_ids(self, coords: list[tuple[int, int]]) -> list[int]:
        """한 줄에서 타일이 있는 칸의 id (당기는 순서, 빈 칸 제외)"""
        return [int(self._index[r, c]) for r, c in coords if self._index[r, c] != 0]

    def _commit(self, index: np.ndarray, removed_ids: set[int]):
        """이동 결과 반영: 흡수된 타일 삭제 후 인덱스와 타일 좌표 갱신"""
        for tile_id in removed_ids:
            self._registry.remove(tile_id)
        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                tile_id = int(index[row, col])
                if tile_id != 0:
                    tile = self._registry.get(tile_id)
                    tile.row, tile.col = row, col
        self._index = index.astype(np.int32)

    def check_consistency(self):
        """인덱스와 타일 좌표/값이 일치하는지 검사

        Raises:
            ValueError: 인덱스와 레지스트리가 어긋난 경우
        """
        indexed = set(int(i) for i in self._index.flat if i != 0)
        if indexed != {t.id for t in self._registry}:
            raise ValueError(f"index ids {sorted(indexed)} do not match registry")
        for row in range(GRID_SIZE):
            for col in range(GRID_SIZE):
                tile_id = int(self._index[row, col])
                if tile_id == 0:
                    continue
                tile = self._registry.get(tile_id)
                if (tile.row, tile.col) != (row, col):
                    raise ValueError(f"tile {tile_id} misplaced")
                if not is_tile_value(tile.value):
                    raise ValueError(f"tile {tile_id} has value {tile.value}")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.values, other.values)

    def __repr__(self):
        return f"Board({self.to_list()})"
