import logging
import random
from typing import Callable

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .board import Board
from .config import GameConfig
from .engine import DIRECTIONS, can_move, move
from .spawn import spawn

log = logging.getLogger(__name__)


class Snapshot(BaseModel):
    """되돌리기용 스냅샷 (마지막 유효 이동 직전 상태)"""

    model_config = ConfigDict(frozen=True)

    board: list[list[int]]
    score: int = Field(default=0, ge=0)
    best: int = Field(default=0, ge=0)


class MoveOutcome(BaseModel):
    """apply_move()의 결과 (표시 계층용 애니메이션 힌트 포함)"""

    moved: bool = False
    score_gained: int = 0
    merged_ids: set[int] = Field(default_factory=set)
    removed_ids: set[int] = Field(default_factory=set)
    new_ids: set[int] = Field(default_factory=set)
    game_over: bool = False


class GameSession:
    """2048 게임 세션

    보드, 점수, 최고 점수, 게임 오버 여부, 한 단계 되돌리기 스냅샷을 소유합니다.
    난수원은 주입할 수 있어서 테스트에서 결과를 고정할 수 있습니다.
    """

    def __init__(self, config: GameConfig | None = None, rng: random.Random | None = None):
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else random.Random()

        self.board = Board()
        self.score = 0
        self.best = 0
        self.game_over = False
        self.prev: Snapshot | None = None

        # 콜백 (표시 계층)
        self.on_move_callback: Callable[[MoveOutcome], None] | None = None
        self.on_score_callback: Callable[[int, int], None] | None = None
        self.on_game_over_callback: Callable[[], None] | None = None

    @classmethod
    def restore(cls, board, score: int, best: int, game_over: bool,
                prev: Snapshot | None = None, config: GameConfig | None = None,
                rng: random.Random | None = None) -> "GameSession":
        """저장된 값으로 세션 복원 (타일 id는 새로 부여)"""
        session = cls(config, rng)
        session.board = Board.from_values(board)
        session.score = score
        session.best = max(best, score)
        session.game_over = game_over
        session.prev = prev
        return session

    def new_game(self) -> set[int]:
        """새 게임 시작, 생성된 타일 id 반환"""
        self.board = Board()
        self.score = 0
        self.game_over = False
        self.prev = None

        new_ids = spawn(
            self.board,
            self.rng,
            self.config.start_spawn_min,
            self.config.start_spawn_max,
            self.config.four_probability,
        )
        log.info("new game: %d tiles, best=%d", len(new_ids), self.best)

        if not can_move(self.board):
            self._set_game_over()

        return new_ids

    def apply_move(self, direction) -> MoveOutcome:
        """
        한 방향으로 이동

        게임 오버이거나 알 수 없는 방향이면 아무것도 하지 않습니다.
        아무것도 바뀌지 않는 이동도 점수/되돌리기/타일 생성 없이 무시됩니다.
        """
        if self.game_over:
            return MoveOutcome(game_over=True)

        if isinstance(direction, str):
            direction = direction.strip().lower()
        if direction not in DIRECTIONS:
            log.debug("ignored direction %r", direction)
            return MoveOutcome()

        result = move(self.board, direction)
        if not result.moved:
            return MoveOutcome()

        self.prev = Snapshot(board=self.board.to_list(), score=self.score, best=self.best)

        self.board = result.board
        self.score += result.score_gained
        self.best = max(self.best, self.score)

        new_ids = spawn(
            self.board,
            self.rng,
            self.config.move_spawn_min,
            self.config.move_spawn_max,
            self.config.four_probability,
        )

        if not can_move(self.board):
            self._set_game_over()

        outcome = MoveOutcome(
            moved=True,
            score_gained=result.score_gained,
            merged_ids=result.merged_ids,
            removed_ids=result.removed_ids,
            new_ids=new_ids,
            game_over=self.game_over,
        )

        if self.on_move_callback is not None:
            self.on_move_callback(outcome)
        if result.score_gained and self.on_score_callback is not None:
            self.on_score_callback(self.score, self.best)

        return outcome

    def undo(self) -> bool:
        """한 단계 되돌리기 (연속 되돌리기 불가)"""
        if self.prev is None or self.game_over:
            return False

        self.board = Board.from_values(self.prev.board)
        self.score = self.prev.score
        self.best = self.prev.best
        self.prev = None
        log.info("undo: score=%d", self.score)

        if self.on_score_callback is not None:
            self.on_score_callback(self.score, self.best)
        return True

    def _set_game_over(self):
        self.game_over = True
        log.info("game over: score=%d, max_tile=%d", self.score, self.max_tile)
        if self.on_game_over_callback is not None:
            self.on_game_over_callback()

    @property
    def can_undo(self) -> bool:
        return self.prev is not None and not self.game_over

    @property
    def max_tile(self) -> int:
        return self.board.max_tile()

    def get_state(self) -> np.ndarray:
        """현재 보드 상태 반환 (4x4 numpy array)"""
        return self.board.values

    def render(self):
        """현재 보드 상태 출력"""
        print(f"\nScore: {self.score}  Best: {self.best}")
        print("-" * 25)
        for row in self.get_state():
            print("|", end="")
            for val in row:
                if val == 0:
                    print("     |", end="")
                else:
                    print(f"{val:^5}|", end="")
            print()
            print("-" * 25)
        print()


if __name__ == "__main__":
    session = GameSession()
    session.new_game()
    session.render()

    # 랜덤 플레이 테스트
    for _ in range(10):
        direction = random.choice(DIRECTIONS)
        outcome = session.apply_move(direction)
        print(f"방향: {direction}, 점수: {outcome.score_gained}, 유효: {outcome.moved}")
        session.render()

        if session.game_over:
            print("게임 종료!")
            break
