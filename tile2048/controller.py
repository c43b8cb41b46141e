import logging
import random

from .config import GameConfig
from .leaderboard import Leaderboard, LeaderEntry
from .session import GameSession, MoveOutcome
from .storage import JsonFileStore, load_session, save_session

log = logging.getLogger(__name__)


class ScoreNotSubmittableError(Exception):
    """게임이 끝나지 않았거나 이미 기록을 저장함"""


class GameController:
    """세션 + 저장소 + 리더보드 연결

    상태를 바꾸는 명령이 끝날 때마다 게임을 바로 저장합니다.
    """

    def __init__(self, config: GameConfig | None = None, store=None,
                 rng: random.Random | None = None):
        self.config = config or GameConfig()
        self.store = store if store is not None else JsonFileStore(self.config.storage_path)
        self.leaderboard = Leaderboard(
            self.store, self.config.leaders_key, self.config.leaderboard_size
        )
        self.score_saved = False
        self.last_outcome = MoveOutcome()

        session = load_session(self.store, self.config.state_key, self.config, rng)
        if session is None:
            self.session = GameSession(self.config, rng)
            self.new_game()
        else:
            self.session = session
            log.info("restored saved game: score=%d", session.score)

    def new_game(self) -> set[int]:
        new_ids = self.session.new_game()
        self.score_saved = False
        self.last_outcome = MoveOutcome(new_ids=new_ids, game_over=self.session.game_over)
        self.save()
        return new_ids

    def move(self, direction) -> MoveOutcome:
        outcome = self.session.apply_move(direction)
        if outcome.moved:
            self.last_outcome = outcome
            self.save()
        return outcome

    def undo(self) -> bool:
        if not self.session.undo():
            return False
        self.last_outcome = MoveOutcome()
        self.save()
        return True

    def save(self):
        save_session(self.store, self.session, self.config.state_key)

    def submit_score(self, name: str) -> list[LeaderEntry]:
        """
        끝난 게임의 점수를 리더보드에 등록 (게임당 한 번)

        Raises:
            InvalidPlayerNameError: 빈 이름
            ScoreNotSubmittableError: 게임 진행 중이거나 이미 등록함
        """
        if not self.session.game_over or self.score_saved:
            raise ScoreNotSubmittableError("score can be saved once, after the game is over")
        entries = self.leaderboard.submit(name, self.session.score)
        self.score_saved = True
        return entries

    def leaders(self) -> list[LeaderEntry]:
        return self.leaderboard.load()

    def clear_leaders(self):
        self.leaderboard.clear()

    def snapshot(self) -> dict:
        """표시 계층에 넘길 현재 상태"""
        session = self.session
        outcome = self.last_outcome
        return {
            "board": session.board.to_list(),
            "tiles": [
                {"id": t.id, "value": t.value, "row": t.row, "col": t.col}
                for t in session.board.tiles()
            ],
            "new_ids": sorted(outcome.new_ids),
            "merged_ids": sorted(outcome.merged_ids),
            "removed_ids": sorted(outcome.removed_ids),
            "score": session.score,
            "best": session.best,
            "game_over": session.game_over,
            "can_undo": session.can_undo,
            "score_saved": self.score_saved,
        }
