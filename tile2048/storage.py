"""로컬 키-값 저장소와 게임 상태 저장/불러오기

저장 레코드 형식:
    {"board": 4x4, "score": int, "best": int, "gameOver": bool,
     "prev": {"board", "score", "best"} | null, "v": 1}

불러오기에 실패하면 (키 없음, 잘못된 JSON, 형식 오류) 저장된 게임이
없는 것으로 취급합니다.
"""

import json
import logging
import random
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .board import GRID_SIZE, is_tile_value
from .config import DEFAULT_STATE_KEY, GameConfig
from .session import GameSession, Snapshot

log = logging.getLogger(__name__)

STATE_VERSION = 1


class MemoryStore:
    """메모리 키-값 저장소 (테스트용)"""

    def __init__(self, data: dict[str, str] | None = None):
        self.data = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str):
        self.data[key] = value

    def remove(self, key: str):
        self.data.pop(key, None)


class JsonFileStore:
    """JSON 파일 하나에 키 → 문자열을 저장하는 저장소

    set/remove 때마다 파일 전체를 동기적으로 다시 씁니다.
    읽을 수 없는 파일은 빈 저장소로 취급합니다.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("ignoring unreadable storage file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("ignoring storage file %s: not a JSON object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str):
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str):
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)


def _check_board(board: list[list[int]]) -> list[list[int]]:
    if len(board) != GRID_SIZE or any(len(row) != GRID_SIZE for row in board):
        raise ValueError(f"board must be {GRID_SIZE}x{GRID_SIZE}")
    for row in board:
        for value in row:
            if value != 0 and not is_tile_value(value):
                raise ValueError(f"illegal tile value: {value}")
    return board


class SavedSnapshot(Snapshot):
    @field_validator("board")
    @classmethod
    def validate_board(cls, board):
        return _check_board(board)


class SavedGame(BaseModel):
    """저장된 게임 레코드"""

    model_config = ConfigDict(populate_by_name=True)

    board: list[list[int]]
    score: int = Field(default=0, ge=0)
    best: int = Field(default=0, ge=0)
    game_over: bool = Field(default=False, alias="gameOver")
    prev: SavedSnapshot | None = None
    v: int = STATE_VERSION

    @field_validator("board")
    @classmethod
    def validate_board(cls, board):
        return _check_board(board)

    @field_validator("score", "best", mode="before")
    @classmethod
    def default_missing_number(cls, value):
        # null/0/"" 은 0으로 취급
        return value or 0


def session_to_record(session: GameSession) -> SavedGame:
    prev = None
    if session.prev is not None:
        prev = SavedSnapshot(**session.prev.model_dump())
    return SavedGame(
        board=session.board.to_list(),
        score=session.score,
        best=session.best,
        game_over=session.game_over,
        prev=prev,
    )


def save_session(store, session: GameSession, key: str = DEFAULT_STATE_KEY):
    """세션을 JSON으로 저장"""
    record = session_to_record(session)
    store.set(key, record.model_dump_json(by_alias=True))


def load_session(store, key: str = DEFAULT_STATE_KEY, config: GameConfig | None = None,
                 rng: random.Random | None = None) -> GameSession | None:
    """저장된 세션 불러오기, 실패하면 None"""
    raw = store.get(key)
    if not raw:
        return None

    try:
        data = json.loads(raw)
        if not isinstance(data, dict) or not isinstance(data.get("board"), list):
            log.warning("discarding saved game: board is not an array")
            return None
        record = SavedGame.model_validate(data)
    except (ValueError, ValidationError) as e:
        # json.JSONDecodeError도 ValueError
        log.warning("discarding corrupt saved game: %s", e)
        return None

    prev = None
    if record.prev is not None:
        prev = Snapshot(board=record.prev.board, score=record.prev.score, best=record.prev.best)

    try:
        return GameSession.restore(
            record.board,
            record.score,
            record.best,
            record.game_over,
            prev=prev,
            config=config,
            rng=rng,
        )
    except ValueError as e:
        log.warning("discarding unrestorable saved game: %s", e)
        return None
