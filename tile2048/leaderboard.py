import json
import logging
from datetime import datetime

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from .config import DEFAULT_LEADERS_KEY

log = logging.getLogger(__name__)

LEADERBOARD_SIZE = 10
DATE_FORMAT = "%d.%m.%Y, %H:%M:%S"


class InvalidPlayerNameError(ValueError):
    """빈 플레이어 이름"""


class LeaderEntry(BaseModel):
    """리더보드 항목"""

    name: str
    score: int = Field(ge=0)
    date: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValueError("name must not be blank")
        return name


_ENTRIES = TypeAdapter(list[LeaderEntry])


def format_date(when: datetime | None = None) -> str:
    return (when or datetime.now()).strftime(DATE_FORMAT)


class Leaderboard:
    """점수 내림차순 상위 N개 기록, 갱신할 때마다 목록 전체를 저장"""

    def __init__(self, store, key: str = DEFAULT_LEADERS_KEY, size: int = LEADERBOARD_SIZE):
        self.store = store
        self.key = key
        self.size = size

    def load(self) -> list[LeaderEntry]:
        """저장된 목록 불러오기 (없거나 깨진 데이터는 빈 목록)"""
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            return _ENTRIES.validate_python(json.loads(raw))
        except (ValueError, ValidationError) as e:
            log.warning("discarding corrupt leaderboard: %s", e)
            return []

    def _save(self, entries: list[LeaderEntry]):
        self.store.set(self.key, _ENTRIES.dump_json(entries).decode("utf-8"))

    def submit(self, name: str, score: int, date: str | None = None) -> list[LeaderEntry]:
        """
        기록 추가

        Raises:
            InvalidPlayerNameError: 이름이 비어 있거나 공백뿐일 때 (저장 안 함)
        """
        name = (name or "").strip()
        if not name:
            raise InvalidPlayerNameError("player name must not be blank")

        entry = LeaderEntry(name=name, score=score, date=date or format_date())
        entries = self.load()
        entries.append(entry)

        # sorted()는 안정 정렬: 동점이면 먼저 등록된 기록이 앞
        entries = sorted(entries, key=lambda e: e.score, reverse=True)[: self.size]
        self._save(entries)
        log.info("leaderboard: %s scored %d", name, score)
        return entries

    def clear(self):
        self._save([])
