from pathlib import Path

from pydantic import BaseModel, Field, model_validator

DEFAULT_STORAGE_PATH = Path("tile2048_storage.json")
DEFAULT_STATE_KEY = "tile2048_state"
DEFAULT_LEADERS_KEY = "tile2048_leaders"


class GameConfig(BaseModel):
    """게임 설정 (범위 검증 포함)"""

    four_probability: float = Field(
        default=0.1, ge=0.0, le=1.0, description="새 타일이 4일 확률 (나머지는 2)"
    )
    move_spawn_min: int = Field(default=1, ge=0, description="이동 후 생성 타일 수 최소")
    move_spawn_max: int = Field(default=2, ge=0, description="이동 후 생성 타일 수 최대")
    start_spawn_min: int = Field(default=2, ge=1, description="새 게임 생성 타일 수 최소")
    start_spawn_max: int = Field(default=3, ge=1, description="새 게임 생성 타일 수 최대")
    leaderboard_size: int = Field(default=10, ge=1, description="리더보드 최대 항목 수")
    storage_path: Path = Field(
        default=DEFAULT_STORAGE_PATH, description="게임/리더보드 저장 파일 경로"
    )
    state_key: str = Field(default=DEFAULT_STATE_KEY, min_length=1)
    leaders_key: str = Field(default=DEFAULT_LEADERS_KEY, min_length=1)

    @model_validator(mode="after")
    def validate_spawn_ranges(self) -> "GameConfig":
        if self.move_spawn_min > self.move_spawn_max:
            raise ValueError(
                f"move_spawn_min ({self.move_spawn_min}) must be <= "
                f"move_spawn_max ({self.move_spawn_max})"
            )
        if self.start_spawn_min > self.start_spawn_max:
            raise ValueError(
                f"start_spawn_min ({self.start_spawn_min}) must be <= "
                f"start_spawn_max ({self.start_spawn_max})"
            )
        if self.state_key == self.leaders_key:
            raise ValueError("state_key and leaders_key must differ")
        return self
