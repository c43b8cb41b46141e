from .board import GRID_SIZE, Board, Tile, TileRegistry
from .config import GameConfig
from .controller import GameController
from .engine import DIRECTIONS, MoveResult, can_move, move
from .leaderboard import InvalidPlayerNameError, Leaderboard, LeaderEntry
from .session import GameSession, MoveOutcome, Snapshot
from .spawn import spawn
from .storage import JsonFileStore, MemoryStore, load_session, save_session

__all__ = [
    "GRID_SIZE",
    "Board",
    "Tile",
    "TileRegistry",
    "GameConfig",
    "GameController",
    "DIRECTIONS",
    "MoveResult",
    "can_move",
    "move",
    "InvalidPlayerNameError",
    "Leaderboard",
    "LeaderEntry",
    "GameSession",
    "MoveOutcome",
    "Snapshot",
    "spawn",
    "JsonFileStore",
    "MemoryStore",
    "load_session",
    "save_session",
]
