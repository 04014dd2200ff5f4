"""
Minesweeper game engine.

Provides the board and tile model, mine generation, the game state
machine, per-player session storage and a text command layer.
"""
from .tile import Tile, TileState
from .board import Board, BoardConfig, DIFFICULTIES, EASY, MEDIUM, HARD
from .mines import MineGenerator, MinePlacementError
from .game import Game, GameState
from .sessions import (
    GameStore,
    SessionError,
    GameAlreadyRunningError,
    NoActiveGameError,
)
from .commands import CommandHandler, Reply, parse_coordinates, render_text

__all__ = [
    "Tile",
    "TileState",
    "Board",
    "BoardConfig",
    "DIFFICULTIES",
    "EASY",
    "MEDIUM",
    "HARD",
    "MineGenerator",
    "MinePlacementError",
    "Game",
    "GameState",
    "GameStore",
    "SessionError",
    "GameAlreadyRunningError",
    "NoActiveGameError",
    "CommandHandler",
    "Reply",
    "parse_coordinates",
    "render_text",
]
