"""
Pytest configuration and shared fixtures.
"""
import itertools
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterable, Set, Tuple

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import (
    Board,
    BoardConfig,
    CommandHandler,
    Game,
    GameStore,
    MineGenerator,
    Tile,
)


Position = Tuple[int, int]

START_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# Helpers
# ============================================================================

class FixedMineGenerator(MineGenerator):
    """Mine generator that always places mines at the given positions."""

    def __init__(self, mines: Iterable[Position]) -> None:
        super().__init__(rng=random.Random(0))
        self.mines = set(mines)

    def _sample(self, board, num_mines, first_dig, exclusion_distance):
        return set(self.mines)


def ticking_clock(step: timedelta = timedelta(seconds=1)) -> Callable[[], datetime]:
    """Clock that advances by ``step`` on every call."""
    ticks = (START_TIME + step * n for n in itertools.count())
    return lambda: next(ticks)


# Easy board: nine mines along the bottom row and one in the top-right
# corner. Digging (0, 0) reveals everything except (9, 0) and (9, 7).
EASY_LAYOUT = {(x, 7) for x in range(9)} | {(9, 0)}

# 6x3 board split by a wall of mines in column 2.
WALL_LAYOUT = {(2, 0), (2, 1), (2, 2)}


# ============================================================================
# Game Fixtures
# ============================================================================

@pytest.fixture
def make_game() -> Callable[..., Game]:
    """Factory for games with a fixed mine layout and a ticking clock."""
    def factory(width: int, height: int, mines: Iterable[Position]) -> Game:
        mines = set(mines)
        return Game(
            BoardConfig(width, height, len(mines)),
            FixedMineGenerator(mines),
            ticking_clock(),
        )
    return factory


@pytest.fixture
def wall_game(make_game) -> Game:
    """Started 6x3 game with the left side revealed."""
    game = make_game(6, 3, WALL_LAYOUT)
    game.dig(0, 1)
    return game


@pytest.fixture
def seeded_game() -> Game:
    """Easy-sized game with a seeded random generator."""
    return Game(
        BoardConfig(10, 8, 10),
        MineGenerator(rng=random.Random(1234)),
        ticking_clock(),
    )


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def empty_board() -> Board:
    """A 5x4 board with no mines."""
    return Board(5, 4)


@pytest.fixture
def hidden_tile() -> Tile:
    """Create a hidden tile."""
    return Tile()


@pytest.fixture
def mine_tile() -> Tile:
    """Create a tile containing a mine."""
    return Tile(is_mine=True)


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def store() -> GameStore:
    """Empty game store."""
    return GameStore()


@pytest.fixture
def handler() -> CommandHandler:
    """Command handler whose easy games use EASY_LAYOUT."""
    return CommandHandler(
        mine_generator_factory=lambda: FixedMineGenerator(EASY_LAYOUT)
    )


@pytest.fixture
def easy_layout() -> Set[Position]:
    return set(EASY_LAYOUT)


@pytest.fixture
def wall_layout() -> Set[Position]:
    return set(WALL_LAYOUT)
