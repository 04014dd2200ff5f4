"""
Board module for Minesweeper game.

Implements the board configuration, difficulty presets and the
tile grid with its neighbor utilities.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .tile import Tile


Position = Tuple[int, int]


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper game.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place.
    """

    width: int = 10
    height: int = 8
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")
        if self.num_mines < 1:
            raise ValueError("Board needs at least one mine")
        max_mines = self.width * self.height - 1
        if self.num_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @property
    def area(self) -> int:
        """Total number of tiles."""
        return self.width * self.height

    @classmethod
    def from_difficulty(cls, name: str) -> "BoardConfig":
        """
        Look up a preset by name.

        Args:
            name: One of "easy", "medium" or "hard" (case-insensitive).

        Returns:
            The matching preset configuration.
        """
        try:
            return DIFFICULTIES[name.lower()]
        except KeyError:
            choices = ", ".join(DIFFICULTIES)
            raise ValueError(
                f"Unknown difficulty {name!r} (choose from {choices})"
            ) from None


# Preset difficulty levels
EASY = BoardConfig(10, 8, 10)
MEDIUM = BoardConfig(18, 14, 40)
HARD = BoardConfig(24, 20, 99)

DIFFICULTIES: Dict[str, BoardConfig] = {
    "easy": EASY,
    "medium": MEDIUM,
    "hard": HARD,
}


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Grid of tiles addressed by 0-based ``(x, y)`` coordinates.

    ``x`` is the column (``0 <= x < width``) and ``y`` the row
    (``0 <= y < height``). The board holds no game rules; the
    :class:`~minesweeper.game.Game` drives all mutation.
    """

    width: int
    height: int
    _grid: List[List[Tile]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        """Create empty grid of tiles."""
        if self.width < 1 or self.height < 1:
            raise ValueError("Board dimensions must be positive")
        self._grid = [
            [Tile() for _ in range(self.width)]
            for _ in range(self.height)
        ]

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, x: int, y: int) -> List[Position]:
        """
        Get valid neighboring tile positions.

        Args:
            x: Column of center tile.
            y: Row of center tile.

        Returns:
            List of (x, y) tuples for in-bounds neighbors. Edges are
            clipped, never wrapped.
        """
        result = []
        for delta_y in (-1, 0, 1):
            for delta_x in (-1, 0, 1):
                if delta_x == 0 and delta_y == 0:
                    continue
                new_x = x + delta_x
                new_y = y + delta_y
                if self.in_bounds(new_x, new_y):
                    result.append((new_x, new_y))
        return result

    def positions(self) -> Iterator[Position]:
        """Iterate over every position, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    # ========================================================================
    # State Accessors
    # ========================================================================

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        """Get tile at position, or None if out of bounds."""
        if not self.in_bounds(x, y):
            return None
        return self._grid[y][x]

    def tile(self, position: Position) -> Tile:
        """Get tile at an in-bounds position."""
        x, y = position
        return self._grid[y][x]

    def mine_positions(self) -> List[Position]:
        """Positions of every mine on the board."""
        return [pos for pos in self.positions() if self.tile(pos).is_mine]

    def count_mines(self) -> int:
        """Number of mines currently placed."""
        return len(self.mine_positions())

    def count_adjacent_mines(self, x: int, y: int) -> int:
        """Count mines in the in-bounds 8-neighborhood of a tile."""
        return sum(
            1 for pos in self.neighbors(x, y) if self.tile(pos).is_mine
        )

    def get_observation(self, disclose_mines: bool = False) -> np.ndarray:
        """
        Get board state as a numpy array for renderers.

        Args:
            disclose_mines: Show hidden mines as 9.

        Returns:
            2D int8 array of shape (height, width) where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = mine
        """
        obs = np.zeros((self.height, self.width), dtype=np.int8)
        for x, y in self.positions():
            obs[y, x] = self._grid[y][x].to_observation(disclose_mines)
        return obs
