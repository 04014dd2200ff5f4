"""
Tile module for Minesweeper game.

Represents individual tiles on the game board with their flags
(mine/flagged/revealed) and adjacent mine count.
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class TileState(Enum):
    """Possible visual states of a tile."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


HIDDEN_CODE = -1
FLAGGED_CODE = -2
MINE_CODE = 9


# ============================================================================
# Tile Data Class
# ============================================================================

@dataclass
class Tile:
    """
    Represents a single tile in the Minesweeper grid.

    Attributes:
        is_mine: Whether this tile contains a mine. Set only during
            mine generation.
        is_flagged: Whether the player has flagged this tile.
        is_revealed: Whether this tile has been dug or cascaded into.
            Never goes back to False once set.
        adjacent_mines: Count of mines in neighboring tiles (0-8).
    """

    is_mine: bool = False
    is_flagged: bool = False
    is_revealed: bool = False
    adjacent_mines: int = 0

    def reveal(self) -> bool:
        """
        Reveal this tile, clearing any flag on it.

        Returns:
            True if the tile was revealed, False if it already was.
        """
        if self.is_revealed:
            return False
        self.is_revealed = True
        self.is_flagged = False
        return True

    @property
    def state(self) -> TileState:
        """Visual state of the tile."""
        if self.is_revealed:
            return TileState.REVEALED
        if self.is_flagged:
            return TileState.FLAGGED
        return TileState.HIDDEN

    @property
    def is_hidden(self) -> bool:
        """Check if tile is neither revealed nor flagged."""
        return self.state == TileState.HIDDEN

    def to_observation(self, disclose_mine: bool = False) -> int:
        """
        Convert tile to an observation value for renderers.

        Args:
            disclose_mine: Show unflagged hidden mines (used once the
                game is lost).

        Returns:
            -1: Hidden tile
            -2: Flagged tile
            0-8: Revealed tile with adjacent mine count
            9: Revealed (or disclosed) mine
        """
        if self.is_revealed:
            return MINE_CODE if self.is_mine else self.adjacent_mines
        if self.is_flagged:
            return FLAGGED_CODE
        if disclose_mine and self.is_mine:
            return MINE_CODE
        return HIDDEN_CODE
