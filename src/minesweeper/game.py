"""
Game module for Minesweeper.

Implements the game state machine: first-dig mine placement, the
cascading reveal, flag bookkeeping and win/loss determination.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum, auto
from typing import Callable, Optional

import numpy as np

from .board import Board, BoardConfig, Position
from .mines import MineGenerator
from .tile import Tile


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    NOT_STARTED = auto()
    PLAYING = auto()
    WON = auto()
    LOST = auto()


TERMINAL_STATES = (GameState.WON, GameState.LOST)


def utc_now() -> datetime:
    """Current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


# ============================================================================
# Game Class
# ============================================================================

@dataclass
class Game:
    """
    A single Minesweeper game.

    Coordinates are 0-based ``(x, y)``. Every command checks its own
    preconditions (bounds included) and returns False without changing
    anything when they fail, so each command is defined in every state.
    Commands that are accepted stamp ``last_move_time``.

    Not safe for concurrent mutation; see
    :class:`~minesweeper.sessions.GameStore` for serialized access.
    """

    config: BoardConfig = field(default_factory=BoardConfig)
    mine_generator: MineGenerator = field(default_factory=MineGenerator)
    clock: Callable[[], datetime] = utc_now
    _board: Board = field(init=False, repr=False)
    _state: GameState = field(init=False, default=GameState.NOT_STARTED)
    _unrevealed_safe_tiles: int = field(init=False, default=0)
    _placed_flag_count: int = field(init=False, default=0)
    _time_started: Optional[datetime] = field(init=False, default=None)
    _last_move_time: Optional[datetime] = field(init=False, default=None)

    def __post_init__(self) -> None:
        """Create the empty board."""
        self._board = Board(self.config.width, self.config.height)
        self._unrevealed_safe_tiles = self.config.area

    # ========================================================================
    # Commands
    # ========================================================================

    def dig(self, x: int, y: int) -> bool:
        """
        Dig the tile at (x, y).

        The first dig places mines around a safe zone and starts the
        game. Later digs either lose the game on a mine or reveal the
        tile and cascade through empty regions.

        Args:
            x: Column to dig.
            y: Row to dig.

        Returns:
            True if the dig was accepted, False if it was a no-op
            (out of bounds, flagged tile, or game over).

        Raises:
            MinePlacementError: If mines could not be placed on the
                first dig. The game stays unstarted.
        """
        if not self._board.in_bounds(x, y):
            return False
        if self._state == GameState.NOT_STARTED:
            self._start((x, y))
            return True
        if self._state != GameState.PLAYING:
            return False

        tile = self._board.tile((x, y))
        if tile.is_flagged:
            return False

        self._last_move_time = self.clock()
        if tile.is_mine:
            tile.reveal()
            self._state = GameState.LOST
            logger.info("Game lost on mine at %s", (x, y))
            return True

        self._reveal((x, y))
        self._check_win_condition()
        return True

    def flag(self, x: int, y: int) -> bool:
        """
        Flag a hidden tile.

        Returns:
            True if the flag was placed, False if the game is not being
            played, the tile is revealed or already flagged, or every
            flag is already in use.
        """
        tile = self._playable_tile(x, y)
        if tile is None or tile.is_revealed or tile.is_flagged:
            return False
        if self._placed_flag_count >= self.config.num_mines:
            return False

        tile.is_flagged = True
        self._placed_flag_count += 1
        self._last_move_time = self.clock()
        return True

    def unflag(self, x: int, y: int) -> bool:
        """
        Remove a flag.

        Returns:
            True if a flag was removed, False otherwise.
        """
        tile = self._playable_tile(x, y)
        if tile is None or not tile.is_flagged:
            return False

        tile.is_flagged = False
        self._placed_flag_count -= 1
        self._last_move_time = self.clock()
        return True

    # ========================================================================
    # State Machine Internals
    # ========================================================================

    def _start(self, first_dig: Position) -> None:
        """Place mines, reveal the first dig and begin playing."""
        self.mine_generator.generate(
            self._board, self.config.num_mines, first_dig
        )
        self._time_started = self.clock()
        self._last_move_time = self._time_started
        self._state = GameState.PLAYING
        logger.info(
            "Started %dx%d game with %d mines",
            self.config.width, self.config.height, self.config.num_mines,
        )

        self._reveal(first_dig)
        self._check_win_condition()

    def _playable_tile(self, x: int, y: int) -> Optional[Tile]:
        """Tile at (x, y) if the game is in play and it is in bounds."""
        if self._state != GameState.PLAYING:
            return None
        return self._board.get_tile(x, y)

    def _reveal(self, start: Position) -> int:
        """
        Reveal a tile and flood through its zero-count region.

        Every tile of the connected region of empty tiles is revealed,
        together with the numbered tiles bordering it. Mines are never
        revealed here.

        Returns:
            Number of tiles newly revealed.
        """
        revealed = 0
        pending = [start]
        while pending:
            position = pending.pop()
            tile = self._board.tile(position)
            if tile.is_revealed or tile.is_mine:
                continue

            if tile.is_flagged:
                self._placed_flag_count -= 1
            tile.reveal()
            self._unrevealed_safe_tiles -= 1
            revealed += 1

            if tile.adjacent_mines == 0:
                pending.extend(self._board.neighbors(*position))

        logger.debug("Revealed %d tiles from %s", revealed, start)
        return revealed

    def _check_win_condition(self) -> None:
        """Win once only mines remain unrevealed."""
        if self._unrevealed_safe_tiles == self.config.num_mines:
            self._state = GameState.WON
            logger.info("Game won after %s", self.elapsed)

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def board(self) -> Board:
        """The tile grid."""
        return self._board

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def number_of_mines(self) -> int:
        return self.config.num_mines

    @property
    def unrevealed_safe_tiles(self) -> int:
        """Tiles not yet revealed, counting mines until one is dug."""
        return self._unrevealed_safe_tiles

    @property
    def placed_flag_count(self) -> int:
        return self._placed_flag_count

    @property
    def mines_remaining(self) -> int:
        """Mine count minus flags placed, as shown to the player."""
        return self.config.num_mines - self._placed_flag_count

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def is_playing(self) -> bool:
        """Check if game is in progress."""
        return self._state == GameState.PLAYING

    @property
    def is_finished(self) -> bool:
        """Check if game was won or lost."""
        return self._state in TERMINAL_STATES

    @property
    def time_started(self) -> Optional[datetime]:
        return self._time_started

    @property
    def last_move_time(self) -> Optional[datetime]:
        return self._last_move_time

    @property
    def elapsed(self) -> Optional[timedelta]:
        """Time between the first dig and the latest move."""
        if self._time_started is None or self._last_move_time is None:
            return None
        return self._last_move_time - self._time_started

    def get_tile(self, x: int, y: int) -> Optional[Tile]:
        """Get tile at position, or None if out of bounds."""
        return self._board.get_tile(x, y)

    def get_observation(self) -> np.ndarray:
        """Board observation, with every mine shown once the game is lost."""
        return self._board.get_observation(
            disclose_mines=self._state == GameState.LOST
        )
