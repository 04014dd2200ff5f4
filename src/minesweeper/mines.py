"""
Mine generation for Minesweeper.

Places mines uniformly at random while keeping the area around the
player's first dig clear, then fills in adjacency counts.
"""
import logging
import math
import random
from typing import Optional, Set

from .board import Board, Position


logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

# Candidates whose truncated distance to the first dig is below this
# are rejected; with 3 the cleared area is the 5x5 square around it.
EXCLUSION_DISTANCE = 3

# Sampling attempts allowed per board tile before giving up.
ATTEMPTS_PER_TILE = 100


class MinePlacementError(RuntimeError):
    """Raised when mines cannot be placed within the attempt budget."""


def truncated_distance(a: Position, b: Position) -> int:
    """Euclidean distance between two positions, truncated to an int."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return math.isqrt(dx * dx + dy * dy)


def is_excluded(
    candidate: Position, first_dig: Position, exclusion_distance: int
) -> bool:
    """Check if a candidate lies inside the first dig's safe zone."""
    return truncated_distance(candidate, first_dig) < exclusion_distance


# ============================================================================
# Mine Generator
# ============================================================================

class MineGenerator:
    """
    Rejection sampler for mine placement.

    Each mine position is drawn uniformly from the whole board and
    redrawn while it is already mined or too close to the first dig.
    If the board is too small for the safe zone to leave room for all
    mines, the zone shrinks one step at a time, down to the dug tile
    alone.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        exclusion_distance: int = EXCLUSION_DISTANCE,
        max_attempts: Optional[int] = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            rng: Random source (default: a fresh unseeded Random).
            exclusion_distance: Safe-zone distance around the first dig.
            max_attempts: Cap on total draws (default: 100 per tile).
        """
        self.rng = rng or random.Random()
        self.exclusion_distance = exclusion_distance
        self.max_attempts = max_attempts

    def generate(
        self, board: Board, num_mines: int, first_dig: Position
    ) -> Set[Position]:
        """
        Place mines on an empty board and compute adjacency counts.

        Args:
            board: Board to populate. Left untouched on failure.
            num_mines: Exact number of mines to place.
            first_dig: (x, y) of the player's first dig.

        Returns:
            Set of mine positions.

        Raises:
            MinePlacementError: If the attempt budget runs out.
        """
        exclusion = self.feasible_exclusion(board, num_mines, first_dig)
        if exclusion < self.exclusion_distance:
            logger.warning(
                "Safe zone too large for %dx%d board with %d mines; "
                "shrinking exclusion distance from %d to %d",
                board.width, board.height, num_mines,
                self.exclusion_distance, exclusion,
            )

        mines = self._sample(board, num_mines, first_dig, exclusion)
        for position in mines:
            board.tile(position).is_mine = True
        self.compute_adjacency(board)

        logger.debug(
            "Placed %d mines around first dig at %s", len(mines), first_dig
        )
        return mines

    def feasible_exclusion(
        self, board: Board, num_mines: int, first_dig: Position
    ) -> int:
        """
        Largest exclusion distance that still leaves room for every mine.

        Distance 2 keeps the 3x3 neighborhood clear and distance 1 only
        the dug tile, which always fits since a board has more tiles
        than mines.
        """
        exclusion = self.exclusion_distance
        while (
            exclusion > 1
            and self.count_candidates(board, first_dig, exclusion) < num_mines
        ):
            exclusion -= 1
        return exclusion

    def count_candidates(
        self, board: Board, first_dig: Position, exclusion_distance: int
    ) -> int:
        """Number of tiles outside the safe zone."""
        return sum(
            1 for pos in board.positions()
            if not is_excluded(pos, first_dig, exclusion_distance)
        )

    def _sample(
        self,
        board: Board,
        num_mines: int,
        first_dig: Position,
        exclusion_distance: int,
    ) -> Set[Position]:
        """Draw distinct mine positions by rejection sampling."""
        budget = self.max_attempts
        if budget is None:
            budget = ATTEMPTS_PER_TILE * board.width * board.height

        mines: Set[Position] = set()
        attempts = 0
        while len(mines) < num_mines:
            if attempts >= budget:
                raise MinePlacementError(
                    f"Placed only {len(mines)} of {num_mines} mines "
                    f"after {attempts} attempts"
                )
            attempts += 1
            candidate = (
                self.rng.randrange(board.width),
                self.rng.randrange(board.height),
            )
            if candidate in mines:
                continue
            if is_excluded(candidate, first_dig, exclusion_distance):
                continue
            mines.add(candidate)
        return mines

    @staticmethod
    def compute_adjacency(board: Board) -> None:
        """Calculate adjacent mine counts for all non-mine tiles."""
        for x, y in board.positions():
            tile = board.tile((x, y))
            if not tile.is_mine:
                tile.adjacent_mines = board.count_adjacent_mines(x, y)
