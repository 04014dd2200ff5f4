"""
Text command layer for Minesweeper.

Turns player input lines such as ``dig 3 4`` into game commands,
using 1-based coordinates, and formats the replies.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, Hashable, Optional, Tuple

from .board import DIFFICULTIES, BoardConfig
from .game import Game, GameState
from .mines import MineGenerator, MinePlacementError
from .sessions import GameAlreadyRunningError, GameStore, NoActiveGameError
from .tile import FLAGGED_CODE, HIDDEN_CODE, MINE_CODE


logger = logging.getLogger(__name__)


# ============================================================================
# Messages
# ============================================================================

HELP_TEXT = "Commands: startgame, stopgame, dig, flag, unflag, help, resend"
START_USAGE = "Usage:\n" + "\n".join(
    f"startgame {name}" for name in DIFFICULTIES
)
ALREADY_RUNNING = (
    "You already have a running game!\n"
    "Use the command stopgame to end your current game if you would "
    "like to end it.\n"
    "Use the command resend if you would like to see your current progress."
)
NO_GAME = (
    "You don't have any running games! "
    "Use the command startgame [difficulty] to start a game."
)
OUT_OF_BOUNDS = "Coordinates out of bounds!"
STOPPED = "Successfully ended game."
PLACEMENT_FAILED = "Could not place mines, try again."

REJECTED = {
    "dig": "You can't dig there.",
    "flag": "You can't flag that tile.",
    "unflag": "That tile isn't flagged.",
}

SYMBOLS = {HIDDEN_CODE: ".", FLAGGED_CODE: "F", MINE_CODE: "*", 0: " "}


@dataclass
class Reply:
    """Text to show the player, with an optional board drawing."""

    message: str = ""
    board: Optional[str] = None


# ============================================================================
# Formatting
# ============================================================================

def parse_coordinates(text: str) -> Optional[Tuple[int, int]]:
    """
    Parse exactly two non-negative integers.

    Returns:
        (x, y) as typed, or None if the input is malformed.
    """
    parts = text.split()
    if len(parts) != 2 or not all(part.isdecimal() for part in parts):
        return None
    return int(parts[0]), int(parts[1])


def render_text(game: Game) -> str:
    """Draw the board as text with 1-based row and column labels."""
    obs = game.get_observation()
    label_width = len(str(max(game.width, game.height)))

    lines = [f"Mines left: {game.mines_remaining}"]
    lines.append(" " * (label_width + 1) + " ".join(
        str(x + 1).rjust(label_width) for x in range(game.width)
    ))
    for y in range(game.height):
        cells = " ".join(
            SYMBOLS.get(int(value), str(int(value))).rjust(label_width)
            for value in obs[y]
        )
        lines.append(f"{str(y + 1).rjust(label_width)} {cells}")
    return "\n".join(lines)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_summary(game: Game) -> str:
    """End-of-game summary with duration, grid size and mine count."""
    elapsed = game.elapsed or timedelta(0)
    minutes, seconds = divmod(int(elapsed.total_seconds()), 60)
    outcome = "won" if game.state == GameState.WON else "lost"
    return (
        f"Game {outcome} in {_plural(minutes, 'minute')} "
        f"and {_plural(seconds, 'second')}\n"
        f"Grid Size: {game.width} by {game.height}\n"
        f"Mine Count: {game.number_of_mines}"
    )


# ============================================================================
# Command Handler
# ============================================================================

class CommandHandler:
    """
    Dispatches player input lines against a :class:`GameStore`.

    Coordinates typed by players are 1-based and checked here before
    they reach the game.
    """

    def __init__(
        self,
        store: Optional[GameStore] = None,
        mine_generator_factory: Optional[Callable[[], MineGenerator]] = None,
    ) -> None:
        self.store = store or GameStore()
        self._mine_generator_factory = mine_generator_factory
        self._handlers: Dict[str, Callable[[Hashable, str], Reply]] = {
            "startgame": self._start_game,
            "stopgame": self._stop_game,
            "dig": lambda player, args: self._move("dig", player, args),
            "flag": lambda player, args: self._move("flag", player, args),
            "unflag": lambda player, args: self._move("unflag", player, args),
            "resend": self._resend,
            "help": lambda player, args: Reply(HELP_TEXT),
        }

    def handle(self, player: Hashable, line: str) -> Reply:
        """
        Run one input line for a player.

        Unknown commands get the help text.
        """
        parts = line.split(maxsplit=1)
        if not parts:
            return Reply(HELP_TEXT)
        name = parts[0]
        args = parts[1] if len(parts) > 1 else ""
        handler = self._handlers.get(name.lower())
        if handler is None:
            return Reply(HELP_TEXT)
        logger.debug("Player %s: %s %s", player, name, args)
        return handler(player, args.strip())

    def _start_game(self, player: Hashable, args: str) -> Reply:
        try:
            config = BoardConfig.from_difficulty(args)
        except ValueError:
            return Reply(START_USAGE)

        generator = None
        if self._mine_generator_factory is not None:
            generator = self._mine_generator_factory()
        try:
            game = self.store.start(player, config, generator)
        except GameAlreadyRunningError:
            return Reply(ALREADY_RUNNING)
        return Reply(
            f"Started a {config.width} by {config.height} game "
            f"with {config.num_mines} mines.",
            render_text(game),
        )

    def _stop_game(self, player: Hashable, args: str) -> Reply:
        try:
            self.store.stop(player)
        except NoActiveGameError:
            return Reply(NO_GAME)
        return Reply(STOPPED)

    def _resend(self, player: Hashable, args: str) -> Reply:
        try:
            with self.store.session(player) as game:
                return Reply(board=render_text(game))
        except NoActiveGameError:
            return Reply(NO_GAME)

    def _move(self, action: str, player: Hashable, args: str) -> Reply:
        coordinates = parse_coordinates(args)
        if coordinates is None:
            return Reply(f"Usage: {action} X Y")
        x, y = coordinates

        try:
            with self.store.session(player) as game:
                if not (1 <= x <= game.width and 1 <= y <= game.height):
                    return Reply(OUT_OF_BOUNDS)

                try:
                    accepted = getattr(game, action)(x - 1, y - 1)
                except MinePlacementError:
                    logger.warning(
                        "Mine placement failed for player %s", player,
                        exc_info=True,
                    )
                    return Reply(PLACEMENT_FAILED, render_text(game))
                message = "" if accepted else REJECTED[action]
                if game.is_finished:
                    message = format_summary(game)
                return Reply(message, render_text(game))
        except NoActiveGameError:
            return Reply(NO_GAME)
