"""
Per-player game storage.

Keeps one in-progress game per player and serializes commands
against each player's game.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Hashable, Iterator, Optional, Tuple

from .board import BoardConfig
from .game import Game
from .mines import MineGenerator


logger = logging.getLogger(__name__)


# ============================================================================
# Errors
# ============================================================================

class SessionError(Exception):
    """Base class for session storage errors."""


class GameAlreadyRunningError(SessionError):
    """Raised when a player starts a game while one is in progress."""


class NoActiveGameError(SessionError):
    """Raised when a player has no game in progress."""


# ============================================================================
# Game Store
# ============================================================================

class GameStore:
    """
    Maps player ids to their in-progress games.

    Each player gets their own lock, so commands for one player run one
    at a time while different players never wait on each other. A game
    that ends inside :meth:`session` is discarded when the block exits.
    """

    def __init__(
        self, game_factory: Callable[..., Game] = Game
    ) -> None:
        """
        Initialize an empty store.

        Args:
            game_factory: Callable building a Game from a config and an
                optional mine generator.
        """
        self._game_factory = game_factory
        self._games: Dict[Hashable, Game] = {}
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._guard = threading.Lock()

    def __contains__(self, player: Hashable) -> bool:
        with self._guard:
            return player in self._games

    def __len__(self) -> int:
        with self._guard:
            return len(self._games)

    def start(
        self,
        player: Hashable,
        config: BoardConfig,
        mine_generator: Optional[MineGenerator] = None,
    ) -> Game:
        """
        Create a new game for a player.

        Raises:
            GameAlreadyRunningError: If the player already has a game.
        """
        with self._guard:
            if player in self._games:
                raise GameAlreadyRunningError(player)
            if mine_generator is None:
                game = self._game_factory(config)
            else:
                game = self._game_factory(config, mine_generator)
            self._games[player] = game
            self._locks[player] = threading.Lock()

        logger.info("Started game for player %s", player)
        return game

    @contextmanager
    def session(self, player: Hashable) -> Iterator[Game]:
        """
        Exclusive access to a player's game.

        Raises:
            NoActiveGameError: If the player has no game.
        """
        lock, game = self._acquire(player)
        try:
            yield game
            if game.is_finished:
                self._discard(player)
                logger.info(
                    "Discarded finished game for player %s (%s)",
                    player, game.state.name,
                )
        finally:
            lock.release()

    def stop(self, player: Hashable) -> Game:
        """
        Remove a player's game and return it.

        Raises:
            NoActiveGameError: If the player has no game.
        """
        lock, game = self._acquire(player)
        try:
            self._discard(player)
        finally:
            lock.release()
        logger.info("Stopped game for player %s", player)
        return game

    def _acquire(self, player: Hashable) -> Tuple[threading.Lock, Game]:
        """
        Take the player's lock and return it with their game.

        A lock that was dropped while this thread waited on it belongs
        to a finished game, so the lookup is retried.
        """
        while True:
            with self._guard:
                lock = self._locks.get(player)
            if lock is None:
                raise NoActiveGameError(player)

            lock.acquire()
            with self._guard:
                if self._locks.get(player) is lock:
                    return lock, self._games[player]
            lock.release()

    def _discard(self, player: Hashable) -> None:
        # Games and locks are added and removed together.
        with self._guard:
            self._games.pop(player, None)
            self._locks.pop(player, None)
