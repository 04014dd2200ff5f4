#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--seed N] [--verbose]
    python main.py play --start easy

Inside a game, type the same commands a chat player would:
startgame easy|medium|hard, dig X Y, flag X Y, unflag X Y,
resend, stopgame, help. Coordinates are 1-based. Type quit to leave.
"""
import argparse
import logging
import random
from typing import Optional

from minesweeper import CommandHandler, MineGenerator, Reply


PLAYER = "local"


def print_reply(reply: Reply) -> None:
    """Show a reply on the terminal."""
    if reply.board:
        print(reply.board)
    if reply.message:
        print(reply.message)


def play(args: argparse.Namespace) -> None:
    """Play Minesweeper interactively on the terminal."""
    rng: Optional[random.Random] = None
    if args.seed is not None:
        rng = random.Random(args.seed)

    handler = CommandHandler(
        mine_generator_factory=lambda: MineGenerator(rng=rng)
    )

    if args.start:
        print_reply(handler.handle(PLAYER, f"startgame {args.start}"))
    else:
        print_reply(handler.handle(PLAYER, "help"))

    while True:
        try:
            line = input("> ")
        except EOFError:
            break
        if line.strip().lower() in ("quit", "exit"):
            break
        if line.strip():
            print_reply(handler.handle(PLAYER, line))


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Minesweeper - play on the terminal"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log game events"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Play interactively")
    play_parser.add_argument(
        "--seed", type=int, default=None, help="Seed for mine placement"
    )
    play_parser.add_argument(
        "--start",
        choices=["easy", "medium", "hard"],
        default=None,
        help="Start a game right away at this difficulty",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        play(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
