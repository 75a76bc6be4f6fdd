"""
Command-line entry points.

splendor-play runs a hot-seat game in the terminal: every seat picks one of
the numbered legal actions in turn. splendor-simulate plays random games and
prints a summary.

Example usage:
    # Hot-seat game for three players
    splendor-play --players 3

    # 100 random four-player games
    splendor-simulate --players 4 --games 100 --seed 7
"""
import argparse
import logging
import random
import sys
from collections import Counter
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import IntPrompt
from rich.table import Table

from splendor_engine.config import GameConfig, SimulationConfig
from splendor_engine.core.actions import Action
from splendor_engine.core.board import Board
from splendor_engine.core.cards import IdentifiedCard
from splendor_engine.core.constants import ALL_TIERS, ALL_TOKENS, TOKEN_STYLES, TOKEN_DISPLAY_NAMES
from splendor_engine.core.errors import ActionFail
from splendor_engine.core.funds import Funds
from splendor_engine.core.game import create_board, legal_actions, simulate_games

logger = logging.getLogger(__name__)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def format_funds(funds: Funds) -> str:
    """Rich markup for a funds value, skipping empty piles."""
    parts = [
        f"[{TOKEN_STYLES[token]}]{count} {TOKEN_DISPLAY_NAMES[token]}[/]"
        for token, count in funds.items() if count
    ]
    return " ".join(parts) or "-"


def format_card(card: IdentifiedCard) -> str:
    produces = card.data.produces
    return (f"#{card.uid} [{TOKEN_STYLES[produces]}]{TOKEN_DISPLAY_NAMES[produces]}[/] "
            f"{card.data.points}pt ({format_funds(card.data.cost)})")


def render_board(board: Board) -> None:
    """Display the board as rich tables."""
    bank = Table(title="Bank")
    for token in ALL_TOKENS:
        bank.add_column(TOKEN_DISPLAY_NAMES[token], style=TOKEN_STYLES[token], justify="right")
    bank.add_row(*(str(board.bank[token]) for token in ALL_TOKENS))
    console.print(bank)

    market = Table(title="Cards for sale")
    market.add_column("Tier", justify="center")
    market.add_column("Deck", justify="right")
    market.add_column("Cards")
    for tier in reversed(ALL_TIERS):
        cards = "\n".join(format_card(c) for c in board.get_cards_for_sale(tier)) or "-"
        market.add_row(str(tier.value), str(len(board.get_deck(tier))), cards)
    console.print(market)

    nobles = ", ".join(f"#{n.id} ({format_funds(n.cost)})" for n in board.nobles) or "-"
    console.print(f"[bold]Nobles:[/] {nobles}")

    players = Table(title="Players")
    players.add_column("Player")
    players.add_column("Points", justify="right")
    players.add_column("Tokens")
    players.add_column("Production")
    players.add_column("Reserved")
    players.add_column("Nobles", justify="right")
    for index, player in enumerate(board.players):
        marker = "> " if index == board.player_turn else "  "
        players.add_row(
            f"{marker}{player.id}",
            str(player.total_victory_points()),
            format_funds(player.funds),
            format_funds(player.production_funds()),
            "\n".join(format_card(c) for c in player.reserved_cards) or "-",
            str(len(player.nobles)),
        )
    console.print(players)


def choose_action(board: Board, actions: List[Action]) -> Action:
    """Ask the current seat for one of the numbered actions."""
    for number, action in enumerate(actions, start=1):
        console.print(f"  [cyan]{number:3d}[/] {action}")
    choice = IntPrompt.ask(
        f"Player {board.current_player.id}, choose an action",
        choices=[str(n) for n in range(1, len(actions) + 1)],
        show_choices=False,
    )
    return actions[choice - 1]


def play_game(config: GameConfig) -> Board:
    """Run a hot-seat game until a winner is declared."""
    board = create_board(config.num_players, random.Random(config.seed))
    while not board.is_over:
        render_board(board)
        actor = board.current_player.id
        action = choose_action(board, legal_actions(board))
        try:
            board = board.do_action(action)
        except ActionFail as e:
            logger.warning("Action refused: %s", e)
            continue
        logger.info("Player %s: %s", actor, action)

    render_board(board)
    console.print(f"[bold yellow]{board.winner}[/]")
    return board


def parse_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments for a hot-seat game."""
    parser = argparse.ArgumentParser(description="Play Splendor in the terminal")
    parser.add_argument("--players", type=int, default=2,
                        help="Number of players (2-4)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for the deal")
    parser.add_argument("--debug", action="store_true",
                        help="Show debug information")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        config = GameConfig(num_players=args.players, seed=args.seed)
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        return 2

    console.print("[bold yellow]Welcome to Splendor![/]")
    try:
        play_game(config)
    except KeyboardInterrupt:
        console.print("\nGame interrupted by user.")
    return 0


def parse_simulate_args(argv: Optional[List[str]] = None):
    """Parse command-line arguments for random simulation."""
    parser = argparse.ArgumentParser(description="Simulate random Splendor games")
    parser.add_argument("--players", type=int, default=2,
                        help="Number of players (2-4)")
    parser.add_argument("--games", type=int, default=10,
                        help="Number of games to simulate")
    parser.add_argument("--max-turns", type=int, default=500,
                        help="Actions per game before it is abandoned")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed")
    parser.add_argument("--no-progress", action="store_true",
                        help="Hide the progress bar")
    parser.add_argument("--debug", action="store_true",
                        help="Show debug information")
    return parser.parse_args(argv)


def simulate_main(argv: Optional[List[str]] = None) -> int:
    """Simulate random games and print a summary table."""
    args = parse_simulate_args(argv)
    setup_logging(args.debug)

    try:
        config = SimulationConfig(
            num_players=args.players,
            max_turns=args.max_turns,
            num_games=args.games,
            seed=args.seed,
            show_progress=not args.no_progress,
        )
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        return 2

    logger.info("Simulating with %s", config)
    results = simulate_games(config)

    completed = [r for r in results if r.completed]
    wins: Counter = Counter()
    draws = 0
    for result in completed:
        if result.winner.is_draw:
            draws += 1
        else:
            wins[result.winner.player_ids[0]] += 1

    summary = Table(title="Simulation summary")
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("Games", str(len(results)))
    summary.add_row("Completed", str(len(completed)))
    summary.add_row("Abandoned", str(len(results) - len(completed)))
    if results:
        summary.add_row("Average actions", f"{sum(r.turns for r in results) / len(results):.1f}")
    summary.add_row("Draws", str(draws))
    for player_id in range(1, config.num_players + 1):
        summary.add_row(f"Wins for player {player_id}", str(wins[player_id]))
    console.print(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
