#!/usr/bin/env python
"""
Command-line entry point for running random-play simulations.

Usage:
    splendor-simulate --players 3 --seed 7           # one game, final board
    splendor-simulate --players 2 --games 200        # batch summary
"""
import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from splendor_rules import __version__
from splendor_rules.core.constants import (
    CardTier, GamePhase, ALL_GEMS, REGULAR_GEMS, GEM_DISPLAY_NAMES, GEM_STYLES
)
from splendor_rules.core.game import GameState
from splendor_rules.simulation import SimulationSummary, run_simulations, simulate_random_game


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate Splendor games with random legal moves")
    parser.add_argument("--players", type=int, default=2, choices=[2, 3, 4],
                        help="Number of players per game")
    parser.add_argument("--games", type=int, default=1,
                        help="Number of games; more than one prints a batch summary")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducible games")
    parser.add_argument("--max-turns", type=int, default=500,
                        help="Maximum number of actions per game")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _gem_cell(color, count: int) -> str:
    style = GEM_STYLES[color]
    return f"[{style}]{count}[/{style}]" if count else "[dim]0[/dim]"


def render_game(state: GameState) -> Table:
    """Build a table with each player's final holdings."""
    status = "ended" if state.phase == GamePhase.ENDED else f"{state.phase.value} (stopped)"
    table = Table(title=f"Game {state.id}: {status} after {state.round} rounds", expand=True)
    table.add_column("Player", style="cyan", no_wrap=True)
    table.add_column("Points", style="magenta", justify="right")
    for color in ALL_GEMS:
        table.add_column(GEM_DISPLAY_NAMES[color], justify="right")
    table.add_column("Cards", justify="right")
    table.add_column("Reserved", justify="right")
    table.add_column("Nobles", justify="right")

    for player in state.players:
        name = player.name
        if player.id in state.winners:
            name = f"[bold green]{name} *[/]"
        gem_cells = []
        for color in ALL_GEMS:
            cell = _gem_cell(color, player.gems.get(color, 0))
            if color in REGULAR_GEMS and player.bonuses.get(color, 0):
                cell += f" (+{player.bonuses[color]})"
            gem_cells.append(cell)
        table.add_row(
            name,
            str(player.prestige_points),
            *gem_cells,
            str(len(player.purchased_cards)),
            str(len(player.reserved_cards)),
            str(len(player.nobles)),
        )
    return table


def render_board(state: GameState) -> Panel:
    lines = []
    for tier in CardTier:
        slots = state.market.get(tier, [])
        cards = ", ".join(card.id if card is not None else "-" for card in slots)
        lines.append(f"Tier {tier.value} [dim]({len(state.decks.get(tier, []))} in deck)[/dim]: {cards}")
    lines.append("Bank: " + "  ".join(
        f"{GEM_DISPLAY_NAMES[color]} {_gem_cell(color, state.bank.get(color, 0))}" for color in ALL_GEMS
    ))
    lines.append("Nobles left: " + (", ".join(noble.id for noble in state.nobles) or "none"))
    return Panel("\n".join(lines), title="Board", border_style="blue")


def render_summary(summary: SimulationSummary) -> Table:
    """Build a table with batch statistics."""
    table = Table(title=f"{summary.num_games} games, {summary.num_players} players", expand=True)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")

    table.add_row("Finished games", f"{summary.finished_games} ({summary.finished_ratio * 100:.1f}%)")
    table.add_row("Mean winning score", f"{summary.mean_winning_score:.2f}")
    table.add_row("Best winning score", str(summary.max_winning_score))
    table.add_row("Mean rounds", f"{summary.mean_rounds:.1f}")
    for seat, wins in enumerate(summary.wins_by_seat):
        table.add_row(f"Wins from seat {seat + 1}", str(wins))
    return table


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    console = Console()

    if args.games < 1:
        console.print("[red]--games must be at least 1[/red]")
        return 2

    if args.games == 1:
        state, _ = simulate_random_game(args.players, seed=args.seed, max_turns=args.max_turns)
        console.print(render_board(state))
        console.print(render_game(state))
        return 0

    summary = run_simulations(
        num_games=args.games,
        num_players=args.players,
        seed=args.seed,
        progress=True,
        max_turns=args.max_turns,
    )
    console.print(render_summary(summary))
    return 0


if __name__ == "__main__":
    sys.exit(main())
