"""
Random-play simulation for the Splendor rules engine.

Every move is drawn from enumerate_legal_actions and pushed through
apply_action, so a batch of simulated games exercises the whole engine:
validation, transitions, sub-flows and game end.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from splendor_rules.core.constants import GamePhase
from splendor_rules.core.game import GameState, PlayerInfo, create_game
from splendor_rules.core.engine import apply_action
from splendor_rules.core.availability import enumerate_legal_actions

logger = logging.getLogger(__name__)


def acting_player_id(state: GameState) -> str:
    """Get the player who must act next, including a pending discard or noble choice."""
    pending = state.pending_gem_discard or state.pending_noble_selection
    if pending is not None:
        return pending.player_id
    return state.current_player.id


def default_players(num_players: int) -> List[PlayerInfo]:
    return [PlayerInfo(id=f"player_{i + 1}", name=f"Player {i + 1}") for i in range(num_players)]


def simulate_random_game(
    num_players: int = 2,
    seed: Optional[int] = None,
    max_turns: int = 500
) -> Tuple[GameState, List[int]]:
    """
    Simulate a game in which every player picks uniformly among legal actions.

    Args:
        num_players: Number of players
        seed: Random seed for reproducibility (setup and move choice)
        max_turns: Maximum number of actions to apply

    Returns:
        Tuple of (final game state, scores in seat order)
    """
    rng = random.Random(seed)
    state = create_game(num_players, default_players(num_players), random_source=rng.random)

    for _ in range(max_turns):
        if state.phase == GamePhase.ENDED:
            break

        player_id = acting_player_id(state)
        actions = enumerate_legal_actions(state, player_id)
        if not actions:
            logger.warning(
                "Game %s: %s has no legal action in round %d, stopping",
                state.id, player_id, state.round
            )
            break

        state = apply_action(state, rng.choice(actions))
    else:
        if state.phase != GamePhase.ENDED:
            logger.debug("Game %s stopped after %d actions", state.id, max_turns)

    return state, [player.prestige_points for player in state.players]


@dataclass
class SimulationSummary:
    """Aggregate statistics over a batch of simulated games."""
    num_games: int
    num_players: int
    finished_games: int
    finished_ratio: float
    mean_winning_score: float
    max_winning_score: int
    mean_rounds: float
    wins_by_seat: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numGames": self.num_games,
            "numPlayers": self.num_players,
            "finishedGames": self.finished_games,
            "finishedRatio": self.finished_ratio,
            "meanWinningScore": self.mean_winning_score,
            "maxWinningScore": self.max_winning_score,
            "meanRounds": self.mean_rounds,
            "winsBySeat": list(self.wins_by_seat),
        }


def run_simulations(
    num_games: int = 100,
    num_players: int = 2,
    seed: Optional[int] = None,
    progress: bool = True,
    max_turns: int = 500
) -> SimulationSummary:
    """
    Run a batch of random games and summarize them.

    Args:
        num_games: Number of games to simulate
        num_players: Number of players per game
        seed: Base seed; game ``i`` uses ``seed + i``
        progress: Whether to show a progress bar
        max_turns: Maximum number of actions per game

    Returns:
        SimulationSummary with score, length and seat statistics
    """
    if num_games < 1:
        raise ValueError("num_games must be at least 1")

    winning_scores = np.zeros(num_games, dtype=np.int64)
    rounds = np.zeros(num_games, dtype=np.int64)
    finished = np.zeros(num_games, dtype=bool)
    wins_by_seat = np.zeros(num_players, dtype=np.int64)

    for i in tqdm(range(num_games), desc="Simulating games", disable=not progress):
        game_seed = seed + i if seed is not None else None
        state, scores = simulate_random_game(num_players, seed=game_seed, max_turns=max_turns)

        winning_scores[i] = max(scores)
        finished[i] = state.phase == GamePhase.ENDED
        # A finished game has advanced one round past its last
        rounds[i] = state.round - 1 if finished[i] else state.round
        for winner in state.winners:
            wins_by_seat[state.get_player_index(winner)] += 1

    return SimulationSummary(
        num_games=num_games,
        num_players=num_players,
        finished_games=int(finished.sum()),
        finished_ratio=float(finished.mean()),
        mean_winning_score=float(winning_scores.mean()),
        max_winning_score=int(winning_scores.max()),
        mean_rounds=float(rounds.mean()),
        wins_by_seat=wins_by_seat.tolist(),
    )
