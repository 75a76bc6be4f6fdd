"""
Game setup and play helpers for the Splendor rules engine.

This module provides:
- create_board: the original game's setup for 2 to 4 players
- legal_actions: every action the board currently accepts
- simulate_random_game / simulate_games: random-play simulation
"""
from __future__ import annotations
from dataclasses import dataclass
from itertools import combinations, combinations_with_replacement
import random
from typing import Dict, List, Optional

from tqdm import tqdm

from splendor_engine.config import SimulationConfig
from splendor_engine.core.constants import (
    Token, CardTier, ALL_TIERS, REGULAR_TOKENS, MAX_COLLECT, MAX_TOKENS_TOTAL,
    MIN_PLAYERS, MAX_PLAYERS, BANK_BY_PLAYERS, NOBLES_IN_PLAY,
)
from splendor_engine.core.actions import (
    Action, PassTurn, CollectPieces, ReserveCardFromDeck, ReserveCardFromBoard,
    BuyCard, SelectNoble,
)
from splendor_engine.core.board import Board, Phase, Winner
from splendor_engine.core.cards import (
    Identifiable, IdentifiedCard, CardId, original_cards, original_nobles,
)
from splendor_engine.core.errors import ActionFail
from splendor_engine.core.funds import Funds
from splendor_engine.core.player import Player


def create_board(num_players: int, rng: Optional[random.Random] = None) -> Board:
    """
    Create a board for the original game.

    Card ids are assigned 1 to 90 in catalog order (tier 1, then 2, then 3)
    before each tier's deck is shuffled; nobles are drawn at random.

    Args:
        num_players: Number of players (2-4); players get ids 1..N
        rng: Random source (defaults to a fresh unseeded one)

    Returns:
        The initial board

    Raises:
        ValueError: If the player count is not supported
    """
    if not MIN_PLAYERS <= num_players <= MAX_PLAYERS:
        raise ValueError(
            f"The original game is only defined for {MIN_PLAYERS} to {MAX_PLAYERS} players, "
            f"got {num_players}"
        )
    rng = rng or random.Random()

    players = [Player.new(n) for n in range(1, num_players + 1)]
    bank = Funds.of(*BANK_BY_PLAYERS[num_players])

    decks: Dict[CardTier, List[IdentifiedCard]] = {}
    next_id = 1
    for tier, cards in original_cards().items():
        deck = []
        for card in cards:
            deck.append(Identifiable(CardId(next_id), card))
            next_id += 1
        rng.shuffle(deck)
        decks[tier] = deck

    nobles = rng.sample(original_nobles(), NOBLES_IN_PLAY[num_players])

    return Board.create(players, bank, decks, nobles)


def _collect_shapes() -> List[List[Token]]:
    """All non-empty collect requests: 1-3 distinct tokens or a pair."""
    shapes: List[List[Token]] = []
    for size in range(1, MAX_COLLECT + 1):
        shapes.extend(list(combo) for combo in combinations(REGULAR_TOKENS, size))
    shapes.extend([token, token] for token in REGULAR_TOKENS)
    return shapes


def _discard_options(holdings: Funds, count: int) -> List[List[Token]]:
    """All multisets of `count` tokens that can be taken from holdings."""
    if count <= 0:
        return [[]]
    options = []
    kinds = [token for token, n in holdings.items() if n > 0]
    for combo in combinations_with_replacement(kinds, count):
        if holdings.covers(Funds.from_tokens(combo)):
            options.append(list(combo))
    return options


def _candidate_actions(board: Board) -> List[Action]:
    if board.phase == Phase.AWAITING_NOBLE_SELECTION:
        return [SelectNoble(noble.id) for noble in board.nobles]

    player = board.current_player
    candidates: List[Action] = [PassTurn()]

    for shape in _collect_shapes():
        excess = player.funds.total() + len(shape) - MAX_TOKENS_TOTAL
        holdings = player.funds + Funds.from_tokens(shape)
        for discard in _discard_options(holdings, excess):
            candidates.append(CollectPieces.of(shape, discard))

    for tier in ALL_TIERS:
        if board.get_deck(tier):
            candidates.append(ReserveCardFromDeck(tier))
        for card in board.get_cards_for_sale(tier):
            candidates.append(ReserveCardFromBoard(card.uid))
            candidates.append(BuyCard(card.uid))

    return candidates


def legal_actions(board: Board) -> List[Action]:
    """
    Get every action the board accepts for the current player.

    Collects are listed with the fewest discards that keep the player within
    the token cap. Candidates are kept only when the board applies them
    without an ActionFail.

    Args:
        board: Current board

    Returns:
        List of accepted actions
    """
    actions = []
    for action in _candidate_actions(board):
        try:
            board.do_action(action)
        except ActionFail:
            continue
        actions.append(action)
    return actions


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one simulated game."""
    board: Board
    turns: int

    @property
    def winner(self) -> Optional[Winner]:
        return self.board.winner

    @property
    def completed(self) -> bool:
        return self.board.is_over

    @property
    def scores(self) -> Dict[int, int]:
        return {p.id: p.total_victory_points() for p in self.board.players}


def simulate_random_game(
    config: Optional[SimulationConfig] = None,
    rng: Optional[random.Random] = None,
) -> SimulationResult:
    """
    Simulate a game with uniformly random legal actions.

    Play stops when a winner is declared or after config.max_turns actions.

    Args:
        config: Simulation parameters (defaults to SimulationConfig())
        rng: Random source; when omitted one is seeded from config.seed

    Returns:
        SimulationResult with the final board
    """
    config = config or SimulationConfig()
    rng = rng or random.Random(config.seed)

    board = create_board(config.num_players, rng)
    turns = 0
    while not board.is_over and turns < config.max_turns:
        actions = legal_actions(board)
        board = board.do_action(rng.choice(actions))
        turns += 1

    return SimulationResult(board=board, turns=turns)


def simulate_games(config: Optional[SimulationConfig] = None) -> List[SimulationResult]:
    """
    Simulate a batch of random games sharing one random source.

    Args:
        config: Simulation parameters; num_games sets the batch size

    Returns:
        One result per game
    """
    config = config or SimulationConfig()
    rng = random.Random(config.seed)

    results = []
    for _ in tqdm(range(config.num_games), desc="Simulating", disable=not config.show_progress):
        results.append(simulate_random_game(config, rng))
    return results
