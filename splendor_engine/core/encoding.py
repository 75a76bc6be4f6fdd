"""
Numeric encodings of players and boards.

These fixed-length float32 vectors are meant for downstream agents and
analysis. Counts are normalized by their rule limits (or a generous
assumed maximum where the rules set none), and the board vector is padded
to the maximum number of players.
"""
from typing import List

import numpy as np

from splendor_engine.core.constants import (
    ALL_TOKENS, REGULAR_TOKENS, ALL_TIERS, CARDS_PER_TIER, CARDS_FOR_SALE_PER_TIER,
    MAX_PLAYERS, MAX_RESERVED_CARDS, MAX_TOKENS_TOTAL, WINNING_POINTS_THRESHOLD,
    TOTAL_NOBLES, BANK_BY_PLAYERS,
)
from splendor_engine.core.board import Board, Phase, RoundType
from splendor_engine.core.player import Player

# Assumed maxima for counts the rules leave unbounded
MAX_PRODUCTION_PER_TOKEN = 10.0
MAX_PRODUCTION_CARDS = 20.0
MAX_NOBLES_PER_PLAYER = 5.0
MAX_BANK_PILE = float(max(max(bank) for bank in BANK_BY_PLAYERS.values()))

PLAYER_FEATURES = len(ALL_TOKENS) + len(REGULAR_TOKENS) + 4


def encode_player(player: Player) -> np.ndarray:
    """
    Encode a player as a feature vector.

    Layout: stored tokens per token, production per regular token, victory
    points, production card count, reserved card count, noble count.

    Returns:
        Array of shape (PLAYER_FEATURES,) and dtype float32
    """
    features: List[float] = []

    # Stored tokens (normalized by the storage cap)
    features.extend(player.funds[token] / MAX_TOKENS_TOTAL for token in ALL_TOKENS)

    production = player.production_funds()
    features.extend(production[token] / MAX_PRODUCTION_PER_TOKEN for token in REGULAR_TOKENS)

    features.append(player.total_victory_points() / WINNING_POINTS_THRESHOLD)
    features.append(len(player.production_cards) / MAX_PRODUCTION_CARDS)
    features.append(len(player.reserved_cards) / MAX_RESERVED_CARDS)
    features.append(len(player.nobles) / MAX_NOBLES_PER_PLAYER)

    return np.asarray(features, dtype=np.float32)


def encode_board(board: Board) -> np.ndarray:
    """
    Encode a board as a feature vector.

    Layout: phase and round flags, bank per token, deck and sale window sizes
    per tier, nobles left, one-hot current seat, then each player's encoding
    (zeros for empty seats up to the maximum player count).

    Returns:
        1-D array of dtype float32, the same length for every board

    Raises:
        ValueError: If the board seats more than the maximum player count
    """
    if board.num_players > MAX_PLAYERS:
        raise ValueError(f"Cannot encode a board with {board.num_players} players")

    features: List[float] = [
        1.0 if board.phase == Phase.AWAITING_NOBLE_SELECTION else 0.0,
        1.0 if board.round_type == RoundType.LAST_ROUND else 0.0,
    ]

    features.extend(board.bank[token] / MAX_BANK_PILE for token in ALL_TOKENS)

    for tier in ALL_TIERS:
        features.append(len(board.get_deck(tier)) / CARDS_PER_TIER[tier])
        features.append(len(board.get_cards_for_sale(tier)) / CARDS_FOR_SALE_PER_TIER)

    features.append(len(board.nobles) / TOTAL_NOBLES)

    seat = np.zeros(MAX_PLAYERS, dtype=np.float32)
    seat[board.player_turn] = 1.0

    players = [encode_player(p) for p in board.players]
    players.extend(np.zeros(PLAYER_FEATURES, dtype=np.float32)
                   for _ in range(MAX_PLAYERS - len(board.players)))

    return np.concatenate([np.asarray(features, dtype=np.float32), seat, *players])


def board_feature_size() -> int:
    """Length of every vector produced by encode_board."""
    return 2 + len(ALL_TOKENS) + 2 * len(ALL_TIERS) + 1 + MAX_PLAYERS + MAX_PLAYERS * PLAYER_FEATURES
