"""
Splendor Engine Core Package

This package contains the rules engine, including:
- The token ledger and the collect-and-discard protocol
- Card, noble and player definitions
- Player actions and the board state machine
- Game setup, legal-action enumeration and simulation
- Constants, enums and the error hierarchy

All core components can be imported directly from this package.
"""

# Game setup and simulation
from splendor_engine.core.game import (
    create_board, legal_actions, simulate_random_game, simulate_games, SimulationResult
)

# Board
from splendor_engine.core.board import (
    Board, Phase, RoundType, GameResult, Winner, apply_action, compute_winner
)

# Player
from splendor_engine.core.player import Player, ReserveSuccess, reserve_card

# Cards and nobles
from splendor_engine.core.cards import (
    Card, Noble, Identifiable, IdentifiedCard, CardId, NobleId, PlayerId,
    buy, funds_from_production_cards, original_cards, original_nobles
)

# Funds
from splendor_engine.core.funds import Funds, CollectSuccess, add, subtract, collect

# Actions
from splendor_engine.core.actions import (
    Action, ActionType,
    PassTurn, CollectPieces, ReserveCardFromDeck, ReserveCardFromBoard, BuyCard, SelectNoble,
    create_action_from_dict
)

# Errors
from splendor_engine.core.errors import SplendorError, InsufficientFunds, ActionFail

# Constants
from splendor_engine.core.constants import (
    Token, CardTier,
    ALL_TOKENS, REGULAR_TOKENS, WILDCARD,
    WINNING_POINTS_THRESHOLD, MAX_TOKENS_TOTAL, MAX_RESERVED_CARDS
)

__all__ = [
    # Game
    'create_board', 'legal_actions', 'simulate_random_game', 'simulate_games', 'SimulationResult',

    # Board
    'Board', 'Phase', 'RoundType', 'GameResult', 'Winner', 'apply_action', 'compute_winner',

    # Player
    'Player', 'ReserveSuccess', 'reserve_card',

    # Cards
    'Card', 'Noble', 'Identifiable', 'IdentifiedCard', 'CardId', 'NobleId', 'PlayerId',
    'buy', 'funds_from_production_cards', 'original_cards', 'original_nobles',

    # Funds
    'Funds', 'CollectSuccess', 'add', 'subtract', 'collect',

    # Actions
    'Action', 'ActionType',
    'PassTurn', 'CollectPieces', 'ReserveCardFromDeck', 'ReserveCardFromBoard', 'BuyCard',
    'SelectNoble', 'create_action_from_dict',

    # Errors
    'SplendorError', 'InsufficientFunds', 'ActionFail',

    # Constants
    'Token', 'CardTier',
    'ALL_TOKENS', 'REGULAR_TOKENS', 'WILDCARD',
    'WINNING_POINTS_THRESHOLD', 'MAX_TOKENS_TOTAL', 'MAX_RESERVED_CARDS'
]
