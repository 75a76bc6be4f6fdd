"""
Constants for the Splendor rules engine.

This module defines the token kinds, card tiers, and every numeric limit the
rules depend on (collect/discard sizes, storage caps, victory threshold, and
the setup tables for 2-4 players).
"""
from enum import Enum
from typing import Dict, Final, List, Tuple


class Token(Enum):
    """Enum representing the six token colors.

    Declaration order is the canonical token order used wherever a failure
    must name "the" offending token or a deficit map is built.
    """
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    BROWN = "brown"
    WHITE = "white"
    GOLDEN = "golden"  # Wildcard, usable as any color when paying


# Canonical order over all tokens
ALL_TOKENS: Final[Tuple[Token, ...]] = tuple(Token)

# Tokens that can be collected and that cards produce (everything but the wildcard)
REGULAR_TOKENS: Final[Tuple[Token, ...]] = tuple(t for t in Token if t is not Token.GOLDEN)

WILDCARD: Final[Token] = Token.GOLDEN

# Display names for tokens (for pretty printing)
TOKEN_DISPLAY_NAMES: Final[Dict[Token, str]] = {
    Token.RED: "Red",
    Token.GREEN: "Green",
    Token.BLUE: "Blue",
    Token.BROWN: "Brown",
    Token.WHITE: "White",
    Token.GOLDEN: "Golden",
}

# Rich markup styles for tokens (for terminal display)
TOKEN_STYLES: Final[Dict[Token, str]] = {
    Token.RED: "bold red",
    Token.GREEN: "bold green",
    Token.BLUE: "bold blue",
    Token.BROWN: "bold dark_orange3",
    Token.WHITE: "bold white",
    Token.GOLDEN: "bold yellow",
}


class CardTier(Enum):
    """Enum representing the three tiers of production cards."""
    TIER_1 = 1
    TIER_2 = 2
    TIER_3 = 3


ALL_TIERS: Final[Tuple[CardTier, ...]] = tuple(CardTier)

# Number of cards in each tier of the original game
CARDS_PER_TIER: Final[Dict[CardTier, int]] = {
    CardTier.TIER_1: 40,
    CardTier.TIER_2: 30,
    CardTier.TIER_3: 20,
}

# Number of cards for sale in each tier
CARDS_FOR_SALE_PER_TIER: Final[int] = 4

# Collect/discard limits
MAX_COLLECT: Final[int] = 3
MAX_DISCARD: Final[int] = 3
MIN_PILE_SIZE_TO_COLLECT_TWO_EQUALS: Final[int] = 4

# Player limits
MIN_PLAYERS: Final[int] = 2
MAX_PLAYERS: Final[int] = 4
MAX_RESERVED_CARDS: Final[int] = 3
MAX_TOKENS_TOTAL: Final[int] = 10

# Victory conditions
WINNING_POINTS_THRESHOLD: Final[int] = 15
NOBLE_VICTORY_POINTS: Final[int] = 3

# Starting bank as (red, green, blue, brown, white, golden) by player count
BANK_BY_PLAYERS: Final[Dict[int, Tuple[int, int, int, int, int, int]]] = {
    2: (4, 4, 4, 4, 4, 5),
    3: (5, 5, 5, 5, 5, 5),
    4: (7, 7, 7, 7, 7, 5),
}

# Nobles in play: one more than the number of players
NOBLES_IN_PLAY: Final[Dict[int, int]] = {n: n + 1 for n in range(MIN_PLAYERS, MAX_PLAYERS + 1)}

TOTAL_NOBLES: Final[int] = 10


def token_names(tokens: List[Token]) -> str:
    """Join token display names for messages."""
    return ", ".join(TOKEN_DISPLAY_NAMES[t] for t in tokens) or "nothing"
