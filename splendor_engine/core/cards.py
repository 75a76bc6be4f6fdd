"""
Production cards and nobles for the Splendor rules engine.

This module defines the card and noble data structures, the generic id
wrapper that gives every card a stable identity, the purchase algorithm,
and the catalog of the original game (90 cards in three tiers, 10 nobles).
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, List, NewType, Optional, TypeVar, TYPE_CHECKING

from splendor_engine.core.constants import (
    Token, CardTier, ALL_TOKENS, WILDCARD, TOKEN_DISPLAY_NAMES, NOBLE_VICTORY_POINTS,
)
from splendor_engine.core.errors import NotEnoughFundsToBuy
from splendor_engine.core.funds import Funds

if TYPE_CHECKING:
    from splendor_engine.core.player import Player


CardId = NewType("CardId", int)
NobleId = NewType("NobleId", int)
PlayerId = NewType("PlayerId", int)

T = TypeVar("T")
IdT = TypeVar("IdT")


@dataclass(frozen=True)
class Card:
    """
    Represents a production card.

    Once owned, a card permanently produces one token of its color as credit
    toward later purchases, and may award victory points.
    """
    cost: Funds  # Never includes the wildcard
    produces: Token  # Token color this card provides as credit
    victory_points: Optional[int] = None

    def __post_init__(self):
        """Validate the card after initialization."""
        if self.cost[WILDCARD] != 0:
            raise ValueError("Card cost cannot include golden tokens")

        if self.produces == WILDCARD:
            raise ValueError("Cards cannot produce golden tokens")

        if self.victory_points is not None and self.victory_points < 0:
            raise ValueError(f"Victory points cannot be negative: {self.victory_points}")

    @property
    def points(self) -> int:
        return self.victory_points or 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cost": self.cost.to_dict(),
            "produces": self.produces.value,
            "victory_points": self.victory_points,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Card:
        return cls(
            cost=Funds.from_dict(data["cost"]),
            produces=Token(data["produces"]),
            victory_points=data.get("victory_points"),
        )

    def __str__(self) -> str:
        """String representation of the card."""
        return (f"Card(Produces: {TOKEN_DISPLAY_NAMES[self.produces]}, "
                f"Points: {self.points}, Cost: {self.cost})")


@dataclass(frozen=True)
class Identifiable(Generic[T, IdT]):
    """Attaches a stable identifier to any entity for lookup and removal."""
    uid: IdT
    data: T

    def __str__(self) -> str:
        return f"#{self.uid} {self.data}"


IdentifiedCard = Identifiable[Card, CardId]


def identified_card_to_dict(card: IdentifiedCard) -> Dict[str, Any]:
    return {"uid": card.uid, **card.data.to_dict()}


def identified_card_from_dict(data: Dict[str, Any]) -> IdentifiedCard:
    return Identifiable(CardId(int(data["uid"])), Card.from_dict(data))


@dataclass(frozen=True)
class Noble:
    """
    Represents a noble.

    A noble is claimed by the player whose production cards alone cover its
    cost; stored tokens do not count.
    """
    id: NobleId
    cost: Funds

    def __post_init__(self):
        """Validate the noble after initialization."""
        if self.cost[WILDCARD] != 0:
            raise ValueError("Noble cost cannot include golden tokens")

    @property
    def victory_points(self) -> int:
        return NOBLE_VICTORY_POINTS

    def can_visit(self, production: Funds) -> bool:
        """
        Check if the noble can be claimed with the given production.

        Args:
            production: Per-token count of owned production cards

        Returns:
            True if the production covers the noble's cost
        """
        return production.covers(self.cost)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "cost": self.cost.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Noble:
        return cls(NobleId(int(data["id"])), Funds.from_dict(data["cost"]))

    def __str__(self) -> str:
        """String representation of the noble."""
        return f"Noble(#{self.id}, Points: {self.victory_points}, Requirements: {self.cost})"


def funds_from_production_cards(cards: Iterable[IdentifiedCard]) -> Funds:
    """Count owned production cards per produced token."""
    return Funds.from_tokens(card.data.produces for card in cards)


def buy(player: Player, card: Card) -> Funds:
    """
    Pay for a card and return the buyer's remaining funds.

    For each token in canonical order, production credit is applied first,
    then stored tokens of that color, then golden tokens. A token that stays
    short does not consume golden tokens; its deficit is recorded and the
    remaining tokens are still evaluated, so the failure carries the complete
    shortfall.

    Args:
        player: The buyer
        card: The card being bought

    Returns:
        The buyer's funds after payment

    Raises:
        NotEnoughFundsToBuy: With the per-token deficit
    """
    remaining = dict(player.funds.items())
    missing: Dict[Token, int] = {}
    production = funds_from_production_cards(player.production_cards)

    for token in ALL_TOKENS:
        cost = card.cost[token]
        produces = production[token]
        if produces >= cost:
            continue

        stored = remaining[token]
        if stored + produces >= cost:
            remaining[token] = stored - (cost - produces)
            continue

        goldens = remaining[WILDCARD]
        shortfall = cost - stored - produces
        if goldens >= shortfall:
            remaining[token] = 0
            remaining[WILDCARD] = goldens - shortfall
        else:
            missing[token] = shortfall

    if missing:
        raise NotEnoughFundsToBuy(Funds.from_mapping(missing))

    return Funds.from_mapping(remaining)


# =============================================================================
# Catalog of the original game
# =============================================================================

# (cost as red, green, blue, brown, white), produced token, victory points
_TIER_ONE = [
    ((0, 0, 2, 0, 2), Token.GREEN, None),
    ((1, 0, 1, 2, 1), Token.GREEN, None),
    ((1, 0, 1, 1, 1), Token.GREEN, None),
    ((0, 3, 0, 0, 0), Token.BROWN, None),
    ((0, 0, 4, 0, 0), Token.BROWN, 1),
    ((1, 1, 2, 0, 1), Token.BROWN, None),
    ((1, 3, 1, 0, 0), Token.BLUE, None),
    ((2, 1, 0, 1, 1), Token.BLUE, None),
    ((0, 2, 0, 2, 0), Token.BLUE, None),
    ((0, 0, 2, 2, 0), Token.WHITE, None),
    ((0, 0, 0, 0, 3), Token.RED, None),
    ((0, 0, 0, 4, 0), Token.GREEN, 1),
    ((0, 1, 3, 0, 1), Token.GREEN, None),
    ((2, 0, 1, 2, 0), Token.GREEN, None),
    ((1, 0, 0, 3, 1), Token.RED, None),
    ((0, 0, 0, 0, 4), Token.RED, 1),
    ((0, 0, 3, 0, 0), Token.WHITE, None),
    ((2, 2, 0, 0, 0), Token.BROWN, None),
    ((3, 1, 0, 1, 0), Token.BROWN, None),
    ((0, 2, 0, 0, 2), Token.BROWN, None),
    ((1, 1, 0, 1, 1), Token.BLUE, None),
    ((4, 0, 0, 0, 0), Token.BLUE, 1),
    ((0, 1, 0, 2, 2), Token.RED, None),
    ((2, 0, 0, 0, 2), Token.RED, None),
    ((0, 1, 2, 0, 0), Token.RED, None),
    ((1, 0, 2, 0, 2), Token.BROWN, None),
    ((2, 2, 0, 0, 1), Token.BLUE, None),
    ((0, 0, 0, 3, 0), Token.BLUE, None),
    ((0, 0, 2, 1, 2), Token.WHITE, None),
    ((1, 1, 1, 1, 0), Token.WHITE, None),
    ((0, 0, 0, 2, 1), Token.BLUE, None),
    ((1, 1, 1, 0, 1), Token.BROWN, None),
    ((2, 0, 2, 0, 0), Token.GREEN, None),
    ((3, 0, 0, 0, 0), Token.GREEN, None),
    ((1, 2, 1, 1, 0), Token.WHITE, None),
    ((2, 0, 0, 1, 0), Token.WHITE, None),
    ((0, 0, 1, 1, 3), Token.WHITE, None),
    ((0, 4, 0, 0, 0), Token.WHITE, 1),
    ((0, 1, 1, 1, 2), Token.RED, None),
    ((0, 1, 1, 1, 1), Token.RED, None),
]

_TIER_TWO = [
    ((0, 3, 0, 2, 3), Token.BROWN, 1),
    ((3, 2, 0, 0, 3), Token.GREEN, 1),
    ((2, 0, 3, 3, 0), Token.RED, 1),
    ((0, 0, 6, 0, 0), Token.BLUE, 3),
    ((1, 0, 0, 4, 2), Token.BLUE, 2),
    ((3, 0, 3, 0, 2), Token.WHITE, 1),
    ((0, 0, 2, 1, 4), Token.GREEN, 2),
    ((0, 0, 5, 0, 0), Token.BLUE, 2),
    ((0, 0, 0, 0, 5), Token.BROWN, 2),
    ((2, 0, 0, 3, 2), Token.RED, 1),
    ((0, 0, 0, 0, 6), Token.WHITE, 3),
    ((0, 2, 4, 0, 1), Token.RED, 2),
    ((5, 0, 0, 0, 0), Token.WHITE, 2),
    ((0, 6, 0, 0, 0), Token.GREEN, 3),
    ((0, 5, 0, 0, 0), Token.GREEN, 2),
    ((0, 0, 0, 5, 0), Token.RED, 2),
    ((0, 2, 2, 0, 3), Token.BROWN, 1),
    ((0, 0, 0, 6, 0), Token.BROWN, 3),
    ((3, 5, 0, 0, 0), Token.BROWN, 2),
    ((0, 3, 5, 0, 0), Token.GREEN, 2),
    ((0, 3, 2, 3, 0), Token.BLUE, 1),
    ((2, 2, 2, 0, 0), Token.BLUE, 1),
    ((0, 0, 3, 0, 5), Token.BLUE, 2),
    ((0, 0, 3, 2, 2), Token.GREEN, 1),
    ((5, 0, 0, 3, 0), Token.WHITE, 2),
    ((4, 1, 0, 2, 0), Token.WHITE, 2),
    ((2, 4, 0, 1, 0), Token.BROWN, 2),
    ((2, 3, 0, 2, 0), Token.WHITE, 1),
    ((6, 0, 0, 0, 0), Token.RED, 3),
    ((0, 0, 0, 5, 3), Token.RED, 2),
]

_TIER_THREE = [
    ((3, 0, 3, 3, 5), Token.GREEN, 3),
    ((3, 3, 0, 5, 3), Token.BLUE, 3),
    ((0, 3, 6, 0, 3), Token.GREEN, 4),
    ((0, 0, 0, 7, 3), Token.WHITE, 5),
    ((7, 0, 0, 0, 0), Token.BROWN, 4),
    ((6, 3, 0, 3, 0), Token.BROWN, 4),
    ((0, 0, 3, 3, 6), Token.BLUE, 4),
    ((0, 7, 0, 0, 0), Token.RED, 4),
    ((0, 3, 5, 3, 3), Token.RED, 3),
    ((3, 6, 3, 0, 0), Token.RED, 4),
    ((3, 0, 0, 6, 3), Token.WHITE, 4),
    ((3, 5, 3, 0, 3), Token.BROWN, 3),
    ((0, 0, 3, 0, 7), Token.BLUE, 5),
    ((3, 7, 0, 0, 0), Token.RED, 5),
    ((0, 3, 7, 0, 0), Token.GREEN, 5),
    ((0, 0, 0, 7, 0), Token.WHITE, 4),
    ((0, 0, 7, 0, 0), Token.GREEN, 4),
    ((5, 3, 3, 3, 0), Token.WHITE, 3),
    ((0, 0, 0, 0, 7), Token.BLUE, 4),
    ((7, 0, 0, 3, 0), Token.BROWN, 5),
]

_NOBLES = [
    (0, 4, 4, 0, 0),
    (0, 0, 4, 0, 4),
    (4, 4, 0, 0, 0),
    (0, 0, 0, 4, 4),
    (3, 0, 0, 3, 3),
    (3, 3, 0, 3, 0),
    (3, 3, 3, 0, 0),
    (4, 0, 0, 4, 0),
    (0, 3, 3, 0, 3),
    (0, 0, 3, 3, 3),
]

_CATALOG = {
    CardTier.TIER_1: _TIER_ONE,
    CardTier.TIER_2: _TIER_TWO,
    CardTier.TIER_3: _TIER_THREE,
}


def original_cards() -> Dict[CardTier, List[Card]]:
    """
    Get the card catalog of the original game, without ids.

    Returns:
        Cards per tier, in catalog order (40, 30 and 20 cards)
    """
    return {
        tier: [Card(Funds.of(*cost), produces, points) for cost, produces, points in entries]
        for tier, entries in _CATALOG.items()
    }


def original_nobles() -> List[Noble]:
    """Get the 10 nobles of the original game, with ids 1 to 10."""
    return [Noble(NobleId(i), Funds.of(*cost)) for i, cost in enumerate(_NOBLES, start=1)]
