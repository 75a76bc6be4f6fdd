"""
Player representation for the Splendor rules engine.

This module defines the Player value, which tracks a player's stored
tokens, owned production cards, reserved hand and nobles, and the
reservation operation that moves a card from the sale windows into a hand.
"""
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from splendor_engine.core.constants import CardTier, WILDCARD, MAX_RESERVED_CARDS
from splendor_engine.core.cards import (
    IdentifiedCard, Noble, CardId, PlayerId,
    funds_from_production_cards, identified_card_to_dict, identified_card_from_dict,
)
from splendor_engine.core.errors import CardNotFound, MaximumReservedCardsExceeded
from splendor_engine.core.funds import Funds


@dataclass(frozen=True)
class Player:
    """
    Represents a player.

    Production cards are append-only; the reserved hand holds at most three
    cards when filled from the sale windows.
    """
    id: PlayerId
    funds: Funds = Funds()
    production_cards: Tuple[IdentifiedCard, ...] = ()
    reserved_cards: Tuple[IdentifiedCard, ...] = ()
    nobles: Tuple[Noble, ...] = ()

    @classmethod
    def new(
        cls,
        id: int,
        funds: Optional[Funds] = None,
        production_cards: Iterable[IdentifiedCard] = (),
        reserved_cards: Iterable[IdentifiedCard] = (),
    ) -> Player:
        """Create a player with no nobles."""
        return cls(
            id=PlayerId(id),
            funds=funds if funds is not None else Funds(),
            production_cards=tuple(production_cards),
            reserved_cards=tuple(reserved_cards),
        )

    def production_funds(self) -> Funds:
        """Get the per-token credit granted by owned production cards."""
        return funds_from_production_cards(self.production_cards)

    def total_victory_points(self) -> int:
        """Sum of owned card points plus the noble awards."""
        card_points = sum(card.data.points for card in self.production_cards)
        noble_points = sum(noble.victory_points for noble in self.nobles)
        return card_points + noble_points

    def with_funds(self, funds: Funds) -> Player:
        return replace(self, funds=funds)

    def add_production_card(self, card: IdentifiedCard) -> Player:
        return replace(self, production_cards=self.production_cards + (card,))

    def add_noble(self, noble: Noble) -> Player:
        return replace(self, nobles=self.nobles + (noble,))

    def add_reserved_card(self, card: IdentifiedCard) -> Player:
        return replace(self, reserved_cards=self.reserved_cards + (card,))

    def to_dict(self) -> Dict[str, Any]:
        """Convert player state to a dictionary."""
        return {
            "id": self.id,
            "funds": self.funds.to_dict(),
            "production_cards": [identified_card_to_dict(c) for c in self.production_cards],
            "reserved_cards": [identified_card_to_dict(c) for c in self.reserved_cards],
            "nobles": [noble.to_dict() for noble in self.nobles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Player:
        """Create a player from a dictionary."""
        return cls(
            id=PlayerId(int(data["id"])),
            funds=Funds.from_dict(data.get("funds", {})),
            production_cards=tuple(identified_card_from_dict(c) for c in data.get("production_cards", [])),
            reserved_cards=tuple(identified_card_from_dict(c) for c in data.get("reserved_cards", [])),
            nobles=tuple(Noble.from_dict(n) for n in data.get("nobles", [])),
        )

    def __str__(self) -> str:
        """String representation of the player."""
        return (f"Player {self.id} ({self.total_victory_points()} points) - "
                f"Tokens: {self.funds}, Production: {len(self.production_cards)}, "
                f"Reserved: {len(self.reserved_cards)}, Nobles: {len(self.nobles)}")


@dataclass(frozen=True)
class ReserveSuccess:
    """Result of a successful reservation."""
    bank_funds: Funds
    player: Player


def find_card(
    cards_for_sale: Mapping[CardTier, Sequence[IdentifiedCard]],
    card_id: CardId,
) -> Optional[Tuple[CardTier, IdentifiedCard]]:
    """Look up a card among all sale windows, returning its tier and the card."""
    for tier, cards in cards_for_sale.items():
        for card in cards:
            if card.uid == card_id:
                return tier, card
    return None


def reserve_card(
    bank_funds: Funds,
    cards_for_sale: Mapping[CardTier, Sequence[IdentifiedCard]],
    player: Player,
    card_id: CardId,
) -> ReserveSuccess:
    """
    Reserve a card for sale into a player's hand.

    The card stays in its sale window. When the bank has a golden token, one
    is transferred to the player.

    Raises:
        CardNotFound: If no sale window holds the card
        MaximumReservedCardsExceeded: If the hand is already full
    """
    found = find_card(cards_for_sale, card_id)
    if found is None:
        raise CardNotFound(card_id)
    _, card = found

    if len(player.reserved_cards) >= MAX_RESERVED_CARDS:
        raise MaximumReservedCardsExceeded()

    player = player.add_reserved_card(card)
    if bank_funds[WILDCARD] > 0:
        golden = Funds.from_tokens([WILDCARD])
        bank_funds = bank_funds - golden
        player = player.with_funds(player.funds + golden)

    return ReserveSuccess(bank_funds, player)
