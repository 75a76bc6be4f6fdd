"""
Actions for the Splendor rules engine.

This module defines every request a player can submit to the board:
- Passing the turn
- Collecting tokens (with optional discards)
- Reserving a card from a deck or from the sale windows
- Buying a card for sale
- Selecting a noble

Actions are plain immutable values; the board validates and applies them.
Each action converts to and from a dictionary for transport.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, ClassVar, Dict, Iterable, Tuple

from splendor_engine.core.constants import Token, CardTier, token_names
from splendor_engine.core.cards import CardId, NobleId


class ActionType(Enum):
    """Enum representing the different types of actions."""
    PASS_TURN = auto()
    COLLECT_PIECES = auto()
    RESERVE_CARD_FROM_DECK = auto()
    RESERVE_CARD_FROM_BOARD = auto()
    BUY_CARD = auto()
    SELECT_NOBLE = auto()


class Action(ABC):
    """
    Abstract base class for all actions.

    All specific action types inherit from this class and implement
    the required abstract methods.
    """
    action_type: ClassVar[ActionType]

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the action to a dictionary for serialization.

        Returns:
            Dictionary representation of the action
        """

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> Action:
        """
        Create an action from a dictionary representation.

        Args:
            data: Dictionary representation of the action

        Returns:
            Action object
        """

    @abstractmethod
    def __str__(self) -> str:
        """Return a human-readable string representation of the action."""


@dataclass(frozen=True)
class PassTurn(Action):
    """Action that only advances the turn."""
    action_type: ClassVar[ActionType] = ActionType.PASS_TURN

    def to_dict(self) -> Dict[str, Any]:
        return {"action_type": self.action_type.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PassTurn:
        return cls()

    def __str__(self) -> str:
        return "Pass turn"


@dataclass(frozen=True)
class CollectPieces(Action):
    """
    Action to collect tokens from the bank, optionally returning some.

    Both lists are multisets. Their shape is checked by the board, which
    reports the precise violation.
    """
    action_type: ClassVar[ActionType] = ActionType.COLLECT_PIECES
    collect: Tuple[Token, ...] = ()
    discard: Tuple[Token, ...] = ()

    def __post_init__(self):
        """Normalize any iterable into tuples."""
        object.__setattr__(self, "collect", tuple(self.collect))
        object.__setattr__(self, "discard", tuple(self.discard))

    @classmethod
    def of(cls, collect: Iterable[Token], discard: Iterable[Token] = ()) -> CollectPieces:
        return cls(tuple(collect), tuple(discard))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "action_type": self.action_type.name,
            "collect": [token.value for token in self.collect],
            "discard": [token.value for token in self.discard],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CollectPieces:
        """Create from dictionary representation."""
        return cls(
            tuple(Token(t) for t in data.get("collect", [])),
            tuple(Token(t) for t in data.get("discard", [])),
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        text = f"Collect {token_names(list(self.collect))}"
        if self.discard:
            text += f", discarding {token_names(list(self.discard))}"
        return text


@dataclass(frozen=True)
class ReserveCardFromDeck(Action):
    """Action to reserve the top card of a tier's deck."""
    action_type: ClassVar[ActionType] = ActionType.RESERVE_CARD_FROM_DECK
    tier: CardTier = CardTier.TIER_1

    def to_dict(self) -> Dict[str, Any]:
        return {"action_type": self.action_type.name, "tier": self.tier.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ReserveCardFromDeck:
        return cls(CardTier(int(data["tier"])))

    def __str__(self) -> str:
        return f"Reserve the top card of the tier {self.tier.value} deck"


@dataclass(frozen=True)
class ReserveCardFromBoard(Action):
    """Action to reserve a card for sale."""
    action_type: ClassVar[ActionType] = ActionType.RESERVE_CARD_FROM_BOARD
    card_id: CardId = CardId(0)

    def to_dict(self) -> Dict[str, Any]:
        return {"action_type": self.action_type.name, "card_id": self.card_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ReserveCardFromBoard:
        return cls(CardId(int(data["card_id"])))

    def __str__(self) -> str:
        return f"Reserve card {self.card_id}"


@dataclass(frozen=True)
class BuyCard(Action):
    """Action to buy a card for sale."""
    action_type: ClassVar[ActionType] = ActionType.BUY_CARD
    card_id: CardId = CardId(0)

    def to_dict(self) -> Dict[str, Any]:
        return {"action_type": self.action_type.name, "card_id": self.card_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> BuyCard:
        return cls(CardId(int(data["card_id"])))

    def __str__(self) -> str:
        return f"Buy card {self.card_id}"


@dataclass(frozen=True)
class SelectNoble(Action):
    """Action to claim a noble while a noble selection is pending."""
    action_type: ClassVar[ActionType] = ActionType.SELECT_NOBLE
    noble_id: NobleId = NobleId(0)

    def to_dict(self) -> Dict[str, Any]:
        return {"action_type": self.action_type.name, "noble_id": self.noble_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SelectNoble:
        return cls(NobleId(int(data["noble_id"])))

    def __str__(self) -> str:
        return f"Select noble {self.noble_id}"


ACTION_CLASSES: Dict[ActionType, type] = {
    ActionType.PASS_TURN: PassTurn,
    ActionType.COLLECT_PIECES: CollectPieces,
    ActionType.RESERVE_CARD_FROM_DECK: ReserveCardFromDeck,
    ActionType.RESERVE_CARD_FROM_BOARD: ReserveCardFromBoard,
    ActionType.BUY_CARD: BuyCard,
    ActionType.SELECT_NOBLE: SelectNoble,
}


def create_action_from_dict(data: Dict[str, Any]) -> Action:
    """
    Create an action from a dictionary representation.

    Args:
        data: Dictionary representation of an action

    Returns:
        Action object

    Raises:
        ValueError: If the action type is unknown or a field is malformed
    """
    try:
        action_type = ActionType[data["action_type"]]
    except KeyError:
        raise ValueError(f"Unknown action type: {data.get('action_type')!r}")

    try:
        return ACTION_CLASSES[action_type].from_dict(data)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed {action_type.name} action: {e}") from e
