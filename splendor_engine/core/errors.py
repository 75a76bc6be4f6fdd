"""
Error hierarchy for the Splendor rules engine.

Every rule violation is an exception deriving from SplendorError, so callers
can catch the whole family, a category (InvalidCollect, InvalidBuyOperation,
InvalidReserve) or a single precise case. A failing operation never produces
a successor state; the input board is left untouched.

Usage:
    from splendor_engine.core.errors import ActionFail

    try:
        board = board.do_action(action)
    except ActionFail as e:
        announce(str(e))
"""
from __future__ import annotations
from typing import Any, Dict, Optional, TYPE_CHECKING

from splendor_engine.core.constants import (
    Token, CardTier, TOKEN_DISPLAY_NAMES, MAX_COLLECT, MAX_DISCARD,
    MAX_TOKENS_TOTAL, MAX_RESERVED_CARDS, MIN_PILE_SIZE_TO_COLLECT_TWO_EQUALS,
)

if TYPE_CHECKING:
    from splendor_engine.core.funds import Funds


class SplendorError(Exception):
    """Base exception for all rules errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error description
        context: Additional details (token, ids, amounts)
    """
    code: str = "SPLENDOR_ERROR"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.context == other.context
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": {
                key: value.value if isinstance(value, (Token, CardTier)) else value
                for key, value in self.context.items()
            },
        }


class InsufficientFunds(SplendorError):
    """Funds subtraction would make a token count negative."""
    code = "INSUFFICIENT_FUNDS"

    def __init__(self, token: Token):
        super().__init__(f"Not enough {TOKEN_DISPLAY_NAMES[token]} tokens", {"token": token})
        self.token = token


# =============================================================================
# Action failures
# =============================================================================


class ActionFail(SplendorError):
    """Base class for every action the board refuses."""
    code = "ACTION_FAIL"


class InvalidCollect(ActionFail):
    """Base class for collect-and-discard violations."""
    code = "INVALID_COLLECT"


class CollectedGolden(InvalidCollect):
    code = "COLLECTED_GOLDEN"

    def __init__(self):
        super().__init__("Golden tokens cannot be collected")


class CannotCollectMoreThanThree(InvalidCollect):
    code = "CANNOT_COLLECT_MORE_THAN_THREE"

    def __init__(self):
        super().__init__(f"Cannot collect more than {MAX_COLLECT} tokens")


class CannotDiscardMoreThanThree(InvalidCollect):
    code = "CANNOT_DISCARD_MORE_THAN_THREE"

    def __init__(self):
        super().__init__(f"Cannot discard more than {MAX_DISCARD} tokens")


class CollectedTwoOfTheSameWithAnother(InvalidCollect):
    code = "COLLECTED_TWO_OF_THE_SAME_WITH_ANOTHER"

    def __init__(self, token: Token):
        super().__init__(
            f"Cannot collect two {TOKEN_DISPLAY_NAMES[token]} tokens together with a third one",
            {"token": token},
        )
        self.token = token


class CannotCollectTwoWhenPileAlmostEmpty(InvalidCollect):
    code = "CANNOT_COLLECT_TWO_WHEN_PILE_ALMOST_EMPTY"

    def __init__(self, token: Token):
        super().__init__(
            f"Cannot collect two {TOKEN_DISPLAY_NAMES[token]} tokens when the bank holds "
            f"fewer than {MIN_PILE_SIZE_TO_COLLECT_TWO_EQUALS}",
            {"token": token},
        )
        self.token = token


class NotEnoughAtTheBank(InvalidCollect):
    code = "NOT_ENOUGH_AT_THE_BANK"

    def __init__(self, token: Token):
        super().__init__(
            f"The bank does not have enough {TOKEN_DISPLAY_NAMES[token]} tokens",
            {"token": token},
        )
        self.token = token


class NotEnoughPiecesToDiscard(InvalidCollect):
    code = "NOT_ENOUGH_PIECES_TO_DISCARD"

    def __init__(self, token: Token):
        super().__init__(
            f"Cannot discard {TOKEN_DISPLAY_NAMES[token]} tokens you do not hold",
            {"token": token},
        )
        self.token = token


class CannotStoreMoreThanTen(InvalidCollect):
    code = "CANNOT_STORE_MORE_THAN_TEN"

    def __init__(self, total: int):
        super().__init__(
            f"Cannot hold more than {MAX_TOKENS_TOTAL} tokens (would hold {total})",
            {"total": total},
        )
        self.total = total


class InvalidBuyOperation(ActionFail):
    """Base class for purchase violations."""
    code = "INVALID_BUY_OPERATION"


class CardNotFoundOnBoard(InvalidBuyOperation):
    code = "CARD_NOT_FOUND_ON_BOARD"

    def __init__(self, card_id: int):
        super().__init__(f"Card {card_id} is not for sale", {"card_id": card_id})
        self.card_id = card_id


class NotEnoughFundsToBuy(InvalidBuyOperation):
    """The buyer is short; `missing` holds the complete per-token deficit."""
    code = "NOT_ENOUGH_FUNDS"

    def __init__(self, missing: Funds):
        super().__init__(
            f"Not enough funds, missing {missing}",
            {"missing": missing.to_dict()},
        )
        self.missing = missing


class InvalidReserve(ActionFail):
    """Base class for reservation violations."""
    code = "INVALID_RESERVE"


class CardNotFound(InvalidReserve):
    code = "CARD_NOT_FOUND"

    def __init__(self, card_id: int):
        super().__init__(f"Card {card_id} is not for sale", {"card_id": card_id})
        self.card_id = card_id


class MaximumReservedCardsExceeded(InvalidReserve):
    code = "MAXIMUM_RESERVED_CARDS_EXCEEDED"

    def __init__(self):
        super().__init__(f"Cannot hold more than {MAX_RESERVED_CARDS} reserved cards")


class CannotReserveFromEmptyDeck(ActionFail):
    code = "CANNOT_RESERVE_FROM_EMPTY_DECK"

    def __init__(self, tier: CardTier):
        super().__init__(f"The tier {tier.value} deck is empty", {"tier": tier})
        self.tier = tier


class NobleNotFound(ActionFail):
    code = "NOBLE_NOT_FOUND"

    def __init__(self, noble_id: int):
        super().__init__(f"Noble {noble_id} is not available", {"noble_id": noble_id})
        self.noble_id = noble_id


class YouCannotSelectNobleNow(ActionFail):
    code = "YOU_CANNOT_SELECT_NOBLE_NOW"

    def __init__(self):
        super().__init__("You cannot select a noble now")


class YouNeedToSelectNoble(ActionFail):
    code = "YOU_NEED_TO_SELECT_NOBLE"

    def __init__(self):
        super().__init__("You need to select a noble before doing anything else")
