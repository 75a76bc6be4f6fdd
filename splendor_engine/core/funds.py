"""
Funds ledger for the Splendor rules engine.

This module defines the Funds value used for both the shared bank and each
player's holdings, its checked arithmetic, and the collect-and-discard
protocol that moves tokens between the bank and a player.
"""
from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

from splendor_engine.core.constants import (
    Token, ALL_TOKENS, WILDCARD, TOKEN_DISPLAY_NAMES,
    MAX_COLLECT, MAX_DISCARD, MAX_TOKENS_TOTAL, MIN_PILE_SIZE_TO_COLLECT_TWO_EQUALS,
)
from splendor_engine.core.errors import (
    InsufficientFunds, CollectedGolden, CannotCollectMoreThanThree,
    CannotDiscardMoreThanThree, CollectedTwoOfTheSameWithAnother,
    CannotCollectTwoWhenPileAlmostEmpty, NotEnoughAtTheBank,
    NotEnoughPiecesToDiscard, CannotStoreMoreThanTen,
)


@dataclass(frozen=True)
class Funds:
    """
    Immutable count of tokens per kind.

    Counts are stored in canonical token order, so every Funds value has an
    entry for each token and iteration is deterministic.
    """
    counts: Tuple[int, ...] = (0,) * len(ALL_TOKENS)

    def __post_init__(self):
        """Validate the counts after initialization."""
        if len(self.counts) != len(ALL_TOKENS):
            raise ValueError(f"Funds need exactly {len(ALL_TOKENS)} counts, got {len(self.counts)}")
        for token, count in zip(ALL_TOKENS, self.counts):
            if not isinstance(count, int) or count < 0:
                raise ValueError(f"Invalid count for {token.name}: {count!r}")

    @classmethod
    def of(cls, red: int = 0, green: int = 0, blue: int = 0,
           brown: int = 0, white: int = 0, golden: int = 0) -> Funds:
        """Create funds from one count per token, in canonical order."""
        return cls((red, green, blue, brown, white, golden))

    @classmethod
    def from_tokens(cls, tokens: Iterable[Token]) -> Funds:
        """Tally a raw list of tokens."""
        tally = Counter(tokens)
        return cls(tuple(tally.get(token, 0) for token in ALL_TOKENS))

    @classmethod
    def from_mapping(cls, mapping: Mapping[Token, int]) -> Funds:
        """Create funds from a partial mapping; absent tokens count 0."""
        return cls(tuple(mapping.get(token, 0) for token in ALL_TOKENS))

    @classmethod
    def from_dict(cls, data: Mapping[str, int]) -> Funds:
        """Create funds from the serialized form produced by to_dict()."""
        return cls(tuple(int(data.get(token.value, 0)) for token in ALL_TOKENS))

    def __getitem__(self, token: Token) -> int:
        return self.counts[ALL_TOKENS.index(token)]

    def __iter__(self) -> Iterator[Token]:
        return iter(ALL_TOKENS)

    def items(self) -> Iterator[Tuple[Token, int]]:
        """Iterate (token, count) pairs in canonical order."""
        return iter(zip(ALL_TOKENS, self.counts))

    def total(self) -> int:
        """Get the total number of tokens."""
        return sum(self.counts)

    def is_empty(self) -> bool:
        return self.total() == 0

    def as_dict(self) -> Dict[Token, int]:
        return dict(self.items())

    def to_dict(self) -> Dict[str, int]:
        """Convert to a JSON-friendly dictionary keyed by token value."""
        return {token.value: count for token, count in self.items()}

    def to_tokens(self) -> List[Token]:
        """Expand into a list of tokens, in canonical order."""
        tokens: List[Token] = []
        for token, count in self.items():
            tokens.extend([token] * count)
        return tokens

    def __add__(self, other: Funds) -> Funds:
        if not isinstance(other, Funds):
            return NotImplemented
        return Funds(tuple(a + b for a, b in zip(self.counts, other.counts)))

    def __sub__(self, other: Funds) -> Funds:
        """
        Checked subtraction.

        Raises:
            InsufficientFunds: naming the first token, in canonical order,
                whose required amount exceeds the available amount
        """
        if not isinstance(other, Funds):
            return NotImplemented
        for token, have, need in zip(ALL_TOKENS, self.counts, other.counts):
            if need > have:
                raise InsufficientFunds(token)
        return Funds(tuple(a - b for a, b in zip(self.counts, other.counts)))

    def covers(self, other: Funds) -> bool:
        """Check whether other can be subtracted from these funds."""
        return all(have >= need for have, need in zip(self.counts, other.counts))

    def __str__(self) -> str:
        parts = [f"{count} {TOKEN_DISPLAY_NAMES[token]}" for token, count in self.items() if count]
        return ", ".join(parts) or "nothing"


def add(a: Funds, b: Funds) -> Funds:
    """Per-token sum of two funds."""
    return a + b


def subtract(a: Funds, b: Funds) -> Funds:
    """Checked per-token difference; raises InsufficientFunds."""
    return a - b


@dataclass(frozen=True)
class CollectSuccess:
    """Result of a successful collect: the new bank and player balances."""
    bank_funds: Funds
    player_funds: Funds


def collect(
    bank_funds: Funds,
    player_funds: Funds,
    want_to_collect: Iterable[Token],
    discard: Iterable[Token] = (),
) -> CollectSuccess:
    """
    Exchange tokens between the bank and a player.

    The checks run in a fixed order and the first failing one is raised:
    wildcard requested, too many collected, too many discarded, two of a kind
    with a third token, double take from an almost empty pile, bank short,
    player short of discards, and finally the 10-token storage cap.

    Args:
        bank_funds: Current bank
        player_funds: Current funds of the collecting player
        want_to_collect: Tokens requested (a multiset of at most 3)
        discard: Tokens returned to the bank (a multiset of at most 3)

    Returns:
        CollectSuccess with both updated balances

    Raises:
        InvalidCollect: one of its subclasses
    """
    want_to_collect = list(want_to_collect)
    discard = list(discard)

    if WILDCARD in want_to_collect:
        raise CollectedGolden()

    total_collected = len(want_to_collect)
    if total_collected > MAX_COLLECT:
        raise CannotCollectMoreThanThree()

    if len(discard) > MAX_DISCARD:
        raise CannotDiscardMoreThanThree()

    request = Funds.from_tokens(want_to_collect)
    for token, quantity in request.items():
        if quantity >= 2 and total_collected == MAX_COLLECT:
            raise CollectedTwoOfTheSameWithAnother(token)
        if quantity >= 2 and bank_funds[token] < MIN_PILE_SIZE_TO_COLLECT_TWO_EQUALS:
            raise CannotCollectTwoWhenPileAlmostEmpty(token)

    discarded = Funds.from_tokens(discard)

    try:
        new_bank_funds = (bank_funds + discarded) - request
    except InsufficientFunds as e:
        raise NotEnoughAtTheBank(e.token) from e

    try:
        new_player_funds = (player_funds + request) - discarded
    except InsufficientFunds as e:
        raise NotEnoughPiecesToDiscard(e.token) from e

    if new_player_funds.total() > MAX_TOKENS_TOTAL:
        raise CannotStoreMoreThanTen(new_player_funds.total())

    return CollectSuccess(new_bank_funds, new_player_funds)
