"""
Board state and action dispatch for the Splendor rules engine.

This module defines the Board aggregate, an immutable snapshot holding:
- The ordered players and the current turn index
- The bank, the per-tier decks and sale windows, and the noble pool
- The phase flag (normal play or a pending noble selection)
- The round flag and the declared winner, if any

Board.do_action validates an Action against a snapshot and returns the
successor snapshot, or raises an ActionFail subclass. The input board is
never modified.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum, auto
import json
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from splendor_engine.core.constants import (
    CardTier, ALL_TIERS, CARDS_FOR_SALE_PER_TIER, WINNING_POINTS_THRESHOLD,
)
from splendor_engine.core.actions import (
    Action, ActionType, PassTurn, CollectPieces, ReserveCardFromDeck,
    ReserveCardFromBoard, BuyCard, SelectNoble,
)
from splendor_engine.core.cards import (
    IdentifiedCard, Noble, CardId, PlayerId, buy,
    identified_card_to_dict, identified_card_from_dict,
)
from splendor_engine.core.errors import (
    CannotReserveFromEmptyDeck, CardNotFoundOnBoard, NobleNotFound,
    YouCannotSelectNobleNow, YouNeedToSelectNoble,
)
from splendor_engine.core.funds import Funds, collect
from splendor_engine.core.player import Player, find_card, reserve_card


Deck = Tuple[IdentifiedCard, ...]


class Phase(Enum):
    """Which kind of action the board expects next."""
    NORMAL = auto()
    AWAITING_NOBLE_SELECTION = auto()


class RoundType(Enum):
    """Whether the win threshold has been reached."""
    NORMAL = auto()
    LAST_ROUND = auto()


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()
    DRAW = auto()


@dataclass(frozen=True)
class Winner:
    """
    Outcome of a finished game.

    A single id means a sole winner; several ids form a draw set, in board
    player order.
    """
    player_ids: Tuple[PlayerId, ...]

    def __post_init__(self):
        if not self.player_ids:
            raise ValueError("A winner needs at least one player")

    @classmethod
    def single(cls, player_id: PlayerId) -> Winner:
        return cls((player_id,))

    @classmethod
    def draw(cls, player_ids: Iterable[PlayerId]) -> Winner:
        return cls(tuple(player_ids))

    @property
    def is_draw(self) -> bool:
        return len(self.player_ids) > 1

    @property
    def result(self) -> GameResult:
        return GameResult.DRAW if self.is_draw else GameResult.WINNER

    def __str__(self) -> str:
        if self.is_draw:
            return "Draw between players " + ", ".join(str(p) for p in self.player_ids)
        return f"Player {self.player_ids[0]} wins"


def compute_winner(players: Sequence[Player]) -> Optional[Winner]:
    """
    Pick the winner among the given players.

    Highest total victory points wins; ties go to the fewest production
    cards; a remaining tie is a draw.
    """
    if not players:
        return None

    max_points = max(p.total_victory_points() for p in players)
    best = [p for p in players if p.total_victory_points() == max_points]

    fewest_cards = min(len(p.production_cards) for p in best)
    winners = [p.id for p in best if len(p.production_cards) == fewest_cards]

    if len(winners) == 1:
        return Winner.single(winners[0])
    return Winner.draw(winners)


def _freeze_tiers(tiers: Mapping[CardTier, Sequence[IdentifiedCard]]) -> Mapping[CardTier, Deck]:
    return MappingProxyType({tier: tuple(tiers.get(tier, ())) for tier in ALL_TIERS})


def _draw(deck: Deck) -> Tuple[Optional[IdentifiedCard], Deck]:
    """Take the top card (the end of the sequence) of a deck."""
    if not deck:
        return None, deck
    return deck[-1], deck[:-1]


@dataclass(frozen=True)
class Board:
    """
    Complete snapshot of a game.

    Decks are stacks whose top is the end of the sequence. Sale windows hold
    up to four cards per tier. Both are read-only mappings covering every
    tier.
    """
    players: Tuple[Player, ...]
    bank: Funds
    decks: Mapping[CardTier, Deck] = field(default_factory=dict)
    cards_for_sale: Mapping[CardTier, Deck] = field(default_factory=dict)
    nobles: Tuple[Noble, ...] = ()
    player_turn: int = 0
    phase: Phase = Phase.NORMAL
    round_type: RoundType = RoundType.NORMAL
    winner: Optional[Winner] = None

    def __post_init__(self):
        """Validate the board after initialization."""
        if not self.players:
            raise ValueError("A board needs at least one player")
        if not 0 <= self.player_turn < len(self.players):
            raise ValueError(f"Invalid player turn: {self.player_turn}")
        object.__setattr__(self, "players", tuple(self.players))
        object.__setattr__(self, "nobles", tuple(self.nobles))
        object.__setattr__(self, "decks", _freeze_tiers(self.decks))
        object.__setattr__(self, "cards_for_sale", _freeze_tiers(self.cards_for_sale))

    def __hash__(self) -> int:
        return hash((
            self.players, self.bank,
            tuple(self.decks.items()), tuple(self.cards_for_sale.items()),
            self.nobles, self.player_turn, self.phase, self.round_type, self.winner,
        ))

    @classmethod
    def create(
        cls,
        players: Sequence[Player],
        bank: Funds,
        decks: Mapping[CardTier, Sequence[IdentifiedCard]],
        nobles: Sequence[Noble],
    ) -> Board:
        """
        Create the initial board, filling each sale window from its deck.

        Args:
            players: Players in turn order
            bank: Initial bank funds
            decks: Shuffled decks per tier; missing tiers are empty
            nobles: Nobles in play

        Returns:
            Board with up to four cards for sale per tier
        """
        new_decks: Dict[CardTier, Deck] = {}
        cards_for_sale: Dict[CardTier, Deck] = {}
        for tier in ALL_TIERS:
            deck = tuple(decks.get(tier, ()))
            for_sale: List[IdentifiedCard] = []
            for _ in range(CARDS_FOR_SALE_PER_TIER):
                card, deck = _draw(deck)
                if card is None:
                    break
                for_sale.append(card)
            new_decks[tier] = deck
            cards_for_sale[tier] = tuple(for_sale)

        return cls(
            players=tuple(players),
            bank=bank,
            decks=new_decks,
            cards_for_sale=cards_for_sale,
            nobles=tuple(nobles),
        )

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def current_player(self) -> Player:
        return self.players[self.player_turn]

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    @property
    def result(self) -> GameResult:
        if self.winner is None:
            return GameResult.IN_PROGRESS
        return self.winner.result

    def get_deck(self, tier: CardTier) -> Deck:
        return self.decks[tier]

    def get_cards_for_sale(self, tier: CardTier) -> Deck:
        return self.cards_for_sale[tier]

    def get_card_from_board(self, card_id: CardId) -> Optional[IdentifiedCard]:
        """Look up a card among all sale windows."""
        found = find_card(self.cards_for_sale, card_id)
        return found[1] if found else None

    def get_player(self, player_id: PlayerId) -> Player:
        """
        Get a player by ID.

        Raises:
            ValueError: If no player has that ID
        """
        for player in self.players:
            if player.id == player_id:
                return player
        raise ValueError(f"Unknown player: {player_id}")

    def next_turn(self) -> int:
        """Index of the seat that plays after the current one."""
        return (self.player_turn + 1) % len(self.players)

    def is_last_player_turn(self) -> bool:
        return self.player_turn == len(self.players) - 1

    def eligible_nobles(self) -> List[Noble]:
        """Nobles the current player's production alone can claim."""
        production = self.current_player.production_funds()
        return [noble for noble in self.nobles if noble.can_visit(production)]

    def has_some_player_passed_win_threshold(self) -> bool:
        return any(p.total_victory_points() >= WINNING_POINTS_THRESHOLD for p in self.players)

    def _with_current_player(self, player: Player, **changes: Any) -> Board:
        players = list(self.players)
        players[self.player_turn] = player
        return replace(self, players=tuple(players), **changes)

    # -------------------------------------------------------------------------
    # Action effects
    # -------------------------------------------------------------------------

    def _pass_turn(self, action: PassTurn) -> Board:
        return self

    def _collect_pieces(self, action: CollectPieces) -> Board:
        result = collect(self.bank, self.current_player.funds, action.collect, action.discard)
        return self._with_current_player(
            self.current_player.with_funds(result.player_funds),
            bank=result.bank_funds,
        )

    def _reserve_card_from_deck(self, action: ReserveCardFromDeck) -> Board:
        card, deck = _draw(self.decks[action.tier])
        if card is None:
            raise CannotReserveFromEmptyDeck(action.tier)

        decks = dict(self.decks)
        decks[action.tier] = deck
        return self._with_current_player(
            self.current_player.add_reserved_card(card),
            decks=decks,
        )

    def _reserve_card_from_board(self, action: ReserveCardFromBoard) -> Board:
        result = reserve_card(self.bank, self.cards_for_sale, self.current_player, action.card_id)
        return self._with_current_player(result.player, bank=result.bank_funds)

    def _buy_card(self, action: BuyCard) -> Board:
        found = find_card(self.cards_for_sale, action.card_id)
        if found is None:
            raise CardNotFoundOnBoard(action.card_id)
        tier, card = found

        player = self.current_player
        remaining = buy(player, card.data)
        paid = player.funds - remaining

        window = tuple(c for c in self.cards_for_sale[tier] if c.uid != action.card_id)
        replacement, deck = _draw(self.decks[tier])
        if replacement is not None:
            window += (replacement,)

        decks = dict(self.decks)
        decks[tier] = deck
        cards_for_sale = dict(self.cards_for_sale)
        cards_for_sale[tier] = window

        return self._with_current_player(
            player.with_funds(remaining).add_production_card(card),
            bank=self.bank + paid,
            decks=decks,
            cards_for_sale=cards_for_sale,
        )

    def _select_noble(self, action: SelectNoble) -> Board:
        noble = next((n for n in self.nobles if n.id == action.noble_id), None)
        if noble is None:
            raise NobleNotFound(action.noble_id)

        return self._with_current_player(
            self.current_player.add_noble(noble),
            nobles=tuple(n for n in self.nobles if n.id != action.noble_id),
            phase=Phase.NORMAL,
        )

    _HANDLERS: ClassVar[Dict[ActionType, Callable[[Board, Any], Board]]] = {
        ActionType.PASS_TURN: _pass_turn,
        ActionType.COLLECT_PIECES: _collect_pieces,
        ActionType.RESERVE_CARD_FROM_DECK: _reserve_card_from_deck,
        ActionType.RESERVE_CARD_FROM_BOARD: _reserve_card_from_board,
        ActionType.BUY_CARD: _buy_card,
        ActionType.SELECT_NOBLE: _select_noble,
    }

    # -------------------------------------------------------------------------
    # Dispatcher
    # -------------------------------------------------------------------------

    def do_action(self, action: Action) -> Board:
        """
        Apply an action for the current player.

        After the effect, the board holds the turn when a noble became
        claimable, enters the last round once any player reaches the win
        threshold, and otherwise declares the winner when the last seat has
        played in the last round before advancing the turn.

        Args:
            action: Action to apply

        Returns:
            The successor board

        Raises:
            ActionFail: If the action is not allowed on this board
        """
        is_noble_selection = action.action_type == ActionType.SELECT_NOBLE
        if self.phase == Phase.NORMAL and is_noble_selection:
            raise YouCannotSelectNobleNow()
        if self.phase == Phase.AWAITING_NOBLE_SELECTION and not is_noble_selection:
            raise YouNeedToSelectNoble()

        handler = self._HANDLERS[action.action_type]
        board = handler(self, action)

        noble_pending = not is_noble_selection and bool(board.eligible_nobles())
        if noble_pending:
            board = replace(board, phase=Phase.AWAITING_NOBLE_SELECTION)

        if board.has_some_player_passed_win_threshold():
            board = replace(board, round_type=RoundType.LAST_ROUND)

        if not noble_pending:
            winner = board.winner
            if self.is_last_player_turn() and board.round_type == RoundType.LAST_ROUND:
                winner = compute_winner(self.players)
            board = replace(board, winner=winner, player_turn=board.next_turn())

        return board

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the board to a dictionary for serialization.

        Returns:
            Dictionary representation of the board
        """
        return {
            "players": [p.to_dict() for p in self.players],
            "player_turn": self.player_turn,
            "bank": self.bank.to_dict(),
            "decks": {
                str(tier.value): [identified_card_to_dict(c) for c in deck]
                for tier, deck in self.decks.items()
            },
            "cards_for_sale": {
                str(tier.value): [identified_card_to_dict(c) for c in cards]
                for tier, cards in self.cards_for_sale.items()
            },
            "nobles": [n.to_dict() for n in self.nobles],
            "phase": self.phase.name,
            "round_type": self.round_type.name,
            "winner": list(self.winner.player_ids) if self.winner else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Board:
        """
        Create a board from a dictionary representation.

        Args:
            data: Dictionary produced by to_dict()

        Returns:
            Board object
        """
        def tiers(raw: Mapping[str, List[Dict[str, Any]]]) -> Dict[CardTier, Deck]:
            return {
                CardTier(int(tier)): tuple(identified_card_from_dict(c) for c in cards)
                for tier, cards in raw.items()
            }

        winner = data.get("winner")
        return cls(
            players=tuple(Player.from_dict(p) for p in data["players"]),
            player_turn=int(data.get("player_turn", 0)),
            bank=Funds.from_dict(data["bank"]),
            decks=tiers(data.get("decks", {})),
            cards_for_sale=tiers(data.get("cards_for_sale", {})),
            nobles=tuple(Noble.from_dict(n) for n in data.get("nobles", [])),
            phase=Phase[data.get("phase", Phase.NORMAL.name)],
            round_type=RoundType[data.get("round_type", RoundType.NORMAL.name)],
            winner=Winner.draw(PlayerId(int(p)) for p in winner) if winner else None,
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> Board:
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        lines = [
            f"Turn: Player {self.current_player.id} ({self.phase.name}, {self.round_type.name})",
            f"Bank: {self.bank}",
        ]
        for tier in ALL_TIERS:
            lines.append(f"Tier {tier.value} ({len(self.decks[tier])} in deck):")
            lines.extend(f"  {card}" for card in self.cards_for_sale[tier])
        lines.append("Nobles: " + (", ".join(str(n) for n in self.nobles) or "none"))
        lines.extend(str(p) for p in self.players)
        if self.winner:
            lines.append(str(self.winner))
        return "\n".join(lines)


def apply_action(board: Board, action: Action) -> Board:
    """Module-level equivalent of Board.do_action."""
    return board.do_action(action)
