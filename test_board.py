#!/usr/bin/env python
"""
Tests for the board state machine.

These walk through the turn, noble-selection and last-round protocol on
small hand-built boards.
"""
import unittest
from dataclasses import replace

from splendor_engine.core.actions import (
    PassTurn, CollectPieces, ReserveCardFromDeck, ReserveCardFromBoard, BuyCard, SelectNoble,
)
from splendor_engine.core.board import Board, Phase, RoundType, Winner, GameResult, apply_action
from splendor_engine.core.cards import Card, Identifiable, Noble, CardId, NobleId, PlayerId
from splendor_engine.core.constants import Token, CardTier
from splendor_engine.core.errors import (
    CannotCollectMoreThanThree, CannotReserveFromEmptyDeck, CardNotFound, CardNotFoundOnBoard,
    NotEnoughFundsToBuy, NobleNotFound, YouCannotSelectNobleNow, YouNeedToSelectNoble,
)
from splendor_engine.core.funds import Funds
from splendor_engine.core.player import Player

RED_GREEN_BLUE = CollectPieces.of([Token.RED, Token.GREEN, Token.BLUE])


def production_card(card_id: int, points: int = 1) -> Identifiable:
    return Identifiable(CardId(card_id), Card(Funds.of(1, 1, 0, 0, 0, 0), Token.RED, points))


def initial_bank() -> Funds:
    return Funds.of(7, 7, 7, 7, 7, 5)


def default_board() -> Board:
    players = [Player.new(i) for i in (1, 2, 3)]
    deck = [production_card(i) for i in (5, 4, 3, 2, 1)]
    return Board.create(players, initial_bank(), {CardTier.TIER_1: deck}, [])


def player_with_points(player_id: int, card_id: int, points: int) -> Player:
    return Player.new(player_id, production_cards=[production_card(card_id, points)])


def play(board: Board, *actions) -> Board:
    for action in actions:
        board = board.do_action(action)
    return board


class TestBoardSetup(unittest.TestCase):
    """Test case for the initial board."""

    def test_auto_draw_necessary_cards(self):
        board = default_board()
        self.assertEqual(len(board.get_cards_for_sale(CardTier.TIER_1)), 4)
        self.assertEqual(len(board.get_deck(CardTier.TIER_1)), 1)
        # The top of the deck is the end of the sequence
        self.assertEqual([c.uid for c in board.get_cards_for_sale(CardTier.TIER_1)], [1, 2, 3, 4])

        board = Board.create(
            [Player.new(1), Player.new(2)], initial_bank(),
            {CardTier.TIER_1: [production_card(5), production_card(4)]}, [],
        )
        self.assertEqual(len(board.get_deck(CardTier.TIER_1)), 0)
        self.assertEqual(len(board.get_cards_for_sale(CardTier.TIER_1)), 2)

    def test_missing_tiers_are_empty(self):
        board = default_board()
        self.assertEqual(board.get_deck(CardTier.TIER_3), ())
        self.assertEqual(board.get_cards_for_sale(CardTier.TIER_2), ())

    def test_initial_state(self):
        board = default_board()
        self.assertEqual(board.player_turn, 0)
        self.assertEqual(board.phase, Phase.NORMAL)
        self.assertEqual(board.round_type, RoundType.NORMAL)
        self.assertIsNone(board.winner)
        self.assertFalse(board.is_over)
        self.assertEqual(board.result, GameResult.IN_PROGRESS)

    def test_tier_mappings_are_read_only(self):
        board = default_board()
        with self.assertRaises(TypeError):
            board.decks[CardTier.TIER_1] = ()
        with self.assertRaises(TypeError):
            board.cards_for_sale[CardTier.TIER_2] = ()
        self.assertEqual(len(board.get_deck(CardTier.TIER_1)), 1)

    def test_boards_are_hashable(self):
        self.assertEqual(hash(default_board()), hash(default_board()))
        self.assertEqual(len({default_board(), default_board()}), 1)
        self.assertIn(default_board().do_action(PassTurn()), {default_board().do_action(PassTurn())})

    def test_get_player(self):
        board = default_board()
        self.assertEqual(board.get_player(PlayerId(2)), board.players[1])
        with self.assertRaises(ValueError):
            board.get_player(PlayerId(9))


class TestTurns(unittest.TestCase):
    """Test case for turn advancement and simple actions."""

    def test_can_pass_the_turn(self):
        board = default_board().do_action(PassTurn())
        self.assertEqual(board.player_turn, 1)

    def test_turn_cycles_back_to_first_player(self):
        board = default_board()
        board = board.do_action(PassTurn())
        self.assertEqual(board.player_turn, 1)
        board = board.do_action(PassTurn())
        self.assertEqual(board.player_turn, 2)
        board = board.do_action(PassTurn())
        self.assertEqual(board.player_turn, 0)

    def test_input_board_is_unchanged(self):
        board = default_board()
        apply_action(board, RED_GREEN_BLUE)
        self.assertEqual(board, default_board())

    def test_can_collect_up_to_three_pieces(self):
        board = default_board().do_action(CollectPieces.of([Token.RED, Token.BLUE, Token.WHITE]))
        self.assertEqual(board.bank[Token.RED], 6)
        self.assertEqual(board.bank[Token.BLUE], 6)
        self.assertEqual(board.bank[Token.WHITE], 6)
        self.assertEqual(board.players[0].funds, Funds.of(1, 0, 1, 0, 1, 0))

        with self.assertRaises(CannotCollectMoreThanThree):
            default_board().do_action(
                CollectPieces.of([Token.RED, Token.BLUE, Token.WHITE, Token.RED])
            )


class TestReserve(unittest.TestCase):
    """Test case for both reservation actions."""

    def test_can_reserve_card_from_deck(self):
        board = default_board()
        board = board.do_action(ReserveCardFromDeck(CardTier.TIER_1))

        self.assertEqual(board.players[0].reserved_cards, (production_card(5),))
        self.assertEqual(len(board.get_deck(CardTier.TIER_1)), 0)
        self.assertEqual(board.player_turn, 1)
        self.assertEqual(board.round_type, RoundType.NORMAL)
        # No golden token comes with a deck reservation
        self.assertEqual(board.bank, initial_bank())

        with self.assertRaises(CannotReserveFromEmptyDeck) as cm:
            board.do_action(ReserveCardFromDeck(CardTier.TIER_1))
        self.assertEqual(cm.exception.tier, CardTier.TIER_1)

    def test_reserve_from_deck_ignores_the_hand_cap(self):
        board = default_board()
        board = replace(board, players=(
            Player.new(1, reserved_cards=[production_card(i) for i in (6, 7, 8)]),
        ) + board.players[1:])
        board = board.do_action(ReserveCardFromDeck(CardTier.TIER_1))
        self.assertEqual(len(board.players[0].reserved_cards), 4)

    def test_can_reserve_card_from_board(self):
        board = default_board().do_action(ReserveCardFromBoard(CardId(1)))
        player_one = board.players[0]

        self.assertEqual(player_one.reserved_cards, (production_card(1),))
        self.assertEqual(player_one.funds[Token.GOLDEN], 1)
        self.assertEqual(board.bank[Token.GOLDEN], 4)
        self.assertEqual(board.player_turn, 1)
        # The reserved card stays for sale
        self.assertIsNotNone(board.get_card_from_board(CardId(1)))

    def test_cannot_reserve_card_that_does_not_exist(self):
        with self.assertRaises(CardNotFound):
            default_board().do_action(ReserveCardFromBoard(CardId(255)))


class TestBuy(unittest.TestCase):
    """Test case for buying cards."""

    def test_can_buy_production_card(self):
        board = default_board()
        self.assertEqual(board.bank, Funds.of(7, 7, 7, 7, 7, 5))

        board = board.do_action(RED_GREEN_BLUE)
        self.assertEqual(board.bank, Funds.of(6, 6, 6, 7, 7, 5))
        board = play(board, PassTurn(), PassTurn(), RED_GREEN_BLUE)
        self.assertEqual(board.bank, Funds.of(5, 5, 5, 7, 7, 5))
        board = play(board, PassTurn(), PassTurn())

        player_one = board.players[0]
        self.assertEqual(len(player_one.production_cards), 0)
        self.assertEqual(player_one.funds, Funds.of(2, 2, 2, 0, 0, 0))

        board = play(board, BuyCard(CardId(1)), PassTurn(), PassTurn())
        player_one = board.players[0]
        self.assertEqual(len(player_one.production_cards), 1)
        self.assertEqual(player_one.funds, Funds.of(1, 1, 2, 0, 0, 0))
        self.assertEqual(board.bank, Funds.of(6, 6, 5, 7, 7, 5))

        # A replacement was drawn
        self.assertEqual(len(board.get_deck(CardTier.TIER_1)), 0)
        self.assertEqual(len(board.get_cards_for_sale(CardTier.TIER_1)), 4)

        with self.assertRaises(CardNotFoundOnBoard):
            board.do_action(BuyCard(CardId(1)))

        # The red production card pays for red, only green is spent
        board = board.do_action(BuyCard(CardId(2)))
        player_one = board.players[0]
        self.assertEqual(len(player_one.production_cards), 2)
        self.assertEqual(player_one.funds, Funds.of(1, 0, 2, 0, 0, 0))
        self.assertEqual(board.bank, Funds.of(6, 7, 5, 7, 7, 5))

    def test_window_shrinks_when_the_deck_is_empty(self):
        board = Board.create(
            [Player.new(1, Funds.of(1, 1, 0, 0, 0, 0)), Player.new(2)], initial_bank(),
            {CardTier.TIER_1: [production_card(2), production_card(1)]}, [],
        )
        board = board.do_action(BuyCard(CardId(1)))
        self.assertEqual([c.uid for c in board.get_cards_for_sale(CardTier.TIER_1)], [2])

    def test_replacement_comes_from_the_same_tier(self):
        tier_two_card = Identifiable(CardId(50), Card(Funds.of(0, 0, 1, 0, 0, 0), Token.BLUE, 2))
        board = Board.create(
            [Player.new(1, Funds.of(1, 1, 0, 0, 0, 0)), Player.new(2)], initial_bank(),
            {
                CardTier.TIER_1: [production_card(9), production_card(1)],
                CardTier.TIER_2: [production_card(60), tier_two_card],
            },
            [],
        )
        board = board.do_action(BuyCard(CardId(1)))
        self.assertEqual(len(board.get_deck(CardTier.TIER_2)), 0)
        self.assertEqual(len(board.get_cards_for_sale(CardTier.TIER_2)), 2)
        self.assertEqual([c.uid for c in board.get_cards_for_sale(CardTier.TIER_1)], [9])

    def test_cannot_buy_production_card_without_pieces(self):
        with self.assertRaises(NotEnoughFundsToBuy) as cm:
            default_board().do_action(BuyCard(CardId(1)))
        self.assertEqual(cm.exception.missing, Funds.of(1, 1, 0, 0, 0, 0))

    def test_can_buy_card_using_golden_and_production(self):
        red_card = Identifiable(CardId(100), Card(Funds.of(1, 1, 0, 0, 0, 0), Token.RED, 1))
        card_to_buy = Identifiable(CardId(101), Card(Funds.of(3, 1, 0, 0, 0, 0), Token.BLUE, 1))
        p1 = Player.new(1, Funds.of(1, 1, 0, 0, 0, 2), [red_card])
        deck = [production_card(i) for i in (5, 4, 3, 2, 1)] + [card_to_buy]
        board = Board.create([p1, Player.new(2), Player.new(3)], initial_bank(),
                             {CardTier.TIER_1: deck}, [])

        board = board.do_action(BuyCard(CardId(101)))
        player_one = board.players[0]
        self.assertEqual(len(player_one.production_cards), 2)
        self.assertEqual(player_one.funds, Funds.of(0, 0, 0, 0, 0, 1))
        self.assertEqual(board.bank, Funds.of(8, 8, 7, 7, 7, 6))


class TestNobles(unittest.TestCase):
    """Test case for the noble selection phase."""

    def setUp(self):
        self.noble_to_select = Noble(NobleId(1), Funds.of(1, 0, 0, 0, 0, 0))
        self.second_noble = Noble(NobleId(2), Funds.of(1, 0, 0, 0, 0, 0))
        self.board = replace(default_board(), nobles=(self.noble_to_select, self.second_noble))

    def test_can_select_a_noble_only_after_buying(self):
        with self.assertRaises(YouCannotSelectNobleNow):
            self.board.do_action(SelectNoble(NobleId(1)))

        board = play(self.board, RED_GREEN_BLUE, PassTurn(), PassTurn())
        self.assertEqual(board.phase, Phase.NORMAL)

        board = board.do_action(BuyCard(CardId(1)))
        # The same player keeps the turn to pick a noble
        self.assertEqual(board.player_turn, 0)
        self.assertEqual(board.phase, Phase.AWAITING_NOBLE_SELECTION)

        with self.assertRaises(YouNeedToSelectNoble):
            board.do_action(RED_GREEN_BLUE)
        self.assertEqual(len(board.players[0].nobles), 0)

        with self.assertRaises(NobleNotFound):
            board.do_action(SelectNoble(NobleId(255)))

        board = board.do_action(SelectNoble(NobleId(1)))
        self.assertEqual(board.players[0].nobles, (self.noble_to_select,))
        self.assertEqual(board.nobles, (self.second_noble,))
        # Still eligible for the second noble, but a selection never chains
        self.assertEqual(board.phase, Phase.NORMAL)
        self.assertEqual(board.player_turn, 1)

    def test_stored_tokens_do_not_count_for_nobles(self):
        board = self.board.do_action(CollectPieces.of([Token.RED, Token.RED]))
        self.assertEqual(board.phase, Phase.NORMAL)
        self.assertEqual(board.player_turn, 1)

    def test_noble_points_count(self):
        board = play(self.board, RED_GREEN_BLUE, PassTurn(), PassTurn(),
                     BuyCard(CardId(1)), SelectNoble(NobleId(2)))
        self.assertEqual(board.players[0].total_victory_points(), 4)


class TestEndGame(unittest.TestCase):
    """Test case for the last round and the winner."""

    def test_last_round_triggered_after_hitting_fifteen_points(self):
        player_one = Player.new(
            1, Funds.of(3, 3, 2, 2, 0, 0), [production_card(i) for i in range(100, 112)]
        )
        card_to_buy = Identifiable(CardId(112), Card(Funds.of(1, 1, 1, 0, 0, 0), Token.BLUE, 3))
        board = replace(
            default_board(),
            players=(player_one, Player.new(2)),
            cards_for_sale={CardTier.TIER_1: (card_to_buy,)},
        )
        self.assertEqual(board.round_type, RoundType.NORMAL)

        board = board.do_action(BuyCard(CardId(112)))
        self.assertEqual(board.round_type, RoundType.LAST_ROUND)
        self.assertIsNone(board.winner)

        # The second (last) seat passes, ending the game
        board = board.do_action(PassTurn())
        self.assertEqual(board.winner, Winner.single(PlayerId(1)))
        self.assertTrue(board.is_over)
        self.assertEqual(board.winner.result, GameResult.WINNER)

    def test_winner_uses_the_roster_before_the_final_action(self):
        card_to_buy = Identifiable(CardId(112), Card(Funds.of(1, 1, 0, 0, 0, 0), Token.BLUE, 5))
        player_two = Player.new(2, Funds.of(0, 1, 0, 0, 0, 0), [production_card(101, 14)])
        board = replace(
            default_board(),
            players=(player_with_points(1, 100, 15), player_two),
            cards_for_sale={CardTier.TIER_1: (card_to_buy,)},
            round_type=RoundType.LAST_ROUND,
            player_turn=1,
        )

        board = board.do_action(BuyCard(CardId(112)))
        self.assertEqual(board.players[1].total_victory_points(), 19)
        self.assertEqual(board.winner, Winner.single(PlayerId(1)))
        self.assertEqual(board.player_turn, 0)

    def test_pending_noble_on_the_last_seat_holds_the_winner(self):
        player_two = Player.new(2, Funds.of(1, 1, 0, 0, 0, 0))
        board = replace(
            default_board(),
            players=(player_with_points(1, 100, 15), player_two),
            nobles=(Noble(NobleId(1), Funds.of(1, 0, 0, 0, 0, 0)),),
            round_type=RoundType.LAST_ROUND,
            player_turn=1,
        )

        board = board.do_action(BuyCard(CardId(1)))
        self.assertEqual(board.phase, Phase.AWAITING_NOBLE_SELECTION)
        self.assertIsNone(board.winner)
        self.assertEqual(board.player_turn, 1)

        board = board.do_action(SelectNoble(NobleId(1)))
        self.assertEqual(board.players[1].total_victory_points(), 4)
        self.assertEqual(board.winner, Winner.single(PlayerId(1)))
        self.assertEqual(board.player_turn, 0)

    def _last_round(self, *players: Player) -> Board:
        return replace(default_board(), players=players, round_type=RoundType.LAST_ROUND)

    def test_correctly_get_winner(self):
        board = self._last_round(
            player_with_points(1, 100, 16),
            player_with_points(2, 101, 10),
            player_with_points(3, 102, 17),
        )
        board = play(board, PassTurn(), PassTurn())
        self.assertIsNone(board.winner)
        board = board.do_action(PassTurn())
        self.assertEqual(board.winner, Winner.single(PlayerId(3)))

    def test_tie_in_points_goes_to_fewest_cards(self):
        player_one = player_with_points(1, 100, 15).add_production_card(production_card(103))
        self.assertEqual(player_one.total_victory_points(), 16)
        board = self._last_round(
            player_one,
            player_with_points(2, 101, 16),
            player_with_points(3, 102, 15),
        )
        board = play(board, PassTurn(), PassTurn(), PassTurn())
        self.assertEqual(board.winner, Winner.single(PlayerId(2)))

    def test_draw_lists_tied_players_in_board_order(self):
        board = self._last_round(
            player_with_points(1, 100, 16),
            player_with_points(2, 101, 17),
            player_with_points(3, 102, 17),
        )
        board = play(board, PassTurn(), PassTurn(), PassTurn())
        self.assertEqual(board.winner, Winner.draw([PlayerId(2), PlayerId(3)]))
        self.assertTrue(board.winner.is_draw)
        self.assertEqual(board.winner.result, GameResult.DRAW)
        self.assertEqual(board.result, GameResult.DRAW)

    def test_board_still_accepts_actions_after_a_winner(self):
        board = self._last_round(
            player_with_points(1, 100, 16),
            player_with_points(2, 101, 10),
            player_with_points(3, 102, 17),
        )
        board = play(board, PassTurn(), PassTurn(), PassTurn(), PassTurn())
        self.assertEqual(board.player_turn, 1)
        self.assertTrue(board.is_over)


class TestSerialization(unittest.TestCase):
    """Test case for the broadcast form of the board."""

    def test_json_round_trip(self):
        board = replace(default_board(), nobles=(Noble(NobleId(3), Funds.of(4, 4, 0, 0, 0, 0)),))
        board = play(board, RED_GREEN_BLUE, ReserveCardFromBoard(CardId(2)))
        self.assertEqual(Board.from_json(board.to_json()), board)

    def test_winner_round_trip(self):
        board = replace(default_board(), winner=Winner.draw([PlayerId(1), PlayerId(3)]))
        data = board.to_dict()
        self.assertEqual(data["winner"], [1, 3])
        self.assertEqual(Board.from_dict(data).winner, board.winner)


if __name__ == "__main__":
    unittest.main()
