"""
Table Session - Seats players and applies their actions to a shared board.

The session is transport agnostic: it takes one incoming message and
returns the messages to broadcast in reply. It owns everything the rules
engine leaves to the caller:

- Seats are assigned in join order; seat n plays as player id n
- Only the seat whose turn it is may submit an action
- Once a winner is declared, further actions are refused
"""
from __future__ import annotations
import logging
import random
from typing import List, Optional

from splendor_engine.config import SessionConfig
from splendor_engine.core.board import Board
from splendor_engine.core.errors import ActionFail
from splendor_engine.core.game import create_board
from splendor_engine.session.messages import (
    Message, JoinTable, StartGame, ActionMessage, Announcement, BoardStateUpdated,
)

logger = logging.getLogger(__name__)


class TableSession:
    """
    A single game table hosted by one participant.

    Holds the seats, whether a game is running, and the current board.
    """

    def __init__(self, host_id: str, config: Optional[SessionConfig] = None):
        self.host_id = host_id
        self.config = config or SessionConfig()
        self.seats: List[str] = []
        self.board: Optional[Board] = None
        self._rng = random.Random(self.config.seed)

    @property
    def is_game_running(self) -> bool:
        return self.board is not None

    @property
    def current_seat(self) -> Optional[str]:
        """Sender id of the seat whose turn it is, if a game is running."""
        if self.board is None:
            return None
        return self.seats[self.board.current_player.id - 1]

    def _announce(self, text: str) -> Announcement:
        return Announcement(from_=self.host_id, message=text)

    def handle(self, message: Message) -> List[Message]:
        """
        Process one incoming message.

        Args:
            message: Message received from the transport

        Returns:
            Messages to broadcast in reply, possibly none
        """
        if isinstance(message, JoinTable):
            return self._join(message)
        if isinstance(message, StartGame):
            return self._start(message)
        if isinstance(message, ActionMessage):
            return self._act(message)
        # Announcements and board updates are output only
        return []

    def _join(self, message: JoinTable) -> List[Message]:
        sender = message.from_
        if sender in self.seats:
            return [self._announce(f"{sender} is already seated")]

        if len(self.seats) >= self.config.max_seats:
            logger.info("Refused seat for %s: table full", sender)
            return [self._announce("The table is full")]

        self.seats.append(sender)
        logger.info("%s joined the table at seat %d", sender, len(self.seats))
        return [self._announce(f"{sender} joined the table at seat {len(self.seats)}")]

    def _start(self, message: StartGame) -> List[Message]:
        if len(self.seats) < self.config.min_seats_to_start:
            return [self._announce(
                f"Not enough players (minimum {self.config.min_seats_to_start}, got {len(self.seats)})"
            )]

        if self.board is not None and not self.board.is_over:
            return [self._announce("Game is already running")]

        self.board = create_board(len(self.seats), self._rng)
        logger.info("Started a game with %d players, requested by %s", len(self.seats), message.from_)
        return [
            self._announce(f"Starting a new game with {len(self.seats)} players"),
            BoardStateUpdated.of(self.host_id, self.board),
            self._announce(f"It is {self.current_seat} turn now."),
        ]

    def _act(self, message: ActionMessage) -> List[Message]:
        if self.board is None:
            return [self._announce("The game hasn't started yet")]

        if self.board.is_over:
            return [self._announce(f"The game is over: {self.board.winner}")]

        if message.from_ != self.current_seat:
            logger.debug("Out of turn action from %s", message.from_)
            return [self._announce(f"It is {self.current_seat} turn now.")]

        action = message.to_action()
        try:
            board = self.board.do_action(action)
        except ActionFail as e:
            logger.info("Rejected %s from %s: %s", action, message.from_, e)
            return [self._announce(str(e))]

        self.board = board
        logger.info("Applied %s from %s", action, message.from_)

        replies: List[Message] = [BoardStateUpdated.of(self.host_id, board)]
        if board.is_over:
            logger.info("Game over: %s", board.winner)
            replies.append(self._announce(f"The game is over: {board.winner}"))
        else:
            replies.append(self._announce(f"It is {self.current_seat} turn now."))
        return replies
