"""
Message envelope exchanged between table participants.

Every message carries its sender id and a unique message id. Messages are
JSON objects tagged by a `type` field:

- join_table: a participant asks for a seat
- start_game: a participant asks the table to deal a new game
- action: a seated player submits an action for their turn
- announcement: human-readable text from the table host
- board_state_updated: the full board after a successful action
"""
from typing import Annotated, Any, Dict, Literal, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from splendor_engine.core.actions import Action, create_action_from_dict
from splendor_engine.core.board import Board
from splendor_engine.core.errors import SplendorError


class MessageDecodeError(SplendorError):
    """Raised when incoming bytes are not a valid message."""
    code = "MESSAGE_DECODE_ERROR"

    def __init__(self, reason: str):
        super().__init__(f"Malformed message: {reason}", {"reason": reason})


# =============================================================================
# Messages
# =============================================================================

class _Envelope(BaseModel):
    """Fields shared by every message."""
    from_: str = Field(alias="from", description="Sender id")
    message_id: UUID = Field(default_factory=uuid4)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class JoinTable(_Envelope):
    """Request for a seat at the table."""
    type: Literal["join_table"] = "join_table"


class StartGame(_Envelope):
    """Request to start a game with the seated players."""
    type: Literal["start_game"] = "start_game"


class ActionMessage(_Envelope):
    """A player action, carried in its dictionary form."""
    type: Literal["action"] = "action"
    action: Dict[str, Any]

    @field_validator("action")
    @classmethod
    def _check_action(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        # Raises ValueError for unknown or malformed actions
        create_action_from_dict(value)
        return value

    @classmethod
    def of(cls, sender: str, action: Action) -> "ActionMessage":
        return cls(from_=sender, action=action.to_dict())

    def to_action(self) -> Action:
        return create_action_from_dict(self.action)


class Announcement(_Envelope):
    """Text from the table host."""
    type: Literal["announcement"] = "announcement"
    message: str


class BoardStateUpdated(_Envelope):
    """The board after a successful transition."""
    type: Literal["board_state_updated"] = "board_state_updated"
    board: Dict[str, Any]

    @classmethod
    def of(cls, sender: str, board: Board) -> "BoardStateUpdated":
        return cls(from_=sender, board=board.to_dict())

    def to_board(self) -> Board:
        return Board.from_dict(self.board)


Message = Annotated[
    Union[JoinTable, StartGame, ActionMessage, Announcement, BoardStateUpdated],
    Field(discriminator="type"),
]

_message_adapter: TypeAdapter = TypeAdapter(Message)


def encode_message(message: _Envelope) -> bytes:
    """Serialize a message to JSON bytes, using `from` as the sender key."""
    return message.model_dump_json(by_alias=True).encode("utf-8")


def decode_message(data: Union[bytes, str]) -> Message:
    """
    Parse JSON bytes into the matching message type.

    Raises:
        MessageDecodeError: If the payload is not a valid message
    """
    try:
        return _message_adapter.validate_json(data)
    except ValidationError as e:
        raise MessageDecodeError(str(e)) from e
