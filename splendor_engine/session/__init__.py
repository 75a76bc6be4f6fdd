"""
Session layer: the message envelope and the table orchestrator.
"""

from splendor_engine.session.messages import (
    Message, MessageDecodeError,
    JoinTable, StartGame, ActionMessage, Announcement, BoardStateUpdated,
    encode_message, decode_message,
)
from splendor_engine.session.manager import TableSession

__all__ = [
    'Message', 'MessageDecodeError',
    'JoinTable', 'StartGame', 'ActionMessage', 'Announcement', 'BoardStateUpdated',
    'encode_message', 'decode_message',
    'TableSession',
]
