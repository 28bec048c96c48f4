"""Request-scoped errors raised by the banker services.

Every error here is recoverable and user-facing: the socket layer reports it
to the connection that issued the action as a ``room:error`` string and the
shared room state is left untouched.
"""
from typing import List, Optional


class BankerError(Exception):
    """Base exception for banker errors."""
    code = 'BANKER_ERROR'
    default_message = 'Something went wrong'

    def __init__(self, message: Optional[str] = None, messages: Optional[List] = None):
        self.message = message or self.default_message
        # Room messages that must still go out before the error is reported
        self.messages = list(messages or [])
        super().__init__(f"[{self.code}] {self.message}")


class NotInRoom(BankerError):
    code = 'NOT_IN_ROOM'
    default_message = 'Not in a room'


class RoomNotFound(BankerError):
    code = 'ROOM_NOT_FOUND'
    default_message = 'Room not found. Please check the room code.'


class RoomFull(BankerError):
    code = 'ROOM_FULL'
    default_message = 'Room is full.'

    def __init__(self, max_players: int):
        super().__init__(f"Room is full (max {max_players} players).")
        self.max_players = max_players


class PlayerNotFound(BankerError):
    code = 'PLAYER_NOT_FOUND'
    default_message = 'Player not found'


class InvalidAmount(BankerError):
    code = 'INVALID_AMOUNT'
    default_message = 'Amount must be a positive whole number'


class InsufficientBalance(BankerError):
    code = 'INSUFFICIENT_BALANCE'
    default_message = 'Insufficient balance'


class Unauthorized(BankerError):
    code = 'UNAUTHORIZED'
    default_message = 'You are not allowed to do that'


class TransactionNotFound(BankerError):
    code = 'TRANSACTION_NOT_FOUND'
    default_message = 'Transaction not found'


class InvalidPayload(BankerError):
    code = 'INVALID_PAYLOAD'
    default_message = 'Malformed request'
