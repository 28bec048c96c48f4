"""Inbound Socket.IO event payloads.

Each client event is parsed into a small dataclass before it reaches the
coordinator, so a missing or mistyped field turns into an ``InvalidPayload``
error for the sender instead of a crash halfway through a handler.
Amount values are passed through untouched; the coordinator decides
whether they are acceptable.
"""
from dataclasses import dataclass
from typing import Any, Optional

from banker.errors import InvalidPayload

ROOM_CREATE = 'room:create'
ROOM_JOIN = 'room:join'
ROOM_LEAVE = 'room:leave'
TRANSACTION_TRANSFER = 'transaction:transfer'
TRANSACTION_REQUEST = 'transaction:request'
TRANSACTION_RESPOND = 'transaction:respond'
BALANCE_EDIT = 'balance:edit'

MAX_NAME_LENGTH = 40
MAX_MESSAGE_LENGTH = 200


def _payload(data) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidPayload('Payload must be an object')
    return data


def _text(data: dict, key: str, max_length: int = MAX_NAME_LENGTH) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidPayload(f'{key} is required')
    value = value.strip()
    if len(value) > max_length:
        raise InvalidPayload(f'{key} must be at most {max_length} characters')
    return value


def _present(data: dict, key: str) -> Any:
    if data.get(key) is None:
        raise InvalidPayload(f'{key} is required')
    return data[key]


def _message(data: dict) -> Optional[str]:
    value = data.get('message')
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidPayload('message must be text')
    value = value.strip()
    if len(value) > MAX_MESSAGE_LENGTH:
        raise InvalidPayload(f'message must be at most {MAX_MESSAGE_LENGTH} characters')
    return value or None


@dataclass
class CreateRoom:
    room_name: str
    player_name: str
    initial_balance: Any

    @classmethod
    def from_payload(cls, data):
        data = _payload(data)
        return cls(
            room_name=_text(data, 'roomName'),
            player_name=_text(data, 'playerName'),
            initial_balance=_present(data, 'initialBalance'),
        )


@dataclass
class JoinRoom:
    room_id: str
    player_name: str

    @classmethod
    def from_payload(cls, data):
        data = _payload(data)
        return cls(room_id=_text(data, 'roomId'), player_name=_text(data, 'playerName'))


@dataclass
class Transfer:
    to_player_id: str
    amount: Any
    message: Optional[str] = None

    @classmethod
    def from_payload(cls, data):
        data = _payload(data)
        return cls(
            to_player_id=_text(data, 'toPlayerId', max_length=64),
            amount=_present(data, 'amount'),
            message=_message(data),
        )


@dataclass
class RequestMoney:
    from_player_id: str
    amount: Any
    message: Optional[str] = None

    @classmethod
    def from_payload(cls, data):
        data = _payload(data)
        return cls(
            from_player_id=_text(data, 'fromPlayerId', max_length=64),
            amount=_present(data, 'amount'),
            message=_message(data),
        )


@dataclass
class RespondToRequest:
    transaction_id: str
    accept: bool

    @classmethod
    def from_payload(cls, data):
        data = _payload(data)
        accept = data.get('accept')
        if not isinstance(accept, bool):
            raise InvalidPayload('accept must be true or false')
        return cls(transaction_id=_text(data, 'transactionId', max_length=64), accept=accept)


@dataclass
class EditBalance:
    player_id: str
    new_balance: Any

    @classmethod
    def from_payload(cls, data):
        data = _payload(data)
        return cls(
            player_id=_text(data, 'playerId', max_length=64),
            new_balance=_present(data, 'newBalance'),
        )
