import logging
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from banker.errors import (
    InsufficientBalance,
    InvalidAmount,
    NotInRoom,
    PlayerNotFound,
    TransactionNotFound,
    Unauthorized,
)
from banker.models import ACCEPTED, REJECTED, REQUEST, TRANSFER, Player, Room, Transaction
from .identifiers import new_entity_id
from .ledger import PendingRequestLedger
from .registry import RoomRegistry
from .sessions import SessionDirectory


@dataclass
class Message:
    """An outbound Socket.IO event.

    ``room`` of None means the connection that issued the action; otherwise
    the event goes to every member of that room, optionally skipping the
    requester.
    """

    event: str
    payload: Any
    room: Optional[str] = None
    skip_requester: bool = False


@dataclass
class Outcome:
    messages: List[Message] = field(default_factory=list)
    joined_room: Optional[str] = None
    left_room: Optional[str] = None


def whole_number(value, allow_zero: bool = False, message: Optional[str] = None) -> int:
    """Coerce a client-supplied amount to an int or raise InvalidAmount."""
    if isinstance(value, bool):
        raise InvalidAmount(message)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        raise InvalidAmount(message)
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidAmount(message)
    return value


class TransactionCoordinator:
    """Validates and applies every balance-changing action for all rooms.

    Each public method runs to completion under one lock: validation first,
    then mutation, then the snapshots for the returned ``Outcome``. The lock
    is reentrant and public: callers that send the outcome hold ``lock``
    around both the call and the emits, so rooms see events in the order
    they were applied.
    """

    def __init__(self, registry: RoomRegistry, sessions: SessionDirectory,
                 ledger: PendingRequestLedger, logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.sessions = sessions
        self.ledger = ledger
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()

    # ---- rooms ----

    def create_room(self, sid: str, room_name: str, player_name: str, initial_balance) -> Outcome:
        with self.lock:
            balance = whole_number(
                initial_balance, allow_zero=True,
                message='Starting balance must be a non-negative whole number',
            )
            outcome = self._depart(sid)
            room, player = self.registry.create(room_name, player_name, balance)
            self.sessions.bind(sid, room.id, player.id)
            outcome.joined_room = room.id
            outcome.messages.append(Message('room:joined', {'room': room.to_dict(), 'player': player.to_dict()}))
            self.logger.info(f"[create] room={room.id} host={player.name} initial_balance={balance}")
            return outcome

    def join_room(self, sid: str, room_id: str, player_name: str) -> Outcome:
        with self.lock:
            current = self.sessions.resolve(sid)
            if current is not None and current[0] is self.registry.get(room_id):
                # Already a member: answer with the existing seat
                room, player = current
                return Outcome(
                    messages=[Message('room:joined', {'room': room.to_dict(), 'player': player.to_dict()})],
                    joined_room=room.id,
                )
            room, player = self.registry.join(room_id, player_name)
            outcome = self._depart(sid)
            self.sessions.bind(sid, room.id, player.id)
            outcome.joined_room = room.id
            snapshot = room.to_dict()
            outcome.messages.extend([
                Message('room:joined', {'room': snapshot, 'player': player.to_dict()}),
                Message('player:joined', player.to_dict(), room=room.id, skip_requester=True),
                Message('room:updated', snapshot, room=room.id, skip_requester=True),
            ])
            self.logger.info(f"[join] room={room.id} player={player.name} members={len(room.players)}")
            return outcome

    def leave(self, sid: str) -> Outcome:
        """Handle both an explicit leave and a dropped connection; safe to repeat."""
        with self.lock:
            return self._depart(sid)

    # ---- money ----

    def transfer(self, sid: str, to_player_id, amount, message: Optional[str] = None) -> Outcome:
        with self.lock:
            room, sender = self._require_session(sid)
            receiver = room.find_player(to_player_id)
            if receiver is None:
                raise PlayerNotFound()
            amount = whole_number(amount)
            if sender.balance < amount:
                raise InsufficientBalance()

            sender.balance -= amount
            receiver.balance += amount
            transaction = Transaction(
                id=new_entity_id(),
                type=TRANSFER,
                from_id=sender.id,
                to_id=receiver.id,
                amount=amount,
                room_id=room.id,
                status=ACCEPTED,
                message=message,
            )
            room.record(transaction)
            self.logger.info(f"[transfer] room={room.id} {sender.name} -> {receiver.name} amount={amount}")
            return Outcome(messages=[
                Message('room:updated', room.to_dict(), room=room.id),
                Message('transaction:completed', transaction.to_dict(), room=room.id),
            ])

    def request_money(self, sid: str, from_player_id, amount, message: Optional[str] = None) -> Outcome:
        # The payer's balance is only checked when they answer
        with self.lock:
            room, requester = self._require_session(sid)
            payer = room.find_player(from_player_id)
            if payer is None:
                raise PlayerNotFound()
            amount = whole_number(amount)

            transaction = Transaction(
                id=new_entity_id(),
                type=REQUEST,
                from_id=payer.id,
                to_id=requester.id,
                amount=amount,
                room_id=room.id,
                message=message,
            )
            self.ledger.put(transaction)
            room.record(transaction)
            self.logger.info(f"[request] room={room.id} {requester.name} <- {payer.name} amount={amount}")
            return Outcome(messages=[
                Message('transaction:request', transaction.to_dict(), room=room.id),
            ])

    def respond_to_request(self, sid: str, transaction_id, accept: bool) -> Outcome:
        with self.lock:
            transaction = self.ledger.get(transaction_id)
            if transaction is None:
                raise TransactionNotFound()
            room, payer = self._require_session(sid)
            if payer.id != transaction.from_id:
                raise Unauthorized('Only the payer can respond to this request')
            requester = room.find_player(transaction.to_id)
            if requester is None:
                raise PlayerNotFound()

            self.ledger.remove(transaction.id)
            short = accept and payer.balance < transaction.amount
            if accept and not short:
                payer.balance -= transaction.amount
                requester.balance += transaction.amount
                transaction.resolve(ACCEPTED)
            else:
                transaction.resolve(REJECTED)
            room.record(transaction)

            messages = [
                Message('transaction:response', transaction.to_dict(), room=room.id),
                Message('room:updated', room.to_dict(), room=room.id),
            ]
            self.logger.info(
                f"[respond] room={room.id} {payer.name} -> {requester.name} "
                f"amount={transaction.amount} status={transaction.status}"
            )
            if short:
                # Resolved as rejected for everyone; the payer also gets the reason
                raise InsufficientBalance(messages=messages)
            return Outcome(messages=messages)

    def edit_balance(self, sid: str, player_id, new_balance) -> Outcome:
        """Host override: set a balance outright. No transaction is recorded."""
        with self.lock:
            room, editor = self._require_session(sid)
            if editor.id != room.host_id:
                raise Unauthorized('Only the host can edit balances')
            target = room.find_player(player_id)
            if target is None:
                raise PlayerNotFound()
            new_balance = whole_number(
                new_balance, allow_zero=True,
                message='Balance must be a non-negative whole number',
            )

            old_balance = target.balance
            target.balance = new_balance
            self.logger.info(
                f"[balance-edit] room={room.id} host={editor.name} {target.name} {old_balance} -> {new_balance}"
            )
            return Outcome(messages=[
                Message('room:updated', room.to_dict(), room=room.id),
                Message('balance:updated', {'playerId': target.id, 'balance': new_balance}, room=room.id),
            ])

    # ---- helpers ----

    def _require_session(self, sid: str) -> Tuple[Room, Player]:
        resolved = self.sessions.resolve(sid)
        if resolved is None:
            raise NotInRoom()
        return resolved

    def _depart(self, sid: str) -> Outcome:
        entry = self.sessions.binding(sid)
        if entry is None:
            return Outcome()
        self.sessions.unbind(sid)
        room_id, player_id = entry
        outcome = Outcome(left_room=room_id)

        room = self.registry.get(room_id)
        player = self.registry.leave(room_id, player_id)
        if room is None or player is None:
            return outcome

        cancelled = []
        for transaction in self.ledger.involving(player.id):
            self.ledger.remove(transaction.id)
            transaction.resolve(REJECTED)
            cancelled.append(transaction)

        if room.id not in self.registry:
            for transaction in self.ledger.for_room(room.id):
                self.ledger.remove(transaction.id)
            self.logger.info(f"[room-closed] room={room.id} last player {player.name} left")
            return outcome

        outcome.messages.append(Message('player:left', player.id, room=room.id, skip_requester=True))
        for transaction in cancelled:
            room.record(transaction)
            outcome.messages.append(Message('transaction:response', transaction.to_dict(), room=room.id))
        outcome.messages.append(Message('room:updated', room.to_dict(), room=room.id))
        self.logger.info(
            f"[leave] room={room.id} player={player.name} host={room.host_id} members={len(room.players)}"
            + (f" cancelled_requests={len(cancelled)}" if cancelled else '')
        )
        return outcome
