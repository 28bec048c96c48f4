from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, List, Optional

# Avatar options
AVATARS = [
    '🎩', '🚗', '🐕', '👢', '🚢', '🎀', '💎', '🎲',
    '🏠', '🔑', '💰', '🎭', '🎯', '🏆', '⭐', '🌟',
]

# Player colors
PLAYER_COLORS = [
    '#E63946',  # Red
    '#2A9D8F',  # Teal
    '#E9C46A',  # Yellow
    '#264653',  # Dark Blue
    '#F4A261',  # Orange
    '#9B5DE5',  # Purple
    '#00BBF9',  # Sky Blue
    '#00F5D4',  # Mint
]

TRANSFER = 'transfer'
REQUEST = 'request'

PENDING = 'pending'
ACCEPTED = 'accepted'
REJECTED = 'rejected'


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(moment: datetime) -> str:
    """Render a datetime the way JSON.stringify renders a JS Date."""
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class Player:
    id: str
    name: str
    avatar: str
    color: str
    balance: int = 0

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'avatar': self.avatar,
            'balance': self.balance,
            'color': self.color,
        }


@dataclass
class Transaction:
    id: str
    type: str
    from_id: str
    to_id: str
    amount: int
    room_id: str
    status: str = PENDING
    message: Optional[str] = None
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING

    def resolve(self, status: str) -> None:
        """Move a pending request to a terminal status (exactly once)."""
        if status not in (ACCEPTED, REJECTED):
            raise ValueError(f"Unknown terminal status: {status}")
        if not self.is_pending:
            raise ValueError(f"Transaction {self.id} is already {self.status}")
        self.status = status

    def to_dict(self):
        data = {
            'id': self.id,
            'type': self.type,
            'fromId': self.from_id,
            'toId': self.to_id,
            'amount': self.amount,
            'status': self.status,
            'timestamp': isoformat(self.timestamp),
        }
        if self.message is not None:
            data['message'] = self.message
        return data


class Room:
    """Runtime state for a single banker room.

    ``players`` keeps join order; the first entry is the oldest member and
    inherits the host role when the current host leaves.
    """

    def __init__(self, room_id: str, name: str, initial_balance: int, history_limit: int = 50):
        self.id = room_id
        self.name = name
        self.initial_balance = initial_balance
        self.created_at = utcnow()
        self.host_id: Optional[str] = None
        self.players: List[Player] = []
        # Recent transactions for display only; pending requests live in the ledger
        self.transactions: Deque[Transaction] = deque(maxlen=max(0, history_limit))

    def find_player(self, player_id) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def record(self, transaction: Transaction) -> None:
        """Add a transaction to recent history, replacing an older copy with the same id."""
        for idx, existing in enumerate(self.transactions):
            if existing.id == transaction.id:
                self.transactions[idx] = transaction
                return
        self.transactions.append(transaction)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'players': [p.to_dict() for p in self.players],
            'initialBalance': self.initial_balance,
            'createdAt': isoformat(self.created_at),
            'hostId': self.host_id,
            'transactions': [t.to_dict() for t in self.transactions],
        }
