from typing import Dict, List, Optional

from banker.models import Transaction


class PendingRequestLedger:
    """Money requests waiting on the payer, keyed by transaction id.

    Entries stay until the payer answers or one of the two players leaves;
    there is no time-based expiry.
    """

    def __init__(self):
        self._pending: Dict[str, Transaction] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def put(self, transaction: Transaction) -> None:
        self._pending[transaction.id] = transaction

    def get(self, transaction_id) -> Optional[Transaction]:
        return self._pending.get(transaction_id)

    def remove(self, transaction_id) -> Optional[Transaction]:
        return self._pending.pop(transaction_id, None)

    def involving(self, player_id: str) -> List[Transaction]:
        return [t for t in self._pending.values() if player_id in (t.from_id, t.to_id)]

    def for_room(self, room_id: str) -> List[Transaction]:
        return [t for t in self._pending.values() if t.room_id == room_id]
