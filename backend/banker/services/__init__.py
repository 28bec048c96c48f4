"""Banker domain services: rooms, sessions, pending requests and the coordinator.

This package holds the in-memory state and the rules for moving money
between players. It knows nothing about Socket.IO; handlers translate the
returned outcomes into emits, keeping transport concerns separated from
the core banking rules.
"""
from .coordinator import Message, Outcome, TransactionCoordinator
from .ledger import PendingRequestLedger
from .registry import RoomRegistry
from .sessions import SessionDirectory


def build_coordinator(config, logger=None) -> TransactionCoordinator:
    """Create a coordinator with fresh, empty stores sized from app config."""
    registry = RoomRegistry(
        max_players=int(config.get('MAX_PLAYERS', 8)),
        code_length=int(config.get('ROOM_CODE_LENGTH', 6)),
        history_limit=int(config.get('RECENT_TRANSACTIONS_LIMIT', 50)),
    )
    sessions = SessionDirectory(registry)
    ledger = PendingRequestLedger()
    return TransactionCoordinator(registry, sessions, ledger, logger=logger)


__all__ = [
    'Message',
    'Outcome',
    'PendingRequestLedger',
    'RoomRegistry',
    'SessionDirectory',
    'TransactionCoordinator',
    'build_coordinator',
]
