from typing import Dict, Optional, Tuple

from banker.models import Player, Room
from .registry import RoomRegistry


class SessionDirectory:
    """Maps a live socket connection (sid) to the room and player it acts as."""

    def __init__(self, registry: RoomRegistry):
        self.registry = registry
        self._bindings: Dict[str, Tuple[str, str]] = {}

    def __len__(self) -> int:
        return len(self._bindings)

    def bind(self, sid: str, room_id: str, player_id: str) -> None:
        # A connection belongs to at most one room
        self._bindings[sid] = (room_id, player_id)

    def binding(self, sid: str) -> Optional[Tuple[str, str]]:
        return self._bindings.get(sid)

    def resolve(self, sid: str) -> Optional[Tuple[Room, Player]]:
        """Return the live (room, player) for ``sid`` or None when either is gone."""
        entry = self._bindings.get(sid)
        if entry is None:
            return None
        room_id, player_id = entry
        room = self.registry.get(room_id)
        if room is None:
            return None
        player = room.find_player(player_id)
        if player is None:
            return None
        return room, player

    def unbind(self, sid: str) -> None:
        self._bindings.pop(sid, None)
