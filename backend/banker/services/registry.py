from typing import Dict, List, Optional, Tuple

from banker.errors import RoomFull, RoomNotFound
from banker.models import AVATARS, PLAYER_COLORS, Player, Room
from .allocator import allocate
from .identifiers import new_entity_id, new_room_code

DEFAULT_MAX_PLAYERS = 8


def normalize_room_code(room_id) -> str:
    return str(room_id or '').strip().upper()


class RoomRegistry:
    """Authoritative in-memory mapping from room code to room state."""

    def __init__(self, max_players: int = DEFAULT_MAX_PLAYERS, code_length: int = 6,
                 history_limit: int = 50):
        self.max_players = max_players
        self.code_length = code_length
        self.history_limit = history_limit
        self._rooms: Dict[str, Room] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id) -> bool:
        return normalize_room_code(room_id) in self._rooms

    def rooms(self) -> List[Room]:
        return list(self._rooms.values())

    def get(self, room_id) -> Optional[Room]:
        return self._rooms.get(normalize_room_code(room_id))

    def create(self, room_name: str, player_name: str, initial_balance: int) -> Tuple[Room, Player]:
        """Open a new room with its creator as the only member and host.

        ``initial_balance`` is trusted here; callers validate it first.
        """
        code = new_room_code(self._rooms, length=self.code_length)
        room = Room(code, room_name, initial_balance, history_limit=self.history_limit)
        player = Player(
            id=new_entity_id(),
            name=player_name,
            avatar=AVATARS[0],
            color=PLAYER_COLORS[0],
            balance=initial_balance,
        )
        room.players.append(player)
        room.host_id = player.id
        self._rooms[code] = room
        return room, player

    def join(self, room_id, player_name: str) -> Tuple[Room, Player]:
        room = self.get(room_id)
        if room is None:
            raise RoomNotFound()
        if len(room.players) >= self.max_players:
            raise RoomFull(self.max_players)
        avatar, color = allocate(room.players)
        player = Player(
            id=new_entity_id(),
            name=player_name,
            avatar=avatar,
            color=color,
            balance=room.initial_balance,
        )
        room.players.append(player)
        return room, player

    def leave(self, room_id, player_id) -> Optional[Player]:
        """Remove a member; returns the removed player, or None if already gone.

        An emptied room is dropped from the registry. When the host leaves,
        the earliest remaining member becomes host.
        """
        room = self.get(room_id)
        if room is None:
            return None
        player = room.find_player(player_id)
        if player is None:
            return None
        room.players.remove(player)
        if not room.players:
            self._rooms.pop(room.id, None)
        elif room.host_id == player.id:
            room.host_id = room.players[0].id
        return player
