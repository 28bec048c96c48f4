import random
from typing import Iterable, Sequence, Tuple

from banker.models import AVATARS, PLAYER_COLORS, Player


def _first_unused(palette: Sequence[str], used: set) -> str:
    for value in palette:
        if value not in used:
            return value
    # Palette exhausted: duplicates are allowed
    return random.choice(palette)


def allocate(players: Iterable[Player]) -> Tuple[str, str]:
    """Pick an avatar and a color for a new member of a room.

    Each palette is scanned independently for the first entry no current
    member uses; a random entry is returned once a palette runs out.
    """
    players = list(players)
    used_avatars = {p.avatar for p in players}
    used_colors = {p.color for p in players}
    return _first_unused(AVATARS, used_avatars), _first_unused(PLAYER_COLORS, used_colors)
