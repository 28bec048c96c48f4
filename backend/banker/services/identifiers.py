import random
import uuid
from typing import Container

# No 0/O or 1/I so codes survive being read aloud across a table
ROOM_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'


def new_room_code(taken: Container[str] = (), length: int = 6) -> str:
    """Generate a short room code that is not already in ``taken``."""
    while True:
        code = ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))
        if code not in taken:
            return code


def new_entity_id() -> str:
    return str(uuid.uuid4())
