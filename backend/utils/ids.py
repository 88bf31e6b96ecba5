import re
import secrets
import time

_OBJECT_ID = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    """24 hex chars: creation second followed by 8 random bytes."""
    return f"{int(time.time()):08x}{secrets.token_hex(8)}"


def is_object_id(value) -> bool:
    return isinstance(value, str) and bool(_OBJECT_ID.match(value))
