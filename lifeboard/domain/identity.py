"""
Identifier source for aggregates and their nested entries.

Identifiers are 128-bit random values (uuid4, hex-encoded), so ids minted
independently inside different documents never collide even though nested
collections are not indexed globally.
"""
import uuid


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value: str) -> bool:
    """Проверить формат идентификатора (32 hex-символа)"""
    if not isinstance(value, str) or len(value) != 32:
        return False
    try:
        int(value, 16)
    except ValueError:
        return False
    return True
