from __future__ import annotations

from typing import Optional
from werkzeug.security import generate_password_hash, check_password_hash

MIN_PASSWORD_LENGTH = 8


def hash_password(plain: str, method: str = "pbkdf2:sha256", salt_length: int = 16) -> str:
    return generate_password_hash(plain or "", method=method, salt_length=salt_length)


def verify_password(stored_hash: Optional[str], candidate: str) -> bool:
    """Check an operator password against its stored Werkzeug hash.

    Empty or malformed hashes never match.
    """
    if not stored_hash:
        return False
    try:
        return check_password_hash(stored_hash, candidate or "")
    except ValueError:
        return False
