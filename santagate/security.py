from __future__ import annotations

import hmac

from passlib.context import CryptContext


pwd_context = CryptContext(
    # argon2 for new claims; bcrypt only verifies hashes in older state documents.
    schemes=["argon2", "bcrypt"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    """Salted argon2 hash of a giver's reveal password."""
    return pwd_context.hash(password)


def verify_password(password: str, stored_hash: str) -> bool:
    try:
        return pwd_context.verify(password, stored_hash)
    except ValueError:
        # Unrecognised or malformed hash in the stored document.
        return False


def reset_password_matches(submitted: str, expected: str) -> bool:
    return hmac.compare_digest(submitted.encode("utf-8"), expected.encode("utf-8"))
