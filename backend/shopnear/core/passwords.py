"""Password hashing — salted, slow one-way bcrypt hashes.

Invariants:
    - check_password never raises: malformed hashes compare as False
    - dummy_hash(rounds) is a real hash of the same cost as stored hashes, so
      an unknown-account login spends the same time as a wrong password
"""

import secrets
from functools import lru_cache

import bcrypt

DEFAULT_ROUNDS = 12
# bcrypt only reads this many bytes; request schemas reject longer passwords.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Generate a bcrypt hash for password."""
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def check_password(password: str, hashed_password: str) -> bool:
    """Verify password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


@lru_cache
def dummy_hash(rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash of a random throwaway secret, computed once per cost."""
    return hash_password(secrets.token_hex(16), rounds)
