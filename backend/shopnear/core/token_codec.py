"""Token Codec — issues and verifies signed, time-bounded principal tokens.

Invariants:
    - Exactly one signing algorithm (HS256) is accepted; any other, including
      "none", is InvalidTokenError
    - exp is checked explicitly and tolerates int, float and numeric-string claims;
      non-finite or out-of-range values are InvalidTokenError
    - sub decodes to int from int, integral float or numeric string
    - role must be a string
    - Pure CPU work: no IO, never awaits

Design Decisions:
    - Codec is a frozen value built once from settings and injected; the
      secret is never read from the environment at call time
    - python-jose verifies the signature; its own exp/sub checks are disabled
      because they reject string-encoded claims that must be tolerated here
"""

import math
import re
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, NamedTuple

from jose import jwt, JWTError

from shopnear.core.domain_types import PrincipalKind
from shopnear.core.errors import ExpiredTokenError, InvalidTokenError

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=7 * 24)

_INTEGER_TEXT = re.compile(r"[+-]?\d+")
_NUMERIC_TEXT = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_sub": False,
    "verify_iat": False,
    "verify_nbf": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_jti": False,
    "verify_at_hash": False,
}


class TokenClaims(NamedTuple):
    """Verified identity carried by a token."""
    subject_id: int
    role: str


@dataclass(frozen=True)
class TokenCodec:
    """Signs and verifies principal tokens with a fixed secret."""

    secret_key: str
    ttl: timedelta = DEFAULT_TTL

    def issue(self, subject_id: int, kind: PrincipalKind, now: float | None = None) -> str:
        """Sign a token for subject_id with kind as role, expiring after ttl."""
        issued_at = time.time() if now is None else now
        claims = {
            "sub": int(subject_id),
            "role": kind.value,
            "exp": int(issued_at + self.ttl.total_seconds()),
        }
        return jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)

    def verify(self, token: str, now: float | None = None) -> TokenClaims:
        """Decode token; raise InvalidTokenError or ExpiredTokenError on failure."""
        try:
            claims = jwt.decode(
                token, self.secret_key,
                algorithms=[ALGORITHM], options=_DECODE_OPTIONS,
            )
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e
        if not isinstance(claims, dict):
            raise InvalidTokenError("claims are not an object")

        expires_at = _read_expiry(claims.get("exp"))
        current = time.time() if now is None else now
        if current > expires_at:
            raise ExpiredTokenError()

        return TokenClaims(
            subject_id=_read_subject(claims.get("sub")),
            role=_read_role(claims.get("role")),
        )


def _read_expiry(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        raise InvalidTokenError("exp claim missing or malformed")
    if isinstance(value, str) and _NUMERIC_TEXT.fullmatch(value.strip()):
        value = value.strip()
    elif not isinstance(value, (int, float)):
        raise InvalidTokenError("exp claim missing or malformed")
    try:
        expires_at = float(value)
    except OverflowError:
        raise InvalidTokenError("exp claim out of range")
    if not math.isfinite(expires_at):
        raise InvalidTokenError("exp claim out of range")
    return expires_at


def _read_subject(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise InvalidTokenError("sub claim missing or malformed")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_TEXT.fullmatch(value):
        return int(value)
    raise InvalidTokenError("sub claim missing or malformed")


def _read_role(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidTokenError("role claim missing or malformed")
    return value
