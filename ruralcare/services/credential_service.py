"""
Credential storage and verification.

Accounts created through signup or the admin screen store a bcrypt hash.
Seeded demo accounts store their password as-is. The format is not a separate
column: it is read off the stored value's own prefix every time it is checked.
"""

import hmac
import re
from dataclasses import dataclass
from typing import Optional, Union
import bcrypt

# $2a$ / $2b$ / $2y$ followed by a two digit cost
BCRYPT_PREFIX = re.compile(r"^\$2[aby]\$\d{2}\$")
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class Hashed:
    value: str


@dataclass(frozen=True)
class Plaintext:
    value: str


Credential = Union[Hashed, Plaintext]


def parse_credential(stored: Optional[str]) -> Optional[Credential]:
    """Tag a stored credential by its prefix. Returns None when nothing is stored."""
    if not stored:
        return None
    if BCRYPT_PREFIX.match(stored):
        return Hashed(stored)
    return Plaintext(stored)


def hash_secret(plain: str, rounds: int = 10) -> str:
    encoded = plain.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_secret(candidate: str, stored: Optional[str]) -> bool:
    """True if `candidate` matches the stored credential. Mismatches never raise."""
    credential = parse_credential(stored)
    if credential is None or candidate is None:
        return False

    encoded = candidate.encode("utf-8")
    if isinstance(credential, Hashed):
        try:
            return bcrypt.checkpw(encoded, credential.value.encode("utf-8"))
        except ValueError:
            # Malformed hash body, or a candidate over bcrypt's length limit
            return False
    return hmac.compare_digest(encoded, credential.value.encode("utf-8"))
