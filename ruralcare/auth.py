"""
Auth module: JWT creation/validation and the request dependencies.

Every successful login (patient, doctor or admin) returns a signed token.
Only the admin routes require one; patient and doctor routes stay open the
way the clinic front-end calls them.
"""

import time
from dataclasses import dataclass
from typing import Optional
from jose import jwt, JWTError
from fastapi import Request
from ruralcare.config import get_settings
from ruralcare.exceptions import AuthenticationError, PermissionDeniedError

ALGORITHM = "HS256"
TOKEN_EXPIRE_SECONDS = 86400  # 24 hours

ROLE_PATIENT = "patient"
ROLE_DOCTOR = "doctor"
ROLE_ADMIN = "admin"


@dataclass
class UserPrincipal:
    """Resolved identity attached to a request."""
    subject: str                  # patientId, doctorId or admin username
    display_name: str
    role: str                     # "patient" | "doctor" | "admin"

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def create_token(subject: str, role: str, display_name: str = "") -> str:
    settings = get_settings()
    payload = {
        "sub": subject,
        "display_name": display_name or subject,
        "role": role,
        "exp": int(time.time()) + TOKEN_EXPIRE_SECONDS,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[UserPrincipal]:
    """Decode and validate a JWT. Returns None if invalid/expired."""
    try:
        settings = get_settings()
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[ALGORITHM])
        return UserPrincipal(
            subject=payload["sub"],
            display_name=payload.get("display_name", payload["sub"]),
            role=payload.get("role", ""),
        )
    except (JWTError, KeyError):
        return None


async def get_current_user(request: Request) -> Optional[UserPrincipal]:
    """FastAPI dependency. None when no valid bearer token is sent."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return decode_token(auth_header[7:])


async def require_admin(request: Request) -> UserPrincipal:
    principal = await get_current_user(request)
    if principal is None:
        raise AuthenticationError("Admin login required")
    if not principal.is_admin:
        raise PermissionDeniedError("Admin role required")
    return principal
