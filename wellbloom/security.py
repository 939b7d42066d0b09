"""
WellBloom Backend: Password Hashing, Tokens and Authorization
==============================================================

What:  The authentication collaborators used by the administrator flows.
How:
    - bcrypt turns a plaintext password into an irreversible digest
    - python-jose signs and verifies HS256 JWT bearer tokens
    - HTTPBearer extracts "Authorization: Bearer <token>" from requests
    - allowed()/authorize() are plain role predicates each protected route
      calls explicitly

Token claims:
    sub   administrator id (string, per JWT convention)
    role  administrator role at login time
    exp   issue time + ACCESS_TOKEN_EXPIRE_HOURS (8h by default)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional

import bcrypt
from fastapi import Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from wellbloom.config import settings
from wellbloom.exceptions import ForbiddenError, UnauthorizedError
from wellbloom.models.admin import AdminRole


# ── Password hashing ──────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a plaintext password against a stored bcrypt digest."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Not a bcrypt digest, or a plaintext over 72 bytes
        return False


# bcrypt is CPU-bound; async callers hash on the threadpool, never on the event loop

async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


# ── Tokens ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified bearer token."""

    admin_id: int
    role: AdminRole


def create_access_token(
    admin_id: int,
    role: AdminRole,
    expires_delta: Optional[timedelta] = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.access_token_expire_hours)
    )
    to_encode: Dict[str, Any] = {
        "sub": str(admin_id),
        "role": AdminRole(role).value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        UnauthorizedError: bad signature, expired, or missing claims
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise UnauthorizedError(message="Invalid or expired token")

    try:
        return TokenClaims(admin_id=int(payload["sub"]), role=AdminRole(payload["role"]))
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedError(message="Token is missing required claims")


bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    """
    FastAPI dependency: resolves the bearer token into TokenClaims.

    Usage:
        @router.get("/admins")
        async def list_admins(claims: TokenClaims = Depends(get_current_admin)):
            authorize(claims, {AdminRole.SUPERADMIN})
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(message="Unauthorized access")
    return decode_access_token(credentials.credentials)


# ── Authorization ─────────────────────────────────────────────────────────

def allowed(role: AdminRole, required_roles: Iterable[AdminRole]) -> bool:
    return AdminRole(role) in {AdminRole(r) for r in required_roles}


def authorize(claims: TokenClaims, required_roles: Iterable[AdminRole]) -> None:
    """Raise ForbiddenError unless the token's role is one of required_roles."""
    if not allowed(claims.role, required_roles):
        raise ForbiddenError(
            context={"admin_id": claims.admin_id, "role": claims.role.value}
        )
