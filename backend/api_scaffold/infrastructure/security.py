"""Security Primitives — bcrypt password hashing and JWT issue/verify.

Invariants:
    - Plaintext passwords are never stored or logged
    - Tokens always carry id, iss, aud, iat, exp; decode verifies all of them
    - bcrypt runs in a worker thread (never blocks the event loop)

Design Decisions:
    - JwtOptions resolved once from Settings and frozen: no runtime mutation path
    - decode_access_token lets jwt.InvalidTokenError propagate; the caller
      decides how to classify it
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt
from starlette.concurrency import run_in_threadpool

from api_scaffold.config import Settings


@dataclass(frozen=True)
class JwtOptions:
    secret: str
    issuer: str
    audience: str
    expires_in: int
    algorithm: str = "HS256"

    @classmethod
    def from_settings(cls, settings: Settings) -> "JwtOptions":
        return cls(
            secret=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            expires_in=settings.jwt_expires_seconds,
            algorithm=settings.jwt_algorithm,
        )


async def hash_password(password: str, rounds: int = 12) -> str:
    if not password:
        raise ValueError("password_blank")

    def _hash() -> str:
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    return await run_in_threadpool(_hash)


async def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False

    def _check() -> bool:
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8"),
            )
        except ValueError:
            # Stored value is not a bcrypt hash, or password exceeds 72 bytes
            return False

    return await run_in_threadpool(_check)


def create_access_token(principal_id: Any, options: JwtOptions) -> str:
    if not options.secret:
        raise ValueError("No JWT secret is configured")

    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "id": principal_id,
        "iss": options.issuer,
        "aud": options.audience,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=options.expires_in)).timestamp()),
    }
    return jwt.encode(payload, options.secret, algorithm=options.algorithm)


def decode_access_token(token: str, options: JwtOptions) -> dict[str, Any]:
    if not options.secret:
        raise ValueError("No JWT secret is configured")
    return jwt.decode(
        token,
        options.secret,
        algorithms=[options.algorithm],
        issuer=options.issuer,
        audience=options.audience,
        options={"require": ["exp", "iss", "aud"]},
    )
