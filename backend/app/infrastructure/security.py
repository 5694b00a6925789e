"""Security — password hashing and bearer token issue/decode.

Invariants:
    - Stored hash format: base64(salt[16] + pbkdf2_sha256(password, salt)[32]), 100k iterations
    - decode() never raises for a bad token; it returns None (anonymous caller)
    - Token claims carry UserId, UserName, Email, Name, IsAdmin

Design Decisions:
    - python-jose for HS256 signing and verification (signature, exp, aud and iss checked)
    - hashlib.pbkdf2_hmac: keeps hashes compatible with already-seeded users
"""

import base64
import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from jose import JWTError, jwt

from app.config import get_settings
from app.core.identity import AccessIdentity

logger = logging.getLogger(__name__)

SALT_SIZE = 16
HASH_SIZE = 32
ITERATIONS = 100_000
BEARER_PREFIX = "Bearer "


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(SALT_SIZE)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, ITERATIONS, HASH_SIZE)
    return base64.b64encode(salt + digest).decode()


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        raw = base64.b64decode(hashed_password, validate=True)
    except (ValueError, TypeError):
        return False
    if len(raw) != SALT_SIZE + HASH_SIZE:
        return False
    salt, expected = raw[:SALT_SIZE], raw[SALT_SIZE:]
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, ITERATIONS, HASH_SIZE)
    return hmac.compare_digest(digest, expected)


class TokenService:
    """Issues and decodes HS256 access tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        issuer: str = "legal-api",
        audience: str = "your_audience",
        expiry_minutes: int = 30,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer
        self._audience = audience
        self._expiry = timedelta(minutes=expiry_minutes)

    def issue(self, username: str, is_admin: bool = False, name: str | None = None) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "UserId": username,
            "UserName": username,
            "Email": f"{username}@example.com",
            "Name": name or username,
            "IsAdmin": is_admin,
            "iss": self._issuer,
            "aud": self._audience,
            "iat": int(now.timestamp()),
            "exp": int((now + self._expiry).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode(self, token: str | None) -> AccessIdentity | None:
        if not token:
            return None
        try:
            claims = jwt.decode(
                token, self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
            )
        except JWTError as e:
            logger.info(f"Rejected bearer token: {e}")
            return None
        if not claims.get("UserId"):
            return None
        return AccessIdentity(
            user_id=claims["UserId"],
            user_name=claims.get("UserName") or claims["UserId"],
            email=claims.get("Email"),
            name=claims.get("Name"),
            is_admin=bool(claims.get("IsAdmin", False)),
        )

    def decode_header(self, authorization: str | None) -> AccessIdentity | None:
        """Decode an Authorization header value; anything but a real bearer token is anonymous."""
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            return None
        token = authorization[len(BEARER_PREFIX):].strip()
        if not token or token == "null":
            return None
        return self.decode(token)


@lru_cache
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        expiry_minutes=settings.jwt_expiry_minutes,
    )
