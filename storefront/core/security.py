"""Password hashing and JWT issuance/verification for authentication."""

import enum
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Min/max lengths for name and password validation.
NAME_MIN_LEN = 1
NAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 72
# bcrypt only reads the first 72 bytes; longer input is rejected, never truncated.
PASSWORD_MAX_BYTES = 72


def check_password_bytes(plain_password: str) -> str:
    """Raise ValueError if the UTF-8 encoding exceeds what bcrypt can hash."""
    if len(plain_password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
    return plain_password


def hash_password(plain_password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = check_password_bytes(plain_password).encode("utf-8")
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    try:
        pw_bytes = check_password_bytes(plain_password).encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


class TokenState(str, enum.Enum):
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True)
class TokenCheck:
    """Outcome of verifying a bearer token; subject_id is set only when valid."""

    state: TokenState
    subject_id: int | None = None

    @property
    def is_valid(self) -> bool:
        return self.state is TokenState.VALID


class TokenIssuer:
    """
    Issues and verifies signed, time-bound session tokens.

    Tokens are stateless JWTs carrying sub (user id), iat and exp; there is no
    server-side revocation, so an issued token stays valid until exp.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)) -> None:
        if not secret:
            raise ValueError("token secret must be non-empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, subject_id: int, now: datetime | None = None) -> str:
        """Create a JWT for subject_id expiring ttl after now."""
        now = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(subject_id),
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenCheck:
        """Check signature and expiry. Never raises; failures come back as EXPIRED or INVALID."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            return TokenCheck(TokenState.EXPIRED)
        except jwt.PyJWTError:
            return TokenCheck(TokenState.INVALID)
        try:
            subject_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return TokenCheck(TokenState.INVALID)
        return TokenCheck(TokenState.VALID, subject_id)
