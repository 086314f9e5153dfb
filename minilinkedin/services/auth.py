"""Authentication service for JWT and password handling."""

import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from minilinkedin.config import Settings

PASSWORD_MIN_LENGTH = 8
PASSWORD_MIN_SCORE = 3


class CredentialMalformed(Exception):
    """Token could not be decoded or its signature did not verify."""


class CredentialExpired(Exception):
    """Token signature is valid but its expiry has passed."""


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of an access token."""

    subject: str
    issued_at: datetime
    expires_at: datetime


class IdentityProvider:
    """Issues and verifies signed, time-bounded bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", expiration_minutes: int = 10080):
        self.secret = secret
        self.algorithm = algorithm
        self.expiration = timedelta(minutes=expiration_minutes)

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityProvider":
        return cls(settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expiration_minutes)

    def issue(self, user_id: int | str, now: datetime | None = None) -> str:
        """Create a JWT access token for a user."""
        issued_at = now or datetime.now(UTC)
        to_encode = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + self.expiration,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Decode and validate a JWT token.

        Raises CredentialExpired or CredentialMalformed.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise CredentialExpired(str(e)) from e
        except JWTError as e:
            raise CredentialMalformed(str(e)) from e

        subject = payload.get("sub")
        if not subject or "exp" not in payload:
            raise CredentialMalformed("Token is missing required claims")

        try:
            issued_at = datetime.fromtimestamp(payload.get("iat", payload["exp"]), UTC)
            expires_at = datetime.fromtimestamp(payload["exp"], UTC)
        except (TypeError, ValueError, OverflowError) as e:
            raise CredentialMalformed("Token timestamps are invalid") from e

        return TokenClaims(subject=str(subject), issued_at=issued_at, expires_at=expires_at)


class PasswordHasher:
    """Bcrypt password hashing."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(settings.bcrypt_rounds)

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self._context.hash(password)

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return self._context.verify(password, hashed_password)

    def dummy_verify(self) -> None:
        """Spend the same time as a failed verify, for unknown accounts."""
        self._context.dummy_verify()


def password_strength_score(password: str) -> int:
    """Score 0-5: length, lowercase, uppercase, digit, symbol."""
    checks = (
        len(password) >= PASSWORD_MIN_LENGTH,
        re.search(r"[a-z]", password) is not None,
        re.search(r"[A-Z]", password) is not None,
        re.search(r"\d", password) is not None,
        re.search(r"[^a-zA-Z\d]", password) is not None,
    )
    return sum(checks)


def is_strong_password(password: str) -> bool:
    if len(password) < PASSWORD_MIN_LENGTH:
        return False
    return password_strength_score(password) >= PASSWORD_MIN_SCORE


def normalize_email(email: str) -> str:
    return email.strip().lower()
