"""
Roster Backend — Credential Hashing & Password Utilities
=========================================================

What:  Salted PBKDF2-HMAC-SHA256 password records, constant-time verification,
       password-strength scoring, random password and reset-token generation.
How:   Pure functions over their inputs. The only shared resource is the OS
       CSPRNG behind `secrets`, which is safe for concurrent use.
Who:   Called by UserService (register, login, password reset) and by the
       auth routes (strength check, password generator).

Record format:
    base64( salt[32] || pbkdf2_sha256(password, salt, 10_000)[32] )

    The record is split back by fixed offsets in verify_password(); it is
    not meant to be compatible with any external hash format.
"""

import base64
import binascii
import hashlib
import hmac
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from roster.exceptions import InvalidInputError

SALT_SIZE = 32
HASH_SIZE = 32
ITERATIONS = 10_000
HASH_NAME = "sha256"

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

MIN_GENERATED_LENGTH = 4
RESET_TOKEN_BYTES = 32

_system_random = secrets.SystemRandom()


# ══════════════════════════════════════════════════════════════════════════
# Hashing & Verification
# ══════════════════════════════════════════════════════════════════════════

def _derive_key(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac(
        HASH_NAME,
        password.encode("utf-8"),
        salt,
        ITERATIONS,
        dklen=HASH_SIZE,
    )


def hash_password(password: str) -> str:
    """
    Derive a credential record from a plaintext password.

    Every call draws a fresh salt, so hashing the same password twice
    yields two different records that both verify.

    Raises:
        InvalidInputError: password is empty or not encodable as UTF-8
    """
    if not password:
        raise InvalidInputError("Password cannot be empty", field="password")

    salt = secrets.token_bytes(SALT_SIZE)
    try:
        derived = _derive_key(password, salt)
    except UnicodeEncodeError:
        raise InvalidInputError("Password contains invalid characters", field="password")
    return base64.b64encode(salt + derived).decode("ascii")


def constant_time_equals(a: bytes, b: bytes) -> bool:
    """
    Compare two byte strings without an early exit on the first mismatch.

    The length check only depends on the record layout, never on secret
    content. Every byte position is then visited exactly once.
    """
    if len(a) != len(b):
        return False

    diff = 0
    for x, y in zip(a, b):
        diff |= x ^ y
    return diff == 0


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plaintext password against a stored credential record.

    Never raises: an empty password, a password that is not encodable as
    UTF-8, an empty or undecodable record and a record of the wrong length
    are all reported as False, the same answer as a wrong password.
    """
    if not password or not password_hash:
        return False

    try:
        decoded = base64.b64decode(password_hash, validate=True)
    except (binascii.Error, ValueError, TypeError):
        return False

    if len(decoded) != SALT_SIZE + HASH_SIZE:
        return False

    salt = decoded[:SALT_SIZE]
    stored = decoded[SALT_SIZE:]
    try:
        computed = _derive_key(password, salt)
    except UnicodeEncodeError:
        return False
    return constant_time_equals(stored, computed)


# ══════════════════════════════════════════════════════════════════════════
# Password Strength
# ══════════════════════════════════════════════════════════════════════════

MAX_STRENGTH_SCORE = 6


@dataclass(frozen=True)
class PasswordStrength:
    """Result of check_password_strength(); computed per call, never stored."""

    score: int
    level: str
    recommendations: List[str] = field(default_factory=list)


def _strength_level(score: int) -> str:
    if score <= 2:
        return "very weak"
    if score == 3:
        return "weak"
    if score == 4:
        return "medium"
    if score == 5:
        return "good"
    return "excellent"


def check_password_strength(password: str) -> PasswordStrength:
    """
    Score a password against six independent criteria, one point each.

    Criteria (recommendation emitted for each one that is not met):
        1. at least 8 characters
        2. at least 12 characters
        3. a lowercase letter
        4. an uppercase letter
        5. a digit
        6. a character from SPECIAL_CHARACTERS

    Repeated characters are not penalised, so "Ab3!Ab3!Ab3!" scores 6.
    """
    if not password:
        return PasswordStrength(
            score=0,
            level="very weak",
            recommendations=["Password cannot be empty"],
        )

    checks = [
        (len(password) >= 8, "Use at least 8 characters"),
        (len(password) >= 12, "Use 12 or more characters"),
        (any(c.islower() for c in password), "Add lowercase letters (a-z)"),
        (any(c.isupper() for c in password), "Add uppercase letters (A-Z)"),
        (any(c.isdigit() for c in password), "Add digits (0-9)"),
        (
            any(c in SPECIAL_CHARACTERS for c in password),
            "Add special characters (!@#$%^&*...)",
        ),
    ]

    score = sum(1 for passed, _ in checks if passed)
    recommendations = [advice for passed, advice in checks if not passed]

    return PasswordStrength(
        score=score,
        level=_strength_level(score),
        recommendations=recommendations,
    )


# ══════════════════════════════════════════════════════════════════════════
# Random Secrets
# ══════════════════════════════════════════════════════════════════════════

def generate_random_password(length: int = 12, include_special: bool = True) -> str:
    """
    Generate a random password containing every required character class.

    One lowercase letter, one uppercase letter and one digit (plus one
    special character when include_special) are drawn first, the rest is
    filled from the full alphabet, then the whole sequence is shuffled so
    the guaranteed characters are not predictably at the front.

    Raises:
        InvalidInputError: length is below MIN_GENERATED_LENGTH
    """
    if length < MIN_GENERATED_LENGTH:
        raise InvalidInputError(
            f"Password length must be at least {MIN_GENERATED_LENGTH} characters",
            field="length",
        )

    alphabet = LOWERCASE + UPPERCASE + DIGITS
    required = [LOWERCASE, UPPERCASE, DIGITS]
    if include_special:
        alphabet += SPECIAL_CHARACTERS
        required.append(SPECIAL_CHARACTERS)

    chars = [secrets.choice(group) for group in required]
    chars.extend(secrets.choice(alphabet) for _ in range(length - len(chars)))

    _system_random.shuffle(chars)
    return "".join(chars)


def generate_reset_token() -> str:
    """32 random bytes as URL-safe base64 without '=' padding."""
    return secrets.token_urlsafe(RESET_TOKEN_BYTES)


def validate_reset_token(
    token: Optional[str],
    stored_token: Optional[str],
    expires_at: Optional[datetime],
    now: Optional[datetime] = None,
) -> bool:
    """
    Accept a reset token only if it matches the stored one and has not expired.

    Naive datetimes (as returned by SQLite) are treated as UTC.
    """
    if not token or not stored_token or expires_at is None:
        return False

    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)

    if current > expires_at:
        return False

    return hmac.compare_digest(token.encode("utf-8"), stored_token.encode("utf-8"))
