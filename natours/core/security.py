"""Password hashing for stored user documents."""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

# Argon2id with the library's recommended cost parameters
password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Return the Argon2id hash stored in place of a user's password."""
    return password_hasher.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a candidate password against a stored hash; malformed hashes never match."""
    try:
        return password_hasher.verify(hashed_password, password)
    except (VerificationError, InvalidHashError):
        return False
