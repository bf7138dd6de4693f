"""
Password hashing utilities for admin authentication.
Uses bcrypt for secure password hashing.
"""
import bcrypt
from functools import lru_cache


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.
    Used when bootstrapping the admin user.

    Args:
        password: Plain text password

    Returns:
        Hashed password string
    """
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hashed password.
    bcrypt.checkpw compares the digests in constant time.

    Args:
        password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    try:
        return bcrypt.checkpw(
            password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def burn_password_check(password: str) -> None:
    """
    Run a full bcrypt comparison whose result is discarded.
    Called for unknown usernames so that they take as long as wrong passwords.
    """
    verify_password(password, _dummy_hash())


def is_bcrypt_hash(value: str) -> bool:
    """Check that a configured hash looks like a bcrypt digest."""
    return value.startswith(("$2a$", "$2b$", "$2y$")) and len(value) == 60
