"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting, and checkpw compares in constant time.
The work factor (rounds=12) takes ~100ms per hash on modern hardware.
"""

import bcrypt


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    Passwords are truncated to 72 bytes (bcrypt's limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash. Unusable hashes never match."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


# Checked when the username does not exist so a miss costs the same
# bcrypt round as a wrong password.
_DUMMY_HASH = hash_password("quizapp_timing_dummy")


def burn_password_check(password: str) -> None:
    """Spend one bcrypt comparison without a real hash to compare against."""
    verify_password(password, _DUMMY_HASH)
