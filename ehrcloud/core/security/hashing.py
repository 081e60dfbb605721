"""Password hashing (bcrypt, one-way)."""

import bcrypt

# Work factor; tests pass a lower value explicitly
BCRYPT_ROUNDS = 12


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """
    Hash a password with bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash, utf-8 decoded
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a password against its stored hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def needs_update(hashed_value: str) -> bool:
    """True when the stored hash was produced with a lower cost than BCRYPT_ROUNDS."""
    try:
        parts = hashed_value.split("$")
        if len(parts) >= 3:
            return int(parts[2]) < BCRYPT_ROUNDS
    except (ValueError, IndexError):
        pass
    return True
