"""
Password hashing with bcrypt.

Cost factor 10 keeps login latency low on small hardware; raise
BCRYPT_ROUNDS to trade latency for brute-force resistance.
"""

import bcrypt

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh salt.

    Args:
        password: Plaintext password

    Returns:
        Bcrypt hash string (60 chars)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(BCRYPT_ROUNDS)).decode(
        "utf-8"
    )


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Never raises: an empty or malformed hash simply does not match.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# Pre-computed so unknown-user logins spend the same time in bcrypt
_DUMMY_HASH = hash_password("dummy_password")


def burn_verification(password: str) -> None:
    """Run a bcrypt check that always fails, to keep timing uniform"""
    verify_password(password, _DUMMY_HASH)
