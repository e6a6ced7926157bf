"""
Password Hasher

Derives PBKDF2-HMAC-SHA256 hashes for user passwords so the users table
never holds a recoverable credential.

Stored format:
    pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>

Usage:
    python -m utils.password_hasher <password>
"""

import hashlib
import hmac
import secrets
import sys

import config

ALGORITHM = "pbkdf2_sha256"
SALT_BYTES = 16


def hash_password(password: str, iterations: int | None = None) -> str:
    """
    Hashes a password with a fresh random salt.

    Args:
        password: Plain-text password
        iterations: PBKDF2 rounds (default: config.PASSWORD_HASH_ITERATIONS)

    Returns:
        Encoded hash string suitable for the users.password column
    """
    iterations = iterations or config.PASSWORD_HASH_ITERATIONS
    salt = secrets.token_hex(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt.encode('utf-8'), iterations)
    return f"{ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """
    Verifies a password against a stored hash in constant time.

    Malformed or foreign hash strings never match.

    Example:
        >>> verify_password("secret", hash_password("secret"))
        True
    """
    if not isinstance(password, str) or not isinstance(encoded, str):
        return False
    try:
        algorithm, iterations, salt, expected = encoded.split('$')
        iterations = int(iterations)
    except ValueError:
        return False
    if algorithm != ALGORITHM or iterations <= 0:
        return False

    digest = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt.encode('utf-8'), iterations)
    return hmac.compare_digest(digest.hex(), expected)


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python -m utils.password_hasher <password>")
        sys.exit(1)
    print(hash_password(sys.argv[1]))
