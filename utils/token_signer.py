"""
Signed token utility.

Issues and verifies compact HMAC-SHA256 signed tokens:

    base64url(json claims) + "." + base64url(signature)

Claims: sub (user id), email, typ (access/refresh), iat, exp.
Access and refresh tokens are signed with different secrets, so one can
never be replayed as the other even before the typ check.
"""

import base64
import hashlib
import hmac
import json
import logging
import time
from typing import Dict, Optional

from enums.token_type import TokenType

logger = logging.getLogger(__name__)


class TokenValidationError(Exception):
    """Raised when a token fails shape, signature, type or expiry checks."""
    pass


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode('ascii')


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(payload: str, secret: str) -> str:
    signature = hmac.new(
        key=secret.encode('utf-8'),
        msg=payload.encode('ascii'),
        digestmod=hashlib.sha256
    ).digest()
    return _b64encode(signature)


def issue_token(
    user_id: int,
    email: str,
    token_type: TokenType,
    secret: str,
    expires_in: int,
    now: Optional[float] = None
) -> str:
    """
    Issues a signed token.

    Args:
        user_id: Subject of the token
        email: Subject email, carried for convenience
        token_type: TokenType.ACCESS or TokenType.REFRESH
        secret: Signing secret for this token type
        expires_in: Lifetime in seconds
        now: Issue time (defaults to time.time(), overridable for tests)

    Returns:
        Encoded token string
    """
    if not secret:
        raise TokenValidationError("Token secret not configured")

    issued_at = int(now if now is not None else time.time())
    claims = {
        "sub": user_id,
        "email": email,
        "typ": token_type.value,
        "iat": issued_at,
        "exp": issued_at + expires_in,
    }
    payload = _b64encode(json.dumps(claims, separators=(",", ":"), sort_keys=True).encode('utf-8'))
    return f"{payload}.{_sign(payload, secret)}"


def verify_token(
    token: str,
    token_type: TokenType,
    secret: str,
    now: Optional[float] = None
) -> Dict:
    """
    Verifies a token and returns its claims.

    Raises:
        TokenValidationError: If validation fails

    Example:
        >>> claims = verify_token(token, TokenType.ACCESS, config.ACCESS_TOKEN_SECRET)
        >>> user_id = claims['sub']
    """
    if not token:
        raise TokenValidationError("No token provided")
    if not secret:
        raise TokenValidationError("Token secret not configured")

    parts = token.split('.')
    if len(parts) != 2 or not all(parts):
        raise TokenValidationError("Malformed token")
    payload, received_signature = parts

    # Constant-time comparison to prevent timing attacks
    if not hmac.compare_digest(_sign(payload, secret), received_signature):
        logger.warning("Token signature mismatch")
        raise TokenValidationError("Invalid signature")

    try:
        claims = json.loads(_b64decode(payload))
    except (ValueError, TypeError) as e:
        raise TokenValidationError(f"Invalid token payload: {e}")
    if not isinstance(claims, dict):
        raise TokenValidationError("Invalid token payload")

    if claims.get('typ') != token_type.value:
        raise TokenValidationError(f"Wrong token type (expected {token_type.value})")

    sub = claims.get('sub')
    if not isinstance(sub, int) or isinstance(sub, bool) or sub <= 0:
        raise TokenValidationError("Invalid subject")

    exp = claims.get('exp')
    if not isinstance(exp, int):
        raise TokenValidationError("Invalid expiry")
    current = now if now is not None else time.time()
    if current >= exp:
        raise TokenValidationError("Token expired")

    return claims
