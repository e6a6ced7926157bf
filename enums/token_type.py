from enum import Enum


class TokenType(str, Enum):
    """
    Token kinds issued by the auth service.

    ACCESS: Short-lived bearer token sent with every API call
    REFRESH: Long-lived token kept in an HTTP-only cookie, exchanged for a new pair
    """
    ACCESS = "access"
    REFRESH = "refresh"
