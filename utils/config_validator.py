"""
Configuration Validation Module

Validates critical configuration values at startup to fail-fast
with clear error messages instead of runtime failures.
"""

import sys
from typing import Optional


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""
    pass


def validate_token_secret(secret: Optional[str], name: str) -> None:
    """
    Validate a token signing secret.

    Args:
        secret: The secret value from config
        name: Name of the config variable (for the error message)

    Raises:
        ConfigValidationError: If secret is missing or too weak
    """
    if not secret or len(secret.strip()) == 0:
        raise ConfigValidationError(
            f"{name} is required and must not be empty!\n"
            "Generate a secure secret with: openssl rand -hex 32\n"
            f"Add to .env: {name}=<your-generated-secret>"
        )

    if len(secret) < 32:
        raise ConfigValidationError(
            f"{name} is too weak (length: {len(secret)}, minimum: 32)!\n"
            "Generate a secure secret with: openssl rand -hex 32"
        )


def validate_distinct_secrets(access_secret: str, refresh_secret: str) -> None:
    """
    Refresh tokens must not verify as access tokens, so the two secrets must differ.

    Raises:
        ConfigValidationError: If both secrets are identical
    """
    if access_secret == refresh_secret:
        raise ConfigValidationError(
            "ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must be different!"
        )


def validate_positive(value: float, name: str) -> None:
    if value <= 0:
        raise ConfigValidationError(f"{name} must be positive (got: {value})")


def validate_startup_config(config_module) -> None:
    """
    Validate all critical configuration at startup.

    Args:
        config_module: The config module to validate

    Raises:
        ConfigValidationError: If any validation fails
    """
    access_secret = getattr(config_module, 'ACCESS_TOKEN_SECRET', None)
    refresh_secret = getattr(config_module, 'REFRESH_TOKEN_SECRET', None)
    validate_token_secret(access_secret, 'ACCESS_TOKEN_SECRET')
    validate_token_secret(refresh_secret, 'REFRESH_TOKEN_SECRET')
    validate_distinct_secrets(access_secret, refresh_secret)

    validate_positive(config_module.STORE_TIMEOUT_SECONDS, 'STORE_TIMEOUT_SECONDS')
    validate_positive(config_module.PASSWORD_HASH_ITERATIONS, 'PASSWORD_HASH_ITERATIONS')


def validate_or_exit(config_module) -> None:
    """
    Validate configuration and exit with error code 1 if validation fails.

    This is the main entry point for startup validation.

    Args:
        config_module: The config module to validate
    """
    try:
        validate_startup_config(config_module)
    except ConfigValidationError as e:
        print(f"\n ERROR: Configuration Validation Failed\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("\nServer startup aborted. Please fix configuration and try again.\n", file=sys.stderr)
        sys.exit(1)
