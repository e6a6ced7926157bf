import os
import sys

from dotenv import load_dotenv

from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test scripts to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)

# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    _runtime_env_str = os.environ.get("RUNTIME_ENVIRONMENT")
    if not _runtime_env_str:
        raise ValueError("RUNTIME_ENVIRONMENT environment variable is not set")
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(_runtime_env_str)
except ValueError as e:
    valid_values = [env.value for env in RuntimeEnvironment]
    print(f"\n ERROR: Invalid RUNTIME_ENVIRONMENT configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Valid values: {', '.join(valid_values)}", file=sys.stderr)
    print(f"Current value: {os.environ.get('RUNTIME_ENVIRONMENT', '(not set)')}", file=sys.stderr)
    print(f"\nAdd to .env: RUNTIME_ENVIRONMENT={valid_values[0]}\n", file=sys.stderr)
    sys.exit(1)

WEBAPP_HOST = os.environ.get("WEBAPP_HOST", "0.0.0.0")
WEBAPP_PORT = int(os.environ.get("WEBAPP_PORT", "3002"))

# Database
DB_URL = os.environ.get("DB_URL", "sqlite+aiosqlite:///data/storefront.db")
STORE_TIMEOUT_SECONDS = float(os.environ.get("STORE_TIMEOUT_SECONDS", "5"))

# Token secrets - validated at startup (utils/config_validator.py)
ACCESS_TOKEN_SECRET = os.environ.get("ACCESS_TOKEN_SECRET", "")
REFRESH_TOKEN_SECRET = os.environ.get("REFRESH_TOKEN_SECRET", "")

# Parse token lifetimes with error handling
try:
    ACCESS_TOKEN_EXPIRES_SECONDS = int(os.environ.get("ACCESS_TOKEN_EXPIRES_SECONDS", "900"))  # 15 minutes
    REFRESH_TOKEN_EXPIRES_SECONDS = int(os.environ.get("REFRESH_TOKEN_EXPIRES_SECONDS", "604800"))  # 7 days
    if ACCESS_TOKEN_EXPIRES_SECONDS <= 0 or REFRESH_TOKEN_EXPIRES_SECONDS <= 0:
        raise ValueError("token lifetimes must be positive")
except ValueError as e:
    print(f"\n ERROR: Invalid token lifetime configuration\n", file=sys.stderr)
    print(f"Reason: {e}", file=sys.stderr)
    print(f"Expected: Positive integer seconds (e.g., ACCESS_TOKEN_EXPIRES_SECONDS=900)\n", file=sys.stderr)
    sys.exit(1)

REFRESH_COOKIE_NAME = "refreshToken"
PASSWORD_HASH_ITERATIONS = int(os.environ.get("PASSWORD_HASH_ITERATIONS", "260000"))

# HTTP Security Configuration
CORS_ALLOWED_ORIGINS = [
    origin.strip().rstrip("/")
    for origin in os.environ.get("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
SECURITY_HEADERS_ENABLED = os.environ.get("SECURITY_HEADERS_ENABLED", "false") == "true"
HSTS_ENABLED = os.environ.get("HSTS_ENABLED", "false") == "true"  # Enable HSTS (only for HTTPS)
SECURE_COOKIES = RUNTIME_ENVIRONMENT == RuntimeEnvironment.PROD

# Client Configuration
API_BASE_URL = os.environ.get("API_BASE_URL", f"http://localhost:{WEBAPP_PORT}")
CLIENT_REQUEST_TIMEOUT_SECONDS = float(os.environ.get("CLIENT_REQUEST_TIMEOUT_SECONDS", "7"))

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask sensitive data in logs
LOG_DIR = os.environ.get("LOG_DIR", "logs")

# Log Retention: Environment-specific defaults
# Dev: keep a month for debugging
# Prod: Use 5 days default to save disk space
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "30"))
else:
    LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "5"))
