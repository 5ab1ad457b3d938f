"""
parascope-cli shared configuration, constants, and module-level state.
Standalone module: no imports from other project files except exceptions.
"""

import os
import urllib.parse

from parascope_cli.exceptions import SetupError

# ---------------------------------------------------------------------------
# .env path and helpers
# ---------------------------------------------------------------------------

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_PACKAGE_DIR)

ENV_PATH = os.path.join(_PROJECT_ROOT, ".env")


def load_env():
    """Read KEY=VALUE pairs from the project .env file (read-only)."""
    env = {}
    if os.path.exists(ENV_PATH):
        with open(ENV_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, val = line.split("=", 1)
                    env[key.strip()] = val.strip().strip("'\"")
    return env


def _env_get(key, default=None):
    """Process environment first, then the .env file."""
    value = os.environ.get(key)
    if value is not None and value.strip():
        return value.strip()
    return env.get(key, default)


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = _env_get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = _env_get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "1.0.0"
CONTRACT_SCHEMA_VERSION = "1.0"

DEFAULT_BASE_URL = "https://app.parascope.dev/api/v1"

VALID_SHARING_TYPES = {"private", "internal", "public"}
VALID_BULK_ACTIONS = {"create", "update", "delete"}
VALID_FORMATS = {"json", "table"}

TOKEN_ENV_VAR = "PARASCOPE_TOKEN"
URL_ENV_VAR = "PARASCOPE_URL"

# ---------------------------------------------------------------------------
# Module-level state (process environment, then .env)
# ---------------------------------------------------------------------------

env = load_env()

BASE_URL = _env_get(URL_ENV_VAR) or DEFAULT_BASE_URL
HTTP_TIMEOUT_SECONDS = _env_int("PARASCOPE_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RESPONSE_BYTES = _env_int("PARASCOPE_HTTP_MAX_RESPONSE_BYTES", 5_000_000)
HTTP_LOG_ENABLED = _env_bool("PARASCOPE_HTTP_LOG", False)

RUNTIME_VERBOSE = False


def resolve_token(flag_value=None):
    """Return the bearer token: --token flag, then PARASCOPE_TOKEN.

    Raises SetupError when neither is set, before any network call.
    """
    token = (flag_value or "").strip() or _env_get(TOKEN_ENV_VAR, "")
    if not token:
        raise SetupError(
            f"[SETUP_NEEDED] Token required. Set {TOKEN_ENV_VAR} env var or use --token flag."
        )
    return token


def resolve_base_url(flag_value=None):
    """Return the API base URL: --url flag, then PARASCOPE_URL, then the default."""
    url = (flag_value or "").strip() or BASE_URL
    if urllib.parse.urlsplit(url).scheme not in ("http", "https"):
        raise SetupError(
            f"[SETUP_NEEDED] Invalid base URL '{url}'. "
            f"Use an http:// or https:// URL with --url or {URL_ENV_VAR}."
        )
    return url.rstrip("/")
