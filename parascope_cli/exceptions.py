"""
parascope-cli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""

import json


class CliError(Exception):
    """Exit code 1: validation, client-side and API errors."""

    exit_code = 1


class SetupError(CliError):
    """Exit code 2: no token, no config."""

    exit_code = 2


class ApiError(CliError):
    """Structured error body returned by the Parascope API.

    The server answers failures with ``{"error": str, "code": int, "details"?: obj}``.
    """

    def __init__(self, error, code, details=None, status=None):
        self.error = error
        self.code = code
        self.details = details
        self.status = status
        message = f"[ERROR] API Error ({code}): {error}"
        if details is not None:
            message += "\n" + json.dumps(details, indent=2, ensure_ascii=False)
        super().__init__(message)


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors without a structured body."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
        super().__init__(f"HTTP {code}: {reason}")
