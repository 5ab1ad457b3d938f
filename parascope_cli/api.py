"""
HTTP request layer, security helpers, and error translation for parascope-cli.
"""

import json
import sys
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid

from parascope_cli import config
from parascope_cli.exceptions import ApiError, CliError, HTTPError

# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _mask_token(token):
    """Show only first 6 chars of a token for safe logging."""
    return token[:6] + "..." if len(token) > 6 else token


def _safe_json_parse(text, context="input"):
    """Parse JSON with friendly error message on failure."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CliError(f"[ERROR] Invalid JSON in {context}: {e.msg} at position {e.pos}") from None


def _sanitize_url_for_log(url):
    """Mask sensitive query params in URLs before logging."""
    parsed = urllib.parse.urlsplit(url)
    if not parsed.query:
        return url
    pairs = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    masked = []
    for key, value in pairs:
        if key.lower() in {"token", "password"}:
            masked.append((key, "***"))
        else:
            masked.append((key, value))
    safe_query = urllib.parse.urlencode(masked, doseq=True)
    return urllib.parse.urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, safe_query, parsed.fragment)
    )


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not (config.HTTP_LOG_ENABLED or config.RUNTIME_VERBOSE):
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


# ---------------------------------------------------------------------------
# URL and error helpers
# ---------------------------------------------------------------------------


def build_url(base_url, path, params=None):
    """Join base URL and path, appending non-None query params."""
    url = base_url.rstrip("/") + "/" + path.lstrip("/")
    if params:
        pairs = []
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            pairs.append((key, value))
        if pairs:
            url += "?" + urllib.parse.urlencode(pairs)
    return url


def _api_error_from_body(status, body):
    """Return an ApiError for a structured ``{error, code, details?}`` body, else None."""
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(parsed, dict) or "error" not in parsed:
        return None
    return ApiError(
        parsed.get("error"),
        parsed.get("code", status),
        details=parsed.get("details"),
        status=status,
    )


# ---------------------------------------------------------------------------
# HTTP request layer
# ---------------------------------------------------------------------------


def _http_request(url, data=None, headers=None, method="GET"):
    """Make a single HTTP request (no retries).

    Returns parsed JSON on success, or None for an empty body.
    Raises ApiError for structured API error bodies, HTTPError for any other
    HTTP error. Network failures (URLError, TimeoutError) propagate as-is.
    """
    body = json.dumps(data).encode("utf-8") if data is not None else None
    request_id = (headers or {}).get("X-Request-Id")
    safe_url = _sanitize_url_for_log(url)
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)
    start = time.perf_counter()
    try:
        req = urllib.request.Request(url, data=body, headers=headers or {}, method=method)
    except ValueError as e:
        raise CliError(f"[ERROR] Invalid request URL: {e}") from None
    _log_http_event(
        phase="request",
        method=method,
        url=safe_url,
        request_id=request_id,
        timeout_seconds=timeout,
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            content_type = resp.headers.get("Content-Type", "")
            raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
            if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
                raise CliError(
                    "[ERROR] Response too large from Parascope API "
                    f"(>{config.HTTP_MAX_RESPONSE_BYTES} bytes)."
                )
            _log_http_event(
                phase="response",
                method=method,
                url=safe_url,
                status=getattr(resp, "status", 200),
                content_type=content_type,
                bytes=len(raw),
                latency_ms=round((time.perf_counter() - start) * 1000, 2),
                request_id=request_id,
            )
            if not raw.strip():
                return None
            try:
                return json.loads(raw.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError):
                if content_type and "json" not in content_type.lower():
                    raise CliError(
                        f"[ERROR] Unexpected Content-Type from server "
                        f"({content_type}). This may be a proxy or "
                        "network issue."
                    ) from None
                raise CliError(
                    "[ERROR] Unexpected response from Parascope API (not valid JSON)."
                ) from None
    except urllib.error.HTTPError as e:
        error_body = (
            e.read(config.HTTP_MAX_RESPONSE_BYTES).decode("utf-8", errors="replace")
            if e.fp
            else ""
        )
        _log_http_event(
            phase="response",
            method=method,
            url=safe_url,
            status=e.code,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            request_id=request_id,
        )
        api_error = _api_error_from_body(e.code, error_body)
        if api_error is not None:
            raise api_error from e
        raise HTTPError(e.code, e.reason, error_body, headers=e.headers) from e
    except (urllib.error.URLError, TimeoutError) as e:
        _log_http_event(
            phase="network_error",
            method=method,
            url=safe_url,
            error=str(getattr(e, "reason", e)),
            request_id=request_id,
        )
        raise


def api_request(base_url, token, method, path, *, params=None, body=None):
    """Make an authenticated request against the Parascope API."""
    url = build_url(base_url, path, params)
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
        "X-Request-Id": str(uuid.uuid4()),
    }
    return _http_request(url, body, headers, method)


def unwrap_envelope(result, operation):
    """Return the ``data`` member of a ``{data, meta?}`` envelope."""
    if isinstance(result, dict) and "data" in result:
        return result["data"]
    raise CliError(
        f"[ERROR] Unexpected {operation} response shape: "
        f"expected {{data, meta?}} envelope, got {type(result).__name__}."
    )


def expect_envelope(result, operation):
    """Ensure list helpers return the envelope object itself (dict with ``data``)."""
    unwrap_envelope(result, operation)
    return result
