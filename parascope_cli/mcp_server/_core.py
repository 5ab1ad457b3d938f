"""Core helpers: client caching, _call dispatcher, response contract."""

from __future__ import annotations

from parascope_cli import ApiError, CliError, HTTPError, ParascopeClient, SetupError
from parascope_cli import config

_client: ParascopeClient | None = None


def _get_client() -> ParascopeClient:
    """Return a cached ParascopeClient, creating one on first use."""
    global _client
    if _client is None:
        _client = ParascopeClient(
            token=config.resolve_token(), base_url=config.resolve_base_url()
        )
    return _client


def _contract_error(message: str, error_type: str = "error", **extra) -> dict:
    """Return a stable MCP error envelope."""
    payload = {
        "ok": False,
        "schema_version": config.CONTRACT_SCHEMA_VERSION,
        "type": error_type,
        "error": message,
    }
    payload.update(extra)
    return payload


def _finalize_tool_result(result):
    """Wrap successful results as ``{"ok", "schema_version", "data"}``; pass errors through."""
    if isinstance(result, dict) and result.get("ok") is False:
        return result
    return {
        "ok": True,
        "schema_version": config.CONTRACT_SCHEMA_VERSION,
        "data": result,
    }


_ALLOWED_METHODS = {
    "list_workspaces",
    "get_workspace",
    "create_workspace",
    "update_workspace",
    "delete_workspace",
    "organize_workspace",
    "list_scopes",
    "get_scope",
    "create_scope",
    "update_scope",
    "delete_scope",
    "list_cards",
    "get_card",
    "create_card",
    "update_card",
    "delete_card",
    "bulk_cards",
    "list_github_namespaces",
    "list_github_repos",
    "sync_github_namespace",
    "list_tokens",
}


def _call(method_name: str, *args, **kwargs):
    """Call a ParascopeClient method, converting exceptions to error dicts."""
    if method_name not in _ALLOWED_METHODS:
        return _contract_error(f"Unknown method: {method_name}", "error")
    try:
        client = _get_client()
        return getattr(client, method_name)(*args, **kwargs)
    except SetupError as e:
        return _contract_error(str(e), "setup")
    except ApiError as e:
        return _contract_error(str(e), "api", code=e.code, details=e.details)
    except CliError as e:
        return _contract_error(str(e), "error")
    except HTTPError as e:
        return _contract_error(f"HTTP {e.code}: {e.reason}", "http", status=e.code)
    except OSError as e:
        return _contract_error(f"Connection failed: {e}", "network")
    except Exception as e:
        return _contract_error(f"Unexpected error: {e}", "error")
