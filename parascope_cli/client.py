"""
ParascopeClient, the public Python API for the Parascope REST API.

Single entry point for programmatic use, the CLI and the MCP server.
Every method is one HTTP round-trip and returns plain dicts/lists suitable
for JSON serialization.
"""

from __future__ import annotations

# TypedDict return types live in parascope_cli.types for documentation.
# Method signatures use plain dict[str, Any] for mypy compatibility.
from typing import Any

from parascope_cli import config
from parascope_cli.api import _mask_token, api_request, expect_envelope, unwrap_envelope
from parascope_cli.exceptions import SetupError
from parascope_cli.models import BulkCardOperation, OrganizeRequest


def _drop_none(values):
    return {k: v for k, v in values.items() if v is not None}


class ParascopeClient:
    """Public API surface for Parascope workspaces, scopes, cards and GitHub.

    All methods use keyword-only arguments after the entity id and raise
    ApiError (structured server errors), HTTPError (other HTTP errors) or
    let network errors propagate. Nothing is retried or cached.
    """

    def __init__(self, *, token, base_url=None):
        """Initialize the client.

        Args:
            token: Personal access token or session token, sent as
                ``Authorization: Bearer <token>``.
            base_url: API root; defaults to ``config.BASE_URL``.
        """
        if not token:
            raise SetupError("[SETUP_NEEDED] ParascopeClient requires a token.")
        self._token = token
        self.base_url = (base_url or config.BASE_URL).rstrip("/")

    def __repr__(self):
        token = _mask_token(self._token)
        return f"ParascopeClient(base_url={self.base_url!r}, token={token!r})"

    # -------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------

    def _request(self, method, path, *, params=None, body=None):
        return api_request(self.base_url, self._token, method, path, params=params, body=body)

    def _get_data(self, path, operation, *, params=None):
        return unwrap_envelope(self._request("GET", path, params=params), operation)

    def _get_page(self, path, operation, *, params=None):
        return expect_envelope(self._request("GET", path, params=params), operation)

    def _send(self, method, path, body, operation, *, params=None):
        return unwrap_envelope(self._request(method, path, params=params, body=body), operation)

    def _delete(self, path):
        self._request("DELETE", path)

    # -------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------

    def login(self, *, email: str, password: str) -> dict[str, Any]:
        """Create a session. Returns ``{token, user}``."""
        return self._send(  # type: ignore[no-any-return]
            "POST", "/sessions", {"email": email, "password": password}, "login"
        )

    def logout(self) -> None:
        self._delete("/sessions")

    # -------------------------------------------------------------------
    # Personal access tokens
    # -------------------------------------------------------------------

    def list_tokens(self) -> list[dict[str, Any]]:
        return self._get_data("/tokens", "list_tokens")  # type: ignore[no-any-return]

    def create_token(self, name: str, *, expires_at: str | None = None) -> dict[str, Any]:
        """Create a personal access token.

        The returned dict carries the secret ``token`` value. The server
        never returns it again, so callers must show it once and drop it.
        """
        body = _drop_none({"name": name, "expires_at": expires_at})
        return self._send("POST", "/tokens", body, "create_token")  # type: ignore[no-any-return]

    def revoke_token(self, token_id: str) -> None:
        self._delete(f"/tokens/{token_id}")

    # -------------------------------------------------------------------
    # Workspaces
    # -------------------------------------------------------------------

    def list_workspaces(
        self,
        *,
        q: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        """List workspaces.

        Returns:
            The ``{data, meta?}`` envelope. ``meta`` carries limit, offset,
            has_more and next_offset; the next page is never fetched here.
        """
        return self._get_page(  # type: ignore[no-any-return]
            "/workspaces", "list_workspaces", params={"q": q, "limit": limit, "offset": offset}
        )

    def get_workspace(self, workspace_id: str) -> dict[str, Any]:
        return self._get_data(  # type: ignore[no-any-return]
            f"/workspaces/{workspace_id}", "get_workspace"
        )

    def create_workspace(
        self,
        name: str,
        *,
        description: str | None = None,
        sharing_type: str | None = None,
    ) -> dict[str, Any]:
        """Create a workspace. The body is nested under ``workspace``."""
        body = {
            "workspace": _drop_none(
                {"name": name, "description": description, "sharing_type": sharing_type}
            )
        }
        return self._send(  # type: ignore[no-any-return]
            "POST", "/workspaces", body, "create_workspace"
        )

    def update_workspace(
        self,
        workspace_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        sharing_type: str | None = None,
    ) -> dict[str, Any]:
        body = {
            "workspace": _drop_none(
                {"name": name, "description": description, "sharing_type": sharing_type}
            )
        }
        return self._send(  # type: ignore[no-any-return]
            "PATCH", f"/workspaces/{workspace_id}", body, "update_workspace"
        )

    def delete_workspace(self, workspace_id: str) -> None:
        self._delete(f"/workspaces/{workspace_id}")

    def organize_workspace(
        self,
        workspace_id: str,
        *,
        scopes: list | None = None,
        cards: list | None = None,
    ) -> dict[str, Any]:
        """Reposition scopes and move/reposition cards in one request.

        Args:
            scopes: ``ScopePosition`` values or ``{id, position}`` dicts.
            cards: ``CardPosition`` values or ``{id, position, scope_id?}``
                dicts; a ``scope_id`` moves the card.

        Returns:
            dict with message, scopes_updated, cards_updated. Re-sending the
            same positions reports the same counts.
        """
        request = OrganizeRequest.from_values(scopes=scopes, cards=cards)
        return self._send(  # type: ignore[no-any-return]
            "PATCH",
            f"/workspaces/{workspace_id}/organize",
            request.to_payload(),
            "organize_workspace",
        )

    # -------------------------------------------------------------------
    # Scopes
    # -------------------------------------------------------------------

    def list_scopes(self, workspace_id: str) -> list[dict[str, Any]]:
        return self._get_data(  # type: ignore[no-any-return]
            f"/workspaces/{workspace_id}/scopes", "list_scopes"
        )

    def get_scope(self, scope_id: str) -> dict[str, Any]:
        return self._get_data(f"/scopes/{scope_id}", "get_scope")  # type: ignore[no-any-return]

    def create_scope(
        self,
        workspace_id: str,
        name: str,
        *,
        description: str | None = None,
        position: int | None = None,
    ) -> dict[str, Any]:
        """Create a scope. ``workspace_id`` goes in the query string, the body under ``scope``."""
        body = {
            "scope": _drop_none({"name": name, "description": description, "position": position})
        }
        return self._send(  # type: ignore[no-any-return]
            "POST", "/scopes", body, "create_scope", params={"workspace_id": workspace_id}
        )

    def update_scope(
        self,
        scope_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        position: int | None = None,
    ) -> dict[str, Any]:
        body = {
            "scope": _drop_none({"name": name, "description": description, "position": position})
        }
        return self._send(  # type: ignore[no-any-return]
            "PATCH", f"/scopes/{scope_id}", body, "update_scope"
        )

    def delete_scope(self, scope_id: str) -> None:
        self._delete(f"/scopes/{scope_id}")

    # -------------------------------------------------------------------
    # Cards
    # -------------------------------------------------------------------

    def list_cards(
        self,
        workspace_id: str,
        *,
        scope_id: str | None = None,
        q: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        """List cards in a workspace. Returns the ``{data, meta?}`` envelope."""
        return self._get_page(  # type: ignore[no-any-return]
            f"/workspaces/{workspace_id}/cards",
            "list_cards",
            params={"scope_id": scope_id, "q": q, "limit": limit, "offset": offset},
        )

    def get_card(self, card_id: str) -> dict[str, Any]:
        return self._get_data(f"/cards/{card_id}", "get_card")  # type: ignore[no-any-return]

    def create_card(
        self,
        workspace_id: str,
        name: str,
        *,
        content: str | None = None,
        scope_id: str | None = None,
        github_repo_id: str | None = None,
        position: int | None = None,
    ) -> dict[str, Any]:
        """Create a card. Flat body; ``workspace_id`` goes in the query string.

        ``content`` is opaque text and is sent unchanged.
        """
        body = _drop_none(
            {
                "name": name,
                "content": content,
                "scope_id": scope_id,
                "github_repo_id": github_repo_id,
                "position": position,
            }
        )
        return self._send(  # type: ignore[no-any-return]
            "POST", "/cards", body, "create_card", params={"workspace_id": workspace_id}
        )

    def update_card(
        self,
        card_id: str,
        *,
        name: str | None = None,
        content: str | None = None,
        scope_id: str | None = None,
        position: int | None = None,
    ) -> dict[str, Any]:
        body = _drop_none(
            {"name": name, "content": content, "scope_id": scope_id, "position": position}
        )
        return self._send(  # type: ignore[no-any-return]
            "PATCH", f"/cards/{card_id}", body, "update_card"
        )

    def delete_card(self, card_id: str) -> None:
        self._delete(f"/cards/{card_id}")

    def bulk_cards(self, workspace_id: str, operations: list) -> list[dict[str, Any]]:
        """Run create/update/delete card operations in one request.

        Args:
            workspace_id: Target workspace (sent as a query param).
            operations: ``BulkCardOperation`` values or dicts with an
                ``action`` key.

        Returns:
            One ``{action, success, data?, error?}`` per operation, in input
            order. Item failures are reported here and do not raise.
        """
        ops = [BulkCardOperation.from_value(op) for op in operations]
        return self._send(  # type: ignore[no-any-return]
            "POST",
            "/cards/bulk",
            {"operations": [op.to_payload() for op in ops]},
            "bulk_cards",
            params={"workspace_id": workspace_id},
        )

    # -------------------------------------------------------------------
    # GitHub
    # -------------------------------------------------------------------

    def list_github_namespaces(self) -> list[dict[str, Any]]:
        return self._get_data(  # type: ignore[no-any-return]
            "/github/namespaces", "list_github_namespaces"
        )

    def list_github_repos(
        self,
        *,
        namespace_id: str | None = None,
        q: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        """List connected repositories. Returns the ``{data, meta?}`` envelope."""
        return self._get_page(  # type: ignore[no-any-return]
            "/github/repos",
            "list_github_repos",
            params={"namespace_id": namespace_id, "q": q, "limit": limit, "offset": offset},
        )

    def sync_github_namespace(self, installation_id: str) -> dict[str, Any]:
        """Ask the server to sync a GitHub App installation.

        Returns as soon as the server acknowledges; sync completion is not
        tracked (poll list_github_repos() for sync_state).
        """
        return self._send(  # type: ignore[no-any-return]
            "POST",
            "/github/sync",
            {"installation_id": installation_id},
            "sync_github_namespace",
        )
