"""Tools: one per ParascopeClient operation."""

from __future__ import annotations

from typing import Literal

from parascope_cli.mcp_server._core import _call, _finalize_tool_result

# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


def list_workspaces(q: str | None = None, limit: int = 50, offset: int = 0) -> dict:
    """List workspaces. Returns data plus meta (has_more, next_offset) for paging."""
    return _finalize_tool_result(_call("list_workspaces", q=q, limit=limit, offset=offset))


def get_workspace(workspace_id: str) -> dict:
    return _finalize_tool_result(_call("get_workspace", workspace_id))


def create_workspace(
    name: str,
    description: str | None = None,
    sharing_type: Literal["private", "internal", "public"] = "private",
) -> dict:
    return _finalize_tool_result(
        _call("create_workspace", name, description=description, sharing_type=sharing_type)
    )


def update_workspace(
    workspace_id: str,
    name: str | None = None,
    description: str | None = None,
    sharing_type: Literal["private", "internal", "public"] | None = None,
) -> dict:
    return _finalize_tool_result(
        _call(
            "update_workspace",
            workspace_id,
            name=name,
            description=description,
            sharing_type=sharing_type,
        )
    )


def delete_workspace(workspace_id: str) -> dict:
    result = _call("delete_workspace", workspace_id)
    return _finalize_tool_result(result if result else {"deleted": workspace_id})


def organize_workspace(
    workspace_id: str,
    scopes: list[dict] | None = None,
    cards: list[dict] | None = None,
) -> dict:
    """Reorder scopes and move/reorder cards in one request.

    Args:
        scopes: [{"id", "position"}].
        cards: [{"id", "position", "scope_id"?}]; scope_id moves the card.

    Returns:
        Dict with message, scopes_updated, cards_updated.
    """
    return _finalize_tool_result(
        _call("organize_workspace", workspace_id, scopes=scopes, cards=cards)
    )


# ---------------------------------------------------------------------------
# Scopes
# ---------------------------------------------------------------------------


def list_scopes(workspace_id: str) -> dict:
    return _finalize_tool_result(_call("list_scopes", workspace_id))


def get_scope(scope_id: str) -> dict:
    return _finalize_tool_result(_call("get_scope", scope_id))


def create_scope(
    workspace_id: str,
    name: str,
    description: str | None = None,
    position: int | None = None,
) -> dict:
    return _finalize_tool_result(
        _call("create_scope", workspace_id, name, description=description, position=position)
    )


def update_scope(
    scope_id: str,
    name: str | None = None,
    description: str | None = None,
    position: int | None = None,
) -> dict:
    return _finalize_tool_result(
        _call("update_scope", scope_id, name=name, description=description, position=position)
    )


def delete_scope(scope_id: str) -> dict:
    result = _call("delete_scope", scope_id)
    return _finalize_tool_result(result if result else {"deleted": scope_id})


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


def list_cards(
    workspace_id: str,
    scope_id: str | None = None,
    q: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    return _finalize_tool_result(
        _call("list_cards", workspace_id, scope_id=scope_id, q=q, limit=limit, offset=offset)
    )


def get_card(card_id: str) -> dict:
    return _finalize_tool_result(_call("get_card", card_id))


def create_card(
    workspace_id: str,
    name: str,
    content: str | None = None,
    scope_id: str | None = None,
    github_repo_id: str | None = None,
    position: int | None = None,
) -> dict:
    return _finalize_tool_result(
        _call(
            "create_card",
            workspace_id,
            name,
            content=content,
            scope_id=scope_id,
            github_repo_id=github_repo_id,
            position=position,
        )
    )


def update_card(
    card_id: str,
    name: str | None = None,
    content: str | None = None,
    scope_id: str | None = None,
    position: int | None = None,
) -> dict:
    return _finalize_tool_result(
        _call(
            "update_card", card_id, name=name, content=content, scope_id=scope_id, position=position
        )
    )


def delete_card(card_id: str) -> dict:
    result = _call("delete_card", card_id)
    return _finalize_tool_result(result if result else {"deleted": card_id})


def bulk_cards(workspace_id: str, operations: list[dict]) -> dict:
    """Create/update/delete many cards in one request.

    Args:
        operations: {"action": "create", "name", "content"?, "scope_id"?},
            {"action": "update", "id", "attributes": {...}} or
            {"action": "delete", "id"}.

    Returns:
        data is one {action, success, data?, error?} per operation, in order.
        Check each success flag; failed items do not fail the call.
    """
    return _finalize_tool_result(_call("bulk_cards", workspace_id, operations))


# ---------------------------------------------------------------------------
# GitHub and tokens
# ---------------------------------------------------------------------------


def list_github_namespaces() -> dict:
    return _finalize_tool_result(_call("list_github_namespaces"))


def list_github_repos(
    namespace_id: str | None = None,
    q: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    return _finalize_tool_result(
        _call("list_github_repos", namespace_id=namespace_id, q=q, limit=limit, offset=offset)
    )


def sync_github_namespace(installation_id: str) -> dict:
    """Request a sync; returns on acknowledgement, not completion."""
    return _finalize_tool_result(_call("sync_github_namespace", installation_id))


def list_tokens() -> dict:
    return _finalize_tool_result(_call("list_tokens"))


def register(mcp):
    """Register all tools with the FastMCP instance."""
    for tool in (
        list_workspaces,
        get_workspace,
        create_workspace,
        update_workspace,
        delete_workspace,
        organize_workspace,
        list_scopes,
        get_scope,
        create_scope,
        update_scope,
        delete_scope,
        list_cards,
        get_card,
        create_card,
        update_card,
        delete_card,
        bulk_cards,
        list_github_namespaces,
        list_github_repos,
        sync_github_namespace,
        list_tokens,
    ):
        mcp.tool()(tool)
