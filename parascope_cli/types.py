"""Typed response definitions for ParascopeClient methods.

These TypedDicts document the shape of dicts returned by public API methods.
They are optional; runtime behavior is unchanged (plain dicts).
"""

from __future__ import annotations

from typing import Any, Literal, TypedDict

SharingType = Literal["private", "internal", "public"]
SyncState = Literal["unknown", "good_config", "bad_config", "no_config", "failed"]
BulkAction = Literal["create", "update", "delete"]

# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class Pagination(TypedDict):
    limit: int
    offset: int
    has_more: bool
    next_offset: int | None


class ApiResponse(TypedDict, total=False):
    """The ``{data, meta?}`` envelope. ``meta`` is present on paginated lists."""

    data: Any
    meta: Pagination


class ApiErrorBody(TypedDict, total=False):
    error: str
    code: int
    details: dict[str, Any]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class User(TypedDict):
    id: str
    email: str
    username: str


class Session(TypedDict):
    """Return type of ParascopeClient.login()."""

    token: str
    user: User


class PersonalAccessToken(TypedDict, total=False):
    """``token`` is only present in the create_token() response."""

    id: str
    name: str
    token: str
    last_used_at: str | None
    expires_at: str | None
    revoked_at: str | None
    created_at: str


# ---------------------------------------------------------------------------
# Workspaces, scopes, cards
# ---------------------------------------------------------------------------


class Workspace(TypedDict, total=False):
    id: str
    name: str
    is_default: bool
    sharing_type: SharingType
    owner_id: str
    scopes_count: int
    cards_count: int
    created_at: str
    updated_at: str


class Scope(TypedDict):
    id: str
    workspace_id: str
    name: str
    description: str | None
    is_default: bool
    position: int
    cards_count: int
    created_at: str
    updated_at: str


class GithubRepoSummary(TypedDict):
    id: str
    repository_name: str
    repository_full_name: str
    sync_state: str


class Card(TypedDict):
    id: str
    workspace_id: str
    scope_id: str
    github_repo_id: str | None
    name: str
    content: str
    position: int
    github_repo: GithubRepoSummary | None
    created_at: str
    updated_at: str


class BulkCardResult(TypedDict, total=False):
    """One entry of ParascopeClient.bulk_cards(); order mirrors the input."""

    action: BulkAction
    success: bool
    data: Card
    error: str


class OrganizeResult(TypedDict):
    """Return type of ParascopeClient.organize_workspace()."""

    message: str
    scopes_updated: int
    cards_updated: int


# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------


class GithubNamespace(TypedDict):
    id: str
    installation_id: str
    name: str
    github_account_type: Literal["User", "Organization"]
    github_account_login: str
    repos_count: int
    created_at: str


class GithubRepo(TypedDict):
    id: str
    github_namespace_id: str
    repository_id: int
    repository_name: str
    repository_full_name: str
    default_branch: str
    sync_state: SyncState
    last_synced_at: str | None
    created_at: str


class SyncResult(TypedDict):
    """Return type of ParascopeClient.sync_github_namespace()."""

    message: str
    installation_id: str
    namespace_id: str
