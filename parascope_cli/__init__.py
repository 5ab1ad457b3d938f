"""parascope-cli: typed client and CLI for the Parascope Cloud API."""

from parascope_cli.client import ParascopeClient
from parascope_cli.config import VERSION
from parascope_cli.exceptions import ApiError, CliError, HTTPError, SetupError
from parascope_cli.models import BulkCardOperation, CardPosition, ScopePosition
from parascope_cli.types import (
    ApiResponse,
    BulkCardResult,
    Card,
    GithubNamespace,
    GithubRepo,
    OrganizeResult,
    Pagination,
    PersonalAccessToken,
    Scope,
    Session,
    SyncResult,
    Workspace,
)

__all__ = [
    "VERSION",
    "ParascopeClient",
    "ApiError",
    "CliError",
    "HTTPError",
    "SetupError",
    "BulkCardOperation",
    "CardPosition",
    "ScopePosition",
    "ApiResponse",
    "BulkCardResult",
    "Card",
    "GithubNamespace",
    "GithubRepo",
    "OrganizeResult",
    "Pagination",
    "PersonalAccessToken",
    "Scope",
    "Session",
    "SyncResult",
    "Workspace",
]
