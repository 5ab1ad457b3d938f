"""
Command implementations for parascope-cli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Request logic lives in client.py (ParascopeClient). These thin wrappers
resolve the token, map argparse → keyword args, make exactly one client
call and dispatch to a formatter.
"""

import sys

from parascope_cli import config
from parascope_cli.api import _safe_json_parse
from parascope_cli.client import ParascopeClient
from parascope_cli.exceptions import CliError
from parascope_cli.formatters import (
    format_bulk_results_table,
    format_card_detail,
    format_cards_table,
    format_namespaces_table,
    format_organize_result,
    format_repos_table,
    format_scope_detail,
    format_scopes_table,
    format_sync_result,
    format_token_created,
    format_tokens_table,
    format_workspace_detail,
    format_workspaces_table,
    mutation_response,
    output,
)
from parascope_cli.models import ObjectPayload, OrganizeRequest

TOKEN_WARNING = "IMPORTANT: Save this token securely. It will not be shown again!"


def _get_client(ns):
    """Build a client for this invocation. Raises SetupError if no token resolves."""
    token = config.resolve_token(getattr(ns, "token", None))
    return ParascopeClient(token=token, base_url=config.resolve_base_url(getattr(ns, "url", None)))


def _read_json_arg(value, context):
    """Parse a JSON argument given inline, as ``@path`` or as ``-`` for stdin."""
    if value == "-":
        text = sys.stdin.read()
    elif value.startswith("@"):
        path = value[1:]
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise CliError(f"[ERROR] Cannot read {context} file '{path}': {e.strerror}") from e
    else:
        text = value
    return _safe_json_parse(text, context)


# ---------------------------------------------------------------------------
# Workspaces
# ---------------------------------------------------------------------------


def cmd_workspaces_list(ns):
    result = _get_client(ns).list_workspaces(q=ns.query, limit=ns.limit, offset=ns.offset)
    output(result, format_workspaces_table, ns.format)


def cmd_workspaces_get(ns):
    output(_get_client(ns).get_workspace(ns.id), format_workspace_detail, ns.format)


def cmd_workspaces_create(ns):
    workspace = _get_client(ns).create_workspace(
        ns.name, description=ns.description, sharing_type=ns.sharing
    )
    output(workspace, format_workspace_detail, ns.format)


def cmd_workspaces_update(ns):
    if ns.name is None and ns.description is None and ns.sharing is None:
        raise CliError("[ERROR] Nothing to update. Use --name, --description or --sharing.")
    workspace = _get_client(ns).update_workspace(
        ns.id, name=ns.name, description=ns.description, sharing_type=ns.sharing
    )
    output(workspace, format_workspace_detail, ns.format)


def cmd_workspaces_delete(ns):
    _get_client(ns).delete_workspace(ns.id)
    mutation_response("Workspace", ns.id, "deleted")


def cmd_workspaces_organize(ns):
    payload = ObjectPayload.from_value(_read_json_arg(ns.json_data, "organize"), "organize").data
    unknown = set(payload) - {"scopes", "cards"}
    if unknown:
        raise CliError(
            f"[ERROR] Unknown organize keys: {', '.join(sorted(unknown))}. Use: scopes, cards"
        )
    request = OrganizeRequest.from_value(payload)
    result = _get_client(ns).organize_workspace(ns.id, scopes=request.scopes, cards=request.cards)
    output(result, format_organize_result, ns.format)


# ---------------------------------------------------------------------------
# Scopes
# ---------------------------------------------------------------------------


def cmd_scopes_list(ns):
    output(_get_client(ns).list_scopes(ns.workspace_id), format_scopes_table, ns.format)


def cmd_scopes_get(ns):
    output(_get_client(ns).get_scope(ns.id), format_scope_detail, ns.format)


def cmd_scopes_create(ns):
    scope = _get_client(ns).create_scope(
        ns.workspace_id, ns.name, description=ns.description, position=ns.position
    )
    output(scope, format_scope_detail, ns.format)


def cmd_scopes_update(ns):
    if ns.name is None and ns.description is None and ns.position is None:
        raise CliError("[ERROR] Nothing to update. Use --name, --description or --position.")
    scope = _get_client(ns).update_scope(
        ns.id, name=ns.name, description=ns.description, position=ns.position
    )
    output(scope, format_scope_detail, ns.format)


def cmd_scopes_delete(ns):
    _get_client(ns).delete_scope(ns.id)
    mutation_response("Scope", ns.id, "deleted")


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


def cmd_cards_list(ns):
    result = _get_client(ns).list_cards(
        ns.workspace_id, scope_id=ns.scope, q=ns.query, limit=ns.limit, offset=ns.offset
    )
    output(result, format_cards_table, ns.format)


def cmd_cards_get(ns):
    output(_get_client(ns).get_card(ns.id), format_card_detail, ns.format)


def cmd_cards_create(ns):
    card = _get_client(ns).create_card(
        ns.workspace_id,
        ns.name,
        content=ns.content,
        scope_id=ns.scope,
        github_repo_id=ns.repo,
        position=ns.position,
    )
    output(card, format_card_detail, ns.format)


def cmd_cards_update(ns):
    if ns.name is None and ns.content is None and ns.scope is None and ns.position is None:
        raise CliError("[ERROR] Nothing to update. Use --name, --content, --scope or --position.")
    card = _get_client(ns).update_card(
        ns.id, name=ns.name, content=ns.content, scope_id=ns.scope, position=ns.position
    )
    output(card, format_card_detail, ns.format)


def cmd_cards_delete(ns):
    _get_client(ns).delete_card(ns.id)
    mutation_response("Card", ns.id, "deleted")


def cmd_cards_bulk(ns):
    """Run a bulk request and exit non-zero if any item failed."""
    operations = _read_json_arg(ns.json_data, "bulk operations")
    if not isinstance(operations, list):
        raise CliError(
            "[ERROR] Invalid JSON in bulk operations: expected array, "
            f"got {type(operations).__name__}."
        )
    results = _get_client(ns).bulk_cards(ns.workspace_id, operations)
    output(results, format_bulk_results_table, ns.format)
    failed = sum(1 for item in results if not item.get("success"))
    if failed:
        raise CliError(f"[ERROR] {failed} of {len(results)} bulk operations failed.")


# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------


def cmd_github_namespaces(ns):
    output(_get_client(ns).list_github_namespaces(), format_namespaces_table, ns.format)


def cmd_github_repos(ns):
    result = _get_client(ns).list_github_repos(
        namespace_id=ns.namespace, q=ns.query, limit=ns.limit, offset=ns.offset
    )
    output(result, format_repos_table, ns.format)


def cmd_github_sync(ns):
    output(_get_client(ns).sync_github_namespace(ns.installation_id), format_sync_result, ns.format)


# ---------------------------------------------------------------------------
# Personal access tokens
# ---------------------------------------------------------------------------


def cmd_tokens_list(ns):
    output(_get_client(ns).list_tokens(), format_tokens_table, ns.format)


def cmd_tokens_create(ns):
    token = _get_client(ns).create_token(ns.name, expires_at=ns.expires_at)
    output(token, format_token_created, ns.format)
    print(f"\n{TOKEN_WARNING}", file=sys.stderr)


def cmd_tokens_revoke(ns):
    _get_client(ns).revoke_token(ns.id)
    mutation_response("Token", ns.id, "revoked")
