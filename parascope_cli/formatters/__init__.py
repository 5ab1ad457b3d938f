"""Output formatting package for parascope-cli.

Re-exports all public names so consumers can do:
    from parascope_cli.formatters import format_cards_table
"""

from parascope_cli.formatters._core import (
    mutation_response,
    output,
    pretty_print,
)
from parascope_cli.formatters._entities import (
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
)
from parascope_cli.formatters._table import (
    _CONTROL_RE,
    _sanitize_str,
    _table,
    _trunc,
)

__all__ = [
    "_CONTROL_RE",
    "_sanitize_str",
    "_table",
    "_trunc",
    "format_bulk_results_table",
    "format_card_detail",
    "format_cards_table",
    "format_namespaces_table",
    "format_organize_result",
    "format_repos_table",
    "format_scope_detail",
    "format_scopes_table",
    "format_sync_result",
    "format_token_created",
    "format_tokens_table",
    "format_workspace_detail",
    "format_workspaces_table",
    "mutation_response",
    "output",
    "pretty_print",
]
