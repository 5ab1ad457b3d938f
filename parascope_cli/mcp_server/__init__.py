"""MCP server exposing ParascopeClient methods as tools.

Package structure:
  __init__.py  FastMCP init, register() call, re-exports
  __main__.py  ``python -m parascope_cli.mcp_server`` entry point
  _core.py     Client caching, _call dispatcher, response contract
  _tools.py    workspace/scope/card/github/token tools

Run: python -m parascope_cli.mcp_server
Requires: pip install .[mcp]
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from parascope_cli.mcp_server import _tools

mcp = FastMCP(
    "parascope",
    instructions=(
        "Parascope workspace, scope and card tools. "
        "Every tool returns {ok, data} or {ok: false, error}. "
        "List tools return data plus meta; pass meta.next_offset as offset "
        "to read the next page. "
        "bulk_cards reports success per operation; check every item."
    ),
)

_tools.register(mcp)

from parascope_cli.mcp_server._core import (  # noqa: E402, F401
    _call,
    _contract_error,
    _finalize_tool_result,
    _get_client,
)
from parascope_cli.mcp_server._tools import (  # noqa: E402, F401
    bulk_cards,
    create_card,
    create_scope,
    create_workspace,
    delete_card,
    delete_scope,
    delete_workspace,
    get_card,
    get_scope,
    get_workspace,
    list_cards,
    list_github_namespaces,
    list_github_repos,
    list_scopes,
    list_tokens,
    list_workspaces,
    organize_workspace,
    sync_github_namespace,
    update_card,
    update_scope,
    update_workspace,
)


def main():
    """Run the MCP server (stdio transport)."""
    mcp.run()
