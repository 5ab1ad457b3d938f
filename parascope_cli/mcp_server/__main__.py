"""Entry point for ``python -m parascope_cli.mcp_server``."""

from parascope_cli.mcp_server import main

main()
