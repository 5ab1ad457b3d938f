"""Entry point for ``python -m parascope_cli``."""

from parascope_cli.cli import main

main()
