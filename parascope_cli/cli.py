"""
parascope-cli: CLI tool for the Parascope Cloud API
"""

import argparse
import json
import sys
import urllib.error

from parascope_cli import config
from parascope_cli.commands import (
    cmd_cards_bulk,
    cmd_cards_create,
    cmd_cards_delete,
    cmd_cards_get,
    cmd_cards_list,
    cmd_cards_update,
    cmd_github_namespaces,
    cmd_github_repos,
    cmd_github_sync,
    cmd_scopes_create,
    cmd_scopes_delete,
    cmd_scopes_get,
    cmd_scopes_list,
    cmd_scopes_update,
    cmd_tokens_create,
    cmd_tokens_list,
    cmd_tokens_revoke,
    cmd_workspaces_create,
    cmd_workspaces_delete,
    cmd_workspaces_get,
    cmd_workspaces_list,
    cmd_workspaces_organize,
    cmd_workspaces_update,
)
from parascope_cli.exceptions import ApiError, CliError, HTTPError

HELP_TEXT = """\
Usage: parascope [global flags] <group> <command> [args...]

Global flags:
  -t, --token <token>     API token (or set PARASCOPE_TOKEN)
  -u, --url <url>         Base URL (default: https://app.parascope.dev/api/v1)
  --format table          Output as readable text instead of JSON (default: json)
  --verbose, -v           Log HTTP requests to stderr
  --version               Show version number
  --                      Stop reading global flags (pass values like -v as-is)

Commands:
  workspaces list                     - List workspaces
    -q, --query <text>                  Search query
    -l, --limit <n>                     Page size (default: 50)
    --offset <n>                        Skip first N results
  workspaces get <id>                 - Get workspace by ID
  workspaces create <name>            - Create a workspace
    -d, --description <text>            Description
    -s, --sharing <type>                private, internal, public (default: private)
  workspaces update <id>              - Update a workspace
    --name <text> / -d / -s             Fields to change
  workspaces delete <id>              - Delete a workspace
  workspaces organize <id> <json>     - Reorder scopes and cards in one request
                                        {"scopes": [{"id", "position"}],
                                         "cards": [{"id", "position", "scope_id"?}]}
                                        Use @file.json or - for stdin
  scopes list <workspace-id>          - List scopes in a workspace
  scopes get <id>                     - Get scope by ID
  scopes create <workspace-id> <name> - Create a scope
    -d, --description <text>            Description
    --position <n>                      Ordering position
  scopes update <id>                  - Update a scope (--name, -d, --position)
  scopes delete <id>                  - Delete a scope
  cards list <workspace-id>           - List cards in a workspace
    -s, --scope <scope-id>              Filter by scope
    -q, --query <text>                  Search query
    -l, --limit <n>                     Page size (default: 50)
    --offset <n>                        Skip first N results
  cards get <id>                      - Get card by ID
  cards create <workspace-id> <name>  - Create a card
    -c, --content <text>                Card content
    -s, --scope <scope-id>              Scope ID
    --repo <github-repo-id>             Link a GitHub repository
    --position <n>                      Ordering position
  cards update <id>                   - Update a card
    -n, --name / -c, --content / -s, --scope / --position
  cards delete <id>                   - Delete a card
  cards bulk <workspace-id> <json>    - Bulk create/update/delete (JSON array)
                                        Exits 1 if any operation failed
  github namespaces                   - List GitHub namespaces
  github repos                        - List GitHub repositories
    -n, --namespace <id>                Filter by namespace
    -q, --query <text>                  Search query
    -l, --limit <n> / --offset <n>      Pagination
  github sync <installation-id>       - Trigger a GitHub namespace sync
  tokens list                         - List personal access tokens
  tokens create <name>                - Create a token (secret shown once)
    --expires-at <timestamp>            Expiry (ISO 8601)
  tokens revoke <id>                  - Revoke a token
"""


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so flags work after the subcommand)
# ---------------------------------------------------------------------------

_VALUE_FLAGS = {
    "--token": "token",
    "-t": "token",
    "--url": "url",
    "-u": "url",
    "--format": "format",
}


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (globals_dict, remaining_argv) where globals_dict has keys
    token, url, format, verbose. Handles --version directly. Everything
    from a bare ``--`` on is passed through untouched.
    """
    opts = {"token": None, "url": None, "format": "json", "verbose": False}
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        name, eq, inline = arg.partition("=")
        if arg == "--":
            remaining.extend(argv[i:])
            break
        if arg == "--version":
            print(f"parascope-cli {config.VERSION}")
            sys.exit(0)
        elif arg in ("--verbose", "-v"):
            opts["verbose"] = True
        elif eq and name in _VALUE_FLAGS and name.startswith("--"):
            opts[_VALUE_FLAGS[name]] = inline
        elif arg in _VALUE_FLAGS and i + 1 < len(argv):
            opts[_VALUE_FLAGS[arg]] = argv[i + 1]
            i += 2
            continue
        else:
            remaining.append(arg)
        i += 1
    if opts["format"] not in config.VALID_FORMATS:
        raise CliError(f"[ERROR] Invalid format '{opts['format']}'. Use: json, table")
    return opts, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Subparser that raises CliError instead of printing full help text."""

    def error(self, message):
        raise CliError(f"[ERROR] {message}")


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _non_negative_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a non-negative integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be a non-negative integer")
    return parsed


def _add_paging(p, default_limit=50):
    p.add_argument("--query", "-q")
    p.add_argument("--limit", "-l", type=_positive_int, default=default_limit)
    p.add_argument("--offset", type=_non_negative_int)


def _group(sub, name):
    p = sub.add_parser(name)
    p.set_defaults(group=name)
    return p.add_subparsers(dest="action", parser_class=_SubcommandParser)


def build_parser():
    parser = _SubcommandParser(
        prog="parascope",
        description="CLI tool for Parascope Cloud API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    # --- workspaces ---
    ws = _group(sub, "workspaces")
    p = ws.add_parser("list")
    _add_paging(p)
    p.set_defaults(func=cmd_workspaces_list)

    p = ws.add_parser("get")
    p.add_argument("id")
    p.set_defaults(func=cmd_workspaces_get)

    p = ws.add_parser("create")
    p.add_argument("name")
    p.add_argument("--description", "-d")
    p.add_argument("--sharing", "-s", choices=sorted(config.VALID_SHARING_TYPES), default="private")
    p.set_defaults(func=cmd_workspaces_create)

    p = ws.add_parser("update")
    p.add_argument("id")
    p.add_argument("--name")
    p.add_argument("--description", "-d")
    p.add_argument("--sharing", "-s", choices=sorted(config.VALID_SHARING_TYPES))
    p.set_defaults(func=cmd_workspaces_update)

    p = ws.add_parser("delete")
    p.add_argument("id")
    p.set_defaults(func=cmd_workspaces_delete)

    p = ws.add_parser("organize")
    p.add_argument("id")
    p.add_argument("json_data")
    p.set_defaults(func=cmd_workspaces_organize)

    # --- scopes ---
    sc = _group(sub, "scopes")
    p = sc.add_parser("list")
    p.add_argument("workspace_id")
    p.set_defaults(func=cmd_scopes_list)

    p = sc.add_parser("get")
    p.add_argument("id")
    p.set_defaults(func=cmd_scopes_get)

    p = sc.add_parser("create")
    p.add_argument("workspace_id")
    p.add_argument("name")
    p.add_argument("--description", "-d")
    p.add_argument("--position", type=_non_negative_int)
    p.set_defaults(func=cmd_scopes_create)

    p = sc.add_parser("update")
    p.add_argument("id")
    p.add_argument("--name")
    p.add_argument("--description", "-d")
    p.add_argument("--position", type=_non_negative_int)
    p.set_defaults(func=cmd_scopes_update)

    p = sc.add_parser("delete")
    p.add_argument("id")
    p.set_defaults(func=cmd_scopes_delete)

    # --- cards ---
    cd = _group(sub, "cards")
    p = cd.add_parser("list")
    p.add_argument("workspace_id")
    p.add_argument("--scope", "-s")
    _add_paging(p)
    p.set_defaults(func=cmd_cards_list)

    p = cd.add_parser("get")
    p.add_argument("id")
    p.set_defaults(func=cmd_cards_get)

    p = cd.add_parser("create")
    p.add_argument("workspace_id")
    p.add_argument("name")
    p.add_argument("--content", "-c")
    p.add_argument("--scope", "-s")
    p.add_argument("--repo", dest="repo")
    p.add_argument("--position", type=_non_negative_int)
    p.set_defaults(func=cmd_cards_create)

    p = cd.add_parser("update")
    p.add_argument("id")
    p.add_argument("--name", "-n")
    p.add_argument("--content", "-c")
    p.add_argument("--scope", "-s")
    p.add_argument("--position", type=_non_negative_int)
    p.set_defaults(func=cmd_cards_update)

    p = cd.add_parser("delete")
    p.add_argument("id")
    p.set_defaults(func=cmd_cards_delete)

    p = cd.add_parser("bulk")
    p.add_argument("workspace_id")
    p.add_argument("json_data")
    p.set_defaults(func=cmd_cards_bulk)

    # --- github ---
    gh = _group(sub, "github")
    gh.add_parser("namespaces").set_defaults(func=cmd_github_namespaces)

    p = gh.add_parser("repos")
    p.add_argument("--namespace", "-n")
    p.add_argument("--query", "-q")
    p.add_argument("--limit", "-l", type=_positive_int)
    p.add_argument("--offset", type=_non_negative_int)
    p.set_defaults(func=cmd_github_repos)

    p = gh.add_parser("sync")
    p.add_argument("installation_id")
    p.set_defaults(func=cmd_github_sync)

    # --- tokens ---
    tk = _group(sub, "tokens")
    tk.add_parser("list").set_defaults(func=cmd_tokens_list)

    p = tk.add_parser("create")
    p.add_argument("name")
    p.add_argument("--expires-at", dest="expires_at")
    p.set_defaults(func=cmd_tokens_create)

    p = tk.add_parser("revoke")
    p.add_argument("id")
    p.set_defaults(func=cmd_tokens_revoke)

    # --- version (bare word) ---
    sub.add_parser("version").set_defaults(func=None)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------


def _error_type_from_message(message):
    if message.startswith("[SETUP_NEEDED]"):
        return "setup_needed"
    if message.startswith("[ERROR] API Error"):
        return "api_error"
    if message.startswith("[ERROR]"):
        return "error"
    return "cli_error"


def _emit_cli_error(err, fmt):
    msg = str(err)
    if fmt == "json":
        error = {
            "type": _error_type_from_message(msg),
            "message": msg,
            "exit_code": getattr(err, "exit_code", 1),
        }
        if isinstance(err, ApiError):
            error["code"] = err.code
            if err.details is not None:
                error["details"] = err.details
        payload = {
            "ok": False,
            "schema_version": config.CONTRACT_SCHEMA_VERSION,
            "error": error,
        }
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)


def _transport_message(err):
    if isinstance(err, HTTPError):
        detail = f"\n{err.body.strip()[:500]}" if err.body and err.body.strip() else ""
        return f"[ERROR] HTTP {err.code}: {err.reason}{detail}"
    if isinstance(err, urllib.error.URLError):
        return f"[ERROR] Connection failed: {err.reason}"
    if isinstance(err, TimeoutError):
        return f"[ERROR] Request timed out after {config.HTTP_TIMEOUT_SECONDS} seconds."
    return f"[ERROR] {err}"


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv:
        print(HELP_TEXT)
        sys.exit(0)

    fmt = "json"
    try:
        opts, remaining_argv = _extract_global_flags(argv)
        fmt = opts["format"]
        config.RUNTIME_VERBOSE = opts["verbose"]

        if not remaining_argv:
            print(HELP_TEXT)
            sys.exit(0)

        parser = build_parser()
        ns = parser.parse_args(remaining_argv)
        ns.format = fmt
        ns.token = opts["token"]
        ns.url = opts["url"]

        if ns.show_help or not ns.command:
            print(HELP_TEXT)
            sys.exit(0)

        if ns.command == "version":
            print(f"parascope-cli {config.VERSION}")
            sys.exit(0)

        handler = getattr(ns, "func", None)
        if handler is None:
            raise CliError(
                f"[ERROR] Missing {ns.command} command. Run 'parascope --help' for usage."
            )
        handler(ns)

    except CliError as e:
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)
    except (HTTPError, OSError) as e:
        err = CliError(_transport_message(e))
        _emit_cli_error(err, fmt)
        sys.exit(err.exit_code)


if __name__ == "__main__":
    main()
