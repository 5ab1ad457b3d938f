"""Formatters for workspaces, scopes, cards, GitHub and tokens."""

from parascope_cli.formatters._table import _table, _trunc


def _rows_and_meta(result):
    """Accept either a ``{data, meta?}`` envelope or a bare list."""
    if isinstance(result, dict):
        return result.get("data") or [], result.get("meta")
    return result or [], None


def _page_footer(noun, items, meta):
    footer = f"Total: {len(items)} {noun}"
    if meta:
        footer += f" (offset {meta.get('offset', 0)}, limit {meta.get('limit', '-')})"
        if meta.get("has_more"):
            footer += f", more available at offset {meta.get('next_offset')}"
    return footer


def format_workspaces_table(result):
    items, meta = _rows_and_meta(result)
    if not items:
        return "No workspaces found."
    cols = [("Name", 28), ("Sharing", 9), ("Default", 8), ("Scopes", 7), ("Cards", 6), ("ID", 0)]
    rows = [
        (
            ws.get("name"),
            ws.get("sharing_type", ""),
            bool(ws.get("is_default")),
            ws.get("scopes_count", "-"),
            ws.get("cards_count", "-"),
            ws.get("id", ""),
        )
        for ws in items
    ]
    return _table(cols, rows, _page_footer("workspaces", items, meta))


def format_workspace_detail(ws):
    lines = [f"Workspace: {ws.get('name', '')}"]
    lines.append(f"  ID:       {ws.get('id', '')}")
    lines.append(f"  Sharing:  {ws.get('sharing_type', '')}")
    lines.append(f"  Default:  {'yes' if ws.get('is_default') else 'no'}")
    lines.append(f"  Owner:    {ws.get('owner_id', '')}")
    if "scopes_count" in ws or "cards_count" in ws:
        lines.append(f"  Scopes:   {ws.get('scopes_count', 0)}")
        lines.append(f"  Cards:    {ws.get('cards_count', 0)}")
    lines.append(f"  Created:  {ws.get('created_at', '')}")
    lines.append(f"  Updated:  {ws.get('updated_at', '')}")
    return "\n".join(lines)


def format_scopes_table(scopes):
    if not scopes:
        return "No scopes found."
    cols = [("Pos", 5), ("Name", 30), ("Default", 8), ("Cards", 6), ("ID", 0)]
    ordered = sorted(scopes, key=lambda s: s.get("position", 0))
    rows = [
        (
            s.get("position"),
            s.get("name"),
            bool(s.get("is_default")),
            s.get("cards_count", 0),
            s.get("id", ""),
        )
        for s in ordered
    ]
    return _table(cols, rows, f"Total: {len(scopes)} scopes")


def format_scope_detail(scope):
    lines = [f"Scope: {scope.get('name', '')}"]
    lines.append(f"  ID:        {scope.get('id', '')}")
    lines.append(f"  Workspace: {scope.get('workspace_id', '')}")
    lines.append(f"  Position:  {scope.get('position', '')}")
    lines.append(f"  Default:   {'yes' if scope.get('is_default') else 'no'}")
    lines.append(f"  Cards:     {scope.get('cards_count', 0)}")
    if scope.get("description"):
        lines.append(f"  About:     {scope['description']}")
    return "\n".join(lines)


def format_cards_table(result):
    items, meta = _rows_and_meta(result)
    if not items:
        return "No cards found."
    cols = [("Pos", 5), ("Name", 32), ("Repo", 28), ("Scope", 37), ("ID", 0)]
    rows = []
    for card in items:
        repo = card.get("github_repo") or {}
        rows.append(
            (
                card.get("position"),
                card.get("name"),
                repo.get("repository_full_name"),
                card.get("scope_id"),
                card.get("id", ""),
            )
        )
    return _table(cols, rows, _page_footer("cards", items, meta))


def format_card_detail(card):
    lines = [f"Card: {card.get('name', '')}"]
    lines.append(f"  ID:        {card.get('id', '')}")
    lines.append(f"  Workspace: {card.get('workspace_id', '')}")
    lines.append(f"  Scope:     {card.get('scope_id') or ''}")
    lines.append(f"  Position:  {card.get('position', '')}")
    repo = card.get("github_repo")
    if repo:
        lines.append(
            f"  GitHub:    {repo.get('repository_full_name', '')} ({repo.get('sync_state', '')})"
        )
    lines.append(f"  Updated:   {card.get('updated_at', '')}")
    content = card.get("content")
    if content:
        lines.append("")
        lines.append(content)
    return "\n".join(lines)


def format_bulk_results_table(results):
    if not results:
        return "No operations."
    cols = [("#", 4), ("Action", 8), ("OK", 4), ("Card", 37), ("Detail", 0)]
    rows = []
    for i, item in enumerate(results, 1):
        data = item.get("data") or {}
        detail = item.get("error") or data.get("name", "")
        rows.append(
            (
                i,
                item.get("action", ""),
                "yes" if item.get("success") else "NO",
                data.get("id", ""),
                _trunc(detail, 60),
            )
        )
    failed = sum(1 for item in results if not item.get("success"))
    return _table(cols, rows, f"Total: {len(results)} operations, {failed} failed")


def format_organize_result(result):
    lines = [result.get("message") or "Workspace organized"]
    lines.append(f"  Scopes updated: {result.get('scopes_updated', 0)}")
    lines.append(f"  Cards updated:  {result.get('cards_updated', 0)}")
    return "\n".join(lines)


def format_namespaces_table(namespaces):
    if not namespaces:
        return "No GitHub namespaces found."
    cols = [("Login", 24), ("Type", 13), ("Repos", 6), ("Installation", 14), ("ID", 0)]
    rows = [
        (
            ns.get("github_account_login"),
            ns.get("github_account_type", ""),
            ns.get("repos_count", 0),
            ns.get("installation_id"),
            ns.get("id", ""),
        )
        for ns in namespaces
    ]
    return _table(cols, rows, f"Total: {len(namespaces)} namespaces")


def format_repos_table(result):
    items, meta = _rows_and_meta(result)
    if not items:
        return "No GitHub repositories found."
    cols = [("Repository", 36), ("Branch", 12), ("Sync", 12), ("Last synced", 21), ("ID", 0)]
    rows = [
        (
            repo.get("repository_full_name"),
            repo.get("default_branch"),
            repo.get("sync_state", ""),
            repo.get("last_synced_at") or "-",
            repo.get("id", ""),
        )
        for repo in items
    ]
    return _table(cols, rows, _page_footer("repositories", items, meta))


def format_sync_result(result):
    return (
        f"{result.get('message') or 'Sync requested'}\n"
        f"  Installation: {result.get('installation_id', '')}\n"
        f"  Namespace:    {result.get('namespace_id', '')}"
    )


def format_tokens_table(tokens):
    if not tokens:
        return "No tokens found."
    cols = [("Name", 24), ("Last used", 21), ("Expires", 21), ("Revoked", 21), ("ID", 0)]
    rows = [
        (
            t.get("name"),
            t.get("last_used_at") or "-",
            t.get("expires_at") or "never",
            t.get("revoked_at") or "-",
            t.get("id", ""),
        )
        for t in tokens
    ]
    return _table(cols, rows, f"Total: {len(tokens)} tokens")


def format_token_created(token):
    """Render a freshly created token, secret included (shown only this once)."""
    lines = [f"Token: {token.get('name', '')}"]
    lines.append(f"  ID:      {token.get('id', '')}")
    lines.append(f"  Expires: {token.get('expires_at') or 'never'}")
    lines.append(f"  Secret:  {token.get('token', '')}")
    return "\n".join(lines)
