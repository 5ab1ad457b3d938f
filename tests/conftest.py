"""
Shared test fixtures for parascope-cli tests.
Patches config to avoid reading the real .env, and provides an in-memory
fake of the Parascope API that is served through the real HTTP layer.
"""

import io
import itertools
import json
import os
import sys
import urllib.error
import urllib.parse
from unittest.mock import patch

import pytest

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

BASE_URL = "https://api.test/api/v1"
TOKEN = "pat_test_1234567890"


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    """Ensure every test starts with a clean config state.
    Prevents tests from reading the real .env or the caller's token."""
    from parascope_cli import config

    monkeypatch.setattr(config, "env", {})
    monkeypatch.setattr(config, "BASE_URL", config.DEFAULT_BASE_URL)
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
    monkeypatch.setattr(config, "RUNTIME_VERBOSE", False)
    monkeypatch.setattr(config, "HTTP_TIMEOUT_SECONDS", 30)
    monkeypatch.setattr(config, "HTTP_MAX_RESPONSE_BYTES", 5_000_000)
    monkeypatch.delenv("PARASCOPE_TOKEN", raising=False)
    monkeypatch.delenv("PARASCOPE_URL", raising=False)


# ---------------------------------------------------------------------------
# Fake Parascope API
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, status, payload, content_type="application/json"):
        self.status = status
        self.headers = {"Content-Type": content_type}
        if payload is None:
            self._raw = b""
        elif isinstance(payload, bytes):
            self._raw = payload
        else:
            self._raw = json.dumps(payload).encode("utf-8")

    def read(self, n=-1):
        return self._raw if n is None or n < 0 else self._raw[:n]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeParascopeApi:
    """Minimal stateful stand-in for the Parascope REST API.

    Call it like ``urlopen(request, timeout=...)``. Every request is recorded
    in ``self.requests`` as dicts with method, path, query, body, headers.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self.workspaces = {}
        self.scopes = {}
        self.cards = {}
        self.tokens = {}
        self.namespaces = {
            "ns-1": {
                "id": "ns-1",
                "installation_id": "inst-1",
                "name": "acme",
                "github_account_type": "Organization",
                "github_account_login": "acme",
                "repos_count": 1,
                "created_at": "2026-01-01T00:00:00Z",
            }
        }
        self.repos = {
            "repo-1": {
                "id": "repo-1",
                "github_namespace_id": "ns-1",
                "repository_id": 42,
                "repository_name": "infra",
                "repository_full_name": "acme/infra",
                "default_branch": "main",
                "sync_state": "good_config",
                "last_synced_at": None,
                "created_at": "2026-01-01T00:00:00Z",
            }
        }
        self.requests = []

    # -- helpers ----------------------------------------------------------

    def _next_id(self, prefix):
        return f"{prefix}-{next(self._ids)}"

    @staticmethod
    def _page(items, query, default_limit=50):
        limit = int(query.get("limit", default_limit))
        offset = int(query.get("offset", 0))
        page = items[offset : offset + limit]
        has_more = offset + limit < len(items)
        return {
            "data": page,
            "meta": {
                "limit": limit,
                "offset": offset,
                "has_more": has_more,
                "next_offset": offset + limit if has_more else None,
            },
        }

    @staticmethod
    def _error(status, message, details=None):
        body = {"error": message, "code": status}
        if details is not None:
            body["details"] = details
        return status, body

    def _create_card(self, workspace_id, attrs):
        if not attrs.get("name"):
            return None, "Name can't be blank"
        scope_id = attrs.get("scope_id") or next(
            (s["id"] for s in self.scopes.values() if s["workspace_id"] == workspace_id), None
        )
        card = {
            "id": self._next_id("card"),
            "workspace_id": workspace_id,
            "scope_id": scope_id,
            "github_repo_id": attrs.get("github_repo_id"),
            "name": attrs["name"],
            "content": attrs.get("content", ""),
            "position": attrs.get("position", len(self.cards)),
            "github_repo": None,
            "created_at": "2026-01-01T00:00:00Z",
            "updated_at": "2026-01-01T00:00:00Z",
        }
        self.cards[card["id"]] = card
        return card, None

    # -- dispatch ---------------------------------------------------------

    def __call__(self, req, timeout=None):
        parts = urllib.parse.urlsplit(req.full_url)
        path = parts.path[len(urllib.parse.urlsplit(BASE_URL).path) :]
        query = dict(urllib.parse.parse_qsl(parts.query))
        body = json.loads(req.data.decode("utf-8")) if req.data else None
        method = req.get_method()
        self.requests.append(
            {
                "method": method,
                "path": path,
                "query": query,
                "body": body,
                "headers": {k.lower(): v for k, v in req.header_items()},
            }
        )
        status, payload = self.route(method, path, query, body)
        if status >= 400:
            raise urllib.error.HTTPError(
                req.full_url,
                status,
                "Error",
                {"Content-Type": "application/json"},
                io.BytesIO(json.dumps(payload).encode("utf-8")),
            )
        return FakeResponse(status, payload)

    def route(self, method, path, query, body):
        segs = [s for s in path.split("/") if s]
        head = segs[0] if segs else ""

        if head == "sessions":
            if method == "POST":
                return 201, {
                    "data": {
                        "token": "session-token",
                        "user": {"id": "u-1", "email": body["email"], "username": "alice"},
                    }
                }
            return 204, None

        if head == "tokens":
            if method == "GET" and len(segs) == 1:
                return 200, {"data": list(self.tokens.values())}
            if method == "POST":
                tok = {
                    "id": self._next_id("tok"),
                    "name": body["name"],
                    "last_used_at": None,
                    "expires_at": body.get("expires_at"),
                    "revoked_at": None,
                    "created_at": "2026-01-01T00:00:00Z",
                }
                self.tokens[tok["id"]] = tok
                return 201, {"data": dict(tok, token="pat_secret_value")}
            if method == "DELETE" and len(segs) == 2:
                if segs[1] not in self.tokens:
                    return self._error(404, "Not found")
                self.tokens[segs[1]]["revoked_at"] = "2026-01-02T00:00:00Z"
                return 204, None

        if head == "workspaces":
            if len(segs) == 1 and method == "GET":
                items = list(self.workspaces.values())
                if query.get("q"):
                    items = [w for w in items if query["q"].lower() in w["name"].lower()]
                return 200, self._page(items, query)
            if len(segs) == 1 and method == "POST":
                attrs = body["workspace"]
                if not attrs.get("name"):
                    return self._error(422, "Validation failed", {"name": ["can't be blank"]})
                ws = {
                    "id": self._next_id("ws"),
                    "name": attrs["name"],
                    "is_default": not self.workspaces,
                    "sharing_type": attrs.get("sharing_type", "private"),
                    "owner_id": "u-1",
                    "created_at": "2026-01-01T00:00:00Z",
                    "updated_at": "2026-01-01T00:00:00Z",
                }
                self.workspaces[ws["id"]] = ws
                return 201, {"data": ws}
            ws = self.workspaces.get(segs[1]) if len(segs) > 1 else None
            if ws is None:
                return self._error(404, "Not found")
            if len(segs) == 2:
                if method == "GET":
                    return 200, {"data": ws}
                if method == "PATCH":
                    ws.update(body["workspace"])
                    return 200, {"data": ws}
                if method == "DELETE":
                    del self.workspaces[ws["id"]]
                    return 204, None
            if segs[2] == "scopes" and method == "GET":
                scopes = [s for s in self.scopes.values() if s["workspace_id"] == ws["id"]]
                return 200, {"data": sorted(scopes, key=lambda s: s["position"])}
            if segs[2] == "cards" and method == "GET":
                cards = [c for c in self.cards.values() if c["workspace_id"] == ws["id"]]
                if query.get("scope_id"):
                    cards = [c for c in cards if c["scope_id"] == query["scope_id"]]
                return 200, self._page(cards, query)
            if segs[2] == "organize" and method == "PATCH":
                scopes_updated = 0
                for entry in body.get("scopes", []):
                    if entry["id"] in self.scopes:
                        self.scopes[entry["id"]]["position"] = entry["position"]
                        scopes_updated += 1
                cards_updated = 0
                for entry in body.get("cards", []):
                    if entry["id"] in self.cards:
                        card = self.cards[entry["id"]]
                        card["position"] = entry["position"]
                        if entry.get("scope_id"):
                            card["scope_id"] = entry["scope_id"]
                        cards_updated += 1
                return 200, {
                    "data": {
                        "message": "Workspace organized successfully",
                        "scopes_updated": scopes_updated,
                        "cards_updated": cards_updated,
                    }
                }

        if head == "scopes":
            if len(segs) == 1 and method == "POST":
                if query.get("workspace_id") not in self.workspaces:
                    return self._error(404, "Not found")
                attrs = body["scope"]
                scope = {
                    "id": self._next_id("scope"),
                    "workspace_id": query["workspace_id"],
                    "name": attrs["name"],
                    "description": attrs.get("description"),
                    "is_default": False,
                    "position": attrs.get("position", len(self.scopes)),
                    "cards_count": 0,
                    "created_at": "2026-01-01T00:00:00Z",
                    "updated_at": "2026-01-01T00:00:00Z",
                }
                self.scopes[scope["id"]] = scope
                return 201, {"data": scope}
            scope = self.scopes.get(segs[1]) if len(segs) > 1 else None
            if scope is None:
                return self._error(404, "Not found")
            if method == "GET":
                return 200, {"data": scope}
            if method == "PATCH":
                scope.update(body["scope"])
                return 200, {"data": scope}
            if method == "DELETE":
                del self.scopes[scope["id"]]
                return 204, None

        if head == "cards":
            if len(segs) == 2 and segs[1] == "bulk" and method == "POST":
                workspace_id = query.get("workspace_id")
                if workspace_id not in self.workspaces:
                    return self._error(404, "Not found")
                results = []
                for op in body["operations"]:
                    action = op["action"]
                    if action == "create":
                        card, err = self._create_card(workspace_id, op)
                    elif op.get("id") not in self.cards:
                        card, err = None, "Card not found"
                    elif action == "update":
                        card = self.cards[op["id"]]
                        card.update(op.get("attributes", {}))
                        err = None
                    else:
                        card, err = self.cards.pop(op["id"]), None
                    item = {"action": action, "success": err is None}
                    if card is not None:
                        item["data"] = dict(card)
                    if err is not None:
                        item["error"] = err
                    results.append(item)
                return 200, {"data": results}
            if len(segs) == 1 and method == "POST":
                workspace_id = query.get("workspace_id")
                if workspace_id not in self.workspaces:
                    return self._error(404, "Not found")
                card, err = self._create_card(workspace_id, body)
                if err:
                    return self._error(422, "Validation failed", {"name": [err]})
                return 201, {"data": card}
            card = self.cards.get(segs[1]) if len(segs) > 1 else None
            if card is None:
                return self._error(404, "Not found")
            if method == "GET":
                return 200, {"data": card}
            if method == "PATCH":
                card.update(body)
                return 200, {"data": card}
            if method == "DELETE":
                del self.cards[card["id"]]
                return 204, None

        if head == "github":
            if segs[1:] == ["namespaces"]:
                return 200, {"data": list(self.namespaces.values())}
            if segs[1:] == ["repos"]:
                repos = list(self.repos.values())
                if query.get("namespace_id"):
                    repos = [r for r in repos if r["github_namespace_id"] == query["namespace_id"]]
                return 200, self._page(repos, query)
            if segs[1:] == ["sync"] and method == "POST":
                ns = next(
                    (
                        n
                        for n in self.namespaces.values()
                        if n["installation_id"] == body["installation_id"]
                    ),
                    None,
                )
                if ns is None:
                    return self._error(404, "Installation not found")
                return 202, {
                    "data": {
                        "message": "Sync started",
                        "installation_id": ns["installation_id"],
                        "namespace_id": ns["id"],
                    }
                }

        return self._error(404, "Not found")


@pytest.fixture
def fake_api():
    """Patch urlopen with a FakeParascopeApi and return it."""
    api = FakeParascopeApi()
    with patch("parascope_cli.api.urllib.request.urlopen", side_effect=api):
        yield api


@pytest.fixture
def client(fake_api):
    from parascope_cli.client import ParascopeClient

    return ParascopeClient(token=TOKEN, base_url=BASE_URL)
