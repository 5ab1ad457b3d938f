"""
Typed models for request payloads (bulk card operations, workspace organize).
"""

from dataclasses import dataclass, field

from parascope_cli import config
from parascope_cli.exceptions import CliError

_CARD_FIELDS = ("name", "content", "scope_id", "github_repo_id", "position")
_UPDATE_FIELDS = ("name", "content", "scope_id", "position")


def _drop_none(values):
    return {k: v for k, v in values.items() if v is not None}


@dataclass(frozen=True)
class ObjectPayload:
    """Typed wrapper for raw JSON object payloads."""

    data: dict

    @classmethod
    def from_value(cls, value, context):
        if isinstance(value, dict):
            return cls(data=value)
        raise CliError(
            f"[ERROR] Invalid JSON in {context}: expected object, got {type(value).__name__}."
        )


@dataclass(frozen=True)
class BulkCardOperation:
    """One entry of a ``POST /cards/bulk`` request.

    ``create`` sends flat card fields, ``update`` sends ``id`` plus an
    ``attributes`` object, ``delete`` sends only ``id``.
    """

    action: str
    id: str | None = None
    name: str | None = None
    content: str | None = None
    scope_id: str | None = None
    github_repo_id: str | None = None
    position: int | None = None
    attributes: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.action not in config.VALID_BULK_ACTIONS:
            raise CliError(
                f"[ERROR] Invalid bulk action '{self.action}'. "
                f"Valid: {', '.join(sorted(config.VALID_BULK_ACTIONS))}"
            )
        if self.action in ("update", "delete") and not self.id:
            raise CliError(f"[ERROR] Bulk '{self.action}' operation requires an 'id'.")

    @classmethod
    def create(cls, name, *, content=None, scope_id=None, github_repo_id=None, position=None):
        return cls(
            action="create",
            name=name,
            content=content,
            scope_id=scope_id,
            github_repo_id=github_repo_id,
            position=position,
        )

    @classmethod
    def update(cls, card_id, **attributes):
        unknown = set(attributes) - set(_UPDATE_FIELDS)
        if unknown:
            raise CliError(f"[ERROR] Unknown card attributes: {', '.join(sorted(unknown))}")
        return cls(action="update", id=card_id, attributes=_drop_none(attributes))

    @classmethod
    def delete(cls, card_id):
        return cls(action="delete", id=card_id)

    @classmethod
    def from_value(cls, value):
        """Build from a JSON object such as ``{"action": "delete", "id": "..."}``."""
        if isinstance(value, cls):
            return value
        data = ObjectPayload.from_value(value, "bulk operation").data
        action = data.get("action")
        if action == "update":
            attributes = data.get("attributes")
            if attributes is None:
                attributes = {k: data[k] for k in _UPDATE_FIELDS if k in data}
            attributes = ObjectPayload.from_value(attributes, "bulk operation attributes").data
            return cls(action="update", id=data.get("id"), attributes=dict(attributes))
        if action == "delete":
            return cls(action="delete", id=data.get("id"))
        if action == "create":
            return cls(action="create", **{k: data.get(k) for k in _CARD_FIELDS})
        return cls(action=str(action))

    def to_payload(self):
        if self.action == "delete":
            return {"action": "delete", "id": self.id}
        if self.action == "update":
            return {"action": "update", "id": self.id, "attributes": dict(self.attributes)}
        payload = {"action": "create"}
        payload.update(_drop_none({k: getattr(self, k) for k in _CARD_FIELDS}))
        return payload


@dataclass(frozen=True)
class ScopePosition:
    id: str
    position: int

    def to_payload(self):
        return {"id": self.id, "position": self.position}


@dataclass(frozen=True)
class CardPosition:
    """Card reposition; a ``scope_id`` also moves the card to that scope."""

    id: str
    position: int
    scope_id: str | None = None

    def to_payload(self):
        payload = {"id": self.id, "position": self.position}
        if self.scope_id is not None:
            payload["scope_id"] = self.scope_id
        return payload


def _position_from_value(cls, value, context):
    if isinstance(value, cls):
        return value
    data = ObjectPayload.from_value(value, context).data
    if "id" not in data or "position" not in data:
        raise CliError(f"[ERROR] Each {context} entry needs 'id' and 'position'.")
    kwargs = {"id": data["id"], "position": data["position"]}
    if cls is CardPosition and data.get("scope_id") is not None:
        kwargs["scope_id"] = data["scope_id"]
    return cls(**kwargs)


@dataclass(frozen=True)
class OrganizeRequest:
    """Validated body for ``PATCH /workspaces/:id/organize``.

    ``None`` means the array is omitted from the request; an empty list is sent.
    """

    scopes: tuple | None = None
    cards: tuple | None = None

    @classmethod
    def from_values(cls, scopes=None, cards=None):
        return cls(
            scopes=None
            if scopes is None
            else tuple(_position_from_value(ScopePosition, s, "scope") for s in scopes),
            cards=None
            if cards is None
            else tuple(_position_from_value(CardPosition, c, "card") for c in cards),
        )

    @classmethod
    def from_value(cls, value):
        data = ObjectPayload.from_value(value, "organize").data
        for key in ("scopes", "cards"):
            if data.get(key) is not None and not isinstance(data[key], list):
                raise CliError(f"[ERROR] Invalid JSON in organize: '{key}' must be an array.")
        return cls.from_values(scopes=data.get("scopes"), cards=data.get("cards"))

    def to_payload(self):
        payload = {}
        if self.scopes is not None:
            payload["scopes"] = [s.to_payload() for s in self.scopes]
        if self.cards is not None:
            payload["cards"] = [c.to_payload() for c in self.cards]
        return payload
