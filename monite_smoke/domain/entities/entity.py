"""Domain entity — a business organisation managed by the Monite API."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

# Fields submitted by the caller; everything else is assigned by the server.
SUBMITTED_FIELDS = ("name", "status", "metadata", "settings")


class EntityStatus(str, Enum):
    """Lifecycle states reported by the entity API."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    DELETED = "deleted"


@dataclass(frozen=True)
class Entity:
    """A server-side entity record.

    The id is assigned by the entity service and never changes; updates
    produce a new Entity instance rather than mutating this one.
    """

    id: str
    name: str
    status: str
    metadata: dict[str, Any] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Entity":
        """Build an Entity from an API JSON payload."""
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name", "") or "",
            status=data.get("status", "") or "",
            metadata=dict(data.get("metadata") or {}),
            settings=dict(data.get("settings") or {}),
            created_at=_parse_timestamp(data.get("created_at")),
            updated_at=_parse_timestamp(data.get("updated_at")),
            raw=data,
        )

    def submitted_fields(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "metadata": self.metadata,
            "settings": self.settings,
        }

    def mismatches(self, payload: dict[str, Any]) -> list[str]:
        """Names of submitted fields whose values differ from this record.

        Only keys present in ``payload`` are compared. Mapping fields must
        contain every submitted key with an equal value; extra server-side
        keys are allowed.
        """
        current = self.submitted_fields()
        diffs = []
        for key in SUBMITTED_FIELDS:
            if key not in payload:
                continue
            expected = payload[key]
            actual = current[key]
            if isinstance(expected, dict):
                if any(actual.get(k) != v for k, v in expected.items()):
                    diffs.append(key)
            elif actual != expected:
                diffs.append(key)
        return diffs

    def matches(self, payload: dict[str, Any]) -> bool:
        return not self.mismatches(payload)


def _parse_timestamp(value: Any) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
