"""Pydantic DTOs (Data Transfer Objects) for entity create/update requests."""

from typing import Any

from pydantic import BaseModel, Field

from monite_smoke.domain.entities import Entity, EntityStatus

TEST_ENTITY_NAME = "Test Organization"
UPDATED_ENTITY_NAME = "Updated Test Organization"
DEFAULT_TAX_ID = "123456789"


class EntitySettings(BaseModel):
    """Per-entity settings block."""

    currency: str = Field(..., min_length=3, max_length=3, examples=["USD"])
    timezone: str = Field(..., min_length=1, examples=["America/Los_Angeles"])


class EntityCreate(BaseModel):
    """Schema for creating a new entity."""

    name: str = Field(..., min_length=1, examples=["Test Organization"])
    status: EntityStatus = EntityStatus.ACTIVE
    metadata: dict[str, Any] = Field(default_factory=dict)
    settings: EntitySettings

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class EntityUpdate(BaseModel):
    """Schema for a partial entity update. Only fields that were set are sent."""

    name: str | None = Field(None, min_length=1)
    status: EntityStatus | None = None
    metadata: dict[str, Any] | None = None
    settings: EntitySettings | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


def build_test_entity(user_id: str, tax_id: str = DEFAULT_TAX_ID) -> EntityCreate:
    """The fixed sample record submitted by the smoke test."""
    return EntityCreate(
        name=TEST_ENTITY_NAME,
        status=EntityStatus.ACTIVE,
        metadata={"user_id": user_id, "tax_id": tax_id},
        settings=EntitySettings(currency="USD", timezone="America/Los_Angeles"),
    )


def build_test_patch(original: EntityCreate | Entity) -> EntityUpdate:
    """Rename the entity and add an ``updated`` flag, keeping existing metadata."""
    return EntityUpdate(
        name=UPDATED_ENTITY_NAME,
        metadata={**original.metadata, "updated": True},
    )
