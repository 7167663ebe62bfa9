"""Unit tests for the Entity domain object and request schemas."""

import pytest
from pydantic import ValidationError

from monite_smoke.application.schemas.entity import (
    EntityCreate,
    EntitySettings,
    EntityUpdate,
    build_test_entity,
    build_test_patch,
)
from monite_smoke.domain.entities import Entity, EntityStatus


def test_build_test_entity_uses_fixed_sample_values():
    record = build_test_entity("user-42")

    assert record.to_payload() == {
        "name": "Test Organization",
        "status": "active",
        "metadata": {"user_id": "user-42", "tax_id": "123456789"},
        "settings": {"currency": "USD", "timezone": "America/Los_Angeles"},
    }


def test_build_test_patch_merges_metadata():
    record = build_test_entity("user-42", tax_id="987")

    patch = build_test_patch(record)

    assert patch.to_payload() == {
        "name": "Updated Test Organization",
        "metadata": {"user_id": "user-42", "tax_id": "987", "updated": True},
    }
    # The original record is untouched
    assert "updated" not in record.metadata


def test_entity_update_excludes_unset_fields():
    assert EntityUpdate(status=EntityStatus.INACTIVE).to_payload() == {"status": "inactive"}
    assert EntityUpdate().to_payload() == {}


def test_entity_settings_rejects_bad_currency():
    with pytest.raises(ValidationError):
        EntitySettings(currency="DOLLARS", timezone="UTC")


def test_entity_create_requires_name():
    with pytest.raises(ValidationError):
        EntityCreate(name="", settings=EntitySettings(currency="USD", timezone="UTC"))


def test_from_api_parses_timestamps_and_keeps_raw():
    data = {
        "id": "ent-1",
        "name": "Acme",
        "status": "active",
        "metadata": None,
        "created_at": "2024-05-01T12:00:00Z",
        "extra": "server-side",
    }

    entity = Entity.from_api(data)

    assert entity.metadata == {}
    assert entity.settings == {}
    assert entity.created_at.year == 2024
    assert entity.created_at.tzinfo is not None
    assert entity.updated_at is None
    assert entity.raw["extra"] == "server-side"


def test_matches_ignores_server_assigned_fields():
    record = build_test_entity("user-1")
    entity = Entity.from_api(
        {
            "id": "ent-1",
            "created_at": "2024-05-01T12:00:00Z",
            **record.to_payload(),
        }
    )

    assert entity.matches(record.to_payload())


def test_mismatches_reports_changed_fields():
    entity = Entity.from_api(
        {
            "id": "ent-1",
            "name": "Other",
            "status": "active",
            "metadata": {"user_id": "user-1"},
            "settings": {"currency": "USD", "timezone": "America/Los_Angeles"},
        }
    )

    mismatches = entity.mismatches(build_test_entity("user-1").to_payload())

    assert mismatches == ["name", "metadata"]


def test_mismatches_allows_extra_server_metadata():
    entity = Entity.from_api(
        {"id": "ent-1", "name": "Acme", "metadata": {"tax_id": "1", "server_flag": True}}
    )

    assert entity.matches({"name": "Acme", "metadata": {"tax_id": "1"}})


def test_entity_id_is_immutable():
    entity = Entity.from_api({"id": "ent-1", "name": "Acme"})

    with pytest.raises(AttributeError):
        entity.id = "ent-2"
