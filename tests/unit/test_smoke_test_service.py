"""Unit tests for the SmokeTestService lifecycle sequence."""

import pytest

from monite_smoke.application.interfaces import AuthProvider, EntityService
from monite_smoke.application.schemas.entity import EntityCreate, EntityUpdate
from monite_smoke.application.services import IdentityService, SmokeTestService
from monite_smoke.domain.entities import Entity, Identity, StepName
from monite_smoke.domain.exceptions import (
    AuthProviderError,
    DeletionVerificationError,
    EntityServiceError,
    IdentityResolutionError,
    PostConditionError,
)


# ── Fakes ──


class FakeAuthProvider(AuthProvider):
    def __init__(self, *, fail: bool = False):
        self._fail = fail

    @property
    def provider_name(self) -> str:
        return "fake"

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        if self._fail:
            raise AuthProviderError("sign_in", "Invalid login credentials")
        return Identity(user_id="user-1", email=email)

    async def create_user(
        self, email: str, password: str, *, email_confirm: bool = True
    ) -> Identity:
        raise AuthProviderError("create_user", "Signups disabled")


class FakeEntityService(EntityService):
    """In-memory entity store with switches for misbehaviour."""

    def __init__(
        self,
        *,
        fail_on: str | None = None,
        ignore_delete: bool = False,
        drop_metadata_on_update: bool = False,
        hide_from_list: bool = False,
        absent_after_create: bool = False,
        tamper_on_get: bool = False,
        blank_id_on_create: bool = False,
    ):
        self.records: dict[str, dict] = {}
        self.calls: list[str] = []
        self._next_id = 1
        self._fail_on = fail_on
        self._ignore_delete = ignore_delete
        self._drop_metadata_on_update = drop_metadata_on_update
        self._hide_from_list = hide_from_list
        self._absent_after_create = absent_after_create
        self._tamper_on_get = tamper_on_get
        self._blank_id_on_create = blank_id_on_create

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if self._fail_on == operation:
            raise EntityServiceError(500, f"{operation} exploded")

    async def create_entity(self, record: EntityCreate) -> Entity:
        self._maybe_fail("create")
        entity_id = f"ent-{self._next_id}"
        self._next_id += 1
        self.records[entity_id] = {"id": entity_id, **record.to_payload()}
        if self._blank_id_on_create:
            return Entity.from_api({**self.records[entity_id], "id": ""})
        return Entity.from_api(self.records[entity_id])

    async def get_entity(self, entity_id: str) -> Entity | None:
        self._maybe_fail("get")
        if self._absent_after_create:
            return None
        data = self.records.get(entity_id)
        if data and self._tamper_on_get:
            data = {**data, "settings": {"currency": "EUR", "timezone": "Europe/Paris"}}
        return Entity.from_api(data) if data else None

    async def list_entities(self) -> list[Entity]:
        self._maybe_fail("list")
        if self._hide_from_list:
            return [Entity.from_api({"id": "someone-else", "name": "Other"})]
        return [Entity.from_api(data) for data in self.records.values()]

    async def update_entity(self, entity_id: str, patch: EntityUpdate) -> Entity:
        self._maybe_fail("update")
        changes = patch.to_payload()
        if self._drop_metadata_on_update:
            changes["metadata"] = {"updated": True}
        self.records[entity_id] = {**self.records[entity_id], **changes}
        return Entity.from_api(self.records[entity_id])

    async def delete_entity(self, entity_id: str) -> None:
        self._maybe_fail("delete")
        if not self._ignore_delete:
            self.records.pop(entity_id, None)


def _service(
    entity_service: EntityService,
    auth: AuthProvider | None = None,
    *,
    cleanup_on_failure: bool = False,
) -> SmokeTestService:
    return SmokeTestService(
        entity_service,
        IdentityService(auth or FakeAuthProvider()),
        email="test@example.com",
        password="Test123!",
        cleanup_on_failure=cleanup_on_failure,
    )


# ── Tests ──


@pytest.mark.asyncio
async def test_full_lifecycle_succeeds():
    entities = FakeEntityService()

    result = await _service(entities).run()

    assert result.ok
    assert result.exit_code == 0
    assert result.user_id == "user-1"
    assert result.entity_id == "ent-1"
    assert [s.step for s in result.steps] == [
        StepName.RESOLVE_IDENTITY,
        StepName.CREATE,
        StepName.RETRIEVE,
        StepName.LIST,
        StepName.UPDATE,
        StepName.DELETE,
        StepName.VERIFY_DELETION,
    ]
    assert all(s.ok for s in result.steps)
    assert entities.records == {}


@pytest.mark.asyncio
async def test_calls_run_in_order():
    entities = FakeEntityService()

    await _service(entities).run()

    assert entities.calls == ["create", "get", "list", "update", "get", "delete", "get"]


@pytest.mark.asyncio
async def test_created_entity_carries_identity_and_tax_id():
    entities = FakeEntityService(ignore_delete=True)

    await _service(entities).run()

    record = entities.records["ent-1"]
    assert record["name"] == "Updated Test Organization"
    assert record["metadata"] == {"user_id": "user-1", "tax_id": "123456789", "updated": True}
    assert record["settings"] == {"currency": "USD", "timezone": "America/Los_Angeles"}


@pytest.mark.asyncio
async def test_identity_failure_stops_before_any_entity_call():
    entities = FakeEntityService()

    result = await _service(entities, FakeAuthProvider(fail=True)).run()

    assert not result.ok
    assert result.exit_code == 1
    assert isinstance(result.error, IdentityResolutionError)
    assert result.failed_step is StepName.RESOLVE_IDENTITY
    assert entities.calls == []


@pytest.mark.asyncio
async def test_collaborator_error_fails_the_run():
    entities = FakeEntityService(fail_on="list")

    result = await _service(entities).run()

    assert not result.ok
    assert isinstance(result.error, EntityServiceError)
    assert result.failed_step is StepName.LIST
    assert "update" not in entities.calls


@pytest.mark.asyncio
async def test_entity_left_behind_without_cleanup():
    """By default a failed run leaves the created entity in place."""
    entities = FakeEntityService(fail_on="update")

    result = await _service(entities).run()

    assert result.failed_step is StepName.UPDATE
    assert "ent-1" in entities.records
    assert "delete" not in entities.calls


@pytest.mark.asyncio
async def test_cleanup_on_failure_deletes_created_entity():
    entities = FakeEntityService(fail_on="update")

    result = await _service(entities, cleanup_on_failure=True).run()

    assert not result.ok
    assert isinstance(result.error, EntityServiceError)
    assert entities.records == {}
    assert result.steps[-1].step is StepName.CLEANUP
    assert result.steps[-1].ok
    assert result.failed_step is StepName.UPDATE


@pytest.mark.asyncio
async def test_cleanup_failure_keeps_original_error():
    entities = FakeEntityService(fail_on="delete", drop_metadata_on_update=True)

    result = await _service(entities, cleanup_on_failure=True).run()

    assert isinstance(result.error, PostConditionError)
    assert result.error.step == "update"
    assert result.steps[-1].step is StepName.CLEANUP
    assert not result.steps[-1].ok


@pytest.mark.asyncio
async def test_entity_still_present_after_delete_fails_verification():
    entities = FakeEntityService(ignore_delete=True)

    result = await _service(entities).run()

    assert isinstance(result.error, DeletionVerificationError)
    assert result.error.entity_id == "ent-1"
    assert result.failed_step is StepName.VERIFY_DELETION


@pytest.mark.asyncio
async def test_update_must_preserve_original_metadata():
    entities = FakeEntityService(drop_metadata_on_update=True)

    result = await _service(entities).run()

    assert isinstance(result.error, PostConditionError)
    assert "metadata" in str(result.error)
    assert result.failed_step is StepName.UPDATE


@pytest.mark.asyncio
async def test_created_entity_missing_from_list_fails():
    entities = FakeEntityService(hide_from_list=True)

    result = await _service(entities).run()

    assert isinstance(result.error, PostConditionError)
    assert result.failed_step is StepName.LIST


@pytest.mark.asyncio
async def test_created_entity_without_id_fails_create():
    entities = FakeEntityService(blank_id_on_create=True)

    result = await _service(entities).run()

    assert isinstance(result.error, PostConditionError)
    assert result.error.step == "create"
    assert result.failed_step is StepName.CREATE
    assert result.entity_id is None
    assert entities.calls == ["create"]


@pytest.mark.asyncio
async def test_entity_absent_right_after_create_fails_retrieve():
    entities = FakeEntityService(absent_after_create=True)

    result = await _service(entities).run()

    assert isinstance(result.error, PostConditionError)
    assert "not found after create" in str(result.error)
    assert result.failed_step is StepName.RETRIEVE
    assert "list" not in entities.calls


@pytest.mark.asyncio
async def test_retrieved_fields_must_match_submitted_record():
    """Retrieve must return the same name, status, metadata and settings."""
    entities = FakeEntityService(tamper_on_get=True)

    result = await _service(entities).run()

    assert isinstance(result.error, PostConditionError)
    assert result.error.step == "retrieve"
    assert "settings" in str(result.error)
    assert result.failed_step is StepName.RETRIEVE
