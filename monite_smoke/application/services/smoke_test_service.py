"""Entity lifecycle smoke test — the orchestration sequence.

Runs, strictly in order and each awaited before the next:

  1. Resolve identity   (sign in, else create)
  2. Create entity      → must return a non-empty id and the submitted fields
  3. Retrieve entity    → must match what was created
  4. List entities      → must contain the created id
  5. Update entity      → must reflect the patch merged over the original
  6. Delete entity
  7. Verify deletion    → a re-fetch must return nothing

Nothing is retried. The first failure stops the run and is reported in
the returned SmokeTestResult.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from monite_smoke.application.interfaces import EntityService
from monite_smoke.application.schemas.entity import (
    DEFAULT_TAX_ID,
    build_test_entity,
    build_test_patch,
)
from monite_smoke.application.services.identity_service import IdentityService
from monite_smoke.domain.entities import Entity, SmokeTestResult, StepName
from monite_smoke.domain.exceptions import (
    DeletionVerificationError,
    IdentityResolutionError,
    PostConditionError,
)
from monite_smoke.infrastructure.logging.colored_logger import SmokeStage, StepLogger

logger = logging.getLogger(__name__)
slog = StepLogger("SmokeTestService")


class SmokeTestService:
    """Drives one create/read/list/update/delete cycle against an EntityService.

    With ``cleanup_on_failure`` the created entity is deleted best-effort
    when a later step fails; by default it is left in place.
    """

    def __init__(
        self,
        entity_service: EntityService,
        identity_service: IdentityService,
        *,
        email: str,
        password: str,
        tax_id: str = DEFAULT_TAX_ID,
        cleanup_on_failure: bool = False,
    ):
        self._entity_service = entity_service
        self._identity_service = identity_service
        self._email = email
        self._password = password
        self._tax_id = tax_id
        self._cleanup_on_failure = cleanup_on_failure

    async def run(self) -> SmokeTestResult:
        result = SmokeTestResult()
        slog.separator("Monite entity smoke test")

        resolution = await self._identity_service.resolve(self._email, self._password)
        if not resolution.ok:
            error = IdentityResolutionError(self._email, resolution.error)
            result.record(StepName.RESOLVE_IDENTITY, False, str(error))
            result.error = error
            slog.step_error(SmokeStage.ERROR, "Could not resolve test identity", error=error)
            return result

        result.user_id = resolution.identity.user_id
        result.record(StepName.RESOLVE_IDENTITY, True, resolution.outcome.value)

        try:
            await self._run_lifecycle(result)
        except Exception as exc:
            result.error = exc
            slog.step_error(SmokeStage.ERROR, "Test failed", error=exc, exc_info=True)
            if self._cleanup_on_failure and self._needs_cleanup(result):
                await self._cleanup(result)
            return result

        slog.separator()
        slog.step_complete(SmokeStage.COMPLETE, "Test completed successfully!")
        return result

    async def _run_lifecycle(self, result: SmokeTestResult) -> None:
        es = self._entity_service

        record = build_test_entity(result.user_id, self._tax_id)
        payload = record.to_payload()

        async with self._step(result, StepName.CREATE, SmokeStage.CREATE, "Creating entity"):
            slog.payload("Entity data", payload)
            created = await es.create_entity(record)
            if not created.id:
                raise PostConditionError(StepName.CREATE.value, "Created entity has no id")
            result.entity_id = created.id
            slog.detail("Entity created", id=created.id)
            slog.payload("Created entity", _dump(created))
            _require_match(StepName.CREATE, created, payload)

        entity_id = created.id

        async with self._step(result, StepName.RETRIEVE, SmokeStage.RETRIEVE, "Retrieving entity"):
            retrieved = await es.get_entity(entity_id)
            if retrieved is None:
                raise PostConditionError(
                    StepName.RETRIEVE.value, f"Entity '{entity_id}' not found after create"
                )
            slog.payload("Retrieved entity", _dump(retrieved))
            _require_same_id(StepName.RETRIEVE, retrieved, entity_id)
            _require_match(StepName.RETRIEVE, retrieved, payload)

        async with self._step(result, StepName.LIST, SmokeStage.LIST, "Listing all entities"):
            entities = await es.list_entities()
            slog.detail(f"Number of entities: {len(entities)}")
            if not any(entity.id == entity_id for entity in entities):
                raise PostConditionError(
                    StepName.LIST.value,
                    f"Entity '{entity_id}' missing from list of {len(entities)}",
                )

        async with self._step(result, StepName.UPDATE, SmokeStage.UPDATE, "Updating entity"):
            patch = build_test_patch(record)
            patch_payload = patch.to_payload()
            slog.payload("Update data", patch_payload)
            updated = await es.update_entity(entity_id, patch)
            slog.payload("Updated entity", _dump(updated))
            _require_same_id(StepName.UPDATE, updated, entity_id)
            _require_match(StepName.UPDATE, updated, patch_payload)

            refetched = await es.get_entity(entity_id)
            if refetched is None:
                raise PostConditionError(
                    StepName.UPDATE.value, f"Entity '{entity_id}' not found after update"
                )
            _require_match(StepName.UPDATE, refetched, {**payload, **patch_payload})

        async with self._step(result, StepName.DELETE, SmokeStage.DELETE, "Deleting entity"):
            await es.delete_entity(entity_id)

        async with self._step(
            result, StepName.VERIFY_DELETION, SmokeStage.VERIFY, "Verifying deletion"
        ):
            remaining = await es.get_entity(entity_id)
            if remaining is not None:
                raise DeletionVerificationError(entity_id)
            slog.detail("Entity was successfully deleted")

    @asynccontextmanager
    async def _step(
        self,
        result: SmokeTestResult,
        step: StepName,
        stage: tuple[str, str, str],
        message: str,
    ):
        """Run one step under a timer and record its outcome on the result."""
        timer = [0.0]
        try:
            async with slog.timed_step(stage, message) as timer:
                yield
        except Exception as exc:
            result.record(step, False, f"{type(exc).__name__}: {exc}", timer[0])
            raise
        result.record(step, True, elapsed=timer[0])

    @staticmethod
    def _needs_cleanup(result: SmokeTestResult) -> bool:
        if not result.entity_id:
            return False
        return not any(s.step is StepName.DELETE and s.ok for s in result.steps)

    async def _cleanup(self, result: SmokeTestResult) -> None:
        """Delete the entity left behind by a failed run. Never raises."""
        entity_id = result.entity_id
        slog.step_start(SmokeStage.CLEANUP, "Deleting orphaned entity", id=entity_id)
        try:
            await self._entity_service.delete_entity(entity_id)
        except Exception as exc:
            slog.step_error(SmokeStage.CLEANUP, "Cleanup failed", error=exc)
            result.record(StepName.CLEANUP, False, f"{type(exc).__name__}: {exc}")
            return
        slog.step_complete(SmokeStage.CLEANUP, "Orphaned entity deleted", id=entity_id)
        result.record(StepName.CLEANUP, True, entity_id)


def _dump(entity: Entity) -> dict[str, Any]:
    return entity.raw or {"id": entity.id, **entity.submitted_fields()}


def _require_same_id(step: StepName, entity: Entity, entity_id: str) -> None:
    if entity.id != entity_id:
        raise PostConditionError(
            step.value, f"Expected entity '{entity_id}', got '{entity.id}'"
        )


def _require_match(step: StepName, entity: Entity, expected: dict[str, Any]) -> None:
    mismatches = entity.mismatches(expected)
    if mismatches:
        raise PostConditionError(
            step.value, f"Fields differ from submitted values: {', '.join(mismatches)}"
        )
