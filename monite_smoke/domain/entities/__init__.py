from .entity import Entity, EntityStatus, SUBMITTED_FIELDS
from .identity import Identity, IdentityOutcome, IdentityResolution
from .smoke_test import SmokeTestResult, StepName, StepResult

__all__ = [
    "Entity",
    "EntityStatus",
    "SUBMITTED_FIELDS",
    "Identity",
    "IdentityOutcome",
    "IdentityResolution",
    "SmokeTestResult",
    "StepName",
    "StepResult",
]
