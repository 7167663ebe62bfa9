"""Domain entities for the authenticated test identity."""

from dataclasses import dataclass
from enum import Enum


class IdentityOutcome(str, Enum):
    """How the test identity was obtained."""

    SIGNED_IN = "signed_in"
    CREATED = "created"
    FAILED = "failed"


@dataclass(frozen=True)
class Identity:
    """An authenticated user as seen by the auth backend."""

    user_id: str
    email: str


@dataclass(frozen=True)
class IdentityResolution:
    """Result of the sign-in-or-create decision."""

    outcome: IdentityOutcome
    identity: Identity | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not IdentityOutcome.FAILED

    @classmethod
    def signed_in(cls, identity: Identity) -> "IdentityResolution":
        return cls(IdentityOutcome.SIGNED_IN, identity=identity)

    @classmethod
    def created(cls, identity: Identity) -> "IdentityResolution":
        return cls(IdentityOutcome.CREATED, identity=identity)

    @classmethod
    def failed(cls, error: Exception) -> "IdentityResolution":
        return cls(IdentityOutcome.FAILED, error=error)
