"""Domain-specific exceptions — framework-independent."""


class SmokeTestError(Exception):
    """Base class for every failure the smoke test reports."""


class ConfigurationError(SmokeTestError):
    """Raised when required settings are missing."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required settings: {', '.join(missing)}")


class EntityServiceError(SmokeTestError):
    """Raised when the entity-management API returns an error.

    A status_code of 0 means the request never got a response.
    """

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"[monite] {status_code}: {message}")


class AuthProviderError(SmokeTestError):
    """Raised when the auth backend rejects or fails an operation."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"[auth:{operation}] {message}")


class IdentityResolutionError(SmokeTestError):
    """Raised when neither sign-in nor user creation produced an identity."""

    def __init__(self, email: str, cause: Exception | None = None):
        self.email = email
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Could not resolve identity for '{email}'{detail}")


class PostConditionError(SmokeTestError):
    """Raised when a step completes but returns unexpected data."""

    def __init__(self, step: str, message: str):
        self.step = step
        self.message = message
        super().__init__(f"{step}: {message}")


class DeletionVerificationError(PostConditionError):
    """Raised when a deleted entity can still be retrieved."""

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__("verify_deletion", f"Entity '{entity_id}' was not deleted")
