from .auth_provider import AuthProvider
from .entity_service import EntityService

__all__ = [
    "AuthProvider",
    "EntityService",
]
