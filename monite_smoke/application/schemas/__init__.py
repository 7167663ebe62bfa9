from .entity import (
    EntityCreate,
    EntitySettings,
    EntityUpdate,
    build_test_entity,
    build_test_patch,
)

__all__ = [
    "EntityCreate",
    "EntitySettings",
    "EntityUpdate",
    "build_test_entity",
    "build_test_patch",
]
