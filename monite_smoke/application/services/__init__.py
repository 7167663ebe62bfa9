from .identity_service import IdentityService
from .smoke_test_service import SmokeTestService

__all__ = [
    "IdentityService",
    "SmokeTestService",
]
