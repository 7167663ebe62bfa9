"""Abstract auth provider interface — port for authentication backends."""

from abc import ABC, abstractmethod

from monite_smoke.domain.entities import Identity


class AuthProvider(ABC):
    """Port for the auth backend used by the smoke test."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this provider (e.g. 'supabase')."""
        ...

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        """Sign in an existing user.

        Raises:
            AuthProviderError: If the credentials are rejected or the backend
                raises anything else.
        """
        ...

    @abstractmethod
    async def create_user(
        self, email: str, password: str, *, email_confirm: bool = True
    ) -> Identity:
        """Create a user through the privileged admin API.

        Args:
            email: Account email.
            password: Account password.
            email_confirm: Mark the email as already confirmed.

        Raises:
            AuthProviderError: If the user could not be created.
        """
        ...
