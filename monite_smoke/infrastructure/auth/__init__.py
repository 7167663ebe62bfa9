"""Auth backend infrastructure package."""

from .supabase_auth_provider import SupabaseAuthProvider

__all__ = ["SupabaseAuthProvider"]
