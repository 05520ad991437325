from memories_bed.core.api.base import BaseAPIClient, APIError
from memories_bed.core.api.supabase import SupabaseClient

__all__ = [
    "BaseAPIClient",
    "APIError",
    "SupabaseClient",
]
