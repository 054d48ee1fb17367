from fastapi import Depends
from supabase import Client

from .supabase_client import get_supabase, get_supabase_admin
from ..services.podcast_store import PodcastStore


async def get_supabase_client():
    """
    Dependency to get Supabase client.
    Use this in FastAPI route dependencies.
    """
    return get_supabase()


async def get_supabase_admin_client():
    """
    Dependency to get Supabase admin client.
    Use this in FastAPI route dependencies for writes and user lookups.
    """
    return get_supabase_admin()


async def get_podcast_store(
    supabase: Client = Depends(get_supabase_admin_client)
) -> PodcastStore:
    """Dependency providing the podcast/category/user table access layer."""
    return PodcastStore(supabase)
