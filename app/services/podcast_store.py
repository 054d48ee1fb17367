"""
Table access for podcasts, categories and users.

Podcasts reference their category and user through foreign keys; categories and
users keep ordered ``podcasts`` uuid[] back-references. Category expansion on
podcast rows uses PostgREST resource embedding. Back-references change only
through the push/pull_podcast_reference database functions, which append or
remove an id in a single UPDATE (see supabase/migrations).
"""

import logging
from functools import wraps
from typing import Any, Dict, List, Optional
from supabase import Client

from app.core.errors import PodcastError, PodcastErrorKind

logger = logging.getLogger(__name__)

PODCAST_WITH_CATEGORY = "*, category:categories(*)"
USER_PUBLIC_COLUMNS = "id, email, name, is_active, podcasts, created_at"
ID_BATCH_SIZE = 100


def _persistence(operation: str):
    """Translate client/PostgREST failures into PERSISTENCE_FAILED errors."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except PodcastError:
                raise
            except Exception as e:
                logger.error(f"Database error during {operation}: {e}")
                raise PodcastError(PodcastErrorKind.PERSISTENCE_FAILED, f"Failed to {operation}") from e
        return wrapper
    return decorator


class PodcastStore:
    """Supabase-backed persistence for podcast documents and their back-references."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    # Categories
    @_persistence("find category")
    def find_category_by_name(self, category_name: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table('categories').select('*').eq('category_name', category_name).limit(1).execute()
        return result.data[0] if result.data else None

    @_persistence("find categories")
    def find_categories_by_name(self, category_name: str) -> List[Dict[str, Any]]:
        result = self.supabase.table('categories').select('*').eq('category_name', category_name).order('created_at').execute()
        return result.data or []

    @_persistence("update category")
    def push_category_podcast(self, category_id: str, podcast_id: str) -> None:
        self._push_reference('categories', category_id, podcast_id)

    @_persistence("update category")
    def pull_category_podcast(self, category_id: str, podcast_id: str) -> None:
        self._pull_reference('categories', category_id, podcast_id)

    # Users
    @_persistence("load user")
    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Load a user without the password hash."""
        result = self.supabase.table('users').select(USER_PUBLIC_COLUMNS).eq('id', user_id).execute()
        return result.data[0] if result.data else None

    @_persistence("update user")
    def push_user_podcast(self, user_id: str, podcast_id: str) -> None:
        self._push_reference('users', user_id, podcast_id)

    # Podcasts
    @_persistence("add podcast")
    def insert_podcast(self, record: Dict[str, Any]) -> Dict[str, Any]:
        result = self.supabase.table('podcasts').insert(record).execute()
        if not result.data:
            raise PodcastError(PodcastErrorKind.PERSISTENCE_FAILED, "Failed to add podcast")
        return result.data[0]

    @_persistence("delete podcast")
    def delete_podcast(self, podcast_id: str) -> None:
        self.supabase.table('podcasts').delete().eq('id', podcast_id).execute()

    @_persistence("list podcasts")
    def list_podcasts(self) -> List[Dict[str, Any]]:
        result = self.supabase.table('podcasts').select(PODCAST_WITH_CATEGORY).order('created_at', desc=True).execute()
        return result.data or []

    @_persistence("load podcast")
    def get_podcast(self, podcast_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table('podcasts').select(PODCAST_WITH_CATEGORY).eq('id', podcast_id).execute()
        return result.data[0] if result.data else None

    @_persistence("load podcasts")
    def get_podcasts_by_ids(self, podcast_ids: List[str]) -> List[Dict[str, Any]]:
        """Expand a back-reference list, keeping its order and dropping dangling ids."""
        by_id: Dict[str, Dict[str, Any]] = {}
        # Each batch is one in.(...) filter in the query string
        for start in range(0, len(podcast_ids), ID_BATCH_SIZE):
            batch = podcast_ids[start:start + ID_BATCH_SIZE]
            result = self.supabase.table('podcasts').select(PODCAST_WITH_CATEGORY).in_('id', batch).execute()
            by_id.update((row['id'], row) for row in result.data or [])
        return [by_id[podcast_id] for podcast_id in podcast_ids if podcast_id in by_id]

    def _update_reference(self, function: str, table: str, row_id: str, podcast_id: str) -> None:
        result = self.supabase.rpc(function, {
            'ref_table': table,
            'ref_id': row_id,
            'podcast_id': podcast_id,
        }).execute()
        if not result.data:
            raise PodcastError(PodcastErrorKind.PERSISTENCE_FAILED, f"No {table} row {row_id}")

    def _push_reference(self, table: str, row_id: str, podcast_id: str) -> None:
        self._update_reference('push_podcast_reference', table, row_id, podcast_id)

    def _pull_reference(self, table: str, row_id: str, podcast_id: str) -> None:
        self._update_reference('pull_podcast_reference', table, row_id, podcast_id)
