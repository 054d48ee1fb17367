"""
Podcast operations: creating a podcast with its media and reading podcasts back.

The write path uploads both media files concurrently, persists the podcast and
appends it to the category and user back-references. The database has no
multi-row transaction here, so each failed step undoes the steps before it.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from app.core.errors import PodcastError, PodcastErrorKind
from app.schemas.podcast import PodcastData
from app.services.cloudinary_service import AUDIO_RESOURCE, IMAGE_RESOURCE, CloudinaryService, MediaUpload
from app.services.podcast_store import PodcastStore

logger = logging.getLogger(__name__)

ADD_FAILED_MESSAGE = "Failed to add podcast"
READ_FAILED_MESSAGE = "Internal server error"


@dataclass
class PodcastSubmission:
    """Fields of an add-podcast form."""
    title: Optional[str]
    description: Optional[str]
    category: Optional[str]
    front_image: Optional[bytes]
    audio_file: Optional[bytes]

    def is_complete(self) -> bool:
        # Empty files are allowed; absent ones are not
        return bool(self.title and self.description and self.category) and \
            self.front_image is not None and self.audio_file is not None


class PodcastService:
    """Service for creating and querying podcasts."""

    def __init__(
        self,
        store: PodcastStore,
        media: CloudinaryService,
        validate_category_before_upload: bool = False
    ):
        self.store = store
        self.media = media
        self.validate_category_before_upload = validate_category_before_upload

    # Write path
    async def add_podcast(self, submission: PodcastSubmission, user_id: str) -> Dict[str, Any]:
        """
        Create a podcast owned by ``user_id``.

        Args:
            submission: Form fields and file contents
            user_id: Id of the authenticated uploader

        Returns:
            The inserted podcasts row

        Raises:
            PodcastError: INPUT_INVALID, CATEGORY_NOT_FOUND, UPSTREAM_UPLOAD_FAILED
                or PERSISTENCE_FAILED
        """
        if not submission.is_complete():
            raise PodcastError(PodcastErrorKind.INPUT_INVALID, "All fields are required")

        category = None
        if self.validate_category_before_upload:
            category = self._resolve_category(submission.category)

        front_image, audio_file = await self._relay_media(submission.front_image, submission.audio_file)
        uploads = [front_image, audio_file]

        if category is None:
            try:
                category = self._resolve_category(submission.category)
            except PodcastError:
                await self._discard_media(uploads)
                raise

        try:
            podcast = self.store.insert_podcast({
                'title': submission.title,
                'description': submission.description,
                'category_id': category['id'],
                'front_image': front_image.secure_url,
                'audio_file': audio_file.secure_url,
                'user_id': user_id,
            })
        except PodcastError as e:
            await self._discard_media(uploads)
            raise e.with_message(ADD_FAILED_MESSAGE) from e

        logger.info(f"Podcast {podcast['id']} created by user {user_id} in category {category['id']}")

        await self._link_references(podcast['id'], category['id'], user_id, uploads)
        return podcast

    async def _relay_media(self, front_image: bytes, audio_file: bytes) -> Tuple[MediaUpload, MediaUpload]:
        results = await asyncio.gather(
            self.media.upload_async(front_image, IMAGE_RESOURCE),
            self.media.upload_async(audio_file, AUDIO_RESOURCE),
            return_exceptions=True
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            await self._discard_media([r for r in results if isinstance(r, MediaUpload)])
            error = failures[0]
            if isinstance(error, PodcastError):
                raise error
            raise PodcastError(PodcastErrorKind.UPSTREAM_UPLOAD_FAILED, "Failed to upload media") from error

        return results[0], results[1]

    def _resolve_category(self, category_name: str) -> Dict[str, Any]:
        try:
            category = self.store.find_category_by_name(category_name)
        except PodcastError as e:
            raise e.with_message(ADD_FAILED_MESSAGE) from e

        if category is None:
            logger.warning(f"No category named {category_name!r}")
            raise PodcastError(PodcastErrorKind.CATEGORY_NOT_FOUND, "No category found")
        return category

    async def _link_references(self, podcast_id: str, category_id: str, user_id: str, uploads: List[MediaUpload]) -> None:
        category_linked = False
        try:
            self.store.push_category_podcast(category_id, podcast_id)
            category_linked = True
            self.store.push_user_podcast(user_id, podcast_id)
        except PodcastError as e:
            logger.warning(f"Rolling back podcast {podcast_id}: back-reference update failed")
            self._rollback_podcast(podcast_id, category_id if category_linked else None)
            await self._discard_media(uploads)
            raise e.with_message(ADD_FAILED_MESSAGE) from e

    def _rollback_podcast(self, podcast_id: str, category_id: Optional[str]) -> None:
        if category_id is not None:
            try:
                self.store.pull_category_podcast(category_id, podcast_id)
            except PodcastError as e:
                logger.error(f"Could not unlink podcast {podcast_id} from category {category_id}: {e.__cause__ or e}")
        try:
            self.store.delete_podcast(podcast_id)
        except PodcastError as e:
            logger.error(f"Could not delete podcast {podcast_id} during rollback: {e.__cause__ or e}")

    async def _discard_media(self, uploads: List[MediaUpload]) -> None:
        if uploads:
            await asyncio.gather(*(self.media.delete_async(upload) for upload in uploads))

    # Read path
    def list_podcasts(self) -> List[PodcastData]:
        """All podcasts, newest first, with their category expanded."""
        rows = self._read(self.store.list_podcasts)
        return [PodcastData.from_row(row) for row in rows]

    def list_user_podcasts(self, user_id: str) -> List[PodcastData]:
        """Podcasts referenced by the user's back-reference list, newest first."""
        user = self._read(self.store.get_user, user_id)
        if user is None:
            raise PodcastError(PodcastErrorKind.USER_NOT_FOUND, "User not found")

        rows = self._read(self.store.get_podcasts_by_ids, user.get('podcasts') or [])
        podcasts = [PodcastData.from_row(row) for row in rows]
        podcasts.sort(key=lambda podcast: podcast.created_at, reverse=True)
        return podcasts

    def get_podcast(self, podcast_id: str) -> Optional[PodcastData]:
        """One podcast by id, or None when there is no such podcast."""
        row = self._read(self.store.get_podcast, podcast_id)
        return PodcastData.from_row(row) if row else None

    def list_podcasts_by_category(self, category_name: str) -> List[PodcastData]:
        """Podcasts of every category with this name, in back-reference order."""
        podcasts: List[PodcastData] = []
        for category in self._read(self.store.find_categories_by_name, category_name):
            rows = self._read(self.store.get_podcasts_by_ids, category.get('podcasts') or [])
            podcasts.extend(PodcastData.from_row(row) for row in rows)
        return podcasts

    @staticmethod
    def _read(query, *args):
        try:
            return query(*args)
        except PodcastError as e:
            raise e.with_message(READ_FAILED_MESSAGE) from e
