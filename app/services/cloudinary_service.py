"""
Cloudinary service for relaying podcast cover art and audio uploads.
"""
import asyncio
import io
import logging
from dataclasses import dataclass
from functools import partial
from typing import Optional
import cloudinary
import cloudinary.uploader
from app.core.config import get_settings
from app.core.errors import PodcastError, PodcastErrorKind

logger = logging.getLogger(__name__)

IMAGE_RESOURCE = "image"
# Cloudinary stores audio under the "video" resource type
AUDIO_RESOURCE = "video"


@dataclass
class MediaUpload:
    """Result of a completed Cloudinary upload."""
    secure_url: str
    public_id: Optional[str]
    resource_type: str


class CloudinaryService:
    """Service for handling Cloudinary uploads"""

    def __init__(self):
        settings = get_settings()
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True
        )
        self.folder = settings.cloudinary_folder

    def upload(self, buffer: bytes, resource_type: str) -> MediaUpload:
        """
        Upload a buffered file to Cloudinary.

        Args:
            buffer: Raw file contents
            resource_type: Cloudinary resource type ("image" or "video")

        Returns:
            MediaUpload carrying the durable secure URL

        Raises:
            PodcastError: UPSTREAM_UPLOAD_FAILED if Cloudinary rejects the upload
        """
        options = {"resource_type": resource_type}
        if self.folder:
            options["folder"] = self.folder

        try:
            result = cloudinary.uploader.upload(io.BytesIO(buffer), **options)
        except Exception as e:
            logger.error(f"Cloudinary {resource_type} upload failed: {e}")
            raise PodcastError(PodcastErrorKind.UPSTREAM_UPLOAD_FAILED, "Failed to upload media") from e

        secure_url = (result or {}).get('secure_url')
        if not secure_url:
            logger.error(f"Cloudinary {resource_type} upload returned no secure_url: {result}")
            raise PodcastError(PodcastErrorKind.UPSTREAM_UPLOAD_FAILED, "Failed to upload media")

        logger.info(f"Uploaded {resource_type} to Cloudinary: {secure_url}")
        return MediaUpload(
            secure_url=secure_url,
            public_id=result.get('public_id'),
            resource_type=resource_type
        )

    async def upload_async(self, buffer: bytes, resource_type: str) -> MediaUpload:
        """Run upload() in the default executor so several relays can overlap."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self.upload, buffer, resource_type))

    def delete(self, upload: MediaUpload) -> bool:
        """
        Delete a previously uploaded asset.

        Returns:
            True if deleted successfully, False otherwise
        """
        if not upload.public_id:
            logger.warning(f"Cannot delete Cloudinary asset without public_id: {upload.secure_url}")
            return False

        try:
            cloudinary.uploader.destroy(upload.public_id, resource_type=upload.resource_type)
            logger.info(f"Deleted Cloudinary asset: {upload.public_id}")
            return True
        except Exception as e:
            logger.error(f"Failed to delete Cloudinary asset {upload.public_id}: {e}")
            return False

    async def delete_async(self, upload: MediaUpload) -> bool:
        """Run delete() in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self.delete, upload))


def get_media_service() -> CloudinaryService:
    """Dependency providing the Cloudinary media relay."""
    return CloudinaryService()
