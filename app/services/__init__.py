from .cloudinary_service import CloudinaryService, MediaUpload
from .podcast_store import PodcastStore
from .podcast_service import PodcastService

__all__ = ["CloudinaryService", "MediaUpload", "PodcastStore", "PodcastService"]
