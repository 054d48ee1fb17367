"""
Podcast API endpoints
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.core.auth_middleware import get_current_user
from app.core.config import get_settings
from app.core.database import get_podcast_store
from app.schemas.podcast import MessageResponse, PodcastListResponse, PodcastResponse
from app.services.cloudinary_service import CloudinaryService, get_media_service
from app.services.podcast_service import PodcastService, PodcastSubmission
from app.services.podcast_store import PodcastStore

router = APIRouter()


async def get_podcast_service(
    store: PodcastStore = Depends(get_podcast_store),
    media: CloudinaryService = Depends(get_media_service)
) -> PodcastService:
    """Dependency wiring the podcast service to its store and media relay."""
    return PodcastService(
        store,
        media,
        validate_category_before_upload=get_settings().validate_category_before_upload
    )


async def _read_upload(upload: Optional[UploadFile]) -> Optional[bytes]:
    if upload is None:
        return None
    try:
        return await upload.read()
    finally:
        await upload.close()


@router.post("/add-podcast", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def add_podcast(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None, description="Category name"),
    front_image: Optional[UploadFile] = File(None, alias="frontImage"),
    audio_file: Optional[UploadFile] = File(None, alias="audioFile"),
    current_user: dict = Depends(get_current_user),
    service: PodcastService = Depends(get_podcast_service)
):
    """Upload cover art and audio to Cloudinary and create a podcast in the named category."""
    submission = PodcastSubmission(
        title=title,
        description=description,
        category=category,
        front_image=await _read_upload(front_image),
        audio_file=await _read_upload(audio_file),
    )
    await service.add_podcast(submission, user_id=str(current_user['id']))
    return MessageResponse(message="Podcast added successfully")


@router.get("/get-podcasts", response_model=PodcastListResponse)
async def get_podcasts(service: PodcastService = Depends(get_podcast_service)):
    """List every podcast, newest first."""
    return PodcastListResponse(data=service.list_podcasts())


@router.get("/get-user-podcasts", response_model=PodcastListResponse)
async def get_user_podcasts(
    current_user: dict = Depends(get_current_user),
    service: PodcastService = Depends(get_podcast_service)
):
    """List the authenticated user's podcasts, newest first."""
    return PodcastListResponse(data=service.list_user_podcasts(str(current_user['id'])))


@router.get("/get-podcast/{podcast_id}", response_model=PodcastResponse)
async def get_podcast(
    podcast_id: str,
    service: PodcastService = Depends(get_podcast_service)
):
    """Get one podcast; a miss returns ``{"data": null}``."""
    return PodcastResponse(data=service.get_podcast(podcast_id))


@router.get("/category/{cat}", response_model=PodcastListResponse)
async def get_podcasts_by_category(
    cat: str,
    service: PodcastService = Depends(get_podcast_service)
):
    """List the podcasts of the category (or categories) with this name."""
    return PodcastListResponse(data=service.list_podcasts_by_category(cat))
