"""
Shared fixtures for the podcast API tests.

Settings are read from the environment when ``app.core.config`` is imported, so
the required variables are set here before any application import.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("CLOUDINARY_CLOUD_NAME", "test-cloud")
os.environ.setdefault("CLOUDINARY_API_KEY", "test-cloudinary-key")
os.environ.setdefault("CLOUDINARY_API_SECRET", "test-cloudinary-secret")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Any, Dict, List, Optional  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.auth_middleware import get_current_user  # noqa: E402
from app.core.database import get_podcast_store  # noqa: E402
from app.core.errors import PodcastError, PodcastErrorKind  # noqa: E402
from app.main import app  # noqa: E402
from app.services.cloudinary_service import MediaUpload, get_media_service  # noqa: E402

USER_ID = "0b9f4f0e-3c55-4c4e-8a8e-2b1f5d0c7e21"


class FakePodcastStore:
    """In-memory stand-in for PodcastStore with per-operation failure injection."""

    def __init__(self):
        self.categories: Dict[str, Dict[str, Any]] = {}
        self.users: Dict[str, Dict[str, Any]] = {}
        self.podcasts: Dict[str, Dict[str, Any]] = {}
        self.fail_on: set = set()
        self.calls: List[str] = []
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise PodcastError(PodcastErrorKind.PERSISTENCE_FAILED, f"Failed to {operation}")

    def _expand(self, row: Dict[str, Any]) -> Dict[str, Any]:
        expanded = dict(row)
        category = self.categories.get(row['category_id'])
        expanded['category'] = dict(category) if category else None
        return expanded

    # Seeding helpers
    def add_category(self, name: str) -> Dict[str, Any]:
        category = {'id': str(uuid4()), 'category_name': name, 'podcasts': [], 'created_at': self._tick()}
        self.categories[category['id']] = category
        return category

    def add_user(self, user_id: str = USER_ID) -> Dict[str, Any]:
        user = {'id': user_id, 'email': 'host@example.com', 'name': 'Host', 'is_active': True,
                'podcasts': [], 'password_hash': 'hashed'}
        self.users[user_id] = user
        return user

    def seed_podcast(self, title: str, category: Dict[str, Any], user_id: str = USER_ID,
                     created_at: Optional[datetime] = None) -> Dict[str, Any]:
        row = {
            'id': str(uuid4()),
            'title': title,
            'description': f"{title} description",
            'category_id': category['id'],
            'front_image': f"https://res.cloudinary.com/test/image/upload/{title}.png",
            'audio_file': f"https://res.cloudinary.com/test/video/upload/{title}.mp3",
            'user_id': user_id,
            'created_at': created_at or self._tick(),
        }
        self.podcasts[row['id']] = row
        category['podcasts'].append(row['id'])
        if user_id in self.users:
            self.users[user_id]['podcasts'].append(row['id'])
        return row

    # PodcastStore interface
    def find_category_by_name(self, category_name):
        self._check("find category")
        matches = [c for c in self.categories.values() if c['category_name'] == category_name]
        return dict(matches[0]) if matches else None

    def find_categories_by_name(self, category_name):
        self._check("find categories")
        return [dict(c) for c in self.categories.values() if c['category_name'] == category_name]

    def push_category_podcast(self, category_id, podcast_id):
        self._check("update category")
        self.categories[category_id]['podcasts'].append(podcast_id)

    def pull_category_podcast(self, category_id, podcast_id):
        self._check("pull category")
        podcasts = self.categories[category_id]['podcasts']
        self.categories[category_id]['podcasts'] = [p for p in podcasts if p != podcast_id]

    def get_user(self, user_id):
        self._check("load user")
        user = self.users.get(user_id)
        if user is None:
            return None
        return {k: v for k, v in user.items() if k != 'password_hash'}

    def push_user_podcast(self, user_id, podcast_id):
        self._check("update user")
        self.users[user_id]['podcasts'].append(podcast_id)

    def insert_podcast(self, record):
        self._check("add podcast")
        row = dict(record, id=str(uuid4()), created_at=self._tick())
        self.podcasts[row['id']] = row
        return dict(row)

    def delete_podcast(self, podcast_id):
        self._check("delete podcast")
        self.podcasts.pop(podcast_id, None)

    def list_podcasts(self):
        self._check("list podcasts")
        rows = sorted(self.podcasts.values(), key=lambda r: r['created_at'], reverse=True)
        return [self._expand(row) for row in rows]

    def get_podcast(self, podcast_id):
        self._check("load podcast")
        row = self.podcasts.get(podcast_id)
        return self._expand(row) if row else None

    def get_podcasts_by_ids(self, podcast_ids):
        self._check("load podcasts")
        return [self._expand(self.podcasts[p]) for p in podcast_ids if p in self.podcasts]


class FakeMediaService:
    """Records uploads and deletions instead of talking to Cloudinary."""

    def __init__(self):
        self.uploads: List[MediaUpload] = []
        self.deleted: List[MediaUpload] = []
        self.fail_types: set = set()

    def upload(self, buffer: bytes, resource_type: str) -> MediaUpload:
        if resource_type in self.fail_types:
            raise PodcastError(PodcastErrorKind.UPSTREAM_UPLOAD_FAILED, "Failed to upload media")
        public_id = f"podcasts/{resource_type}-{len(self.uploads)}"
        upload = MediaUpload(
            secure_url=f"https://res.cloudinary.com/test/{resource_type}/upload/{public_id}",
            public_id=public_id,
            resource_type=resource_type,
        )
        self.uploads.append(upload)
        return upload

    async def upload_async(self, buffer: bytes, resource_type: str) -> MediaUpload:
        return self.upload(buffer, resource_type)

    def delete(self, upload: MediaUpload) -> bool:
        self.deleted.append(upload)
        return True

    async def delete_async(self, upload: MediaUpload) -> bool:
        return self.delete(upload)


@pytest.fixture
def store() -> FakePodcastStore:
    fake = FakePodcastStore()
    fake.add_user(USER_ID)
    return fake


@pytest.fixture
def tech_category(store) -> Dict[str, Any]:
    return store.add_category("Tech")


@pytest.fixture
def media() -> FakeMediaService:
    return FakeMediaService()


@pytest.fixture
def current_user(store) -> Dict[str, Any]:
    return store.get_user(USER_ID)


@pytest.fixture
def client(store, media, current_user):
    """TestClient with the store, media relay and auth gate replaced by fakes."""
    app.dependency_overrides[get_podcast_store] = lambda: store
    app.dependency_overrides[get_media_service] = lambda: media
    app.dependency_overrides[get_current_user] = lambda: current_user
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def podcast_form() -> Dict[str, Any]:
    return {
        "data": {"title": "T", "description": "D", "category": "Tech"},
        "files": {
            "frontImage": ("cover.png", b"\x89PNG fake image", "image/png"),
            "audioFile": ("episode.mp3", b"ID3 fake audio", "audio/mpeg"),
        },
    }
