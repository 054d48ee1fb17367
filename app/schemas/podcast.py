from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class CategoryData(BaseModel):
    id: str
    category_name: str = Field(..., description="Category lookup name")
    podcasts: List[str] = Field(default_factory=list, description="Podcast ids in this category")
    created_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator('podcasts', mode='before')
    @classmethod
    def default_podcasts(cls, v):
        return v or []


class PodcastData(BaseModel):
    id: str
    title: str
    description: str
    category: Optional[Union[CategoryData, str]] = Field(None, description="Expanded category, or its id")
    front_image: str = Field(..., description="Cover image URL")
    audio_file: str = Field(..., description="Audio file URL")
    user: str = Field(..., description="Id of the uploading user")
    created_at: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "title": "Weekly Tech Roundup",
                "description": "News from the week in tech",
                "category": {
                    "id": "6f1c2a52-9c1e-4a55-a0a4-0c0b6b0f1d11",
                    "categoryName": "Tech",
                    "podcasts": ["550e8400-e29b-41d4-a716-446655440000"],
                    "createdAt": "2025-01-01T00:00:00Z"
                },
                "frontImage": "https://res.cloudinary.com/demo/image/upload/cover.png",
                "audioFile": "https://res.cloudinary.com/demo/video/upload/episode.mp3",
                "user": "0b9f4f0e-3c55-4c4e-8a8e-2b1f5d0c7e21",
                "createdAt": "2025-01-02T00:00:00Z"
            }
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "PodcastData":
        """Build from a podcasts row, with or without an embedded category."""
        return cls(
            id=str(row['id']),
            title=row['title'],
            description=row['description'],
            category=row.get('category') or row.get('category_id'),
            front_image=row['front_image'],
            audio_file=row['audio_file'],
            user=str(row['user_id']),
            created_at=row['created_at'],
        )


class PodcastResponse(BaseModel):
    data: Optional[PodcastData] = None


class PodcastListResponse(BaseModel):
    data: List[PodcastData]


class MessageResponse(BaseModel):
    message: str
