from .podcast import CategoryData, PodcastData, PodcastResponse, PodcastListResponse, MessageResponse

__all__ = [
    "CategoryData",
    "PodcastData",
    "PodcastResponse",
    "PodcastListResponse",
    "MessageResponse"
]
