from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Supabase Configuration (Primary Database)
    supabase_url: str = Field(description="Supabase project URL")
    supabase_anon_key: str = Field(description="Supabase anon key")
    supabase_service_role_key: str = Field(description="Supabase service role key")

    # Authentication & Security
    secret_key: str = Field(default="your-secret-key-here", description="Secret key used to sign JWT tokens")
    algorithm: str = Field(default="HS256", description="Algorithm for JWT tokens")
    access_token_expire_minutes: int = Field(default=30, description="JWT access token expiration in minutes")

    # CORS Configuration
    cors_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    @property
    def origins_list(self) -> List[str]:
        """Convert comma-separated origins to list"""
        if isinstance(self.cors_origins, str):
            return [origin.strip() for origin in self.cors_origins.split(',') if origin.strip()]
        return self.cors_origins

    # Environment & Debugging
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="info", description="Log level")

    # Cloudinary Configuration (podcast cover art and audio)
    cloudinary_cloud_name: str = Field(description="Cloudinary cloud name")
    cloudinary_api_key: str = Field(description="Cloudinary API key")
    cloudinary_api_secret: str = Field(description="Cloudinary API secret")
    cloudinary_folder: Optional[str] = Field(default=None, description="Cloudinary folder for podcast uploads")

    # Podcast uploads
    validate_category_before_upload: bool = Field(
        default=False,
        description="Resolve the category before relaying media to Cloudinary"
    )

    # API Configuration
    api_v1_str: str = Field(default="/api/v1", description="API v1 prefix")
    project_name: str = Field(default="Podcast API", description="Project name")
    version: str = Field(default="1.0.0", description="API version")

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()

def get_settings() -> Settings:
    """Get application settings."""
    return settings
