"""Configuration management using pydantic-settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Record store (Supabase / PostgREST). Without a URL the local JSON store is used.
    supabase_url: str | None = Field(None, description="Base URL of the hosted backend")
    supabase_key: str | None = Field(None, description="API key for the hosted backend")
    storage_buckets: list[str] = Field(
        default=["apartment-images", "images", "public"],
        description="Storage buckets tried in order when uploading images",
    )
    couple_id: str | None = Field(None, description="Grouping key stamped on new apartments")

    # Access gate
    access_password: str | None = Field(None, description="Shared password for editing")
    token_secret: str | None = Field(None, description="Secret used to sign access tokens")
    token_ttl_hours: int = Field(default=12, description="Lifetime of an access token")

    # AI
    openai_api_key: str | None = Field(None, description="OpenAI API key")
    openai_base_url: str = Field(default="https://api.openai.com/v1")
    openai_model: str = Field(default="gpt-4o-mini", description="Model for advice and jokes")
    openai_vision_model: str = Field(default="gpt-4o", description="Model for image analysis")

    # Email configuration
    resend_api_key: str | None = Field(None, description="Resend API key for sending emails")
    email_to: str = Field(
        default="test@example.com",
        description="Comma-separated recipients of apartment notifications",
    )
    email_from: str = Field(
        default="Dirot <onboarding@resend.dev>",
        description="Sender email (must be verified domain)",
    )

    # Storage
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory for the local store, uploads and session state",
    )

    # Scanner settings
    yad2_base_url: str = Field(default="https://www.yad2.co.il/realestate")
    request_timeout: int = Field(default=30, description="HTTP request timeout in seconds")
    user_agent: str = Field(
        default="Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36",
        description="User agent for HTTP requests",
    )

    @field_validator("email_to")
    @classmethod
    def validate_email_to(cls, v: str) -> str:
        """Validate email_to is not empty."""
        if not v.strip():
            raise ValueError("email_to cannot be empty")
        return v

    @field_validator("data_dir", mode="before")
    @classmethod
    def create_data_dir(cls, v: str | Path) -> Path:
        """Ensure data directory exists."""
        path = Path(v)
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def email_recipients(self) -> list[str]:
        """Get list of email recipients."""
        return [email.strip() for email in self.email_to.split(",") if email.strip()]

    @property
    def use_remote_store(self) -> bool:
        """Whether the hosted backend is configured."""
        return bool(self.supabase_url and self.supabase_key)


# Global settings instance
settings = Settings()  # type: ignore[call-arg]
