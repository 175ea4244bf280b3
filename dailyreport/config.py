"""Application configuration for the daily report service."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    DEBUG: bool = Field(default=False, description="Enable FastAPI debug mode")
    HOST: str = Field(default="127.0.0.1", description="Interface the dev server binds to")
    PORT: int = Field(default=8000, ge=1, le=65535, description="Port the dev server listens on")
    ASSETS_DIR: Path = Field(
        default=Path(__file__).resolve().parent.parent / "assets",
        description="Directory holding fonts and local images (logos, stamps, avatars)",
    )
    FONT_PATH: Path = Field(
        default=Path(__file__).resolve().parent.parent / "assets" / "fonts" / "NotoNaskhArabic-Regular.ttf",
        description="TrueType font used for regular text",
    )
    BOLD_FONT_PATH: Path = Field(
        default=Path(__file__).resolve().parent.parent / "assets" / "fonts" / "NotoNaskhArabic-Bold.ttf",
        description="TrueType font used for bold text",
    )
    RASTER_SCALE: int = Field(default=3, ge=1, le=8, description="Supersampling factor for text bitmaps")
    PAGE_MARGIN: float = Field(
        default=28.0,
        ge=0,
        le=32.0,
        description="Page margin in points; larger margins leave no room for a full report",
    )
    MAX_SCHEDULE_ROWS: int = Field(default=7, ge=1, le=7, description="Schedule rows drawn per report")
    IMAGE_FETCH_TIMEOUT_SECONDS: float = Field(default=8.0, gt=0, description="Remote image fetch timeout")
    MAX_IMAGE_BYTES: int = Field(default=5 * 1024 * 1024, ge=1, description="Largest image payload accepted")
    QR_SERVICE_URL: str = Field(
        default="https://api.qrserver.com/v1/create-qr-code/?size=120x120&data={data}",
        description="QR image service; {data} is replaced with the url-encoded report link",
    )
    BULK_PAUSE_SECONDS: float = Field(default=0.0, ge=0, description="Pause between bulk report builds")
    MAX_BULK_ENTRIES: int = Field(default=200, ge=1, description="Largest bulk request accepted")

    model_config = {
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""
    return Settings()
