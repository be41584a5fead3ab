"""Global settings and configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass
class Config:
    """Application-wide configuration."""

    APP_NAME: str = "FlashDeck"

    # Cross-platform paths using pathlib
    # BASE_DIR is the project root (parent of flashdeck/)
    BASE_DIR: Path = Path(__file__).parent.parent.parent.resolve()
    DATA_DIR: str = str(BASE_DIR / "data")

    # Backing medium for the card collection: "json", "sqlite" or "memory"
    STORAGE_BACKEND: str = os.environ.get("FLASHDECK_STORAGE_BACKEND", "json")
    STORAGE_FILE: str = str(BASE_DIR / "data" / "flashdeck_storage.json")
    DB_FILE: str = str(BASE_DIR / "data" / "flashdeck.db")

    # The whole collection lives under this single key
    STORAGE_KEY: str = "flashcards"

    EXPORT_DIR: str = str(BASE_DIR / "data" / "export")
    CACHE_DIR: str = str(BASE_DIR / "data" / "cache")

    # Image download for card export
    RETRIES: int = 3
    IMAGE_TIMEOUT: int = 30

    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Exported card image geometry (pixels)
    EXPORT_CARD_WIDTH: int = 640
    EXPORT_CARD_HEIGHT: int = 400
    EXPORT_PICTURE_HEIGHT: int = 160
