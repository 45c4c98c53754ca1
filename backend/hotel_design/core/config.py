from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path
import json
import os


SETTINGS_FILE = Path(__file__).parent.parent.parent / "settings.json"
BACKEND_DIR = Path(__file__).parent.parent.parent


def load_settings_from_file() -> dict:
    """Load settings from JSON file if exists."""
    if SETTINGS_FILE.exists():
        try:
            with open(SETTINGS_FILE) as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            pass
    return {}


def save_settings_to_file(values: dict) -> None:
    """Save settings to JSON file."""
    with open(SETTINGS_FILE, "w") as f:
        json.dump(values, f, indent=2)


class Settings(BaseSettings):
    # Storage
    database_url: str = f"sqlite:///{BACKEND_DIR / 'hotel_design.db'}"

    # Server
    backend_port: int = 8000
    cors_origins: List[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    # Pipeline
    pipeline_dispatch_mode: str = "queue"  # "queue" or "inline"
    default_regional_multiplier: float = 1.0
    default_brand_tier: str = "standard"
    emit_design_change_on_mutation: bool = True

    # Chat
    chat_rate_limit: str = "30/minute"

    class Config:
        env_file = ".env"
        extra = "ignore"

    def __init__(self, **kwargs):
        # Merge: kwargs > file_settings > env vars (handled by pydantic)
        file_settings = load_settings_from_file()
        merged = {**file_settings, **kwargs}

        super().__init__(**merged)

        # Handle CORS_ORIGINS as JSON string from env
        cors_env = os.getenv("CORS_ORIGINS")
        if cors_env:
            try:
                self.cors_origins = json.loads(cors_env)
            except json.JSONDecodeError:
                self.cors_origins = [o.strip() for o in cors_env.split(",") if o.strip()]

        if self.pipeline_dispatch_mode not in ("queue", "inline"):
            self.pipeline_dispatch_mode = "queue"

    def get_effective_settings(self) -> dict:
        """Get current effective settings (for API response)."""
        return {
            "pipeline_dispatch_mode": self.pipeline_dispatch_mode,
            "default_regional_multiplier": self.default_regional_multiplier,
            "default_brand_tier": self.default_brand_tier,
            "emit_design_change_on_mutation": self.emit_design_change_on_mutation,
            "database_url": self._mask_url(self.database_url),
        }

    def _mask_url(self, url: str) -> str:
        """Hide credentials embedded in a database URL."""
        if "@" not in url:
            return url
        scheme, _, rest = url.partition("://")
        return f"{scheme}://***@{rest.split('@', 1)[1]}"


def reload_settings() -> "Settings":
    """Reload settings from file and environment."""
    global settings
    settings = Settings()
    return settings


settings = Settings()
