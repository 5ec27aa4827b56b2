"""Runtime configuration for Outfit Advisor."""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_REQUEST_TIMEOUT = 60.0
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMP_IMAGE_NAME = "outfit_advisor_download.jpg"


def _default_temp_image_path() -> Path:
    return Path(tempfile.gettempdir()) / DEFAULT_TEMP_IMAGE_NAME


@dataclass(frozen=True)
class Settings:
    """Configuration passed explicitly into the encoder and request clients."""

    api_key: Optional[str] = None
    model: str = DEFAULT_GEMINI_MODEL

    # Timeouts in seconds
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    download_timeout: float = 30.0

    # Generation limits
    analysis_max_tokens: int = DEFAULT_MAX_TOKENS
    recommendation_max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = 0.2
    # Thinking tokens share max_output_tokens; None keeps the model default
    thinking_budget: Optional[int] = 0

    # Least recently used sessions are evicted past this many
    max_sessions: int = 100

    # Staging file for downloaded remote images, overwritten on each use
    temp_image_path: Path = field(default_factory=_default_temp_image_path)

    cors_origins: tuple[str, ...] = ("http://localhost:3000", "http://localhost:8081")
    log_level: str = "INFO"

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from the process environment.

        Args:
            dotenv: Load a ``.env`` file into the environment first

        Returns:
            Settings populated from environment variables, defaults elsewhere
        """
        if dotenv:
            load_dotenv()

        temp_path = os.getenv("TEMP_IMAGE_PATH")
        thinking = os.getenv("GEMINI_THINKING_BUDGET", "0")
        cors = os.getenv("CORS_ORIGINS")

        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or None,
            model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)),
            download_timeout=float(os.getenv("DOWNLOAD_TIMEOUT", 30.0)),
            analysis_max_tokens=int(os.getenv("ANALYSIS_MAX_TOKENS", DEFAULT_MAX_TOKENS)),
            recommendation_max_tokens=int(
                os.getenv("RECOMMENDATION_MAX_TOKENS", DEFAULT_MAX_TOKENS)
            ),
            temperature=float(os.getenv("GEMINI_TEMPERATURE", 0.2)),
            max_sessions=int(os.getenv("MAX_SESSIONS", 100)),
            thinking_budget=int(thinking) if thinking else None,
            temp_image_path=Path(temp_path) if temp_path else _default_temp_image_path(),
            cors_origins=(
                tuple(o.strip() for o in cors.split(",") if o.strip())
                if cors
                else cls.cors_origins
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
