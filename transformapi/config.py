"""
Settings loaded from the environment (and a local .env file).
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from transformapi.errors import ConfigError

DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024
DEFAULT_SERVER = "http://localhost:8000"


@dataclass(frozen=True)
class Settings:
    api_key: str
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Read settings from the environment. A missing API key is fatal."""
    load_dotenv()

    api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
    if not api_key:
        raise ConfigError("GEMINI_API_KEY (or API_KEY) environment variable is not set.")

    return Settings(
        api_key=api_key,
        max_upload_bytes=int(os.environ.get("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )


def server_url() -> str:
    """Base URL of the API server, used by the CLI."""
    load_dotenv()
    return os.environ.get("TRANSFORMAPI_SERVER", DEFAULT_SERVER)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
