import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

from matchguard.utils.logging_utils import setup_logging

logger = setup_logging(__name__)

REQUIRED_ENV_VARS = (
    "MATCHGUARD_BASE_URL",
    "MATCHGUARD_API_KEY",
)


def load_required_env_vars() -> None:
    if not all(var in os.environ for var in REQUIRED_ENV_VARS):
        env_path = Path(__file__).resolve().parents[3] / ".env"
        logger.debug(f"Loading environment variables from {env_path}")
        if env_path.exists():
            load_dotenv(env_path)

        missing = [var for var in REQUIRED_ENV_VARS if var not in os.environ]
        if missing:
            logger.warning(
                "The following required environment variables are still missing: "
                + ", ".join(missing)
            )
    else:
        logger.debug("All required environment variables are already present.")


class HarnessSettings(BaseSettings):
    """Connection and execution settings for the product-matching harness.

    Loaded once before any scenario runs and treated as read-only afterwards.
    """

    base_url: str = Field(
        "http://localhost:8000", description="Root URL of the matching service"
    )
    api_key: SecretStr = Field(
        SecretStr(""), description="Static credential sent as Authorization"
    )
    text_search_path: str = Field(
        "/search/free-text", description="Endpoint for free-text search"
    )
    url_search_path: str = Field(
        "/search/from-url", description="Endpoint for URL-based search"
    )
    http_timeout: float = Field(
        30.0, gt=0, description="Per-request HTTP timeout in seconds"
    )
    scenario_timeout: float = Field(
        120.0, gt=0, description="Hard budget for one scenario in seconds"
    )
    transient_retries: int = Field(
        0,
        ge=0,
        le=1,
        description="Retries on connection failures; only for shared environments",
    )
    workers: int = Field(4, ge=1, description="Scenarios executed concurrently")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "MATCHGUARD_",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> HarnessSettings:
    """Return the process-wide settings, read from the environment once."""
    load_required_env_vars()
    return HarnessSettings()
