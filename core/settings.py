"""
Centralized application settings using Pydantic.

All environment variables are read once at startup and validated.
Use this instead of scattered os.getenv() calls throughout the codebase.
"""

from pathlib import Path
from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings

from relay.core.config import DEFAULT_MAX_RESPONSES


class N8NSettings(BaseSettings):
    """n8n webhook that receives uploaded documents."""

    N8N_WEBHOOK_URL: str = "https://your-n8n.example/webhook/document-ai"
    N8N_TIMEOUT: float = 30.0

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class OneCSettings(BaseSettings):
    """Environment overrides for the 1C integration.

    Unset values fall back to the JSON config file at ONEC_CONFIG_PATH.
    """

    ONEC_BASE_URL: Optional[str] = None
    ONEC_USERNAME: Optional[str] = None
    ONEC_PASSWORD: Optional[SecretStr] = None
    ONEC_TIMEOUT: Optional[int] = None
    ONEC_ENABLED: Optional[bool] = None
    ONEC_AUTO_SEND: Optional[bool] = None

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}


class AppSettings(BaseSettings):
    """General application settings."""

    SERVER_PORT: int = 8080
    MAX_FILE_SIZE_MB: int = 50
    MAX_RESPONSES: int = DEFAULT_MAX_RESPONSES
    STATIC_DIR: str = "static"
    ONEC_CONFIG_PATH: str = "config/onec.json"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = {"case_sensitive": True, "env_file": ".env", "extra": "ignore"}

    @property
    def static_dir(self) -> Path:
        return Path(self.STATIC_DIR).resolve()

    @property
    def max_file_size_bytes(self) -> int:
        return self.MAX_FILE_SIZE_MB * 1024 * 1024


# Singleton instances - loaded once at module import
n8n_settings = N8NSettings()
onec_settings = OneCSettings()
app_settings = AppSettings()
