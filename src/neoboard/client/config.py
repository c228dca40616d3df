"""Client-side configuration read from ``NEOBOARD_*`` environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the API client and the command line."""

    # No URL means the in-memory mock forum is used.
    api_url: str | None = Field(default=None, alias="NEOBOARD_API_URL")
    token_file: str = Field(default="~/.neoboard/token", alias="NEOBOARD_TOKEN_FILE")
    timeout_seconds: float = Field(default=10.0, alias="NEOBOARD_TIMEOUT")
    mock_latency: float = Field(default=0.0, ge=0.0, alias="NEOBOARD_MOCK_LATENCY")
    log_level: str = Field(default="WARNING", alias="NEOBOARD_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)
