"""
Configuration settings for the CourtListener MCP server
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Service
    service_name: str = "courtlistener-mcp"
    service_version: str = "1.0.0"
    log_level: str = "INFO"

    # CourtListener API
    courtlistener_api_base_url: str = "https://www.courtlistener.com/api/rest/v4"
    courtlistener_site_url: str = "https://www.courtlistener.com"
    courtlistener_api_token: str = Field(
        default="",
        description="Fallback CourtListener API token used when a tool call carries none",
    )
    user_agent: str = "CourtListener-MCP-Server/1.0"

    # Request guard
    request_timeout_ms: int = Field(default=30000, gt=0)
    rate_limit_requests: int = Field(default=100, gt=0)
    rate_limit_window_ms: int = Field(default=60000, gt=0)
    max_string_length: int = Field(default=1000, gt=0)

    # Formatting
    max_text_preview_length: int = Field(default=500, gt=0)

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False

    @property
    def request_timeout_seconds(self) -> float:
        """Request deadline in seconds, as httpx and anyio expect it"""
        return self.request_timeout_ms / 1000.0


# Global settings instance
settings = Settings()
