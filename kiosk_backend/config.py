"""
Kiosk Check-In Backend - Configuration Management
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """Application settings"""

    # FastAPI
    fastapi_env: str = "development"
    fastapi_host: str = "0.0.0.0"
    fastapi_port: int = 3000
    cors_origins: str = "*"  # Comma-separated, tighten to the kiosk origin in prod
    max_body_bytes: int = 200 * 1024

    # RepairShopr
    repairshopr_subdomain: str = ""
    repairshopr_api_key: str = ""
    repairshopr_base_url: str = ""  # Overrides the subdomain URL (tests, proxies)

    # LLM
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com"
    llm_default_model: str = "gpt-4o-mini"
    llm_default_temperature: float = 0.2

    # Outbound HTTP
    http_timeout: float = 30.0
    http_max_retries: int = 0  # 0 = fail immediately, no retry

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def crm_base_url(self) -> str:
        """RepairShopr API root for the configured account"""
        if self.repairshopr_base_url:
            return self.repairshopr_base_url.rstrip("/")
        return f"https://{self.repairshopr_subdomain}.repairshopr.com/api/v1"

    @property
    def crm_configured(self) -> bool:
        """True when both an account and an API key are available"""
        has_account = bool(self.repairshopr_subdomain or self.repairshopr_base_url)
        return has_account and bool(self.repairshopr_api_key)

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
