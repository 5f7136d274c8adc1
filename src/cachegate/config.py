from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CACHEGATE_", env_file=".env", extra="ignore", populate_by_name=True
    )

    app_name: str = "cachegate"
    env: str = "dev"
    host: str = "0.0.0.0"  # nosec B104 - intentional for container deployments
    port: int = Field(default=8000, validation_alias="PORT")

    # Key-value store
    store_backend: str = "redis"
    redis_url: str = Field(default="redis://localhost:6379/0", validation_alias="REDIS_URL")
    redis_socket_timeout: float = 5.0
    key_prefix: str = "cachegate"

    # Backing source
    upstream_base_url: str = Field(
        default="https://jsonplaceholder.typicode.com",
        validation_alias="UPSTREAM_BASE_URL",
    )
    upstream_timeout: float = Field(default=10.0, validation_alias="UPSTREAM_TIMEOUT")

    # TTL policy
    default_ttl_seconds: int = Field(default=60, validation_alias="CACHEGATE_DEFAULT_TTL")
    max_ttl_seconds: int = Field(default=30 * 24 * 3600, validation_alias="CACHEGATE_MAX_TTL")

    # CORS
    cors_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=False, validation_alias="CORS_CREDENTIALS")
    cors_max_age: int = Field(default=600, validation_alias="CORS_MAX_AGE")

    # Observability
    enable_metrics: bool = Field(default=True, validation_alias="ENABLE_METRICS")
    log_level: str = "INFO"
    log_json: bool | None = None

    @property
    def use_json_logs(self) -> bool:
        """JSON logs everywhere except local development, unless overridden."""
        if self.log_json is not None:
            return self.log_json
        return self.env != "dev"


settings = Settings()
