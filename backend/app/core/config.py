import logging
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "formsink"
    API_STR: str = "/api"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Same default as the JS service this replaced (LOG_LEVEL || 'debug').
    LOG_LEVEL: str = "DEBUG"

    SENTRY_DSN: AnyUrl | None = None

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    # Seconds; passed to the driver's connect timeout.
    EXTERNAL_DB_CONNECT_TIMEOUT: int = 10

    # Connector families registered in the default registry.
    DESTINATION_DEFAULT_SCHEMES: Annotated[
        list[str] | str, BeforeValidator(parse_cors)
    ] = ["mysql", "postgres", "trino"]

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]


settings = Settings()  # type: ignore
