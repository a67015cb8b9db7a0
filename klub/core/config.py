from typing import Annotated, Any, Literal
from zoneinfo import ZoneInfo

from pydantic import BeforeValidator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="./.env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "Klub API"

    BACKEND_CORS_ORIGINS: Annotated[list[str] | str, BeforeValidator(parse_cors)] = [
        "http://localhost:3000"
    ]

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Frontend base URL used to build scannable table links
    FRONTEND_URL: str = "http://localhost:3000"
    QR_SCHEME: str = "klub"

    # Tokens are issued by the external identity provider
    AUTH_JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_AUDIENCE: str | None = None

    # Timezone configuration
    TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"

    # Database configuration
    DATABASE_URL: str | None = None
    SQLITE_FILE_NAME: str = "klub.db"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:  # noqa
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.SQLITE_FILE_NAME}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def APP_TIMEZONE(self) -> ZoneInfo:  # noqa
        """Get the timezone object for the configured timezone string."""
        return ZoneInfo(self.TIMEZONE)


settings = Settings()  # type: ignore
