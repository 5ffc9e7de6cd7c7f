from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, ValidationError, field_validator
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import ConfigurationError

MISSING_KEY_MESSAGE = (
    "GEMINI_API_KEY is not set. Export it (or API_KEY) in the environment "
    "or add it to your .env file before running an analysis."
)

class Settings(BaseSettings):
    GEMINI_API_KEY: str = Field(
        ...,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
        description="Google Gemini API key",
    )
    GEMINI_MODEL: str = Field("gemini-3-pro-preview", description="Model used for the daily analysis")
    REPORT_TIMEZONE: str = Field("Asia/Taipei", description="Time zone used to stamp report dates")
    LOG_LEVEL: str = "INFO"

    # Web client settings
    AUTO_ANALYZE: bool = Field(True, description="Run one analysis automatically when the web client starts")
    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @field_validator("GEMINI_API_KEY")
    @classmethod
    def key_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("API key must not be blank")
        return v

    @field_validator("REPORT_TIMEZONE")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone {v!r}") from e
        return v

def load_settings(**overrides) -> Settings:
    """
    Build a Settings object, turning validation failures into ConfigurationError.
    A missing or blank credential fails here, before any network call is made.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        bad_fields = {str(loc) for err in e.errors() for loc in err.get("loc", ())}
        if bad_fields & {"GEMINI_API_KEY", "API_KEY"}:
            raise ConfigurationError(MISSING_KEY_MESSAGE) from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e

@lru_cache()
def get_settings() -> Settings:
    return load_settings()
