from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Any
from pathlib import Path
import os


DEFAULT_QUOTE_ADDR = "http://quote:8090"


def _default_env_file() -> str:
    return os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[2] / ".env"))


class Settings(BaseSettings):
    # Base address of the pricing oracle; the client appends /getquote
    QUOTE_ADDR: str = DEFAULT_QUOTE_ADDR
    # Upper bound for the single outbound call (seconds)
    QUOTE_TIMEOUT_SECONDS: float = 5.0

    SERVICE_NAME: str = "shipping"
    SHIPPING_PORT: int = 50051

    # Observability knobs
    LOG_LEVEL: str = "INFO"
    ENABLE_CONSOLE_TRACING: bool = False
    OTEL_TRACES_SAMPLER_RATIO: float = 1.0

    model_config = SettingsConfigDict(
        env_file=_default_env_file(),
        extra="ignore",
        case_sensitive=True,
    )

    @field_validator("QUOTE_ADDR", mode="before")
    def strip_quote_addr(cls, v: Any) -> Any:
        """Fall back to the default when unset/blank and drop a trailing slash."""
        if v is None:
            return DEFAULT_QUOTE_ADDR
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            return v or DEFAULT_QUOTE_ADDR
        return v

    @field_validator("QUOTE_TIMEOUT_SECONDS")
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("QUOTE_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("OTEL_TRACES_SAMPLER_RATIO")
    def clamp_ratio(cls, v: float) -> float:
        return 0.0 if v < 0 else (1.0 if v > 1 else v)

    @property
    def quote_url(self) -> str:
        """Full URL of the oracle's quote endpoint."""
        return f"{self.QUOTE_ADDR}/getquote"


def load_settings() -> "Settings":
    return Settings(_env_file=_default_env_file())


settings = load_settings()
