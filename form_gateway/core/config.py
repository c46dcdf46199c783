"""Konfigurationsmodul für das Form Gateway: lädt zentrale
Umgebungsvariablen (OpenAI, Modell, Tageslimit, Port) via Pydantic-Settings."""
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Hält alle konfigurierbaren Werte, die das Gateway zur Laufzeit
    benötigt. Wird einmalig beim Start gebaut und an die App übergeben."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    port: int = Field(3081, alias="PORT", gt=0, lt=65536)
    openai_api_key: str = Field(..., alias="OPENAI_API_KEY")  # Muss per Env gesetzt werden.
    gpt_model: str = Field("gpt-3.5-turbo", alias="GPT_MODEL")
    api_daily_limit: int = Field(1000, alias="API_DAILY_LIMIT", gt=0)
    rate_limit_window_seconds: int = Field(24 * 3600, alias="RATE_LIMIT_WINDOW_SECONDS", gt=0)
    rate_limit_message: Optional[str] = Field(None, alias="RATE_LIMIT_MESSAGE")
    log_file: str = Field("form_gateway.log", alias="LOG_FILE")  # Leer = nur Konsole.

    @field_validator("openai_api_key")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("OPENAI_API_KEY must be set")
        return value
