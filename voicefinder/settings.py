# voicefinder/settings.py
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="Voice Finder")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # language models (planner + ranker)
    OPENAI_API_KEY: str | None = None
    OPENAI_PLANNER_MODEL: str = "gpt-4o-mini"
    OPENAI_RANKER_MODEL: str = "gpt-4o"
    USE_OLLAMA: bool = False
    OLLAMA_HOST: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "mistral:7b-instruct"

    # voice catalog
    ELEVENLABS_API_KEY: str | None = None
    ELEVENLABS_BASE_URL: str = "https://api.elevenlabs.io"

    # chat transport
    SLACK_BOT_TOKEN: str | None = None

    # timeouts (seconds); every external call is attempted once
    CATALOG_TIMEOUT: float = 10.0
    PLANNER_TIMEOUT: float = 20.0
    RANKER_TIMEOUT: float = 25.0

    # conversation
    DEFAULT_LANGUAGE: str = "en"
    DUPLICATE_WINDOW_SECONDS: float = 15.0

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME


settings = Settings()
