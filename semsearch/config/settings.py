"""Application settings loaded from environment variables via pydantic-settings.

Settings are read from two sources, in priority order:

  1. **Environment variables** -- e.g. ``OPENAI_API_KEY=sk-abc123``
  2. **.env file** -- key=value lines in the project root ``.env`` file

Field ``openai_api_key`` maps to env var ``OPENAI_API_KEY`` (pydantic-settings
uppercases and matches).  Defaults are used when neither source sets a field.
List-valued settings are stored as comma-separated strings and parsed by the
helper accessors so they can be set from a plain environment variable.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """semsearch application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Embedding service ===
    # Empty string = "not configured"; provider selection falls through to
    # the next candidate when a key is missing.
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoint (TogetherAI, Azure proxy, ...)
    openai_embedding_model: str = "text-embedding-3-large"
    openai_embedding_dimensions: int = Field(default=0, ge=0)  # 0 = model default
    embedding_timeout: float = Field(default=30.0, gt=0)
    embedding_max_retries: int = Field(default=2, ge=0)
    embedding_batch_size: int = Field(default=512, gt=0)
    ollama_base_url: str = "http://localhost:11434"

    # === Corpus ===
    corpus_dir: str = "data/corpus"
    corpus_extensions: str = ".pdf"
    corpus_urls: str = ""
    html_selector: str = "p"

    # === Chunking ===
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)

    # === Search ===
    search_top_k: int = Field(default=4, ge=0)
    search_max_top_k: int = Field(default=50, gt=0)
    search_max_query_chars: int = Field(default=2000, gt=0)
    # Build the index during app startup instead of on the first query.
    index_on_startup: bool = False
    # When False, queries before the first completed pass get a 503.
    auto_index_on_query: bool = True

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_chunk_window(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self

    def get_corpus_extensions(self) -> list[str]:
        """Return the recognised corpus extensions, lowercased with a leading dot."""
        extensions: list[str] = []
        for raw in self.corpus_extensions.split(","):
            ext = raw.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in extensions:
                extensions.append(ext)
        return extensions

    def get_corpus_urls(self) -> list[str]:
        """Return the configured web-page sources, in order."""
        return [u.strip() for u in self.corpus_urls.split(",") if u.strip()]

    def get_available_embedding_providers(self) -> list[str]:
        """Return embedding provider names that have the configuration they need."""
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers
