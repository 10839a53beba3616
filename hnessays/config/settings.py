"""Application settings loaded from environment variables via pydantic-settings.

Sources, highest priority first:

  1. Environment variables, e.g. ``BATCH_SIZE=8``
  2. ``.env`` file in the working directory
  3. ``config/config.yaml`` (see :mod:`hnessays.config.loader`)
  4. The defaults below

Field ``search_hits_per_page`` maps to env var ``SEARCH_HITS_PER_PAGE``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """hnessays runtime settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="forbid",
    )

    # === Essay source ===
    essays_url: str = "https://www.paulgraham.com/articles.html"
    site_base_url: str = "https://www.paulgraham.com/"
    # Bare domain used by the slug URL check and the site-scoped query.
    site_domain: str = "paulgraham.com"

    # === Search API ===
    search_api_url: str = "https://hn.algolia.com/api/v1/search"
    search_tags: str = "story"
    search_hits_per_page: int = Field(default=50, ge=1, le=1000)
    # Seconds between query variants for the same essay.
    search_query_delay: float = Field(default=0.1, ge=0.0)

    # === Batch processing ===
    batch_size: int = Field(default=5, ge=1)
    # Seconds between batches.
    batch_delay: float = Field(default=1.0, ge=0.0)

    # === HTTP ===
    http_timeout: float = Field(default=30.0, gt=0.0)
    http_user_agent: str = "hnessays/0.1.0 (+https://github.com/hnessays)"

    # === Storage ===
    checkpoint_dir: str = "data/checkpoints"
    output_dir: str = "data/reports"

    # === App ===
    app_env: str = "development"
    log_level: str = "INFO"
