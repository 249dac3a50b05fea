"""Configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class CrawlerSettings(BaseSettings):
    """Crawler configuration."""

    timeout: float = 10.0
    user_agent: str = "WebCrawl/0.1 (+https://github.com/webcrawl)"
    max_connections: int = 100
    max_keepalive_connections: int = 20
    concurrency: int = Field(default=10, ge=1)
    keep_going: bool = False

    model_config = {"env_prefix": "CRAWLER_"}


settings = CrawlerSettings()
