"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "BLOGKIT_"


class Settings(BaseModel):
    app_name:         str = "blogkit"
    db_url:           str = "sqlite:///blogkit.db"
    site_url:         str = Field(default="",      description="Absolute site origin, no trailing slash")
    site_name:        str = Field(default="Blog",  description="Used in titles, feeds, and structured data")
    base_path:        str = Field(default="/blog", description="URL prefix of the blog listing and posts")
    posts_per_page:   int = Field(default=10,  ge=1, le=100, description="Listing page size (sitemap pagination)")
    excerpt_length:   int = Field(default=160, ge=1, description="Auto-excerpt length in characters")
    max_revisions:    int = Field(default=10,  ge=0, description="Max stored revisions per post; 0 disables pruning")
    output_dir:       str = Field(default="dist", description="Directory for exported HTML, JSON, and feeds")
    rss_limit:        int = Field(default=50, ge=1, description="Max items in rss.xml")
    rss_full_content: bool = Field(default=False, description="Use full HTML instead of the excerpt in RSS")
    log_level:        str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    def post_url(self, slug: str) -> str:
        return f"{self.site_url}{self.base_path}/{slug}"


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then BLOGKIT_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
