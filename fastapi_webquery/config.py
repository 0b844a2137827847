"""
Pagination / sort parameter names and page-size limits.

``Config`` values are immutable. A per-query ``Config`` only needs to set the
fields it overrides; ``Config.merge`` fills the rest from the process
defaults, which can be tuned through ``WEBQUERY_*`` environment variables.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_param: str = ""
    page_size_param: str = ""
    sort_param: str = ""
    default_page_size: int = 0
    max_page_size: int = 0

    def merge(self, defaults: Config | None = None) -> Config:
        """Return a copy with every empty/zero field taken from ``defaults``."""
        if defaults is None:
            defaults = get_default_config()
        return Config(
            page_param=self.page_param or defaults.page_param,
            page_size_param=self.page_size_param or defaults.page_size_param,
            sort_param=self.sort_param or defaults.sort_param,
            default_page_size=self.default_page_size or defaults.default_page_size,
            max_page_size=self.max_page_size or defaults.max_page_size,
        )


DEFAULT_CONFIG = Config(
    page_param="page",
    page_size_param="pageSize",
    sort_param="sort",
    default_page_size=10,
    max_page_size=100,
)


class WebQuerySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WEBQUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Request parameter names ──────────────────────────
    page_param: str = DEFAULT_CONFIG.page_param
    page_size_param: str = DEFAULT_CONFIG.page_size_param
    sort_param: str = DEFAULT_CONFIG.sort_param

    # ── Page size limits ─────────────────────────────────
    default_page_size: int = DEFAULT_CONFIG.default_page_size
    max_page_size: int = DEFAULT_CONFIG.max_page_size

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"


@lru_cache
def get_settings() -> WebQuerySettings:
    return WebQuerySettings()


@lru_cache
def get_default_config() -> Config:
    settings = get_settings()
    return Config(
        page_param=settings.page_param,
        page_size_param=settings.page_size_param,
        sort_param=settings.sort_param,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    ).merge(DEFAULT_CONFIG)
