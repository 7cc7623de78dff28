"""codeswitch runtime settings (Pydantic v2 Settings).

Centralises every configurable path / flag so that:

* The core never looks up ``~`` on its own.
* Environment overrides work (``CODESWITCH_CACHE_DIR``, etc.).
* Tests can inject locations via ``Settings(cache_dir=tmp_path)``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from codeswitch.core.paths import default_cache_dir, default_config_path


class Settings(BaseSettings):
    """All runtime configuration for codeswitch."""

    model_config = SettingsConfigDict(
        env_prefix="CODESWITCH_",
        extra="ignore",
    )

    # ── Cache ───────────────────────────────────────────────
    cache_dir: Path | None = None
    cache_filename: str = "codeswitch"

    # ── Default rules ───────────────────────────────────────
    config_path: Path | None = None
    defaults_max_size_kb: int = 64

    # ── Logging ─────────────────────────────────────────────
    log_level: str = "WARNING"
    log_json: bool = False

    @model_validator(mode="after")
    def _resolve_paths(self) -> "Settings":
        """Fill in any path that was not explicitly overridden."""
        if self.cache_dir is None:
            self.cache_dir = default_cache_dir()
        if self.config_path is None:
            self.config_path = default_config_path()
        return self

    # ── Convenience ─────────────────────────────────────────
    @property
    def cache_path(self) -> Path:
        """Full path to the single-slot cache file."""
        assert self.cache_dir is not None  # guaranteed after validation
        return self.cache_dir / self.cache_filename

    @property
    def defaults_max_size_bytes(self) -> int:
        return self.defaults_max_size_kb * 1024
