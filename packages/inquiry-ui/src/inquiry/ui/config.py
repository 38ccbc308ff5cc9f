"""Library-wide configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class Config:
    """Defaults used by prompts and the terminal backend."""

    #: When set, every byte written to the terminal is appended to this file.
    write_log: str = ""
    #: Lines a list may take before it starts paginating (minimum 5).
    page_size: int = 15
    #: Whether list navigation wraps around at the ends.
    should_loop: bool = True
    #: Whether the terminal cursor is hidden while a list prompt is active.
    hide_cursor: bool = True

    @classmethod
    def from_env(cls) -> Config:
        """Build a config from ``INQUIRY_UI_*`` environment variables."""
        config = cls()
        config.write_log = os.environ.get("INQUIRY_UI_WRITE_LOG", config.write_log)
        page_size = os.environ.get("INQUIRY_UI_PAGE_SIZE")
        if page_size:
            try:
                config.page_size = max(5, int(page_size))
            except ValueError:
                raise ValueError(
                    f"INQUIRY_UI_PAGE_SIZE must be an integer, got {page_size!r}"
                ) from None
        config.should_loop = _env_bool("INQUIRY_UI_LOOP", config.should_loop)
        config.hide_cursor = _env_bool("INQUIRY_UI_HIDE_CURSOR", config.hide_cursor)
        return config


_global_config: Config | None = None


def get_config() -> Config:
    global _global_config
    if _global_config is None:
        _global_config = Config.from_env()
    return _global_config


def set_config(config: Config | None) -> None:
    global _global_config
    _global_config = config
