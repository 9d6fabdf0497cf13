"""Loader settings, read from the environment with CLI overrides."""
import os
from dataclasses import dataclass, replace

from sqlizer.batcher import DEFAULT_MAX_ROWS
from sqlizer.projector import DEFAULT_RESERVED_PREFIX, DEFAULT_TYPE_KEY
from sqlizer.streaming_parser import DEFAULT_BUF_SIZE


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class LoaderSettings:
    database: str = "sqlizer.sqlite3"
    max_rows_per_batch: int = DEFAULT_MAX_ROWS
    buffer_size: int = DEFAULT_BUF_SIZE
    type_key: str = DEFAULT_TYPE_KEY
    reserved_prefix: str = DEFAULT_RESERVED_PREFIX

    @classmethod
    def from_env(cls) -> "LoaderSettings":
        settings = cls(
            database=os.environ.get("SQLIZER_DATABASE", cls.database),
            max_rows_per_batch=_env_int("SQLIZER_MAX_ROWS", DEFAULT_MAX_ROWS),
            buffer_size=_env_int("SQLIZER_BUFFER_SIZE", DEFAULT_BUF_SIZE),
            type_key=os.environ.get("SQLIZER_TYPE_KEY", DEFAULT_TYPE_KEY),
            reserved_prefix=os.environ.get("SQLIZER_RESERVED_PREFIX", DEFAULT_RESERVED_PREFIX),
        )
        settings.validate()
        return settings

    def override(self, **changes) -> "LoaderSettings":
        """Copy with every non-None keyword applied."""
        settings = replace(self, **{k: v for k, v in changes.items() if v is not None})
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.max_rows_per_batch <= 0:
            raise ValueError("max_rows_per_batch must be > 0")
        if self.buffer_size <= 0:
            raise ValueError("buffer_size must be > 0")
        if not self.type_key:
            raise ValueError("type_key must not be empty")
        if not self.database:
            raise ValueError("database must not be empty")
