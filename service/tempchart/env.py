"""Helpers for dealing with environment variables.

Especially relevant for Cloud deployments, where most parameters
will be provided as env vars.
"""

import os
from pydantic import BaseModel

from service.tempchart.base import constants as bc


def _env_bool(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


def _env_int(name: str) -> int | None:
    val = os.getenv(name)
    if not val:
        return None
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {val!r}")


class ServerOptions(BaseModel):
    # Directory with {station}/meta.json and {station}/{year}.json files.
    data_dir: str
    # Base URL serving the same layout as data_dir. Takes precedence if set.
    data_url: str | None = None
    # Substitute synthetic data if the real data cannot be retrieved.
    offline: bool = False
    cache_size: int = bc.DEFAULT_CACHE_SIZE
    # Seed for synthetic data, for reproducible charts.
    seed: int | None = None

    @classmethod
    def from_env(cls):
        cache_size = _env_int("TEMPCHART_CACHE_SIZE")
        if cache_size is None:
            cache_size = bc.DEFAULT_CACHE_SIZE
        elif cache_size < 1:
            raise ValueError(f"TEMPCHART_CACHE_SIZE must be positive, got {cache_size}")

        return cls(
            data_dir=os.getenv("TEMPCHART_DATA_DIR", "./data"),
            data_url=os.getenv("TEMPCHART_DATA_URL") or None,
            offline=_env_bool("TEMPCHART_OFFLINE"),
            cache_size=cache_size,
            seed=_env_int("TEMPCHART_SEED"),
        )
