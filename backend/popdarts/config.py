from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from popdarts.scoring.game import MatchConfig


def _env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    target_score: int = 21
    advanced_closest_tracking: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            target_score=_env_int("POPDARTS_TARGET_SCORE", 21),
            advanced_closest_tracking=_env_bool("POPDARTS_ADVANCED_CLOSEST"),
            log_level=os.getenv("POPDARTS_LOG_LEVEL", "INFO").upper(),
        )

    def match_config(self, *, advanced_closest_tracking: bool | None = None) -> MatchConfig:
        if advanced_closest_tracking is None:
            advanced_closest_tracking = self.advanced_closest_tracking
        return MatchConfig(
            target_score=self.target_score,
            advanced_closest_tracking=advanced_closest_tracking,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
