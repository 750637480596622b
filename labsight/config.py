"""
Configuration - Typed settings with environment overrides.

Environment variables:
    LABSIGHT_TICK_INTERVAL         Seconds between detection ticks (0.5)
    LABSIGHT_DETECTION_THRESHOLD   Minimum classifier score kept (0.5)
    LABSIGHT_BASE_LIKELIHOOD       Likelihood primed for every identity (0.8)
    LABSIGHT_HISTORY_CAPACITY      Records kept in the history ledger (50)
    LABSIGHT_FEED_MAX_AGE          Seconds a pushed batch stays current (2.0)
    LABSIGHT_LAB_CLASSES_ONLY      Keep only lab-relevant classifier labels (false)
    LABSIGHT_LOG_LEVEL             Logging level name (INFO)

Settings are read once at startup. Bad values raise ValueError here,
never inside the detection loop.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Mapping
import logging
import os


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass
class SessionConfig:
    """Settings for one detection session."""
    tick_interval: float = 0.5  # seconds
    detection_threshold: float = 0.5
    base_likelihood: float = 0.8
    history_capacity: int = 50
    feed_max_age: float = 2.0  # seconds
    lab_classes_only: bool = False  # drop labels outside LAB_RELEVANT_CLASSES

    def __post_init__(self):
        if self.tick_interval <= 0:
            raise ValueError(f"tick_interval must be positive, got {self.tick_interval}")
        if not 0.0 <= self.detection_threshold <= 1.0:
            raise ValueError(
                f"detection_threshold must be in [0, 1], got {self.detection_threshold}"
            )
        if not 0.0 <= self.base_likelihood <= 1.0:
            raise ValueError(f"base_likelihood must be in [0, 1], got {self.base_likelihood}")
        if self.history_capacity < 1:
            raise ValueError(f"history_capacity must be positive, got {self.history_capacity}")
        if self.feed_max_age <= 0:
            raise ValueError(f"feed_max_age must be positive, got {self.feed_max_age}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SessionConfig:
        """Build a config from LABSIGHT_* variables, defaults elsewhere."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            tick_interval=_read(env, "LABSIGHT_TICK_INTERVAL", float, defaults.tick_interval),
            detection_threshold=_read(
                env, "LABSIGHT_DETECTION_THRESHOLD", float, defaults.detection_threshold
            ),
            base_likelihood=_read(
                env, "LABSIGHT_BASE_LIKELIHOOD", float, defaults.base_likelihood
            ),
            history_capacity=_read(
                env, "LABSIGHT_HISTORY_CAPACITY", int, defaults.history_capacity
            ),
            feed_max_age=_read(env, "LABSIGHT_FEED_MAX_AGE", float, defaults.feed_max_age),
            lab_classes_only=_read(
                env, "LABSIGHT_LAB_CLASSES_ONLY", _parse_bool, defaults.lab_classes_only
            ),
        )


def _read(env: Mapping[str, str], name: str, parse: Callable, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {name}: {raw!r}")


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Not a boolean: {raw!r}")


def configure_logging(level: str | int | None = None) -> None:
    """
    Install a root handler for the application.

    level defaults to LABSIGHT_LOG_LEVEL, then INFO.
    """
    if level is None:
        level = os.getenv("LABSIGHT_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
