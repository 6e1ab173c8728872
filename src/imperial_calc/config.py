"""Session configuration with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .tokens import DEFAULT_DENOMINATOR, SELECTABLE_DENOMINATORS

ENV_PREFIX = "IMPERIAL_CALC_"


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class SessionConfig:
    fraction_denominator: int = DEFAULT_DENOMINATOR
    history_size: int = 4
    error_mode_timeout: float = 1.5
    error_banner_timeout: float = 3.0
    auto_recover: bool = True

    def validate(self) -> None:
        if self.fraction_denominator not in SELECTABLE_DENOMINATORS:
            raise ValueError(
                f"fraction_denominator must be one of {SELECTABLE_DENOMINATORS}"
            )
        if self.history_size < 1:
            raise ValueError("history_size must be at least 1")
        if self.error_mode_timeout <= 0 or self.error_banner_timeout <= 0:
            raise ValueError("error timeouts must be positive")

    @classmethod
    def from_env(cls, environ: dict | None = None) -> "SessionConfig":
        """Build a config from ``IMPERIAL_CALC_*`` variables, defaults elsewhere."""
        env = os.environ if environ is None else environ
        config = cls()
        if f"{ENV_PREFIX}DENOMINATOR" in env:
            config.fraction_denominator = int(env[f"{ENV_PREFIX}DENOMINATOR"])
        if f"{ENV_PREFIX}HISTORY_SIZE" in env:
            config.history_size = int(env[f"{ENV_PREFIX}HISTORY_SIZE"])
        if f"{ENV_PREFIX}ERROR_MODE_TIMEOUT" in env:
            config.error_mode_timeout = float(env[f"{ENV_PREFIX}ERROR_MODE_TIMEOUT"])
        if f"{ENV_PREFIX}ERROR_BANNER_TIMEOUT" in env:
            config.error_banner_timeout = float(env[f"{ENV_PREFIX}ERROR_BANNER_TIMEOUT"])
        if f"{ENV_PREFIX}AUTO_RECOVER" in env:
            config.auto_recover = _env_bool(env[f"{ENV_PREFIX}AUTO_RECOVER"])
        config.validate()
        return config
