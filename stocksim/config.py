"""
Configuration: starting cash, storage location, quote backend.

Defaults match the simulator's out-of-the-box behavior; from_env overrides them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_STARTING_CASH = 100_000.0
DEFAULT_STORAGE_KEY = "@StockSimulatorApp:portfolio"
DEFAULT_FINNHUB_BASE_URL = "https://finnhub.io/api/v1"

# Environment variables read by LedgerConfig.from_env.
STARTING_CASH_ENV = "STOCKSIM_STARTING_CASH"
DATA_DIR_ENV = "STOCKSIM_DATA_DIR"
STORAGE_KEY_ENV = "STOCKSIM_STORAGE_KEY"
FINNHUB_API_KEY_ENV = "FINNHUB_API_KEY"
FINNHUB_BASE_URL_ENV = "FINNHUB_BASE_URL"


def _default_data_dir() -> Path:
    return Path.home() / ".stocksim"


@dataclass
class LedgerConfig:
    """Settings for building a LedgerService. No API key means mock quotes."""

    starting_cash: float = DEFAULT_STARTING_CASH
    storage_key: str = DEFAULT_STORAGE_KEY
    data_dir: Path = field(default_factory=_default_data_dir)
    finnhub_api_key: str | None = None
    finnhub_base_url: str = DEFAULT_FINNHUB_BASE_URL
    request_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.starting_cash < 0:
            raise ValueError(f"starting_cash must be >= 0, got {self.starting_cash}")
        self.data_dir = Path(self.data_dir)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "LedgerConfig":
        """Build config from environment variables; unset variables keep defaults."""
        env = os.environ if environ is None else environ
        kwargs: dict = {}
        if env.get(STARTING_CASH_ENV):
            kwargs["starting_cash"] = float(env[STARTING_CASH_ENV])
        if env.get(DATA_DIR_ENV):
            kwargs["data_dir"] = Path(env[DATA_DIR_ENV]).expanduser()
        if env.get(STORAGE_KEY_ENV):
            kwargs["storage_key"] = env[STORAGE_KEY_ENV]
        if env.get(FINNHUB_API_KEY_ENV):
            kwargs["finnhub_api_key"] = env[FINNHUB_API_KEY_ENV]
        if env.get(FINNHUB_BASE_URL_ENV):
            kwargs["finnhub_base_url"] = env[FINNHUB_BASE_URL_ENV]
        return cls(**kwargs)
