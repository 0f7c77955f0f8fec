"""Configuration for the payout table and its logging."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_TOTAL_REWARD = "5460"
DEFAULT_SEED_ROWS = "1:50,1:30,2:20"


@dataclass(frozen=True, slots=True)
class RowSeed:
    """Initial recipient count and percentage for one payout row."""

    recipient_count: int
    percent_amount: Decimal
    currency_amount: Decimal | None = None


@dataclass(slots=True)
class PayoutSettings:
    """Initial state of the payout table."""

    total_reward: Decimal
    seed_rows: tuple[RowSeed, ...]
    currency_symbol: str = "$"


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    payouts: PayoutSettings
    log_level: str = "INFO"
    log_dir: Path | None = Path("logs")

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        def _parse_decimal(name: str, raw_value: str) -> Decimal:
            try:
                value = Decimal(raw_value.strip())
            except InvalidOperation:
                raise ValueError(f"{name} must be a number, got {raw_value!r}.") from None
            if not value.is_finite() or value < 0:
                raise ValueError(f"{name} must be a finite number >= 0.")
            return value

        def _parse_rows(value: str, default: str) -> Tuple[RowSeed, ...]:
            raw_value = value or default
            rows: list[RowSeed] = []
            for item in raw_value.split(","):
                item = item.strip()
                if not item:
                    continue
                if ":" not in item:
                    raise ValueError(
                        "Seed rows must follow '<recipient_count>:<percent>' format."
                    )
                raw_count, raw_percent = item.split(":", 1)
                raw_count = raw_count.strip()
                if not raw_count.isdigit() or int(raw_count) < 1:
                    raise ValueError(
                        "Invalid seed row: recipient count must be a positive integer."
                    )
                percent = _parse_decimal("Seed row percentage", raw_percent)
                if percent > 100:
                    raise ValueError("Invalid seed row: percentage must be 100 or less.")
                rows.append(RowSeed(recipient_count=int(raw_count), percent_amount=percent))
            return tuple(rows)

        payouts = PayoutSettings(
            total_reward=_parse_decimal(
                "PAYOUT_TOTAL_REWARD",
                _get_env("PAYOUT_TOTAL_REWARD", DEFAULT_TOTAL_REWARD),
            ),
            seed_rows=_parse_rows(_get_env("PAYOUT_SEED_ROWS", ""), default=DEFAULT_SEED_ROWS),
            currency_symbol=_get_env("PAYOUT_CURRENCY_SYMBOL", "$"),
        )
        log_dir = _get_env("LOG_DIR", "logs").strip()
        return cls(
            payouts=payouts,
            log_level=_get_env("LOG_LEVEL", "INFO"),
            log_dir=Path(log_dir) if log_dir else None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .log import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "payouts": {
                "total_reward": str(settings.payouts.total_reward),
                "seed_rows": len(settings.payouts.seed_rows),
                "currency_symbol": settings.payouts.currency_symbol,
            },
            "log_level": settings.log_level,
            "log_dir": str(settings.log_dir) if settings.log_dir else None,
        },
    )
    return settings
