# src/config.py

from dataclasses import dataclass

from algorithms.apriori import min_support_count

# Example thresholds suggested by the interactive prompts
DEFAULT_MIN_SUPPORT_PERCENT = 40.0
DEFAULT_MIN_CONFIDENCE_PERCENT = 60.0


class ConfigError(ValueError):
    """Invalid mining thresholds or transaction count."""


@dataclass(frozen=True)
class MiningConfig:
    """
    Thresholds of one mining run, both expressed as percentages in [0, 100].
    """
    min_support_percent: float = DEFAULT_MIN_SUPPORT_PERCENT
    min_confidence_percent: float = DEFAULT_MIN_CONFIDENCE_PERCENT

    def validate(self) -> "MiningConfig":
        for name in ("min_support_percent", "min_confidence_percent"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ConfigError(f"{name} must be within [0, 100], got {value}")
        return self

    @property
    def min_confidence(self) -> float:
        return self.min_confidence_percent / 100.0

    def support_count(self, n_transactions: int) -> int:
        return min_support_count(self.min_support_percent, n_transactions)


def validate_transaction_count(value) -> int:
    """Parse the announced number of transactions; 0 is accepted as an empty batch."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"transaction count must be an integer, got {value!r}") from None
    if count < 0:
        raise ConfigError(f"transaction count must be a non-negative integer, got {value!r}")
    return count


def parse_percent(value, name: str) -> float:
    try:
        percent = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None
    if not 0 <= percent <= 100:
        raise ConfigError(f"{name} must be within [0, 100], got {value!r}")
    return percent
