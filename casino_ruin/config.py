"""Campaign configuration defaults, coercion helpers and the CampaignConfig value type."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from fractions import Fraction
from typing import Any, Dict, List, Optional, Tuple

from .errors import ConfigValidationError
from .trial import TrialConfig

# Defaults mirror the classic 5/9 house-edge table: $25 bets, 100-bet lifetimes.
HOUSE_WIN_PROB_DEFAULT: float = 5.0 / 9.0
BET_AMOUNT_DEFAULT: float = 25.0
BETS_PER_TRIAL_DEFAULT: int = 100
TOTAL_TRIALS_DEFAULT: int = 1_000_000
HISTOGRAM_BINS_DEFAULT: int = 15
BANKROLLS_TO_TEST_DEFAULT: Tuple[float, ...] = (500.0,)
WORKERS_DEFAULT: int = 1

CONFIG_KEYS = (
    "house_win_prob",
    "bet_amount",
    "bets_per_trial",
    "total_trials",
    "histogram_bins",
    "bankrolls_to_test",
    "campaign_seed",
    "workers",
)


def coerce_probability(value: Any) -> Tuple[Optional[float], bool]:
    """Coerce a loosely-typed probability into a float.

    Accepts ints, floats, decimal strings (``"0.55"``) and fraction strings
    (``"5/9"``). Booleans are refused. The boolean in the return tuple
    indicates whether the coercion succeeded; range checks are left to
    validation.
    """

    if isinstance(value, bool):
        return None, False
    if isinstance(value, (int, float)):
        return float(value), True
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None, False
        try:
            return float(Fraction(text)), True
        except (ValueError, ZeroDivisionError):
            return None, False
    return None, False


def coerce_count(value: Any) -> Tuple[Optional[int], bool]:
    """Coerce an integer-valued count; integral floats such as ``1e6`` are accepted."""

    if isinstance(value, bool):
        return None, False
    if isinstance(value, int):
        return value, True
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value), True
    return None, False


def coerce_amount(value: Any) -> Tuple[Optional[float], bool]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None, False
    return float(value), True


@dataclass(frozen=True)
class CampaignConfig:
    house_win_prob: float = HOUSE_WIN_PROB_DEFAULT
    bet_amount: float = BET_AMOUNT_DEFAULT
    bets_per_trial: int = BETS_PER_TRIAL_DEFAULT
    total_trials: int = TOTAL_TRIALS_DEFAULT
    histogram_bins: int = HISTOGRAM_BINS_DEFAULT
    bankrolls_to_test: Tuple[float, ...] = field(default=BANKROLLS_TO_TEST_DEFAULT)
    campaign_seed: Optional[int] = None
    workers: int = WORKERS_DEFAULT

    @classmethod
    def from_mapping(cls, data: Optional[Dict[str, Any]] = None, **overrides: Any) -> "CampaignConfig":
        """Validate a raw mapping (plus keyword overrides) and build a config.

        Missing keys take the module defaults; ``None`` overrides are ignored
        so CLI flags that were not given leave file values in place.
        """
        from .config_validation import validate_config

        merged: Dict[str, Any] = dict(data or {})
        for key, value in overrides.items():
            if value is not None:
                merged[key] = value

        errors = validate_config(merged)
        if errors:
            raise ConfigValidationError(errors)

        kwargs: Dict[str, Any] = {}
        if "house_win_prob" in merged:
            kwargs["house_win_prob"] = coerce_probability(merged["house_win_prob"])[0]
        if "bet_amount" in merged:
            kwargs["bet_amount"] = coerce_amount(merged["bet_amount"])[0]
        for key in ("bets_per_trial", "total_trials", "histogram_bins"):
            if key in merged:
                kwargs[key] = coerce_count(merged[key])[0]
        if "bankrolls_to_test" in merged:
            kwargs["bankrolls_to_test"] = tuple(float(b) for b in merged["bankrolls_to_test"])
        if merged.get("campaign_seed") is not None:
            kwargs["campaign_seed"] = coerce_count(merged["campaign_seed"])[0]
        if merged.get("workers") is not None:
            kwargs["workers"] = coerce_count(merged["workers"])[0]
        return cls(**kwargs)

    def trial_config(self, starting_bankroll: float) -> TrialConfig:
        return TrialConfig(
            starting_bankroll=float(starting_bankroll),
            bet_amount=self.bet_amount,
            bets_per_trial=self.bets_per_trial,
            house_win_prob=self.house_win_prob,
        )

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["bankrolls_to_test"] = list(self.bankrolls_to_test)
        return out


def unknown_keys(data: Dict[str, Any]) -> List[str]:
    return sorted(k for k in data if k not in CONFIG_KEYS)
