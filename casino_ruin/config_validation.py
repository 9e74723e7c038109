# casino_ruin/config_validation.py
from __future__ import annotations

import math
from typing import Any, Dict, List

from .config import coerce_amount, coerce_count, coerce_probability, unknown_keys
from .errors import ConfigValidationError


def is_valid_config(config: Dict[str, Any]) -> bool:
    return len(validate_config(config)) == 0


def assert_valid_config(config: Dict[str, Any]) -> None:
    errs = validate_config(config)
    if errs:
        raise ConfigValidationError(errs)


_POSITIVE_COUNTS = ("bets_per_trial", "total_trials", "histogram_bins")


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Return a flat list of hard validation errors for a raw campaign mapping.

    Absent keys are fine (defaults apply). Present keys must be:
      • house_win_prob     number or fraction string in [0, 1]
      • bet_amount         finite number > 0
      • bets_per_trial,
        total_trials,
        histogram_bins     integer > 0
      • bankrolls_to_test  non-empty list of finite numbers >= 0
      • campaign_seed      integer >= 0 (optional)
      • workers            integer >= 1 (optional)
    """
    errors: List[str] = []

    if not isinstance(config, dict):
        return ["config must be an object"]

    for key in unknown_keys(config):
        errors.append(f"unknown key: '{key}'")

    if "house_win_prob" in config:
        p, ok = coerce_probability(config["house_win_prob"])
        if not ok or p is None or not math.isfinite(p):
            errors.append("house_win_prob must be a number or a fraction like '5/9'")
        elif not 0.0 <= p <= 1.0:
            errors.append(f"house_win_prob must be within [0, 1] (got {p})")

    if "bet_amount" in config:
        b, ok = coerce_amount(config["bet_amount"])
        if not ok or b is None or not math.isfinite(b):
            errors.append("bet_amount must be a finite number")
        elif b <= 0:
            errors.append("bet_amount must be > 0")

    for key in _POSITIVE_COUNTS:
        if key in config:
            n, ok = coerce_count(config[key])
            if not ok or n is None:
                errors.append(f"{key} must be an integer")
            elif n <= 0:
                errors.append(f"{key} must be > 0")

    if "bankrolls_to_test" in config:
        errors.extend(_validate_bankrolls(config["bankrolls_to_test"]))

    seed = config.get("campaign_seed")
    if seed is not None:
        s, ok = coerce_count(seed)
        if not ok or s is None:
            errors.append("campaign_seed must be an integer")
        elif s < 0:
            errors.append("campaign_seed must be >= 0")

    workers = config.get("workers")
    if workers is not None:
        w, ok = coerce_count(workers)
        if not ok or w is None:
            errors.append("workers must be an integer")
        elif w < 1:
            errors.append("workers must be >= 1")

    return errors


# ----------------------------- helpers -------------------------------------------

def _validate_bankrolls(bankrolls: Any) -> List[str]:
    if not isinstance(bankrolls, (list, tuple)):
        return ["bankrolls_to_test must be an array"]
    if not bankrolls:
        return ["bankrolls_to_test must list at least one starting bankroll"]
    errors: List[str] = []
    for i, value in enumerate(bankrolls):
        v, ok = coerce_amount(value)
        if not ok or v is None or not math.isfinite(v):
            errors.append(f"bankrolls_to_test[{i}] must be a finite number")
        elif v < 0:
            errors.append(f"bankrolls_to_test[{i}] must be >= 0")
    return errors
