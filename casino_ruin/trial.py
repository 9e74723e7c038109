"""Single-trial engine: up to N fixed-size bets, stopping at the first ruin."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from .errors import NumericalError

# Uniforms are pulled from the trial's generator this many at a time.
DEFAULT_CHUNK_SIZE = 128


@dataclass(frozen=True)
class TrialConfig:
    starting_bankroll: float
    bet_amount: float
    bets_per_trial: int
    house_win_prob: float


@dataclass(frozen=True)
class TrialResult:
    final_bankroll: float
    bets_placed: int
    ruined: bool


def run_trial(config: TrialConfig, rng: Any, chunk_size: int = DEFAULT_CHUNK_SIZE) -> TrialResult:
    """
    Play one trial against ``rng`` (anything with ``random(size)`` returning
    uniforms on [0, 1), normally a ``numpy.random.Generator``).

    Each bet uses one uniform ``u``: the house wins ``bet_amount`` when
    ``u < house_win_prob`` and pays it out otherwise. Straight after each
    bet, a bankroll ``< bet_amount`` ends the trial as ruined. There is no
    check before the first bet, so a starting bankroll below the bet amount
    survives its first bet if the house wins it.

    Uniforms are drawn in chunks; within a chunk the bankroll path is
    accumulated left to right, which gives the same floats as adding one bet
    at a time. ``bets_placed`` counts the draws actually used.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    bankroll = float(config.starting_bankroll)
    bet = float(config.bet_amount)
    p = float(config.house_win_prob)
    remaining = int(config.bets_per_trial)
    placed = 0
    _check_finite(bankroll)

    while remaining > 0:
        n = min(chunk_size, remaining)
        draws = np.asarray(rng.random(n), dtype=np.float64)
        steps = np.where(draws < p, bet, -bet)
        path = np.cumsum(np.concatenate(([bankroll], steps)))[1:]

        ruined_at = np.flatnonzero(path < bet)
        if ruined_at.size:
            k = int(ruined_at[0])
            final = float(path[k])
            _check_finite(final)
            return TrialResult(final_bankroll=final, bets_placed=placed + k + 1, ruined=True)

        bankroll = float(path[-1])
        _check_finite(bankroll)
        placed += n
        remaining -= n

    return TrialResult(final_bankroll=bankroll, bets_placed=placed, ruined=False)


def _check_finite(bankroll: float) -> None:
    if not math.isfinite(bankroll):
        raise NumericalError(f"bankroll became non-finite: {bankroll!r}")
