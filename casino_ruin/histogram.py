# casino_ruin/histogram.py
"""
Summaries of final bankrolls: ruin count plus an equal-width histogram of
the surviving bankrolls.

Binning rules:
  • no survivors → empty histogram, no bins
  • min == max   → width falls back to the bet amount; every survivor lands
                   in bin 0 and the other K-1 bins stay empty
  • otherwise    → width = (max - min) / K, index = floor((x - min) / width),
                   and an index of K or more (x == max, or float spill) is
                   folded into bin K-1. Bins are [lower, lower + width).
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import ConfigValidationError, NumericalError


@dataclass(frozen=True)
class HistogramBin:
    lower_edge: float
    upper_edge: float
    count: int
    percent_of_survivors: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lower_edge": self.lower_edge,
            "upper_edge": self.upper_edge,
            "count": self.count,
            "percent_of_survivors": self.percent_of_survivors,
        }


@dataclass(frozen=True)
class Histogram:
    minimum: Optional[float]
    maximum: Optional[float]
    bin_width: Optional[float]
    bins: Tuple[HistogramBin, ...]
    surviving_count: int
    ruin_count: int
    max_bin_count: int

    @property
    def is_empty(self) -> bool:
        return self.surviving_count == 0

    @property
    def total_count(self) -> int:
        return self.surviving_count + self.ruin_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_surviving": self.minimum,
            "max_surviving": self.maximum,
            "bin_width": self.bin_width,
            "max_bin_count": self.max_bin_count,
            "bins": [b.to_dict() for b in self.bins],
        }


class SurvivorTally:
    """
    Streaming accumulator over final bankrolls.

    Keeps the ruin count, survivor extremes and an exact count per distinct
    surviving value. Final bankrolls sit on the lattice B0 + k*bet, so the
    counter stays small however many trials are added, and a histogram built
    from it matches one built from the full list.
    """

    def __init__(self, bet_amount: float):
        if isinstance(bet_amount, bool) or not math.isfinite(bet_amount) or bet_amount <= 0:
            raise ConfigValidationError([f"bet_amount must be a finite number > 0 (got {bet_amount!r})"])
        self.bet_amount = float(bet_amount)
        self.ruin_count = 0
        self.surviving_count = 0
        self.minimum: Optional[float] = None
        self.maximum: Optional[float] = None
        self.counts: Counter = Counter()

    def add(self, bankroll: float, times: int = 1) -> None:
        x = float(bankroll)
        if not math.isfinite(x):
            raise NumericalError(f"final bankroll is non-finite: {bankroll!r}")
        if x < self.bet_amount:
            self.ruin_count += times
            return
        self.surviving_count += times
        self.counts[x] += times
        if self.minimum is None or x < self.minimum:
            self.minimum = x
        if self.maximum is None or x > self.maximum:
            self.maximum = x

    def extend(self, bankrolls: Iterable[float]) -> "SurvivorTally":
        for x in bankrolls:
            self.add(x)
        return self

    def merge(self, other: "SurvivorTally") -> "SurvivorTally":
        if other.bet_amount != self.bet_amount:
            raise ValueError("cannot merge tallies built for different bet amounts")
        self.ruin_count += other.ruin_count
        for x, n in other.counts.items():
            self.add(x, n)
        return self

    @property
    def total_count(self) -> int:
        return self.ruin_count + self.surviving_count


def bin_index(x: float, minimum: float, width: float, bins: int) -> int:
    idx = int(math.floor((x - minimum) / width))
    if idx >= bins:
        return bins - 1
    return idx


def build_histogram(tally: SurvivorTally, bins: int) -> Histogram:
    """Bin the surviving values held by ``tally`` into ``bins`` equal-width bins."""
    _check_bins(bins)

    if tally.surviving_count == 0 or tally.minimum is None or tally.maximum is None:
        return Histogram(
            minimum=None,
            maximum=None,
            bin_width=None,
            bins=(),
            surviving_count=0,
            ruin_count=tally.ruin_count,
            max_bin_count=0,
        )

    lo, hi = tally.minimum, tally.maximum
    degenerate = lo == hi
    width = tally.bet_amount if degenerate else (hi - lo) / bins

    counts: List[int] = [0] * bins
    for x, n in tally.counts.items():
        counts[0 if degenerate else bin_index(x, lo, width, bins)] += n

    survivors = tally.surviving_count
    out: List[HistogramBin] = []
    for i, count in enumerate(counts):
        lower = lo + i * width
        upper = hi if (not degenerate and i == bins - 1) else lo + (i + 1) * width
        out.append(
            HistogramBin(
                lower_edge=lower,
                upper_edge=upper,
                count=count,
                percent_of_survivors=count / survivors * 100.0,
            )
        )

    return Histogram(
        minimum=lo,
        maximum=hi,
        bin_width=width,
        bins=tuple(out),
        surviving_count=survivors,
        ruin_count=tally.ruin_count,
        max_bin_count=max(counts),
    )


def summarize_bankrolls(bankrolls: Iterable[float], bet_amount: float, bins: int) -> Histogram:
    _check_bins(bins)
    return build_histogram(SurvivorTally(bet_amount).extend(bankrolls), bins)


def _check_bins(bins: Any) -> None:
    if isinstance(bins, bool) or not isinstance(bins, int) or bins <= 0:
        raise ConfigValidationError([f"histogram_bins must be an integer > 0 (got {bins!r})"])
