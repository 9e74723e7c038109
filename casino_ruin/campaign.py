"""Campaign driver: R trials per starting bankroll, summarised per bankroll."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np

from .config import CampaignConfig
from .config_validation import assert_valid_config
from .histogram import Histogram, SurvivorTally, build_histogram
from .rng import draw_campaign_seed, trial_generator
from .trial import DEFAULT_CHUNK_SIZE, TrialConfig, run_trial

log = logging.getLogger("CRS.Campaign")


@dataclass(frozen=True)
class BankrollOutcome:
    starting_bankroll: float
    total_trials: int
    histogram: Histogram
    final_bankrolls: Optional[Tuple[float, ...]] = None

    @property
    def ruin_count(self) -> int:
        return self.histogram.ruin_count

    @property
    def surviving_count(self) -> int:
        return self.histogram.surviving_count

    @property
    def ruin_probability(self) -> float:
        return self.ruin_count / self.total_trials

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "starting_bankroll": self.starting_bankroll,
            "ruin_count": self.ruin_count,
            "ruin_probability": self.ruin_probability,
            "surviving_count": self.surviving_count,
        }
        record.update(self.histogram.to_dict())
        return record


@dataclass(frozen=True)
class CampaignResult:
    config: CampaignConfig
    campaign_seed: int
    outcomes: Tuple[BankrollOutcome, ...]

    def outcome_for(self, starting_bankroll: float) -> BankrollOutcome:
        for outcome in self.outcomes:
            if outcome.starting_bankroll == starting_bankroll:
                return outcome
        raise KeyError(starting_bankroll)

    def to_records(self) -> List[Dict[str, Any]]:
        return [o.to_record() for o in self.outcomes]

    def to_dict(self) -> Dict[str, Any]:
        config = self.config.to_dict()
        config["campaign_seed"] = self.campaign_seed
        return {"config": config, "results": self.to_records()}


def partition_trials(total_trials: int, workers: int) -> List[Tuple[int, int]]:
    """Split trial indices [0, total_trials) into at most ``workers`` contiguous ranges."""
    workers = max(1, min(workers, total_trials))
    base, extra = divmod(total_trials, workers)
    ranges: List[Tuple[int, int]] = []
    start = 0
    for w in range(workers):
        stop = start + base + (1 if w < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def run_trial_range(
    trial_config: TrialConfig,
    campaign_seed: int,
    config_index: int,
    start: int,
    stop: int,
    retain: bool = True,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Union[np.ndarray, SurvivorTally]:
    """
    Run trials ``start..stop-1`` for one starting bankroll.

    Each trial builds its own generator from (campaign seed, config index,
    trial index). Returns the final bankrolls in trial order, or a
    ``SurvivorTally`` when they are not retained.
    """
    if retain:
        finals = np.empty(stop - start, dtype=np.float64)
        for offset, i in enumerate(range(start, stop)):
            rng = trial_generator(campaign_seed, i, config_index)
            finals[offset] = run_trial(trial_config, rng, chunk_size).final_bankroll
        return finals

    tally = SurvivorTally(trial_config.bet_amount)
    for i in range(start, stop):
        rng = trial_generator(campaign_seed, i, config_index)
        tally.add(run_trial(trial_config, rng, chunk_size).final_bankroll)
    return tally


def run_bankroll(
    config: CampaignConfig,
    config_index: int,
    campaign_seed: int,
    executor: Optional[Executor] = None,
    workers: int = 1,
    retain_bankrolls: bool = True,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> BankrollOutcome:
    starting_bankroll = config.bankrolls_to_test[config_index]
    trial_config = config.trial_config(starting_bankroll)
    ranges = partition_trials(config.total_trials, workers if executor is not None else 1)
    log.debug("Bankroll %s: trial ranges %s", starting_bankroll, ranges)

    args = (trial_config, campaign_seed, config_index)
    if executor is not None and len(ranges) > 1:
        futures = [
            executor.submit(run_trial_range, *args, start, stop, retain_bankrolls, chunk_size)
            for start, stop in ranges
        ]
        parts = [f.result() for f in futures]
    else:
        parts = [run_trial_range(*args, start, stop, retain_bankrolls, chunk_size) for start, stop in ranges]

    finals: Optional[Tuple[float, ...]] = None
    if retain_bankrolls:
        merged = np.concatenate(parts) if parts else np.empty(0)
        finals = tuple(merged.tolist())
        tally = SurvivorTally(config.bet_amount).extend(finals)
    else:
        tally = SurvivorTally(config.bet_amount)
        for part in parts:
            tally.merge(part)

    histogram = build_histogram(tally, config.histogram_bins)
    if histogram.total_count != config.total_trials:
        raise RuntimeError(
            f"collated {histogram.total_count} trials for bankroll {starting_bankroll}, "
            f"expected {config.total_trials}"
        )

    return BankrollOutcome(
        starting_bankroll=starting_bankroll,
        total_trials=config.total_trials,
        histogram=histogram,
        final_bankrolls=finals,
    )


def run_campaign(
    config: CampaignConfig,
    *,
    workers: Optional[int] = None,
    retain_bankrolls: bool = True,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> CampaignResult:
    """
    Run every configured starting bankroll and summarise each one.

    ``workers`` overrides ``config.workers``; with more than one worker the
    trials of each bankroll are split into contiguous index ranges and run
    on a process pool. The outcome depends only on the config and campaign
    seed, not on the worker count.

    The config is validated before any trial runs; a bad config raises
    ``ConfigValidationError``.
    """
    assert_valid_config(config.to_dict())
    if workers is not None:
        assert_valid_config({"workers": workers})

    seed =config.campaign_seed if config.campaign_seed is not None else draw_campaign_seed()
    n_workers = workers if workers is not None else config.workers
    log.info(
        "Campaign start: p=%.5f bet=%s bets/trial=%d trials=%d bankrolls=%s workers=%d",
        config.house_win_prob,
        config.bet_amount,
        config.bets_per_trial,
        config.total_trials,
        list(config.bankrolls_to_test),
        n_workers,
    )
    log.debug("Campaign seed: %d", seed)

    outcomes: List[BankrollOutcome] = []
    executor: Optional[ProcessPoolExecutor] = None
    if n_workers > 1:
        executor = ProcessPoolExecutor(max_workers=n_workers)
    try:
        for idx, bankroll in enumerate(config.bankrolls_to_test):
            t0 = time.perf_counter()
            outcome = run_bankroll(
                config,
                idx,
                seed,
                executor=executor,
                workers=n_workers,
                retain_bankrolls=retain_bankrolls,
                chunk_size=chunk_size,
            )
            log.info(
                "Bankroll %s: ruin %d/%d (%.5f) in %.2fs",
                bankroll,
                outcome.ruin_count,
                outcome.total_trials,
                outcome.ruin_probability,
                time.perf_counter() - t0,
            )
            outcomes.append(outcome)
    finally:
        if executor is not None:
            executor.shutdown()

    return CampaignResult(config=config, campaign_seed=seed, outcomes=tuple(outcomes))
