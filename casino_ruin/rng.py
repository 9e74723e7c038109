"""Per-trial random streams.

Seeding scheme
--------------
A campaign owns one integer seed (fixed by the caller, or drawn once from
the OS entropy pool). Trial ``i`` of starting-bankroll configuration ``c``
gets::

    SeedSequence(entropy=campaign_seed, spawn_key=(c, i))

SeedSequence runs its entropy and spawn key through a hashing mixer before
expanding them into generator state, so adjacent trial indices yield
unrelated MT19937 states. Adding the trial index to a clock reading would
instead seed neighbouring trials with neighbouring integers.

The mapping depends only on ``(campaign_seed, c, i)``, never on which worker
runs the trial or in what order.
"""

from __future__ import annotations

import logging
import numbers

import numpy as np

from .errors import EntropySourceError

log = logging.getLogger("CRS.RNG")


def draw_campaign_seed() -> int:
    """Draw a 128-bit campaign seed from the OS entropy pool."""
    try:
        seed = int(np.random.SeedSequence().entropy)
    except (OSError, NotImplementedError) as e:
        raise EntropySourceError(f"could not draw campaign seed: {e}") from e
    log.debug("Drew campaign seed %d from OS entropy", seed)
    return seed


def trial_seed_sequence(campaign_seed: int, trial_index: int, config_index: int = 0) -> np.random.SeedSequence:
    for value in (campaign_seed, trial_index, config_index):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise ValueError(f"seed inputs must be integers (got {value!r})")
    if campaign_seed < 0 or trial_index < 0 or config_index < 0:
        raise ValueError("campaign_seed, trial_index and config_index must be >= 0")
    return np.random.SeedSequence(entropy=int(campaign_seed), spawn_key=(int(config_index), int(trial_index)))


def trial_generator(campaign_seed: int, trial_index: int, config_index: int = 0) -> np.random.Generator:
    """Independent uniform stream for one trial, backed by MT19937."""
    seq = trial_seed_sequence(campaign_seed, trial_index, config_index)
    return np.random.Generator(np.random.MT19937(seq))
