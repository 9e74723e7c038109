# casino_ruin/__init__.py
"""
Casino Ruin: Monte Carlo estimates of a house's ruin probability under fixed
bets, with per-trial seeded random streams and surviving-bankroll histograms.
"""

__version__ = "1.0.0"

from .campaign import BankrollOutcome, CampaignResult, run_campaign
from .config import CampaignConfig
from .config_loader import load_config_file
from .config_validation import validate_config
from .errors import (
    CasinoRuinError,
    ConfigValidationError,
    EntropySourceError,
    NumericalError,
)
from .histogram import Histogram, HistogramBin, SurvivorTally, build_histogram, summarize_bankrolls
from .rng import draw_campaign_seed, trial_generator, trial_seed_sequence
from .trial import TrialConfig, TrialResult, run_trial

__all__ = [
    # Campaign
    "run_campaign",
    "CampaignConfig",
    "CampaignResult",
    "BankrollOutcome",
    "load_config_file",
    "validate_config",
    # Trial engine
    "TrialConfig",
    "TrialResult",
    "run_trial",
    # Seeding
    "draw_campaign_seed",
    "trial_seed_sequence",
    "trial_generator",
    # Histogram
    "Histogram",
    "HistogramBin",
    "SurvivorTally",
    "build_histogram",
    "summarize_bankrolls",
    # Errors
    "CasinoRuinError",
    "ConfigValidationError",
    "NumericalError",
    "EntropySourceError",
    # Package version
    "__version__",
]
