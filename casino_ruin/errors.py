from __future__ import annotations

from typing import List


class CasinoRuinError(Exception):
    """Base class for simulator errors."""


class ConfigValidationError(CasinoRuinError):
    """Raised when a campaign configuration fails validation."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class NumericalError(CasinoRuinError):
    """Raised when a bankroll becomes non-finite."""


class EntropySourceError(CasinoRuinError):
    """Raised when a campaign seed cannot be drawn from the OS entropy pool."""
