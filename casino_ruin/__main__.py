"""
Module entrypoint so tests can run:

  python -m casino_ruin run --seed 7 --trials 1000
  python -m casino_ruin validate path/to/config.yaml
"""
from __future__ import annotations

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
