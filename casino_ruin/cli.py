from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, List

from . import __version__ as CRS_VERSION
from .campaign import run_campaign
from .config import CampaignConfig
from .config_loader import load_config_file
from .config_validation import validate_config
from .errors import CasinoRuinError, ConfigValidationError
from .logging_utils import setup_logging

log = logging.getLogger("casino-ruin")


# ------------------------------- Helpers ------------------------------------ #


def _print_validation_errors(errors: List[str]) -> None:
    print("failed validation:", file=sys.stderr)
    for e in errors:
        print(f"- {e}", file=sys.stderr)


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "house_win_prob": args.house_win_prob,
        "bet_amount": args.bet_amount,
        "bets_per_trial": args.bets_per_trial,
        "total_trials": args.trials,
        "histogram_bins": args.bins,
        "bankrolls_to_test": args.bankroll,
        "campaign_seed": args.seed,
        "workers": args.workers,
    }


# ------------------------------- Commands ----------------------------------- #


def _cmd_validate(args: argparse.Namespace) -> int:
    config_path = Path(args.config)
    try:
        data = load_config_file(config_path)
    except Exception as e:
        print(f"failed validation:\n- Could not load config: {e}", file=sys.stderr)
        return 2

    errors = validate_config(data)
    if errors:
        _print_validation_errors(errors)
        return 2
    print(f"OK: {config_path}")
    return 0


def run(args: argparse.Namespace) -> int:
    data: Dict[str, Any] = {}
    if args.config:
        try:
            data = load_config_file(args.config)
        except Exception as e:
            print(f"failed validation:\n- Could not load config: {e}", file=sys.stderr)
            return 2

    try:
        config = CampaignConfig.from_mapping(data, **_cli_overrides(args))
    except ConfigValidationError as e:
        _print_validation_errors(e.errors)
        return 2

    try:
        result = run_campaign(config, retain_bankrolls=not args.no_retain)
    except CasinoRuinError as e:
        log.error("Campaign aborted: %s", e)
        print(f"failed: {e}", file=sys.stderr)
        return 1

    json.dump(result.to_dict(), sys.stdout, indent=args.indent)
    sys.stdout.write("\n")
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    try:
        return run(args)
    except Exception:
        if os.environ.get("CRS_DEBUG", "0").lower() in ("1", "true", "yes"):
            print("\n--- CRS DEBUG TRACEBACK ---", flush=True)
            traceback.print_exc()
            print("--- END CRS DEBUG ---\n", flush=True)
        raise


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="casino-ruin",
        description="Casino Ruin - Monte Carlo gambler's-ruin campaigns",
    )
    parser.epilog = "Results are printed as JSON; rendering tables or charts is left to the caller."
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase verbosity (use -vv for debug)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {CRS_VERSION}")

    sub = parser.add_subparsers(dest="subcommand", required=False)

    # validate
    p_val = sub.add_parser("validate", help="Validate a campaign config (JSON or YAML)")
    p_val.add_argument("config", help="Path to config file")
    p_val.set_defaults(func=_cmd_validate)

    # run
    p_run = sub.add_parser("run", help="Run a campaign and print per-bankroll results")
    p_run.add_argument("config", nargs="?", help="Path to config file (JSON or YAML)")
    p_run.add_argument(
        "--house-win-prob",
        type=str,
        help="House win probability per bet, decimal or fraction (e.g. 5/9).",
    )
    p_run.add_argument("--bet-amount", type=float, help="Fixed bet size.")
    p_run.add_argument("--bets-per-trial", type=int, help="Bets per trial (N).")
    p_run.add_argument("--trials", type=int, help="Trials per starting bankroll (R).")
    p_run.add_argument("--bins", type=int, help="Histogram bin count (K).")
    p_run.add_argument(
        "--bankroll",
        type=float,
        action="append",
        help="Starting bankroll to test (repeatable; replaces the config list).",
    )
    p_run.add_argument("--seed", type=int, help="Campaign seed for reproducibility.")
    p_run.add_argument("--workers", type=int, help="Worker processes (default 1).")
    p_run.add_argument(
        "--no-retain",
        action="store_true",
        help="Stream final bankrolls into the summary instead of keeping all of them.",
    )
    p_run.add_argument("--indent", type=int, default=None, help="Indent the JSON output.")
    p_run.set_defaults(func=_cmd_run)

    return parser


def main(argv: List[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not hasattr(args, "func") or args.func is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
