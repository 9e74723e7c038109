"""Config file loading for campaign runs (JSON or YAML)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml


def load_config_file(path: str | Path) -> Dict[str, Any]:
    """Load a raw campaign mapping from JSON or YAML.

    A top-level ``campaign:`` block is unwrapped so a config can live inside a
    larger document. Validation is left to ``validate_config``.
    """

    p = Path(path)
    text = p.read_text(encoding="utf-8")

    if p.suffix.lower() in {".yaml", ".yml"}:
        data: Any = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")

    if not isinstance(data, dict):
        raise ValueError("Config root must be a JSON/YAML object (mapping).")

    campaign = data.get("campaign")
    if isinstance(campaign, dict):
        return dict(campaign)
    return data
