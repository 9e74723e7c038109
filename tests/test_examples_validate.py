from pathlib import Path

from casino_ruin.config import CampaignConfig
from casino_ruin.config_loader import load_config_file
from casino_ruin.config_validation import validate_config

EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


def test_example_configs_validate():
    paths = sorted(EXAMPLES.glob("*.yaml"))
    assert paths
    for path in paths:
        data = load_config_file(path)
        assert validate_config(data) == [], path
        cfg = CampaignConfig.from_mapping(data)
        assert cfg.campaign_seed is not None
