import json

import pytest

from casino_ruin.config import (
    BANKROLLS_TO_TEST_DEFAULT,
    HOUSE_WIN_PROB_DEFAULT,
    CampaignConfig,
    coerce_count,
    coerce_probability,
)
from casino_ruin.config_loader import load_config_file
from casino_ruin.config_validation import assert_valid_config, is_valid_config, validate_config
from casino_ruin.errors import ConfigValidationError


@pytest.mark.parametrize(
    "value, expected, ok",
    [
        (0.5, 0.5, True),
        (1, 1.0, True),
        ("0.25", 0.25, True),
        (" 5/9 ", 5 / 9, True),
        ("1/0", None, False),
        ("half", None, False),
        ("", None, False),
        (True, None, False),
        (None, None, False),
    ],
)
def test_coerce_probability(value, expected, ok):
    normalized, success = coerce_probability(value)
    assert success is ok
    assert normalized == expected


@pytest.mark.parametrize(
    "value, expected, ok",
    [(10, 10, True), (1e6, 1_000_000, True), (2.5, None, False), (False, None, False), ("10", None, False)],
)
def test_coerce_count(value, expected, ok):
    assert coerce_count(value) == (expected, ok)


def test_empty_mapping_uses_defaults():
    cfg = CampaignConfig.from_mapping({})
    assert cfg.house_win_prob == HOUSE_WIN_PROB_DEFAULT
    assert cfg.bankrolls_to_test == BANKROLLS_TO_TEST_DEFAULT
    assert cfg.campaign_seed is None
    assert cfg.workers == 1


def test_overrides_win_and_none_is_ignored():
    cfg = CampaignConfig.from_mapping(
        {"bet_amount": 10, "total_trials": 100, "bankrolls_to_test": [100, 200]},
        bet_amount=5,
        total_trials=None,
        house_win_prob="1/2",
    )
    assert cfg.bet_amount == 5.0
    assert cfg.total_trials == 100
    assert cfg.house_win_prob == 0.5
    assert cfg.bankrolls_to_test == (100.0, 200.0)


def test_trial_config_carries_campaign_fields():
    cfg = CampaignConfig.from_mapping({"bet_amount": 10, "bets_per_trial": 7, "house_win_prob": 0.4})
    tc = cfg.trial_config(70)
    assert (tc.starting_bankroll, tc.bet_amount, tc.bets_per_trial, tc.house_win_prob) == (70.0, 10.0, 7, 0.4)


@pytest.mark.parametrize(
    "config, fragment",
    [
        ({"house_win_prob": 1.5}, "house_win_prob must be within [0, 1]"),
        ({"house_win_prob": -0.1}, "house_win_prob must be within [0, 1]"),
        ({"house_win_prob": "lots"}, "house_win_prob must be a number"),
        ({"bet_amount": 0}, "bet_amount must be > 0"),
        ({"bet_amount": float("inf")}, "bet_amount must be a finite number"),
        ({"bets_per_trial": 0}, "bets_per_trial must be > 0"),
        ({"total_trials": -3}, "total_trials must be > 0"),
        ({"histogram_bins": 0}, "histogram_bins must be > 0"),
        ({"histogram_bins": True}, "histogram_bins must be an integer"),
        ({"bankrolls_to_test": []}, "at least one starting bankroll"),
        ({"bankrolls_to_test": 500}, "bankrolls_to_test must be an array"),
        ({"bankrolls_to_test": [100, -1]}, "bankrolls_to_test[1] must be >= 0"),
        ({"bankrolls_to_test": ["x"]}, "bankrolls_to_test[0] must be a finite number"),
        ({"campaign_seed": -1}, "campaign_seed must be >= 0"),
        ({"campaign_seed": "abc"}, "campaign_seed must be an integer"),
        ({"workers": 0}, "workers must be >= 1"),
        ({"bogus": 1}, "unknown key: 'bogus'"),
    ],
)
def test_validation_errors(config, fragment):
    errs = validate_config(config)
    assert any(fragment in e for e in errs), errs
    assert not is_valid_config(config)
    with pytest.raises(ConfigValidationError) as exc:
        CampaignConfig.from_mapping(config)
    assert exc.value.errors == errs


def test_valid_config_passes():
    config = {
        "house_win_prob": "5/9",
        "bet_amount": 25,
        "bets_per_trial": 100,
        "total_trials": 1000,
        "histogram_bins": 15,
        "bankrolls_to_test": [0, 500],
        "campaign_seed": 7,
        "workers": 2,
    }
    assert validate_config(config) == []
    assert_valid_config(config)


def test_non_mapping_config():
    assert validate_config([1, 2]) == ["config must be an object"]


def test_load_yaml_with_campaign_block(tmp_path):
    p = tmp_path / "campaign.yaml"
    p.write_text(
        "campaign:\n"
        "  house_win_prob: 5/9\n"
        "  bet_amount: 25\n"
        "  bankrolls_to_test:\n"
        "    - 500\n"
        "    - 1000\n",
        encoding="utf-8",
    )
    data = load_config_file(p)
    assert data == {"house_win_prob": "5/9", "bet_amount": 25, "bankrolls_to_test": [500, 1000]}
    cfg = CampaignConfig.from_mapping(data)
    assert cfg.house_win_prob == pytest.approx(5 / 9)


def test_load_json(tmp_path):
    p = tmp_path / "campaign.json"
    p.write_text(json.dumps({"total_trials": 10, "campaign_seed": 3}), encoding="utf-8")
    assert load_config_file(p) == {"total_trials": 10, "campaign_seed": 3}


def test_load_rejects_non_mapping(tmp_path):
    p = tmp_path / "campaign.yml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config_file(p)


def test_to_dict_round_trips_through_from_mapping():
    cfg = CampaignConfig.from_mapping({"bankrolls_to_test": [100, 250], "campaign_seed": 9})
    assert CampaignConfig.from_mapping(cfg.to_dict()) == cfg
