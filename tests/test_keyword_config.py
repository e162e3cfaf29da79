import json

import pytest

from keyword_config import (
    DEFAULT_SCORING_CONFIG,
    ConfigurationError,
    build_scoring_config,
    load_scoring_config,
)


def base_config(**overrides):
    data = {
        "categories": [
            {"name": "service", "terms": ["chef", "cook"], "weight": 0.3},
            {"name": "booking", "terms": ["book"], "weight": 0.25},
            {"name": "spam", "terms": ["unsubscribe"], "weight": -0.5},
        ],
        "bonus_rules": [{"required_categories": ["service", "booking"], "bonus": 0.2}],
        "thresholds": {"low": 0.2, "medium": 0.4, "high": 0.65},
    }
    data.update(overrides)
    return data


def test_default_config_is_valid():
    names = [category.name for category in DEFAULT_SCORING_CONFIG.categories]
    assert names[0] == "service"
    assert "spam" in names
    assert DEFAULT_SCORING_CONFIG.forward_at == DEFAULT_SCORING_CONFIG.thresholds.medium


def test_valid_config_builds():
    config = build_scoring_config(base_config())
    assert config.match_cap == 3
    assert config.bonus_rules[0].required_categories == ("service", "booking")


def test_config_is_immutable():
    config = build_scoring_config(base_config())
    with pytest.raises(Exception):
        config.match_cap = 5


@pytest.mark.parametrize("overrides", [
    {"categories": []},
    {"thresholds": {"low": 0.4, "medium": 0.4, "high": 0.65}},
    {"thresholds": {"low": 0.2, "medium": 0.7, "high": 0.65}},
    {"thresholds": {"low": 0.2, "medium": 0.4, "high": 1.5}},
    {"categories": [
        {"name": "service", "terms": ["chef"], "weight": 0.3},
        {"name": "service", "terms": ["cook"], "weight": 0.3},
    ]},
    {"categories": [{"name": "service", "terms": [], "weight": 0.3}]},
    {"categories": [{"name": "service", "terms": ["chef", "  "], "weight": 0.3}]},
    {"categories": [{"name": "service", "terms": ["chef"], "weight": -0.3}]},
    {"categories": [
        {"name": "service", "terms": ["chef"], "weight": 0.3},
        {"name": "spam", "terms": ["offer"], "weight": 0.5},
    ]},
    {"bonus_rules": [{"required_categories": ["service", "missing"], "bonus": 0.2}]},
    {"length_bonus_weight": 0.5},
    {"match_cap": 0},
    {"forward_threshold": 1.2},
    {"forward_threshold": 0.05},
    {"forward_threshold": 0.1},
    {"strong_categories": ["missing"]},
    {"unexpected": True},
])
def test_invalid_config_rejected(overrides):
    with pytest.raises(ConfigurationError):
        build_scoring_config(base_config(**overrides))


def test_load_without_path_returns_default():
    assert load_scoring_config(None) is DEFAULT_SCORING_CONFIG


def test_load_from_json_file(tmp_path):
    path = tmp_path / "scoring.json"
    path.write_text(json.dumps(base_config(forward_threshold=0.3)))
    config = load_scoring_config(str(path))
    assert config.forward_at == 0.3
    assert [c.name for c in config.categories] == ["service", "booking", "spam"]


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(ConfigurationError):
        load_scoring_config(str(tmp_path / "nope.json"))


def test_load_malformed_json_raises(tmp_path):
    path = tmp_path / "scoring.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError):
        load_scoring_config(str(path))


def test_load_non_object_raises(tmp_path):
    path = tmp_path / "scoring.json"
    path.write_text("[]")
    with pytest.raises(ConfigurationError):
        load_scoring_config(str(path))


def test_config_without_service_category_is_valid():
    config = build_scoring_config({"categories": [{"name": "booking", "terms": ["book"], "weight": 0.3}]})
    assert config.strong_categories == ()


def test_default_config_keeps_service_as_strong_category():
    assert DEFAULT_SCORING_CONFIG.strong_categories == ("service",)


def test_spam_terms_are_lowercased():
    config = build_scoring_config(base_config(categories=[
        {"name": "service", "terms": ["chef"], "weight": 0.3},
        {"name": "booking", "terms": ["book"], "weight": 0.25},
        {"name": "spam", "terms": ["Unsubscribe"], "weight": -0.5},
    ]))
    assert config.spam_terms == frozenset({"unsubscribe"})
