# tests/test_config.py
"""Tests for thresholds and lead scoring configuration."""

import dataclasses
import json

import pytest
from folio.config import (
    BudgetTier,
    LeadScoringConfig,
    SEOThresholds,
    load_data_file,
)


class TestSEOThresholds:
    """Test SEOThresholds loading."""

    def test_defaults(self):
        """Test default bounds and weights."""
        t = SEOThresholds()
        assert (t.title_min, t.title_max) == (30, 60)
        assert (t.description_min, t.description_max) == (120, 160)
        assert (t.title_weight, t.description_weight, t.keywords_weight) == (0.4, 0.3, 0.3)

    def test_from_env(self, monkeypatch):
        """Test that prefixed environment variables override defaults."""
        monkeypatch.setenv("FOLIO_SEO_TITLE_MAX", "65")
        monkeypatch.setenv("FOLIO_SEO_TITLE_WEIGHT", "0.5")

        t = SEOThresholds.from_env()

        assert t.title_max == 65
        assert t.title_weight == 0.5
        assert t.title_min == 30

    def test_from_env_ignores_invalid_values(self, monkeypatch):
        """Test that unparsable values keep the default."""
        monkeypatch.setenv("FOLIO_SEO_TITLE_MIN", "thirty")
        assert SEOThresholds.from_env().title_min == 30

    def test_from_file(self, tmp_path):
        """Test loading the 'seo' section of a YAML file."""
        path = tmp_path / "thresholds.yaml"
        path.write_text("seo:\n  title_min: 20\n  max_keywords: 5\n")

        t = SEOThresholds.from_file(str(path))

        assert t.title_min == 20
        assert t.max_keywords == 5
        assert t.title_max == 60

    def test_from_file_missing(self, tmp_path):
        """Test that a missing file yields defaults."""
        assert SEOThresholds.from_file(str(tmp_path / "nope.yaml")) == SEOThresholds()

    def test_to_dict(self):
        """Test that every field is exported."""
        data = SEOThresholds().to_dict()
        assert data["description_max"] == 160
        assert len(data) == len(dataclasses.fields(SEOThresholds))


class TestLeadScoringConfig:
    """Test LeadScoringConfig loading."""

    def test_is_immutable(self):
        """Test that the point table can't be changed."""
        config = LeadScoringConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.max_score = 50

    def test_dict_round_trip(self):
        """Test that to_dict output loads back to an equal config."""
        config = LeadScoringConfig()
        assert LeadScoringConfig.from_dict(config.to_dict()) == config

    def test_from_file_yaml(self, tmp_path):
        """Test loading a 'lead_scoring' section with budget tiers."""
        path = tmp_path / "scoring.yaml"
        path.write_text(
            "lead_scoring:\n"
            "  high_value_projects: [Consultation]\n"
            "  budget_tiers:\n"
            "    - markers: [discuss]\n"
            "      points: 25\n"
            "  max_score: 90\n"
        )

        config = LeadScoringConfig.from_file(str(path))

        assert config.high_value_projects == ("Consultation",)
        assert config.budget_tiers == (BudgetTier(markers=("discuss",), points=25),)
        assert config.max_score == 90
        assert config.company_points == 15

    def test_from_file_json_top_level(self, tmp_path):
        """Test a JSON file with the table at the top level."""
        path = tmp_path / "scoring.json"
        path.write_text(json.dumps({"phone_points": 5}))

        assert LeadScoringConfig.from_file(str(path)).phone_points == 5

    def test_from_file_missing(self, tmp_path):
        """Test that a missing file yields defaults."""
        assert LeadScoringConfig.from_file(str(tmp_path / "nope.yaml")) == LeadScoringConfig()


def test_load_data_file_json_and_yaml(tmp_path):
    """Test that files are parsed by extension."""
    json_path = tmp_path / "data.json"
    json_path.write_text('{"title": "Home"}')
    yaml_path = tmp_path / "data.yml"
    yaml_path.write_text("title: Home\n")
    empty_path = tmp_path / "empty.yaml"
    empty_path.write_text("")

    assert load_data_file(json_path) == {"title": "Home"}
    assert load_data_file(yaml_path) == {"title": "Home"}
    assert load_data_file(empty_path) == {}
