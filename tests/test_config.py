"""Tests for config file loading."""

import json

import pytest

from siterisk.config import load_config
from siterisk.exceptions import ConfigurationError
from siterisk.scoring.categories import DEFAULT_CATEGORIES
from siterisk.scoring.factors import ScoringConfig


class TestLoadConfig:
    """Tests for load_config."""

    def test_no_path_returns_defaults(self):
        config, table = load_config(None)
        assert config == ScoringConfig()
        assert table is DEFAULT_CATEGORIES

    def test_yaml_weights(self, tmp_path):
        path = tmp_path / "weights.yaml"
        path.write_text("PublicSite: 5\nUserCountThreshold: 1000\n")

        config, table = load_config(path)

        assert config.public_site == 5
        assert config.user_count_threshold == 1000
        assert config.eeeu_permissions == 3
        assert table is DEFAULT_CATEGORIES

    def test_json_weights(self, tmp_path):
        path = tmp_path / "weights.json"
        path.write_text(json.dumps({"AnyoneLinks": 4, "HighUserCount": 0}))

        config, _ = load_config(str(path))

        assert config.anyone_links == 4
        assert config.high_user_count == 0

    def test_attribute_names_accepted(self, tmp_path):
        path = tmp_path / "weights.yaml"
        path.write_text("no_sensitivity_label: 1\n")
        config, _ = load_config(path)
        assert config.no_sensitivity_label == 1

    def test_empty_file_returns_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        config, table = load_config(path)
        assert config == ScoringConfig()
        assert table is DEFAULT_CATEGORIES

    def test_custom_categories(self, tmp_path):
        path = tmp_path / "weights.yaml"
        path.write_text(
            "Categories:\n"
            "  - {name: Fine, min: 0, max: 5, color: '#27ae60'}\n"
            "  - {name: Exposed, min: 6}\n"
        )
        _, table = load_config(path)
        assert table.names == ["Fine", "Exposed"]
        assert list(table)[-1].max_score is None

    def test_rejects_unknown_key(self, tmp_path):
        path = tmp_path / "weights.yaml"
        path.write_text("PublicSites: 5\n")
        with pytest.raises(ConfigurationError, match="PublicSites"):
            load_config(path)

    def test_rejects_non_integer_weight(self, tmp_path):
        path = tmp_path / "weights.yaml"
        path.write_text("PublicSite: high\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_rejects_category_gap(self, tmp_path):
        path = tmp_path / "weights.yaml"
        path.write_text(
            "Categories:\n"
            "  - {name: Fine, min: 0, max: 3}\n"
            "  - {name: Exposed, min: 6}\n"
        )
        with pytest.raises(ConfigurationError, match="Gap"):
            load_config(path)

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "weights.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path)

    def test_rejects_invalid_yaml(self, tmp_path):
        path = tmp_path / "weights.yaml"
        path.write_text("PublicSite: [3\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_config(tmp_path / "nope.yaml")
