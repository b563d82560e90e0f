"""Tests for resolver configuration."""

import json

import pytest

from protein_resolver import ResolverConfig, load_config


class TestResolverConfig:
    """Test defaults, validation and loading."""

    def test_defaults(self):
        """Should use the built-in defaults without a config file."""
        config = load_config()
        assert config == ResolverConfig()
        assert config.missed_cleavages == 2
        assert config.min_length == 6

    def test_load_from_json(self, tmp_path):
        """Should read values from a JSON file."""
        path = tmp_path / "resolver.json"
        path.write_text(json.dumps({"missed_cleavages": 1, "enzyme": "Trypsin/P"}))
        config = load_config(path)
        assert config.missed_cleavages == 1
        assert config.enzyme == "Trypsin/P"

    def test_overrides_take_precedence(self, tmp_path):
        """Should prefer explicit overrides and ignore None values."""
        path = tmp_path / "resolver.json"
        path.write_text(json.dumps({"missed_cleavages": 1, "min_length": 8}))
        config = load_config(path, missed_cleavages=3, min_length=None)
        assert config.missed_cleavages == 3
        assert config.min_length == 8

    def test_save_roundtrip(self, tmp_path):
        """Should load back a saved config unchanged."""
        path = tmp_path / "resolver.json"
        ResolverConfig(max_length=25, decoy_prefix="REV_").save(path)
        assert load_config(path) == ResolverConfig(max_length=25, decoy_prefix="REV_")

    def test_missing_file(self, tmp_path):
        """Should raise FileNotFoundError for a missing config file."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_unknown_key(self):
        """Should reject unknown config keys."""
        with pytest.raises(ValueError, match="Unknown config keys"):
            load_config(threads=4)

    @pytest.mark.parametrize(
        "values",
        [
            {"enzyme": "LysC"},
            {"missed_cleavages": -1},
            {"min_length": 0},
            {"min_length": 20, "max_length": 10},
        ],
    )
    def test_invalid_values(self, values):
        """Should reject inconsistent values."""
        with pytest.raises(ValueError):
            ResolverConfig(**values).validate()
