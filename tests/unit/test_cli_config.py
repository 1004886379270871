"""
Unit tests for CLI configuration management.
"""

import json
import os

import pytest
import yaml

from cli.config import ConfigurationManager, DEFAULT_CONFIG


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run each test in an empty directory with no BBTK_ variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in list(os.environ):
        if key.startswith("BBTK_") or key == "BITBADGES_API_KEY":
            monkeypatch.delenv(key)
    return tmp_path


class TestLoading:
    """Test layered configuration loading."""

    def test_defaults(self):
        manager = ConfigurationManager()

        assert manager.get("ledger.api_url") == "https://api.bitbadges.io"
        assert manager.get("ledger.timeout") == 30
        assert manager.get("cli.output_format") == "table"
        assert manager.get_sources() == ["defaults"]

    def test_defaults_not_mutated(self):
        manager = ConfigurationManager()
        manager.set("ledger.timeout", 99)

        assert DEFAULT_CONFIG["ledger"]["timeout"] == 30

    def test_profile(self):
        manager = ConfigurationManager(profile="testnet")

        assert manager.get("ledger.testnet") is True
        assert "profile:testnet" in manager.get_sources()

    def test_yaml_file(self, isolated_config):
        path = isolated_config / "custom.yml"
        path.write_text(yaml.safe_dump({"ledger": {"timeout": 10}}))

        manager = ConfigurationManager(config_file=str(path))

        assert manager.get("ledger.timeout") == 10
        assert manager.get("ledger.max_retries") == 3

    def test_project_file_discovered(self, isolated_config):
        (isolated_config / ".bbtk.json").write_text(json.dumps({"cli": {"output_format": "json"}}))

        assert ConfigurationManager().get("cli.output_format") == "json"

    def test_file_overrides_profile(self, isolated_config):
        path = isolated_config / "custom.json"
        path.write_text(json.dumps({"ledger": {"testnet": False}}))

        manager = ConfigurationManager(config_file=str(path), profile="testnet")
        assert manager.get("ledger.testnet") is False

    def test_environment_overrides_file(self, isolated_config, monkeypatch):
        path = isolated_config / "custom.json"
        path.write_text(json.dumps({"ledger": {"timeout": 10}}))
        monkeypatch.setenv("BBTK_LEDGER_TIMEOUT", "15")
        monkeypatch.setenv("BBTK_LEDGER_MAX_RETRIES", "7")

        manager = ConfigurationManager(config_file=str(path))

        assert manager.get("ledger.timeout") == 15
        assert manager.get("ledger.max_retries") == 7
        assert "environment" in manager.get_sources()

    def test_environment_list_value(self, monkeypatch):
        monkeypatch.setenv("BBTK_VALIDATOR_DISABLED_RULES", '["subscription"]')
        assert ConfigurationManager().get("validator.disabled_rules") == ["subscription"]

    def test_missing_file_falls_back(self, isolated_config):
        manager = ConfigurationManager(config_file=str(isolated_config / "missing.yml"))
        assert manager.get("ledger.timeout") == 30

    def test_get_default(self):
        assert ConfigurationManager().get("ledger.nothing", "fallback") == "fallback"


class TestValidation:
    """Test configuration validation."""

    def test_defaults_valid(self):
        assert ConfigurationManager().validate() == []

    def test_invalid_values(self, monkeypatch):
        monkeypatch.setenv("BBTK_LEDGER_TIMEOUT", "0")
        monkeypatch.setenv("BBTK_CLI_OUTPUT_FORMAT", "csv")
        monkeypatch.setenv("BBTK_VALIDATOR_DISABLED_RULES", '["no_such_rule"]')

        errors = ConfigurationManager().validate()

        assert "ledger.timeout must be a positive integer" in errors
        assert "Invalid output format: csv" in errors
        assert "Unknown rule in validator.disabled_rules: no_such_rule" in errors

    def test_invalid_api_url(self):
        manager = ConfigurationManager()
        manager.set("ledger.api_url", "ftp://example.com")

        assert any("ledger API URL" in error for error in manager.validate())


class TestSaveAndRedact:
    """Test saving and display of configuration."""

    def test_save_yaml_round_trip(self, isolated_config):
        manager = ConfigurationManager()
        manager.set("ledger.timeout", 12)
        target = isolated_config / "saved.yml"
        manager.save(str(target))

        assert ConfigurationManager(config_file=str(target)).get("ledger.timeout") == 12

    def test_redacted_hides_api_key(self, monkeypatch):
        monkeypatch.setenv("BITBADGES_API_KEY", "super-secret")
        redacted = ConfigurationManager().redacted()

        assert redacted["ledger"]["api_key"] == "***"
        assert "super-secret" not in json.dumps(redacted)
