"""
Tests for settings merging and validation.
"""
import json

import pytest

from dupecleaner.config import Config, build_config, load_user_config, validate_config
from dupecleaner.errors import ConfigError


class TestValidateConfig:

    def test_valid_config(self):
        config = validate_config(Config(url="http://localhost:2283", api_key="test-key"))
        assert config.url == "http://localhost:2283"

    def test_missing_url(self):
        with pytest.raises(ConfigError, match="--url"):
            validate_config(Config(api_key="test-key"))

    def test_missing_api_key(self):
        with pytest.raises(ConfigError, match="--api-key"):
            validate_config(Config(url="http://localhost:2283"))

    def test_trailing_slash_is_removed(self):
        config = validate_config(Config(url="http://localhost:2283/", api_key="test-key"))
        assert config.url == "http://localhost:2283"

    def test_config_is_immutable(self):
        config = Config(url="http://localhost:2283", api_key="k")
        with pytest.raises(Exception):
            config.url = "other"


class TestBuildConfig:

    def test_cli_overrides_env_and_file(self):
        config = build_config(
            {"url": "http://cli", "api_key": None, "dry_run": True},
            {"url": "http://file", "api_key": "file-key", "dry_run": False, "yes": True},
            environ={"IMMICH_URL": "http://env"},
        )
        assert config.url == "http://cli"
        assert config.api_key == "file-key"
        assert config.dry_run is True
        assert config.yes is True

    def test_env_overrides_file(self):
        config = build_config(
            {},
            {"url": "http://file", "api_key": "file-key"},
            environ={"IMMICH_API_KEY": "env-key"},
        )
        assert config.api_key == "env-key"
        assert config.url == "http://file"

    def test_defaults(self):
        config = build_config({"url": "http://cli", "api_key": "k"}, environ={})
        assert config.auto_delete is False
        assert config.dry_run is False
        assert config.yes is False
        assert config.verbose is False
        assert config.timeout == 30

    def test_missing_required_raises(self):
        with pytest.raises(ConfigError):
            build_config({"url": None, "api_key": None}, environ={})

    def test_invalid_timeout_raises(self):
        with pytest.raises(ConfigError):
            build_config({"url": "http://x", "api_key": "k"}, {"timeout": "soon"}, environ={})

    @pytest.mark.parametrize("key, value", [
        ("auto_delete", "false"),
        ("dry_run", "no"),
        ("yes", "true"),
        ("verbose", 1),
        ("auto_delete", None),
    ])
    def test_non_boolean_flags_in_file_are_rejected(self, tmp_path, key, value):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"url": "http://x", "api_key": "k", key: value}))

        with pytest.raises(ConfigError, match=f"Invalid value for '{key}'"):
            build_config({}, load_user_config(path), environ={})

    def test_json_false_keeps_auto_delete_off(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"url": "http://x", "api_key": "k", "auto_delete": false, "dry_run": false}')

        config = build_config({}, load_user_config(path), environ={})

        assert config.auto_delete is False
        assert config.dry_run is False

    def test_boolean_timeout_is_rejected(self):
        with pytest.raises(ConfigError, match="timeout"):
            build_config({"url": "http://x", "api_key": "k"}, {"timeout": True}, environ={})

    def test_numeric_timeout_from_file(self):
        config = build_config({"url": "http://x", "api_key": "k"}, {"timeout": 5}, environ={})
        assert config.timeout == 5.0

    def test_unknown_keys_are_ignored(self):
        config = build_config({"url": "http://x", "api_key": "k"}, {"albums": []}, environ={})
        assert config.url == "http://x"


class TestLoadUserConfig:

    def test_explicit_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_user_config(tmp_path / "nope.json")

    def test_implicit_default_file_may_be_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_user_config() == {}

    def test_implicit_default_file_is_read(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "dupecleaner_config.json").write_text('{"verbose": true}')
        assert load_user_config() == {"verbose": True}

    def test_reads_json_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"url": "http://x", "auto_delete": True}))
        assert load_user_config(path) == {"url": "http://x", "auto_delete": True}

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_user_config(path)

    def test_non_object_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_user_config(path)
