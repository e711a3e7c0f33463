"""
Unit tests for ghsemver.config module
"""
import json
import os
import logging
import pytest

from ghsemver.config import (
    load_config,
    get_config_path,
    get_default_config,
    merge_configs,
    apply_env_overrides,
    configure_logging,
)
from ghsemver.exit_codes import ConfigError


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Isolated HOME with no ghsemver environment."""
    monkeypatch.setenv('HOME', str(tmp_path))
    for key in list(os.environ):
        if key.startswith('GHSEMVER_'):
            monkeypatch.delenv(key)
    return tmp_path


class TestConfigPath:
    """Test config file discovery."""

    def test_default_path(self, home):
        assert get_config_path() == home / '.ghsemver' / 'config.json'

    def test_env_override(self, home, monkeypatch):
        path = home / 'custom.toml'
        path.write_text('[git]\nremote = "upstream"\n')
        monkeypatch.setenv('GHSEMVER_CONFIG', str(path))
        assert get_config_path() == path

    def test_yaml_in_config_dir(self, home):
        config_dir = home / '.ghsemver'
        config_dir.mkdir()
        (config_dir / 'config.yaml').write_text('git:\n  remote: upstream\n')
        assert get_config_path() == config_dir / 'config.yaml'


class TestLoadConfig:
    """Test configuration loading."""

    def test_no_file_gives_defaults(self, home):
        assert load_config() == get_default_config()

    def test_json(self, home):
        config_dir = home / '.ghsemver'
        config_dir.mkdir()
        (config_dir / 'config.json').write_text(json.dumps({"github": {"max_pages": 3}}))

        config = load_config()
        assert config['github']['max_pages'] == 3
        assert config['github']['page_size'] == 100

    def test_toml(self, home, monkeypatch):
        path = home / 'ghsemver.toml'
        path.write_text('[versioning]\ndefault_suffix = "snapshot"\n')
        monkeypatch.setenv('GHSEMVER_CONFIG', str(path))
        assert load_config()['versioning']['default_suffix'] == "snapshot"

    def test_yaml(self, home, monkeypatch):
        path = home / 'ghsemver.yml'
        path.write_text('github:\n  use_gh_cli: false\n')
        monkeypatch.setenv('GHSEMVER_CONFIG', str(path))
        assert load_config()['github']['use_gh_cli'] is False

    def test_empty_yaml(self, home, monkeypatch):
        path = home / 'empty.yaml'
        path.write_text('')
        monkeypatch.setenv('GHSEMVER_CONFIG', str(path))
        assert load_config() == get_default_config()

    @pytest.mark.parametrize("filename,content", [
        ('bad.json', '{not json'),
        ('bad.toml', '[git\nremote ='),
        ('bad.yaml', 'git: [unclosed'),
        ('list.json', '[1, 2]'),
    ])
    def test_malformed_file_is_config_error(self, home, monkeypatch, filename, content):
        path = home / filename
        path.write_text(content)
        monkeypatch.setenv('GHSEMVER_CONFIG', str(path))
        with pytest.raises(ConfigError):
            load_config()

    def test_env_override_applied(self, home, monkeypatch):
        monkeypatch.setenv('GHSEMVER_GIT_TIMEOUT', '5')
        assert load_config()['git']['timeout'] == 5


class TestMergeAndOverrides:
    """Test merge and environment override helpers."""

    def test_merge_is_deep(self):
        merged = merge_configs({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}, "b": 4})
        assert merged == {"a": {"x": 1, "y": 3}, "b": 4}

    def test_underscored_keys(self, home, monkeypatch):
        monkeypatch.setenv('GHSEMVER_GITHUB_MAX_PAGES', '20')
        monkeypatch.setenv('GHSEMVER_GITHUB_USE_GH_CLI', 'false')
        monkeypatch.setenv('GHSEMVER_VERSIONING_DEFAULT_SUFFIX', 'nightly')
        config = apply_env_overrides(get_default_config())
        assert config['github']['max_pages'] == 20
        assert config['github']['use_gh_cli'] is False
        assert config['versioning']['default_suffix'] == 'nightly'

    def test_float_value(self, home, monkeypatch):
        monkeypatch.setenv('GHSEMVER_GITHUB_BASE_DELAY', '0.5')
        assert apply_env_overrides(get_default_config())['github']['base_delay'] == 0.5

    def test_unknown_key_ignored(self, home, monkeypatch):
        monkeypatch.setenv('GHSEMVER_NOPE_KEY', 'x')
        assert apply_env_overrides(get_default_config()) == get_default_config()


class TestConfigureLogging:
    """Test log level configuration."""

    def test_sets_package_level(self):
        configure_logging({"logging": {"level": "debug"}})
        assert logging.getLogger("ghsemver").level == logging.DEBUG
        configure_logging(get_default_config())
        assert logging.getLogger("ghsemver").level == logging.WARNING

    def test_invalid_level(self):
        with pytest.raises(ConfigError):
            configure_logging({"logging": {"level": "chatty"}})
