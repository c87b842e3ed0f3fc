"""Tests for cache configuration loading."""

import json
from pathlib import Path

from pydantic import ValidationError
import pytest

from modcache.core.config import CacheConfig, detect_format, load_cache_config, load_config


class TestDetectFormat:
    @pytest.mark.parametrize(
        ("name", "fmt"), [("a.json", "json"), ("a.yaml", "yaml"), ("a.YML", "yaml")]
    )
    def test_known(self, name: str, fmt: str):
        assert detect_format(name) == fmt

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unsupported config format"):
            detect_format("a.toml")


class TestLoadConfig:
    def test_yaml(self, tmp_path: Path):
        path = tmp_path / "modcache.yaml"
        path.write_text(
            "root: /var/cache/deno\n"
            "cache_setting:\n"
            "  - https://deno.land/std/\n"
            "max_redirects: 3\n"
            "client:\n"
            "  timeout_s: 5\n"
        )

        config = CacheConfig.model_validate(load_config(path))

        assert config.root == "/var/cache/deno"
        assert config.cache_setting == ["https://deno.land/std/"]
        assert config.max_redirects == 3
        assert config.client.timeout.read == 5

    def test_json(self, tmp_path: Path):
        path = tmp_path / "modcache.json"
        path.write_text(json.dumps({"cache_setting": "only", "allow_remote": False}))

        assert load_config(path) == {"cache_setting": "only", "allow_remote": False}

    def test_empty_yaml(self, tmp_path: Path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_config(path) == {}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("root: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_root(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)


class TestCacheConfig:
    def test_defaults(self):
        config = CacheConfig()

        assert config.cache_setting == "use"
        assert config.allow_remote is True
        assert config.read_only is None
        assert config.max_redirects == 10

    def test_invalid_cache_setting(self):
        with pytest.raises(ValidationError):
            CacheConfig(cache_setting="sometimes")

    def test_negative_redirects(self):
        with pytest.raises(ValidationError):
            CacheConfig(max_redirects=-1)

    def test_unknown_keys_ignored(self):
        assert CacheConfig.model_validate({"future_option": 1}) == CacheConfig()


class TestLoadCacheConfig:
    def test_defaults_without_file(self):
        assert load_cache_config() == CacheConfig()

    def test_auth_tokens_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test the environment fills auth tokens the file leaves unset."""
        monkeypatch.setenv("DENO_AUTH_TOKENS", "deno.land@tok")
        path = tmp_path / "modcache.yaml"
        path.write_text("allow_remote: true\n")

        assert load_cache_config(path).auth_tokens == "deno.land@tok"

    def test_file_tokens_win(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DENO_AUTH_TOKENS", "deno.land@env")
        path = tmp_path / "modcache.json"
        path.write_text(json.dumps({"auth_tokens": "deno.land@file"}))

        assert load_cache_config(path).auth_tokens == "deno.land@file"
