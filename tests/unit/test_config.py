"""
Tests for configuration loading and validation.
"""

from pathlib import Path

import pytest
from pageclip.config.config import Config, LazyConfig, find_config_file
from pydantic import ValidationError


@pytest.mark.unit
class TestConfigDefaults:
    def test_defaults(self):
        config = Config()
        assert config.fetch.timeout == 30.0
        assert config.fetch.max_retries == 0
        assert config.fetch.raise_for_status is True
        assert config.fetch.user_agent is None
        assert config.fetch.allowed_schemes == ["http", "https"]
        assert config.extraction.content_selectors == [
            "article",
            ".article-content",
            ".post-content",
            ".content",
            "main",
        ]
        assert config.extraction.paragraph_fallback_count == 3
        assert config.extraction.preserve_paragraph_breaks is True
        assert config.monitoring.log_file is None

    def test_default_selector_lists_are_independent(self):
        first = Config()
        first.extraction.content_selectors.append("#extra")
        assert "#extra" not in Config().extraction.content_selectors


@pytest.mark.unit
class TestConfigValidation:
    def test_empty_selectors_rejected(self):
        with pytest.raises(ValidationError):
            Config.model_validate({"extraction": {"content_selectors": ["  "]}})

    def test_empty_schemes_rejected(self):
        with pytest.raises(ValidationError):
            Config.model_validate({"fetch": {"allowed_schemes": []}})

    def test_schemes_normalized(self):
        config = Config.model_validate({"fetch": {"allowed_schemes": [" HTTPS "]}})
        assert config.fetch.allowed_schemes == ["https"]

    @pytest.mark.parametrize("field,value", [("timeout", 0), ("max_retries", -1), ("backoff_factor", -0.5)])
    def test_fetch_bounds(self, field, value):
        with pytest.raises(ValidationError):
            Config.model_validate({"fetch": {field: value}})

    def test_log_file_parent_created(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "pageclip.log"
        config = Config.model_validate({"monitoring": {"log_file": str(log_file)}})
        assert config.monitoring.log_file == str(log_file)
        assert log_file.parent.is_dir()


@pytest.mark.unit
class TestConfigSources:
    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PAGECLIP_FETCH__TIMEOUT", "7.5")
        monkeypatch.setenv("PAGECLIP_FETCH__MAX_RETRIES", "2")
        config = Config()
        assert config.fetch.timeout == 7.5
        assert config.fetch.max_retries == 2

    def test_from_yaml(self, tmp_path: Path):
        path = tmp_path / "pageclip.yaml"
        path.write_text(
            "fetch:\n  timeout: 12\n  user_agent: pageclip-test\n"
            "extraction:\n  paragraph_fallback_count: 5\n  preserve_paragraph_breaks: false\n",
            encoding="utf-8",
        )
        config = Config.from_yaml(path)
        assert config.fetch.timeout == 12
        assert config.fetch.user_agent == "pageclip-test"
        assert config.extraction.paragraph_fallback_count == 5
        assert config.extraction.preserve_paragraph_breaks is False

    def test_from_yaml_empty_file(self, tmp_path: Path):
        path = tmp_path / "pageclip.yaml"
        path.write_text("", encoding="utf-8")
        assert Config.from_yaml(path).fetch.timeout == 30.0

    def test_from_yaml_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_find_config_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None
        (tmp_path / "pageclip.yml").write_text("{}", encoding="utf-8")
        assert find_config_file() == tmp_path / "pageclip.yml"


@pytest.mark.unit
class TestLazyConfig:
    def test_loads_on_first_access(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "pageclip.yaml").write_text("fetch:\n  timeout: 3\n", encoding="utf-8")
        LazyConfig.reset()
        try:
            assert LazyConfig().fetch.timeout == 3
        finally:
            LazyConfig.reset()

    def test_invalid_file_falls_back_to_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "pageclip.yaml").write_text("fetch:\n  timeout: -1\n", encoding="utf-8")
        LazyConfig.reset()
        try:
            assert LazyConfig().fetch.timeout == 30.0
        finally:
            LazyConfig.reset()
