"""Tests for config and capability derivation."""

import os
import tempfile

import yaml

from trendwise.capabilities import Capabilities
from trendwise.config import Config, _deep_merge


def test_load_defaults():
    """Config loads with defaults when no YAML file exists."""
    config = Config.load("/nonexistent/config.yaml")
    assert config.get("trends.max_total") == 30
    assert config.get("scraper.page_load_timeout") == 30
    assert config.get("scraper.selector_timeout") == 10
    assert config.get("logging.level") == "INFO"


def test_load_from_yaml():
    """Config merges YAML with defaults."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump({"trends": {"region": "GB"}, "logging": {"level": "DEBUG"}}, f)
        tmp_path = f.name

    try:
        config = Config.load(tmp_path)
        assert config.get("trends.region") == "GB"
        assert config.get("logging.level") == "DEBUG"
        # Defaults still present
        assert config.get("trends.max_total") == 30
    finally:
        os.unlink(tmp_path)


def test_get_nested():
    """Config supports dot-separated and varargs access."""
    config = Config.from_dict()
    assert config.get("media", "max_videos") == 3
    assert config.get("media.max_videos") == 3
    assert config.get("nonexistent.key", default="fallback") == "fallback"


def test_deep_merge_keeps_siblings():
    merged = _deep_merge({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
    assert merged == {"a": {"x": 1, "y": 3}}


def test_llm_provider_detection():
    assert Config.from_dict().llm_provider == "openai"
    assert Config.from_dict({"generation": {"model": "claude-sonnet-4-5-20250929"}}).llm_provider == "anthropic"
    assert Config.from_dict({"generation": {"model": "gemini-2.0-flash"}}).llm_provider == "google"
    assert Config.from_dict({"generation": {"provider": "anthropic", "model": "x"}}).llm_provider == "anthropic"


def test_unknown_model_has_no_provider():
    config = Config.from_dict({"generation": {"model": "llama-3-70b"}})
    assert config.llm_provider is None
    assert config.llm_api_key_env is None
    assert any("Cannot determine provider" in w for w in config.validate())
    assert Config.from_dict({"generation": {"provider": "mistral"}}).llm_provider is None


def test_generation_capability_unavailable_for_unknown_model(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    caps = Capabilities.from_config(Config.from_dict({"generation": {"model": "llama-3-70b"}}))

    assert not caps.generation.available
    assert "llama-3-70b" in caps.generation.reason


def test_generation_capability_names_missing_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    caps = Capabilities.from_config(Config.from_dict({"generation": {"model": "claude-sonnet-4-5-20250929"}}))

    assert not caps.generation.available
    assert caps.generation.reason == "ANTHROPIC_API_KEY not set"


def test_credential_reads_named_env_var(monkeypatch):
    monkeypatch.setenv("YOUTUBE_API_KEY", "yt-key")
    monkeypatch.setenv("UNSPLASH_ACCESS_KEY", "")
    config = Config.from_dict()
    assert config.credential("youtube_api_key") == "yt-key"
    # Empty values count as missing
    assert config.credential("unsplash_access_key") is None
    assert config.credential("unknown") is None


def test_validate_warnings(monkeypatch):
    """Config validation warns about every missing credential."""
    for key in ("OPENAI_API_KEY", "TWITTER_BEARER_TOKEN", "YOUTUBE_API_KEY", "UNSPLASH_ACCESS_KEY"):
        monkeypatch.delenv(key, raising=False)
    warnings = Config.from_dict().validate()
    assert any("OPENAI_API_KEY" in w for w in warnings)
    assert any("TWITTER_BEARER_TOKEN" in w for w in warnings)
    assert any("YOUTUBE_API_KEY" in w for w in warnings)
    assert any("UNSPLASH_ACCESS_KEY" in w for w in warnings)


def test_capabilities_from_config(monkeypatch):
    """Credential-gated channels are available only when their credential is set."""
    monkeypatch.setenv("TWITTER_BEARER_TOKEN", "bearer")
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
    monkeypatch.delenv("UNSPLASH_ACCESS_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    caps = Capabilities.from_config(Config.from_dict())

    assert caps.social.available and caps.social.credential == "bearer"
    assert not caps.video.available
    assert not caps.images.available
    assert caps.search_trends.available
    assert caps.articles.available
    assert caps.generation.available
    assert caps.summary()["video"] is False
    assert caps.video.reason == "credential not configured"
