"""YAML config loader with defaults and credential lookup."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import click
import yaml
from dotenv import load_dotenv


def get_app_dir() -> Path:
    """Get the platform-specific application config directory.

    - macOS: ~/Library/Application Support/trendwise/
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\trendwise\\
    - Linux: ~/.config/trendwise/
    """
    return Path(click.get_app_dir("trendwise"))


FALLBACK_IMAGE_URL = (
    "https://images.unsplash.com/photo-1499750310107-5fef28a66643"
    "?w=800&h=400&fit=crop&crop=center&auto=format"
)
FALLBACK_FEATURED_IMAGE_URL = (
    "https://images.unsplash.com/photo-1499750310107-5fef28a66643"
    "?w=1200&h=630&fit=crop&crop=center&auto=format"
)
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

_DEFAULT_CONFIG = {
    "trends": {
        "region": "US",
        "twitter_woeid": 1,
        "per_source_limit": 15,
        "max_total": 30,
        "selection_pool": 10,
        "default_topic": "Latest Technology Trends and Innovations",
    },
    "media": {
        "max_images": 5,
        "max_videos": 3,
        "max_tweets": 5,
        "max_articles": 5,
    },
    "scraper": {
        "user_agent": DEFAULT_USER_AGENT,
        "page_load_timeout": 30,
        "selector_timeout": 10,
        "api_timeout": 15,
    },
    "generation": {
        "provider": None,  # Auto-detected from model name if not set
        "model": "gpt-4o",
        "max_tokens": 4000,
        "temperature": 0.7,
        "timeout": 120,
        "author": "TrendWise Editorial Team",
    },
    "credentials": {
        "twitter_bearer_token_env": "TWITTER_BEARER_TOKEN",
        "youtube_api_key_env": "YOUTUBE_API_KEY",
        "unsplash_access_key_env": "UNSPLASH_ACCESS_KEY",
    },
    "logging": {"level": "INFO", "file": None, "max_size_mb": 10, "backup_count": 5},
}

PROVIDER_MODEL_PREFIXES = {
    "openai": ("gpt-",),
    "anthropic": ("claude-",),
    "google": ("gemini-",),
}

PROVIDER_ENV_KEYS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "google": "GOOGLE_API_KEY",
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class Config:
    """Application configuration loaded from YAML with env var support."""

    def __init__(self, data: dict[str, Any], project_root: Path):
        self._data = data
        self.project_root = project_root

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> Config:
        """Load config from YAML file, merging with defaults.

        Resolution order:
        1. Explicit config_path argument (--config flag)
        2. CWD ./config/config.yaml (development mode)
        3. APP_DIR/config.yaml (installed mode)
        """
        if config_path is not None:
            config_path = Path(config_path)
            project_root = config_path.parent.parent if config_path.parent.name == "config" else config_path.parent
        else:
            cwd_config = Path.cwd() / "config" / "config.yaml"
            app_dir_config = get_app_dir() / "config.yaml"

            if cwd_config.exists():
                config_path = cwd_config
                project_root = Path.cwd()
            elif app_dir_config.exists():
                config_path = app_dir_config
                project_root = get_app_dir()
            else:
                config_path = cwd_config
                project_root = Path.cwd()

        env_path = project_root / ".env"
        if env_path.exists():
            load_dotenv(env_path)

        user_config: dict = {}
        if config_path.exists():
            with open(config_path) as f:
                user_config = yaml.safe_load(f) or {}

        data = _deep_merge(_DEFAULT_CONFIG, user_config)
        return cls(data, project_root)

    @classmethod
    def from_dict(cls, overrides: dict[str, Any] | None = None) -> Config:
        """Build a config from defaults plus in-memory overrides (no files, no .env)."""
        return cls(_deep_merge(_DEFAULT_CONFIG, overrides or {}), Path.cwd())

    def get(self, *keys: str, default: Any = None) -> Any:
        """Get a nested config value using dot-separated keys or varargs."""
        if len(keys) == 1 and "." in keys[0]:
            keys = tuple(keys[0].split("."))

        current = self._data
        for key in keys:
            if isinstance(current, dict):
                current = current.get(key)
                if current is None:
                    return default
            else:
                return default
        return current

    @property
    def log_file(self) -> Path | None:
        log = self.get("logging.file")
        return self.project_root / log if log else None

    @property
    def trends_config(self) -> dict:
        return self._data.get("trends", {})

    @property
    def media_config(self) -> dict:
        return self._data.get("media", {})

    @property
    def scraper(self) -> dict:
        return self._data.get("scraper", {})

    @property
    def generation(self) -> dict:
        return self._data.get("generation", {})

    @property
    def raw(self) -> dict:
        return self._data

    def env(self, key: str, default: str | None = None) -> str | None:
        """Get an environment variable."""
        return os.environ.get(key, default)

    def credential(self, name: str) -> str | None:
        """Resolve a named credential (e.g. ``youtube_api_key``) through its env var.

        Empty strings count as missing.
        """
        env_key = self.get("credentials", f"{name}_env")
        if not env_key:
            return None
        return self.env(env_key) or None

    @property
    def llm_provider(self) -> str | None:
        """Get the effective LLM provider (explicit or auto-detected from model).

        None when the provider is not supported or cannot be detected.
        """
        provider = self.get("generation.provider")
        if provider:
            return provider if provider in PROVIDER_ENV_KEYS else None
        model = self.get("generation.model", default="gpt-4o")
        for name, prefixes in PROVIDER_MODEL_PREFIXES.items():
            if model.startswith(prefixes):
                return name
        return None

    @property
    def llm_api_key_env(self) -> str | None:
        return PROVIDER_ENV_KEYS.get(self.llm_provider)

    def validate(self) -> list[str]:
        """Return a list of validation warnings."""
        warnings = []

        env_key = self.llm_api_key_env
        if env_key is None:
            warnings.append(
                f"Cannot determine provider for model '{self.get('generation.model')}' "
                f"(set generation.provider to 'openai', 'anthropic', or 'google')"
            )
        elif not self.env(env_key):
            warnings.append(f"{env_key} not set (required for {self.llm_provider} provider)")

        optional = {
            "twitter_bearer_token": "social trends and post search disabled",
            "youtube_api_key": "video trends and video search disabled",
            "unsplash_access_key": "image search uses the fallback stock image",
        }
        for name, effect in optional.items():
            if not self.credential(name):
                env_key = self.get("credentials", f"{name}_env")
                warnings.append(f"{env_key} not set ({effect})")
        return warnings
