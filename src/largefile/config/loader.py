"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (LARGEFILE__SECTION__KEY)
3. Legacy flat environment variables (CHUNK_SIZE, OVERLAP_LINES, MAX_FILE_SIZE,
   CACHE_SIZE, CACHE_TTL, CACHE_ENABLED)
4. YAML config file (explicit path, else ~/.config/largefile/config.yaml)
5. Built-in defaults (lowest priority)
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from largefile.config.models import (
    CacheConfig,
    ChunkingConfig,
    LargeFileConfig,
    LimitsConfig,
    LoggingConfig,
    ServerConfig,
)
from largefile.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/largefile/config.yaml").expanduser()

# Flat variable name -> (section, key)
LEGACY_ENV_VARS: dict[str, tuple[str, str]] = {
    "CHUNK_SIZE": ("chunking", "default_chunk_size"),
    "OVERLAP_LINES": ("chunking", "default_overlap"),
    "MAX_FILE_SIZE": ("chunking", "max_file_size_bytes"),
    "CACHE_SIZE": ("cache", "max_size_bytes"),
    "CACHE_TTL": ("cache", "ttl_ms"),
    "CACHE_ENABLED": ("cache", "enabled"),
}


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _legacy_env(environ: Mapping[str, str]) -> dict[str, Any]:
    """Map the flat variables of older deployments onto config sections."""
    config: dict[str, Any] = {}
    for name, (section, key) in LEGACY_ENV_VARS.items():
        raw = environ.get(name)
        if raw is None or raw == "":
            continue
        # Older deployments only disabled the cache with the literal "false"
        value: Any = raw.strip().lower() != "false" if name == "CACHE_ENABLED" else raw
        config.setdefault(section, {})[key] = value
    return config


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class LargeFileSettings(BaseSettings):
        """Root config. Env vars: LARGEFILE__CACHE__TTL_MS, LARGEFILE__LOGGING__LEVEL, etc."""

        model_config = SettingsConfigDict(
            env_prefix="LARGEFILE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        server: ServerConfig = ServerConfig()
        chunking: ChunkingConfig = ChunkingConfig()
        cache: CacheConfig = CacheConfig()
        limits: LimitsConfig = LimitsConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml + legacy env
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return LargeFileSettings


def load_config(config_path: Path | None = None, **kwargs: Any) -> LargeFileConfig:
    """Load config: defaults < yaml < legacy env < env vars < kwargs.

    Args:
        config_path: YAML config file. Must exist when given explicitly.
                     Defaults to ~/.config/largefile/config.yaml if present.
        **kwargs: Override values (highest precedence), keyed by section.

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On a missing explicit file, invalid YAML syntax or
            validation errors.
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError.file_not_found(str(config_path))
        yaml_config = _load_yaml(config_path)
    else:
        yaml_config = _load_yaml(GLOBAL_CONFIG_PATH)

    yaml_config = _deep_merge(yaml_config, _legacy_env(os.environ))

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return LargeFileConfig.model_validate(settings.model_dump())
