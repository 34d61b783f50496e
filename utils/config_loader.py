"""
Configuration management for the music organizer.

This module handles loading and validating configuration from YAML files
with sensible defaults and environment variable support.
"""

import json
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field

from utils.exceptions import ConfigurationError

DEFAULT_PATTERN = (
    "{artist_name}/{album_name} ({release_year})/{multi_disc_path}{track_num} - {track_name}.mp3"
)
ENV_PREFIX = "MUSIC_ORGANIZE_"
# Settings whose environment values are taken verbatim, never coerced
STRING_KEYS = {
    ("organize", "pattern"),
    ("organize", "required_extension"),
    ("organize", "unknown_placeholders"),
    ("logging", "level"),
    ("logging", "file"),
}
UNKNOWN_PLACEHOLDER_MODES = ('keep', 'reject')


@dataclass
class OrganizeSettings:
    """How target paths are planned and files are transferred."""

    pattern: str = DEFAULT_PATTERN
    required_extension: str = ".mp3"
    move: bool = False
    overwrite: bool = False
    dry_run: bool = False
    unknown_placeholders: str = "keep"
    max_collision_attempts: int = 10000


@dataclass
class FilesystemSettings:
    """Which files the directory walk picks up."""

    source_extensions: list = field(default_factory=lambda: ['.mp3'])
    ignored_dirs: list = field(default_factory=lambda: ['@eadir'])


@dataclass
class LoggingSettings:
    level: str = "WARNING"
    file: Optional[str] = None


@dataclass
class OrganizerConfig:
    """Structured configuration class with defaults."""

    organize: OrganizeSettings = field(default_factory=OrganizeSettings)
    filesystem: FilesystemSettings = field(default_factory=FilesystemSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file with defaults and environment variable support.

    Args:
        config_path: Path to configuration file (optional)

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If configuration is invalid
    """
    config_dict = _dataclass_to_dict(OrganizerConfig())

    if config_path and config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {config_path}: {e}")

        if file_config:
            if not isinstance(file_config, dict):
                raise ConfigurationError(
                    f"Config file {config_path} must contain a mapping at the top level"
                )
            config_dict = _merge_configs(config_dict, file_config)

    config_dict = _apply_env_overrides(config_dict)

    return validate_config(config_dict)


def _dataclass_to_dict(obj) -> Any:
    """Convert dataclass to dictionary recursively."""
    if hasattr(obj, '__dataclass_fields__'):
        return {
            field_name: _dataclass_to_dict(getattr(obj, field_name))
            for field_name in obj.__dataclass_fields__
        }
    elif isinstance(obj, dict):
        return {k: _dataclass_to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_dataclass_to_dict(item) for item in obj]
    else:
        return obj


def _merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge configuration dictionaries.

    Args:
        base: Base configuration dictionary
        override: Override configuration dictionary

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Environment variables are prefixed with MUSIC_ORGANIZE_ and use
    double underscores to separate nested keys.

    Examples:
        MUSIC_ORGANIZE_ORGANIZE__OVERWRITE=true
        MUSIC_ORGANIZE_LOGGING__LEVEL=DEBUG
    """
    for env_var, value in os.environ.items():
        if not env_var.startswith(ENV_PREFIX):
            continue

        key_path = env_var[len(ENV_PREFIX):].lower().split('__')
        if tuple(key_path) not in STRING_KEYS:
            value = _convert_env_value(value)
        _set_nested_value(config, key_path, value)

    return config


def _convert_env_value(value: str) -> Any:
    """Convert environment variable string to appropriate Python type."""
    if value.lower() in ('true', 'yes', 'on'):
        return True
    elif value.lower() in ('false', 'no', 'off'):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    if value.startswith(('[', '{')):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def _set_nested_value(config: Dict[str, Any], key_path: list, value: Any):
    """Set a value in a nested dictionary using a list of keys."""
    current = config

    for key in key_path[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[key_path[-1]] = value


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate configuration values and normalize the ones with a canonical form.

    Args:
        config: Configuration dictionary to validate

    Returns:
        The validated configuration dictionary

    Raises:
        ConfigurationError: If configuration is invalid
    """
    organize = config.get('organize', {})

    pattern = organize.get('pattern')
    if not isinstance(pattern, str) or not pattern.strip():
        raise ConfigurationError("organize.pattern must be a non-empty string")

    extension = organize.get('required_extension')
    if not isinstance(extension, str) or not extension.strip('. '):
        raise ConfigurationError("organize.required_extension must be a non-empty string")
    extension = extension.strip()
    if not extension.startswith('.'):
        extension = '.' + extension
    organize['required_extension'] = extension

    for flag in ('move', 'overwrite', 'dry_run'):
        if not isinstance(organize.get(flag), bool):
            raise ConfigurationError(f"organize.{flag} must be true or false")

    mode = organize.get('unknown_placeholders')
    if mode not in UNKNOWN_PLACEHOLDER_MODES:
        raise ConfigurationError(
            f"organize.unknown_placeholders must be one of {list(UNKNOWN_PLACEHOLDER_MODES)}"
        )

    attempts = organize.get('max_collision_attempts')
    if isinstance(attempts, bool) or not isinstance(attempts, int) or attempts < 1:
        raise ConfigurationError("organize.max_collision_attempts must be a positive integer")

    filesystem = config.get('filesystem', {})

    source_extensions = filesystem.get('source_extensions')
    if not isinstance(source_extensions, list) or not source_extensions:
        raise ConfigurationError("filesystem.source_extensions must be a non-empty list")
    if not all(isinstance(ext, str) and ext.strip(". ") for ext in source_extensions):
        raise ConfigurationError("filesystem.source_extensions entries must be non-empty strings")

    ignored_dirs = filesystem.get('ignored_dirs')
    if not isinstance(ignored_dirs, list):
        raise ConfigurationError("filesystem.ignored_dirs must be a list")
    if not all(isinstance(name, str) for name in ignored_dirs):
        raise ConfigurationError("filesystem.ignored_dirs entries must be strings")

    logging_config = config.get('logging', {})

    log_level = logging_config.get('level', 'WARNING')
    valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if not isinstance(log_level, str) or log_level.upper() not in valid_levels:
        raise ConfigurationError(f"logging.level must be one of {valid_levels}")

    return config


def get_config_template() -> str:
    """
    Get a YAML template for the configuration file.

    Returns:
        YAML configuration template as string
    """
    return """# Configuration for music-organize
organize:
  # Placeholders: {track_name} {artist_name} {all_artist_names} {album_name}
  # {track_num} {release_year} {release_date} {multi_disc_path}
  # {multi_disc_paren} {playlist_name} {context_name} {context_index} {canvas_id}
  pattern: "{artist_name}/{album_name} ({release_year})/{multi_disc_path}{track_num} - {track_name}.mp3"
  required_extension: .mp3
  move: false            # copy by default
  overwrite: false       # false: existing targets get "name (2).mp3", "name (3).mp3", ...
  dry_run: false
  unknown_placeholders: keep   # keep | reject
  max_collision_attempts: 10000

filesystem:
  source_extensions:
    - .mp3
  ignored_dirs:
    - "@eadir"

logging:
  level: WARNING
  file: null
"""
