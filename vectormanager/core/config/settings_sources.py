"""
Configuration file sources for Vector Manager.

JSON and YAML configuration files are read into plain dictionaries and
deep-merged, later sources overriding earlier ones.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from loguru import logger

from core.exceptions import ConfigurationError

USER_CONFIG_PATH = Path.home() / '.vector-manager' / 'config.json'
PROJECT_CONFIG_NAME = '.vector-manager.json'


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Load a JSON or YAML configuration file.

    Args:
        path: Configuration file (.json, .yaml or .yml)

    Returns:
        Configuration dictionary (empty for an empty file)

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        content = path.read_text(encoding='utf-8')
        if path.suffix.lower() in ('.yaml', '.yml'):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content) if content.strip() else {}
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError('config_file', str(path), f"Cannot load configuration: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError('config_file', str(path), "Configuration root must be a mapping")
    return data


def find_config_files(project_dir: Optional[Path] = None) -> List[Path]:
    """Return existing discovered config files, user file first."""
    project_dir = project_dir or Path.cwd()
    candidates = [USER_CONFIG_PATH, project_dir / PROJECT_CONFIG_NAME]
    return [path for path in candidates if path.exists()]


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_discovered_files(project_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Merge discovered config files, skipping unreadable ones with a warning."""
    merged: Dict[str, Any] = {}
    for path in find_config_files(project_dir):
        try:
            merged = deep_merge(merged, load_config_file(path))
        except ConfigurationError as e:
            logger.warning(f"Skipping config file {path}: {e}")
    return merged
