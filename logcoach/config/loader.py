"""
Configuration loader for custom engine settings and WoW data mappings.

Allows users to provide overrides via YAML configuration files.
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, Optional, Any

from . import wow_data
from .settings import EngineSettings, get_settings, set_settings
from ..errors import ConfigError

logger = logging.getLogger(__name__)


VALID_ROLES = {wow_data.ROLE_TANK, wow_data.ROLE_HEALER, wow_data.ROLE_DPS}


class ConfigLoader:
    """Loads and applies custom configuration from YAML files."""

    @staticmethod
    def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to custom config file. If None, looks for:
                        1. logcoach.yaml in current directory
                        2. config/logcoach.yaml
                        3. ~/.logcoach/logcoach.yaml

        Returns:
            Configuration dictionary

        Raises:
            ConfigError: If an explicitly given file is missing or unreadable
        """
        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise ConfigError(f"Configuration file not found: {path}")
            return ConfigLoader._read(path)

        search_paths = [
            Path("logcoach.yaml"),
            Path("config/logcoach.yaml"),
            Path.home() / ".logcoach" / "logcoach.yaml",
        ]

        for path in search_paths:
            if path.exists():
                return ConfigLoader._read(path)

        logger.debug("No custom configuration file found, using defaults")
        return {}

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration root in {path} must be a mapping")

        logger.info(f"Loaded configuration from {path}")
        return config

    @staticmethod
    def apply_config(config: Dict[str, Any]) -> EngineSettings:
        """
        Apply custom configuration to the settings and wow_data modules.

        Args:
            config: Configuration dictionary from YAML

        Returns:
            The engine settings now in effect
        """
        if "classes" in config:
            for class_id, name in config["classes"].items():
                try:
                    class_id = int(class_id)
                    wow_data.CLASS_NAMES[class_id] = str(name)
                    logger.debug(f"Added custom class: {class_id} = {name}")
                except (ValueError, TypeError) as e:
                    logger.warning(f"Invalid class ID {class_id}: {e}")

        if "specializations" in config:
            for spec_id, entry in config["specializations"].items():
                try:
                    spec_id = int(spec_id)
                    role = entry.get("role", wow_data.ROLE_DPS)
                    if role not in VALID_ROLES:
                        raise ValueError(f"unknown role {role!r}")
                    wow_data.SPECIALIZATIONS[spec_id] = wow_data.SpecInfo(
                        name=str(entry["name"]),
                        role=role,
                        class_id=int(entry.get("class", 0)),
                    )
                    logger.debug(f"Added custom spec: {spec_id} = {entry['name']}")
                except (ValueError, TypeError, KeyError, AttributeError) as e:
                    logger.warning(f"Invalid spec ID {spec_id}: {e}")

        if "difficulties" in config:
            for diff_id, name in config["difficulties"].items():
                try:
                    diff_id = int(diff_id)
                    wow_data.DIFFICULTY_NAMES[diff_id] = str(name)
                    logger.debug(f"Added custom difficulty: {diff_id} = {name}")
                except (ValueError, TypeError) as e:
                    logger.warning(f"Invalid difficulty ID {diff_id}: {e}")

        engine = get_settings()
        if "engine" in config:
            engine = set_settings(engine.with_overrides(config["engine"] or {}))
            logger.debug(f"Applied engine overrides: {sorted(config['engine'] or {})}")

        logger.info("Custom configuration applied successfully")
        return engine


def load_and_apply_config(config_path: Optional[str] = None) -> EngineSettings:
    """
    Load and apply configuration in one step.

    Args:
        config_path: Optional path to custom config file

    Returns:
        The engine settings now in effect
    """
    loader = ConfigLoader()
    config = loader.load_config(config_path)
    if config:
        return loader.apply_config(config)
    return get_settings()
