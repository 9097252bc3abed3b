"""
Configuration settings for the combat log metrics engine.

Handles environment variables and tunable heuristics (bucket width,
avoidable-damage thresholds, validation limits) for every parse call.
"""

import os
import logging
from typing import Dict, Any, Tuple
from dataclasses import dataclass, field, fields, replace

from ..errors import ConfigError


ENV_PREFIX = "LOGCOACH_"


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_tuple(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class EngineSettings:
    """Tunable constants for parsing and aggregation."""

    # Timeline
    bucket_width_seconds: int = 5

    # Avoidable damage
    avoidable_top_n: int = 5
    critical_damage_fraction: float = 0.10
    melee_ability_name: str = "Melee"
    unknown_ability_name: str = "Unknown Ability"

    # Identifier conventions
    player_prefix: str = "Player-"
    hostile_prefixes: Tuple[str, ...] = ("Creature-", "Vehicle-")

    # Validator
    min_log_bytes: int = 100
    min_log_lines: int = 2
    validation_sample_lines: int = 20
    validation_required_matches: int = 2

    # Tokenizer
    min_line_length: int = 20

    # Output sizes
    digest_max_chars: int = 2000
    excerpt_max_lines: int = 5000
    prefilter_max_lines: int = 500

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Load engine settings from environment variables."""
        defaults = cls()
        return cls(
            bucket_width_seconds=int(_env("BUCKET_WIDTH", str(defaults.bucket_width_seconds))),
            avoidable_top_n=int(_env("AVOIDABLE_TOP_N", str(defaults.avoidable_top_n))),
            critical_damage_fraction=float(
                _env("CRITICAL_FRACTION", str(defaults.critical_damage_fraction))
            ),
            melee_ability_name=_env("MELEE_NAME", defaults.melee_ability_name),
            unknown_ability_name=_env("UNKNOWN_ABILITY_NAME", defaults.unknown_ability_name),
            player_prefix=_env("PLAYER_PREFIX", defaults.player_prefix),
            hostile_prefixes=_env_tuple("HOSTILE_PREFIXES", defaults.hostile_prefixes),
            min_log_bytes=int(_env("MIN_LOG_BYTES", str(defaults.min_log_bytes))),
            min_log_lines=int(_env("MIN_LOG_LINES", str(defaults.min_log_lines))),
            validation_sample_lines=int(
                _env("VALIDATION_SAMPLE", str(defaults.validation_sample_lines))
            ),
            validation_required_matches=int(
                _env("VALIDATION_MATCHES", str(defaults.validation_required_matches))
            ),
            min_line_length=int(_env("MIN_LINE_LENGTH", str(defaults.min_line_length))),
            digest_max_chars=int(_env("DIGEST_MAX_CHARS", str(defaults.digest_max_chars))),
            excerpt_max_lines=int(_env("EXCERPT_MAX_LINES", str(defaults.excerpt_max_lines))),
            prefilter_max_lines=int(
                _env("PREFILTER_MAX_LINES", str(defaults.prefilter_max_lines))
            ),
        )

    def with_overrides(self, overrides: Dict[str, Any]) -> "EngineSettings":
        """
        Return a copy with the given fields replaced.

        Args:
            overrides: Mapping of field name to new value

        Returns:
            New EngineSettings instance

        Raises:
            ConfigError: If a key is not a settings field
        """
        known = {f.name: f for f in fields(self)}
        updates = {}
        for key, value in overrides.items():
            if key not in known:
                raise ConfigError(f"Unknown engine setting: {key}")
            if key == "hostile_prefixes":
                value = tuple(value)
            updates[key] = value
        return replace(self, **updates)

    def validate(self) -> "EngineSettings":
        """Validate configuration settings."""
        errors = []

        if self.bucket_width_seconds <= 0:
            errors.append(f"bucket_width_seconds must be positive: {self.bucket_width_seconds}")
        if self.avoidable_top_n < 0:
            errors.append(f"avoidable_top_n cannot be negative: {self.avoidable_top_n}")
        if not (0.0 <= self.critical_damage_fraction <= 1.0):
            errors.append(
                f"critical_damage_fraction must be within [0, 1]: {self.critical_damage_fraction}"
            )
        if not self.player_prefix:
            errors.append("player_prefix cannot be empty")
        if self.validation_required_matches > self.validation_sample_lines:
            errors.append("validation_required_matches exceeds validation_sample_lines")
        if self.digest_max_chars < 80:
            errors.append(f"digest_max_chars too small: {self.digest_max_chars}")

        if errors:
            raise ConfigError(f"Configuration validation failed: {'; '.join(errors)}")
        return self

    def log_configuration(self):
        """Log current configuration."""
        logger = logging.getLogger(__name__)

        logger.info("=== Engine Configuration ===")
        logger.info(f"Bucket width: {self.bucket_width_seconds}s")
        logger.info(
            f"Avoidable damage: top {self.avoidable_top_n}, "
            f"critical above {self.critical_damage_fraction:.0%} of outgoing damage"
        )
        logger.info(f"Player prefix: {self.player_prefix}")
        logger.info(f"Hostile prefixes: {', '.join(self.hostile_prefixes)}")
        logger.info(
            f"Validation: >= {self.min_log_bytes} bytes, >= {self.min_log_lines} lines, "
            f"{self.validation_required_matches}/{self.validation_sample_lines} sampled lines"
        )
        logger.info("=== End Configuration ===")


# Global settings instance
settings = EngineSettings.from_env()


def get_settings() -> EngineSettings:
    """Get the global settings instance."""
    return settings


def set_settings(new_settings: EngineSettings) -> EngineSettings:
    """Replace the global settings instance."""
    global settings
    settings = new_settings.validate()
    return settings


def reload_settings() -> EngineSettings:
    """Reload settings from environment variables."""
    global settings
    settings = EngineSettings.from_env()
    return settings
