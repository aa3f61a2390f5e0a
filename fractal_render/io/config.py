"""
Configuration defaults from the environment and JSON or YAML files.

Precedence is command line, then config file, then environment, then the
built-in defaults of RenderParameters.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..core.fractal_types import parse_complex
from ..errors import ConfigurationError, ParseError
from ..rendering.coloring import ColorScheme

logger = logging.getLogger(__name__)

ENV_PREFIX = 'FRACTAL_RENDER_'


@dataclass
class EnvironmentConfig:
    """Defaults read from FRACTAL_RENDER_* environment variables."""

    workers: Optional[int] = None
    tile_size: Optional[int] = None
    color_scheme: Optional[ColorScheme] = None
    log_level: Optional[str] = None

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> 'EnvironmentConfig':
        """Read configuration from the process environment."""
        if environ is None:
            environ = os.environ

        config = cls()
        for key in ('workers', 'tile_size'):
            raw = environ.get(ENV_PREFIX + key.upper())
            if raw:
                try:
                    setattr(config, key, int(raw))
                except ValueError:
                    raise ConfigurationError(f"{ENV_PREFIX}{key.upper()} must be an integer, got '{raw}'") from None

        raw = environ.get(ENV_PREFIX + 'COLOR_SCHEME')
        if raw:
            config.color_scheme = ColorScheme.from_name(raw)

        raw = environ.get(ENV_PREFIX + 'LOG_LEVEL')
        if raw:
            config.log_level = raw.upper()

        return config

    def to_overrides(self) -> Dict[str, Any]:
        """Get the values that were set, as RenderParameters keyword arguments."""
        overrides = {}
        for key in ('workers', 'tile_size', 'color_scheme'):
            value = getattr(self, key)
            if value is not None:
                overrides[key] = value
        return overrides


class ConfigManager:
    """Loads render option defaults from JSON or YAML files."""

    KNOWN_KEYS = ('zoom', 'pan', 'color_scheme', 'workers', 'tile_size')
    YAML_SUFFIXES = ('.yaml', '.yml')

    def load_config(self, filepath: Path) -> Dict[str, Any]:
        """
        Load and convert a config file.

        Files ending in .yaml or .yml are read as YAML, anything else as JSON.

        Args:
            filepath: Path to a file holding a single mapping

        Returns:
            RenderParameters keyword arguments
        """
        filepath = Path(filepath)
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                if filepath.suffix.lower() in self.YAML_SUFFIXES:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"Could not read config file '{filepath}': {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file '{filepath}': {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file '{filepath}': {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file '{filepath}' must contain a mapping of options")

        logger.debug(f"Loaded config file: {filepath}")
        return self.convert(data)

    def convert(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Convert raw config values to RenderParameters keyword arguments."""
        overrides = {}

        for key, value in data.items():
            if key not in self.KNOWN_KEYS:
                logger.warning(f"Ignoring unknown config key: {key}")
                continue

            try:
                if key == 'pan':
                    overrides[key] = self._convert_pan(value)
                elif key == 'color_scheme':
                    overrides[key] = ColorScheme.from_name(str(value))
                elif key == 'zoom':
                    overrides[key] = float(value)
                else:
                    if isinstance(value, bool) or not isinstance(value, int):
                        raise ValueError(f"expected an integer, got {value!r}")
                    overrides[key] = value
            except (ParseError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid config value for '{key}': {e}") from e

        return overrides

    @staticmethod
    def _convert_pan(value: Any) -> complex:
        if isinstance(value, str):
            return parse_complex(value, 'pan')
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return complex(float(value[0]), float(value[1]))
        raise ValueError("expected 're,im' or [re, im]")
