#!/usr/bin/env python3
"""
Configuration loader for nexusconvert supporting YAML, TOML, and legacy INI formats.

This module provides utilities to load and validate configuration files
using the Pydantic models defined in config_models.py.
"""

import configparser
import logging
from pathlib import Path
from typing import Any, Dict, Union

import toml
import yaml

from .config_models import NexusConvertConfig
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Flat (INI / command line) keys -> (section, field)
FLAT_KEY_MAP = {
    'input': ('input_output', 'input_file'),
    'input_file': ('input_output', 'input_file'),
    'output': ('input_output', 'output'),
    'format': ('input_output', 'output_format'),
    'output_format': ('input_output', 'output_format'),
    'debug': ('input_output', 'debug'),
    'split': ('selection', 'split'),
    'fetch': ('selection', 'fetch'),
    'drop': ('selection', 'drop'),
    'keep_gaps': ('parse', 'keep_gaps'),
    'revcom': ('transform', 'reverse_complement'),
    'reverse_complement': ('transform', 'reverse_complement'),
    'substr': ('transform', 'substring'),
    'substring': ('transform', 'substring'),
    'no_ambig': ('transform', 'no_ambiguity'),
    'no_ambiguity': ('transform', 'no_ambiguity'),
    'wrap': ('transform', 'wrap_width'),
    'wrap_width': ('transform', 'wrap_width'),
    'correct': ('transform', 'header_fix'),
    'header_fix': ('transform', 'header_fix'),
    'no_dash': ('transform', 'header_dash_strip'),
    'header_dash_strip': ('transform', 'header_dash_strip'),
}
BOOLEAN_FIELDS = {'debug', 'split', 'keep_gaps', 'reverse_complement', 'no_ambiguity',
                  'header_fix', 'header_dash_strip'}
INTEGER_FIELDS = {'wrap_width'}


def str_to_bool(value: str) -> bool:
    """Convert string to boolean."""
    if value.lower() in ('true', 'yes', 'on', '1'):
        return True
    elif value.lower() in ('false', 'no', 'off', '0'):
        return False
    else:
        raise ValueError(f"Cannot convert '{value}' to boolean")


def detect_config_format(config_path: Path) -> str:
    """Detect configuration file format based on extension and content."""

    suffix = config_path.suffix.lower()

    if suffix in ['.yaml', '.yml']:
        return 'yaml'
    elif suffix in ['.toml']:
        return 'toml'
    elif suffix in ['.ini', '.cfg', '.config', '.conf']:
        return 'ini'

    # Try to detect by content only if extension is unknown
    try:
        content = config_path.read_text().strip()
    except OSError:
        return 'ini'

    if content.startswith(('---', '%YAML')) or ':\n' in content or ': ' in content:
        return 'yaml'
    if '[' in content and ']' in content and '=' in content:
        if '[[' in content or content.count('"') > content.count("'"):
            return 'toml'
        return 'ini'
    return 'ini'


def load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """Load YAML configuration file."""
    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        error_msg = f"Error parsing YAML configuration in {config_path}:"
        error_msg += f"\n  → {e}"
        error_msg += "\n  → Make sure the file uses proper YAML syntax (check indentation, colons, etc.)"
        raise ConfigurationError(error_msg, config_file=str(config_path))
    except OSError as e:
        raise ConfigurationError(f"Error loading YAML configuration from {config_path}: {e}",
                                 config_file=str(config_path))
    return data or {}


def load_toml_config(config_path: Path) -> Dict[str, Any]:
    """Load TOML configuration file."""
    try:
        with open(config_path, 'r') as f:
            return toml.load(f)
    except toml.TomlDecodeError as e:
        raise ConfigurationError(f"Error parsing TOML configuration: {e}",
                                 config_file=str(config_path))
    except OSError as e:
        raise ConfigurationError(f"Error loading TOML configuration: {e}",
                                 config_file=str(config_path))


def convert_flat_value(field: str, value: str) -> Any:
    """Convert a raw INI string for ``field`` to its model type."""
    value = value.strip()
    if field in BOOLEAN_FIELDS:
        return str_to_bool(value)
    if field in INTEGER_FIELDS:
        return int(value)
    return value


def flat_to_nested(items: Dict[str, Any], convert: bool = True) -> Dict[str, Dict[str, Any]]:
    """
    Map flat keys (``revcom``, ``substr``, ...) to the nested section layout.

    Unknown keys raise ConfigurationError.
    """
    data: Dict[str, Dict[str, Any]] = {}
    for key, value in items.items():
        try:
            section, field = FLAT_KEY_MAP[key.lower()]
        except KeyError:
            raise ConfigurationError(f"Unknown configuration key: {key}")
        if convert and isinstance(value, str):
            try:
                value = convert_flat_value(field, value)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {key}: {e}", section=section)
        data.setdefault(section, {})[field] = value
    return data


def load_ini_config(config_path: Path) -> Dict[str, Any]:
    """Load legacy INI configuration file and convert to the nested format."""
    config = configparser.ConfigParser()

    try:
        with open(config_path, 'r') as f:
            content = f.read()
        if not content.lstrip().startswith('['):
            content = "[DEFAULT]\n" + content
        config.read_string(content)
    except configparser.Error as e:
        error_msg = f"Error parsing INI configuration in {config_path}:"
        error_msg += f"\n  → {e}"
        if "duplicate" in str(e).lower():
            error_msg += "\n  → Duplicate keys or sections found in INI file"
        error_msg += "\n  → For better validation, consider using YAML format instead"
        raise ConfigurationError(error_msg, config_file=str(config_path))
    except OSError as e:
        raise ConfigurationError(f"Error loading INI configuration from {config_path}: {e}",
                                 config_file=str(config_path))

    items = dict(config.defaults())
    for section in config.sections():
        items.update({k: v for k, v in config.items(section) if k not in config.defaults()})
    return flat_to_nested(items)


def load_configuration(config_path: Union[str, Path]) -> NexusConvertConfig:
    """Load and validate configuration from file."""

    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}",
                                 config_file=str(config_path))

    format_type = detect_config_format(config_path)
    logger.info(f"Loading {format_type.upper()} configuration from: {config_path}")

    if format_type == 'yaml':
        data = load_yaml_config(config_path)
    elif format_type == 'toml':
        data = load_toml_config(config_path)
    else:
        data = load_ini_config(config_path)
        logger.warning(
            "INI configuration format is deprecated. "
            "Consider migrating to YAML or TOML format for better features."
        )

    return validate_configuration(data, source=f"{config_path} ({format_type.upper()} format)")


def validate_configuration(data: Dict[str, Any], source: str = "configuration") -> NexusConvertConfig:
    """Validate nested configuration data, translating errors into ConfigurationError."""
    try:
        config = NexusConvertConfig(**data)
    except Exception as e:
        error_msg = f"Configuration validation failed for {source}"
        if "input_file" in str(e):
            error_msg += "\n  → The specified input file was not found. Please check the file path."
        elif "substring" in str(e):
            error_msg += "\n  → Substrings are given as START:END with positive 1-based positions"
        elif "output_format" in str(e):
            error_msg += "\n  → Invalid output format. Valid options: nexus, fasta, phylip, mega"
        else:
            error_msg += f"\n  → {e}"
        raise ConfigurationError(error_msg) from e
    logger.debug("Configuration validated successfully")
    return config


def merge_overrides(config: NexusConvertConfig, overrides: Dict[str, Dict[str, Any]]) -> NexusConvertConfig:
    """Return a new configuration with ``overrides`` (nested sections) applied on top."""
    data = config.model_dump()
    for section, values in overrides.items():
        data.setdefault(section, {}).update(values)
    return validate_configuration(data, source="command-line options")


EXAMPLE_CONFIG = {
    'input_output': {
        'input_file': 'alignment.nex',
        'output': 'alignment.fasta',
        'output_format': 'fasta',
        'debug': False,
    },
    'selection': {
        'split': False,
        'fetch': '',
        'drop': [],
    },
    'parse': {
        'keep_gaps': False,
    },
    'transform': {
        'reverse_complement': False,
        'substring': '1:1000',
        'no_ambiguity': False,
        'wrap_width': 60,
        'header_fix': False,
        'header_dash_strip': False,
    },
}


def create_example_yaml_config(output_path: Path) -> None:
    """Create an example YAML configuration file."""
    with open(output_path, 'w') as f:
        yaml.dump(EXAMPLE_CONFIG, f, default_flow_style=False, sort_keys=False, indent=2)
    logger.info(f"Example YAML configuration created: {output_path}")


def create_example_toml_config(output_path: Path) -> None:
    """Create an example TOML configuration file."""
    with open(output_path, 'w') as f:
        toml.dump(EXAMPLE_CONFIG, f)
    logger.info(f"Example TOML configuration created: {output_path}")
