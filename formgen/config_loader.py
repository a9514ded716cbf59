"""
Configuration loading utilities for the form code builder.

This module loads config.yaml, merges it over built-in defaults and exposes
the pieces other modules need: logging level, synthesis options and a
display summary.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from datetime import date
import logging
from copy import deepcopy

from .exceptions import ConfigurationLoadError, log_error_with_context
from .field_kinds import SynthesisOptions

logger = logging.getLogger(__name__)

LOGGING_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL
}

VALID_LAYOUTS = ('centered', 'wide')


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get the built-in configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'Form Code Builder',
            'version': '1.0.0',
            'debug': False
        },
        'logging': {
            'level': 'INFO'
        },
        'generator': {
            'typescript': True,
            'use_router': True,
            'success_route': '/success',
            'min_date': '1900-01-01',
            'default_form_name': 'My Form'
        },
        'ui': {
            'page_title': 'Form Code Builder',
            'layout': 'wide'
        }
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load application configuration, falling back to defaults on any problem.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary
    """
    if config_path is None:
        config_path = Path("config.yaml")
    config_path = Path(config_path)

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)

        if user_config is None:
            logger.warning(f"Configuration file is empty: {config_path}")
            return default_config

        if not isinstance(user_config, dict):
            logger.error(f"Configuration file is not a valid dictionary: {config_path}")
            logger.info("Using default configuration")
            return default_config

        config = deep_merge(default_config, user_config)

        logger.info(f"Successfully loaded configuration from {config_path}")
        return config

    except yaml.YAMLError as e:
        log_error_with_context(ConfigurationLoadError(config_path, e), "parsing configuration")
        logger.info("Using default configuration")
        return default_config

    except (IOError, OSError) as e:
        log_error_with_context(ConfigurationLoadError(config_path, e), "reading configuration")
        logger.info("Using default configuration")
        return default_config


def get_config_value(config: Dict[str, Any], section: str, key: str, default: Any = None) -> Any:
    """Read ``config[section][key]`` tolerating missing sections."""
    section_values = config.get(section)
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)


def _is_iso_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
        return True
    except ValueError:
        return False


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'logging', 'generator', 'ui']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    app = config['app']
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    level = config['logging'].get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in LOGGING_LEVELS:
        logger.warning(f"Unknown logging level: {level}")
        return False

    generator = config['generator']
    for flag in ('typescript', 'use_router'):
        if flag in generator and not isinstance(generator[flag], bool):
            logger.warning(f"generator.{flag} must be true or false")
            return False

    route = generator.get('success_route', '/success')
    if not isinstance(route, str) or not route.startswith('/'):
        logger.warning(f"success_route must start with '/': {route}")
        return False

    if not _is_iso_date(generator.get('min_date', '1900-01-01')):
        logger.warning(f"min_date must be an ISO date (YYYY-MM-DD): {generator.get('min_date')}")
        return False

    layout = config['ui'].get('layout', 'wide')
    if layout not in VALID_LAYOUTS:
        logger.warning(f"ui.layout must be one of {VALID_LAYOUTS}: {layout}")
        return False

    return True


def get_logging_level(level_str: str) -> int:
    """Map string logging level to logging constant."""
    return LOGGING_LEVELS.get(str(level_str).upper(), logging.INFO)


def configure_logging(config: Dict[str, Any]) -> int:
    """
    Configure root logging from the ``logging.level`` setting.

    Args:
        config: Complete configuration dictionary

    Returns:
        The numeric level that was applied
    """
    level_str = get_config_value(config, 'logging', 'level', 'INFO')
    level = get_logging_level(level_str)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.info(f"Logging configured to level: {level_str}")
    return level


def get_synthesis_options(config: Dict[str, Any]) -> SynthesisOptions:
    """
    Build synthesis options from the generator section.

    Invalid values fall back to the defaults with a warning.

    Args:
        config: Complete configuration dictionary

    Returns:
        SynthesisOptions instance
    """
    defaults = SynthesisOptions()

    route = get_config_value(config, 'generator', 'success_route', defaults.success_route)
    if not isinstance(route, str) or not route.startswith('/'):
        logger.warning(f"Ignoring invalid success_route {route!r}; using {defaults.success_route}")
        route = defaults.success_route

    min_date = get_config_value(config, 'generator', 'min_date', defaults.min_date)
    if not _is_iso_date(min_date):
        logger.warning(f"Ignoring invalid min_date {min_date!r}; using {defaults.min_date}")
        min_date = defaults.min_date

    return SynthesisOptions(success_route=route, min_date=min_date)


def get_config_summary(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Get a summary of the current configuration.

    Args:
        config: Configuration dictionary

    Returns:
        Dictionary with configuration summary
    """
    return {
        'app_name': get_config_value(config, 'app', 'name', 'Unknown'),
        'app_version': get_config_value(config, 'app', 'version', 'Unknown'),
        'debug_mode': get_config_value(config, 'app', 'debug', False),
        'logging_level': get_config_value(config, 'logging', 'level', 'INFO'),
        'typescript': get_config_value(config, 'generator', 'typescript', True),
        'use_router': get_config_value(config, 'generator', 'use_router', True),
        'success_route': get_config_value(config, 'generator', 'success_route', '/success'),
        'min_date': get_config_value(config, 'generator', 'min_date', '1900-01-01')
    }
