"""
Trading Configuration Management Module

YAML config file handling for the grid strategy.
"""

from .config_yaml import (
    build_from_yaml,
    create_example_config,
    load_config_from_yaml,
    merge_configs,
    save_config_to_yaml,
    validate_config_file,
)

__all__ = [
    'build_from_yaml',
    'create_example_config',
    'load_config_from_yaml',
    'merge_configs',
    'save_config_to_yaml',
    'validate_config_file',
]
