"""
YAML Configuration File Support

Handles loading and saving grid strategy configurations to/from YAML files.

Features:
- Load config from YAML
- Save config to YAML
- Validation against the strategy's pydantic model
- Decimal serialization
- Config merging (file + overrides)

File layout:

    strategy: martingale_grid
    created_at: 2024-01-01T00:00:00
    version: "1.0"
    config:
      step: 2
      martingale: 1.5
      take_profit: 3
    host:            # optional, values for GridHostContext
      amount: 1000
"""

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from helpers.unified_logger import get_logger
from strategies.factory import StrategyFactory
from strategies.implementations.martingale_grid.config import GridHostContext


logger = get_logger("config", "yaml")

CONFIG_VERSION = "1.0"


# ============================================================================
# YAML Custom Loader/Dumper (Decimal round-tripping)
# ============================================================================

class DecimalSafeLoader(yaml.SafeLoader):
    """Safe loader that reads floats as Decimal."""


class DecimalSafeDumper(yaml.SafeDumper):
    """Safe dumper that writes Decimal as plain floats."""


def decimal_representer(dumper, data):
    """Custom representer for Decimal type."""
    return dumper.represent_scalar('tag:yaml.org,2002:float', str(data))


def decimal_constructor(loader, node):
    """Custom constructor for Decimal type."""
    value = loader.construct_scalar(node)
    return Decimal(value)


DecimalSafeDumper.add_representer(Decimal, decimal_representer)
DecimalSafeLoader.add_constructor('tag:yaml.org,2002:float', decimal_constructor)


# ============================================================================
# YAML Config Operations
# ============================================================================

def save_config_to_yaml(
    strategy_name: str,
    config: Dict[str, Any],
    file_path: Path,
    host: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Save configuration to YAML file.

    Args:
        strategy_name: Name of the strategy
        config: Strategy parameters
        file_path: Path to save to
        host: Optional host context values
    """
    full_config: Dict[str, Any] = {
        "strategy": strategy_name,
        "created_at": datetime.now().isoformat(),
        "version": CONFIG_VERSION,
        "config": config,
    }
    if host:
        full_config["host"] = host

    with open(file_path, 'w') as f:
        yaml.dump(
            full_config,
            f,
            Dumper=DecimalSafeDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2
        )
    logger.debug(f"Saved {strategy_name} config to {file_path}")


def load_config_from_yaml(file_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        file_path: Path to config file

    Returns:
        Dictionary with 'strategy', 'config', 'host' and 'metadata' keys

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If config structure is invalid
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    with open(file_path, 'r') as f:
        full_config = yaml.load(f, Loader=DecimalSafeLoader)

    if not isinstance(full_config, dict):
        raise ValueError("Invalid config file: must be a YAML dictionary")

    if "strategy" not in full_config:
        raise ValueError("Invalid config file: missing 'strategy' field")

    if not isinstance(full_config.get("config"), dict):
        raise ValueError("Invalid config file: missing 'config' field")

    host = full_config.get("host")
    if host is not None and not isinstance(host, dict):
        raise ValueError("Invalid config file: 'host' must be a dictionary")

    return {
        "strategy": full_config["strategy"],
        "config": full_config["config"],
        "host": host,
        "metadata": {
            "created_at": full_config.get("created_at"),
            "version": str(full_config.get("version", CONFIG_VERSION))
        }
    }


def build_from_yaml(file_path: Path, overrides: Optional[Dict[str, Any]] = None) -> Tuple[str, Any, Optional[GridHostContext]]:
    """
    Load a config file and validate it into model instances.

    Args:
        file_path: Path to config file
        overrides: Optional values taking precedence over the file's 'config'

    Returns:
        (strategy_name, strategy_config, host_context or None)

    Raises:
        pydantic.ValidationError: If parameters fail validation
    """
    loaded = load_config_from_yaml(file_path)
    strategy_name = loaded["strategy"]
    params = merge_configs(loaded["config"], overrides or {})

    config = StrategyFactory.build_config(strategy_name, params)
    host_context = GridHostContext(**loaded["host"]) if loaded["host"] else None

    logger.info(f"Loaded {strategy_name} config from {file_path}")
    return strategy_name, config, host_context


def validate_config_file(file_path: Path) -> Tuple[bool, Optional[str]]:
    """
    Validate a config file against its strategy model.

    Returns:
        (is_valid, error_message)
    """
    try:
        build_from_yaml(file_path)
    except (FileNotFoundError, ValueError, ValidationError, yaml.YAMLError) as e:
        return False, str(e)

    return True, None


def merge_configs(base_config: Dict, overrides: Dict) -> Dict:
    """
    Merge two configurations.

    Args:
        base_config: Base configuration (from file)
        overrides: Override values

    Returns:
        Merged configuration
    """
    merged = base_config.copy()

    for key, value in overrides.items():
        if value is not None:  # Only override if value is provided
            merged[key] = value

    return merged


def create_example_config(configs_dir: Path = Path("configs")) -> Path:
    """Write an example martingale grid config and return its path."""
    configs_dir.mkdir(parents=True, exist_ok=True)
    grid_path = configs_dir / "example_martingale_grid.yml"

    save_config_to_yaml(
        "martingale_grid",
        {
            "step": Decimal("2"),
            "fibo": None,
            "martingale": Decimal("1.5"),
            "levels_count": 6,
            "take_profit": Decimal("3"),
            "stop_loss": Decimal("15"),
            "reduce_equity": False,
            "trailing": False,
            "collapse": True,
        },
        grid_path,
        host={
            "amount": Decimal("1000"),
            "lots_multiplier": Decimal("1"),
            "fee": Decimal("0.02"),
        },
    )
    return grid_path
