"""
Strategy Factory
Creates strategy instances from a name and raw parameters.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel

from .base_strategy import BaseStrategy
from .implementations.martingale_grid import MartingaleGridConfig, MartingaleGridStrategy


class StrategyFactory:
    """Factory for creating strategy instances."""

    # Registry of available strategies and their config models
    _strategies: Dict[str, Tuple[Type[BaseStrategy], Type[BaseModel]]] = {
        'martingale_grid': (MartingaleGridStrategy, MartingaleGridConfig),
    }

    @classmethod
    def build_config(cls, strategy_name: str, params: Mapping[str, Any]) -> BaseModel:
        """
        Validate raw parameters against the strategy's config model.

        Unknown keys are dropped so that shared config files may carry
        host-level settings next to the strategy parameters.
        """
        _, config_class = cls._lookup(strategy_name)
        known_fields = set(config_class.model_fields.keys())
        strategy_params = {key: value for key, value in params.items() if key in known_fields}
        return config_class(**strategy_params)

    @classmethod
    def create_strategy(
        cls,
        strategy_name: str,
        config,
        host,
        trailing_manager=None,
    ) -> BaseStrategy:
        """Create a strategy instance.

        Args:
            strategy_name: Name of the strategy to create
            config: Config model instance or a mapping of raw parameters
            host: Host capabilities the strategy drives
            trailing_manager: Optional trailing takes collaborator

        Returns:
            BaseStrategy: Strategy instance

        Raises:
            ValueError: If strategy name is not supported
        """
        strategy_class, config_class = cls._lookup(strategy_name)

        if not isinstance(config, config_class):
            config = cls.build_config(strategy_name, dict(config))

        return strategy_class(config, host, trailing_manager=trailing_manager)

    @classmethod
    def get_available_strategies(cls) -> List[str]:
        """Get list of available strategy names."""
        return list(cls._strategies.keys())

    @classmethod
    def register_strategy(
        cls,
        name: str,
        strategy_class: Type[BaseStrategy],
        config_class: Type[BaseModel],
    ) -> None:
        """Register a new strategy class."""
        if not issubclass(strategy_class, BaseStrategy):
            raise ValueError("Strategy class must inherit from BaseStrategy")

        cls._strategies[name.lower()] = (strategy_class, config_class)

    @classmethod
    def _lookup(cls, strategy_name: Optional[str]) -> Tuple[Type[BaseStrategy], Type[BaseModel]]:
        key = (strategy_name or "").lower()
        if key not in cls._strategies:
            available = ', '.join(cls._strategies.keys())
            raise ValueError(f"Unsupported strategy: {strategy_name}. Available: {available}")
        return cls._strategies[key]
