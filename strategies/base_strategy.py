"""
Base Strategy Interface
Defines the callback contract that event-driven strategies implement.

The host drives a strategy exclusively through these callbacks and never
invokes them concurrently for the same instance:
- on_init: capture host configuration
- on_order_filled: an order was opened
- on_tick: a new price observation
- on_order_closed: an order was closed
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from helpers.unified_logger import get_strategy_logger


class BaseStrategy(ABC):
    """
    Base class for host-driven strategies.

    Provides the logger, the status lifecycle and event listener registration
    shared by every implementation.
    """

    def __init__(self, config, host=None):
        """
        Initialize strategy with configuration and host.

        Args:
            config: Strategy configuration
            host: Host capabilities used to place and close orders
        """
        self.config = config
        self.host = host

        context = {}
        host_name = getattr(getattr(host, 'context', None), 'name', None)
        if host_name:
            context['host'] = host_name

        self.logger = get_strategy_logger(
            self.get_strategy_name().lower().replace(' ', '_'),
            **context
        )

        self.is_initialized = False
        self._event_listeners: Dict[str, List[Callable[..., Any]]] = {}

    # ========================================================================
    # Host callbacks
    # ========================================================================

    async def initialize(self):
        """Run ``on_init`` once."""
        if not self.is_initialized:
            await self.on_init()
            self.is_initialized = True
            self.logger.info(f"Strategy '{self.get_strategy_name()}' initialized")

    @abstractmethod
    async def on_init(self):
        """Strategy-specific initialization logic."""
        pass

    @abstractmethod
    async def on_order_filled(self, order):
        """Called by the host when any order opens."""
        pass

    @abstractmethod
    async def on_tick(self, tick):
        """Called by the host on every price observation."""
        pass

    @abstractmethod
    async def on_order_closed(self, order):
        """Called by the host when any order closes."""
        pass

    # ========================================================================
    # Event listeners
    # ========================================================================

    def add_listener(self, event_name: str, callback: Callable[..., Any]):
        """
        Add an event listener.

        Args:
            event_name: Event name (e.g., 'level_activated')
            callback: Function called with the event payload
        """
        self._event_listeners.setdefault(event_name, []).append(callback)

    def remove_listener(self, event_name: str):
        """Remove every listener registered for ``event_name``."""
        self._event_listeners.pop(event_name, None)

    def unregister_events(self):
        """Cleanup all event listeners"""
        self._event_listeners.clear()

    def emit(self, event_name: str, **payload: Any):
        """Invoke listeners registered for ``event_name``."""
        for callback in list(self._event_listeners.get(event_name, [])):
            callback(**payload)

    # ========================================================================
    # Metadata
    # ========================================================================

    @abstractmethod
    def get_strategy_name(self) -> str:
        """Get the strategy name."""
        pass

    @abstractmethod
    def get_status(self) -> Dict[str, Any]:
        """Get current strategy status."""
        pass

    async def cleanup(self):
        """Cleanup strategy resources."""
        self.unregister_events()
        self.logger.info(f"Strategy '{self.get_strategy_name()}' cleanup completed")
        if hasattr(self.logger, 'flush'):
            self.logger.flush()
