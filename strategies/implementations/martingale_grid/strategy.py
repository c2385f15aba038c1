"""
Martingale Grid Strategy

Host-driven grid controller. Owns a level ladder, activates levels as price
crosses them, sizes every new order with a martingale multiplier and watches
the aggregate open position for take profit or stop loss.
"""

from decimal import Decimal
from typing import Any, Awaitable, Dict, Optional

from strategies.base_strategy import BaseStrategy
from helpers.event_notifier import GridEventNotifier
from .config import MartingaleGridConfig
from .exceptions import GridConfigurationError, GridDisposedError, GridError
from .host import GridHost, TrailingTakesManager
from .ladder import GridLadder
from .models import ExecutedOrder, GridControllerState, GridCycleState, GridLevel, OrderSide
from .utils import serialize_value, to_decimal_optional


class MartingaleGridStrategy(BaseStrategy):
    """
    Martingale grid controller.

    Cycle states:
    1. 'FLAT' → no ladder; a ladder is built by ``create_grid`` or by the
       first order fill
    2. 'ACTIVE' → every tick is evaluated in a fixed order:
       trailing latch, stop loss, take profit, level activation
    3. back to 'FLAT' once the host reports no open orders

    Only one state-changing action is taken per tick.
    """

    def __init__(
        self,
        config: MartingaleGridConfig,
        host: GridHost,
        trailing_manager: Optional[TrailingTakesManager] = None,
    ):
        """
        Initialize grid strategy.

        Args:
            config: MartingaleGridConfig instance with strategy parameters
            host: Host used to place, close and value orders
            trailing_manager: Optional trailing takes collaborator; falls back
                to ``host.get_trailing_manager()`` on init
        """
        super().__init__(config=config, host=host)

        self.grid_state = GridControllerState()
        self.trailing_manager = trailing_manager

        self._amount: Optional[Decimal] = None
        self._start_multiplier = Decimal("1")
        self._fee = Decimal("0")

        host_name = getattr(getattr(host, "context", None), "name", None) or "unknown"

        self.event_notifier = GridEventNotifier(
            strategy="martingale_grid",
            host=str(host_name),
        )

        self.logger.log("Martingale grid created with parameters:", "INFO")
        self.logger.log(f"  - Step: {config.step}%", "INFO")
        self.logger.log(f"  - Fibo: {config.fibo if config.fibo else 'off'}", "INFO")
        self.logger.log(f"  - Martingale: {config.martingale}", "INFO")
        self.logger.log(f"  - Levels: {config.levels_count}", "INFO")
        self.logger.log(f"  - Take Profit: {config.take_profit}%", "INFO")
        self.logger.log(
            f"  - Stop Loss: {f'{config.stop_loss}%' if config.stop_loss is not None else 'off'}",
            "INFO",
        )
        if config.reduce_equity:
            self.logger.log(
                f"  - Reduce Equity: x{config.equity_decay} per take profit, "
                f"dispose below {config.equity_floor}",
                "WARNING",
            )
        self.logger.log(f"  - Trailing: {'on' if config.trailing else 'off'}", "INFO")
        self.logger.log(f"  - Collapse: {'on' if config.collapse else 'off'}", "INFO")

    # ------------------------------------------------------------------ #
    # Structured events
    # ------------------------------------------------------------------ #
    def _log_event(self, event_type: str, message: str, level: str = "INFO", **context: Any) -> None:
        """Emit structured grid strategy event."""
        payload = {
            "event_type": event_type,
            "cycle_state": self.grid_state.cycle_state.value,
            **context,
        }
        serialized_payload = {key: serialize_value(val) for key, val in payload.items()}
        self.logger.log(message, level.upper(), **serialized_payload)

        if self.event_notifier:
            self.event_notifier.notify(
                event_type=event_type,
                level=level.upper(),
                message=message,
                payload=serialized_payload,
            )

        self.emit(event_type, **serialized_payload)

    async def _await_host(self, action: str, awaitable: Awaitable[Any], **context: Any) -> Any:
        """Await a host operation, logging failures before propagating them."""
        try:
            return await awaitable
        except Exception as exc:
            self._log_event(
                f"{action}_failed",
                f"Grid: {action.replace('_', ' ')} failed: {exc}",
                level="ERROR",
                error=str(exc),
                **context,
            )
            raise

    # ------------------------------------------------------------------ #
    # Host callbacks
    # ------------------------------------------------------------------ #
    async def on_init(self):
        """Capture host constants and validate the trailing collaborator."""
        context = self.host.context
        self._amount = context.amount
        self._start_multiplier = context.lots_multiplier
        self._fee = context.fee / Decimal("100")

        self.grid_state.lots_multiplier = self._start_multiplier
        self.grid_state.equity_level = context.equity_level

        if self.config.trailing:
            manager = self.trailing_manager or self.host.get_trailing_manager()

            if manager is None:
                raise GridConfigurationError("A trailing takes manager is required for trailing")

            if not manager.is_manual():
                raise GridConfigurationError(
                    "Trailing takes manager should be in manual mode for working with the grid"
                )

            self.trailing_manager = manager

    async def on_order_filled(self, order: ExecutedOrder):
        """First fill of a flat cycle anchors a new directional ladder."""
        if self.grid_state.disposed:
            return

        if self.grid_state.cycle_state is GridCycleState.FLAT:
            self._start_cycle(order.price, order.side)

    async def on_tick(self, tick):
        """Evaluate the open position and pending levels at the tick's close."""
        if self.grid_state.disposed or self.grid_state.trailing_engaged:
            return

        price = self._parse_price(getattr(tick, "close", tick))
        if price is None:
            self._log_event(
                "invalid_tick",
                f"Grid: ignoring tick without a usable close price: {tick!r}",
                level="ERROR",
                tick=repr(tick),
            )
            return

        if self.host.orders_count and await self._evaluate_exit(price):
            return

        if self.grid_state.ladder is not None:
            await self._evaluate_levels(price)

    async def on_order_closed(self, order: Optional[ExecutedOrder] = None):
        """When all orders are closed, end the cycle."""
        if self.host.orders_count == 0:
            await self.on_flat()

    async def on_flat(self):
        """ACTIVE → FLAT: revert multiplier, drop the ladder and the trailing latch."""
        ladder = self.grid_state.ladder

        self.grid_state.lots_multiplier = self._start_multiplier
        self.grid_state.ladder = None
        self.grid_state.trailing_engaged = False
        self.grid_state.committed_amount = None
        self.grid_state.cycle_state = GridCycleState.FLAT

        if ladder is not None:
            self._log_event(
                "grid_flat",
                "Grid: all orders closed, cycle finished",
                anchor_price=ladder.anchor_price,
                next_up_idx=ladder.next_up_idx,
                next_low_idx=ladder.next_low_idx,
            )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def create_grid(self, price: Any, side: Optional[OrderSide] = None) -> GridLadder:
        """Create a new grid immediately, replacing any existing one."""
        if self.grid_state.disposed:
            raise GridDisposedError("Grid was disposed; no further cycles can start")

        anchor_price = self._parse_price(price)
        if anchor_price is None:
            raise GridError(f"Grid anchor must be a positive price, got {price!r}")

        if self.grid_state.ladder is not None:
            self.logger.log("Grid: replacing active ladder on explicit create_grid", "WARNING")

        return self._start_cycle(anchor_price, side)

    def get_grid(self) -> Optional[GridLadder]:
        """Get existing grid."""
        return self.grid_state.ladder

    def get_status(self) -> Dict[str, Any]:
        """Get current strategy status."""
        return {
            "strategy": "martingale_grid",
            **self.grid_state.to_dict(),
            "open_orders": self.host.orders_count,
            "parameters": {
                "step": float(self.config.step),
                "fibo": float(self.config.fibo) if self.config.fibo else None,
                "martingale": float(self.config.martingale),
                "levels_count": self.config.levels_count,
                "take_profit": float(self.config.take_profit),
                "stop_loss": float(self.config.stop_loss) if self.config.stop_loss is not None else None,
            },
        }

    def get_strategy_name(self) -> str:
        """Get the strategy name."""
        return "Martingale Grid"

    @staticmethod
    def _parse_price(value: Any) -> Optional[Decimal]:
        """Positive finite Decimal, or None when ``value`` is not a usable price."""
        price = to_decimal_optional(value)
        if price is None or not price.is_finite() or price <= 0:
            return None
        return price

    # ------------------------------------------------------------------ #
    # Cycle transitions
    # ------------------------------------------------------------------ #
    def _start_cycle(self, anchor_price: Decimal, side: Optional[OrderSide]) -> GridLadder:
        """FLAT → ACTIVE: build the ladder and fix the cycle's committed capital."""
        if self._amount is None:
            raise GridConfigurationError("Grid cycle requested before on_init")

        ladder = GridLadder.from_config(anchor_price, self.config, side=side)

        self.grid_state.ladder = ladder
        # Fixation of the amount for the whole grid lifecycle
        self.grid_state.committed_amount = self._amount * self.grid_state.equity_level
        self.grid_state.trailing_engaged = False
        self.grid_state.cycle_state = GridCycleState.ACTIVE
        self.grid_state.cycles_started += 1

        self._log_event(
            "grid_created",
            f"Grid: ladder anchored at {anchor_price} "
            f"({ladder.side.value if ladder.side else 'both sides'})",
            anchor_price=anchor_price,
            side=ladder.side,
            committed_amount=self.grid_state.committed_amount,
            up_levels=[level.price for level in ladder.up_levels],
            low_levels=[level.price for level in ladder.low_levels],
        )
        return ladder

    # ------------------------------------------------------------------ #
    # Tick evaluation
    # ------------------------------------------------------------------ #
    async def _evaluate_exit(self, price: Decimal) -> bool:
        """Stop loss / take profit checks. Returns True when an exit was taken."""
        committed = self.grid_state.committed_amount
        if not committed:
            self.logger.log("Grid: open orders without an active cycle; skipping exit checks", "DEBUG")
            return False

        orders = list(self.host.orders)
        closing_commission = self.host.get_currency_batch_commission(orders, price, self._fee)
        profit = self.host.get_currency_batch_profit(orders, price) - closing_commission
        percent_profit = profit / committed * Decimal("100")

        if self.config.stop_loss is not None and percent_profit <= -self.config.stop_loss:
            self._log_event(
                "stop_loss_triggered",
                f"Grid: stop loss hit at {price} ({percent_profit:.4f}%)",
                level="WARNING",
                price=price,
                percent_profit=percent_profit,
                profit=profit,
                open_orders=len(orders),
            )
            await self._close_all(self.config.collapse and self.host.orders_count > 1)
            return True

        if percent_profit >= self.config.take_profit:
            self._log_event(
                "take_profit_triggered",
                f"Grid: take profit hit at {price} ({percent_profit:.4f}%)",
                price=price,
                percent_profit=percent_profit,
                profit=profit,
                open_orders=len(orders),
            )

            if self.config.reduce_equity:
                self._reduce_equity()

            if self.config.trailing:
                await self._engage_trailing()
            else:
                await self._close_all(self.config.collapse)

            return True

        return False

    async def _evaluate_levels(self, price: Decimal) -> None:
        """Activate the next pending level once price crosses it."""
        ladder = self.grid_state.ladder

        # Dont activate lows once the grid got direction to the short side
        if not ladder.next_up_idx:
            level = ladder.peek_next_low()
            if level is not None and price <= level.price:
                ladder.activate_low()
                await self._open_level_order(OrderSide.BUY, ladder.depth(OrderSide.BUY), level)

        if self.grid_state.ladder is not ladder:
            return

        # Dont activate ups once the grid got direction to the long side
        if not ladder.next_low_idx:
            level = ladder.peek_next_up()
            if level is not None and price >= level.price:
                ladder.activate_up()
                await self._open_level_order(OrderSide.SELL, ladder.depth(OrderSide.SELL), level)

    async def _open_level_order(self, side: OrderSide, depth: int, level: GridLevel) -> None:
        multiplier = self.config.martingale ** depth
        self.grid_state.lots_multiplier = multiplier

        self._log_event(
            "level_activated",
            f"Grid: {side.value} level #{depth} at {level.price} activated (x{multiplier})",
            side=side,
            depth=depth,
            level_price=level.price,
            lots_multiplier=multiplier,
        )
        await self._await_host(
            "create_order",
            self.host.create_order(side, multiplier),
            side=side,
            lots_multiplier=multiplier,
        )

    # ------------------------------------------------------------------ #
    # Exit actions
    # ------------------------------------------------------------------ #
    async def _close_all(self, collapse: bool) -> None:
        await self._await_host(
            "close_all",
            self.host.close_all(collapse),
            collapse=collapse,
        )

    def _reduce_equity(self) -> None:
        """Shrink the equity level for future cycles; dispose once it is exhausted."""
        self.grid_state.equity_level *= self.config.equity_decay

        self._log_event(
            "equity_reduced",
            f"Grid: equity level reduced to {self.grid_state.equity_level}",
            equity_level=self.grid_state.equity_level,
        )

        if self.grid_state.equity_level < self.config.equity_floor and not self.grid_state.disposed:
            self.grid_state.disposed = True
            self._log_event(
                "grid_disposed",
                f"Grid: {self.host.context.name} disposed, equity level "
                f"{self.grid_state.equity_level} below {self.config.equity_floor}",
                level="WARNING",
                equity_level=self.grid_state.equity_level,
                equity_floor=self.config.equity_floor,
            )
            self.host.dispose()

    async def _engage_trailing(self) -> None:
        """Close all orders except the last one and hand it to the trailing manager."""
        orders = list(self.host.orders)
        last_order = orders[-1]

        for order in orders[:-1]:
            await self._await_host(
                "close_order",
                self.host.close_order(order),
                cid=order.cid,
            )

        self.trailing_manager.set_for_order(last_order.cid, last_order.side)
        self.grid_state.trailing_engaged = True

        self._log_event(
            "trailing_engaged",
            f"Grid: order {last_order.cid} handed to trailing takes",
            cid=last_order.cid,
            side=last_order.side,
            closed_orders=len(orders) - 1,
        )
