"""
Grid strategy event notifier.

Captures structured events emitted by the grid controller, records them
locally for post-trade analysis and optionally forwards high-severity events
to Telegram.
"""

from __future__ import annotations

import asyncio
import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from helpers.telegram_bot import TelegramBot
from helpers.unified_logger import LOGS_DIR_ENV, get_core_logger


ALERT_LEVELS = {"WARNING", "ERROR", "CRITICAL"}


class GridEventNotifier:
    """
    Light-weight alert dispatcher for grid events.

    Responsibilities:
    - Persist every event as JSONL (`logs/grid_events.jsonl`)
    - Forward WARNING and above to Telegram if credentials are provided
    """

    def __init__(
        self,
        strategy: str,
        host: str,
        *,
        history_path: Optional[Path] = None,
    ) -> None:
        self.strategy = strategy
        self.host = host
        self.logger = get_core_logger("event_notifier")

        if history_path is None:
            logs_dir = Path(os.getenv(LOGS_DIR_ENV, "logs"))
            logs_dir.mkdir(parents=True, exist_ok=True)
            history_path = logs_dir / "grid_events.jsonl"
        self.history_path = history_path

        self._telegram_bot: Optional[TelegramBot] = None
        token = os.getenv("GRID_ALERT_TELEGRAM_TOKEN")
        chat_id = os.getenv("GRID_ALERT_TELEGRAM_CHAT_ID")
        if token and chat_id:
            self._telegram_bot = TelegramBot(token=token, chat_id=chat_id)

    def notify(
        self,
        *,
        event_type: str,
        level: str,
        message: str,
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Persist and optionally forward an event. Returns the stored record."""
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "strategy": self.strategy,
            "host": self.host,
            "level": level,
            "event_type": event_type,
            "message": message,
            "payload": payload,
        }

        self._write_history(record)

        if self._telegram_bot and level in ALERT_LEVELS:
            self._send_telegram(record)

        return record

    def _write_history(self, record: Dict[str, Any]) -> None:
        """Append record to JSONL history file."""
        try:
            with self.history_path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record, ensure_ascii=False, default=str))
                handle.write("\n")
        except OSError as exc:
            # Event history must never break the strategy loop
            self.logger.warning(f"Failed to write grid event history: {exc}")

    def _send_telegram(self, record: Dict[str, Any]) -> None:
        """Send the alert payload to Telegram, off the event loop when one is running."""
        header = f"[GRID {record['level']}] {record['event_type']}"
        details_lines = [
            f"Host: {record['host']}",
            f"Message: {record['message']}",
        ]
        context_lines = [
            f"{key}: {value}"
            for key, value in sorted((record.get("payload") or {}).items())
        ]
        text = "\n".join([header, *details_lines, "", *context_lines]).strip()

        def _send() -> None:
            try:
                self._telegram_bot.send_text(text)
            except Exception as exc:
                self.logger.warning(f"Telegram alert failed: {exc}")

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            loop.run_in_executor(None, _send)
        else:
            _send()
