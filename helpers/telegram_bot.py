"""
Minimal Telegram Bot API client used for grid alerts.
"""

from __future__ import annotations

import requests


class TelegramBot:
    """Send plain text notifications to one chat."""

    def __init__(self, token: str, chat_id: str, timeout: float = 10) -> None:
        self.chat_id = chat_id
        self.timeout = timeout
        self.api_url = f"https://api.telegram.org/bot{token}"

    def send_text(self, text: str) -> None:
        """
        Send ``text`` to the configured chat.

        Raises:
            requests.HTTPError: If Telegram rejects the message
        """
        response = requests.post(
            f"{self.api_url}/sendMessage",
            json={"chat_id": self.chat_id, "text": text},
            timeout=self.timeout,
        )
        response.raise_for_status()
