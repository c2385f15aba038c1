import json

import pytest

from helpers import event_notifier as event_notifier_module
from helpers.event_notifier import GridEventNotifier


@pytest.fixture(autouse=True)
def no_telegram_env(monkeypatch):
    monkeypatch.delenv("GRID_ALERT_TELEGRAM_TOKEN", raising=False)
    monkeypatch.delenv("GRID_ALERT_TELEGRAM_CHAT_ID", raising=False)


def read_history(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_notify_appends_jsonl_record(tmp_path):
    history = tmp_path / "events.jsonl"
    notifier = GridEventNotifier(strategy="martingale_grid", host="btc-grid", history_path=history)

    record = notifier.notify(
        event_type="level_activated",
        level="INFO",
        message="Grid: buy level #1 activated",
        payload={"depth": 1, "lots_multiplier": 1.5},
    )
    notifier.notify(event_type="grid_flat", level="INFO", message="flat", payload={})

    rows = read_history(history)
    assert len(rows) == 2
    assert rows[0] == record
    assert rows[0]["host"] == "btc-grid"
    assert rows[0]["payload"] == {"depth": 1, "lots_multiplier": 1.5}
    assert rows[1]["event_type"] == "grid_flat"


def test_default_history_path_uses_logs_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("GRID_LOGS_DIR", str(tmp_path / "logs"))

    notifier = GridEventNotifier(strategy="martingale_grid", host="h")

    assert notifier.history_path == tmp_path / "logs" / "grid_events.jsonl"
    assert notifier._telegram_bot is None


def test_history_write_failure_does_not_raise(tmp_path):
    notifier = GridEventNotifier(
        strategy="martingale_grid",
        host="h",
        history_path=tmp_path / "missing-dir" / "events.jsonl",
    )

    record = notifier.notify(event_type="grid_created", level="INFO", message="m", payload={})

    assert record["event_type"] == "grid_created"


def test_only_alert_levels_go_to_telegram(tmp_path, monkeypatch):
    sent = []

    class FakeBot:
        def __init__(self, token, chat_id):
            self.token = token
            self.chat_id = chat_id

        def send_text(self, text):
            sent.append(text)

    monkeypatch.setattr(event_notifier_module, "TelegramBot", FakeBot)
    monkeypatch.setenv("GRID_ALERT_TELEGRAM_TOKEN", "token")
    monkeypatch.setenv("GRID_ALERT_TELEGRAM_CHAT_ID", "42")

    notifier = GridEventNotifier(strategy="martingale_grid", host="h", history_path=tmp_path / "e.jsonl")
    notifier.notify(event_type="level_activated", level="INFO", message="info", payload={})
    notifier.notify(
        event_type="stop_loss_triggered",
        level="WARNING",
        message="Grid: stop loss hit",
        payload={"price": 94.9},
    )

    assert len(sent) == 1
    assert sent[0].startswith("[GRID WARNING] stop_loss_triggered")
    assert "price: 94.9" in sent[0]


def test_telegram_failure_is_logged_not_raised(tmp_path, monkeypatch):
    class BrokenBot:
        def __init__(self, token, chat_id):
            pass

        def send_text(self, text):
            raise RuntimeError("network down")

    monkeypatch.setattr(event_notifier_module, "TelegramBot", BrokenBot)
    monkeypatch.setenv("GRID_ALERT_TELEGRAM_TOKEN", "token")
    monkeypatch.setenv("GRID_ALERT_TELEGRAM_CHAT_ID", "42")

    notifier = GridEventNotifier(strategy="martingale_grid", host="h", history_path=tmp_path / "e.jsonl")

    record = notifier.notify(event_type="grid_disposed", level="WARNING", message="m", payload={})

    assert record["level"] == "WARNING"
