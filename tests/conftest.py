from datetime import datetime, timedelta, timezone

import pytest

from strategy_brain.config.settings import MemorySettings
from strategy_brain.core.engine import MemoryService
from strategy_brain.core.types import TradeOutcome
from strategy_brain.infrastructure.storage.memory_storage import InMemoryStorage
from strategy_brain.monitor.logger import Logger, LogLevel
from strategy_brain.monitor.telegram_bot import TelegramNotifier

from market_fixtures import BULL_LOW_MED


class RecordingNotifier(TelegramNotifier):
    """Keeps every alert instead of sending it."""

    def __init__(self, logger):
        super().__init__(token="", chat_id="", logger=logger)
        self.enabled = False
        self.alerts = []

    def warning_alert(self, title, message):
        self.alerts.append(("warning", title))
        return False

    def error_alert(self, error, details=""):
        self.alerts.append(("error", error))
        return False

    def success_alert(self, title, message):
        self.alerts.append(("success", title))
        return False


@pytest.fixture
def settings():
    return MemorySettings(STORAGE_BACKEND="memory", TELEGRAM_TOKEN=None, TELEGRAM_CHAT_ID=None)


@pytest.fixture
def logger():
    return Logger(name="test", level=LogLevel.CRITICAL)


@pytest.fixture
def notifier(logger):
    return RecordingNotifier(logger)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def memory(storage, settings, logger, notifier):
    return MemoryService(storage=storage, settings=settings, logger=logger, notifier=notifier)



@pytest.fixture
def make_outcome():
    """Factory for closed trades; pnl_pct drives the success score."""
    base = datetime(2024, 3, 1, 12, 0, 0, 123000, tzinfo=timezone.utc)

    def _make(strategy_id="s1", pnl_pct=1.0, condition=BULL_LOW_MED,
              strategy_type="momentum", symbol="BTCUSDT", params=None):
        entry_price = 100.0
        exit_price = entry_price * (1 + pnl_pct / 100)
        return TradeOutcome(
            strategy_id=strategy_id,
            strategy_type=strategy_type,
            symbol=symbol,
            entry_time=base,
            exit_time=base + timedelta(minutes=30),
            entry_price=entry_price,
            exit_price=exit_price,
            pnl=exit_price - entry_price,
            pnl_percentage=pnl_pct,
            market_condition=condition,
            trade_parameters=params if params is not None else {"rsiPeriod": 14},
        )

    return _make
