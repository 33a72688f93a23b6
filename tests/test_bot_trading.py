from datetime import datetime, timezone

import pytest

from strategy_brain.core.types import TradingStrategy
from strategy_brain.infrastructure.exchange.types import OrderResult
from strategy_brain.infrastructure.execution.bot_trading import BotTradingService
from strategy_brain.infrastructure.state.pending_trades import PendingTradeStore
from strategy_brain.infrastructure.storage.memory_storage import InMemoryStorage
from strategy_brain.infrastructure.storage.storage_base import StorageError

from market_fixtures import BULL_LOW_MED, candles_from, linear


class FakeMarketData:
    def __init__(self, candles):
        self.candles = candles
        self.calls = []

    def fetch_chart_data(self, symbol, timeframe):
        self.calls.append((symbol, timeframe))
        return self.candles


class FakeGateway:
    def __init__(self, fail=False, fill_price=0.0):
        self.fail = fail
        self.fill_price = fill_price
        self.orders = []

    def place_order(self, order):
        if self.fail:
            raise RuntimeError("exchange unavailable")
        self.orders.append(order)
        return OrderResult(order_id=f"ord-{len(self.orders)}", executed_qty=order.quantity,
                           avg_price=self.fill_price, status="filled")


DCA = TradingStrategy(id="dca-1", name="DCA", type="dca", config={"timeframe": "4h"})


@pytest.fixture
def candles():
    return candles_from(linear(100, 110, n=20))


def test_execute_places_order_and_tracks_pending(memory, candles):
    market_data = FakeMarketData(candles)
    gateway = FakeGateway()
    bot = BotTradingService(memory, market_data, gateway)

    assert bot.execute_strategy_trade(DCA, "BTCUSDT") is True

    assert market_data.calls == [("BTCUSDT", "4h")]
    assert gateway.orders[0].side == "buy"
    assert gateway.orders[0].order_type == "market"
    pending = bot.pending.get("ord-1")
    assert pending.strategy_id == "dca-1"
    assert pending.entry_price == 110.0
    assert pending.trade_parameters == {"timeframe": "4h"}


def test_pending_trades_survive_restart(memory, candles):
    bot = BotTradingService(memory, FakeMarketData(candles), FakeGateway())
    bot.execute_strategy_trade(DCA, "BTCUSDT")

    store = PendingTradeStore(memory.ledger.storage, memory.settings.PENDING_TRADES_KEY, logger=memory.logger)

    assert store.is_open("ord-1")
    assert store.get("ord-1").market_condition == bot.pending.get("ord-1").market_condition


def test_complete_pending_trade_records_memory(memory, candles, notifier):
    bot = BotTradingService(memory, FakeMarketData(candles), FakeGateway())
    bot.execute_strategy_trade(DCA, "BTCUSDT")

    record = bot.complete_pending_trade("ord-1", exit_price=121.0)

    assert record.pnl_percentage == pytest.approx(10.0)
    assert record.pnl == pytest.approx(11.0 * 0.01)
    assert record.success_score == 100
    assert bot.pending.all() == []
    assert memory.get_strategy_records("dca-1") == [record]
    assert ("success", "Trade completed and recorded") in notifier.alerts


def test_complete_unknown_trade(memory, candles):
    bot = BotTradingService(memory, FakeMarketData(candles), FakeGateway())
    assert bot.complete_pending_trade("nope", 1.0) is None


def test_execution_failure_is_reported(memory, candles, notifier):
    bot = BotTradingService(memory, FakeMarketData(candles), FakeGateway(fail=True))

    assert bot.execute_strategy_trade(DCA, "BTCUSDT") is False
    assert ("error", "Strategy execution failed") in notifier.alerts
    assert bot.pending.all() == []


def test_no_signal_places_no_order(memory):
    gateway = FakeGateway()
    bot = BotTradingService(memory, FakeMarketData(candles_from([10.0] * 30)), gateway)
    strat = TradingStrategy(id="tf", name="MA", type="trend_following")

    assert bot.execute_strategy_trade(strat, "BTCUSDT") is False
    assert gateway.orders == []


def test_record_trade_completion_long_and_short(memory):
    bot = BotTradingService(memory, FakeMarketData([]), FakeGateway())
    entry_time = datetime(2024, 1, 1, tzinfo=timezone.utc)

    long_rec = bot.record_trade_completion("BTCUSDT", 100.0, 110.0, 2.0, "s1", "momentum",
                                           entry_time, BULL_LOW_MED, {"rsiPeriod": 14})
    short_rec = bot.record_trade_completion("BTCUSDT", 100.0, 90.0, 2.0, "s1", "momentum",
                                            entry_time, BULL_LOW_MED, side="sell")

    assert long_rec.pnl == pytest.approx(20.0)
    assert long_rec.pnl_percentage == pytest.approx(10.0)
    assert short_rec.pnl == pytest.approx(20.0)
    assert short_rec.pnl_percentage == pytest.approx(10.0)
    assert long_rec.exit_time >= entry_time


def test_active_strategies(memory):
    bot = BotTradingService(memory, FakeMarketData([]), FakeGateway())
    bot.set_active_strategies([DCA])

    assert bot.get_active_strategies() == [DCA]


class ReadOnlyStorage(InMemoryStorage):
    def save(self, key, data):
        raise StorageError("read-only")


def test_entry_uses_reported_fill(memory, candles):
    bot = BotTradingService(memory, FakeMarketData(candles), FakeGateway(fill_price=110.5))
    bot.execute_strategy_trade(DCA, "BTCUSDT")

    assert bot.pending.get("ord-1").entry_price == 110.5


def test_unsaved_pending_trade_warns(memory, candles, notifier, logger):
    pending = PendingTradeStore(ReadOnlyStorage(), "pending", logger=logger)
    bot = BotTradingService(memory, FakeMarketData(candles), FakeGateway(), pending=pending)

    assert bot.execute_strategy_trade(DCA, "BTCUSDT") is True
    assert ("warning", "Failed to save pending trade") in notifier.alerts
    assert pending.is_open("ord-1")
