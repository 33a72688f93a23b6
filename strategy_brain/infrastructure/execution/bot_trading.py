import traceback
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from strategy_brain.core.engine import MemoryService
from strategy_brain.core.strategies.signals import determine_trade_action
from strategy_brain.core.types import (
    MarketCondition,
    Side,
    StrategyType,
    TradeOutcome,
    TradeRecord,
    TradingStrategy,
)
from strategy_brain.infrastructure.exchange.types import MarketDataSource, OrderGateway, OrderRequest
from strategy_brain.infrastructure.state.pending_trades import PendingTrade, PendingTradeStore


class BotTradingService:
    """
    Joins trade execution and the strategy memory.
    - entry  : classify -> signal -> market order -> pending trade
    - exit   : P&L -> memory
    Exchange and market data are collaborators; this layer never talks to an exchange itself.
    """

    def __init__(self, memory: MemoryService, market_data: MarketDataSource,
                 gateway: OrderGateway, pending: Optional[PendingTradeStore] = None):
        self.memory = memory
        self.market_data = market_data
        self.gateway = gateway
        self.settings = memory.settings
        self.logger = memory.logger
        self.notifier = memory.notifier
        self.pending = pending or PendingTradeStore(
            memory.ledger.storage, self.settings.PENDING_TRADES_KEY, logger=self.logger
        )
        self.active_strategies: List[TradingStrategy] = []

    def execute_strategy_trade(self, strategy: TradingStrategy, symbol: str) -> bool:
        """Run one strategy on `symbol`. True when an order was placed."""
        timeframe = (strategy.config or {}).get("timeframe") or self.settings.DEFAULT_TIMEFRAME
        try:
            candles = self.market_data.fetch_chart_data(symbol, timeframe)
            condition = self.memory.analyze_market_condition(symbol, candles)

            action = determine_trade_action(strategy, candles, settings=self.settings)
            if action is None:
                self.logger.info("No trade signal", symbol=symbol, strategy=strategy.name)
                return False

            result = self.gateway.place_order(OrderRequest(
                symbol=symbol,
                side=action.side,
                quantity=action.quantity,
                order_type="market"
            ))
        except Exception as e:
            # collaborator failures end the attempt, never the bot
            self.notifier.error_alert("Strategy execution failed", str(e))
            self.logger.debug("Strategy execution trace", trace=traceback.format_exc())
            return False

        # reported fill wins over the signal price
        entry_price = result.avg_price if result.avg_price > 0 else action.price
        quantity = result.executed_qty if result.executed_qty > 0 else action.quantity

        saved = self.pending.add(PendingTrade(
            order_id=result.order_id,
            strategy_id=strategy.id,
            strategy_type=strategy.type,
            symbol=symbol,
            side=action.side,
            entry_price=entry_price,
            quantity=quantity,
            entry_time=datetime.now(timezone.utc),
            market_condition=condition,
            trade_parameters=dict(strategy.config or {}),
        ))
        if not saved:
            self.notifier.warning_alert(
                "Failed to save pending trade",
                f"Order {result.order_id} is open but will not survive a restart"
            )
        self.logger.info("Trade initiated", side=action.side, qty=quantity,
                         symbol=symbol, price=entry_price, strategy=strategy.name)
        return True

    def record_trade_completion(self, symbol: str, entry_price: float, exit_price: float,
                                quantity: float, strategy_id: str, strategy_type: StrategyType,
                                entry_time: datetime, market_condition: MarketCondition,
                                trade_parameters: Optional[Dict[str, Any]] = None,
                                side: Side = "buy") -> TradeRecord:
        """
        P&L of a closed position, then hand it to the memory.
        Long : pnl = (exit - entry) * qty
        Short: pnl = (entry - exit) * qty
        """
        if side == "sell":
            pnl = (entry_price - exit_price) * quantity
            pnl_percentage = (1 - exit_price / entry_price) * 100
        else:
            pnl = (exit_price - entry_price) * quantity
            pnl_percentage = (exit_price / entry_price - 1) * 100

        record = self.memory.record_trade_performance(TradeOutcome(
            strategy_id=strategy_id,
            strategy_type=strategy_type,
            symbol=symbol,
            entry_time=entry_time,
            exit_time=datetime.now(timezone.utc),
            entry_price=entry_price,
            exit_price=exit_price,
            pnl=pnl,
            pnl_percentage=pnl_percentage,
            market_condition=market_condition,
            trade_parameters=trade_parameters or {},
        ))

        self.notifier.trade_completed(symbol, pnl, pnl_percentage)
        return record

    def complete_pending_trade(self, order_id: str, exit_price: float) -> Optional[TradeRecord]:
        trade = self.pending.pop(order_id)
        if trade is None:
            self.logger.warning("Unknown pending trade", order_id=order_id)
            return None

        return self.record_trade_completion(
            symbol=trade.symbol,
            entry_price=trade.entry_price,
            exit_price=exit_price,
            quantity=trade.quantity,
            strategy_id=trade.strategy_id,
            strategy_type=trade.strategy_type,
            entry_time=trade.entry_time,
            market_condition=trade.market_condition,
            trade_parameters=trade.trade_parameters,
            side=trade.side,
        )

    def set_active_strategies(self, strategies: List[TradingStrategy]):
        self.active_strategies = list(strategies)

    def get_active_strategies(self) -> List[TradingStrategy]:
        return list(self.active_strategies)
