from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from strategy_brain.core.types import MarketCondition, Side, StrategyType
from strategy_brain.infrastructure.storage.storage_base import BaseStorage, StorageError
from strategy_brain.monitor.logger import Logger, get_logger


@dataclass
class PendingTrade:
    """An opened position waiting for its exit."""
    order_id: str
    strategy_id: str
    strategy_type: StrategyType
    symbol: str
    side: Side
    entry_price: float
    quantity: float
    entry_time: datetime
    market_condition: MarketCondition
    trade_parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "strategy_id": self.strategy_id,
            "strategy_type": self.strategy_type,
            "symbol": self.symbol,
            "side": self.side,
            "entry_price": self.entry_price,
            "quantity": self.quantity,
            "entry_time": self.entry_time.isoformat(),
            "market_condition": self.market_condition.to_dict(),
            "trade_parameters": self.trade_parameters,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PendingTrade":
        return cls(
            order_id=str(d["order_id"]),
            strategy_id=str(d["strategy_id"]),
            strategy_type=d["strategy_type"],
            symbol=d["symbol"],
            side=d["side"],
            entry_price=float(d["entry_price"]),
            quantity=float(d["quantity"]),
            entry_time=datetime.fromisoformat(d["entry_time"]),
            market_condition=MarketCondition.from_dict(d["market_condition"]),
            trade_parameters=dict(d.get("trade_parameters") or {}),
        )


class PendingTradeStore:
    """Open trades keyed by order id, persisted as one list under `key`."""

    def __init__(self, storage: BaseStorage, key: str, logger: Optional[Logger] = None):
        self.storage = storage
        self.key = key
        self.logger = logger or get_logger()
        self.trades: Dict[str, PendingTrade] = {}
        self._load()

    def _load(self):
        try:
            payload = self.storage.load(self.key) or {}
            for raw in payload.get("pending_trades") or []:
                trade = PendingTrade.from_dict(raw)
                self.trades[trade.order_id] = trade
        except (StorageError, KeyError, TypeError, ValueError, AttributeError) as e:
            self.logger.warning("Failed to load pending trades, starting empty", error=str(e))
            self.trades = {}

    def _save(self) -> bool:
        try:
            self.storage.save(self.key, {"pending_trades": [t.to_dict() for t in self.trades.values()]})
            return True
        except StorageError as e:
            self.logger.error("Failed to save pending trades", error=str(e))
            return False

    def add(self, trade: PendingTrade) -> bool:
        self.trades[trade.order_id] = trade
        return self._save()

    def pop(self, order_id: str) -> Optional[PendingTrade]:
        trade = self.trades.pop(order_id, None)
        if trade is not None:
            self._save()
        return trade

    def get(self, order_id: str) -> Optional[PendingTrade]:
        return self.trades.get(order_id)

    def all(self) -> List[PendingTrade]:
        return list(self.trades.values())

    def is_open(self, order_id: str) -> bool:
        return order_id in self.trades
