from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Literal, NamedTuple, Optional

Side = Literal["buy", "sell"]
StrategyType = Literal["momentum", "trend_following", "arbitrage", "dca", "custom"]
MacdSignal = Literal["bullish", "bearish", "neutral"]


class Trend(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    SIDEWAYS = "sideways"


class Level(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RegimeKey(NamedTuple):
    """레짐 키 (trend, volatility, volume). RSI / MACD는 포함하지 않음"""
    trend: Trend
    volatility: Level
    volume: Level

    def __str__(self) -> str:
        return f"{self.trend.value}-{self.volatility.value}-{self.volume.value}"


@dataclass(frozen=True)
class MarketCondition:
    trend: Trend = Trend.SIDEWAYS
    volatility: Level = Level.MEDIUM
    volume: Level = Level.MEDIUM
    rsi: Optional[int] = None
    macd_signal: Optional[MacdSignal] = None

    @property
    def regime_key(self) -> RegimeKey:
        return RegimeKey(Trend(self.trend), Level(self.volatility), Level(self.volume))

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "trend": Trend(self.trend).value,
            "volatility": Level(self.volatility).value,
            "volume": Level(self.volume).value,
        }
        if self.rsi is not None:
            d["rsi"] = self.rsi
        if self.macd_signal is not None:
            d["macd_signal"] = self.macd_signal
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MarketCondition":
        rsi = d.get("rsi")
        return cls(
            trend=Trend(d["trend"]),
            volatility=Level(d["volatility"]),
            volume=Level(d["volume"]),
            rsi=int(rsi) if rsi is not None else None,
            macd_signal=d.get("macd_signal"),
        )


@dataclass
class Candle:
    time: float
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass
class TradingStrategy:
    id: str
    name: str
    type: StrategyType
    config: Dict[str, Any] = field(default_factory=dict)
    description: str = ""
    is_active: bool = True
    risk_level: Literal["low", "medium", "high"] = "medium"


@dataclass
class TradeAction:
    side: Side
    price: float
    quantity: float


@dataclass(frozen=True)
class TradeOutcome:
    """청산된 거래 (id, 점수 부여 전)"""
    strategy_id: str
    strategy_type: StrategyType
    symbol: str
    entry_time: datetime
    exit_time: datetime
    entry_price: float
    exit_price: float
    pnl: float
    pnl_percentage: float
    market_condition: MarketCondition
    trade_parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TradeRecord:
    id: str
    strategy_id: str
    strategy_type: StrategyType
    symbol: str
    entry_time: datetime
    exit_time: datetime
    entry_price: float
    exit_price: float
    pnl: float
    pnl_percentage: float
    success_score: int
    market_condition: MarketCondition
    trade_parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "strategy_id": self.strategy_id,
            "strategy_type": self.strategy_type,
            "symbol": self.symbol,
            "entry_time": self.entry_time.isoformat(),
            "exit_time": self.exit_time.isoformat(),
            "entry_price": self.entry_price,
            "exit_price": self.exit_price,
            "pnl": self.pnl,
            "pnl_percentage": self.pnl_percentage,
            "success_score": self.success_score,
            "market_condition": self.market_condition.to_dict(),
            "trade_parameters": self.trade_parameters,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TradeRecord":
        return cls(
            id=str(d["id"]),
            strategy_id=str(d["strategy_id"]),
            strategy_type=d["strategy_type"],
            symbol=d["symbol"],
            entry_time=datetime.fromisoformat(d["entry_time"]),
            exit_time=datetime.fromisoformat(d["exit_time"]),
            entry_price=float(d["entry_price"]),
            exit_price=float(d["exit_price"]),
            pnl=float(d["pnl"]),
            pnl_percentage=float(d["pnl_percentage"]),
            success_score=int(d["success_score"]),
            market_condition=MarketCondition.from_dict(d["market_condition"]),
            trade_parameters=dict(d.get("trade_parameters") or {}),
        )


@dataclass
class ConditionPerformance:
    success_rate: float = 0.0
    total_trades: int = 0
    avg_profit_percentage: float = 0.0


@dataclass
class StrategyPerformance:
    strategy_id: str
    strategy_type: StrategyType
    overall_success_rate: float = 0.0
    total_trades: int = 0
    profitable_trades: int = 0
    avg_profit_percentage: float = 0.0
    condition_performance: Dict[RegimeKey, ConditionPerformance] = field(default_factory=dict)


@dataclass
class Recommendation:
    symbol: str
    recommended_strategy: str
    confidence: float
    reason: str
    market_condition: MarketCondition
