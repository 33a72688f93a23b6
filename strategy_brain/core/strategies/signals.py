from typing import Dict, Optional, Type

from strategy_brain.config.settings import MemorySettings, settings as default_settings
from strategy_brain.core.data_processor import CandleInput, DataProcessor
from strategy_brain.core.strategies.base import BaseStrategy
from strategy_brain.core.strategies.dca import DCAStrategy
from strategy_brain.core.strategies.momentum import MomentumStrategy
from strategy_brain.core.strategies.trend import TrendStrategy
from strategy_brain.core.types import TradeAction, TradingStrategy

STRATEGY_POOL: Dict[str, Type[BaseStrategy]] = {
    MomentumStrategy.name: MomentumStrategy,
    TrendStrategy.name: TrendStrategy,
    DCAStrategy.name: DCAStrategy,
}


def determine_trade_action(strategy: TradingStrategy, candles: CandleInput,
                           quantity: Optional[float] = None,
                           settings: Optional[MemorySettings] = None) -> Optional[TradeAction]:
    """
    전략 시그널 결정 (buy / sell / None)
    - 캔들 부족 시 None
    - 지원하지 않는 타입(arbitrage, custom)은 시그널 없음
    """
    s = settings or default_settings
    df = DataProcessor.to_dataframe(candles)
    if len(df) < s.MIN_SIGNAL_CANDLES:
        return None

    rule = STRATEGY_POOL.get(strategy.type)
    if rule is None:
        return None

    qty = quantity if quantity is not None else s.DEFAULT_ORDER_QUANTITY
    return rule(s).generate(df, strategy.config or {}, qty)
