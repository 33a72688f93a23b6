from typing import Any, Dict, Optional

import pandas as pd

from strategy_brain.core.data_processor import DataProcessor
from strategy_brain.core.strategies.base import BaseStrategy
from strategy_brain.core.types import TradeAction


class TrendStrategy(BaseStrategy):
    """
    이동평균 교차 추세 추종 (SMA fast / slow crossover)
    - 직전 봉 fast <= slow, 현재 fast > slow -> buy
    - 직전 봉 fast >= slow, 현재 fast < slow -> sell
    """
    name = "trend_following"

    def generate(self, df: pd.DataFrame, config: Dict[str, Any],
                 quantity: float) -> Optional[TradeAction]:
        fast = int(config.get("fastMA", self.settings.TREND_FAST_MA))
        slow = int(config.get("slowMA", self.settings.TREND_SLOW_MA))

        closes = df["close"]
        prev_closes = closes.iloc[:-1]

        fast_now = DataProcessor.calculate_sma(closes, fast)
        slow_now = DataProcessor.calculate_sma(closes, slow)
        fast_prev = DataProcessor.calculate_sma(prev_closes, fast)
        slow_prev = DataProcessor.calculate_sma(prev_closes, slow)

        price = float(closes.iloc[-1])

        if fast_prev <= slow_prev and fast_now > slow_now:
            return TradeAction(side="buy", price=price, quantity=quantity)
        if fast_prev >= slow_prev and fast_now < slow_now:
            return TradeAction(side="sell", price=price, quantity=quantity)
        return None
