from typing import Any, Dict, Optional

import pandas as pd

from strategy_brain.core.data_processor import DataProcessor
from strategy_brain.core.strategies.base import BaseStrategy
from strategy_brain.core.types import TradeAction


class MomentumStrategy(BaseStrategy):
    """
    RSI 과매도/과매수 전략
    - RSI <= oversold  -> buy
    - RSI >= overbought -> sell
    """
    name = "momentum"

    def generate(self, df: pd.DataFrame, config: Dict[str, Any],
                 quantity: float) -> Optional[TradeAction]:
        period = int(config.get("rsiPeriod", self.settings.RSI_PERIOD))
        oversold = float(config.get("oversold", self.settings.RSI_OVERSOLD))
        overbought = float(config.get("overbought", self.settings.RSI_OVERBOUGHT))

        # RSI over the latest period + 1 closes
        rsi = DataProcessor.calculate_rsi(df["close"].iloc[-(period + 1):], period)
        price = float(df["close"].iloc[-1])

        if rsi <= oversold:
            return TradeAction(side="buy", price=price, quantity=quantity)
        if rsi >= overbought:
            return TradeAction(side="sell", price=price, quantity=quantity)
        return None
