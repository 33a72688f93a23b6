from typing import Any, Dict, Optional

import pandas as pd

from strategy_brain.core.strategies.base import BaseStrategy
from strategy_brain.core.types import TradeAction


class DCAStrategy(BaseStrategy):
    """Dollar-cost averaging: always buys at the latest close."""
    name = "dca"

    def generate(self, df: pd.DataFrame, config: Dict[str, Any],
                 quantity: float) -> Optional[TradeAction]:
        return TradeAction(side="buy", price=float(df["close"].iloc[-1]), quantity=quantity)
