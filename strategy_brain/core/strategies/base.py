from typing import Any, Dict, Optional

import pandas as pd

from strategy_brain.config.settings import MemorySettings
from strategy_brain.core.types import TradeAction


class BaseStrategy:
    """
    전략 타입별 시그널 규칙
    캔들 프레임(최신이 마지막) + 전략 설정 -> TradeAction 또는 None
    """

    name: str = "base"

    def __init__(self, settings: MemorySettings):
        self.settings = settings

    def generate(self, df: pd.DataFrame, config: Dict[str, Any],
                 quantity: float) -> Optional[TradeAction]:
        return None
