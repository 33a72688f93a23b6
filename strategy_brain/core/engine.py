from typing import Any, List, Optional, Sequence

from strategy_brain.config.settings import MemorySettings, settings as default_settings
from strategy_brain.core.data_processor import CandleInput
from strategy_brain.core.history_store import PerformanceLedger
from strategy_brain.core.regime import detect_regime
from strategy_brain.core.selector import RecommendationEngine
from strategy_brain.core.types import (
    MarketCondition,
    Recommendation,
    StrategyPerformance,
    TradeOutcome,
    TradeRecord,
)
from strategy_brain.infrastructure.storage.storage_base import BaseStorage
from strategy_brain.infrastructure.storage.storage_factory import create_storage
from strategy_brain.monitor.logger import Logger, get_logger
from strategy_brain.monitor.telegram_bot import TelegramNotifier


class MemoryService:
    """
    [전략 메모리 서비스]
    - 거래 기록 / 성과 조회
    - 시장 레짐 분석
    - 레짐 기반 전략 추천
    앱 시작 시 한 번 생성해서 사용하는 쪽(트레이딩 코디네이터, 리포터)에 넘겨준다.
    """

    def __init__(self, storage: Optional[BaseStorage] = None,
                 settings: Optional[MemorySettings] = None,
                 logger: Optional[Logger] = None,
                 notifier: Optional[TelegramNotifier] = None):
        self.settings = settings or default_settings
        self.logger = logger or get_logger()
        self.notifier = notifier or TelegramNotifier(logger=self.logger)

        self.ledger = PerformanceLedger(
            storage if storage is not None else create_storage(self.settings),
            settings=self.settings,
            logger=self.logger,
        )
        self.recommender = RecommendationEngine(self.ledger, settings=self.settings)

    def record_trade_performance(self, outcome: TradeOutcome) -> TradeRecord:
        record = self.ledger.record_trade(outcome)
        if not self.ledger.last_save_ok:
            # 메모리 상태 유지, 다음 저장에 모두 포함됨
            self.notifier.warning_alert(
                "Failed to save trading memory",
                "Your trading bot memory could not be saved to storage"
            )
        return record

    def get_all_performance_metrics(self) -> List[StrategyPerformance]:
        return self.ledger.get_all_performance()

    def get_strategy_records(self, strategy_id: str) -> List[TradeRecord]:
        return self.ledger.get_strategy_records(strategy_id)

    def get_recommendation(self, symbol: str, current_condition: MarketCondition,
                           available_strategies: Sequence[Any]) -> Optional[Recommendation]:
        rec = self.recommender.recommend(symbol, current_condition, available_strategies)
        if rec is not None:
            self.logger.recommendation(symbol, rec.recommended_strategy, rec.confidence,
                                       str(current_condition.regime_key))
        else:
            self.logger.debug("No recommendation", symbol=symbol,
                              regime=str(current_condition.regime_key), records=len(self.ledger))
        return rec

    def analyze_market_condition(self, symbol: str, candles: CandleInput) -> MarketCondition:
        condition = detect_regime(candles, settings=self.settings)
        self.logger.debug("Market condition", symbol=symbol,
                          regime=str(condition.regime_key), rsi=condition.rsi)
        return condition

    def clear_memory(self) -> bool:
        cleared = self.ledger.clear()
        if cleared:
            self.notifier.success_alert(
                "Trading memory cleared",
                "All trading history and learned patterns have been reset"
            )
        else:
            self.notifier.warning_alert(
                "Failed to clear trading memory",
                "Persisted memory could not be deleted; in-memory state was reset"
            )
        return cleared
