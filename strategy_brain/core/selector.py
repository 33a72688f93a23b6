"""
전략 추천기 (Strategy Recommender)

핵심:
1. 전체 기록 수 게이트 (기본 10건)
2. 레짐별 최소 표본 게이트 (기본 3건)
3. 신뢰도 = 레짐 성공률 * min(1, 레짐 거래수 / 10)
"""
from typing import Any, List, Optional, Sequence, Tuple

from strategy_brain.config.settings import MemorySettings, settings as default_settings
from strategy_brain.core.history_store import PerformanceLedger
from strategy_brain.core.types import MarketCondition, Recommendation, RegimeKey


def strategy_id_of(strategy: Any) -> str:
    """Candidate id from a TradingStrategy-like object or a mapping."""
    if isinstance(strategy, dict):
        return str(strategy["id"])
    return str(strategy.id)


class RecommendationEngine:
    """
    레짐 기반 전략 추천 (ledger는 읽기만 함)
    """

    def __init__(self, ledger: PerformanceLedger, settings: Optional[MemorySettings] = None):
        self.ledger = ledger
        self.settings = settings or default_settings

    def confidence(self, success_rate: float, regime_trades: int) -> float:
        saturation = min(1.0, regime_trades / self.settings.CONFIDENCE_SATURATION_TRADES)
        return success_rate * saturation

    def rank_candidates(self, regime: RegimeKey,
                        candidates: Sequence[Any]) -> List[Tuple[str, float]]:
        """
        (strategy_id, confidence) for every candidate that passes the regime
        sample gate, best first. Equal confidences keep input order.
        """
        scored = []
        for strategy in candidates:
            sid = strategy_id_of(strategy)
            perf = self.ledger.get_performance(sid)
            if perf is None:
                continue

            cond = perf.condition_performance.get(regime)
            if cond is None or cond.total_trades < self.settings.MIN_REGIME_TRADES:
                # 레짐 표본 부족
                continue

            scored.append((sid, self.confidence(cond.success_rate, cond.total_trades)))

        # sorted() is stable
        return sorted(scored, key=lambda item: item[1], reverse=True)

    def recommend(self, symbol: str, current_condition: MarketCondition,
                  candidates: Sequence[Any]) -> Optional[Recommendation]:
        """
        최적 전략 추천

        Returns None when global history is below MIN_TOTAL_RECORDS or when
        no candidate clears the regime gate with a positive confidence.
        """
        if len(self.ledger) < self.settings.MIN_TOTAL_RECORDS:
            return None

        regime = current_condition.regime_key
        ranked = self.rank_candidates(regime, candidates)
        if not ranked or ranked[0][1] <= 0:
            return None

        best_id, best_confidence = ranked[0]
        return Recommendation(
            symbol=symbol,
            recommended_strategy=best_id,
            confidence=best_confidence,
            reason=(
                f"Based on {best_confidence:.0f}% confidence from past performance "
                f"in similar market conditions ({regime})"
            ),
            market_condition=current_condition,
        )
