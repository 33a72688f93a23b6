"""
거래 성공 점수 (Success Score)

score = clamp(50 + pnl% * 5, 0, 100), 반올림
- 손익 0% -> 50점
- 1% 당 5점
- ±10% 이상에서 포화
"""
from typing import Optional

from strategy_brain.config.settings import MemorySettings, settings as default_settings
from strategy_brain.core.data_processor import round_half_up


def success_score(pnl_percentage: float, settings: Optional[MemorySettings] = None) -> int:
    s = settings or default_settings
    score = s.SCORE_BASELINE + pnl_percentage * s.SCORE_PER_PERCENT
    score = max(s.SCORE_MIN, min(s.SCORE_MAX, score))
    return round_half_up(score)
