"""
[전역 설정 파일 - 전략 메모리]
학습 메모리/추천 엔진의 모든 상수

=== 핵심 공식 ===

1. Success Score (거래 성공 점수)
   score = clamp(50 + pnl% × 5, 0, 100)
   손익 0% = 50점, 1% 당 5점, ±10% 에서 포화

2. Incremental Mean (누적 평균)
   avg_n = (avg_{n-1} × (n-1) + x_n) / n

3. Recommendation Confidence (추천 신뢰도)
   confidence = success_rate × min(1, n_regime / 10)
   레짐 내 거래 10회 이상이면 신뢰도 포화
"""
from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class MemorySettings(BaseSettings):
    """마스터 설정 클래스 - 전략 메모리"""

    APP_NAME: str = "Market-Sorcerer-Memory"
    ENV: str = "production"

    # ============================================================
    # [저장소]
    # ============================================================
    # - "json": 파일 저장 (기본)
    # - "memory": 프로세스 내 저장 (테스트/드라이런)
    STORAGE_BACKEND: Literal["json", "memory"] = "json"
    STORAGE_PATH: str = "data/memory"
    STORAGE_KEY: str = "market-sorcerer-memory"
    PENDING_TRADES_KEY: str = "market-sorcerer-pending-trades"

    # 메모리 크기 제한 (FIFO, 오래된 기록부터 제거)
    MAX_RECORDS: int = Field(default=1000, ge=1)

    # ============================================================
    # [성공 점수]
    # ============================================================
    SCORE_BASELINE: float = 50.0          # 손익분기 거래의 점수
    SCORE_PER_PERCENT: float = 5.0        # 손익 1% 당 점수
    SCORE_MIN: float = 0.0
    SCORE_MAX: float = 100.0

    # ============================================================
    # [추천 게이트]
    # ============================================================
    # 전체 기록이 이보다 적으면 추천하지 않음
    MIN_TOTAL_RECORDS: int = Field(default=10, ge=0)
    # 레짐별 최소 표본 수
    MIN_REGIME_TRADES: int = Field(default=3, ge=1)
    # 이 거래 수에서 신뢰도 포화
    CONFIDENCE_SATURATION_TRADES: int = Field(default=10, ge=1)

    # ============================================================
    # [시장 상태 분류]
    # ============================================================
    CLASSIFIER_WINDOW: int = Field(default=14, ge=2)
    TREND_THRESHOLD_PCT: float = 3.0        # ±3% 이상이면 추세
    VOLATILITY_LOW_PCT: float = 1.5         # std/mean < 1.5% → low
    VOLATILITY_HIGH_PCT: float = 4.0        # std/mean > 4% → high
    VOLUME_RECENT_CANDLES: int = Field(default=3, ge=1)
    VOLUME_LOW_RATIO: float = 0.7
    VOLUME_HIGH_RATIO: float = 1.5

    RSI_PERIOD: int = Field(default=14, ge=1)
    RSI_OVERSOLD: float = 30.0
    RSI_OVERBOUGHT: float = 70.0

    # ============================================================
    # [전략 신호]
    # ============================================================
    MIN_SIGNAL_CANDLES: int = 10
    DEFAULT_ORDER_QUANTITY: float = 0.01
    TREND_FAST_MA: int = 9
    TREND_SLOW_MA: int = 21
    DEFAULT_TIMEFRAME: str = "1h"

    # ============================================================
    # [모니터링]
    # ============================================================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FILE: Optional[str] = None

    TELEGRAM_TOKEN: Optional[str] = None
    TELEGRAM_CHAT_ID: Optional[str] = None

    # ============================================================
    # Pydantic Config
    # ============================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        extra='ignore'
    )


# 설정 인스턴스
settings = MemorySettings()
