from typing import Optional

from strategy_brain.config.settings import MemorySettings, settings as default_settings
from strategy_brain.core.data_processor import CandleInput, DataProcessor
from strategy_brain.core.types import Level, MarketCondition, Trend


def neutral_condition() -> MarketCondition:
    return MarketCondition(trend=Trend.SIDEWAYS, volatility=Level.MEDIUM, volume=Level.MEDIUM)


def detect_regime(candles: CandleInput,
                  settings: Optional[MemorySettings] = None) -> MarketCondition:
    """
    [시장 레짐 분류]
    최근 윈도우(기본 14봉) 기준 휴리스틱 분류

    Trend      : 첫 종가 -> 마지막 종가 변화율(%), ±3% 초과 시 방향성
    Volatility : 종가 모표준편차 / 평균 (%)
    Volume     : 최근 3봉 평균 거래량 / 윈도우 평균 거래량
    RSI        : 같은 윈도우의 단순 RSI (참고용, 레짐 키에는 미포함)
    """
    s = settings or default_settings
    df = DataProcessor.to_dataframe(candles)

    window = s.CLASSIFIER_WINDOW
    if len(df) < window:
        return neutral_condition()

    recent = df.iloc[-window:]
    closes = recent["close"]
    volumes = recent["volume"]

    # 1. Trend
    first_price = closes.iloc[0]
    last_price = closes.iloc[-1]
    trend = Trend.SIDEWAYS
    if first_price != 0:
        price_change = (last_price - first_price) / first_price * 100
        if price_change > s.TREND_THRESHOLD_PCT:
            trend = Trend.BULLISH
        elif price_change < -s.TREND_THRESHOLD_PCT:
            trend = Trend.BEARISH

    # 2. Volatility (population std)
    avg_price = closes.mean()
    volatility = Level.MEDIUM
    if avg_price != 0:
        volatility_ratio = closes.std(ddof=0) / avg_price * 100
        if volatility_ratio < s.VOLATILITY_LOW_PCT:
            volatility = Level.LOW
        elif volatility_ratio > s.VOLATILITY_HIGH_PCT:
            volatility = Level.HIGH

    # 3. Volume
    avg_volume = volumes.mean()
    volume = Level.MEDIUM
    if avg_volume > 0:
        recent_volume = volumes.iloc[-s.VOLUME_RECENT_CANDLES:].mean()
        volume_ratio = recent_volume / avg_volume
        if volume_ratio < s.VOLUME_LOW_RATIO:
            volume = Level.LOW
        elif volume_ratio > s.VOLUME_HIGH_RATIO:
            volume = Level.HIGH

    # 4. RSI (같은 윈도우)
    rsi = DataProcessor.calculate_rsi(closes, s.RSI_PERIOD)

    return MarketCondition(trend=trend, volatility=volatility, volume=volume, rsi=rsi)
