import pandas as pd

from strategy_brain.core.regime import detect_regime, neutral_condition
from strategy_brain.core.types import Level, MarketCondition, Trend

from market_fixtures import candles_from, linear


def test_too_few_candles_gives_neutral_default(settings):
    cond = detect_regime(candles_from([100.0] * 13), settings=settings)

    assert cond == neutral_condition()
    assert cond.rsi is None
    assert detect_regime([], settings=settings) == neutral_condition()


def test_bullish_medium_medium(settings):
    # +10% over the window, std/mean ~2.9%
    cond = detect_regime(candles_from(linear(100, 110)), settings=settings)

    assert cond.trend == Trend.BULLISH
    assert cond.volatility == Level.MEDIUM
    assert cond.volume == Level.MEDIUM
    # 14 candles are one short of a 14-period RSI
    assert cond.rsi == 50


def test_flat_price_with_volume_spike(settings):
    closes = [100.0] * 14
    volumes = [100.0] * 11 + [300.0] * 3

    cond = detect_regime(candles_from(closes, volumes), settings=settings)

    assert cond.trend == Trend.SIDEWAYS
    assert cond.volatility == Level.LOW
    assert cond.volume == Level.HIGH


def test_bearish_high_volatility_low_volume(settings):
    volumes = [100.0] * 11 + [10.0] * 3

    cond = detect_regime(candles_from(linear(100, 80), volumes), settings=settings)

    assert cond.trend == Trend.BEARISH
    assert cond.volatility == Level.HIGH
    assert cond.volume == Level.LOW


def test_only_most_recent_window_is_classified(settings):
    recent = candles_from(linear(100, 110))
    history = candles_from([5000.0] * 20, [1.0] * 20)

    cond = detect_regime(history + recent, settings=settings)

    assert cond.regime_key == detect_regime(recent, settings=settings).regime_key


def test_rsi_uses_classification_window_only(settings):
    # rising 15 closes: the 14-candle window is one transition short of an RSI
    rising = detect_regime(candles_from(linear(100, 114, n=15)), settings=settings)
    # the drop sits outside the window and must not move the reading
    spike = detect_regime(candles_from([200.0] + [100.0] * 14), settings=settings)

    assert rising.rsi == 50
    assert spike.rsi == 50


def test_degenerate_values_do_not_raise(settings):
    closes = [0.0] * 14
    volumes = [0.0] * 14

    cond = detect_regime(candles_from(closes, volumes), settings=settings)

    assert cond.trend == Trend.SIDEWAYS
    assert cond.volatility == Level.MEDIUM
    assert cond.volume == Level.MEDIUM


def test_accepts_dataframe_and_kline_rows(settings):
    closes = linear(100, 110)
    df = pd.DataFrame(candles_from(closes))
    klines = [[i, c, c, c, c, 100.0, 0, 0, 0, 0, 0, 0] for i, c in enumerate(closes)]

    assert detect_regime(df, settings=settings).trend == Trend.BULLISH
    assert detect_regime(klines, settings=settings).trend == Trend.BULLISH


def test_regime_key_ignores_rsi_and_macd():
    a = MarketCondition(Trend.BULLISH, Level.LOW, Level.MEDIUM, rsi=20)
    b = MarketCondition(Trend.BULLISH, Level.LOW, Level.MEDIUM, rsi=80, macd_signal="bearish")

    assert a != b
    assert a.regime_key == b.regime_key
    assert str(a.regime_key) == "bullish-low-medium"


def test_market_condition_round_trip():
    cond = MarketCondition(Trend.BEARISH, Level.HIGH, Level.LOW, rsi=33, macd_signal="neutral")
    assert MarketCondition.from_dict(cond.to_dict()) == cond
