from strategy_brain.core.types import Level, MarketCondition, Trend

BULL_LOW_MED = MarketCondition(trend=Trend.BULLISH, volatility=Level.LOW, volume=Level.MEDIUM, rsi=55)
SIDEWAYS_MED_MED = MarketCondition(trend=Trend.SIDEWAYS, volatility=Level.MEDIUM, volume=Level.MEDIUM)


def candles_from(closes, volumes=None):
    volumes = volumes or [100.0] * len(closes)
    return [
        {"time": i, "open": c, "high": c, "low": c, "close": c, "volume": v}
        for i, (c, v) in enumerate(zip(closes, volumes))
    ]


def linear(start, end, n=14):
    step = (end - start) / (n - 1)
    return [start + step * i for i in range(n)]
