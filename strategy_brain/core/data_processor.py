import math
from dataclasses import asdict, is_dataclass
from typing import Any, Sequence, Union

import numpy as np
import pandas as pd

CandleInput = Union[pd.DataFrame, Sequence[Any]]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


class DataProcessor:
    """
    Normalise raw candles and compute the small indicator set used by the memory engine.
    """

    @staticmethod
    def to_dataframe(candles: CandleInput) -> pd.DataFrame:
        """
        Convert candles into a DataFrame with float `close` / `volume` columns.
        Accepts a DataFrame, mappings ({time, open, high, low, close, volume}),
        Candle dataclasses, or Binance-style kline rows
        [open_time, open, high, low, close, volume, ...].
        """
        if isinstance(candles, pd.DataFrame):
            df = candles.copy()
        else:
            rows = []
            for c in candles:
                if is_dataclass(c):
                    rows.append(asdict(c))
                elif isinstance(c, dict):
                    rows.append(c)
                else:
                    # kline row
                    rows.append({
                        "time": c[0], "open": c[1], "high": c[2],
                        "low": c[3], "close": c[4], "volume": c[5],
                    })
            df = pd.DataFrame(rows, columns=None if rows else ["close", "volume"])

        if "volume" not in df.columns:
            df["volume"] = 0.0

        # Numeric conversion
        cols = [c for c in ("open", "high", "low", "close", "volume") if c in df.columns]
        df[cols] = df[cols].astype(float)
        return df.reset_index(drop=True)

    @staticmethod
    def calculate_rsi(closes: Union[pd.Series, Sequence[float]], period: int = 14) -> int:
        """
        Simple (non Wilder-smoothed) RSI over the first `period` transitions.
        Not enough data -> neutral 50, no losses -> 100.
        """
        values = np.asarray(closes, dtype=float)
        if len(values) < period + 1:
            return 50

        gains = 0.0
        losses = 0.0
        for i in range(1, period + 1):
            change = values[i] - values[i - 1]
            if change >= 0:
                gains += change
            else:
                losses -= change

        gains /= period
        losses /= period

        if losses == 0:
            return 100

        rs = gains / losses
        return round_half_up(100 - (100 / (1 + rs)))

    @staticmethod
    def calculate_sma(closes: Union[pd.Series, Sequence[float]], period: int) -> float:
        """Mean of the last `period` closes; the last close when there are fewer."""
        series = pd.Series(closes, dtype=float)
        if len(series) < period:
            return float(series.iloc[-1])
        return float(series.iloc[-period:].mean())
