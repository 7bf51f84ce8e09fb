"""
Relative Strength Index (RSI)
"""
import numpy as np
import pandas as pd
from tradesignals.analytics.indicators.base import BaseIndicator, seeded_ewm

class RSI(BaseIndicator):
    """
    Wilder RSI. Average gain/loss start as the mean of the first `period`
    deltas and are then smoothed as avg = (avg * (period - 1) + value) / period.
    """
    def __init__(self, period: int = 14):
        super().__init__(f"RSI_{period}")
        self.period = period

    def calculate(self, df: pd.DataFrame) -> pd.Series:
        delta = df['close'].diff()
        gain = delta.clip(lower=0)
        loss = (-delta).clip(lower=0)

        # deltas start at position 1
        alpha = 1 / self.period
        avg_gain = seeded_ewm(gain, self.period, alpha, start=1)
        avg_loss = seeded_ewm(loss, self.period, alpha, start=1)

        with np.errstate(divide='ignore', invalid='ignore'):
            rs = avg_gain / avg_loss
            rsi = 100 - (100 / (1 + rs))
        rsi = rsi.where(avg_loss != 0, 100.0)
        return rsi.where(avg_gain.notna())
