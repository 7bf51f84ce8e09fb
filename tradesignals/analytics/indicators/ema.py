"""
Exponential Moving Average (EMA)
"""
import pandas as pd
from tradesignals.analytics.indicators.base import BaseIndicator, seeded_ewm

class EMA(BaseIndicator):
    def __init__(self, period: int = 20):
        super().__init__(f"EMA_{period}")
        self.period = period

    def calculate(self, df: pd.DataFrame) -> pd.Series:
        # SMA of the first `period` closes seeds the recursion, multiplier 2/(period+1)
        return seeded_ewm(df['close'], self.period, alpha=2 / (self.period + 1))
