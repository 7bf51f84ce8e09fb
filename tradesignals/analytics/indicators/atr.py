import numpy as np
import pandas as pd
from tradesignals.analytics.indicators.base import BaseIndicator

class ATR(BaseIndicator):
    """
    Average True Range (ATR)
    Simple mean of the true range over the last `period` bar-to-bar
    transitions. Feeds the ATR-based target and stop-loss distances.
    """
    def __init__(self, period: int = 14):
        super().__init__("ATR")
        self.period = period

    def calculate(self, df: pd.DataFrame, **kwargs) -> pd.Series:
        """
        Calculates ATR for the given DataFrame.
        Expected columns: 'high', 'low', 'close'
        """
        high = df['high']
        low = df['low']
        prev_close = df['close'].shift(1)

        tr1 = high - low
        tr2 = (high - prev_close).abs()
        tr3 = (low - prev_close).abs()

        tr = pd.concat([tr1, tr2, tr3], axis=1).max(axis=1)
        # The first bar has no previous close, so it is not a transition
        tr = tr.where(prev_close.notna(), np.nan)

        return tr.rolling(window=self.period, min_periods=self.period).mean()
