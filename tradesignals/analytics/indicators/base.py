"""
Base Indicator Class
"""
from abc import ABC, abstractmethod

import numpy as np
import pandas as pd


class BaseIndicator(ABC):
    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def calculate(self, df: pd.DataFrame, **kwargs):
        """
        Calculate the indicator value(s).

        Args:
            df: Input DataFrame with required columns
            **kwargs: Additional parameters for the calculation

        Returns:
            Result of the indicator calculation (can be Series, DataFrame, or other types)
        """
        pass


def seeded_ewm(values: pd.Series, period: int, alpha: float, start: int = 0) -> pd.Series:
    """
    Exponential smoothing seeded with a simple average.

    The first output sits at position `start + period - 1` and equals the mean
    of values[start : start + period]; every later point follows
    y = alpha * x + (1 - alpha) * y_prev. Earlier positions are NaN.
    """
    out = pd.Series(np.nan, index=values.index, dtype=float)
    seed_pos = start + period - 1
    if len(values) <= seed_pos:
        return out

    seeded = values.iloc[seed_pos:].astype(float).copy()
    seeded.iloc[0] = values.iloc[start:seed_pos + 1].mean()
    out.iloc[seed_pos:] = seeded.ewm(alpha=alpha, adjust=False).mean().to_numpy()
    return out
