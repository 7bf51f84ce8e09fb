"""
Standardized Event Contracts
---------------------------
Frozen dataclasses shared by the data-fetch layer and the signal engine.
"""

from dataclasses import dataclass
from enum import Enum


class SignalType(Enum):
    BUY = "BUY"
    SELL = "SELL"
    NEUTRAL = "NEUTRAL"

    @property
    def opposite(self) -> "SignalType":
        if self is SignalType.BUY:
            return SignalType.SELL
        if self is SignalType.SELL:
            return SignalType.BUY
        return SignalType.NEUTRAL


@dataclass(frozen=True)
class Candle:
    """One OHLCV bar. `time` is epoch seconds."""
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: int = 0

    def __post_init__(self):
        if self.volume < 0:
            raise ValueError(f"volume must be >= 0, got {self.volume}")
        if self.high < self.low:
            raise ValueError(f"high ({self.high}) below low ({self.low}) at time {self.time}")

    @property
    def body(self) -> float:
        return abs(self.close - self.open)

    @property
    def range(self) -> float:
        return self.high - self.low

    @property
    def is_green(self) -> bool:
        return self.close > self.open

    @property
    def is_red(self) -> bool:
        return self.close < self.open

    @property
    def upper_wick(self) -> float:
        return self.high - max(self.open, self.close)

    @property
    def lower_wick(self) -> float:
        return min(self.open, self.close) - self.low
