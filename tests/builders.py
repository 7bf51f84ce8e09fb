"""
Candle series builders shared by the test modules.
"""
from typing import List, Optional, Sequence

from tradesignals.events import Candle

START_TIME = 1_699_992_000  # 2023-11-14 20:00 UTC, on a 4h boundary
HOUR = 3600

# One swing high (phase 2) and one swing low (phase 6) per cycle at radius 3
WAVE_8 = (0, 2, 3, 2, 0, -2, -3, -2)
# Tighter cycle: three swing highs and lows fit inside a 20-candle window
WAVE_4 = (0, 3, 0, -3)


def make_candle(open_, high, low, close, volume=1000, time=START_TIME) -> Candle:
    return Candle(time=time, open=open_, high=high, low=low, close=close, volume=volume)


def doji(price, spread=0.5, volume=1000, time=START_TIME) -> Candle:
    return make_candle(price, price + spread, price - spread, price, volume=volume, time=time)


def candles_from_closes(
    closes: Sequence[float],
    volume: int = 1000,
    start_time: int = START_TIME,
    step: int = HOUR,
) -> List[Candle]:
    """
    Rising closes make a small green candle, falling closes a small red one and
    an unchanged close a doji.
    """
    candles = []
    prev: Optional[float] = None
    for i, close in enumerate(closes):
        time = start_time + i * step
        if prev is not None and close == prev:
            candles.append(doji(close, volume=volume, time=time))
        elif prev is None or close > prev:
            candles.append(make_candle(close - 0.2, close + 0.3, close - 0.5, close, volume, time))
        else:
            candles.append(make_candle(close + 0.2, close + 0.5, close - 0.3, close, volume, time))
        prev = close
    return candles


def wave_closes(count, wave=WAVE_8, slope=0.25, start=100.0, direction=1) -> List[float]:
    return [start + direction * (slope * i + wave[i % len(wave)]) for i in range(count)]


def bullish_candles(count=98) -> List[Candle]:
    """Higher highs and higher lows, EMAs stacked 9 > 21 > 90, RSI in the 60s."""
    return candles_from_closes(wave_closes(count))


def bearish_candles(count=98) -> List[Candle]:
    """Mirror image of bullish_candles."""
    return candles_from_closes(wave_closes(count, start=200.0, direction=-1))


def flat_candles() -> List[Candle]:
    """Oscillation (RSI near 50) settling into a long run of identical dojis."""
    closes = [100.5 if i % 2 == 0 else 99.5 for i in range(30)] + [100.0] * 40
    return candles_from_closes(closes)
