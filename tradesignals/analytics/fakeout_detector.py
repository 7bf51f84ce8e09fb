"""
Fakeout Detector
----------------
Candlestick/volume pattern checks over the last five candles, evaluated in
priority order; the first rule that matches decides the result.

Some rules return detected=False with a populated type and confidence: the
pattern was recognised but it marks a genuine move (continuation or valid
breakout), not a trap to fade.
"""
import logging
from typing import Callable, List, Optional, Sequence

from tradesignals.analytics.models import FakeoutSignal, FakeoutType
from tradesignals.events import Candle

logger = logging.getLogger(__name__)

FAKEOUT_WINDOW = 5


def _inside_candle_breakout(recent: Sequence[Candle], avg_volume: float) -> Optional[FakeoutSignal]:
    # Big red sets the range, a quiet green sits inside it, the next candle breaks out on volume
    first, second, third = recent[2], recent[3], recent[4]
    if not (first.is_red and first.body > first.range * 0.7):
        return None
    inside = (
        second.is_green
        and second.high <= first.high
        and second.low >= first.low
        and second.volume < first.volume * 0.8
    )
    if inside and third.high > second.high and third.volume > second.volume * 1.2:
        return FakeoutSignal(detected=False, type=FakeoutType.INSIDE_CANDLE, confidence=85)
    return None


def _bearish_engulfing(recent: Sequence[Candle], avg_volume: float) -> Optional[FakeoutSignal]:
    green, red1, red2 = recent[2], recent[3], recent[4]
    engulfs = (
        green.is_green
        and red1.is_red
        and red1.open >= green.high
        and red1.close <= green.low
        and red1.volume > green.volume * 1.5
    )
    if engulfs and red2.is_red:
        return FakeoutSignal(detected=False, type=FakeoutType.INSIDE_CANDLE, confidence=90)
    return None


def _climax_rejection(recent: Sequence[Candle], avg_volume: float) -> Optional[FakeoutSignal]:
    last = recent[-1]
    if last.volume <= avg_volume * 2:
        return None
    if last.upper_wick > last.range * 0.5 or last.lower_wick > last.range * 0.5:
        return FakeoutSignal(detected=True, type=FakeoutType.VOLUME_CLIMAX, confidence=80)
    return None


def _low_volume_breakout(recent: Sequence[Candle], avg_volume: float) -> Optional[FakeoutSignal]:
    last = recent[-1]
    prior = recent[:4]
    thin = last.volume < avg_volume * 0.8
    if thin and (last.high > max(c.high for c in prior) or last.low < min(c.low for c in prior)):
        return FakeoutSignal(detected=True, type=FakeoutType.BREAKOUT_FAILURE, confidence=75)
    return None


def _inside_bar_compression(recent: Sequence[Candle], avg_volume: float) -> Optional[FakeoutSignal]:
    prev, current = recent[3], recent[4]
    if current.high <= prev.high and current.low >= prev.low and current.volume < prev.volume * 0.7:
        return FakeoutSignal(detected=False, type=FakeoutType.INSIDE_CANDLE, confidence=60)
    return None


def _price_volume_divergence(recent: Sequence[Candle], avg_volume: float) -> Optional[FakeoutSignal]:
    highs = [c.high for c in recent]
    lows = [c.low for c in recent]
    vols = [c.volume for c in recent]
    fading = vols[3] < vols[1] and vols[3] < vols[0]
    if not fading:
        return None
    if (highs[3] > highs[1] and highs[3] > highs[0]) or (lows[3] < lows[1] and lows[3] < lows[0]):
        return FakeoutSignal(detected=True, type=FakeoutType.BREAKOUT_FAILURE, confidence=70)
    return None


def _spring(recent: Sequence[Candle], avg_volume: float) -> Optional[FakeoutSignal]:
    level, breach, recovery = recent[2], recent[3], recent[4]
    heavy = breach.volume > avg_volume * 1.5
    if not heavy:
        return None
    # Shakeout below support that the next candle reclaims
    if breach.low < level.low and recovery.close > breach.high and recovery.close > level.low:
        return FakeoutSignal(detected=True, type=FakeoutType.SPRING, confidence=85)
    # Upthrust above resistance that the next candle gives back
    if breach.high > level.high and recovery.close < breach.low and recovery.close < level.high:
        return FakeoutSignal(detected=True, type=FakeoutType.SPRING, confidence=85)
    return None


RULES: List[Callable[[Sequence[Candle], float], Optional[FakeoutSignal]]] = [
    _inside_candle_breakout,
    _bearish_engulfing,
    _climax_rejection,
    _low_volume_breakout,
    _inside_bar_compression,
    _price_volume_divergence,
    _spring,
]


class FakeoutDetector:

    def detect(self, candles: Sequence[Candle]) -> FakeoutSignal:
        if len(candles) < FAKEOUT_WINDOW:
            return FakeoutSignal()

        recent = list(candles[-FAKEOUT_WINDOW:])
        avg_volume = sum(c.volume for c in recent[:4]) / 4

        for rule in RULES:
            result = rule(recent, avg_volume)
            if result is not None:
                logger.debug(f"Fakeout rule {rule.__name__} matched: {result}")
                return result

        return FakeoutSignal()
