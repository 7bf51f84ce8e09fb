"""
Market Structure Analyzer
-------------------------
Detects change of character (CHOCH) from the sequence of swing highs/lows and
break of structure (BOS) once a CHOCH is in place.
"""
import logging
from typing import Optional, Sequence

from tradesignals.analytics.models import BOSPattern, CHOCHPattern, Direction
from tradesignals.analytics.swing_points import find_swing_highs, find_swing_lows
from tradesignals.events import Candle

logger = logging.getLogger(__name__)

STRUCTURE_WINDOW = 20
AGGRESSIVENESS_WINDOW = 10
AGGRESSIVENESS_CAP = 25
BOS_WINDOW = 10
BOS_CONFIRM_BARS = 3

NESTED_BASE_STRENGTH = 75
NESTED_OVERLAP_STRENGTH = 20
NESTED_OVERLAP_AGGRESSION = 15
FALLBACK_BASE_STRENGTH = 70
MAX_STRENGTH = 95


def calculate_aggressiveness(candles: Sequence[Candle], direction: Direction) -> float:
    """Sum of body/range x 10 over the last 10 candles moving in `direction`, capped at 25."""
    total = 0.0
    for candle in candles[-AGGRESSIVENESS_WINDOW:]:
        if candle.range <= 0:
            continue
        moves_with = candle.is_green if direction is Direction.BULLISH else candle.is_red
        if moves_with:
            total += candle.body / candle.range * 10
    return min(AGGRESSIVENESS_CAP, total)


class MarketStructureAnalyzer:
    """
    CHOCH is evaluated on the latest 20 candles. The nested (overlap) path runs
    first and needs three swing highs and three swing lows; only when it
    resolves nothing does the two-swing fallback run.
    """

    def detect_choch(self, candles: Sequence[Candle], timeframe: str = "") -> Optional[CHOCHPattern]:
        if len(candles) < STRUCTURE_WINDOW:
            return None

        recent = list(candles[-STRUCTURE_WINDOW:])
        highs = find_swing_highs(recent)
        lows = find_swing_lows(recent)

        pattern = self._nested_choch(recent, highs, lows, timeframe)
        if pattern is None:
            pattern = self._simple_choch(recent, highs, lows, timeframe)

        if pattern is not None:
            logger.debug(
                f"[{timeframe}] CHOCH {pattern.type.value} strength={pattern.strength:.1f} "
                f"level={pattern.level}"
            )
        return pattern

    def _nested_choch(self, recent, highs, lows, timeframe) -> Optional[CHOCHPattern]:
        if len(highs) < 3 or len(lows) < 3:
            return None

        prev_high, mid_high, last_high = (p.value for p in highs[-3:])
        prev_low, mid_low, last_low = (p.value for p in lows[-3:])

        big_bullish = last_high > prev_high and last_low > prev_low
        big_bearish = last_high < prev_high and last_low < prev_low
        small_bullish = mid_high > prev_high and mid_low > prev_low
        small_bearish = mid_high < prev_high and mid_low < prev_low

        dominant = None
        overlap = 0.0
        if big_bullish and small_bullish:
            dominant, overlap = Direction.BULLISH, 1.0
        elif big_bearish and small_bearish:
            dominant, overlap = Direction.BEARISH, 1.0
        elif big_bullish and small_bearish:
            upper = last_high - prev_high
            lower = abs(last_low - prev_low)
            overlap = 0.5
            dominant = Direction.BULLISH if upper > lower else Direction.BEARISH
        elif big_bearish and small_bullish:
            upper = abs(last_high - prev_high)
            lower = prev_low - last_low
            overlap = 0.5
            dominant = Direction.BEARISH if lower > upper else Direction.BULLISH

        if dominant is None:
            return None

        aggressiveness = calculate_aggressiveness(recent, dominant)
        strength = NESTED_BASE_STRENGTH + overlap * NESTED_OVERLAP_STRENGTH + aggressiveness
        return CHOCHPattern(
            type=dominant,
            strength=min(MAX_STRENGTH, strength),
            level=last_high if dominant is Direction.BULLISH else last_low,
            aggressiveness=aggressiveness + overlap * NESTED_OVERLAP_AGGRESSION,
            timeframe=timeframe,
        )

    def _simple_choch(self, recent, highs, lows, timeframe) -> Optional[CHOCHPattern]:
        if len(highs) < 2 or len(lows) < 2:
            return None

        prev_high, last_high = highs[-2].value, highs[-1].value
        prev_low, last_low = lows[-2].value, lows[-1].value

        if last_high > prev_high and last_low > prev_low:
            direction, level = Direction.BULLISH, last_high
        elif last_high < prev_high and last_low < prev_low:
            direction, level = Direction.BEARISH, last_low
        else:
            return None

        aggressiveness = calculate_aggressiveness(recent, direction)
        return CHOCHPattern(
            type=direction,
            strength=min(MAX_STRENGTH, FALLBACK_BASE_STRENGTH + aggressiveness),
            level=level,
            aggressiveness=aggressiveness,
            timeframe=timeframe,
        )

    def detect_bos(
        self,
        candles: Sequence[Candle],
        choch: Optional[CHOCHPattern],
        timeframe: str = "",
    ) -> Optional[BOSPattern]:
        """A close beyond the extreme of the last 10 candles (excluding the newest 3)."""
        if choch is None or len(candles) < BOS_WINDOW:
            return None

        recent = candles[-BOS_WINDOW:]
        reference = recent[:-BOS_CONFIRM_BARS]
        current_price = recent[-1].close

        if choch.type is Direction.BULLISH:
            resistance = max(c.high for c in reference)
            if current_price > resistance:
                return BOSPattern(Direction.BULLISH, confirmed=True, level=resistance, timeframe=timeframe)
        else:
            support = min(c.low for c in reference)
            if current_price < support:
                return BOSPattern(Direction.BEARISH, confirmed=True, level=support, timeframe=timeframe)

        return None
