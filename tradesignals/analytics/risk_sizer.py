"""
Risk Sizer
----------
Entry, target and stop-loss from ATR, the 20-candle support/resistance band
and per-timeframe multipliers.
"""
import logging
import math
from typing import Sequence

from tradesignals.analytics.candles import candles_to_frame
from tradesignals.analytics.indicators.atr import ATR
from tradesignals.analytics.models import RiskLevels
from tradesignals.config.settings import DEFAULT_RISK_TIMEFRAME, MIN_CANDLES, RISK_MULTIPLIERS
from tradesignals.events import Candle, SignalType

logger = logging.getLogger(__name__)

LEVEL_WINDOW = 20
LEVEL_BUFFER = 0.02


def _round(value: float) -> float:
    return round(value, 2)


class RiskSizer:

    def __init__(self, atr_period: int = 14):
        self.atr = ATR(atr_period)

    def average_true_range(self, candles: Sequence[Candle]) -> float:
        value = self.atr.calculate(candles_to_frame(candles)).iloc[-1]
        if math.isnan(value):
            # Shorter than the ATR period: fall back to the latest range
            return candles[-1].range
        return float(value)

    def size(
        self,
        signal: SignalType,
        current_price: float,
        timeframe: str,
        candles: Sequence[Candle],
    ) -> RiskLevels:
        flat = RiskLevels(current_price, current_price, current_price)
        if signal is SignalType.NEUTRAL or len(candles) < MIN_CANDLES:
            return flat

        atr = self.average_true_range(candles)
        recent = candles[-LEVEL_WINDOW:]
        resistance = max(c.high for c in recent)
        support = min(c.low for c in recent)

        target_mult, stop_mult = RISK_MULTIPLIERS.get(timeframe, RISK_MULTIPLIERS[DEFAULT_RISK_TIMEFRAME])
        target_distance = atr * target_mult
        stop_distance = atr * stop_mult
        entry = current_price

        if signal is SignalType.BUY:
            target = entry + target_distance
            capped = resistance * (1 - LEVEL_BUFFER)
            # Keep the target short of nearby resistance while it still pays
            if target > resistance and capped > entry:
                target = capped
            stop_loss = entry - stop_distance
            if support < entry and (entry - support) < stop_distance:
                stop_loss = support * (1 - LEVEL_BUFFER)
        else:
            target = entry - target_distance
            capped = support * (1 + LEVEL_BUFFER)
            if target < support and capped < entry:
                target = capped
            stop_loss = entry + stop_distance
            if resistance > entry and (resistance - entry) < stop_distance:
                stop_loss = resistance * (1 + LEVEL_BUFFER)

        levels = RiskLevels(_round(entry), _round(target), _round(stop_loss))
        logger.debug(
            f"[{timeframe}] {signal.value} atr={atr:.4f} support={support} resistance={resistance} -> {levels}"
        )
        return levels
