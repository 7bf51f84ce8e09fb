"""
Indicator Engine
----------------
RSI(14) and EMA(9/21/90) snapshot with an indicator-only directional call.
"""
import logging
import math
from typing import List, Sequence

from tradesignals.analytics.candles import candles_to_frame
from tradesignals.analytics.indicators.ema import EMA
from tradesignals.analytics.indicators.rsi import RSI
from tradesignals.analytics.models import TechnicalIndicatorSnapshot
from tradesignals.events import Candle, SignalType

logger = logging.getLogger(__name__)

RSI_OVERSOLD = 30
RSI_OVERBOUGHT = 70
NEUTRAL_RSI = 50.0

AGREE_CONFIDENCE = 85
SINGLE_CONFIDENCE = 65
CONFLICT_CONFIDENCE = 40
NEUTRAL_CONFIDENCE = 50


def _last(series, fallback: float) -> float:
    if series.empty:
        return fallback
    value = series.iloc[-1]
    return fallback if value is None or math.isnan(value) else float(value)


class IndicatorEngine:

    def __init__(self):
        self.indicators = {
            'RSI': RSI(14),
            'EMA_9': EMA(9),
            'EMA_21': EMA(21),
            'EMA_90': EMA(90),
        }

    def analyze(self, candles: Sequence[Candle]) -> TechnicalIndicatorSnapshot:
        df = candles_to_frame(candles)
        last_close = float(candles[-1].close) if candles else 0.0
        reasons: List[str] = []

        # Too few closes: RSI reads neutral, an EMA falls back to the last close
        rsi = round(_last(self.indicators['RSI'].calculate(df), NEUTRAL_RSI), 2)
        ema9 = round(_last(self.indicators['EMA_9'].calculate(df), last_close), 2)
        ema21 = round(_last(self.indicators['EMA_21'].calculate(df), last_close), 2)
        ema90 = round(_last(self.indicators['EMA_90'].calculate(df), last_close), 2)

        if rsi < RSI_OVERSOLD:
            rsi_signal = SignalType.BUY
            reasons.append(f"RSI OVERSOLD: {rsi:.1f} - Strong BUY signal")
        elif rsi > RSI_OVERBOUGHT:
            rsi_signal = SignalType.SELL
            reasons.append(f"RSI OVERBOUGHT: {rsi:.1f} - Strong SELL signal")
        else:
            rsi_signal = SignalType.NEUTRAL
            reasons.append(f"RSI NEUTRAL: {rsi:.1f} - No clear signal")

        if ema9 > ema21 > ema90:
            ema_signal = SignalType.BUY
            reasons.append(f"EMA UPTREND: 9({ema9:.2f}) > 21({ema21:.2f}) > 90({ema90:.2f})")
        elif ema9 < ema21 < ema90:
            ema_signal = SignalType.SELL
            reasons.append(f"EMA DOWNTREND: 9({ema9:.2f}) < 21({ema21:.2f}) < 90({ema90:.2f})")
        else:
            ema_signal = SignalType.NEUTRAL
            reasons.append(f"EMA MIXED: No clear trend - 9({ema9:.2f}) 21({ema21:.2f}) 90({ema90:.2f})")

        combined, confidence = self.combine(rsi_signal, ema_signal, reasons)

        logger.debug(f"Indicators rsi={rsi} ema9={ema9} ema21={ema21} ema90={ema90} -> {combined.value}")

        return TechnicalIndicatorSnapshot(
            rsi=rsi,
            ema9=ema9,
            ema21=ema21,
            ema90=ema90,
            rsi_signal=rsi_signal,
            ema_signal=ema_signal,
            combined_signal=combined,
            confidence=confidence,
            reasons=tuple(reasons),
        )

    @staticmethod
    def combine(rsi_signal: SignalType, ema_signal: SignalType, reasons: List[str]):
        neutral = SignalType.NEUTRAL
        if rsi_signal is not neutral and rsi_signal is ema_signal:
            reasons.append(f"STRONG {rsi_signal.value}: RSI + EMA agree")
            return rsi_signal, AGREE_CONFIDENCE
        if rsi_signal is not neutral and ema_signal is neutral:
            reasons.append(f"MODERATE {rsi_signal.value}: RSI signal with neutral EMA")
            return rsi_signal, SINGLE_CONFIDENCE
        if rsi_signal is neutral and ema_signal is not neutral:
            reasons.append(f"MODERATE {ema_signal.value}: EMA signal with neutral RSI")
            return ema_signal, SINGLE_CONFIDENCE
        if rsi_signal is not neutral and ema_signal is not neutral:
            reasons.append(f"CONFLICTING: RSI says {rsi_signal.value}, EMA says {ema_signal.value}")
            return neutral, CONFLICT_CONFIDENCE
        return neutral, NEUTRAL_CONFIDENCE
