"""
Signal Fusion Engine
--------------------
Combines market structure, volume behavior, fakeout patterns and indicators
into one signal per timeframe, then overlays news sentiment when available.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from tradesignals.analytics.fakeout_detector import FakeoutDetector
from tradesignals.analytics.indicator_engine import IndicatorEngine
from tradesignals.analytics.market_structure import MarketStructureAnalyzer
from tradesignals.analytics.models import (
    Absorption,
    Direction,
    Divergence,
    FakeoutType,
    NewsSentimentSummary,
    Sentiment,
    TradingSignal,
)
from tradesignals.analytics.news_sentiment import NewsProvider, NewsUnavailable, fetch_news_summary
from tradesignals.analytics.risk_sizer import RiskSizer
from tradesignals.analytics.volume_behavior import VolumeBehaviorAnalyzer
from tradesignals.events import Candle, SignalType

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 50
PROMOTION_THRESHOLD = 70
AGGRESSIVE_CHOCH = 15
CHOCH_BONUS_AGGRESSIVE = 25
CHOCH_BONUS = 20
BOS_BONUS = 15
ABSORPTION_BONUS = 12
DIVERGENCE_BONUS = 10
REVERSAL_MIN_CONFIDENCE = 75

CONFLUENCE_BONUS = 15
WEAK_SIGNAL_PENALTY = 10
WEAK_SIGNAL_FLOOR = 40
CONFLICT_CONFIDENCE = 45

NEWS_CONFIRM_BONUS = 15
NEWS_CONFLICT_CONFIDENCE = 50
NEWS_ONLY_CONFIDENCE = 60

MIN_CONFIDENCE = 10
MAX_CONFIDENCE = 95

NO_DATA_REASON = "No chart data available"


def placeholder_signal(timeframe: str, current_price: float, reason: str = NO_DATA_REASON) -> TradingSignal:
    return TradingSignal(
        timeframe=timeframe,
        signal=SignalType.NEUTRAL,
        confidence=0,
        reasons=(reason,),
        entry=current_price,
        target=current_price,
        stop_loss=current_price,
    )


class SignalFusionEngine:
    """
    Fuses detector facts into a TradingSignal.

    Stateless between calls; the detector instances only hold configuration.
    """

    def __init__(self, news_timeout: Optional[float] = None):
        self.structure = MarketStructureAnalyzer()
        self.volume = VolumeBehaviorAnalyzer()
        self.fakeouts = FakeoutDetector()
        self.indicators = IndicatorEngine()
        self.risk = RiskSizer()
        self.news_timeout = news_timeout

    def generate_signal(
        self,
        candles: Sequence[Candle],
        timeframe: str,
        current_price: float,
        news: Optional[NewsSentimentSummary] = None,
        news_provider: Optional[NewsProvider] = None,
        news_unavailable: bool = False,
    ) -> TradingSignal:
        reasons: List[str] = []

        # 1. Structure and volume
        choch = self.structure.detect_choch(candles, timeframe)
        bos = self.structure.detect_bos(candles, choch, timeframe)
        volume = self.volume.analyze(candles)
        fakeout = self.fakeouts.detect(candles)

        confidence = BASE_CONFIDENCE
        chart_signal = SignalType.NEUTRAL

        if choch is not None:
            bullish = choch.type is Direction.BULLISH
            if choch.aggressiveness > AGGRESSIVE_CHOCH:
                reasons.append(
                    f"STRONG {choch.type.value.upper()} CHOCH: {choch.strength:.0f}% strength - "
                    f"aggressive {'uptrend' if bullish else 'downtrend'}"
                )
                confidence += CHOCH_BONUS_AGGRESSIVE
            else:
                reasons.append(
                    f"{choch.type.value.capitalize()} CHOCH: {choch.strength:.0f}% strength - "
                    f"{'higher highs' if bullish else 'lower lows'} confirmed"
                )
                confidence += CHOCH_BONUS

            if bos is not None and bos.confirmed and bos.type is choch.type:
                side = "Resistance" if bullish else "Support"
                reasons.append(f"{choch.type.value.upper()} BOS: {side} broken at {bos.level:.2f}")
                confidence += BOS_BONUS

            if volume.absorption is (Absorption.BUY if bullish else Absorption.SELL):
                reasons.append(
                    "BUYING ABSORPTION: Smart money accumulating" if bullish
                    else "SELLING ABSORPTION: Smart money distributing"
                )
                confidence += ABSORPTION_BONUS

            if volume.divergence is (Divergence.BULLISH if bullish else Divergence.BEARISH):
                reasons.append(f"{choch.type.value.upper()} DIVERGENCE: price and volume disagree")
                confidence += DIVERGENCE_BONUS

            if confidence >= PROMOTION_THRESHOLD:
                chart_signal = choch.type.to_signal()

        # 2. Failed breakout flips the structural call
        if (
            fakeout.detected
            and fakeout.confidence > REVERSAL_MIN_CONFIDENCE
            and fakeout.type is FakeoutType.BREAKOUT_FAILURE
            and chart_signal is not SignalType.NEUTRAL
        ):
            failed = "Breakout" if chart_signal is SignalType.BUY else "Breakdown"
            chart_signal = chart_signal.opposite
            reasons.append(f"FAKEOUT REVERSAL: {failed} failed - now {chart_signal.value}")

        # 3. Indicators
        snapshot = self.indicators.analyze(candles)
        reasons.extend(snapshot.reasons)

        # 4. Chart + indicators
        signal, confidence = self._fuse(chart_signal, confidence, snapshot.combined_signal,
                                        snapshot.confidence, reasons)

        # 5. News overlay
        if news is None and news_provider is not None and not news_unavailable:
            try:
                news = fetch_news_summary(news_provider, self.news_timeout)
            except NewsUnavailable as e:
                logger.warning(f"[{timeframe}] no news: {e}")
                news_unavailable = True

        if news_unavailable:
            reasons.append("NO NEWS AVAILABLE: Using technical analysis (Chart + Indicators) only")
        elif news is None or news.overall_sentiment is Sentiment.NEUTRAL:
            reasons.append("NO NEWS: Using technical analysis (Chart + Indicators) only")
        else:
            signal, confidence = self._apply_news(signal, confidence, news, reasons)

        # 6. Levels
        levels = self.risk.size(signal, current_price, timeframe, candles)
        confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence))

        logger.info(f"[{timeframe}] {signal.value} confidence={confidence} entry={levels.entry} "
                    f"target={levels.target} stop={levels.stop_loss}")

        return TradingSignal(
            timeframe=timeframe,
            signal=signal,
            confidence=confidence,
            reasons=tuple(reasons),
            entry=levels.entry,
            target=levels.target,
            stop_loss=levels.stop_loss,
            choch=choch,
            bos=bos,
            volume=volume,
            fakeout=fakeout,
            indicators=snapshot,
            news_analysis=news,
        )

    @staticmethod
    def _fuse(
        chart: SignalType,
        chart_confidence: float,
        indicator: SignalType,
        indicator_confidence: float,
        reasons: List[str],
    ) -> Tuple[SignalType, float]:
        neutral = SignalType.NEUTRAL
        if chart is not neutral and chart is indicator:
            reasons.append(f"CONFLUENCE: Chart + Indicators both agree on {chart.value}")
            return chart, min(MAX_CONFIDENCE, chart_confidence + CONFLUENCE_BONUS)
        if chart is neutral and indicator is not neutral:
            reasons.append(f"INDICATOR DRIVEN: Chart neutral, following {indicator.value} indicators")
            return indicator, indicator_confidence
        if chart is not neutral and indicator is neutral:
            reasons.append(f"WEAK SIGNAL: Chart {chart.value} but indicators neutral")
            return chart, max(WEAK_SIGNAL_FLOOR, chart_confidence - WEAK_SIGNAL_PENALTY)
        if chart is not neutral and indicator is not neutral:
            reasons.append(
                f"CONFLICT: Chart says {chart.value}, Indicators say {indicator.value} - staying NEUTRAL"
            )
            return neutral, CONFLICT_CONFIDENCE
        return neutral, chart_confidence

    @staticmethod
    def _apply_news(
        technical: SignalType,
        confidence: float,
        news: NewsSentimentSummary,
        reasons: List[str],
    ) -> Tuple[SignalType, float]:
        sentiment = news.overall_sentiment
        reasons.append(
            f"NEWS DETECTED: {sentiment.value.upper()} sentiment ({news.sentiment_score:.1f}%)"
        )
        news_signal = SignalType.BUY if sentiment is Sentiment.BULLISH else SignalType.SELL
        tone = "Positive" if sentiment is Sentiment.BULLISH else "Negative"

        if technical is SignalType.NEUTRAL:
            reasons.append(
                f"MILD {news_signal.value}: Technical Neutral + {tone} News = Mild {news_signal.value}"
            )
            return news_signal, NEWS_ONLY_CONFIDENCE
        if technical is news_signal:
            reasons.append(
                f"STRONG {technical.value}: Technical {technical.value} + {tone} News = Strong {technical.value}"
            )
            return technical, min(MAX_CONFIDENCE, confidence + NEWS_CONFIRM_BONUS)
        reasons.append(f"NEUTRAL: Technical {technical.value} + {tone} News = Avoid")
        return SignalType.NEUTRAL, NEWS_CONFLICT_CONFIDENCE
