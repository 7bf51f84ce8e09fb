"""
Multi-Timeframe Aggregator
--------------------------
Runs the fusion engine over every analysis timeframe and rolls the results
into one weighted call.
"""
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from tradesignals.analytics.models import (
    ImpactLevel,
    MultiTimeframeAnalysis,
    NewsSentimentSummary,
    Sentiment,
    TradingSignal,
)
from tradesignals.analytics.news_sentiment import NewsProvider, NewsUnavailable, fetch_news_summary
from tradesignals.analytics.signal_fusion import SignalFusionEngine, placeholder_signal
from tradesignals.config.settings import (
    DEFAULT_TIMEFRAME_WEIGHT,
    MAX_WORKERS,
    MIN_CANDLES,
    OVERALL_SIGNAL_THRESHOLD,
    TIMEFRAME_WEIGHTS,
    TIMEFRAMES,
)
from tradesignals.events import Candle, SignalType

logger = logging.getLogger(__name__)

DEFAULT_OVERALL_CONFIDENCE = 50
MAX_OVERALL_CONFIDENCE = 95
FAILED_REASON = "Analysis failed"


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up (62.5 -> 63, where round() gives 62)."""
    return int(math.floor(value + 0.5))


class MultiTimeframeAggregator:
    """
    Per-timeframe analyses are independent; they run on a thread pool and are
    all joined, in timeframe order, before the aggregate is computed.
    """

    def __init__(
        self,
        engine: Optional[SignalFusionEngine] = None,
        timeframes: Sequence[str] = TIMEFRAMES,
        max_workers: int = MAX_WORKERS,
    ):
        self.engine = engine or SignalFusionEngine()
        self.timeframes = tuple(timeframes)
        self.max_workers = max_workers

    def analyze(
        self,
        candles_by_timeframe: Dict[str, Sequence[Candle]],
        current_price: float,
        news: Optional[NewsSentimentSummary] = None,
        news_provider: Optional[NewsProvider] = None,
    ) -> MultiTimeframeAnalysis:
        news_unavailable = False
        if news is None and news_provider is not None:
            try:
                news = fetch_news_summary(news_provider, self.engine.news_timeout)
            except NewsUnavailable as e:
                logger.warning(f"no news: {e}")
                news_unavailable = True

        def _run(timeframe: str) -> TradingSignal:
            return self._analyze_timeframe(
                timeframe, candles_by_timeframe.get(timeframe), current_price, news, news_unavailable
            )

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            signals = list(executor.map(_run, self.timeframes))

        return self.aggregate(signals)

    def _analyze_timeframe(
        self,
        timeframe: str,
        candles: Optional[Sequence[Candle]],
        current_price: float,
        news: Optional[NewsSentimentSummary],
        news_unavailable: bool,
    ) -> TradingSignal:
        if not candles or len(candles) < MIN_CANDLES:
            logger.info(f"[{timeframe}] {len(candles or [])} candles, using placeholder")
            return placeholder_signal(timeframe, current_price)
        try:
            return self.engine.generate_signal(
                candles, timeframe, current_price, news=news, news_unavailable=news_unavailable
            )
        except Exception:
            logger.exception(f"[{timeframe}] analysis failed")
            return placeholder_signal(timeframe, current_price, FAILED_REASON)

    def aggregate(self, signals: List[TradingSignal]) -> MultiTimeframeAnalysis:
        buy_score = sell_score = total_weight = 0.0
        for signal in signals:
            weight = TIMEFRAME_WEIGHTS.get(signal.timeframe, DEFAULT_TIMEFRAME_WEIGHT)
            # NEUTRAL timeframes stay out of the normalising weight
            if signal.signal is SignalType.BUY:
                total_weight += weight
                buy_score += weight * signal.confidence / 100
            elif signal.signal is SignalType.SELL:
                total_weight += weight
                sell_score += weight * signal.confidence / 100

        overall = SignalType.NEUTRAL
        confidence = DEFAULT_OVERALL_CONFIDENCE
        if total_weight > 0:
            if buy_score > sell_score and buy_score > OVERALL_SIGNAL_THRESHOLD:
                overall = SignalType.BUY
                confidence = min(MAX_OVERALL_CONFIDENCE, round_half_up(buy_score / total_weight * 100))
            elif sell_score > buy_score and sell_score > OVERALL_SIGNAL_THRESHOLD:
                overall = SignalType.SELL
                confidence = min(MAX_OVERALL_CONFIDENCE, round_half_up(sell_score / total_weight * 100))

        logger.info(
            f"Overall {overall.value} confidence={confidence} "
            f"buy_score={buy_score:.3f} sell_score={sell_score:.3f}"
        )

        return MultiTimeframeAnalysis(
            signals=tuple(signals),
            overall_signal=overall,
            confidence=confidence,
            summary=build_summary(signals, overall),
            news_impact=describe_news_impact(signals),
            metadata={"buy_score": buy_score, "sell_score": sell_score, "total_weight": total_weight},
        )


def build_summary(signals: Sequence[TradingSignal], overall: SignalType) -> str:
    counts = {s: sum(1 for sig in signals if sig.signal is s) for s in SignalType}
    summary = (
        f"{counts[SignalType.BUY]} BUY, {counts[SignalType.SELL]} SELL, "
        f"{counts[SignalType.NEUTRAL]} NEUTRAL signals detected. "
    )
    if overall is SignalType.BUY:
        return summary + "Bullish consensus across timeframes suggests upward momentum."
    if overall is SignalType.SELL:
        return summary + "Bearish consensus across timeframes suggests downward pressure."
    return summary + "Mixed signals suggest market indecision or consolidation."


def describe_news_impact(signals: Sequence[TradingSignal]) -> str:
    impacts = [
        s.news_analysis for s in signals
        if s.news_analysis is not None and s.news_analysis.overall_sentiment is not Sentiment.NEUTRAL
    ]
    if not impacts:
        return "No significant news impact detected"

    avg_score = sum(n.sentiment_score for n in impacts) / len(impacts)
    high_impact = sum(1 for n in impacts if n.impact_level is ImpactLevel.HIGH)
    if not high_impact:
        return "MODERATE NEWS IMPACT: News sentiment providing directional bias"
    if avg_score > 20:
        return f"POSITIVE NEWS IMPACT: {high_impact} high-impact bullish news affecting signals"
    if avg_score < -20:
        return f"NEGATIVE NEWS IMPACT: {high_impact} high-impact bearish news affecting signals"
    return "MIXED NEWS IMPACT: Conflicting news sentiment affecting market direction"
