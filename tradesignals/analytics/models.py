"""
Analytical Snapshots & Models
-----------------------------
Immutable representations of detector states and trading signals.

`to_dict()` emits the JSON contract consumed by the calling layer, so field
names are camelCase and enum values are kept verbatim.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from tradesignals.events import SignalType


class Direction(Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"

    def to_signal(self) -> SignalType:
        return SignalType.BUY if self is Direction.BULLISH else SignalType.SELL


class SwingKind(Enum):
    HIGH = "high"
    LOW = "low"


class Absorption(Enum):
    BUY = "buy"
    SELL = "sell"
    NONE = "none"


class Divergence(Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NONE = "none"


class FakeoutType(Enum):
    BREAKOUT_FAILURE = "breakout_failure"
    INSIDE_CANDLE = "inside_candle"
    SPRING = "spring"
    VOLUME_CLIMAX = "volume_climax"


class Sentiment(Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class ImpactLevel(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class SwingPoint:
    index: int
    value: float
    kind: SwingKind


@dataclass(frozen=True)
class CHOCHPattern:
    type: Direction
    strength: float  # 0-100
    level: float
    aggressiveness: float  # 0-25, plus overlap bonus on the nested path
    timeframe: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "strength": self.strength,
            "timeframe": self.timeframe,
            "level": self.level,
            "aggressiveness": self.aggressiveness,
        }


@dataclass(frozen=True)
class BOSPattern:
    type: Direction
    confirmed: bool
    level: float
    timeframe: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "confirmed": self.confirmed,
            "timeframe": self.timeframe,
            "level": self.level,
        }


@dataclass(frozen=True)
class VolumeAnalysis:
    absorption: Absorption = Absorption.NONE
    divergence: Divergence = Divergence.NONE
    climax: bool = False
    fakeout: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "absorption": self.absorption.value,
            "divergence": self.divergence.value,
            "climax": self.climax,
            "fakeout": self.fakeout,
        }


@dataclass(frozen=True)
class FakeoutSignal:
    detected: bool = False
    type: FakeoutType = FakeoutType.BREAKOUT_FAILURE
    confidence: float = 0  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "detected": self.detected,
            "type": self.type.value,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class TechnicalIndicatorSnapshot:
    rsi: float
    ema9: float
    ema21: float
    ema90: float
    rsi_signal: SignalType
    ema_signal: SignalType
    combined_signal: SignalType
    confidence: float
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rsi": self.rsi,
            "rsiSignal": self.rsi_signal.value,
            "ema9": self.ema9,
            "ema21": self.ema21,
            "ema90": self.ema90,
            "emaSignal": self.ema_signal.value,
            "combinedSignal": self.combined_signal.value,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class RiskLevels:
    entry: float
    target: float
    stop_loss: float


@dataclass(frozen=True)
class NewsSentimentSummary:
    overall_sentiment: Sentiment
    sentiment_score: float  # -100 to +100
    impact_level: ImpactLevel = ImpactLevel.LOW
    short_term_bias: str = "neutral"
    long_term_bias: str = "neutral"
    reasoning: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overallSentiment": self.overall_sentiment.value,
            "sentimentScore": self.sentiment_score,
            "impactLevel": self.impact_level.value,
            "shortTermBias": self.short_term_bias,
            "longTermBias": self.long_term_bias,
            "reasoning": list(self.reasoning),
        }


@dataclass(frozen=True)
class TradingSignal:
    timeframe: str
    signal: SignalType
    confidence: float
    reasons: Tuple[str, ...]
    entry: float
    target: float
    stop_loss: float
    choch: Optional[CHOCHPattern] = None
    bos: Optional[BOSPattern] = None
    volume: Optional[VolumeAnalysis] = None
    fakeout: Optional[FakeoutSignal] = None
    indicators: Optional[TechnicalIndicatorSnapshot] = None
    news_analysis: Optional[NewsSentimentSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        def _opt(value):
            return value.to_dict() if value is not None else None

        return {
            "timeframe": self.timeframe,
            "signal": self.signal.value,
            "confidence": self.confidence,
            "reasons": list(self.reasons),
            "entry": self.entry,
            "target": self.target,
            "stopLoss": self.stop_loss,
            "choch": _opt(self.choch),
            "bos": _opt(self.bos),
            "volume": _opt(self.volume),
            "fakeout": _opt(self.fakeout),
            "indicators": _opt(self.indicators),
            "newsAnalysis": _opt(self.news_analysis),
        }


@dataclass(frozen=True)
class MultiTimeframeAnalysis:
    signals: Tuple[TradingSignal, ...]
    overall_signal: SignalType
    confidence: float
    summary: str
    news_impact: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def signal_for(self, timeframe: str) -> Optional[TradingSignal]:
        for signal in self.signals:
            if signal.timeframe == timeframe:
                return signal
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signals": [s.to_dict() for s in self.signals],
            "overallSignal": self.overall_signal.value,
            "confidence": self.confidence,
            "summary": self.summary,
            "newsImpact": self.news_impact,
        }
