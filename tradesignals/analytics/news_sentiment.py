"""
News Sentiment
--------------
Keyword scoring of already-retrieved headlines into a NewsSentimentSummary,
and a guarded call into an external news collaborator.

Feed retrieval itself belongs to the caller.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from tradesignals.analytics.models import ImpactLevel, NewsSentimentSummary, Sentiment
from tradesignals.config.settings import NEWS_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

BULLISH_KEYWORDS = [
    'rally', 'surge', 'gains', 'uptrend', 'bullish', 'positive', 'growth', 'expansion',
    'profit', 'earnings beat', 'upgrade', 'buy', 'outperform', 'strong results',
    'record high', 'breakout', 'momentum', 'optimistic', 'recovery', 'boost',
    'dividend', 'bonus', 'merger', 'acquisition', 'partnership', 'contract win',
    'order book', 'expansion plan', 'capacity addition', 'new product launch',
]

BEARISH_KEYWORDS = [
    'fall', 'decline', 'crash', 'bear', 'negative', 'loss', 'weak', 'downtrend',
    'sell', 'downgrade', 'underperform', 'miss', 'disappointing', 'concern',
    'risk', 'volatility', 'correction', 'pressure', 'slowdown', 'recession',
    'inflation', 'interest rate hike', 'regulatory action', 'investigation',
    'lawsuit', 'debt', 'liquidity crisis', 'bankruptcy', 'layoffs', 'closure',
]

HIGH_IMPACT_KEYWORDS = [
    'rbi', 'reserve bank', 'interest rate', 'monetary policy', 'budget', 'union budget',
    'sebi', 'regulatory', 'policy change', 'tax', 'gst', 'crude oil', 'inflation',
    'gdp', 'fiscal deficit', 'current account deficit', 'foreign investment',
    'global markets', 'fed decision', 'geopolitical', 'election', 'covid',
    'lockdown', 'emergency', 'crisis', 'scandal', 'fraud', 'investigation',
]

MEDIUM_IMPACT_KEYWORDS = ['earnings', 'results', 'guidance', 'profit', 'revenue', 'merger', 'acquisition']

IMPACT_WEIGHT = {ImpactLevel.HIGH: 3, ImpactLevel.MEDIUM: 2, ImpactLevel.LOW: 1}

MIN_RELEVANCE = 40
SENTIMENT_THRESHOLD = 20
SHORT_TERM_THRESHOLD = 30
LONG_TERM_THRESHOLD = 50


class NewsUnavailable(Exception):
    """The news collaborator failed or did not answer in time."""


@dataclass(frozen=True)
class NewsItem:
    title: str
    description: str = ""
    source: str = ""

    @property
    def text(self) -> str:
        return f"{self.title} {self.description}".lower()


def score_headline(text: str) -> int:
    """+1 per bullish keyword present, -1 per bearish keyword present."""
    lowered = text.lower()
    score = sum(1 for k in BULLISH_KEYWORDS if k in lowered)
    score -= sum(1 for k in BEARISH_KEYWORDS if k in lowered)
    return score


def headline_impact(text: str) -> ImpactLevel:
    lowered = text.lower()
    if any(k in lowered for k in HIGH_IMPACT_KEYWORDS):
        return ImpactLevel.HIGH
    if any(k in lowered for k in MEDIUM_IMPACT_KEYWORDS):
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


def headline_relevance(text: str, keywords: Iterable[str]) -> int:
    lowered = text.lower()
    relevance = sum(20 for k in keywords if k and k.lower() in lowered)
    relevance += sum(10 for k in HIGH_IMPACT_KEYWORDS if k in lowered)
    if relevance == 0:
        # general market news always carries some weight
        relevance = 30
    return min(relevance, 100)


def _bias(score: float, threshold: float) -> str:
    if abs(score) <= threshold:
        return "neutral"
    return "positive" if score > 0 else "negative"


def summarize_news(items: Sequence[NewsItem], keywords: Iterable[str] = ()) -> NewsSentimentSummary:
    """Weighted sentiment over the items relevant to the instrument."""
    keywords = list(keywords)
    scored = []
    for item in items:
        relevance = headline_relevance(item.text, keywords)
        if relevance <= MIN_RELEVANCE:
            continue
        raw = score_headline(item.text)
        sentiment = 1 if raw > 0 else -1 if raw < 0 else 0
        scored.append((item, relevance, headline_impact(item.text), sentiment))

    if not scored:
        return NewsSentimentSummary(
            overall_sentiment=Sentiment.NEUTRAL,
            sentiment_score=0.0,
            reasoning=("No significant news found for this instrument",),
        )

    total_score = 0.0
    total_weight = 0.0
    for _, relevance, impact, sentiment in scored:
        weight = relevance / 100 * IMPACT_WEIGHT[impact]
        total_score += sentiment * weight
        total_weight += weight
    score = total_score / total_weight * 100 if total_weight > 0 else 0.0

    if score > SENTIMENT_THRESHOLD:
        overall = Sentiment.BULLISH
    elif score < -SENTIMENT_THRESHOLD:
        overall = Sentiment.BEARISH
    else:
        overall = Sentiment.NEUTRAL

    impacts = {impact for _, _, impact, _ in scored}
    if ImpactLevel.HIGH in impacts:
        impact_level = ImpactLevel.HIGH
    elif ImpactLevel.MEDIUM in impacts:
        impact_level = ImpactLevel.MEDIUM
    else:
        impact_level = ImpactLevel.LOW

    reasoning: List[str] = [f"Analyzed {len(scored)} relevant news items"]
    if overall is Sentiment.BULLISH:
        reasoning.append(f"POSITIVE NEWS SENTIMENT: overall bullish tone ({score:.1f}%)")
    elif overall is Sentiment.BEARISH:
        reasoning.append(f"NEGATIVE NEWS SENTIMENT: overall bearish tone ({score:.1f}%)")
    else:
        reasoning.append("NEUTRAL NEWS SENTIMENT: mixed or balanced coverage")
    high_count = sum(1 for _, _, impact, _ in scored if impact is ImpactLevel.HIGH)
    if high_count:
        reasoning.append(f"HIGH IMPACT: {high_count} market-moving news items detected")

    top = sorted(scored, key=lambda s: s[1] * IMPACT_WEIGHT[s[2]], reverse=True)[:2]
    for item, _, _, sentiment in top:
        label = "POSITIVE" if sentiment > 0 else "NEGATIVE" if sentiment < 0 else "NEUTRAL"
        reasoning.append(f'"{item.title}" - {label} impact from {item.source or "unknown source"}')

    return NewsSentimentSummary(
        overall_sentiment=overall,
        sentiment_score=score,
        impact_level=impact_level,
        short_term_bias=_bias(score, SHORT_TERM_THRESHOLD),
        long_term_bias=_bias(score, LONG_TERM_THRESHOLD),
        reasoning=tuple(reasoning),
    )


NewsProvider = Callable[[], Optional[NewsSentimentSummary]]


def fetch_news_summary(provider: NewsProvider, timeout: Optional[float] = None) -> Optional[NewsSentimentSummary]:
    """
    Call the news collaborator on a daemon worker thread.

    Raises NewsUnavailable when the provider raises or exceeds `timeout`
    seconds (settings.NEWS_TIMEOUT_SECONDS by default). A provider returning
    None means "no news" and is passed through. A hung provider is abandoned;
    its thread is a daemon so it never holds up interpreter exit.
    """
    timeout = NEWS_TIMEOUT_SECONDS if timeout is None else timeout
    outcome = {}

    def _call():
        try:
            outcome['value'] = provider()
        except Exception as e:
            outcome['error'] = e

    worker = threading.Thread(target=_call, name="news-provider", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise NewsUnavailable(f"news provider timed out after {timeout}s")
    if 'error' in outcome:
        error = outcome['error']
        raise NewsUnavailable(f"news provider failed: {error}") from error
    return outcome.get('value')
