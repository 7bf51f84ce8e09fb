"""
Test CHOCH / BOS detection
"""
import pytest

from tradesignals.analytics import market_structure
from tradesignals.analytics.market_structure import MarketStructureAnalyzer, calculate_aggressiveness
from tradesignals.analytics.models import CHOCHPattern, Direction, SwingKind, SwingPoint
from tests.builders import WAVE_4, candles_from_closes, doji, make_candle, wave_closes


@pytest.fixture
def analyzer():
    return MarketStructureAnalyzer()


def test_needs_twenty_candles(analyzer, bullish):
    assert analyzer.detect_choch(bullish[-19:]) is None


def test_bullish_choch_on_rising_swings(analyzer, bullish):
    choch = analyzer.detect_choch(bullish, "1h")
    assert choch is not None
    assert choch.type is Direction.BULLISH
    assert choch.timeframe == "1h"
    assert 70 <= choch.strength <= 95
    # fallback path reports the latest swing high as the level
    assert choch.level == pytest.approx(125.8)


def test_bearish_choch_on_falling_swings(analyzer, bearish):
    choch = analyzer.detect_choch(bearish)
    assert choch is not None
    assert choch.type is Direction.BEARISH
    assert choch.level == pytest.approx(174.2)


def test_nested_path_with_three_swings(analyzer):
    candles = candles_from_closes(wave_closes(40, wave=WAVE_4))
    choch = analyzer.detect_choch(candles)
    assert choch.type is Direction.BULLISH
    assert choch.strength == 95
    assert choch.aggressiveness >= 15
    assert choch.level == pytest.approx(111.55)


def test_no_choch_without_swings(analyzer, flat):
    assert analyzer.detect_choch(flat) is None


def test_bos_requires_choch(analyzer, bullish):
    assert analyzer.detect_bos(bullish, None) is None


def test_bos_confirmed_above_resistance(analyzer):
    candles = [doji(100.0, spread=1.0) for _ in range(9)] + [make_candle(100.5, 102.5, 100.0, 102.0)]
    choch = CHOCHPattern(type=Direction.BULLISH, strength=80, level=101.0, aggressiveness=10)
    bos = analyzer.detect_bos(candles, choch, "15m")
    assert bos.confirmed
    assert bos.type is Direction.BULLISH
    assert bos.level == 101.0
    assert bos.timeframe == "15m"


def test_bos_ignores_the_three_newest_candles(analyzer):
    # the spike sits inside the confirmation bars, so resistance stays at 101
    candles = [doji(100.0, spread=1.0) for _ in range(8)]
    candles += [make_candle(100.0, 110.0, 99.5, 101.5), make_candle(101.0, 101.8, 100.8, 101.5)]
    choch = CHOCHPattern(type=Direction.BULLISH, strength=80, level=101.0, aggressiveness=10)
    assert analyzer.detect_bos(candles, choch).level == 101.0


def test_no_bos_inside_range(analyzer):
    candles = [doji(100.0, spread=1.0) for _ in range(10)]
    choch = CHOCHPattern(type=Direction.BEARISH, strength=80, level=99.0, aggressiveness=10)
    assert analyzer.detect_bos(candles, choch) is None


def test_aggressiveness_capped():
    candles = [make_candle(100.0, 101.0, 100.0, 101.0) for _ in range(10)]
    assert calculate_aggressiveness(candles, Direction.BULLISH) == 25
    assert calculate_aggressiveness(candles, Direction.BEARISH) == 0


def test_aggressiveness_skips_zero_range():
    candles = [make_candle(100.0, 100.0, 100.0, 100.0) for _ in range(10)]
    assert calculate_aggressiveness(candles, Direction.BULLISH) == 0


def use_swings(monkeypatch, highs, lows):
    monkeypatch.setattr(
        market_structure, "find_swing_highs",
        lambda candles: [SwingPoint(i * 5, v, SwingKind.HIGH) for i, v in enumerate(highs)],
    )
    monkeypatch.setattr(
        market_structure, "find_swing_lows",
        lambda candles: [SwingPoint(i * 5 + 2, v, SwingKind.LOW) for i, v in enumerate(lows)],
    )
    # dojis contribute no aggressiveness
    return [doji(100.0) for _ in range(20)]


@pytest.mark.parametrize("highs, lows, expected, level", [
    # big leg up, small leg down: wider upper break wins
    ([10.0, 9.0, 12.0], [5.0, 4.0, 5.5], Direction.BULLISH, 12.0),
    # equal breaks fall to the minor leg
    ([10.0, 9.0, 11.0], [5.0, 4.0, 6.0], Direction.BEARISH, 6.0),
    # big leg down, small leg up: wider lower break wins
    ([10.0, 11.0, 8.0], [5.0, 6.0, 2.0], Direction.BEARISH, 2.0),
    ([10.0, 11.0, 8.0], [5.0, 6.0, 3.0], Direction.BULLISH, 8.0),
])
def test_nested_mixed_overlap(analyzer, monkeypatch, highs, lows, expected, level):
    candles = use_swings(monkeypatch, highs, lows)
    choch = analyzer.detect_choch(candles, "4h")
    assert choch.type is expected
    assert choch.level == level
    assert choch.strength == 85
    assert choch.aggressiveness == 7.5
    assert choch.timeframe == "4h"


def test_nested_full_overlap(analyzer, monkeypatch):
    candles = use_swings(monkeypatch, [10.0, 11.0, 12.0], [5.0, 6.0, 7.0])
    choch = analyzer.detect_choch(candles)
    assert choch.type is Direction.BULLISH
    assert choch.strength == 95
    assert choch.aggressiveness == 15
