import pytest

from tradesignals.analytics.models import Absorption, Divergence, VolumeAnalysis
from tradesignals.analytics.volume_behavior import VolumeBehaviorAnalyzer
from tests.builders import doji, make_candle


@pytest.fixture
def analyzer():
    return VolumeBehaviorAnalyzer()


def quiet(count=19, volume=1000):
    return [doji(100.0, volume=volume) for _ in range(count)]


def test_short_series_is_neutral(analyzer):
    assert analyzer.analyze(quiet(19)) == VolumeAnalysis()


def test_climax(analyzer):
    result = analyzer.analyze(quiet() + [doji(100.0, volume=5000)])
    assert result.climax


def test_buying_absorption(analyzer):
    # heavy volume, red candle, drop under 40% of the range
    last = make_candle(100.2, 100.5, 99.5, 100.0, volume=3000)
    result = analyzer.analyze(quiet() + [last])
    assert result.absorption is Absorption.BUY
    assert not result.climax


def test_selling_absorption(analyzer):
    last = make_candle(100.0, 100.5, 99.5, 100.2, volume=3000)
    assert analyzer.analyze(quiet() + [last]).absorption is Absorption.SELL


def test_no_absorption_on_normal_volume(analyzer):
    last = make_candle(100.2, 100.5, 99.5, 100.0, volume=1000)
    assert analyzer.analyze(quiet() + [last]).absorption is Absorption.NONE


def test_bearish_divergence(analyzer):
    first = [make_candle(100.0, 101.0, 99.0, 100.0, volume=2000) for _ in range(10)]
    second = [make_candle(100.0, 102.0, 99.0, 100.0, volume=1000) for _ in range(10)]
    assert analyzer.analyze(first + second).divergence is Divergence.BEARISH


def test_bullish_divergence_wins_over_bearish(analyzer):
    first = [make_candle(100.0, 101.0, 99.0, 100.0, volume=2000) for _ in range(10)]
    second = [make_candle(100.0, 102.0, 98.0, 100.0, volume=1000) for _ in range(10)]
    assert analyzer.analyze(first + second).divergence is Divergence.BULLISH


def test_no_divergence_without_fading_volume(analyzer):
    first = [make_candle(100.0, 101.0, 99.0, 100.0) for _ in range(10)]
    second = [make_candle(100.0, 102.0, 98.0, 100.0) for _ in range(10)]
    assert analyzer.analyze(first + second).divergence is Divergence.NONE


def test_weak_move_on_thin_volume(analyzer):
    last = make_candle(100.0, 101.1, 99.95, 101.0, volume=100)
    assert analyzer.analyze(quiet() + [last]).fakeout


def test_strong_move_on_normal_volume_is_not_weak(analyzer):
    last = make_candle(100.0, 101.1, 99.95, 101.0, volume=1000)
    assert not analyzer.analyze(quiet() + [last]).fakeout
