"""
Test candle/DataFrame conversion and resampling
"""
import numpy as np
import pandas as pd
import pytest

from tradesignals.analytics.candles import candles_from_frame, candles_to_frame, resample_candles
from tests.builders import HOUR, START_TIME, make_candle


def hourly(count):
    return [
        make_candle(100 + i, 101 + i, 99 + i, 100.5 + i, volume=100 * (i + 1), time=START_TIME + i * HOUR)
        for i in range(count)
    ]


def test_to_frame_keeps_order_and_columns():
    df = candles_to_frame(hourly(3))
    assert list(df.columns) == ['time', 'open', 'high', 'low', 'close', 'volume']
    assert df['time'].tolist() == [START_TIME, START_TIME + HOUR, START_TIME + 2 * HOUR]


def test_to_frame_empty():
    assert candles_to_frame([]).empty


def test_from_frame_sorts_dedupes_and_drops_gaps():
    df = pd.DataFrame({
        'time': [3, 1, 2, 2],
        'open': [3.0, 1.0, np.nan, 2.5],
        'high': [3.5, 1.5, 2.5, 3.0],
        'low': [2.5, 0.5, 1.5, 2.0],
        'close': [3.2, 1.2, 2.2, 2.7],
        'volume': [30, np.nan, 20, 25],
    })
    candles = candles_from_frame(df)
    assert [c.time for c in candles] == [1, 2, 3]
    assert candles[0].volume == 0
    assert candles[1].open == 2.5


def test_from_frame_parses_timestamps():
    df = pd.DataFrame({
        'timestamp': ['2024-01-01 00:00:00', '2024-01-01 01:00:00'],
        'open': [1.0, 2.0], 'high': [1.5, 2.5], 'low': [0.5, 1.5], 'close': [1.2, 2.2],
    })
    candles = candles_from_frame(df)
    assert [c.time for c in candles] == [1704067200, 1704070800]
    assert all(c.volume == 0 for c in candles)


def test_from_frame_needs_a_time_source():
    df = pd.DataFrame({'open': [1.0], 'high': [1.0], 'low': [1.0], 'close': [1.0]})
    with pytest.raises(ValueError):
        candles_from_frame(df)


def test_resample_hourly_into_4h():
    result = resample_candles(hourly(8), '4h')
    assert len(result) == 2

    first = result[0]
    assert first.time == START_TIME
    assert first.open == 100
    assert first.high == 104
    assert first.low == 99
    assert first.close == 103.5
    assert first.volume == 100 + 200 + 300 + 400

    assert result[1].time == START_TIME + 4 * HOUR
    assert result[1].close == 107.5


def test_resample_unknown_timeframe():
    with pytest.raises(ValueError):
        resample_candles(hourly(2), '2w')


def test_resample_empty():
    assert resample_candles([], '1h') == []
