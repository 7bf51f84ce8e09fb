"""
Test RSI / EMA / ATR calculations
"""
import math

import pandas as pd
import pytest

from tradesignals.analytics.candles import candles_to_frame
from tradesignals.analytics.indicators.atr import ATR
from tradesignals.analytics.indicators.base import seeded_ewm
from tradesignals.analytics.indicators.ema import EMA
from tradesignals.analytics.indicators.rsi import RSI
from tests.builders import candles_from_closes, make_candle


def closes_frame(closes):
    return pd.DataFrame({'close': [float(c) for c in closes]})


def test_seeded_ewm_starts_from_the_simple_average():
    out = seeded_ewm(pd.Series([1.0, 2.0, 3.0, 4.0]), period=3, alpha=0.5)
    assert math.isnan(out.iloc[0]) and math.isnan(out.iloc[1])
    assert out.iloc[2] == pytest.approx(2.0)
    assert out.iloc[3] == pytest.approx(3.0)


def test_seeded_ewm_too_short():
    assert seeded_ewm(pd.Series([1.0, 2.0]), period=3, alpha=0.5).isna().all()


def test_ema_seed_and_recursion():
    ema = EMA(3).calculate(closes_frame([2, 4, 6, 8]))
    # seed = 4, multiplier 2/(3+1) = 0.5
    assert ema.iloc[2] == pytest.approx(4.0)
    assert ema.iloc[3] == pytest.approx(6.0)


def test_faster_ema_tracks_a_step_more_closely():
    df = closes_frame([100] * 100 + [110] * 20)
    ema9 = EMA(9).calculate(df)
    ema21 = EMA(21).calculate(df)
    ema90 = EMA(90).calculate(df)
    for i in range(100, 120):
        assert abs(ema9.iloc[i] - 110) < abs(ema21.iloc[i] - 110) < abs(ema90.iloc[i] - 110)


def test_rsi_balanced_moves():
    closes = [100 + (i % 2) for i in range(15)]
    rsi = RSI(14).calculate(closes_frame(closes))
    assert rsi.iloc[:14].isna().all()
    assert rsi.iloc[14] == pytest.approx(50.0)


def test_rsi_without_losses_is_100():
    rsi = RSI(14).calculate(closes_frame(range(100, 130)))
    assert rsi.iloc[-1] == 100.0


def test_rsi_without_gains_is_0():
    rsi = RSI(14).calculate(closes_frame(range(130, 100, -1)))
    assert rsi.iloc[-1] == pytest.approx(0.0)


def test_rsi_bounded(bullish, bearish):
    for candles in (bullish, bearish):
        rsi = RSI(14).calculate(candles_to_frame(candles)).dropna()
        assert ((rsi >= 0) & (rsi <= 100)).all()


def test_atr_averages_the_last_transitions():
    candles = [make_candle(100.0, 101.0, 99.0, 100.0) for _ in range(16)]
    atr = ATR(14).calculate(candles_to_frame(candles))
    assert atr.iloc[:14].isna().all()
    assert atr.iloc[14] == pytest.approx(2.0)


def test_atr_includes_gaps():
    closes = [100.0 + 5 * i for i in range(20)]
    atr = ATR(14).calculate(candles_to_frame(candles_from_closes(closes)))
    # every bar gaps 5 above the previous close: true range = high - prev close
    assert atr.iloc[-1] == pytest.approx(5.3)
