"""
Candle Utilities
----------------
Conversion between Candle records and OHLCV DataFrames, plus resampling of a
finer series into the coarser analysis timeframes.
"""
from typing import List, Sequence

import numpy as np
import pandas as pd

from tradesignals.events import Candle

COLUMNS = ['time', 'open', 'high', 'low', 'close', 'volume']

_EPOCH = pd.Timestamp("1970-01-01", tz="UTC")

# Map analysis timeframes to pandas frequency strings
TIMEFRAME_FREQ = {
    '5m': '5min',
    '15m': '15min',
    '30m': '30min',
    '1h': '60min',
    '4h': '240min',
    '1d': '1D',
}


def candles_to_frame(candles: Sequence[Candle]) -> pd.DataFrame:
    """Build an OHLCV DataFrame (one row per candle, original order)."""
    if not candles:
        return pd.DataFrame(columns=COLUMNS)
    return pd.DataFrame([vars(c) for c in candles], columns=COLUMNS)


def candles_from_frame(df: pd.DataFrame) -> List[Candle]:
    """Convert a provider DataFrame into Candle records.

    - Accepts epoch seconds in a 'time' column, a 'timestamp' column, or a
      DatetimeIndex
    - Rows with any missing open/high/low/close are dropped
    - Missing volume becomes 0
    - Output is sorted ascending by time with duplicate timestamps removed
    """
    frame = df.copy()

    if 'time' not in frame.columns:
        if 'timestamp' in frame.columns:
            stamps = pd.to_datetime(frame['timestamp'], utc=True)
        elif isinstance(frame.index, pd.DatetimeIndex):
            stamps = pd.Series(frame.index, index=frame.index)
            stamps = pd.to_datetime(stamps, utc=True)
        else:
            raise ValueError("DataFrame must have a 'time' or 'timestamp' column or a DatetimeIndex")
        frame['time'] = (stamps - _EPOCH) // pd.Timedelta(seconds=1)

    if 'volume' not in frame.columns:
        frame['volume'] = 0

    frame = frame.dropna(subset=['open', 'high', 'low', 'close'])
    frame['volume'] = frame['volume'].fillna(0)
    frame = frame.sort_values('time').drop_duplicates(subset='time', keep='last')

    return [
        Candle(
            time=int(row.time),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=int(row.volume),
        )
        for row in frame.itertuples(index=False)
    ]


def resample_candles(candles: Sequence[Candle], target_tf: str) -> List[Candle]:
    """Resample a finer candle series into `target_tf` buckets.

    Aggregation: open=first, high=max, low=min, close=last, volume=sum.
    Buckets are left-closed and labelled by their start time.
    """
    freq = TIMEFRAME_FREQ.get(target_tf)
    if freq is None:
        raise ValueError(f"Unsupported timeframe: {target_tf}")
    if not candles:
        return []

    df = candles_to_frame(candles)
    df.index = pd.to_datetime(df['time'], unit='s', utc=True)

    agg_dict = {
        'open': 'first',
        'high': 'max',
        'low': 'min',
        'close': 'last',
        'volume': 'sum',
    }
    resampled = df.resample(freq, closed='left', label='left').agg(agg_dict)
    resampled = resampled.dropna(subset=['open'])
    resampled['time'] = (resampled.index - _EPOCH) // pd.Timedelta(seconds=1)
    resampled['volume'] = resampled['volume'].astype(np.int64)

    return candles_from_frame(resampled.reset_index(drop=True))
