"""
Swing Point Finder
------------------
Locates local price extrema in a candle window.
"""
from typing import List, Sequence

import numpy as np

from tradesignals.analytics.models import SwingKind, SwingPoint
from tradesignals.events import Candle

SWING_RADIUS = 3


def _dominates(value: float, neighbours: np.ndarray, kind: SwingKind) -> bool:
    """Strict extreme check: any tie with a neighbour disqualifies."""
    if kind is SwingKind.HIGH:
        return bool(np.all(neighbours < value))
    return bool(np.all(neighbours > value))


def find_swing_points(
    candles: Sequence[Candle],
    kind: SwingKind,
    radius: int = SWING_RADIUS,
) -> List[SwingPoint]:
    """
    Return the swing highs (or lows) of `candles` in index order.

    Index i qualifies when its high (low) is strictly above (below) every other
    high (low) within [i - radius, i + radius]. Only interior indices
    radius <= i < n - radius are considered.
    """
    n = len(candles)
    if n < 2 * radius + 1:
        return []

    attr = 'high' if kind is SwingKind.HIGH else 'low'
    values = np.array([getattr(c, attr) for c in candles], dtype=float)

    points = []
    for i in range(radius, n - radius):
        neighbours = np.concatenate((values[i - radius:i], values[i + 1:i + radius + 1]))
        if _dominates(values[i], neighbours, kind):
            points.append(SwingPoint(index=i, value=float(values[i]), kind=kind))
    return points


def find_swing_highs(candles: Sequence[Candle], radius: int = SWING_RADIUS) -> List[SwingPoint]:
    return find_swing_points(candles, SwingKind.HIGH, radius)


def find_swing_lows(candles: Sequence[Candle], radius: int = SWING_RADIUS) -> List[SwingPoint]:
    return find_swing_points(candles, SwingKind.LOW, radius)
