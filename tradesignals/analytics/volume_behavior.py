"""
Volume Behavior Analyzer
------------------------
Classifies absorption, divergence, climax and weak-move (fakeout) volume
conditions on the trailing 20-candle window.
"""
from typing import Sequence

import numpy as np

from tradesignals.analytics.models import Absorption, Divergence, VolumeAnalysis
from tradesignals.events import Candle

VOLUME_WINDOW = 20
ABSORPTION_VOLUME_MULT = 1.8
ABSORPTION_MAX_MOVE = 0.4   # of candle range
DIVERGENCE_VOLUME_DROP = 0.8
CLIMAX_VOLUME_MULT = 3.0
WEAK_MOVE_BODY = 0.7
WEAK_MOVE_DROP = 0.6
WEAK_MOVE_VOLUME = 0.6


class VolumeBehaviorAnalyzer:

    def analyze(self, candles: Sequence[Candle]) -> VolumeAnalysis:
        if len(candles) < VOLUME_WINDOW:
            return VolumeAnalysis()

        recent = candles[-VOLUME_WINDOW:]
        volumes = np.array([c.volume for c in recent], dtype=float)
        avg_volume = volumes.mean()
        last = recent[-1]

        return VolumeAnalysis(
            absorption=self._absorption(last, avg_volume),
            divergence=self._divergence(recent, volumes),
            climax=bool(last.volume > avg_volume * CLIMAX_VOLUME_MULT),
            fakeout=self._weak_move(last, avg_volume),
        )

    @staticmethod
    def _absorption(last: Candle, avg_volume: float) -> Absorption:
        heavy = last.volume > avg_volume * ABSORPTION_VOLUME_MULT
        if not heavy:
            return Absorption.NONE

        # Sellers hit hard but price barely falls: buyers are absorbing
        drop = last.open - last.close if last.is_red else 0.0
        if 0 < drop < last.range * ABSORPTION_MAX_MOVE:
            return Absorption.BUY

        rise = last.close - last.open if last.is_green else 0.0
        if 0 < rise < last.range * ABSORPTION_MAX_MOVE:
            return Absorption.SELL

        return Absorption.NONE

    @staticmethod
    def _divergence(recent: Sequence[Candle], volumes: np.ndarray) -> Divergence:
        half = len(recent) // 2
        first, second = recent[:half], recent[half:]
        first_vol, second_vol = volumes[:half].mean(), volumes[half:].mean()
        volume_fading = second_vol < first_vol * DIVERGENCE_VOLUME_DROP

        divergence = Divergence.NONE
        if max(c.high for c in second) > max(c.high for c in first) and volume_fading:
            divergence = Divergence.BEARISH
        # lower lows on fading volume take precedence
        if min(c.low for c in second) < min(c.low for c in first) and volume_fading:
            divergence = Divergence.BULLISH
        return divergence

    @staticmethod
    def _weak_move(last: Candle, avg_volume: float) -> bool:
        low_volume = last.volume < avg_volume * WEAK_MOVE_VOLUME
        big_body = last.body > last.range * WEAK_MOVE_BODY
        big_red = last.is_red and (last.open - last.close) > last.range * WEAK_MOVE_DROP
        return bool((big_body or big_red) and low_volume)
