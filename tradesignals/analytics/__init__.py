from tradesignals.analytics.multi_timeframe import MultiTimeframeAggregator
from tradesignals.analytics.signal_fusion import SignalFusionEngine

__all__ = ["MultiTimeframeAggregator", "SignalFusionEngine"]
