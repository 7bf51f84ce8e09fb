"""Multi-timeframe trading-signal inference engine."""

__version__ = "0.1.0"
