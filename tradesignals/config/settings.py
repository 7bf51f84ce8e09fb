"""
Global Settings
"""
import os


def _get_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


LOG_LEVEL = os.environ.get("TRADESIGNALS_LOG_LEVEL", "INFO")
LOG_DIR = os.environ.get("TRADESIGNALS_LOG_DIR", "logs")
LOG_MAX_BYTES = _get_int("TRADESIGNALS_LOG_MAX_BYTES", 10 * 1024 * 1024)  # 10MB
LOG_BACKUP_COUNT = _get_int("TRADESIGNALS_LOG_BACKUP_COUNT", 5)

# Seconds to wait on the news collaborator before falling back to technicals
NEWS_TIMEOUT_SECONDS = _get_float("TRADESIGNALS_NEWS_TIMEOUT", 5.0)
MAX_WORKERS = _get_int("TRADESIGNALS_MAX_WORKERS", 5)

# Structure and volume detectors need this many candles to activate
MIN_CANDLES = 20

TIMEFRAMES = ("15m", "30m", "1h", "4h", "1d")

TIMEFRAME_WEIGHTS = {
    "15m": 0.10,
    "30m": 0.15,
    "1h": 0.20,
    "4h": 0.25,
    "1d": 0.50,
}
DEFAULT_TIMEFRAME_WEIGHT = 0.10

# (target, stop-loss) ATR multipliers per timeframe
RISK_MULTIPLIERS = {
    "15m": (0.5, 0.3),  # scalping
    "30m": (0.7, 0.4),
    "1h": (1.0, 0.5),
    "4h": (1.5, 0.8),
    "1d": (2.0, 1.0),  # position trades
}
DEFAULT_RISK_TIMEFRAME = "1h"

OVERALL_SIGNAL_THRESHOLD = _get_float("TRADESIGNALS_OVERALL_THRESHOLD", 0.4)
