import pytest

from tests.builders import bearish_candles, bullish_candles, flat_candles


@pytest.fixture
def bullish():
    return bullish_candles()


@pytest.fixture
def bearish():
    return bearish_candles()


@pytest.fixture
def flat():
    return flat_candles()
