import numpy as np
import pandas as pd
import pytest


REFERENCE_SERIES = [
    5.0, 9.0, 2.0, 9.0, 0.0, 6.0, 3.0, 8.0, 5.0, 8.0,
    7.0, 8.0, 8.0, 0.0, 2.0, 5.0, 0.0, 5.0, 6.0, 7.0,
    3.0, 6.0, 1.0, 4.0, 4.0, 4.0, 3.0, 7.0, 5.0, 8.0,
]


@pytest.fixture
def series():
    return list(REFERENCE_SERIES)


@pytest.fixture
def pd_series():
    index = pd.date_range("2024-01-01", periods=len(REFERENCE_SERIES), freq="D")
    return pd.Series(REFERENCE_SERIES, index=index, name="value")


@pytest.fixture
def seasonal_only_series():
    return [float(i % 7) for i in range(30)]


@pytest.fixture
def trend_only_series():
    return [float(i) for i in range(30)]


@pytest.fixture
def long_series():
    """Two seasonal cycles (12 and 30) on a slow trend with mild noise."""
    rng = np.random.default_rng(42)
    t = np.arange(360)
    return (
        10.0
        + 0.02 * t
        + 2.0 * np.sin(2 * np.pi * t / 12)
        + 1.0 * np.sin(2 * np.pi * t / 30)
        + rng.normal(0.0, 0.3, size=len(t))
    )
