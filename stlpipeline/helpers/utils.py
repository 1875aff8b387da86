import logging
from typing import Any

import numpy as np
import pandas as pd


def to_float_array(series: Any) -> np.ndarray:
    """
    Copy a list, tuple, np.ndarray or pd.Series into a fresh 1-D float64 array.

    The input is never modified; the decomposition kernels work on the copy.

    Raises:
        ValueError: If the input is not one-dimensional
    """
    if isinstance(series, pd.Series):
        values = series.to_numpy(dtype=np.float64, copy=True)
    else:
        values = np.array(series, dtype=np.float64, copy=True)

    if values.ndim != 1:
        raise ValueError(f"series must be one-dimensional, got shape {values.shape}")

    return values


def sample_variance(values: np.ndarray) -> float:
    """Sample variance, sum((x - mean)^2) / (count - 1)."""
    return float(np.var(values, ddof=1))


def strength(component: np.ndarray, remainder: np.ndarray) -> float:
    """
    Component strength, max(0, 1 - Var(remainder) / Var(component + remainder)).

    A remainder with zero variance gives 1.0. A component that cancels the
    remainder exactly (zero combined variance) gives 0.0.
    """
    var_remainder = sample_variance(remainder)
    if var_remainder == 0.0:
        return 1.0

    var_combined = sample_variance(np.asarray(component) + np.asarray(remainder))
    if var_combined == 0.0:
        logging.debug("Component + remainder has zero variance, strength set to 0.0")
        return 0.0

    return max(0.0, 1.0 - var_remainder / var_combined)


def validate_required_locals(required_params: list, input_params: dict):
    """
    Validation through locals() - the most efficient way

    Usage:
        validate_required_locals(['period', 'series'], locals())
    """
    missing_params = [
        param
        for param in required_params
        if param not in input_params or input_params[param] is None
    ]
    if missing_params:
        raise ValueError(f"Required parameters missing: {missing_params}")
