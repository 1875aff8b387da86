# -----------------------------------------------------------------------------
# MSTL: repeated STL over several seasonal periods
# Bandara, Hyndman & Bergmeir (2021)
# -----------------------------------------------------------------------------

import logging

import numpy as np

from stlpipeline.helpers.boxCoxTransformer import BoxCoxTransformer

# Base seasonal window and per-rank increment when no window is configured
DEFAULT_SEASONAL_WINDOW_BASE = 7
DEFAULT_SEASONAL_WINDOW_STEP = 4


def default_seasonal_length(rank):
    """Seasonal window for the period at position rank in ascending order."""
    return DEFAULT_SEASONAL_WINDOW_BASE + DEFAULT_SEASONAL_WINDOW_STEP * (rank + 1)


def mstl(x, seas_ids, iterate, lmbda, swin, stl_params):
    """
    Multiple seasonal decomposition.

    Periods are processed in ascending order; results keep the order of seas_ids.

    Args:
        x: Input series (float64 array, not modified)
        seas_ids: Seasonal periods in caller order
        iterate: Number of passes over all periods
        lmbda: Box-Cox lambda or None
        swin: Seasonal window per period (caller order) or None
        stl_params: StlParams used for every per-period fit

    Returns:
        Tuple (seasonality, trend, remainder); seasonality is a list of arrays
        in caller order. With lmbda set all components are in transformed units.
    """
    if len(seas_ids) == 0:
        raise ValueError("periods must not be empty")

    indices = sorted(range(len(seas_ids)), key=lambda idx: seas_ids[idx])

    iterations = 1 if len(seas_ids) == 1 else iterate

    if lmbda is not None:
        deseas = BoxCoxTransformer().transform(x, lambda_value=lmbda)
    else:
        deseas = np.array(x, dtype=np.float64)

    seasonality = [None] * len(seas_ids)
    trend = None

    for j in range(iterations):
        for rank, idx in enumerate(indices):
            if j > 0:
                deseas = deseas + seasonality[idx]

            if swin is not None:
                params = stl_params.copy().set_seasonal_length(swin[idx])
            elif stl_params.seasonal_length is not None:
                params = stl_params
            else:
                params = stl_params.copy().set_seasonal_length(
                    default_seasonal_length(rank)
                )

            fit = params.fit(deseas, seas_ids[idx])
            logging.debug(
                f"MSTL pass {j + 1}/{iterations}: period={seas_ids[idx]}, "
                f"seasonal_length={params.seasonal_length}"
            )

            seasonality[idx] = fit.seasonal
            trend = fit.trend

            deseas = deseas - seasonality[idx]

    remainder = deseas - trend
    return seasonality, trend, remainder
