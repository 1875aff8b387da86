# -----------------------------------------------------------------------------
# Moving-average low-pass filter and bisquare robustness weights for STL
# -----------------------------------------------------------------------------

import numpy as np
from numba import njit


@njit
def ma(x, n, length, ave):
    """Simple moving averages of x[:n]; writes n - length + 1 values into ave."""
    newn = n - length + 1
    flen = float(length)
    v = 0.0

    for i in range(length):
        v += x[i]

    ave[0] = v / flen
    if newn > 1:
        k = length
        m = 0
        for j in range(1, newn):
            v = v - x[m] + x[k]
            ave[j] = v / flen
            k += 1
            m += 1


@njit
def fts(x, n, np_, trend, work):
    """
    Low-pass filter: moving averages of length np_, np_ and 3.

    x has n elements and trend receives n - 2 * np_ values.
    """
    ma(x, n, np_, trend)
    ma(trend, n - np_ + 1, np_, work)
    ma(work, n - 2 * np_ + 2, 3, trend)


@njit
def rwts(y, n, fit, rw):
    """Bisquare robustness weights scaled by six times the median absolute residual."""
    residuals = np.empty(n)
    for i in range(n):
        residuals[i] = abs(y[i] - fit[i])

    mid1 = (n - 1) // 2
    mid2 = n // 2

    ordered = np.sort(residuals)

    cmad = 3.0 * (ordered[mid1] + ordered[mid2])
    c9 = 0.999 * cmad
    c1 = 0.001 * cmad

    for i in range(n):
        r = residuals[i]
        if r <= c1:
            rw[i] = 1.0
        elif r <= c9:
            rw[i] = (1.0 - (r / cmad) ** 2) ** 2
        else:
            rw[i] = 0.0
