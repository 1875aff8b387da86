# -----------------------------------------------------------------------------
# STL decomposition engine
# Cycle-subseries smoothing (ss), one inner pass (onestp) and the robust
# outer loop (stl). Cleveland, Cleveland, McRae & Terpenning (1990).
# -----------------------------------------------------------------------------

import numpy as np
from numba import njit

from stlpipeline.timeSeriesProcessing.timeSeriesAlgorithms.filters import fts, rwts
from stlpipeline.timeSeriesProcessing.timeSeriesAlgorithms.loess import est, ess


@njit
def ss(y, n, np_, ns, isdeg, nsjump, userw, rw, season):
    """
    Smooth each of the np_ cycle-subseries of y and extend every subseries
    by one extrapolated value at both ends.

    season receives n + 2 * np_ values.
    """
    size = n // np_ + 3
    work1 = np.zeros(size)
    work2 = np.zeros(size)
    work3 = np.ones(size)
    work4 = np.zeros(size)

    for j in range(np_):
        k = (n - j - 1) // np_ + 1

        for i in range(k):
            work1[i] = y[i * np_ + j]
        if userw:
            for i in range(k):
                work3[i] = rw[i * np_ + j]

        ess(work1, k, ns, isdeg, nsjump, userw, work3, work2[1:], work4)

        nright = min(ns, k) - 1
        ok, value = est(work1, k, ns, isdeg, -1.0, 0, nright, work4, userw, work3)
        work2[0] = value if ok else work2[1]

        nleft = max(0, k - ns)
        ok, value = est(work1, k, ns, isdeg, float(k), nleft, k - 1, work4, userw, work3)
        work2[k + 1] = value if ok else work2[k]

        for m in range(k + 2):
            season[m * np_ + j] = work2[m]


@njit
def onestp(y, n, np_, ns, nt, nl, isdeg, itdeg, ildeg, nsjump, ntjump, nljump,
           ni, userw, rw, season, trend):
    size = n + 2 * np_
    work1 = np.zeros(size)
    work2 = np.zeros(size)
    work3 = np.zeros(size)
    work4 = np.zeros(size)
    work5 = np.zeros(size)

    for _ in range(ni):
        for i in range(n):
            work1[i] = y[i] - trend[i]

        ss(work1, n, np_, ns, isdeg, nsjump, userw, rw, work2)
        fts(work2, size, np_, work3, work1)
        ess(work3, n, nl, ildeg, nljump, False, work4, work1, work5)

        # remove the low-frequency leakage from the cycle-subseries
        for i in range(n):
            season[i] = work2[np_ + i] - work1[i]
        for i in range(n):
            work1[i] = y[i] - season[i]

        ess(work1, n, nt, itdeg, ntjump, userw, rw, trend, work3)


@njit
def stl(y, n, np_, ns, nt, nl, isdeg, itdeg, ildeg, nsjump, ntjump, nljump,
        ni, no, rw, season, trend):
    """
    Run the STL inner loop ni times, then repeat with robustness weights
    recomputed from the fit for no outer iterations.

    rw, season and trend are output buffers of length n; trend is used as
    the starting trend estimate and must be zero-filled by the caller.
    """
    fit = np.zeros(n)
    userw = False
    k = 0

    while True:
        onestp(y, n, np_, ns, nt, nl, isdeg, itdeg, ildeg, nsjump, ntjump, nljump,
               ni, userw, rw, season, trend)
        k += 1
        if k > no:
            break
        for i in range(n):
            fit[i] = trend[i] + season[i]
        rwts(y, n, fit, rw)
        userw = True

    if no <= 0:
        for i in range(n):
            rw[i] = 1.0
