# -----------------------------------------------------------------------------
# Local regression (loess) kernels used by the STL decomposition
# est (single fitted value) and ess (smoothed sequence with stride interpolation)
# -----------------------------------------------------------------------------

import numpy as np
from numba import njit


@njit
def est(y, n, length, ideg, xs, nleft, nright, w, userw, rw):
    """
    Weighted local fit of degree 0 or 1 evaluated at position xs.

    Neighbors are the inclusive index range [nleft, nright]. Positions are
    0-based; xs may lie outside [0, n - 1] when extrapolating.

    Args:
        y: Sequence to smooth
        n: Number of valid elements in y
        length: Smoothing window length
        ideg: Local polynomial degree (0 or 1)
        xs: Target position
        nleft: First neighbor index
        nright: Last neighbor index
        w: Scratch buffer for neighbor weights (length >= nright + 1)
        userw: Multiply kernel weights by rw
        rw: Prior (robustness) weights

    Returns:
        Tuple (ok, value). ok is False when the total weight is zero.
    """
    value_range = n - 1.0
    h = max(xs - nleft, nright - xs)

    if length > n:
        h += (length - n) // 2

    h9 = 0.999 * h
    h1 = 0.001 * h

    # tri-cube weights
    a = 0.0
    for j in range(nleft, nright + 1):
        w[j] = 0.0
        r = abs(j - xs)
        if r <= h9:
            if r <= h1:
                w[j] = 1.0
            else:
                w[j] = (1.0 - (r / h) ** 3) ** 3
            if userw:
                w[j] *= rw[j]
            a += w[j]

    if a <= 0.0:
        return False, 0.0

    for j in range(nleft, nright + 1):
        w[j] /= a

    if h > 0.0 and ideg > 0:
        # weighted center of the positions
        a = 0.0
        for j in range(nleft, nright + 1):
            a += w[j] * j
        b = xs - a
        c = 0.0
        for j in range(nleft, nright + 1):
            c += w[j] * (j - a) ** 2
        if np.sqrt(c) > 0.001 * value_range:
            b /= c
            for j in range(nleft, nright + 1):
                w[j] *= b * (j - a) + 1.0

    ys = 0.0
    for j in range(nleft, nright + 1):
        ys += w[j] * y[j]

    return True, ys


@njit
def ess(y, n, length, ideg, njump, userw, rw, ys, res):
    """
    Loess-smooth y[:n] into ys[:n].

    The fit is evaluated exactly every njump positions and the skipped
    positions are linearly interpolated. res is scratch space of length >= n.
    """
    if n < 2:
        ys[0] = y[0]
        return

    nleft = 0
    nright = 0

    newnj = min(njump, n - 1)
    if length >= n:
        nleft = 0
        nright = n - 1
        for i in range(0, n, newnj):
            ok, value = est(y, n, length, ideg, float(i), nleft, nright, res, userw, rw)
            ys[i] = value if ok else y[i]
    elif newnj == 1:
        # sliding centered window
        nsh = (length + 1) // 2
        nleft = 0
        nright = length - 1
        for i in range(n):
            if i + 1 > nsh and nright != n - 1:
                nleft += 1
                nright += 1
            ok, value = est(y, n, length, ideg, float(i), nleft, nright, res, userw, rw)
            ys[i] = value if ok else y[i]
    else:
        nsh = (length + 1) // 2
        for i in range(0, n, newnj):
            pos = i + 1
            if pos < nsh:
                nleft = 0
                nright = length - 1
            elif pos >= n - nsh + 1:
                nleft = n - length
                nright = n - 1
            else:
                nleft = pos - nsh
                nright = length + pos - nsh - 1
            ok, value = est(y, n, length, ideg, float(i), nleft, nright, res, userw, rw)
            ys[i] = value if ok else y[i]

    if newnj != 1:
        for i in range(0, n - newnj, newnj):
            delta = (ys[i + newnj] - ys[i]) / newnj
            for j in range(i + 1, i + newnj):
                ys[j] = ys[i] + delta * (j - i)

        # tail not reached by the stride
        k = ((n - 1) // newnj) * newnj
        if k != n - 1:
            ok, value = est(y, n, length, ideg, float(n - 1), nleft, nright, res, userw, rw)
            ys[n - 1] = value if ok else y[n - 1]
            if k != n - 2:
                delta = (ys[n - 1] - ys[k]) / (n - 1 - k)
                for j in range(k + 1, n - 1):
                    ys[j] = ys[k] + delta * (j - k)
