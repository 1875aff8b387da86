"""
Numba kernels of the STL engine.

Modules:
- loess: tri-cube weighted local regression (est, ess)
- filters: moving averages, low-pass filter and robustness weights
- stl: inner/outer STL loops
- mstl: repeated STL over several seasonal periods
"""
