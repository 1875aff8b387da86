"""
Seasonal-trend decomposition with STL and MSTL.

Usage:
    from stlpipeline import params, mstl_params

    result = params().set_robust(True).fit(series, period=7)
    result = mstl_params().fit(series, periods=[24, 168])
"""

from stlpipeline.helpers.configs import MstlResult, StlResult
from stlpipeline.timeSeriesProcessing.decomposition.configDecomposition import (
    MstlParams,
    StlParameterError,
    StlParams,
    mstl_params,
    params,
)

__version__ = "1.0.0"

__all__ = [
    "StlParams",
    "MstlParams",
    "StlResult",
    "MstlResult",
    "StlParameterError",
    "params",
    "mstl_params",
]
