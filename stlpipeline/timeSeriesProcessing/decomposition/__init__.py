"""
Decomposition module for time series processing.

Architecture:
- Level 1: DecompositionAlgorithm (method selection by number of periods)
- Level 2: STLDecomposerMethod / MSTLDecomposerMethod (pandas-level methods)
- Level 3: StlParams / MstlParams (configuration builders over the numba engine)
"""

__version__ = "1.0.0"

from stlpipeline.timeSeriesProcessing.decomposition.algorithmDecomposition import (
    DecompositionAlgorithm,
)
from stlpipeline.timeSeriesProcessing.decomposition.configDecomposition import (
    MstlParams,
    StlParameterError,
    StlParams,
)

__all__ = [
    "DecompositionAlgorithm",
    "StlParams",
    "MstlParams",
    "StlParameterError",
]
