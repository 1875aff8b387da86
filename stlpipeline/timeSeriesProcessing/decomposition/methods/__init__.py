"""
Decomposition methods for time series.

Each method inherits from BaseDecomposerMethod to ensure a unified interface.
"""

from .baseDecomposerMethod import BaseDecomposerMethod
from .mstlDecomposerMethod import MSTLDecomposerMethod
from .stlDecomposerMethod import STLDecomposerMethod

__all__ = [
    "BaseDecomposerMethod",
    "STLDecomposerMethod",
    "MSTLDecomposerMethod",
]

__version__ = "1.0.0"
