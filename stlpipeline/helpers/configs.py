"""
Configuration classes for the decomposition package:

DecompositionMethodConfig: Enum of the available decomposition methods.
QualityMetricConfig: Enum of decomposition quality metrics.
StlResult / MstlResult: Dataclasses holding fitted components.
PERFORMANCE_LOG_THRESHOLD: Elapsed fit time (seconds) above which fits are logged at INFO.


"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from dotenv import load_dotenv

from stlpipeline.helpers.utils import strength

load_dotenv()

PERFORMANCE_LOG_THRESHOLD = float(
    os.getenv("STLPIPELINE_PERFORMANCE_LOG_THRESHOLD", "1.0")
)


### Decomposition


class QualityMetricConfig(Enum):
    """
    Quality metrics:
    - for decomposition

    """

    MSE = "mse"
    MAE = "mae"
    RESIDUAL_AUTOCORR = "residual_autocorr"
    RESIDUAL_NORMALITY = "residual_normality"
    SEASONAL_STRENGTH = "seasonal_strength"
    TREND_STRENGTH = "trend_strength"


class DecompositionMethodConfig(Enum):
    """Time series decomposition methods"""

    STL = "stl"
    MSTL = "mstl"  # Multiple STL
    AUTO = "auto"


@dataclass(frozen=True, eq=False)
class StlResult:
    """STL decomposition result for a single period"""

    seasonal: np.ndarray
    trend: np.ndarray
    remainder: np.ndarray
    weights: np.ndarray

    def seasonal_strength(self) -> float:
        return strength(self.seasonal, self.remainder)

    def trend_strength(self) -> float:
        return strength(self.trend, self.remainder)

    def to_frame(self, index: Optional[pd.Index] = None) -> pd.DataFrame:
        """Components as DataFrame columns seasonal, trend, remainder, weights."""
        return pd.DataFrame(
            {
                "seasonal": self.seasonal,
                "trend": self.trend,
                "remainder": self.remainder,
                "weights": self.weights,
            },
            index=index,
        )


@dataclass(frozen=True, eq=False)
class MstlResult:
    """
    MSTL decomposition result.

    seasonal holds one array per requested period, in the order the periods
    were requested.
    """

    seasonal: List[np.ndarray]
    trend: np.ndarray
    remainder: np.ndarray

    def seasonal_strength(self) -> List[float]:
        return [strength(component, self.remainder) for component in self.seasonal]

    def trend_strength(self) -> float:
        return strength(self.trend, self.remainder)

    def to_frame(
        self,
        index: Optional[pd.Index] = None,
        periods: Optional[Sequence[int]] = None,
    ) -> pd.DataFrame:
        """
        Components as DataFrame.

        Seasonal columns are named seasonal_<period> when periods are given,
        otherwise seasonal_<position>.
        """
        labels = periods if periods is not None else range(len(self.seasonal))
        if len(labels) != len(self.seasonal):
            raise ValueError("periods must have one entry per seasonal component")

        columns = {}
        for position, (label, component) in enumerate(zip(labels, self.seasonal)):
            name = f"seasonal_{label}"
            if name in columns:  # repeated period
                name = f"{name}_{position}"
            columns[name] = component
        columns["trend"] = self.trend
        columns["remainder"] = self.remainder
        return pd.DataFrame(columns, index=index)
