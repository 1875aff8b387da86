"""
STL decomposition method for time series with a single seasonal period.
"""

import logging
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from stlpipeline.helpers.utils import validate_required_locals
from stlpipeline.timeSeriesProcessing.decomposition.configDecomposition import (
    MIN_PERIOD,
)
from stlpipeline.timeSeriesProcessing.decomposition.methods.baseDecomposerMethod import (
    BaseDecomposerMethod,
)

__version__ = "2.0.0"


class STLDecomposerMethod(BaseDecomposerMethod):
    """
    STL decomposition method.

    Required configuration: period. Optional keys: seasonal, trend, low_pass,
    seasonal_deg, trend_deg, low_pass_deg, seasonal_jump, trend_jump,
    low_pass_jump, inner_iter, outer_iter, robust. Unset keys are derived
    from the period.
    """

    DEFAULT_CONFIG = {
        **BaseDecomposerMethod.DEFAULT_CONFIG,
        "robust": False,
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        merged_config = {**self.DEFAULT_CONFIG, **(config or {})}
        super().__init__(merged_config)

    def __str__(self) -> str:
        """Standard string representation for STL logging."""
        return (
            f"STLDecomposerMethod(v{__version__}, period={self.config['period']}, "
            f"robust={self.config['robust']})"
        )

    def _validate_config(self) -> None:
        validate_required_locals(["period"], self.config)

        period = self.config["period"]
        if not isinstance(period, (int, np.integer)) or period < MIN_PERIOD:
            raise ValueError(f"STL period must be an integer >= {MIN_PERIOD}, got {period}")

        mstl_keys = [key for key in ("lmbda", "windows") if self.config.get(key) is not None]
        if mstl_keys:
            raise ValueError(f"STL method does not support {mstl_keys}, use MSTLDecomposerMethod")

    def process(
        self, data: pd.Series, context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Perform STL decomposition.

        Args:
            data: Time series for decomposition
            context: Processing context

        Returns:
            Standardized decomposition result; weights are returned as
            result['weights'] aligned to data.index
        """
        try:
            validation = self.validate_input(data)
            if validation["status"] == "error":
                return validation

            context_params = self.extract_context_parameters(context)

            logging.info(
                f"{self} - Starting STL decomposition: length={len(data)}"
            )

            stl_result = self.build_stl_params().fit(data, self.config["period"])

            result = self.prepare_decomposition_result(
                trend=stl_result.trend,
                seasonal=stl_result.seasonal,
                residual=stl_result.remainder,
                data=data,
                context_params=context_params,
                additional_data={
                    "weights": pd.Series(stl_result.weights, index=data.index, name="weights"),
                    "seasonal_strength": stl_result.seasonal_strength(),
                    "trend_strength": stl_result.trend_strength(),
                    "period_used": self.config["period"],
                    "method": "stl",
                    "version": __version__,
                },
            )

            logging.info(f"{self} - STL decomposition completed")

            return result

        except Exception as e:
            return self.handle_error(e, "STL decomposition")
