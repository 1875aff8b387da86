"""
Base class for time series decomposition methods.

Inherits common functionality from BaseTimeSeriesMethod.
Maps flat method configuration onto StlParams and packages fitted components
as pd.Series with quality metrics.
"""

import logging
from abc import abstractmethod
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from stlpipeline.helpers.evaluation.qualityEvaluator import QualityEvaluator
from stlpipeline.timeSeriesProcessing.baseModule.baseMethod import BaseTimeSeriesMethod
from stlpipeline.timeSeriesProcessing.decomposition.configDecomposition import StlParams

__version__ = "2.0.0"


# Method-level trend + seasonal + residual = original tolerance
CONSISTENCY_TOLERANCE = 1e-4

# Flat configuration key -> StlParams setter
STL_CONFIG_SETTERS = {
    "seasonal": "set_seasonal_length",
    "trend": "set_trend_length",
    "low_pass": "set_low_pass_length",
    "seasonal_deg": "set_seasonal_degree",
    "trend_deg": "set_trend_degree",
    "low_pass_deg": "set_low_pass_degree",
    "seasonal_jump": "set_seasonal_jump",
    "trend_jump": "set_trend_jump",
    "low_pass_jump": "set_low_pass_jump",
    "inner_iter": "set_inner_loops",
    "outer_iter": "set_outer_loops",
    "robust": "set_robust",
}


class BaseDecomposerMethod(BaseTimeSeriesMethod):
    """
    Base class for time series decomposition methods.

    Adds specific logic for time series decomposition.
    """

    DEFAULT_CONFIG = {
        **BaseTimeSeriesMethod.DEFAULT_CONFIG,
        "evaluate_quality": True,  # Attach QualityEvaluator scores to the result
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize decomposition method.

        Args:
            config: Method configuration

        Raises:
            ValueError: If configuration is missing or invalid
        """
        if not config:
            raise ValueError(f"Configuration is required for {self.__class__.__name__}.")

        merged_config = {**self.DEFAULT_CONFIG, **config}
        super().__init__(merged_config)

        self.quality_evaluator = QualityEvaluator()

        self._validate_config()

    @abstractmethod
    def _validate_config(self) -> None:
        """
        Validate method configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        pass

    def build_stl_params(self) -> StlParams:
        """StlParams from the flat configuration keys present in self.config."""
        stl_params = StlParams()
        for key, setter in STL_CONFIG_SETTERS.items():
            value = self.config.get(key)
            if value is not None:
                getattr(stl_params, setter)(value)
        return stl_params

    def prepare_decomposition_result(
        self,
        trend: np.ndarray,
        seasonal: np.ndarray,
        residual: np.ndarray,
        data: pd.Series,
        context_params: Dict[str, Any],
        additional_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Standard decomposition response with components aligned to data.index.

        Args:
            trend: Trend component
            seasonal: Seasonal component (sum over periods for MSTL)
            residual: Residual component
            data: Decomposed series
            context_params: Context parameters
            additional_data: Method-specific result entries

        Returns:
            Success response dictionary
        """
        trend_series = pd.Series(trend, index=data.index, name="trend")
        seasonal_series = pd.Series(seasonal, index=data.index, name="seasonal")
        residual_series = pd.Series(residual, index=data.index, name="residual")

        result = {
            "trend": trend_series,
            "seasonal": seasonal_series,
            "residual": residual_series,
        }

        if self.config["evaluate_quality"]:
            quality_metrics = self.quality_evaluator.evaluate_decomposition(
                data, trend, seasonal, residual
            )
            result["quality_metrics"] = quality_metrics
            result["quality_score"] = quality_metrics["composite_score"]

        if additional_data:
            result.update(additional_data)

        consistency = self._validate_component_consistency(
            trend_series, seasonal_series, residual_series, data
        )

        return self.create_success_response(
            result, data, context_params, {"consistency": consistency}
        )

    def _validate_component_consistency(
        self,
        trend: pd.Series,
        seasonal: pd.Series,
        residual: pd.Series,
        original: pd.Series,
    ) -> Dict[str, Any]:
        """
        Check that trend + seasonal + residual reproduces the original series.

        Returns:
            Dict with is_valid, max absolute error and warnings
        """
        reconstruction = trend + seasonal + residual
        error = float(np.max(np.abs(reconstruction - original))) if len(original) else 0.0

        warnings: List[str] = []
        is_valid = error <= CONSISTENCY_TOLERANCE
        if not is_valid:
            warning_msg = (
                f"Component consistency validation FAILED: "
                f"error={error:.6f} > tolerance={CONSISTENCY_TOLERANCE}"
            )
            warnings.append(warning_msg)
            logging.warning(f"{self} - {warning_msg}")

        return {
            "is_valid": is_valid,
            "error": error,
            "tolerance_used": CONSISTENCY_TOLERANCE,
            "warnings": warnings,
        }
