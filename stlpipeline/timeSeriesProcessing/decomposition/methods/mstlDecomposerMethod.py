"""
MSTL method for time series decomposition.

Multiple Seasonal-Trend decomposition for time series with multiple seasonality.
"""

import logging
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from stlpipeline.helpers.boxCoxTransformer import BoxCoxTransformer
from stlpipeline.helpers.utils import validate_required_locals
from stlpipeline.timeSeriesProcessing.decomposition.configDecomposition import (
    DEFAULT_MSTL_ITERATIONS,
    MAX_LAMBDA,
    MIN_LAMBDA,
    MIN_PERIOD,
    MstlParams,
)
from stlpipeline.timeSeriesProcessing.decomposition.methods.baseDecomposerMethod import (
    BaseDecomposerMethod,
)

__version__ = "3.1.0"

# lmbda value that requests the maximum likelihood Box-Cox estimate
AUTO_LAMBDA = "auto"


class MSTLDecomposerMethod(BaseDecomposerMethod):
    """
    MSTL decomposition method for time series with multiple seasonality.

    MSTL (Multiple Seasonal-Trend decomposition) extends classical STL
    to work with multiple seasonal periods.

    Required configuration: periods. Optional keys: windows (seasonal window
    per period), iterate, lmbda (number in [0, 1] or "auto"), plus the STL keys
    of STLDecomposerMethod.
    """

    DEFAULT_CONFIG = {
        **BaseDecomposerMethod.DEFAULT_CONFIG,
        "robust": False,
        "windows": None,  # Seasonal window per period, derived when None
        "iterate": DEFAULT_MSTL_ITERATIONS,  # Passes over all periods
        "lmbda": None,  # Box-Cox lambda, or "auto" for the maximum likelihood estimate
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        merged_config = {**self.DEFAULT_CONFIG, **(config or {})}
        super().__init__(merged_config)

    def __str__(self) -> str:
        """Standard string representation for MSTL logging."""
        periods = self.config.get("periods", [])
        return (
            f"MSTLDecomposerMethod(v{__version__}, periods={len(periods)}, "
            f"iterate={self.config['iterate']}, robust={self.config['robust']})"
        )

    def _validate_config(self) -> None:
        """Validate MSTL method configuration."""
        validate_required_locals(["periods", "iterate"], self.config)

        periods = self.config["periods"]
        if not isinstance(periods, (list, tuple)) or len(periods) == 0:
            raise ValueError(f"MSTL periods must be a non-empty list, got {periods}")

        periods_array = np.asarray(periods)
        if not np.issubdtype(periods_array.dtype, np.integer):
            raise ValueError(f"MSTL periods must be integers, got {periods}")

        invalid_periods = periods_array < MIN_PERIOD
        if np.any(invalid_periods):
            invalid_indices = np.where(invalid_periods)[0]
            raise ValueError(
                f"MSTL periods must be >= {MIN_PERIOD}, got invalid values at indices "
                f"{invalid_indices.tolist()}: {periods_array[invalid_indices].tolist()}"
            )

        lmbda = self.config["lmbda"]
        if lmbda is not None and lmbda != AUTO_LAMBDA and not isinstance(lmbda, (int, float)):
            raise ValueError(f"MSTL lmbda must be a number or '{AUTO_LAMBDA}', got {lmbda}")

    def resolve_lambda(self, data: pd.Series) -> Optional[float]:
        """Configured Box-Cox lambda; 'auto' is fitted on data within [0, 1]."""
        lmbda = self.config["lmbda"]
        if lmbda != AUTO_LAMBDA:
            return lmbda

        fitted_lambda = BoxCoxTransformer(lambda_range=(MIN_LAMBDA, MAX_LAMBDA)).fit(data)
        logging.info(f"{self} - Fitted Box-Cox lambda: {fitted_lambda:.6f}")
        return fitted_lambda

    def build_mstl_params(self, lmbda: Optional[float] = None) -> MstlParams:
        mstl_params = (
            MstlParams()
            .set_iterations(self.config["iterate"])
            .set_stl_params(self.build_stl_params())
        )
        if lmbda is not None:
            mstl_params.set_lambda(lmbda)
        if self.config["windows"] is not None:
            mstl_params.set_seasonal_lengths(self.config["windows"])
        return mstl_params

    def process(
        self, data: pd.Series, context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Perform MSTL decomposition.

        Args:
            data: Time series for decomposition
            context: Processing context

        Returns:
            Standardized decomposition result. 'seasonal' is the sum of all
            seasonal components; per-period components are in
            'seasonal_components'. With lmbda set, components and quality
            metrics refer to the Box-Cox transformed series.
        """
        try:
            validation = self.validate_input(data)
            if validation["status"] == "error":
                return validation

            context_params = self.extract_context_parameters(context)
            periods = list(self.config["periods"])

            logging.info(
                f"{self} - Starting MSTL decomposition: length={len(data)}, "
                f"periods={periods}"
            )

            lmbda = self.resolve_lambda(data)
            mstl_result = self.build_mstl_params(lmbda).fit(data, periods)

            reference = (
                BoxCoxTransformer().transform(data, lambda_value=lmbda)
                if lmbda is not None
                else data
            )

            seasonal_frame = mstl_result.to_frame(index=data.index, periods=periods)
            seasonal_components = {
                column: seasonal_frame[column]
                for column in seasonal_frame.columns
                if column.startswith("seasonal_")
            }

            result = self.prepare_decomposition_result(
                trend=mstl_result.trend,
                seasonal=np.sum(mstl_result.seasonal, axis=0),
                residual=mstl_result.remainder,
                data=reference,
                context_params=context_params,
                additional_data={
                    "seasonal_components": seasonal_components,
                    "seasonal_strength": mstl_result.seasonal_strength(),
                    "trend_strength": mstl_result.trend_strength(),
                    "periods_used": periods,
                    "n_periods": len(periods),
                    "windows_used": self.config["windows"],
                    "iterate": self.config["iterate"],
                    "lambda": lmbda,
                    "method": "mstl",
                    "version": __version__,
                },
            )

            logging.info(
                f"{self} - MSTL decomposition completed with {len(periods)} periods"
            )

            return result

        except Exception as e:
            return self.handle_error(e, "MSTL decomposition")
