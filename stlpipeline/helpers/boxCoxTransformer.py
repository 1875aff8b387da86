"""
Box-Cox Transformation Helper

Variance-stabilizing power transform applied by MSTL before decomposition.

Mathematical Foundation:
- Forward transform: y = (x^λ - 1) / λ for λ > 0, y = ln(x) for λ ≈ 0
- Inverse transform: x = (λy + 1)^(1/λ) for λ > 0, x = exp(y) for λ ≈ 0

Lambda values below BOX_COX_MIN_LAMBDA are treated as zero (log transform).
Zero is accepted for an explicit lambda above zero, other inputs must be
strictly positive. The transform does not shift or rescale data.
"""

import logging
from typing import Optional, Tuple, Union

import numpy as np
import pandas as pd
from scipy import stats

__version__ = "2.0.0"

# Lambda below this value selects the log transform
BOX_COX_MIN_LAMBDA = 1e-4

# Lambda range accepted by MSTL
DEFAULT_LAMBDA_RANGE = (0.0, 1.0)


class BoxCoxTransformer:
    """
    Box-Cox transformation utility for time series processing.

    Usage:
        transformer = BoxCoxTransformer()

        # Manual lambda specification
        transformed_data = transformer.transform(data, lambda_value=0.5)
        original_data = transformer.inverse_transform(transformed_data, lambda_value=0.5)

        # Maximum likelihood lambda, clipped to lambda_range
        transformed_data, lambda_opt = transformer.fit_transform(data)
    """

    def __init__(
        self,
        lambda_range: Tuple[float, float] = DEFAULT_LAMBDA_RANGE,
        verbose: bool = False,
    ):
        """
        Initialize BoxCoxTransformer.

        Args:
            lambda_range: Range for lambda optimization (min_lambda, max_lambda)
            verbose: Enable detailed logging
        """
        self.lambda_range = lambda_range
        self.verbose = verbose

        self._fitted_lambda = None

    def __str__(self) -> str:
        """String representation for logging."""
        return f"BoxCoxTransformer(lambda_range={self.lambda_range})"

    def fit(self, data: Union[pd.Series, np.ndarray]) -> float:
        """
        Find the maximum likelihood lambda for the data.

        Args:
            data: Input time series data (must be positive)

        Returns:
            Optimal lambda clipped to lambda_range

        Raises:
            ValueError: If data is empty, contains NaN or non-positive values
        """
        data_array = self._to_numpy(data)
        self._validate_input(data_array)

        _, optimal_lambda = stats.boxcox(data_array, lmbda=None)
        min_lambda, max_lambda = self.lambda_range
        optimal_lambda = float(np.clip(optimal_lambda, min_lambda, max_lambda))

        self._fitted_lambda = optimal_lambda

        if self.verbose:
            logging.info(f"{self} - Fitted lambda: {optimal_lambda:.6f}")

        return optimal_lambda

    def transform(
        self, data: Union[pd.Series, np.ndarray], lambda_value: Optional[float] = None
    ) -> Union[pd.Series, np.ndarray]:
        """
        Apply Box-Cox transformation to data.

        Args:
            data: Input data to transform
            lambda_value: Lambda parameter (uses fitted lambda if None)

        Returns:
            Transformed data in same format as input

        Raises:
            ValueError: If lambda not provided and transformer not fitted, or
                the data is outside the transform domain
        """
        lmbda = self._resolve_lambda(lambda_value)

        data_array = self._to_numpy(data)
        self._validate_input(data_array, lmbda)

        transformed_array = self._forward_transform(data_array, lmbda)

        if self.verbose:
            logging.info(f"{self} - Transformed {len(data_array)} values with lambda={lmbda}")

        return self._to_original_format(transformed_array, data)

    def inverse_transform(
        self, data: Union[pd.Series, np.ndarray], lambda_value: Optional[float] = None
    ) -> Union[pd.Series, np.ndarray]:
        """
        Apply inverse Box-Cox transformation to data.

        Args:
            data: Transformed data to inverse transform
            lambda_value: Lambda parameter used in forward transform

        Returns:
            Original scale data in same format as input
        """
        lmbda = self._resolve_lambda(lambda_value)

        data_array = self._to_numpy(data)
        inverse_array = self._inverse_transform(data_array, lmbda)

        return self._to_original_format(inverse_array, data)

    def fit_transform(
        self, data: Union[pd.Series, np.ndarray]
    ) -> Tuple[Union[pd.Series, np.ndarray], float]:
        """
        Fit transformer and apply transformation in one step.

        Returns:
            Tuple of (transformed_data, optimal_lambda)
        """
        optimal_lambda = self.fit(data)
        transformed_data = self.transform(data, optimal_lambda)
        return transformed_data, optimal_lambda

    # Private methods for internal functionality

    def _resolve_lambda(self, lambda_value: Optional[float]) -> float:
        lmbda = lambda_value if lambda_value is not None else self._fitted_lambda
        if lmbda is None:
            raise ValueError("Lambda parameter not provided and transformer not fitted")
        return float(lmbda)

    def _to_numpy(self, data: Union[pd.Series, np.ndarray]) -> np.ndarray:
        """Convert input data to float numpy array."""
        if isinstance(data, pd.Series):
            return data.to_numpy(dtype=np.float64)
        return np.asarray(data, dtype=np.float64)

    def _to_original_format(
        self, array: np.ndarray, original: Union[pd.Series, np.ndarray]
    ) -> Union[pd.Series, np.ndarray]:
        """Convert array back to original data format."""
        if isinstance(original, pd.Series):
            return pd.Series(array, index=original.index, name=original.name)
        return array

    def _validate_input(self, data: np.ndarray, lmbda: Optional[float] = None) -> None:
        """
        Validate input data for Box-Cox transformation.

        Zero is accepted only for an explicit lambda above BOX_COX_MIN_LAMBDA.
        """
        if len(data) == 0:
            raise ValueError("Empty data provided")

        if np.any(np.isnan(data)):
            raise ValueError("Data contains NaN values")

        if np.any(data < 0):
            raise ValueError("Box-Cox transform requires non-negative values")

        if (lmbda is None or lmbda < BOX_COX_MIN_LAMBDA) and np.any(data == 0):
            raise ValueError("Box-Cox transform requires strictly positive values")

    def _forward_transform(self, data: np.ndarray, lmbda: float) -> np.ndarray:
        if lmbda < BOX_COX_MIN_LAMBDA:
            return np.log(data)
        return (np.power(data, lmbda) - 1.0) / lmbda

    def _inverse_transform(self, values: np.ndarray, lmbda: float) -> np.ndarray:
        if lmbda < BOX_COX_MIN_LAMBDA:
            return np.exp(values)

        base = 1.0 + lmbda * values
        if np.any(base < 0):
            logging.warning(
                f"{self} - {int(np.sum(base < 0))} values outside the inverse domain"
            )
        with np.errstate(invalid="ignore"):
            return np.power(base, 1.0 / lmbda)
