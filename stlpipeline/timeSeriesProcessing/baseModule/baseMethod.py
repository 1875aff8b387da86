"""
Common base classes for time series processing modules.

Contains base class BaseTimeSeriesMethod with the logic shared by all
pandas-level methods: input validation, context extraction, standard
metadata and response creation, error handling and logging.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd


class BaseTimeSeriesMethod(ABC):
    """
    Common base class for all time series processing methods.

    Specific functionality remains in child classes.
    """

    # Default base configurations (can be overridden in child classes)
    DEFAULT_CONFIG = {
        "return_detailed_metadata": False,  # Common interface setting
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize base method.

        Args:
            config: Method configuration
        """
        # Merge configuration with defaults
        self.config = {**self.DEFAULT_CONFIG, **(config or {})}
        self.name = self.__class__.__name__

    def __str__(self) -> str:
        """Standard string representation for logging."""
        return f"{self.name}(config_keys={list(self.config.keys())})"

    @abstractmethod
    def process(
        self, data: pd.Series, context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Execute time series processing.

        Args:
            data: Time series for processing
            context: Additional context

        Returns:
            Dict with standard format:
            {
                'status': 'success/error',
                'result': {...},
                'metadata': {...}
            }
        """
        pass

    def validate_input(
        self, data: pd.Series, min_length: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Common input data validation.

        Args:
            data: Time series for validation
            min_length: Minimum data length

        Returns:
            Dict with validation result
        """
        if not isinstance(data, pd.Series):
            return self._create_error_response(f"Expected pd.Series, got {type(data)}")

        if len(data) == 0:
            return self._create_error_response("Empty series provided")

        if data.isnull().all():
            return self._create_error_response("All values in the series are null")

        if min_length is not None and len(data) < min_length:
            return self._create_error_response(
                f"Series too short: {len(data)} < {min_length}"
            )

        if data.isnull().sum() > 0:
            return self._create_error_response("Time series has missing values")

        if not pd.api.types.is_numeric_dtype(data):
            return self._create_error_response(
                f"Expected numeric series, got dtype {data.dtype}"
            )

        if np.isinf(data.to_numpy(dtype=np.float64)).any():
            return self._create_error_response("Data contains infinite values")

        return {"status": "success"}

    def extract_context_parameters(
        self, context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Extract standard parameters from context.

        Args:
            context: Execution context

        Returns:
            Dict with extracted parameters
        """
        if not context:
            return {}

        extracted = {
            "interval": context.get("interval", "unknown"),
            "data_source": context.get("data_source", "unknown"),
        }

        additional_params = {
            k: v for k, v in context.items() if k not in ["interval", "data_source"]
        }
        if additional_params:
            extracted["additional_params"] = additional_params

        return extracted

    def create_standard_metadata(
        self,
        data: pd.Series,
        context_params: Dict[str, Any],
        additional_metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Create standard metadata.

        Args:
            data: Time series
            context_params: Parameters from context
            additional_metadata: Additional metadata

        Returns:
            Dict with standard metadata
        """
        metadata = {
            "method": self.name,
            "data_length": len(data),
            "interval": context_params.get("interval", "unknown"),
        }

        if self.config.get("return_detailed_metadata", False):
            metadata["parameters_used"] = self.config.copy()
            metadata["data_source"] = context_params.get("data_source", "unknown")

        if additional_metadata:
            metadata.update(additional_metadata)

        return metadata

    def handle_error(
        self,
        error: Exception,
        operation: str,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Standardized error handling.

        Args:
            error: Exception
            operation: Operation name where error occurred
            additional_context: Additional error context

        Returns:
            Dict with standard error format
        """
        error_msg = f"Error in {operation}: {str(error)}"
        logging.error(f"{self} - {error_msg}", exc_info=True)

        error_response = {
            "status": "error",
            "message": error_msg,
            "metadata": {
                "method": self.name,
                "operation": operation,
                "error_type": type(error).__name__,
            },
        }

        if additional_context:
            error_response["metadata"].update(additional_context)

        return error_response

    def create_success_response(
        self,
        result: Dict[str, Any],
        data: pd.Series,
        context_params: Dict[str, Any],
        additional_metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Create standard success response."""
        return {
            "status": "success",
            "result": result,
            "metadata": self.create_standard_metadata(
                data, context_params, additional_metadata
            ),
        }

    def _create_error_response(self, message: str) -> Dict[str, Any]:
        """Create standard error response."""
        return {"status": "error", "message": message}
