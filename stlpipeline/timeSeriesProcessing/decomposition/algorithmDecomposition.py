"""
Decomposition Algorithm - selects STL or MSTL for a series.

A single seasonal period runs STL, several periods or a Box-Cox lambda or
per-period windows run MSTL, unless the configuration names the method
explicitly.
"""

import logging
from typing import Any, ClassVar, Dict, Optional

import pandas as pd

from stlpipeline.helpers.configs import DecompositionMethodConfig
from stlpipeline.helpers.utils import validate_required_locals
from stlpipeline.timeSeriesProcessing.decomposition.methods.mstlDecomposerMethod import (
    MSTLDecomposerMethod,
)
from stlpipeline.timeSeriesProcessing.decomposition.methods.stlDecomposerMethod import (
    STLDecomposerMethod,
)

__version__ = "1.0.0"


# Keys consumed by the algorithm itself, not forwarded to methods
ALGORITHM_KEYS = ("method", "periods")

# Keys only MSTLDecomposerMethod reads
MSTL_ONLY_KEYS = ("lmbda", "windows")


class DecompositionAlgorithm:
    """
    Decomposition orchestrator.

    Configuration:
        periods: list of seasonal periods (required)
        method: "stl", "mstl" or "auto" (default)
        any STL/MSTL method key (seasonal, trend, robust, lmbda, ...)
    """

    AVAILABLE_METHODS: ClassVar[Dict[str, type]] = {
        DecompositionMethodConfig.STL.value: STLDecomposerMethod,
        DecompositionMethodConfig.MSTL.value: MSTLDecomposerMethod,
    }

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        if not config:
            raise ValueError("Configuration required for DecompositionAlgorithm.")
        validate_required_locals(["periods"], config)

        self.config = config
        self.periods = list(config["periods"])
        self._methods = {}
        self._class_name = self.__class__.__name__

        logging.info(f"{self} initialized")

    def __str__(self) -> str:
        """Standard string representation."""
        return (
            f"{self._class_name}(method={self.config.get('method', 'auto')}, "
            f"periods={self.periods})"
        )

    def process(
        self, data: pd.Series, context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Execute decomposition with the selected method."""
        try:
            selected_method = self.select_method()
            logging.info(f"{self} Selected method: {selected_method}")

            method = self._get_method_instance(selected_method)
            result = method.process(data, context)

            if result["status"] == "success":
                result["metadata"]["selected_method"] = selected_method
                result["metadata"]["algorithm_version"] = __version__
            else:
                logging.warning(f"{self} Method {selected_method} failed: {result['message']}")

            return result

        except Exception as e:
            return self._handle_critical_error(e)

    def select_method(self) -> str:
        """Method name for the configured periods."""
        method = self.config.get("method", DecompositionMethodConfig.AUTO.value)
        if isinstance(method, DecompositionMethodConfig):
            method = method.value

        mstl_keys = [key for key in MSTL_ONLY_KEYS if self.config.get(key) is not None]

        if method == DecompositionMethodConfig.AUTO.value:
            if len(self.periods) == 1 and not mstl_keys:
                return DecompositionMethodConfig.STL.value
            return DecompositionMethodConfig.MSTL.value

        if method not in self.AVAILABLE_METHODS:
            raise ValueError(
                f"Unknown method: {method}. "
                f"Available: {list(self.AVAILABLE_METHODS.keys())}"
            )

        if method == DecompositionMethodConfig.STL.value and len(self.periods) != 1:
            raise ValueError(f"STL requires exactly one period, got {self.periods}")
        if method == DecompositionMethodConfig.STL.value and mstl_keys:
            raise ValueError(f"STL does not support {mstl_keys}, use method 'mstl'")

        return method

    def _get_method_instance(self, method_name: str):
        """Lazy-loading with caching."""
        if method_name not in self._methods:
            method_class = self.AVAILABLE_METHODS[method_name]
            method_config = {
                key: value
                for key, value in self.config.items()
                if key not in ALGORITHM_KEYS
            }
            if method_name == DecompositionMethodConfig.STL.value:
                method_config["period"] = self.periods[0]
            else:
                method_config["periods"] = self.periods

            self._methods[method_name] = method_class(method_config)

        return self._methods[method_name]

    def _handle_critical_error(self, error: Exception) -> Dict[str, Any]:
        """Standardized error handling."""
        error_msg = f"Critical error in {self._class_name}: {str(error)}"
        logging.error(error_msg, exc_info=True)

        return {
            "status": "error",
            "message": error_msg,
            "metadata": {
                "algorithm": self._class_name,
                "error_type": type(error).__name__,
            },
        }
