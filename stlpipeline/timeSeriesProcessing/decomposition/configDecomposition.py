"""
Configurations for STL and MSTL decomposition.

StlParams and MstlParams are fluent builders: every setter returns the builder,
unset parameters stay None and are derived from the period when fit() runs.
Derivation follows Cleveland et al. (1990):

    seasonal_length  = period                                (forced odd, >= 3)
    trend_length     = ceil(1.5 * period / (1 - 1.5 / ns))   (forced odd, >= 3)
    low_pass_length  = period                                (forced odd)
    inner_loops      = 1 if robust else 2
    outer_loops      = 15 if robust else 0
    *_jump           = ceil(window / 10)

Only derived windows are corrected. Explicit windows that are even or
shorter than 3 are rejected.
"""

import logging
import math
import operator
import time
from dataclasses import asdict, dataclass
from typing import Any, List, Optional, Sequence

import numpy as np

from stlpipeline.helpers.configs import PERFORMANCE_LOG_THRESHOLD, MstlResult, StlResult
from stlpipeline.helpers.setup import ConfigurationBuilder
from stlpipeline.helpers.utils import to_float_array
from stlpipeline.timeSeriesProcessing.timeSeriesAlgorithms.mstl import mstl
from stlpipeline.timeSeriesProcessing.timeSeriesAlgorithms.stl import stl

__version__ = "1.0.0"


# Validation constants
MIN_PERIOD = 2
MIN_WINDOW_LENGTH = 3
VALID_DEGREES = (0, 1)
MIN_LAMBDA = 0.0
MAX_LAMBDA = 1.0

# Defaults from the reference STL implementation
DEFAULT_SEASONAL_DEGREE = 0
DEFAULT_TREND_DEGREE = 1
DEFAULT_MSTL_ITERATIONS = 2
ROBUST_INNER_LOOPS = 1
ROBUST_OUTER_LOOPS = 15
NON_ROBUST_INNER_LOOPS = 2
NON_ROBUST_OUTER_LOOPS = 0
JUMP_DIVISOR = 10.0


class StlParameterError(ValueError):
    """Invalid STL/MSTL configuration or input series."""


@dataclass(frozen=True)
class StlConfig:
    """Fully derived STL configuration, as passed to the engine."""

    period: int
    seasonal_length: int
    trend_length: int
    low_pass_length: int
    seasonal_degree: int
    trend_degree: int
    low_pass_degree: int
    seasonal_jump: int
    trend_jump: int
    low_pass_jump: int
    inner_loops: int
    outer_loops: int


def _next_odd(value: int) -> int:
    return value + 1 if value % 2 == 0 else value


def _as_integer(name: str, value: Any) -> Optional[int]:
    """value as a Python int; floats are rejected rather than truncated."""
    if value is None:
        return None
    try:
        return operator.index(value)
    except TypeError:
        raise StlParameterError(f"{name} must be an integer") from None


def _validate_window(name: str, value: Optional[int]) -> None:
    if value is None:
        return
    if value < MIN_WINDOW_LENGTH:
        raise StlParameterError(f"{name} must be at least {MIN_WINDOW_LENGTH}")
    if value % 2 != 1:
        raise StlParameterError(f"{name} must be odd")


def _validate_degree(name: str, value: Optional[int]) -> None:
    if value is not None and value not in VALID_DEGREES:
        raise StlParameterError(f"{name} must be 0 or 1")


def _validate_positive(name: str, value: Optional[int]) -> None:
    if value is not None and value < 1:
        raise StlParameterError(f"{name} must be at least 1")


def _prepare_series(series: Any) -> np.ndarray:
    try:
        y = to_float_array(series)
    except (TypeError, ValueError) as e:
        raise StlParameterError(str(e)) from e
    if not np.all(np.isfinite(y)):
        raise StlParameterError("series contains non-finite values")
    return y


class StlParams(ConfigurationBuilder):
    """
    STL configuration builder.

    Usage:
        result = StlParams().set_robust(True).fit(series, period=7)
    """

    FIELDS = {
        "seasonal_length": None,
        "trend_length": None,
        "low_pass_length": None,
        "seasonal_degree": DEFAULT_SEASONAL_DEGREE,
        "trend_degree": DEFAULT_TREND_DEGREE,
        "low_pass_degree": None,
        "seasonal_jump": None,
        "trend_jump": None,
        "low_pass_jump": None,
        "inner_loops": None,
        "outer_loops": None,
        "robust": False,
    }

    def set_seasonal_length(self, seasonal_length: int):
        return self._set("seasonal_length", seasonal_length)

    def set_trend_length(self, trend_length: int):
        return self._set("trend_length", trend_length)

    def set_low_pass_length(self, low_pass_length: int):
        return self._set("low_pass_length", low_pass_length)

    def set_seasonal_degree(self, seasonal_degree: int):
        return self._set("seasonal_degree", seasonal_degree)

    def set_trend_degree(self, trend_degree: int):
        return self._set("trend_degree", trend_degree)

    def set_low_pass_degree(self, low_pass_degree: int):
        return self._set("low_pass_degree", low_pass_degree)

    def set_seasonal_jump(self, seasonal_jump: int):
        return self._set("seasonal_jump", seasonal_jump)

    def set_trend_jump(self, trend_jump: int):
        return self._set("trend_jump", trend_jump)

    def set_low_pass_jump(self, low_pass_jump: int):
        return self._set("low_pass_jump", low_pass_jump)

    def set_inner_loops(self, inner_loops: int):
        return self._set("inner_loops", inner_loops)

    def set_outer_loops(self, outer_loops: int):
        return self._set("outer_loops", outer_loops)

    def set_robust(self, robust: bool = True):
        return self._set("robust", bool(robust))

    def derive(self, n: int, period: int) -> StlConfig:
        """
        Validate the configuration against a series length and fill in every
        unset parameter.

        Raises:
            StlParameterError: If any parameter or the series length is invalid
        """
        period = _as_integer("period", period)
        if period < MIN_PERIOD:
            raise StlParameterError(f"period must be at least {MIN_PERIOD}")
        if n < 2 * period:
            raise StlParameterError("series has less than two periods")

        values = {
            name: _as_integer(name, getattr(self, name))
            for name in self.FIELDS
            if name != "robust"
        }

        _validate_window("seasonal_length", values["seasonal_length"])
        _validate_window("trend_length", values["trend_length"])
        _validate_window("low_pass_length", values["low_pass_length"])
        _validate_degree("seasonal_degree", values["seasonal_degree"])
        _validate_degree("trend_degree", values["trend_degree"])
        _validate_degree("low_pass_degree", values["low_pass_degree"])
        _validate_positive("seasonal_jump", values["seasonal_jump"])
        _validate_positive("trend_jump", values["trend_jump"])
        _validate_positive("low_pass_jump", values["low_pass_jump"])
        _validate_positive("inner_loops", values["inner_loops"])
        if values["outer_loops"] is not None and values["outer_loops"] < 0:
            raise StlParameterError("outer_loops must not be negative")

        ns = values["seasonal_length"] if values["seasonal_length"] is not None else period
        ns = _next_odd(max(ns, MIN_WINDOW_LENGTH))

        nt = values["trend_length"]
        if nt is None:
            nt = math.ceil((1.5 * period) / (1.0 - 1.5 / ns))
            nt = _next_odd(max(nt, MIN_WINDOW_LENGTH))

        nl = values["low_pass_length"]
        if nl is None:
            nl = _next_odd(period)

        trend_degree = values["trend_degree"]
        low_pass_degree = (
            values["low_pass_degree"] if values["low_pass_degree"] is not None else trend_degree
        )

        if self.robust:
            ni_default, no_default = ROBUST_INNER_LOOPS, ROBUST_OUTER_LOOPS
        else:
            ni_default, no_default = NON_ROBUST_INNER_LOOPS, NON_ROBUST_OUTER_LOOPS

        return StlConfig(
            period=period,
            seasonal_length=ns,
            trend_length=nt,
            low_pass_length=nl,
            seasonal_degree=values["seasonal_degree"],
            trend_degree=trend_degree,
            low_pass_degree=low_pass_degree,
            seasonal_jump=values["seasonal_jump"] or math.ceil(ns / JUMP_DIVISOR),
            trend_jump=values["trend_jump"] or math.ceil(nt / JUMP_DIVISOR),
            low_pass_jump=values["low_pass_jump"] or math.ceil(nl / JUMP_DIVISOR),
            inner_loops=values["inner_loops"] if values["inner_loops"] is not None else ni_default,
            outer_loops=values["outer_loops"] if values["outer_loops"] is not None else no_default,
        )

    def fit(self, series: Any, period: int) -> StlResult:
        """
        Decompose series into seasonal, trend and remainder components.

        Args:
            series: Equally spaced observations without missing values
            period: Number of observations per seasonal cycle

        Returns:
            StlResult with arrays of the same length as series

        Raises:
            StlParameterError: If the configuration or series is invalid
        """
        y = _prepare_series(series)
        n = len(y)
        config = self.derive(n, period)
        logging.debug(f"{self} - Derived configuration: {asdict(config)}")

        weights = np.zeros(n)
        seasonal = np.zeros(n)
        trend = np.zeros(n)

        start_time = time.time()
        stl(
            y, n, config.period,
            config.seasonal_length, config.trend_length, config.low_pass_length,
            config.seasonal_degree, config.trend_degree, config.low_pass_degree,
            config.seasonal_jump, config.trend_jump, config.low_pass_jump,
            config.inner_loops, config.outer_loops,
            weights, seasonal, trend,
        )
        execution_time = time.time() - start_time

        if execution_time > PERFORMANCE_LOG_THRESHOLD:
            logging.info(f"{self} - STL executed in {execution_time:.3f}s for n={n}")
        else:
            logging.debug(f"{self} - STL executed in {execution_time:.3f}s for n={n}")

        remainder = y - seasonal - trend

        return StlResult(seasonal=seasonal, trend=trend, remainder=remainder, weights=weights)


class MstlParams(ConfigurationBuilder):
    """
    MSTL configuration builder.

    Usage:
        result = MstlParams().set_lambda(0.5).fit(series, periods=[24, 168])
    """

    FIELDS = {
        "iterations": DEFAULT_MSTL_ITERATIONS,
        "lmbda": None,
        "seasonal_lengths": None,
        "stl_params": None,
    }

    def __init__(self):
        super().__init__()
        self.stl_params = StlParams()

    def set_iterations(self, iterations: int):
        return self._set("iterations", iterations)

    def set_lambda(self, lmbda: float):
        return self._set("lmbda", lmbda)

    def set_seasonal_lengths(self, seasonal_lengths: Sequence[int]):
        return self._set("seasonal_lengths", list(seasonal_lengths))

    def set_stl_params(self, stl_params: StlParams):
        return self._set("stl_params", stl_params.copy())

    def validate(self, n: int, periods: Sequence[int]) -> None:
        """
        Check the configuration against a series length and period list.

        Raises:
            StlParameterError: If any check fails
        """
        if len(periods) == 0:
            raise StlParameterError("periods must not be empty")

        for period in periods:
            if period < MIN_PERIOD:
                raise StlParameterError(f"periods must be at least {MIN_PERIOD}")
            if n < 2 * period:
                raise StlParameterError("series has less than two periods")

        iterations = _as_integer("iterations", self.iterations)
        if iterations < 1:
            raise StlParameterError("iterations must be at least 1")

        if self.lmbda is not None and not MIN_LAMBDA <= self.lmbda <= MAX_LAMBDA:
            raise StlParameterError("lambda must be between 0 and 1")

        if self.seasonal_lengths is not None and len(self.seasonal_lengths) != len(periods):
            raise StlParameterError(
                "seasonal_lengths must have the same length as periods"
            )
        for seasonal_length in self.seasonal_lengths or []:
            _as_integer("seasonal_lengths", seasonal_length)

    def fit(self, series: Any, periods: Sequence[int]) -> MstlResult:
        """
        Decompose series into one seasonal component per period, a trend and a
        remainder.

        Periods may be given in any order and may repeat; seasonal components
        are returned in the same order. With a Box-Cox lambda all components
        are in transformed units.

        Raises:
            StlParameterError: If the configuration or series is invalid
            ValueError: If the Box-Cox transform meets a non-positive value
        """
        y = _prepare_series(series)
        periods = [_as_integer("periods", period) for period in periods]
        self.validate(len(y), periods)

        logging.debug(
            f"{self} - Starting MSTL decomposition: length={len(y)}, periods={periods}"
        )

        start_time = time.time()
        seasonal, trend, remainder = mstl(
            y,
            periods,
            self.iterations,
            self.lmbda,
            self.seasonal_lengths,
            self.stl_params,
        )
        execution_time = time.time() - start_time

        if execution_time > PERFORMANCE_LOG_THRESHOLD:
            logging.info(
                f"{self} - MSTL executed in {execution_time:.3f}s "
                f"for {len(periods)} periods: {periods}"
            )
        else:
            logging.debug(
                f"{self} - MSTL executed in {execution_time:.3f}s for {len(periods)} periods"
            )

        return MstlResult(seasonal=seasonal, trend=trend, remainder=remainder)


def params() -> StlParams:
    return StlParams()


def mstl_params() -> MstlParams:
    return MstlParams()
