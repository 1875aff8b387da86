"""
Quality evaluation for time series decompositions.

Reconstruction error, component strength, and residual diagnostics
(autocorrelation and normality) combined into a weighted composite score.
"""

import logging
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd
from scipy.stats import jarque_bera
from statsmodels.stats.diagnostic import acorr_ljungbox

from stlpipeline.helpers.configs import QualityMetricConfig
from stlpipeline.helpers.utils import strength, validate_required_locals

__version__ = "3.0.0"

# Residual diagnostics need at least this many points
MIN_RESIDUAL_LENGTH = 10
MAX_LJUNG_BOX_LAGS = 10
NEUTRAL_PVALUE = 0.5  # Returned when a diagnostic cannot be computed

ArrayLike = Union[pd.Series, np.ndarray]


class QualityEvaluator:
    """
    Decomposition quality evaluation.

    Strength follows Wang, Smith & Hyndman (2006):
        strength = max(0, 1 - Var(remainder) / Var(component + remainder))
    """

    # Lower = better for negative weights
    WEIGHT_CONFIG = {
        QualityMetricConfig.MSE: -0.3,
        QualityMetricConfig.MAE: -0.3,
        QualityMetricConfig.RESIDUAL_AUTOCORR: 0.2,
        QualityMetricConfig.RESIDUAL_NORMALITY: 0.1,
        QualityMetricConfig.SEASONAL_STRENGTH: 0.1,
        QualityMetricConfig.TREND_STRENGTH: 0.1,
    }

    DEFAULT_METRICS = [
        QualityMetricConfig.MSE,
        QualityMetricConfig.MAE,
        QualityMetricConfig.SEASONAL_STRENGTH,
        QualityMetricConfig.TREND_STRENGTH,
        QualityMetricConfig.RESIDUAL_AUTOCORR,
        QualityMetricConfig.RESIDUAL_NORMALITY,
    ]

    def __init__(
        self, custom_weights: Optional[Dict[QualityMetricConfig, float]] = None
    ):
        self.metric_weights = custom_weights or self.WEIGHT_CONFIG

    def __str__(self) -> str:
        """Standard string representation for logging."""
        return f"QualityEvaluator(metrics={len(self.metric_weights)})"

    def evaluate_decomposition(
        self,
        original: ArrayLike,
        trend: ArrayLike,
        seasonal: ArrayLike,
        residual: ArrayLike,
        metrics: Optional[List[QualityMetricConfig]] = None,
    ) -> Dict[str, float]:
        """
        Decomposition quality evaluation.

        Args:
            original: Original time series
            trend: Trend component
            seasonal: Seasonal component (sum of all seasonal components for MSTL)
            residual: Residual component
            metrics: List of metrics to compute

        Returns:
            Dictionary metric name -> score, plus composite_score
        """
        validate_required_locals(
            ["original", "trend", "seasonal", "residual"], locals()
        )

        original, trend, seasonal, residual = (
            np.asarray(component, dtype=np.float64)
            for component in (original, trend, seasonal, residual)
        )
        reconstructed = trend + seasonal + residual

        scores = {}
        for metric in metrics or self.DEFAULT_METRICS:
            try:
                scores[metric.value] = self._calculate_metric(
                    metric, original, reconstructed, trend, seasonal, residual
                )
            except Exception as e:
                logging.warning(f"{self} - Error computing {metric.value}: {e}")
                scores[metric.value] = 0.0

        scores["composite_score"] = self._calculate_composite_score(scores)

        return scores

    def calculate_mse(self, actual: np.ndarray, predicted: np.ndarray) -> float:
        """Mean Squared Error (MSE)."""
        return float(np.mean((actual - predicted) ** 2))

    def calculate_mae(self, actual: np.ndarray, predicted: np.ndarray) -> float:
        """Mean Absolute Error (MAE)."""
        return float(np.mean(np.abs(actual - predicted)))

    def _calculate_metric(
        self,
        metric: QualityMetricConfig,
        original: np.ndarray,
        reconstructed: np.ndarray,
        trend: np.ndarray,
        seasonal: np.ndarray,
        residual: np.ndarray,
    ) -> float:
        if metric == QualityMetricConfig.MSE:
            return self.calculate_mse(original, reconstructed)
        elif metric == QualityMetricConfig.MAE:
            return self.calculate_mae(original, reconstructed)
        elif metric == QualityMetricConfig.SEASONAL_STRENGTH:
            return strength(seasonal, residual)
        elif metric == QualityMetricConfig.TREND_STRENGTH:
            return strength(trend, residual)
        elif metric == QualityMetricConfig.RESIDUAL_AUTOCORR:
            return self._test_residual_autocorrelation(residual)
        elif metric == QualityMetricConfig.RESIDUAL_NORMALITY:
            return self._test_residual_normality(residual)
        else:
            raise ValueError(f"Unknown metric: {metric}")

    def _test_residual_autocorrelation(self, residual: np.ndarray) -> float:
        """
        Minimum Ljung-Box p-value of the residuals.

        High value (close to 1) means no autocorrelation left in the remainder.
        """
        if len(residual) < MIN_RESIDUAL_LENGTH or np.var(residual) == 0:
            return NEUTRAL_PVALUE

        lags = min(MAX_LJUNG_BOX_LAGS, len(residual) // 4)
        lb_result = acorr_ljungbox(residual, lags=lags, return_df=True)
        return float(lb_result["lb_pvalue"].min())

    def _test_residual_normality(self, residual: np.ndarray) -> float:
        """Jarque-Bera p-value of the residuals."""
        if len(residual) < MIN_RESIDUAL_LENGTH or np.var(residual) == 0:
            return NEUTRAL_PVALUE

        _, jb_pvalue = jarque_bera(residual)
        return float(min(1.0, max(0.0, jb_pvalue)))

    def _calculate_composite_score(self, scores: Dict[str, float]) -> float:
        """
        Weighted composite quality score normalized to [0, 1].
        """
        weighted_score = 0.0
        total_weight = 0.0

        for metric, weight in self.metric_weights.items():
            if metric.value not in scores:
                continue

            score = scores[metric.value]
            if weight < 0:
                weighted_score += abs(weight) / (1.0 + score)
            else:
                weighted_score += weight * score
            total_weight += abs(weight)

        if total_weight == 0:
            return NEUTRAL_PVALUE

        composite = weighted_score / total_weight
        return float(min(1.0, max(0.0, composite)))

    def get_quality_summary(self, scores: Dict[str, float]) -> str:
        """Text description of the composite quality and component strengths."""
        composite = scores.get("composite_score", 0.0)

        if composite >= 0.8:
            quality = "excellent"
        elif composite >= 0.6:
            quality = "good"
        elif composite >= 0.4:
            quality = "fair"
        elif composite >= 0.2:
            quality = "poor"
        else:
            quality = "very poor"

        summary = f"Quality: {quality} (score: {composite:.3f})"

        if "seasonal_strength" in scores:
            summary += f", seasonality: {scores['seasonal_strength']:.3f}"
        if "trend_strength" in scores:
            summary += f", trend: {scores['trend_strength']:.3f}"

        return summary
