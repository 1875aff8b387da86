import numpy as np
import pytest

from stlpipeline import params
from stlpipeline.helpers.configs import QualityMetricConfig
from stlpipeline.helpers.evaluation.qualityEvaluator import QualityEvaluator
from stlpipeline.helpers.utils import sample_variance, strength


@pytest.fixture
def evaluator():
    return QualityEvaluator()


def test_strength_matches_stl_result(series):
    result = params().fit(series, 7)
    assert strength(result.seasonal, result.remainder) == pytest.approx(
        result.seasonal_strength()
    )


def test_strength_zero_remainder_variance():
    assert strength(np.array([1.0, 2.0, 3.0]), np.zeros(3)) == 1.0


def test_strength_zero_combined_variance():
    remainder = np.array([1.0, -1.0, 1.0])
    assert strength(-remainder, remainder) == 0.0


def test_strength_is_clamped_at_zero():
    remainder = np.array([1.0, -1.0, 1.0, -1.0])
    component = np.array([-0.9, 0.9, -0.9, 0.9])
    assert strength(component, remainder) == 0.0


def test_sample_variance():
    assert sample_variance(np.array([1.0, 2.0, 3.0, 4.0])) == pytest.approx(5.0 / 3.0)


def test_evaluate_decomposition(evaluator, series):
    result = params().fit(series, 7)
    scores = evaluator.evaluate_decomposition(
        series, result.trend, result.seasonal, result.remainder
    )
    assert scores["mse"] == pytest.approx(0.0, abs=1e-8)
    assert scores["mae"] == pytest.approx(0.0, abs=1e-4)
    assert scores["seasonal_strength"] == pytest.approx(0.284111676315015, abs=1e-3)
    assert scores["trend_strength"] == pytest.approx(0.16384245231864702, abs=1e-3)
    assert 0.0 <= scores["residual_autocorr"] <= 1.0
    assert 0.0 <= scores["residual_normality"] <= 1.0
    assert 0.0 <= scores["composite_score"] <= 1.0


def test_selected_metrics(evaluator, series):
    result = params().fit(series, 7)
    scores = evaluator.evaluate_decomposition(
        series,
        result.trend,
        result.seasonal,
        result.remainder,
        metrics=[QualityMetricConfig.MSE],
    )
    assert set(scores) == {"mse", "composite_score"}
    assert scores["composite_score"] == pytest.approx(1.0)


def test_short_residual_is_neutral(evaluator):
    assert evaluator._test_residual_autocorrelation(np.array([1.0, -1.0, 0.5])) == 0.5
    assert evaluator._test_residual_normality(np.zeros(20)) == 0.5


def test_missing_component_raises(evaluator, series):
    with pytest.raises(ValueError, match="Required parameters missing"):
        evaluator.evaluate_decomposition(series, None, series, series)


def test_custom_weights(series):
    evaluator = QualityEvaluator({QualityMetricConfig.TREND_STRENGTH: 1.0})
    result = params().fit(series, 7)
    scores = evaluator.evaluate_decomposition(
        series, result.trend, result.seasonal, result.remainder
    )
    assert scores["composite_score"] == pytest.approx(scores["trend_strength"])


def test_quality_summary(evaluator):
    summary = evaluator.get_quality_summary(
        {"composite_score": 0.85, "seasonal_strength": 0.9, "trend_strength": 0.4}
    )
    assert summary == "Quality: excellent (score: 0.850), seasonality: 0.900, trend: 0.400"
