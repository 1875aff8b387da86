import numpy as np
import pytest

from stlpipeline import StlParameterError, mstl_params, params
from stlpipeline.timeSeriesProcessing.timeSeriesAlgorithms.mstl import (
    default_seasonal_length,
)


def assert_in_delta(expected, actual, delta=1e-3):
    np.testing.assert_allclose(actual[: len(expected)], expected, atol=delta)


def test_works(series):
    result = mstl_params().fit(series, [6, 10])
    assert_in_delta(
        [0.28318232, 0.70529824, -1.980384, 2.1643379, -2.3356874], result.seasonal[0]
    )
    assert_in_delta(
        [1.4130436, 1.6048906, 0.050958008, -1.8706754, -1.7704514], result.seasonal[1]
    )
    assert_in_delta(
        [5.139485, 5.223691, 5.3078976, 5.387292, 5.4666862], result.trend
    )
    assert_in_delta(
        [-1.835711, 1.4661198, -1.3784716, 3.319045, -1.3605475], result.remainder
    )


def test_unsorted_periods(series):
    result = mstl_params().fit(series, [10, 6])
    assert_in_delta(
        [1.4130436, 1.6048906, 0.050958008, -1.8706754, -1.7704514], result.seasonal[0]
    )
    assert_in_delta(
        [0.28318232, 0.70529824, -1.980384, 2.1643379, -2.3356874], result.seasonal[1]
    )
    assert_in_delta(
        [5.139485, 5.223691, 5.3078976, 5.387292, 5.4666862], result.trend
    )
    assert_in_delta(
        [-1.835711, 1.4661198, -1.3784716, 3.319045, -1.3605475], result.remainder
    )


def test_lambda(series):
    result = mstl_params().set_lambda(0.5).fit(series, [6, 10])
    assert_in_delta(
        [0.43371448, 0.10503793, -0.7178911, 1.2356076, -1.8253292], result.seasonal[0]
    )
    assert_in_delta(
        [1.0437742, 0.8650516, 0.07303603, -1.428663, -1.1990008], result.seasonal[1]
    )
    assert_in_delta(
        [2.0748303, 2.1291165, 2.1834028, 2.2330272, 2.2826517], result.trend
    )
    assert_in_delta(
        [-1.0801829, 0.900794, -0.7101207, 1.9600279, -1.2583216], result.remainder
    )


def test_lambda_zero(series):
    shifted = [value + 1.0 for value in series]
    result = mstl_params().set_lambda(0.0).fit(shifted, [6, 10])
    assert_in_delta(
        [0.18727916, 0.029921893, -0.2716494, 0.47748315, -0.7320051],
        result.seasonal[0],
    )
    assert_in_delta(
        [0.42725056, 0.32145387, -0.019030934, -0.56607914, -0.46765903],
        result.seasonal[1],
    )
    assert_in_delta(
        [1.592807, 1.6144379, 1.6360688, 1.6559447, 1.6758206], result.trend
    )
    assert_in_delta(
        [-0.41557717, 0.33677137, -0.24677622, 0.7352363, -0.47615635],
        result.remainder,
    )


def test_lambda_zero_rejects_zero_values(series):
    with pytest.raises(ValueError, match="strictly positive"):
        mstl_params().set_lambda(0.0).fit(series, [6, 10])


def test_lambda_out_of_range(series):
    with pytest.raises(StlParameterError, match="lambda must be between 0 and 1"):
        mstl_params().set_lambda(2.0).fit(series, [6, 10])


def test_empty_periods(series):
    with pytest.raises(StlParameterError, match="periods must not be empty"):
        mstl_params().fit(series, [])


def test_period_one(series):
    with pytest.raises(StlParameterError, match="periods must be at least 2"):
        mstl_params().fit(series, [1])


def test_too_few_periods(series):
    with pytest.raises(StlParameterError, match="series has less than two periods"):
        mstl_params().fit(series, [16])


def test_bad_iterations(series):
    with pytest.raises(StlParameterError, match="iterations must be at least 1"):
        mstl_params().set_iterations(0).fit(series, [6, 10])


def test_fractional_iterations(series):
    with pytest.raises(StlParameterError, match="iterations must be an integer"):
        mstl_params().set_iterations(2.0).fit(series, [6, 10])


def test_fractional_seasonal_lengths(series):
    with pytest.raises(StlParameterError, match="seasonal_lengths must be an integer"):
        mstl_params().set_seasonal_lengths([11.0, 15]).fit(series, [6, 10])


def test_fractional_periods(series):
    with pytest.raises(StlParameterError, match="periods must be an integer"):
        mstl_params().fit(series, [6.5, 10])


def test_seasonal_lengths_mismatch(series):
    with pytest.raises(
        StlParameterError, match="seasonal_lengths must have the same length as periods"
    ):
        mstl_params().set_seasonal_lengths([7]).fit(series, [6, 10])


def test_single_period_matches_stl_strengths(series, seasonal_only_series, trend_only_series):
    stl_params = params().set_seasonal_length(7)

    result = mstl_params().set_stl_params(stl_params).fit(series, [7])
    assert result.seasonal_strength()[0] == pytest.approx(0.284111676315015, abs=1e-3)
    assert result.trend_strength() == pytest.approx(0.16384245231864702, abs=1e-3)

    result = mstl_params().set_stl_params(stl_params).fit(seasonal_only_series, [7])
    assert result.seasonal_strength()[0] == pytest.approx(1.0, abs=1e-3)

    result = mstl_params().set_stl_params(stl_params).fit(trend_only_series, [7])
    assert result.trend_strength() == pytest.approx(1.0, abs=1e-3)


def test_single_period_runs_one_pass(series):
    stl_params = params().set_seasonal_length(7)
    once = mstl_params().set_stl_params(stl_params).set_iterations(1).fit(series, [7])
    many = mstl_params().set_stl_params(stl_params).set_iterations(5).fit(series, [7])
    np.testing.assert_array_equal(once.trend, many.trend)
    np.testing.assert_array_equal(once.seasonal[0], many.seasonal[0])


@pytest.mark.parametrize("periods", [[6, 10], [10, 6], [6], [3, 5, 7]])
def test_components_reconstruct_series(series, periods):
    result = mstl_params().fit(series, periods)
    reconstruction = np.sum(result.seasonal, axis=0) + result.trend + result.remainder
    np.testing.assert_allclose(reconstruction, series, atol=1e-4)


def test_components_reconstruct_transformed_series(series):
    result = mstl_params().set_lambda(0.5).fit(series, [6, 10])
    transformed = (np.sqrt(np.array(series)) - 1.0) / 0.5
    reconstruction = np.sum(result.seasonal, axis=0) + result.trend + result.remainder
    np.testing.assert_allclose(reconstruction, transformed, atol=1e-4)


def test_one_seasonal_component_per_period(series):
    result = mstl_params().fit(series, [3, 5, 7])
    assert len(result.seasonal) == 3
    assert len(result.seasonal_strength()) == 3


def test_explicit_seasonal_lengths_follow_caller_order(series):
    sorted_result = mstl_params().set_seasonal_lengths([11, 15]).fit(series, [6, 10])
    swapped_result = mstl_params().set_seasonal_lengths([15, 11]).fit(series, [10, 6])
    np.testing.assert_allclose(sorted_result.seasonal[0], swapped_result.seasonal[1])
    np.testing.assert_allclose(sorted_result.trend, swapped_result.trend)


def test_default_windows_match_explicit_defaults(series):
    derived = mstl_params().fit(series, [6, 10])
    explicit = mstl_params().set_seasonal_lengths(
        [default_seasonal_length(0), default_seasonal_length(1)]
    ).fit(series, [6, 10])
    np.testing.assert_allclose(derived.trend, explicit.trend)


def test_default_seasonal_length():
    assert default_seasonal_length(0) == 11
    assert default_seasonal_length(1) == 15


def test_multiple_seasonality_is_recovered(long_series):
    result = mstl_params().fit(long_series, [12, 30])
    strengths = result.seasonal_strength()
    assert strengths[0] > 0.8
    assert strengths[1] > 0.5
    assert result.trend_strength() > 0.5


def test_to_frame_columns(series):
    frame = mstl_params().fit(series, [6, 10]).to_frame(periods=[6, 10])
    assert list(frame.columns) == ["seasonal_6", "seasonal_10", "trend", "remainder"]


def test_to_frame_repeated_period(series):
    frame = mstl_params().fit(series, [6, 6]).to_frame(periods=[6, 6])
    assert list(frame.columns) == ["seasonal_6", "seasonal_6_1", "trend", "remainder"]


def test_to_frame_label_mismatch(series):
    result = mstl_params().fit(series, [6, 10])
    with pytest.raises(ValueError, match="one entry per seasonal component"):
        result.to_frame(periods=[6])
