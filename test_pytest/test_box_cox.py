import numpy as np
import pandas as pd
import pytest

from stlpipeline.helpers.boxCoxTransformer import BoxCoxTransformer


@pytest.fixture
def transformer():
    return BoxCoxTransformer()


def test_log_branch_below_threshold(transformer):
    data = np.array([1.0, np.e, np.e ** 2])
    np.testing.assert_allclose(transformer.transform(data, lambda_value=0.0), [0.0, 1.0, 2.0])
    np.testing.assert_allclose(
        transformer.transform(data, lambda_value=5e-5), np.log(data)
    )


def test_power_branch(transformer):
    data = np.array([1.0, 4.0, 9.0])
    np.testing.assert_allclose(transformer.transform(data, lambda_value=0.5), [0.0, 2.0, 4.0])


def test_zero_allowed_for_positive_lambda(transformer):
    assert transformer.transform(np.array([0.0]), lambda_value=0.5)[0] == pytest.approx(-2.0)


def test_zero_rejected_for_log(transformer):
    with pytest.raises(ValueError, match="strictly positive"):
        transformer.transform(np.array([0.0, 1.0]), lambda_value=0.0)


def test_negative_rejected(transformer):
    with pytest.raises(ValueError, match="non-negative"):
        transformer.transform(np.array([-1.0, 1.0]), lambda_value=0.5)


def test_nan_rejected(transformer):
    with pytest.raises(ValueError, match="NaN"):
        transformer.transform(np.array([np.nan, 1.0]), lambda_value=0.5)


def test_lambda_required_when_not_fitted(transformer):
    with pytest.raises(ValueError, match="not fitted"):
        transformer.transform(np.array([1.0, 2.0]))


@pytest.mark.parametrize("lmbda", [0.0, 0.25, 1.0])
def test_inverse(transformer, lmbda):
    data = np.array([0.5, 1.0, 3.0, 10.0])
    transformed = transformer.transform(data, lambda_value=lmbda)
    np.testing.assert_allclose(
        transformer.inverse_transform(transformed, lambda_value=lmbda), data
    )


def test_inverse_outside_domain_is_nan(transformer):
    result = transformer.inverse_transform(np.array([-10.0]), lambda_value=0.3)
    assert np.isnan(result[0])


def test_keeps_pandas_index(transformer):
    data = pd.Series([1.0, 4.0], index=["a", "b"], name="value")
    result = transformer.transform(data, lambda_value=0.5)
    assert isinstance(result, pd.Series)
    assert list(result.index) == ["a", "b"]
    assert result.name == "value"


def test_fit_clips_to_range():
    rng = np.random.default_rng(1)
    data = np.exp(rng.normal(size=200))
    transformer = BoxCoxTransformer(lambda_range=(0.2, 0.8))
    assert 0.2 <= transformer.fit(data) <= 0.8


def test_fit_transform_uses_fitted_lambda(transformer):
    rng = np.random.default_rng(2)
    data = rng.uniform(1.0, 5.0, size=100)
    transformed, lmbda = transformer.fit_transform(data)
    np.testing.assert_allclose(transformed, transformer.transform(data, lambda_value=lmbda))
    np.testing.assert_allclose(transformer.transform(data), transformed)
