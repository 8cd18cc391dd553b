import pytest
from hypothesis import given
from hypothesis import strategies as st

from pcdm_modelling.parameters import (
    DEPTH_MESSAGE,
    POTENCY_SIGN_MESSAGE,
    Parameters,
    PointCDMParameters,
)

finite_floats = st.floats(-1e3, 1e3, allow_nan=False, allow_infinity=False)


def test_mixed_potency_signs_are_invalid():
    """Potencies with different signs are rejected with a message."""
    parameters = PointCDMParameters(depth=1.0, dv=(1, -1, 0))
    assert not parameters.is_valid()
    assert parameters.validate() == POTENCY_SIGN_MESSAGE


@pytest.mark.parametrize("dv", [(1, 1, 1), (0, 0, 0), (-1, -2, 0), (0, 3, 0)])
def test_consistent_potency_signs_are_valid(dv: tuple[float, float, float]):
    parameters = PointCDMParameters(depth=1.0, dv=dv)
    assert parameters.is_valid()
    assert parameters.validate() == ""


def test_negative_depth_is_invalid():
    parameters = PointCDMParameters(depth=-0.001)
    assert not parameters.is_valid()
    assert parameters.validate() == DEPTH_MESSAGE


def test_zero_depth_is_valid():
    assert PointCDMParameters(depth=0).is_valid()


def test_potency_sign_checked_before_depth():
    """When both rules fail the potency message is reported."""
    parameters = PointCDMParameters(depth=-1.0, dv=(1, -1, 1))
    assert parameters.validate() == POTENCY_SIGN_MESSAGE


@given(
    dv=st.tuples(finite_floats, finite_floats, finite_floats),
    depth=finite_floats,
)
def test_validity_predicate(dv: tuple[float, float, float], depth: float):
    """Parameters are valid exactly when potencies share a sign and depth >= 0."""
    same_sign = all(v >= 0 for v in dv) or all(v <= 0 for v in dv)
    parameters = PointCDMParameters(depth=depth, dv=dv)
    assert parameters.is_valid() == (same_sign and depth >= 0)
    assert bool(parameters.validate()) != parameters.is_valid()


def test_fields_are_converted_to_float_tuples():
    parameters = PointCDMParameters(
        horizontal_coord=[1, 2], depth=3, omega=[4, 5, 6], dv=[7, 8, 9]
    )
    assert parameters.horizontal_coord == (1.0, 2.0)
    assert parameters.omega == (4.0, 5.0, 6.0)
    assert parameters.dv == (7.0, 8.0, 9.0)
    assert isinstance(parameters.depth, float)
    assert parameters.total_potency == pytest.approx(24.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"horizontal_coord": (1.0, 2.0, 3.0)},
        {"omega": (1.0, 2.0)},
        {"dv": (1.0,)},
    ],
)
def test_wrong_field_sizes_raise(kwargs: dict):
    with pytest.raises(ValueError):
        PointCDMParameters(**kwargs)


def test_parameter_equality():
    a = Parameters(
        PointCDMParameters(
            horizontal_coord=(0.5, -0.25),
            depth=2.75,
            omega=(5, -8, 30),
            dv=(0.00144, 0.00128, 0.00072),
        ),
        nu=0.25,
    )
    b = Parameters(
        PointCDMParameters(
            horizontal_coord=(0.5, -0.25),
            depth=2.75 * (1 + 1e-15),
            omega=(5, -8, 30),
            dv=(0.00144, 0.00128, 0.00072),
        ),
        nu=0.25,
    )
    assert a == b
    assert a != Parameters(a.source_parameters, nu=0.3)
    assert a.source_parameters != PointCDMParameters(
        horizontal_coord=(0.5, -0.25),
        depth=2.75,
        omega=(5, -8, 31),
        dv=(0.00144, 0.00128, 0.00072),
    )
    assert PointCDMParameters() == PointCDMParameters(depth=0.0)


def test_equality_with_other_types():
    assert PointCDMParameters() != (0, 0)
    assert Parameters() != PointCDMParameters()


def test_parameters_are_not_hashable():
    """Tolerance based equality has no consistent hash."""
    with pytest.raises(TypeError):
        hash(PointCDMParameters())
    with pytest.raises(TypeError):
        hash(Parameters())
