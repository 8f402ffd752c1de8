"""Shared fixtures for the resmap test suite.

Parameter sets use small, hand-checkable coefficient arrays so expected
retention factors can be written down directly in the tests.
"""

import pytest

from resmap_engine import (
    BilinearPolynomial,
    LinearPolynomial,
    ParameterSet,
    TrilinearPolynomial,
    VariableType,
)


@pytest.fixture
def linear_polynomial():
    """ln k = a*tG + b for three components on a gradient-time axis."""
    return LinearPolynomial(a=[0.01, 0.02, 0.03], b=[0.0, -0.4, -1.2])


@pytest.fixture
def linear_params(linear_polynomial):
    return ParameterSet(
        polynomial=linear_polynomial,
        dead_time_experimental=1.5,
        plate_number=10000,
    )


@pytest.fixture
def bilinear_polynomial():
    """Gradient time (x) by temperature (y), four components."""
    return BilinearPolynomial(
        aa=[2.0, -1.5, 0.5, 3.0],
        ab=[0.01, 0.03, 0.02, 0.015],
        ba=[900.0, 1200.0, 1000.0, 1100.0],
        b=[-3.0, -4.5, -3.2, -3.6],
    )


@pytest.fixture
def bilinear_params(bilinear_polynomial):
    return ParameterSet(
        polynomial=bilinear_polynomial,
        dead_time_experimental=1.2,
        plate_number=20000,
        variable_type_x=VariableType.GRADIENT_TIME,
        variable_type_y=VariableType.TEMPERATURE,
    )


@pytest.fixture
def trilinear_params():
    poly = TrilinearPolynomial(
        aaa=[0.0001, -0.0002, 0.0003],
        aab=[0.5, 1.0, -0.5],
        baa=[0.0002, 0.0001, -0.0001],
        bab=[0.01, 0.02, 0.03],
        aba=[-1.0, 2.0, 1.5],
        abb=[900.0, 1000.0, 1100.0],
        bba=[-0.01, -0.02, -0.015],
        b=[-2.0, -3.0, -3.5],
    )
    return ParameterSet(
        polynomial=poly,
        dead_time_experimental=1.0,
        plate_number=15000,
        variable_type_x=VariableType.GRADIENT_TIME,
        variable_type_y=VariableType.TEMPERATURE,
        variable_type_z=VariableType.PERCENT_B,
    )
