"""Tests for two-point linearisation and corner-based model calibration."""

import numpy as np
import pytest

from resmap_engine import (
    ArrayLengthMismatch,
    BilinearPolynomial,
    DegenerateFit,
    ExperimentalData,
    InvalidParameter,
    LinearPolynomial,
    TrilinearPolynomial,
    VariableType,
    calibrate_from_experiments,
    compute_retention_factors,
    fit_bilinear,
    fit_linear,
    fit_trilinear,
    log_retention_factors,
    transform_variable,
)


class TestFitLinear:

    def test_round_trip_temperature(self):
        v1 = np.array([1.2, 0.4, -0.3])
        v2 = np.array([0.8, 0.1, -0.9])
        fit = fit_linear(VariableType.TEMPERATURE, 30.0, 60.0, v1, v2)
        t1 = transform_variable(30.0, VariableType.TEMPERATURE)
        t2 = transform_variable(60.0, VariableType.TEMPERATURE)
        np.testing.assert_allclose(fit.a * t1 + fit.b, v1)
        np.testing.assert_allclose(fit.a * t2 + fit.b, v2)

    def test_linear_axis_slope_and_intercept(self):
        fit = fit_linear(VariableType.GRADIENT_TIME, 20.0, 60.0, [3.0], [1.0])
        assert fit.a[0] == pytest.approx(-0.05)
        assert fit.b[0] == pytest.approx(4.0)

    def test_ph_uses_component_pka(self):
        pka = np.array([4.0, 6.5])
        fit = fit_linear(VariableType.PH, 3.0, 7.0, [2.0, 1.5], [0.5, 1.0], pka=pka)
        t1 = transform_variable(3.0, VariableType.PH, pka)
        t2 = transform_variable(7.0, VariableType.PH, pka)
        np.testing.assert_allclose(fit.a * t1 + fit.b, [2.0, 1.5])
        np.testing.assert_allclose(fit.a * t2 + fit.b, [0.5, 1.0])

    def test_equal_ranges_are_degenerate(self):
        with pytest.raises(DegenerateFit) as exc:
            fit_linear(VariableType.GRADIENT_TIME, 40.0, 40.0, [1.0, 2.0], [2.0, 3.0])
        assert exc.value.component == 0

    def test_degenerate_never_returns_infinity(self):
        with pytest.raises(DegenerateFit):
            fit_linear(3, 10.0, 10.0, [1.0], [1.0])

    def test_absolute_zero_range_is_invalid(self):
        with pytest.raises(InvalidParameter):
            fit_linear(VariableType.TEMPERATURE, -273.15, 25.0, [1.0], [2.0])

    def test_value_lengths_checked(self):
        with pytest.raises(ArrayLengthMismatch):
            fit_linear(VariableType.PERCENT_B, 10.0, 50.0, [1.0, 2.0], [1.0])

    def test_pka_length_checked(self):
        with pytest.raises(ArrayLengthMismatch):
            fit_linear(VariableType.PH, 3.0, 7.0, [1.0, 2.0], [1.0, 0.0], pka=[4.0])


class TestCornerFits:

    def test_bilinear_recovers_coefficients(self, bilinear_polynomial):
        x_range, y_range = (30.0, 90.0), (30.0, 60.0)
        ty = [transform_variable(y, VariableType.TEMPERATURE) for y in y_range]
        corners = [bilinear_polynomial.evaluate(x, y) for y in ty for x in x_range]
        fitted = fit_bilinear(VariableType.GRADIENT_TIME, VariableType.TEMPERATURE,
                              x_range, y_range, corners)
        for name, expected in bilinear_polynomial.coefficients().items():
            np.testing.assert_allclose(getattr(fitted, name), expected, rtol=1e-6, atol=1e-9)

    def test_trilinear_recovers_coefficients(self, trilinear_params):
        truth = trilinear_params.polynomial
        x_range, y_range, z_range = (30.0, 90.0), (30.0, 60.0), (0.0, 100.0)
        ty = [transform_variable(y, VariableType.TEMPERATURE) for y in y_range]
        corners = [truth.evaluate(x, y, z) for z in z_range for y in ty for x in x_range]
        fitted = fit_trilinear(VariableType.GRADIENT_TIME, VariableType.TEMPERATURE,
                               VariableType.PERCENT_B, x_range, y_range, z_range, corners)
        assert isinstance(fitted, TrilinearPolynomial)
        for name, expected in truth.coefficients().items():
            np.testing.assert_allclose(getattr(fitted, name), expected, rtol=1e-6, atol=1e-8)

    def test_corner_count_checked(self):
        with pytest.raises(ArrayLengthMismatch):
            fit_bilinear(3, 1, (30.0, 90.0), (30.0, 60.0), [[1.0], [2.0], [3.0]])


class TestExperiments:

    def test_log_retention_factors(self):
        out = log_retention_factors([3.0, 5.0], 1.0)
        np.testing.assert_allclose(out, np.log([2.0, 4.0]))

    def test_peak_before_dead_time_rejected(self):
        with pytest.raises(InvalidParameter):
            log_retention_factors([0.8, 5.0], 1.0)

    def test_dead_time_must_be_positive(self):
        with pytest.raises(InvalidParameter):
            log_retention_factors([3.0], 0.0)

    def test_one_variable_calibration(self):
        truth = LinearPolynomial(a=[0.02, 0.035], b=[-0.1, -0.8])
        t0 = 2.0
        experiments = []
        for x in (90.0, 30.0):
            ret = compute_retention_factors(truth, (3, 1, 9), None, x, 0.0, 0.0, t0, 10000)
            experiments.append(ExperimentalData(retention_times=ret.times, x=x))
        fitted = calibrate_from_experiments(experiments, t0, (VariableType.GRADIENT_TIME,))
        assert isinstance(fitted, LinearPolynomial)
        np.testing.assert_allclose(fitted.a, truth.a)
        np.testing.assert_allclose(fitted.b, truth.b)

    def test_two_variable_calibration_any_order(self, bilinear_polynomial):
        t0 = 1.2
        types = (VariableType.GRADIENT_TIME, VariableType.TEMPERATURE, VariableType.PERCENT_B)
        experiments = []
        for x, y in [(90.0, 60.0), (30.0, 30.0), (30.0, 60.0), (90.0, 30.0)]:
            ret = compute_retention_factors(bilinear_polynomial, types, None, x, y, 0.0, t0, 10000)
            experiments.append(ExperimentalData(retention_times=ret.times, x=x, y=y))
        fitted = calibrate_from_experiments(experiments, t0, types)
        assert isinstance(fitted, BilinearPolynomial)
        for name, expected in bilinear_polynomial.coefficients().items():
            np.testing.assert_allclose(getattr(fitted, name), expected, rtol=1e-5, atol=1e-8)

    def test_experiment_count_checked(self):
        data = [ExperimentalData(retention_times=[3.0], x=x) for x in (30.0, 60.0, 90.0)]
        with pytest.raises(InvalidParameter):
            calibrate_from_experiments(data, 1.0, (3,))

    def test_two_levels_per_axis_required(self):
        data = [ExperimentalData(retention_times=[3.0], x=30.0) for _ in range(2)]
        with pytest.raises(InvalidParameter):
            calibrate_from_experiments(data, 1.0, (3,))

    def test_duplicate_corner_rejected(self):
        data = [
            ExperimentalData(retention_times=[3.0], x=30.0, y=30.0),
            ExperimentalData(retention_times=[3.0], x=30.0, y=30.0),
            ExperimentalData(retention_times=[3.0], x=90.0, y=30.0),
            ExperimentalData(retention_times=[3.0], x=90.0, y=60.0),
        ]
        with pytest.raises(InvalidParameter):
            calibrate_from_experiments(data, 1.0, (3, 1))

    def test_component_counts_must_agree(self):
        data = [ExperimentalData(retention_times=[3.0, 4.0], x=30.0),
                ExperimentalData(retention_times=[3.0], x=90.0)]
        with pytest.raises(ArrayLengthMismatch):
            calibrate_from_experiments(data, 1.0, (3,))
