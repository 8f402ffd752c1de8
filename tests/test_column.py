import math

import pytest

from resmap_engine import InvalidParameter, compute_column_physics


class TestColumnPhysics:

    def test_analytical_column(self):
        """25 cm x 4.6 mm column at 1 mL/min."""
        p = compute_column_physics(25.0, 0.46, 1.0)
        expected_volume = math.pi * 0.23 ** 2 * 25.0 * (2.0 / 3.0)
        assert p.mobile_phase_volume == pytest.approx(expected_volume)
        assert p.mobile_phase_volume == pytest.approx(2.77, abs=0.01)
        assert p.dead_time == pytest.approx(2.77, abs=0.01)
        assert p.linear_velocity == pytest.approx(9.03, abs=0.01)

    @pytest.mark.parametrize("length, diameter, flow", [
        (25.0, 0.46, 1.0),
        (10.0, 0.21, 0.3),
        (15.0, 0.30, 2.5),
    ])
    def test_derived_quantities_consistent(self, length, diameter, flow):
        p = compute_column_physics(length, diameter, flow)
        assert p.dead_time == pytest.approx(p.mobile_phase_volume / flow)
        assert p.linear_velocity == pytest.approx(length / p.dead_time)

    def test_flow_scales_dead_time(self):
        slow = compute_column_physics(25.0, 0.46, 0.5)
        fast = compute_column_physics(25.0, 0.46, 1.0)
        assert slow.dead_time == pytest.approx(2.0 * fast.dead_time)

    @pytest.mark.parametrize("args, bad", [
        ((0.0, 0.46, 1.0), "column_length"),
        ((25.0, -0.46, 1.0), "column_diameter"),
        ((25.0, 0.46, 0.0), "flow_rate"),
        ((25.0, 0.46, float("nan")), "flow_rate"),
    ])
    def test_non_positive_inputs_rejected(self, args, bad):
        with pytest.raises(InvalidParameter) as exc:
            compute_column_physics(*args)
        assert exc.value.parameter == bad
