import numpy as np
import pytest

from wave_field import ConstantVelocityField, WaveField
from wave_utils import arrow_head, courant_number, discrete_energy, fit_viewport, lerp, map_range


def test_lerp_endpoints():
    assert lerp(2.0, 5.0, 0.0) == 2.0
    assert lerp(2.0, 5.0, 1.0) == 5.0
    assert lerp(2.0, 5.0, 0.5) == pytest.approx(3.5)


def test_map_range_endpoints_and_monotonic():
    assert map_range(0.2, 0.2, 1.0, 0.0, 1.0) == 0.0
    assert map_range(1.0, 0.2, 1.0, 0.0, 1.0) == pytest.approx(1.0)

    xs = np.linspace(0.2, 1.0, 50)
    mapped = [map_range(x, 0.2, 1.0, 0.0, 1.0) for x in xs]
    assert all(b > a for a, b in zip(mapped, mapped[1:]))


def test_map_range_reversed_target():
    assert map_range(0.1, 0.1, 1.0, 0.6, 0.1) == pytest.approx(0.6)
    assert map_range(1.0, 0.1, 1.0, 0.6, 0.1) == pytest.approx(0.1)


def test_fit_viewport_wide_window():
    x, y, w, h = fit_viewport(4.0, 1.0, 2.0)
    assert (w, h) == pytest.approx((2.0, 1.0))
    assert (x, y) == pytest.approx((1.0, 0.0))


def test_fit_viewport_tall_window():
    x, y, w, h = fit_viewport(2.0, 4.0, 2.0)
    assert (w, h) == pytest.approx((2.0, 1.0))
    assert (x, y) == pytest.approx((0.0, 1.5))


def test_arrow_head_points_at_tip():
    head = arrow_head(0.0, 0.0, 1.0, 0.0, 0.1)
    assert head.shape == (3, 2)
    assert head[2] == pytest.approx([1.0, 0.0])
    assert head[0, 0] < 1.0 and head[1, 0] < 1.0
    assert head[0, 1] == pytest.approx(-head[1, 1])


def test_energy_of_resting_field_is_zero():
    assert discrete_energy(WaveField(10)) == 0.0


def test_energy_of_uniform_velocity():
    field = WaveField(10)
    field.velocity[:] = 2.0
    # 0.5 * sum(v^2) * dx = 0.5 * 10 * 4 * 0.1
    assert discrete_energy(field) == pytest.approx(2.0)


def test_courant_number():
    field = WaveField(100, velocity_field=ConstantVelocityField(2.0))
    assert courant_number(field, 0.001) == pytest.approx(0.2)
