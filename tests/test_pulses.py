"""Unit tests for the closed-form pulse shapes."""
from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")
integrate = pytest.importorskip("scipy.integrate")

from dragpulse import ConfigurationError, PulseParameters
from dragpulse.pulses import (
    base_pulse,
    base_pulse_derivative,
    drag_in_phase,
    drag_quadrature,
    dynamical_detuning,
    gaussian,
    gaussian_derivative,
    normalization_constant,
    rotating_frame_gaussian_pulse,
)

TG = 6e-9
SIGMA = 3e-9
DELTA = 2 * math.pi * (-400e6)
LAMBDA = math.sqrt(2.0)


@pytest.fixture
def drag_params() -> PulseParameters:
    return PulseParameters(
        gate_time=TG, sigma=SIGMA, amplitude=math.pi, anharmonicity=DELTA, transition_ratio=LAMBDA
    )


def test_gaussian_peak_and_width():
    assert gaussian(0.0, SIGMA) == 1.0
    assert gaussian(SIGMA, SIGMA) == pytest.approx(math.exp(-0.5))
    assert gaussian(-SIGMA, SIGMA) == gaussian(SIGMA, SIGMA)


def test_gaussian_derivative_matches_finite_difference():
    t = 0.7 * SIGMA
    h = 1e-6 * SIGMA
    numeric = (gaussian(t + h, SIGMA) - gaussian(t - h, SIGMA)) / (2 * h)
    assert gaussian_derivative(t, SIGMA) == pytest.approx(numeric, rel=1e-6)
    assert gaussian_derivative(0.0, SIGMA) == 0.0


def test_scalar_input_gives_float_and_array_input_gives_array():
    assert isinstance(gaussian(0.1e-9, SIGMA), float)
    ts = np.linspace(-TG / 2, TG / 2, 11)
    values = rotating_frame_gaussian_pulse(ts, TG, SIGMA, math.pi)
    assert isinstance(values, np.ndarray)
    assert values.shape == ts.shape


@pytest.mark.parametrize(
    "gate_time,sigma", [(6e-9, 3e-9), (3e-9, 1.5e-9), (20e-9, 4e-9), (1.0, 0.25)]
)
def test_pulse_is_exactly_zero_at_window_edges(gate_time, sigma):
    for t in (gate_time / 2, -gate_time / 2):
        assert rotating_frame_gaussian_pulse(t, gate_time, sigma, math.pi) == 0.0


@pytest.mark.parametrize(
    "gate_time,sigma,amplitude",
    [(6e-9, 3e-9, math.pi), (4e-9, 2e-9, math.pi / 2), (10e-9, 2.5e-9, -1.3), (2.0, 1.0, 0.5)],
)
def test_pulse_area_equals_amplitude(gate_time, sigma, amplitude):
    """The normalization constant makes the pulse integrate to its amplitude."""

    area, _ = integrate.quad(
        rotating_frame_gaussian_pulse,
        -gate_time / 2,
        gate_time / 2,
        args=(gate_time, sigma, amplitude),
        epsabs=0.0,
        epsrel=1e-10,
    )
    assert area == pytest.approx(amplitude, rel=1e-6)


def test_pulse_peaks_at_centre():
    ts = np.linspace(-TG / 2, TG / 2, 201)
    values = rotating_frame_gaussian_pulse(ts, TG, SIGMA, math.pi)
    assert np.argmax(values) == 100
    B = normalization_constant(TG, SIGMA)
    assert values[100] == pytest.approx(math.pi * B * (1.0 - gaussian(TG / 2, SIGMA)))


def test_non_positive_width_or_gate_time_is_rejected():
    with pytest.raises(ConfigurationError):
        gaussian(0.0, 0.0)
    with pytest.raises(ConfigurationError):
        normalization_constant(-1e-9, SIGMA)
    with pytest.raises(ConfigurationError):
        rotating_frame_gaussian_pulse(0.0, TG, -SIGMA, math.pi)


def test_base_pulse_callbacks_match_explicit_form(drag_params):
    t = 0.8e-9
    assert base_pulse(t, drag_params) == rotating_frame_gaussian_pulse(t, TG, SIGMA, math.pi)
    B = normalization_constant(TG, SIGMA)
    assert base_pulse_derivative(t, drag_params) == pytest.approx(
        math.pi * B * gaussian_derivative(t, SIGMA)
    )


def test_drag_terms_match_fifth_order_expressions(drag_params):
    t = -1.1e-9
    eps = base_pulse(t, drag_params)
    deps = base_pulse_derivative(t, drag_params)
    lam2 = LAMBDA**2

    ex = eps + (lam2 - 4) * eps**3 / (8 * DELTA**2) - (13 * lam2**2 - 76 * lam2 + 112) * eps**5 / (
        128 * DELTA**4
    )
    ey = -deps / DELTA + 33 * (lam2 - 2) * eps**2 * deps / (24 * DELTA**3)
    det = (lam2 - 4) * eps**2 / (4 * DELTA) - (lam2**2 - 7 * lam2 + 12) * eps**4 / (16 * DELTA**3)

    assert drag_in_phase(t, drag_params) == pytest.approx(ex, rel=1e-12)
    assert drag_quadrature(t, drag_params) == pytest.approx(ey, rel=1e-12)
    assert dynamical_detuning(t, drag_params) == pytest.approx(det, rel=1e-12)


def test_harmonic_limit_reduces_to_plain_pulse():
    """With λ = 2 the detuning vanishes and the in-phase drive is the base pulse."""

    params = PulseParameters(
        gate_time=TG,
        sigma=SIGMA,
        amplitude=math.pi,
        anharmonicity=1e3 * DELTA,
        transition_ratio=2.0,
    )
    ts = np.linspace(-TG / 2, TG / 2, 51)
    assert np.allclose(dynamical_detuning(ts, params), 0.0, atol=1e-12)
    assert np.allclose(drag_in_phase(ts, params), base_pulse(ts, params), rtol=1e-12, atol=0.0)


def test_drag_terms_vanish_at_peak_and_edges(drag_params):
    # The quadrature follows the derivative, which is zero at the peak.
    assert drag_quadrature(0.0, drag_params) == 0.0
    assert drag_in_phase(TG / 2, drag_params) == 0.0
    assert dynamical_detuning(-TG / 2, drag_params) == 0.0


def test_quadrature_is_odd_in_time(drag_params):
    t = 1.7e-9
    assert drag_quadrature(-t, drag_params) == pytest.approx(-drag_quadrature(t, drag_params))


def test_drag_requires_anharmonicity_and_ratio():
    params = PulseParameters(gate_time=TG, sigma=SIGMA)
    for func in (drag_in_phase, drag_quadrature, dynamical_detuning):
        with pytest.raises(ConfigurationError):
            func(0.0, params)
