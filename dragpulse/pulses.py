"""Closed-form pulse shapes for Gaussian and fifth-order DRAG driving.

The base pulse is a Gaussian centred on ``t = 0``, shifted down so it
starts and ends at exactly zero on ``[-tg/2, tg/2]`` and rescaled so its
area over that window equals the requested rotation angle.

The DRAG corrections follow the fifth-order expansion in ``ε/Δ`` for a
transmon with anharmonicity ``Δ`` and ratio ``λ`` between the 1-2 and 0-1
transition matrix elements:

    Ex = ε + (λ²-4) ε³ / (8Δ²) - (13λ⁴-76λ²+112) ε⁵ / (128Δ⁴)
    Ey = -ε'/Δ + 33 (λ²-2) ε² ε' / (24Δ³)
    δ  = (λ²-4) ε² / (4Δ) - (λ⁴-7λ²+12) ε⁴ / (16Δ³)

Every function accepts a scalar or an array of times. Scalars give floats.
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Tuple, Union

import numpy as np
from scipy.special import erf

from .errors import ConfigurationError
from .params import PulseParameters

TimeLike = Union[float, np.ndarray]


def _check_positive(**values: float) -> None:
    for name, value in values.items():
        if not value > 0:
            raise ConfigurationError(f"{name} must be positive, got {value}")


def _result(value: np.ndarray) -> TimeLike:
    if np.ndim(value) == 0:
        return float(value)
    return value


# ---------- Gaussian envelope ----------
def gaussian(t: TimeLike, sigma: float) -> TimeLike:
    """Unnormalized centred Gaussian ``exp(-0.5 (t/σ)²)``."""
    _check_positive(sigma=sigma)
    x = np.asarray(t, dtype=float) / sigma
    return _result(np.exp(-0.5 * x * x))


def gaussian_derivative(t: TimeLike, sigma: float) -> TimeLike:
    """Time derivative of :func:`gaussian`."""
    _check_positive(sigma=sigma)
    tt = np.asarray(t, dtype=float)
    x = tt / sigma
    return _result(-(tt / sigma**2) * np.exp(-0.5 * x * x))


@lru_cache(maxsize=256)
def normalization_constant(gate_time: float, sigma: float) -> float:
    """Return ``B`` giving ``B * (gaussian(t) - gaussian(tg/2))`` unit area on the gate window."""
    _check_positive(gate_time=gate_time, sigma=sigma)
    area = math.sqrt(2.0 * math.pi) * sigma * float(erf(gate_time / (math.sqrt(8.0) * sigma)))
    area -= gate_time * math.exp(-0.5 * (0.5 * gate_time / sigma) ** 2)
    return 1.0 / area


def rotating_frame_gaussian_pulse(
    t: TimeLike,
    gate_time: float,
    sigma: float,
    amplitude: float,
) -> TimeLike:
    """Area-normalized Gaussian pulse that vanishes at ``t = ±gate_time/2``."""
    B = normalization_constant(gate_time, sigma)
    edge = gaussian(0.5 * gate_time, sigma)
    return _result(amplitude * B * (np.asarray(gaussian(t, sigma)) - edge))


# ---------- Solver callbacks (t, params) ----------
def base_pulse(t: TimeLike, params: PulseParameters) -> TimeLike:
    """Rotating-frame Gaussian pulse ``ε(t)`` for a parameter record."""
    return rotating_frame_gaussian_pulse(t, params.gate_time, params.sigma, params.amplitude)


def base_pulse_derivative(t: TimeLike, params: PulseParameters) -> TimeLike:
    """``ε'(t)``, scaled by the same amplitude and normalization as :func:`base_pulse`."""
    B = normalization_constant(params.gate_time, params.sigma)
    return _result(params.amplitude * B * np.asarray(gaussian_derivative(t, params.sigma)))


def _drag_constants(params: PulseParameters) -> Tuple[float, float]:
    params.require_drag()
    return float(params.anharmonicity), float(params.transition_ratio)  # type: ignore[arg-type]


def drag_in_phase(t: TimeLike, params: PulseParameters) -> TimeLike:
    """In-phase (x) DRAG drive ``Ex(t)``."""
    delta, lam = _drag_constants(params)
    lam2 = lam * lam
    eps = np.asarray(base_pulse(t, params))
    value = (
        eps
        + (lam2 - 4.0) * eps**3 / (8.0 * delta**2)
        - (13.0 * lam2**2 - 76.0 * lam2 + 112.0) * eps**5 / (128.0 * delta**4)
    )
    return _result(value)


def drag_quadrature(t: TimeLike, params: PulseParameters) -> TimeLike:
    """Quadrature (y) DRAG drive ``Ey(t)``."""
    delta, lam = _drag_constants(params)
    eps = np.asarray(base_pulse(t, params))
    deps = np.asarray(base_pulse_derivative(t, params))
    value = -deps / delta + 33.0 * (lam * lam - 2.0) * eps**2 * deps / (24.0 * delta**3)
    return _result(value)


def dynamical_detuning(t: TimeLike, params: PulseParameters) -> TimeLike:
    """Detuning ``δ(t)`` applied to the first excited level."""
    delta, lam = _drag_constants(params)
    lam2 = lam * lam
    eps = np.asarray(base_pulse(t, params))
    value = (lam2 - 4.0) * eps**2 / (4.0 * delta) - (
        lam2**2 - 7.0 * lam2 + 12.0
    ) * eps**4 / (16.0 * delta**3)
    return _result(value)


__all__ = [
    "gaussian",
    "gaussian_derivative",
    "normalization_constant",
    "rotating_frame_gaussian_pulse",
    "base_pulse",
    "base_pulse_derivative",
    "drag_in_phase",
    "drag_quadrature",
    "dynamical_detuning",
]
