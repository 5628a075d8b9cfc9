"""Time-dependent Schrödinger solver.

Integrates ``i dψ/dt = H(t) ψ`` (ħ = 1) for a list of Hamiltonian terms.
Adaptive integration runs the :mod:`scipy.integrate` Runge-Kutta steppers
one step at a time and reads requested sample times off their dense output,
so internal step size never depends on output resolution. A fixed-step RK4
integrator is kept for cross-checks.
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type

import numpy as np
from scipy.integrate import DOP853, RK45, OdeSolver

from .errors import ConfigurationError, NormalizationDriftWarning, NumericalInstabilityError
from .hamiltonian import HamiltonianTerm, hamiltonian_at, term_dimension

ADAPTIVE_METHODS: Dict[str, Type[OdeSolver]] = {"DOP853": DOP853, "RK45": RK45}
FIXED_STEP_METHODS = ("rk4",)

# Step-size floor relative to the span length when no explicit min_step is given.
MIN_STEP_FRACTION = 1e-12
# Default number of RK4 steps across the whole span.
DEFAULT_RK4_STEPS = 2000
STATE_NORM_ATOL = 1e-9


@dataclass(frozen=True)
class Trajectory:
    """Time-ordered states produced by one solver call."""

    times: np.ndarray
    states: np.ndarray

    def __post_init__(self) -> None:
        times = np.array(self.times, dtype=float)
        states = np.array(self.states, dtype=complex)
        if states.ndim != 2 or states.shape[0] != times.shape[0]:
            raise ValueError(
                f"Trajectory shape mismatch: times={times.shape}, states={states.shape}"
            )
        times.setflags(write=False)
        states.setflags(write=False)
        object.__setattr__(self, "times", times)
        object.__setattr__(self, "states", states)

    def __len__(self) -> int:
        return len(self.times)

    @property
    def dimension(self) -> int:
        return int(self.states.shape[1])

    @property
    def final_state(self) -> np.ndarray:
        return self.states[-1]

    def level_probabilities(self) -> np.ndarray:
        """Population of each level at each sample, shape ``(len(times), N)``."""
        return np.abs(self.states) ** 2

    def norms(self) -> np.ndarray:
        return np.linalg.norm(self.states, axis=1)


# ---------- Input validation ----------
def _validate_state(initial_state, dimension: int) -> np.ndarray:
    psi = np.asarray(initial_state, dtype=complex).reshape(-1)
    if psi.shape[0] != dimension:
        raise ConfigurationError(
            f"Initial state has dimension {psi.shape[0]} but operators are {dimension}x{dimension}"
        )
    norm = float(np.linalg.norm(psi))
    if abs(norm - 1.0) > STATE_NORM_ATOL:
        raise ConfigurationError(f"Initial state must have unit norm, got {norm:.12f}")
    return psi.copy()


def _validate_span(time_span: Sequence[float]) -> Tuple[float, float]:
    if len(time_span) != 2:
        raise ConfigurationError(f"Time span must be (t0, t1), got {time_span!r}")
    t0, t1 = float(time_span[0]), float(time_span[1])
    if not (math.isfinite(t0) and math.isfinite(t1)):
        raise ConfigurationError(f"Time span must be finite, got ({t0}, {t1})")
    if t1 <= t0:
        raise ConfigurationError(f"Time span must satisfy t1 > t0, got ({t0}, {t1})")
    return t0, t1


def _prepare_samples(sample_times, t0: float, t1: float) -> Optional[np.ndarray]:
    """Validate requested times and make sure both ends of the span are present."""
    if sample_times is None:
        return None
    samples = np.asarray(sample_times, dtype=float).reshape(-1)
    if samples.size and not np.all(np.isfinite(samples)):
        raise ConfigurationError("Sample times must be finite")
    if samples.size and np.any(np.diff(samples) < 0):
        raise ConfigurationError("Sample times must be non-decreasing")
    if samples.size and (samples[0] < t0 or samples[-1] > t1):
        raise ConfigurationError(
            f"Sample times must lie within [{t0}, {t1}], got [{samples[0]}, {samples[-1]}]"
        )
    if samples.size == 0 or samples[0] > t0:
        samples = np.concatenate(([t0], samples))
    if samples[-1] < t1:
        samples = np.concatenate((samples, [t1]))
    return samples


# ---------- Fixed-step integrator ----------
def rk4_step(
    psi: np.ndarray,
    t: float,
    dt: float,
    h_func: Callable[[float], np.ndarray],
) -> np.ndarray:
    """Advance ``psi`` by ``dt`` with the classic Runge-Kutta method."""

    def rhs(state: np.ndarray, time: float) -> np.ndarray:
        return -1j * (h_func(time) @ state)

    k1 = rhs(psi, t)
    k2 = rhs(psi + 0.5 * dt * k1, t + 0.5 * dt)
    k3 = rhs(psi + 0.5 * dt * k2, t + 0.5 * dt)
    k4 = rhs(psi + dt * k3, t + dt)
    return psi + (dt / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)


def _integrate_fixed(
    psi0: np.ndarray,
    h_func: Callable[[float], np.ndarray],
    t0: float,
    t1: float,
    samples: Optional[np.ndarray],
    dt: Optional[float],
) -> Tuple[List[float], List[np.ndarray]]:
    if dt is None:
        dt = (t1 - t0) / DEFAULT_RK4_STEPS
    if not dt > 0:
        raise ConfigurationError(f"Fixed step dt must be positive, got {dt}")
    if samples is None:
        steps = max(1, int(np.ceil((t1 - t0) / dt - 1e-9)))
        samples = t0 + (t1 - t0) * np.arange(steps + 1) / steps
        samples[-1] = t1

    times: List[float] = [float(samples[0])]
    states: List[np.ndarray] = [psi0.copy()]
    psi = psi0.copy()
    for a, b in zip(samples[:-1], samples[1:]):
        if b > a:
            sub = max(1, int(np.ceil((b - a) / dt - 1e-9)))
            h = (b - a) / sub
            for k in range(sub):
                psi = rk4_step(psi, a + k * h, h, h_func)
            if not np.all(np.isfinite(psi)):
                raise NumericalInstabilityError(
                    f"RK4 produced non-finite amplitudes before t={b:.6e}",
                    time_reached=float(a),
                    trajectory=Trajectory(times, states),
                )
        times.append(float(b))
        states.append(psi.copy())
    return times, states


# ---------- Adaptive integrator ----------
def _integrate_adaptive(
    psi0: np.ndarray,
    h_func: Callable[[float], np.ndarray],
    t0: float,
    t1: float,
    samples: Optional[np.ndarray],
    solver_cls: Type[OdeSolver],
    *,
    rtol: float,
    atol: float,
    min_step: float,
    max_step: float,
    first_step: Optional[float],
) -> Tuple[List[float], List[np.ndarray]]:
    def rhs(t: float, psi: np.ndarray) -> np.ndarray:
        return -1j * (h_func(t) @ psi)

    solver = solver_cls(
        rhs, t0, psi0, t1, rtol=rtol, atol=atol, max_step=max_step, first_step=first_step
    )

    times: List[float] = []
    states: List[np.ndarray] = []
    if samples is None:
        times.append(t0)
        states.append(psi0.copy())
        idx = 0
    else:
        idx = int(np.searchsorted(samples, t0, side="right"))
        times.extend(float(s) for s in samples[:idx])
        states.extend(psi0.copy() for _ in range(idx))

    def failure(message: str) -> NumericalInstabilityError:
        return NumericalInstabilityError(
            message,
            time_reached=float(solver.t),
            trajectory=Trajectory(times, states) if times else None,
        )

    while solver.status == "running":
        message = solver.step()
        if solver.status == "failed":
            raise failure(f"{type(solver).__name__} failed at t={solver.t:.6e}: {message}")

        if samples is None:
            times.append(float(solver.t))
            states.append(np.array(solver.y, dtype=complex))
        else:
            hi = int(np.searchsorted(samples, solver.t, side="right"))
            if hi > idx:
                chunk = samples[idx:hi]
                interpolated = np.atleast_2d(solver.dense_output()(chunk).T)
                for s, value in zip(chunk, interpolated):
                    times.append(float(s))
                    states.append(np.array(solver.y if s == solver.t else value, dtype=complex))
                idx = hi

        if solver.status == "running" and solver.step_size is not None:
            if solver.step_size < min_step:
                raise failure(
                    f"Step size {solver.step_size:.3e} fell below the floor {min_step:.3e} "
                    f"at t={solver.t:.6e}"
                )
    return times, states


def _check_norm(trajectory: Trajectory, tolerance: float) -> None:
    drift = float(np.max(np.abs(trajectory.norms() - 1.0)))
    if drift > tolerance:
        warnings.warn(
            f"State norm drifted by {drift:.3e} (tolerance {tolerance:.1e})",
            NormalizationDriftWarning,
            stacklevel=3,
        )


def evolve(
    initial_state,
    terms: Sequence[HamiltonianTerm],
    time_span: Sequence[float],
    sample_times=None,
    *,
    method: str = "DOP853",
    rtol: float = 1e-8,
    atol: float = 1e-10,
    min_step: Optional[float] = None,
    max_step: float = np.inf,
    first_step: Optional[float] = None,
    dt: Optional[float] = None,
    norm_tolerance: float = 1e-6,
) -> Trajectory:
    """Evolve ``initial_state`` under ``H(t) = sum_k c_k(t) Op_k``.

    Parameters
    ----------
    initial_state:
        Unit-norm state vector whose dimension matches the operators.
    terms:
        Constant and pulse-modulated Hamiltonian terms.
    time_span:
        ``(t0, t1)`` with ``t1 > t0``.
    sample_times:
        Optional non-decreasing times in the span at which states are
        returned. ``t0`` and ``t1`` are added when missing. Without it the
        trajectory holds every accepted step (fixed grid for ``"rk4"``).
    method:
        ``"DOP853"``, ``"RK45"`` or ``"rk4"``.
    min_step:
        Step-size floor for adaptive methods, default ``1e-12 * (t1 - t0)``.
    dt:
        Maximum step for ``"rk4"``.
    norm_tolerance:
        Largest tolerated ``|‖ψ‖ - 1|`` before a
        :class:`~dragpulse.errors.NormalizationDriftWarning` is issued.
        States are never re-normalized.

    Raises
    ------
    ConfigurationError
        On inconsistent inputs, before any integration work.
    NumericalInstabilityError
        When the tolerance cannot be met above the step-size floor. The
        exception carries the time reached and the partial trajectory.
    """

    dimension = term_dimension(terms)
    psi0 = _validate_state(initial_state, dimension)
    t0, t1 = _validate_span(time_span)
    samples = _prepare_samples(sample_times, t0, t1)
    if method not in ADAPTIVE_METHODS and method not in FIXED_STEP_METHODS:
        raise ConfigurationError(
            f"Unsupported integrator '{method}', expected one of "
            f"{sorted(ADAPTIVE_METHODS) + list(FIXED_STEP_METHODS)}"
        )
    if not (rtol > 0 and atol > 0):
        raise ConfigurationError(f"Tolerances must be positive, got rtol={rtol}, atol={atol}")
    if min_step is None:
        min_step = MIN_STEP_FRACTION * (t1 - t0)

    def h_func(time: float) -> np.ndarray:
        return hamiltonian_at(terms, time)

    if method in FIXED_STEP_METHODS:
        times, states = _integrate_fixed(psi0, h_func, t0, t1, samples, dt)
    else:
        times, states = _integrate_adaptive(
            psi0,
            h_func,
            t0,
            t1,
            samples,
            ADAPTIVE_METHODS[method],
            rtol=rtol,
            atol=atol,
            min_step=min_step,
            max_step=max_step,
            first_step=first_step,
        )

    trajectory = Trajectory(times, states)
    _check_norm(trajectory, norm_tolerance)
    return trajectory


__all__ = [
    "ADAPTIVE_METHODS",
    "FIXED_STEP_METHODS",
    "Trajectory",
    "rk4_step",
    "evolve",
]
