"""The three fixed pulse scenarios: qubit NOT, transmon Gaussian, transmon DRAG."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from . import constants
from .hamiltonian import (
    HamiltonianTerm,
    drag_transmon_terms,
    gaussian_transmon_terms,
    not_gate_terms,
)
from .params import PulseParameters
from .solver import Trajectory, evolve

# Output samples per scenario figure.
DEFAULT_SAMPLES = 100


@dataclass(frozen=True)
class Scenario:
    """A unit of work for the solver."""

    name: str
    initial_state: np.ndarray
    terms: Tuple[HamiltonianTerm, ...]
    time_span: Tuple[float, float]
    sample_times: Optional[np.ndarray] = None

    def run(self, **solver_options: Any) -> Trajectory:
        return evolve(
            self.initial_state,
            self.terms,
            self.time_span,
            self.sample_times,
            **solver_options,
        )


def _gate_window(
    params: PulseParameters, samples: Optional[int]
) -> Tuple[Tuple[float, float], Optional[np.ndarray]]:
    span = (-params.half_gate_time, params.half_gate_time)
    if samples is None:
        return span, None
    return span, np.linspace(span[0], span[1], samples)


def _scenario(
    name: str,
    dimension: int,
    terms: Sequence[HamiltonianTerm],
    params: PulseParameters,
    samples: Optional[int],
) -> Scenario:
    span, sample_times = _gate_window(params, samples)
    return Scenario(
        name=name,
        initial_state=constants.basis(dimension, 0),
        terms=tuple(terms),
        time_span=span,
        sample_times=sample_times,
    )


def not_gate_scenario(
    params: PulseParameters, samples: Optional[int] = DEFAULT_SAMPLES
) -> Scenario:
    """Two-level qubit NOT gate from the ground state."""
    return _scenario("qubitNOT", 2, not_gate_terms(params), params, samples)


def gaussian_transmon_scenario(
    params: PulseParameters, samples: Optional[int] = DEFAULT_SAMPLES
) -> Scenario:
    """Three-level transmon under the plain Gaussian pulse (leaks to |2>)."""
    return _scenario("3levelNOT", 3, gaussian_transmon_terms(params), params, samples)


def drag_transmon_scenario(
    params: PulseParameters, samples: Optional[int] = DEFAULT_SAMPLES
) -> Scenario:
    """Three-level transmon under the fifth-order DRAG pulse."""
    return _scenario("3levelDRAG", 3, drag_transmon_terms(params), params, samples)


__all__ = [
    "DEFAULT_SAMPLES",
    "Scenario",
    "not_gate_scenario",
    "gaussian_transmon_scenario",
    "drag_transmon_scenario",
]
