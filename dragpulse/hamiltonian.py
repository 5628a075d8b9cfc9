"""Hamiltonian terms for the qubit and three-level transmon models.

A Hamiltonian is a list of terms, each either a constant operator or an
operator scaled by a pulse function of time::

    H(t) = sum_k c_k(t) * Op_k

Basis ordering is |0>, |1>, |2>. The drive operators use truncated ladder
operators, so the 1-2 matrix element is sqrt(2) times the 0-1 element.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Union

import numpy as np

from . import constants
from .errors import ConfigurationError
from .params import PulseParameters
from .pulses import base_pulse, drag_in_phase, drag_quadrature, dynamical_detuning

PulseFunction = Callable[[float, PulseParameters], float]


@dataclass(frozen=True)
class ConstantTerm:
    """Time-independent operator."""

    operator: np.ndarray

    def coefficient(self, t: float) -> float:
        return 1.0


@dataclass(frozen=True)
class PulseTerm:
    """Operator scaled at each instant by ``pulse(t, params)``."""

    operator: np.ndarray
    pulse: PulseFunction
    params: PulseParameters

    def coefficient(self, t: float) -> float:
        return float(self.pulse(t, self.params))


HamiltonianTerm = Union[ConstantTerm, PulseTerm]


# ---------- Drive operators ----------
def drive_x(n: int) -> np.ndarray:
    """In-phase drive ``(a† + a)/2``."""
    return 0.5 * (constants.create(n) + constants.destroy(n))


def drive_y(n: int) -> np.ndarray:
    """Quadrature drive ``(i a† - i a)/2``."""
    return 0.5j * (constants.create(n) - constants.destroy(n))


# ---------- Validation / evaluation ----------
def term_dimension(terms: Sequence[HamiltonianTerm]) -> int:
    """Return the common Hilbert-space dimension of ``terms``."""
    if not terms:
        raise ConfigurationError("Hamiltonian needs at least one term")
    dims = set()
    for idx, term in enumerate(terms):
        op = np.asarray(term.operator)
        if op.ndim != 2 or op.shape[0] != op.shape[1]:
            raise ConfigurationError(f"Term {idx} operator is not square: shape {op.shape}")
        dims.add(op.shape[0])
    if len(dims) != 1:
        raise ConfigurationError(f"Hamiltonian terms have mismatched dimensions {sorted(dims)}")
    return dims.pop()


def hamiltonian_at(terms: Sequence[HamiltonianTerm], t: float) -> np.ndarray:
    """Instantaneous Hamiltonian ``H(t)``."""
    H = np.zeros_like(terms[0].operator, dtype=complex)
    for term in terms:
        H += term.coefficient(t) * term.operator
    return H


# ---------- Scenario Hamiltonians ----------
def not_gate_terms(params: PulseParameters) -> List[HamiltonianTerm]:
    """Two-level qubit driven by the Gaussian pulse: ``ε(t) σx/2``."""
    sx, _, _, _ = constants.pauli()
    return [
        ConstantTerm(constants.zero(2)),
        PulseTerm(0.5 * sx, base_pulse, params),
    ]


def gaussian_transmon_terms(params: PulseParameters) -> List[HamiltonianTerm]:
    """Three-level transmon driven by the plain Gaussian pulse."""
    delta = params.anharmonicity
    if delta is None:
        raise ConfigurationError("The transmon model needs an anharmonicity")
    return [
        ConstantTerm(delta * constants.projector(3, 2)),
        PulseTerm(drive_x(3), base_pulse, params),
    ]


def drag_transmon_terms(params: PulseParameters) -> List[HamiltonianTerm]:
    """Three-level transmon driven by fifth-order DRAG with dynamical detuning."""
    params.require_drag()
    delta = float(params.anharmonicity)  # type: ignore[arg-type]
    return [
        ConstantTerm(delta * constants.projector(3, 2)),
        PulseTerm(constants.projector(3, 1), dynamical_detuning, params),
        PulseTerm(drive_x(3), drag_in_phase, params),
        PulseTerm(drive_y(3), drag_quadrature, params),
    ]


__all__ = [
    "ConstantTerm",
    "PulseTerm",
    "HamiltonianTerm",
    "PulseFunction",
    "drive_x",
    "drive_y",
    "term_dimension",
    "hamiltonian_at",
    "not_gate_terms",
    "gaussian_transmon_terms",
    "drag_transmon_terms",
]
