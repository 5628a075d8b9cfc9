"""Average gate fidelity and the gate-time scan.

The average gate fidelity is estimated from the six axis states of the
logical {|0>, |1>} subspace,

    F = (1/6) sum_j tr(U ρ_j U† ρ_final,j),

which is exact for a qubit because the six axis states form a 2-design.
For the transmon the states and the ideal unitary are embedded in the
three-level space, so population left in |2> counts as an error.
"""

from __future__ import annotations

import enum
import math
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from . import constants
from .errors import ConfigurationError
from .hamiltonian import (
    HamiltonianTerm,
    drag_transmon_terms,
    gaussian_transmon_terms,
    not_gate_terms,
)
from .params import PulseParameters
from .solver import Trajectory, evolve

LOGICAL_DIMENSION = 2


class PulseType(str, enum.Enum):
    GAUSSIAN = "gaussian"
    DRAG = "drag"


@dataclass(frozen=True)
class HamiltonianConfig:
    """Physical parameters shared by every gate time of a scan."""

    anharmonicity: float
    transition_ratio: float = math.sqrt(2.0)
    sigma_fraction: float = 0.5
    amplitude: float = math.pi
    dimension: int = 3

    def __post_init__(self) -> None:
        if self.dimension not in (2, 3):
            raise ConfigurationError(f"Dimension must be 2 or 3, got {self.dimension}")
        if self.anharmonicity == 0:
            raise ConfigurationError("Anharmonicity must be non-zero")
        if self.sigma_fraction <= 0:
            raise ConfigurationError(f"Sigma fraction must be positive, got {self.sigma_fraction}")

    def pulse_parameters(self, gate_time: float) -> PulseParameters:
        return PulseParameters.standard(
            gate_time,
            amplitude=self.amplitude,
            anharmonicity=self.anharmonicity,
            transition_ratio=self.transition_ratio,
            sigma_fraction=self.sigma_fraction,
        )


# ---------- States and unitaries ----------
def reference_states(n: int = LOGICAL_DIMENSION) -> Tuple[np.ndarray, ...]:
    """Return +X, -X, +Y, -Y, +Z, -Z of the logical subspace embedded in ``n`` levels."""
    if n < LOGICAL_DIMENSION:
        raise ConfigurationError(f"Need at least {LOGICAL_DIMENSION} levels, got {n}")
    g = constants.basis(n, 0)
    e = constants.basis(n, 1)
    r = 1.0 / math.sqrt(2.0)
    return (
        r * (g + e),
        r * (g - e),
        r * (g + 1j * e),
        r * (g - 1j * e),
        g,
        e,
    )


def density_matrix(psi: np.ndarray) -> np.ndarray:
    psi = np.asarray(psi, dtype=complex).reshape(-1)
    return np.outer(psi, psi.conj())


def embed_unitary(u_logical: np.ndarray, n: int) -> np.ndarray:
    """Act with ``u_logical`` on {|0>, |1>} and as the identity elsewhere."""
    u_logical = np.asarray(u_logical, dtype=complex)
    if u_logical.shape != (LOGICAL_DIMENSION, LOGICAL_DIMENSION):
        raise ConfigurationError(f"Logical unitary must be 2x2, got {u_logical.shape}")
    U = constants.identity(n)
    U[:LOGICAL_DIMENSION, :LOGICAL_DIMENSION] = u_logical
    return U


def not_gate_unitary(n: int = LOGICAL_DIMENSION) -> np.ndarray:
    sx, _, _, _ = constants.pauli()
    return embed_unitary(sx, n)


@dataclass(frozen=True)
class ReferenceBatch:
    """Reference inputs and their ideal outputs, reused across a scan."""

    states: Tuple[np.ndarray, ...]
    rhos: np.ndarray
    rho_targets: np.ndarray


def prepare_reference_batch(u_ideal: np.ndarray) -> ReferenceBatch:
    U = np.asarray(u_ideal, dtype=complex)
    states = reference_states(U.shape[0])
    rhos = np.stack([density_matrix(psi) for psi in states])
    rho_targets = np.einsum("ab,sbc,cd->sad", U, rhos, U.conj().T)
    return ReferenceBatch(states=states, rhos=rhos, rho_targets=rho_targets)


def average_gate_fidelity(
    u_ideal: np.ndarray,
    final_states: Sequence[np.ndarray],
    batch: Optional[ReferenceBatch] = None,
) -> float:
    """Average ``tr(U ρ_j U† ρ_final,j)`` over the reference states."""

    if batch is None:
        batch = prepare_reference_batch(u_ideal)
    if len(final_states) != len(batch.states):
        raise ConfigurationError(
            f"Expected {len(batch.states)} final states, got {len(final_states)}"
        )
    finals = np.stack([density_matrix(psi) for psi in final_states])
    if finals.shape != batch.rho_targets.shape:
        raise ConfigurationError(
            f"Final states have shape {finals.shape[1:]}, expected {batch.rho_targets.shape[1:]}"
        )
    overlaps = np.einsum("sab,sba->s", batch.rho_targets, finals).real
    return float(np.clip(np.mean(overlaps), 0.0, 1.0))


def leakage(trajectory: Trajectory) -> float:
    """Final population outside the logical subspace."""
    probs = trajectory.level_probabilities()[-1]
    return float(np.sum(probs[LOGICAL_DIMENSION:]))


# ---------- Single-point fidelity ----------
def hamiltonian_terms(
    pulse_type: PulseType, params: PulseParameters, dimension: int
) -> List[HamiltonianTerm]:
    pulse_type = PulseType(pulse_type)
    if dimension == 2:
        if pulse_type is PulseType.DRAG:
            raise ConfigurationError("DRAG needs the three-level model")
        return not_gate_terms(params)
    if pulse_type is PulseType.DRAG:
        return drag_transmon_terms(params)
    return gaussian_transmon_terms(params)


def average_fidelity(
    pulse_type: PulseType,
    gate_time: float,
    config: HamiltonianConfig,
    **solver_options: Any,
) -> float:
    """Average NOT-gate fidelity of one pulse at one gate time."""

    params = config.pulse_parameters(gate_time)
    terms = hamiltonian_terms(pulse_type, params, config.dimension)
    U = not_gate_unitary(config.dimension)
    batch = prepare_reference_batch(U)
    span = (-params.half_gate_time, params.half_gate_time)
    finals = [
        evolve(psi, terms, span, (), **solver_options).final_state for psi in batch.states
    ]
    return average_gate_fidelity(U, finals, batch=batch)


# ---------- Gate-time scan ----------
@dataclass(frozen=True)
class FidelityScanRow:
    gate_time: float
    fidelity_gaussian: float
    fidelity_drag: float

    @property
    def error_gaussian(self) -> float:
        return 1.0 - self.fidelity_gaussian

    @property
    def error_drag(self) -> float:
        return 1.0 - self.fidelity_drag

    def to_dict(self) -> Dict[str, float]:
        return {
            "gate_time": float(self.gate_time),
            "fidelity_gaussian": float(self.fidelity_gaussian),
            "fidelity_drag": float(self.fidelity_drag),
        }


def scan_gate_times(
    gate_times: Iterable[float],
    config: HamiltonianConfig,
    *,
    max_workers: Optional[int] = None,
    **solver_options: Any,
) -> List[FidelityScanRow]:
    """Gaussian and DRAG fidelity for each gate time, in input order.

    With ``max_workers > 1`` every (gate time, pulse type) pair runs in a
    separate process; results are merged by index afterwards.
    """

    times = [float(tg) for tg in gate_times]
    jobs = [(tg, kind) for tg in times for kind in (PulseType.GAUSSIAN, PulseType.DRAG)]
    if config.dimension != 3:
        raise ConfigurationError("The Gaussian/DRAG scan needs the three-level model")
    for tg in times:
        # Fail on bad parameters before starting any integration.
        config.pulse_parameters(tg)

    if max_workers is not None and max_workers > 1:
        with ProcessPoolExecutor(max_workers=max_workers) as pool:
            futures = [
                pool.submit(average_fidelity, kind, tg, config, **solver_options)
                for tg, kind in jobs
            ]
            values = [future.result() for future in futures]
    else:
        values = [average_fidelity(kind, tg, config, **solver_options) for tg, kind in jobs]

    results: Dict[Tuple[float, PulseType], float] = {}
    for (tg, kind), value in zip(jobs, values):
        results[(tg, kind)] = value
    return [
        FidelityScanRow(
            gate_time=tg,
            fidelity_gaussian=results[(tg, PulseType.GAUSSIAN)],
            fidelity_drag=results[(tg, PulseType.DRAG)],
        )
        for tg in times
    ]


__all__ = [
    "PulseType",
    "HamiltonianConfig",
    "reference_states",
    "density_matrix",
    "embed_unitary",
    "not_gate_unitary",
    "ReferenceBatch",
    "prepare_reference_batch",
    "average_gate_fidelity",
    "leakage",
    "hamiltonian_terms",
    "average_fidelity",
    "FidelityScanRow",
    "scan_gate_times",
]
