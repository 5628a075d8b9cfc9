"""Gaussian and fifth-order DRAG pulse simulation for qubits and transmons."""

from .errors import ConfigurationError, NormalizationDriftWarning, NumericalInstabilityError
from .params import PulseParameters
from .pulses import (
    gaussian,
    gaussian_derivative,
    normalization_constant,
    rotating_frame_gaussian_pulse,
    base_pulse,
    base_pulse_derivative,
    drag_in_phase,
    drag_quadrature,
    dynamical_detuning,
)
from .hamiltonian import (
    ConstantTerm,
    PulseTerm,
    drive_x,
    drive_y,
    hamiltonian_at,
    not_gate_terms,
    gaussian_transmon_terms,
    drag_transmon_terms,
)
from .solver import Trajectory, evolve
from .scenarios import (
    Scenario,
    not_gate_scenario,
    gaussian_transmon_scenario,
    drag_transmon_scenario,
)
from .fidelity import (
    PulseType,
    HamiltonianConfig,
    FidelityScanRow,
    reference_states,
    not_gate_unitary,
    average_gate_fidelity,
    average_fidelity,
    scan_gate_times,
    leakage,
)
from .config import ScanConfig, DEFAULT_CONFIG, load_config

__all__ = [
    "ConfigurationError", "NormalizationDriftWarning", "NumericalInstabilityError",
    "PulseParameters",
    "gaussian", "gaussian_derivative", "normalization_constant",
    "rotating_frame_gaussian_pulse", "base_pulse", "base_pulse_derivative",
    "drag_in_phase", "drag_quadrature", "dynamical_detuning",
    "ConstantTerm", "PulseTerm", "drive_x", "drive_y", "hamiltonian_at",
    "not_gate_terms", "gaussian_transmon_terms", "drag_transmon_terms",
    "Trajectory", "evolve",
    "Scenario", "not_gate_scenario", "gaussian_transmon_scenario", "drag_transmon_scenario",
    "PulseType", "HamiltonianConfig", "FidelityScanRow", "reference_states",
    "not_gate_unitary", "average_gate_fidelity", "average_fidelity",
    "scan_gate_times", "leakage",
    "ScanConfig", "DEFAULT_CONFIG", "load_config",
]
