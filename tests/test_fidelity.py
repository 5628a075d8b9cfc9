from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")

from dragpulse import ConfigurationError, constants
from dragpulse.fidelity import (
    FidelityScanRow,
    HamiltonianConfig,
    PulseType,
    average_fidelity,
    average_gate_fidelity,
    density_matrix,
    embed_unitary,
    not_gate_unitary,
    prepare_reference_batch,
    reference_states,
    scan_gate_times,
)

DELTA = 2 * math.pi * (-400e6)


@pytest.fixture(scope="module")
def config() -> HamiltonianConfig:
    return HamiltonianConfig(anharmonicity=DELTA)


def test_reference_states_cover_the_bloch_axes():
    states = reference_states(3)
    assert len(states) == 6
    for psi in states:
        assert psi.shape == (3,)
        assert np.linalg.norm(psi) == pytest.approx(1.0)
        assert psi[2] == 0
    # Mixture of the six axis states is maximally mixed on the logical subspace.
    mixture = sum(density_matrix(psi) for psi in states) / 6
    assert np.allclose(mixture, np.diag([0.5, 0.5, 0.0]))


def test_embedded_unitary_is_identity_outside_logical_subspace():
    U = not_gate_unitary(3)
    assert np.allclose(U[:2, :2], constants.sx)
    assert U[2, 2] == 1
    assert np.allclose(U @ U.conj().T, np.eye(3))
    with pytest.raises(ConfigurationError):
        embed_unitary(np.eye(3), 3)


def test_ideal_gate_has_unit_fidelity():
    U = not_gate_unitary(3)
    batch = prepare_reference_batch(U)
    finals = [-1j * (U @ psi) for psi in batch.states]
    assert average_gate_fidelity(U, finals, batch=batch) == pytest.approx(1.0)


def test_identity_instead_of_not_gate():
    """Doing nothing keeps only the X axis states: F = (1 + 1 + 0 + 0 + 0 + 0) / 6."""

    U = not_gate_unitary(2)
    finals = list(reference_states(2))
    assert average_gate_fidelity(U, finals) == pytest.approx(1.0 / 3.0)


def test_final_state_count_must_match():
    with pytest.raises(ConfigurationError):
        average_gate_fidelity(not_gate_unitary(2), [constants.basis(2, 0)])


def test_two_level_gaussian_not_gate_is_nearly_perfect():
    config = HamiltonianConfig(anharmonicity=DELTA, dimension=2)
    assert average_fidelity(PulseType.GAUSSIAN, 6e-9, config) == pytest.approx(1.0, abs=1e-6)
    with pytest.raises(ConfigurationError):
        average_fidelity(PulseType.DRAG, 6e-9, config)


def test_fidelity_is_bounded(config):
    for kind in PulseType:
        value = average_fidelity(kind, 6e-9, config)
        assert 0.0 <= value <= 1.0


def test_scan_rows_follow_input_order(config):
    rows = scan_gate_times([5e-9, 3e-9], config)
    assert [row.gate_time for row in rows] == [5e-9, 3e-9]
    assert all(isinstance(row, FidelityScanRow) for row in rows)
    assert rows[0].error_gaussian == pytest.approx(1.0 - rows[0].fidelity_gaussian)


def test_drag_beats_gaussian_across_the_scan(config):
    rows = scan_gate_times([t * 1e-9 for t in range(3, 10)], config)
    assert len(rows) == 7
    for row in rows:
        assert row.error_drag < row.error_gaussian, row


def test_parallel_scan_matches_sequential(config):
    sequential = scan_gate_times([4e-9], config)
    parallel = scan_gate_times([4e-9], config, max_workers=2)
    assert parallel[0].fidelity_gaussian == pytest.approx(sequential[0].fidelity_gaussian)
    assert parallel[0].fidelity_drag == pytest.approx(sequential[0].fidelity_drag)


def test_scan_validates_before_integrating(config):
    with pytest.raises(ConfigurationError):
        scan_gate_times([4e-9, -1e-9], config)
    with pytest.raises(ConfigurationError):
        scan_gate_times([4e-9], HamiltonianConfig(anharmonicity=DELTA, dimension=2))


def test_config_validation():
    with pytest.raises(ConfigurationError):
        HamiltonianConfig(anharmonicity=0.0)
    with pytest.raises(ConfigurationError):
        HamiltonianConfig(anharmonicity=DELTA, dimension=4)
