from __future__ import annotations

import json
import math

import pytest

from dragpulse import ConfigurationError
from dragpulse.config import DEFAULT_CONFIG, ScanConfig, load_config, save_config


def test_defaults_match_reference_transmon():
    assert DEFAULT_CONFIG.gate_times_ns == (3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0)
    assert DEFAULT_CONFIG.anharmonicity == pytest.approx(2 * math.pi * (-400e6))
    assert DEFAULT_CONFIG.gate_times()[0] == pytest.approx(3e-9)

    hc = DEFAULT_CONFIG.hamiltonian_config()
    assert hc.transition_ratio == pytest.approx(math.sqrt(2.0))
    assert hc.pulse_parameters(6e-9).sigma == pytest.approx(3e-9)


def test_save_and_load(tmp_path):
    config = ScanConfig(gate_times_ns=[4, 6], anharmonicity_mhz=-250.0)
    path = save_config(config, tmp_path / "nested" / "scan.json")
    loaded = load_config(path)
    assert loaded == config
    assert loaded.gate_times_ns == (4.0, 6.0)


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "scan.json"
    path.write_text(json.dumps({"gate_times_ns": [3], "anharmonicty_mhz": -400}))
    with pytest.raises(ConfigurationError):
        load_config(path)


@pytest.mark.parametrize(
    "payload",
    [
        "[1, 2, 3]",
        "{not json",
        json.dumps({"gate_times_ns": []}),
        json.dumps({"gate_times_ns": [0]}),
    ],
)
def test_invalid_files_raise_configuration_errors(tmp_path, payload):
    path = tmp_path / "scan.json"
    path.write_text(payload)
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_only_json_is_supported(tmp_path):
    path = tmp_path / "scan.yaml"
    path.write_text("gate_times_ns: [3]")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_zero_anharmonicity_is_rejected():
    with pytest.raises(ConfigurationError):
        ScanConfig(anharmonicity_mhz=0.0)
