"""Scan configuration records and the JSON loader."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from .errors import ConfigurationError
from .fidelity import HamiltonianConfig


@dataclass(frozen=True)
class ScanConfig:
    """User-facing scan settings in lab units (ns, MHz)."""

    gate_times_ns: Tuple[float, ...] = (3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0)
    anharmonicity_mhz: float = -400.0
    transition_ratio: float = math.sqrt(2.0)
    sigma_fraction: float = 0.5
    amplitude: float = math.pi

    def __post_init__(self) -> None:
        gate_times = tuple(float(tg) for tg in self.gate_times_ns)
        if not gate_times:
            raise ConfigurationError("At least one gate time is required")
        if any(not (tg > 0 and math.isfinite(tg)) for tg in gate_times):
            raise ConfigurationError(f"Gate times must be positive, got {gate_times}")
        if self.anharmonicity_mhz == 0:
            raise ConfigurationError("Anharmonicity must be non-zero")
        if self.sigma_fraction <= 0:
            raise ConfigurationError(f"Sigma fraction must be positive, got {self.sigma_fraction}")
        object.__setattr__(self, "gate_times_ns", gate_times)

    @property
    def anharmonicity(self) -> float:
        """Anharmonicity as an angular frequency (rad/s)."""
        return 2.0 * math.pi * self.anharmonicity_mhz * 1e6

    def gate_times(self) -> List[float]:
        """Gate times in seconds."""
        return [tg * 1e-9 for tg in self.gate_times_ns]

    def hamiltonian_config(self) -> HamiltonianConfig:
        return HamiltonianConfig(
            anharmonicity=self.anharmonicity,
            transition_ratio=self.transition_ratio,
            sigma_fraction=self.sigma_fraction,
            amplitude=self.amplitude,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["gate_times_ns"] = list(self.gate_times_ns)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")
        kwargs = dict(data)
        if "gate_times_ns" in kwargs:
            kwargs["gate_times_ns"] = tuple(kwargs["gate_times_ns"])
        return cls(**kwargs)


DEFAULT_CONFIG = ScanConfig()


def load_config(path: Union[str, Path]) -> ScanConfig:
    """Read a :class:`ScanConfig` from a JSON file."""

    filepath = Path(path).expanduser()
    if filepath.suffix != ".json":
        raise ConfigurationError(f"Unsupported file format: {filepath.suffix}")
    try:
        with filepath.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {filepath}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a JSON object in {filepath}")
    return ScanConfig.from_dict(data)


def save_config(config: ScanConfig, path: Union[str, Path]) -> Path:
    filepath = Path(path).expanduser()
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with filepath.open("w", encoding="utf-8") as handle:
        json.dump(config.to_dict(), handle, indent=2)
    return filepath


__all__ = ["ScanConfig", "DEFAULT_CONFIG", "load_config", "save_config"]
