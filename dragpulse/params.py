"""Pulse parameter records."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import ConfigurationError


@dataclass(frozen=True)
class PulseParameters:
    """Immutable parameter set for one pulse.

    Times are in seconds, the amplitude is the rotation angle in radians and
    the anharmonicity is an angular frequency (rad/s). ``anharmonicity`` and
    ``transition_ratio`` are only needed by the DRAG corrections.
    """

    gate_time: float
    sigma: float
    amplitude: float = math.pi
    anharmonicity: Optional[float] = None
    transition_ratio: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate parameters at construction time."""
        for name in ("gate_time", "sigma", "amplitude"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value}")
        if self.gate_time <= 0:
            raise ConfigurationError(f"Gate time must be positive, got {self.gate_time}")
        if self.sigma <= 0:
            raise ConfigurationError(f"Sigma must be positive, got {self.sigma}")
        if self.anharmonicity is not None:
            if not math.isfinite(self.anharmonicity):
                raise ConfigurationError(f"Anharmonicity must be finite, got {self.anharmonicity}")
            if self.anharmonicity == 0:
                raise ConfigurationError("Anharmonicity must be non-zero")
        if self.transition_ratio is not None and not math.isfinite(self.transition_ratio):
            raise ConfigurationError(
                f"Transition ratio must be finite, got {self.transition_ratio}"
            )

    @classmethod
    def standard(
        cls,
        gate_time: float,
        *,
        amplitude: float = math.pi,
        anharmonicity: Optional[float] = None,
        transition_ratio: Optional[float] = None,
        sigma_fraction: float = 0.5,
    ) -> "PulseParameters":
        """Parameters with ``sigma = sigma_fraction * gate_time``."""
        return cls(
            gate_time=gate_time,
            sigma=sigma_fraction * gate_time,
            amplitude=amplitude,
            anharmonicity=anharmonicity,
            transition_ratio=transition_ratio,
        )

    @property
    def half_gate_time(self) -> float:
        return 0.5 * self.gate_time

    def require_drag(self) -> None:
        """Raise unless the anharmonicity and transition ratio are both set."""
        if self.anharmonicity is None:
            raise ConfigurationError("DRAG pulses need a non-zero anharmonicity")
        if self.transition_ratio is None:
            raise ConfigurationError("DRAG pulses need a transition ratio")

    def to_dict(self) -> Dict[str, Optional[float]]:
        """Convert to dictionary for serialization."""
        return {
            "gate_time": float(self.gate_time),
            "sigma": float(self.sigma),
            "amplitude": float(self.amplitude),
            "anharmonicity": None if self.anharmonicity is None else float(self.anharmonicity),
            "transition_ratio": (
                None if self.transition_ratio is None else float(self.transition_ratio)
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Optional[float]]) -> "PulseParameters":
        """Reconstruct from dictionary."""
        try:
            gate_time = data["gate_time"]
            sigma = data["sigma"]
        except KeyError as exc:
            raise ConfigurationError(f"Missing pulse parameter {exc.args[0]!r}") from exc
        anharmonicity = data.get("anharmonicity")
        transition_ratio = data.get("transition_ratio")
        return cls(
            gate_time=float(gate_time),  # type: ignore[arg-type]
            sigma=float(sigma),  # type: ignore[arg-type]
            amplitude=float(data.get("amplitude", math.pi)),  # type: ignore[arg-type]
            anharmonicity=None if anharmonicity is None else float(anharmonicity),
            transition_ratio=None if transition_ratio is None else float(transition_ratio),
        )

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        text = (
            f"PulseParameters(tg={self.gate_time * 1e9:.3f}ns, "
            f"sigma={self.sigma * 1e9:.3f}ns, A={self.amplitude:.4f}"
        )
        if self.anharmonicity is not None:
            text += f", Delta/2pi={self.anharmonicity / (2 * math.pi) * 1e-6:.1f}MHz"
        if self.transition_ratio is not None:
            text += f", lambda={self.transition_ratio:.4f}"
        return text + ")"


__all__ = ["PulseParameters"]
