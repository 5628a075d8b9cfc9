"""Exception and warning types raised by the simulation core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from .solver import Trajectory


class ConfigurationError(ValueError):
    """Invalid parameters or operator/state shapes, detected before integration."""


class NumericalInstabilityError(RuntimeError):
    """The integrator could not meet its tolerance above the step-size floor."""

    def __init__(
        self,
        message: str,
        *,
        time_reached: float,
        trajectory: Optional["Trajectory"] = None,
    ) -> None:
        super().__init__(message)
        self.time_reached = time_reached
        self.trajectory = trajectory


class NormalizationDriftWarning(UserWarning):
    """State norm drifted away from one by more than the allowed tolerance."""


__all__ = ["ConfigurationError", "NumericalInstabilityError", "NormalizationDriftWarning"]
