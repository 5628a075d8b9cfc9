"""Figures and text reports for trajectories and fidelity scans."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Sequence, Union

import matplotlib.pyplot as plt

from .fidelity import FidelityScanRow
from .solver import Trajectory

LEVEL_LABELS = ("Ground State", "1st Excited State", "2nd Excited State")
QUBIT_LABELS = ("Ground State", "Excited State")


def _finish(output_path: Path | None, show_plot: bool) -> Path | None:
    if output_path is not None:
        output_path = Path(output_path).expanduser()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        plt.savefig(output_path, dpi=300, bbox_inches="tight")

    if show_plot:
        plt.show()
    else:
        plt.close()
    return output_path


def default_labels(dimension: int) -> Sequence[str]:
    if dimension == 2:
        return QUBIT_LABELS
    return LEVEL_LABELS[:dimension]


def plot_level_probabilities(
    trajectory: Trajectory,
    *,
    labels: Optional[Sequence[str]] = None,
    title: Optional[str] = None,
    output_path: Path | None = None,
    show_plot: bool = True,
) -> Path | None:
    """Plot the population of every level against time in ns."""

    if labels is None:
        labels = default_labels(trajectory.dimension)
    plt.figure()
    plt.plot(trajectory.times * 1e9, trajectory.level_probabilities())
    plt.xlabel("Time (ns)")
    plt.ylabel("Level Probabilities")
    plt.legend(list(labels))
    if title:
        plt.title(title)
    plt.grid(True)
    return _finish(output_path, show_plot)


def plot_fidelity_scan(
    rows: Sequence[FidelityScanRow],
    *,
    title: str = "Average gate error vs gate time",
    output_path: Path | None = None,
    show_plot: bool = True,
) -> Path | None:
    """Plot ``1 - F`` for Gaussian and DRAG pulses on a log scale."""

    gate_ns = [row.gate_time * 1e9 for row in rows]
    plt.figure()
    plt.semilogy(gate_ns, [max(row.error_gaussian, 1e-16) for row in rows], "o-", label="Gaussian")
    plt.semilogy(gate_ns, [max(row.error_drag, 1e-16) for row in rows], "s-", label="DRAG")
    plt.xlabel("Gate time (ns)")
    plt.ylabel("Average gate error 1 - F")
    plt.title(title)
    plt.legend()
    plt.grid(True, which="both")
    return _finish(output_path, show_plot)


def format_scan_table(rows: Sequence[FidelityScanRow]) -> str:
    lines: List[str] = [
        f"{'tg (ns)':>8}  {'F gaussian':>12}  {'F drag':>12}  "
        f"{'1-F gaussian':>13}  {'1-F drag':>11}"
    ]
    for row in rows:
        lines.append(
            f"{row.gate_time * 1e9:8.2f}  "
            f"{row.fidelity_gaussian:12.8f}  {row.fidelity_drag:12.8f}  "
            f"{row.error_gaussian:13.3e}  {row.error_drag:11.3e}"
        )
    return "\n".join(lines)


def save_scan_rows(rows: Sequence[FidelityScanRow], path: Union[str, Path]) -> Path:
    """Write the scan rows as a JSON list of records (SI gate times)."""
    filepath = Path(path).expanduser()
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with filepath.open("w", encoding="utf-8") as handle:
        json.dump([row.to_dict() for row in rows], handle, indent=2)
    return filepath


__all__ = [
    "LEVEL_LABELS",
    "QUBIT_LABELS",
    "default_labels",
    "plot_level_probabilities",
    "plot_fidelity_scan",
    "format_scan_table",
    "save_scan_rows",
]
