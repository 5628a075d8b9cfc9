"""Gaussian vs DRAG pulse simulation CLI."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from .config import DEFAULT_CONFIG, ScanConfig, load_config
from .fidelity import leakage, scan_gate_times
from .params import PulseParameters
from .plotting import (
    format_scan_table,
    plot_fidelity_scan,
    plot_level_probabilities,
    save_scan_rows,
)
from .scenarios import (
    Scenario,
    drag_transmon_scenario,
    gaussian_transmon_scenario,
    not_gate_scenario,
)


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(description=__doc__ or "DRAG pulse simulation")
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional JSON file with scan settings.",
    )
    parser.add_argument(
        "--gate-time-ns",
        type=float,
        default=6.0,
        help="Gate time (ns) for the three example scenarios.",
    )
    parser.add_argument(
        "--anharmonicity-mhz",
        type=float,
        help="Override the transmon anharmonicity Delta/2pi in MHz.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("img"),
        help="Directory receiving the figures.",
    )
    parser.add_argument(
        "--skip-scan",
        action="store_true",
        help="Only run the three example scenarios.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker processes for the fidelity scan.",
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not display plot windows.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ScanConfig:
    """Create the scan configuration from the file and CLI overrides."""

    config = load_config(args.config) if args.config is not None else DEFAULT_CONFIG
    if args.anharmonicity_mhz is not None:
        config = replace(config, anharmonicity_mhz=args.anharmonicity_mhz)
    return config


def build_scenarios(config: ScanConfig, gate_time: float) -> List[Scenario]:
    params = PulseParameters.standard(
        gate_time,
        amplitude=config.amplitude,
        anharmonicity=config.anharmonicity,
        transition_ratio=config.transition_ratio,
        sigma_fraction=config.sigma_fraction,
    )
    return [
        not_gate_scenario(params),
        gaussian_transmon_scenario(params),
        drag_transmon_scenario(params),
    ]


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_arguments(argv)
    config = build_config(args)
    show = not args.no_show

    for scenario in build_scenarios(config, args.gate_time_ns * 1e-9):
        trajectory = scenario.run()
        probs = trajectory.level_probabilities()[-1]
        populations = ", ".join(f"P{level}={p:.6f}" for level, p in enumerate(probs))
        print(f"[{scenario.name}] final {populations}, leakage={leakage(trajectory):.3e}")
        plot_level_probabilities(
            trajectory,
            output_path=args.output_dir / f"{scenario.name}.svg",
            show_plot=show,
        )

    if args.skip_scan:
        return

    rows = scan_gate_times(
        config.gate_times(),
        config.hamiltonian_config(),
        max_workers=args.workers,
    )
    print(format_scan_table(rows))
    save_scan_rows(rows, args.output_dir / "fidelity_scan.json")
    plot_fidelity_scan(rows, output_path=args.output_dir / "fidelity_scan.svg", show_plot=show)


if __name__ == "__main__":
    main()
