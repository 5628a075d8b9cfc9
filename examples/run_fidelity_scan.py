"""Runner: average gate error of Gaussian and DRAG pulses vs gate time."""

from dragpulse.config import DEFAULT_CONFIG
from dragpulse.fidelity import scan_gate_times
from dragpulse.plotting import format_scan_table, plot_fidelity_scan


def main() -> None:
    rows = scan_gate_times(
        DEFAULT_CONFIG.gate_times(),
        DEFAULT_CONFIG.hamiltonian_config(),
        max_workers=4,
    )
    print(format_scan_table(rows))
    best = min(rows, key=lambda row: row.error_drag)
    print(f"[Scan] Lowest DRAG error {best.error_drag:.3e} at tg={best.gate_time * 1e9:.1f} ns")
    plot_fidelity_scan(rows, output_path="img/fidelity_scan.svg", show_plot=False)


if __name__ == "__main__":
    main()
