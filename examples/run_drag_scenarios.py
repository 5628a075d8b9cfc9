"""Runner: qubit NOT, leaky transmon NOT and DRAG-corrected transmon NOT."""

import math

from dragpulse import PulseParameters, leakage
from dragpulse.plotting import plot_level_probabilities
from dragpulse.scenarios import (
    drag_transmon_scenario,
    gaussian_transmon_scenario,
    not_gate_scenario,
)


def main() -> None:
    """Run the three 6 ns scenarios and save their level-probability plots."""
    tg = 6e-9
    params = PulseParameters(
        gate_time=tg,
        sigma=0.5 * tg,
        amplitude=math.pi,
        anharmonicity=2 * math.pi * (-400e6),  # Delta
        transition_ratio=math.sqrt(2.0),  # lambda
    )

    for scenario in (
        not_gate_scenario(params),
        gaussian_transmon_scenario(params),
        drag_transmon_scenario(params),
    ):
        traj = scenario.run()
        final = traj.level_probabilities()[-1]
        print(f"[{scenario.name}] P(final)={final}, leak={leakage(traj):.3e}")
        plot_level_probabilities(traj, output_path=f"img/{scenario.name}.svg", show_plot=False)


if __name__ == "__main__":
    main()
