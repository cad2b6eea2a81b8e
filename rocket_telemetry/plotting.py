"""Quick-look plots of a generated telemetry dataset.

Example:
    >>> from rocket_telemetry.channels import Channel
    >>> from rocket_telemetry.plotting import plot_channels
    >>>
    >>> fig = plot_channels(dataset, [Channel.ALTITUDE, Channel.THRUST])
    >>> fig.savefig("flight.png")
"""

from collections.abc import Sequence

import matplotlib.pyplot as plt
import numpy as np
from beartype import beartype
from matplotlib.figure import Figure

from rocket_telemetry.channels import Channel
from rocket_telemetry.readings import TelemetryDataset
from rocket_telemetry.simulation.phases import PHASES

COLORS = {
    "primary": "#2E86AB",
    "phase": "#CCCCCC",
    "text": "#333333",
}


def _setup_style() -> None:
    """Configure matplotlib style for consistent appearance."""
    plt.rcParams.update({
        "font.family": "sans-serif",
        "font.sans-serif": ["Helvetica", "Arial", "DejaVu Sans"],
        "font.size": 10,
        "axes.titlesize": 12,
        "axes.labelsize": 10,
        "grid.alpha": 0.5,
    })


@beartype
def plot_channels(
    dataset: TelemetryDataset,
    channels: Sequence[Channel],
    show_phases: bool = True,
    figsize: tuple[float, float] | None = None,
    title: str | None = None,
) -> Figure:
    """Plot one or more channels against elapsed time, one axis per channel.

    Args:
        dataset: Generated dataset (numeric channels only)
        channels: Channels to plot, top to bottom
        show_phases: Shade alternate mission phases
        figsize: Figure size (width, height); scales with channel count by default
        title: Optional figure title

    Returns:
        matplotlib Figure
    """
    if not channels:
        raise ValueError("At least one channel is required")
    if dataset.is_empty:
        raise ValueError("Cannot plot an empty dataset")

    _setup_style()

    n = len(channels)
    fig, axes = plt.subplots(n, 1, sharex=True, figsize=figsize or (10, 2.5 * n), squeeze=False)

    t = np.arange(dataset.tick_count) / dataset.config.sample_rate_hz
    t_end = dataset.tick_count / dataset.config.sample_rate_hz

    for ax, channel in zip(axes[:, 0], channels):
        values = dataset.channel_values(channel)
        ax.plot(t, values, color=COLORS["primary"], linewidth=1.0)
        ax.set_ylabel(f"{channel.code} [{channel.unit}]")
        ax.grid(True, alpha=0.3)

        if show_phases:
            for phase in PHASES[1::2]:
                ax.axvspan(phase.start * t_end, phase.end * t_end, color=COLORS["phase"], alpha=0.3)

    axes[-1, 0].set_xlabel("Time since launch [s]")
    fig.suptitle(title or f"Telemetry: {dataset.config.launch_id}", color=COLORS["text"])

    fig.tight_layout()
    return fig
