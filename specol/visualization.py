from __future__ import annotations

from typing import Callable, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from .fourier import Spectrum
from .interpolation import LagrangeInterpolant


def plot_basis_functions(
    interp: LagrangeInterpolant, nstation: int = 201, outpath: Optional[str] = None
) -> None:
    """Draw every Lagrange basis polynomial psi_p over [-1, 1]."""
    stations = np.linspace(-1.0, 1.0, nstation)
    fig, ax = plt.subplots(figsize=(8, 5), constrained_layout=True)
    ax.axhline(1.0, linestyle="--", color="black", linewidth=1.0)
    for p in range(interp.npoint):
        ax.plot(stations, interp.psi(p, stations))
    ax.plot(interp.x, np.zeros(interp.npoint), "o", color="black", markersize=4)
    ax.set_xlabel("$x$")
    ax.set_ylabel(r"$\psi(x)$")
    ax.set_title(f"{interp.grid_type.value}, N = {interp.N}")
    ax.grid(True, alpha=0.3)
    if outpath:
        fig.savefig(outpath, dpi=150)
    plt.close(fig)


def plot_nodal_solution(
    interp: LagrangeInterpolant,
    u: np.ndarray,
    analytical: Callable[[np.ndarray], np.ndarray],
    title: str = "",
    show_interpolant: bool = True,
    nstation: int = 201,
    outpath: Optional[str] = None,
) -> None:
    """Compare nodal values (and their interpolant) with an analytical curve."""
    stations = np.linspace(-1.0, 1.0, nstation)
    fig, ax = plt.subplots(figsize=(8, 5), constrained_layout=True)
    ax.plot(stations, analytical(stations), label="analytical")
    if show_interpolant:
        ax.plot(stations, interp.eval(u, stations), label="numerical")
    ax.plot(interp.x, u, linestyle="None", marker="o", markerfacecolor="none", label="nodes")
    ax.set_xlabel("$x$")
    ax.set_ylabel("$u(x)$")
    ax.legend()
    ax.grid(True, alpha=0.3)
    if title:
        ax.set_title(title)
    if outpath:
        fig.savefig(outpath, dpi=150)
    plt.close(fig)


def plot_signal_spectra(
    t: np.ndarray,
    u_clean: np.ndarray,
    u_noisy: np.ndarray,
    spectrum_clean: Spectrum,
    spectrum_noisy: Spectrum,
    n_show: int = 50,
    reference_levels: Sequence[float] = (0.7, 1.0),
    annotations: Sequence[float] = (50.0, 120.0),
    title: str = "",
    outpath: Optional[str] = None,
) -> None:
    """Three panels: time signals, clean spectrum, noisy spectrum."""
    fig, axs = plt.subplots(3, 1, figsize=(8, 10), constrained_layout=True)
    axs[0].plot(t[:n_show], u_clean[:n_show], color="blue", linewidth=2.0, label="Original signal")
    axs[0].plot(t[:n_show], u_noisy[:n_show], color="red", label="Altered signal")
    axs[0].set_xlabel("$t$ [s]")
    axs[0].set_ylabel("$u$")

    for ax, spectrum, color, label in (
        (axs[1], spectrum_clean, "blue", "Original signal"),
        (axs[2], spectrum_noisy, "red", "Altered signal"),
    ):
        for level in reference_levels:
            ax.axhline(level, linestyle="--", color="green", linewidth=1.0)
        ax.plot(spectrum.frequency, spectrum.amplitude, color=color, label=label)
        ax.set_xlabel("$f$ [Hz]")
        ax.set_ylabel("spectrum")
    for f in annotations:
        axs[1].text(f + 2.0, 0.02, f"{f:g} Hz")

    for ax in axs:
        ax.grid(True, alpha=0.3)
        ax.legend()
    if title:
        fig.suptitle(title)
    if outpath:
        fig.savefig(outpath, dpi=150)
    plt.close(fig)
