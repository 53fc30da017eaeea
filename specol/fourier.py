"""Discrete Fourier analysis of sampled signals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy import fft as scipy_fft


def forward_dft(signal: np.ndarray, workers: Optional[int] = None) -> np.ndarray:
    """Complex forward DFT, any length, same length out."""
    z = np.asarray(signal, dtype=complex)
    if z.ndim != 1:
        raise ValueError(f"Signal must be one-dimensional, got shape {z.shape}")
    return scipy_fft.fft(z, workers=workers)


@dataclass
class Spectrum:
    """Single-sided amplitude spectrum.

    Attributes:
        frequency: Frequencies F*i/L for i = 0..L//2
        amplitude: 2|Z_i|/L
    """

    frequency: np.ndarray
    amplitude: np.ndarray

    @property
    def resolution(self) -> float:
        if self.frequency.shape[0] < 2:
            return 0.0
        return float(self.frequency[1] - self.frequency[0])

    def amplitude_at(self, f: float) -> float:
        """Amplitude of the bin nearest to frequency f."""
        return float(self.amplitude[int(np.argmin(np.abs(self.frequency - f)))])


def single_sided_spectrum(signal: np.ndarray, sampling_rate: float) -> Spectrum:
    """Amplitude spectrum of a real signal sampled at sampling_rate."""
    u = np.asarray(signal, dtype=float)
    L = u.shape[0]
    if L == 0:
        raise ValueError("Signal is empty")
    if sampling_rate <= 0.0:
        raise ValueError(f"Sampling rate must be positive, got {sampling_rate}")
    Z = forward_dft(u.astype(complex))
    M = L // 2 + 1
    i = np.arange(M, dtype=float)
    return Spectrum(
        frequency=float(sampling_rate) * i / L,
        amplitude=2.0 * np.abs(Z[:M]) / L,
    )


def find_peaks(spectrum: Spectrum, count: int = 2, min_amplitude: float = 0.0) -> List[Tuple[float, float]]:
    """Return the count largest local maxima as (frequency, amplitude), by frequency."""
    a = spectrum.amplitude
    if a.shape[0] < 3:
        return []
    interior = (a[1:-1] >= a[:-2]) & (a[1:-1] > a[2:]) & (a[1:-1] > min_amplitude)
    candidates = np.nonzero(interior)[0] + 1
    top = candidates[np.argsort(a[candidates])[::-1][:count]]
    return sorted((float(spectrum.frequency[k]), float(a[k])) for k in top)


def two_tone_signal(
    n_samples: int,
    sampling_rate: float,
    frequencies: Sequence[float] = (50.0, 120.0),
    amplitudes: Sequence[float] = (0.7, 1.0),
) -> Tuple[np.ndarray, np.ndarray]:
    """Sum of sinusoids sampled at t_i = i / sampling_rate; returns (t, u)."""
    if len(frequencies) != len(amplitudes):
        raise ValueError("frequencies and amplitudes must have the same length")
    t = np.arange(int(n_samples), dtype=float) / float(sampling_rate)
    u = np.zeros_like(t)
    for f, a in zip(frequencies, amplitudes):
        u += a * np.sin(2.0 * np.pi * f * t)
    return t, u


def add_normal_noise(u: np.ndarray, std: float, seed: Optional[int] = None) -> np.ndarray:
    """Return u plus zero-mean normal noise with standard deviation std."""
    rng = np.random.default_rng(seed)
    u = np.asarray(u, dtype=float)
    return u + rng.normal(0.0, float(std), size=u.shape)
