"""Spectrum of a two-tone signal with and without additive noise.

The signal is 0.7 sin(2 pi 50 t) + sin(2 pi 120 t) sampled at 1 kHz for
1500 samples; the corrupted copy adds zero-mean normal noise.
"""

import logging
from typing import Any, Dict

import numpy as np

from specol.fourier import add_normal_noise, find_peaks, single_sided_spectrum, two_tone_signal
from specol.visualization import plot_signal_spectra

from ..base import BaseProblem

logger = logging.getLogger(__name__)


class DFTProblem(BaseProblem):
    """Single-sided amplitude spectra of clean and noisy signals."""

    name = "dft"
    DEFAULT_CONFIG: Dict[str, Any] = {
        "signal": {
            "sampling_rate": 1000.0,
            "n_samples": 1500,
            "frequencies": [50.0, 120.0],
            "amplitudes": [0.7, 1.0],
            "noise_std": 4.0,
            "seed": 1234,
        },
        "analysis": {"n_peaks": 2, "n_show": 50},
        "io": {"plot": True, "save": True, "format": "png"},
    }

    def setup_parameters(self) -> None:
        sig = self.config["signal"]
        self.sampling_rate = float(sig["sampling_rate"])
        self.n_samples = int(sig["n_samples"])
        self.frequencies = [float(f) for f in sig["frequencies"]]
        self.amplitudes = [float(a) for a in sig["amplitudes"]]
        self.noise_std = float(sig.get("noise_std", 0.0))
        seed = sig.get("seed", None)
        self.seed = None if seed is None else int(seed)
        analysis = self.config["analysis"]
        self.n_peaks = int(analysis.get("n_peaks", len(self.frequencies)))
        self.n_show = int(analysis.get("n_show", 50))

    def solve(self) -> Dict[str, Any]:
        t, u_clean = two_tone_signal(self.n_samples, self.sampling_rate, self.frequencies, self.amplitudes)
        u_noisy = add_normal_noise(u_clean, self.noise_std, seed=self.seed)
        spec_clean = single_sided_spectrum(u_clean, self.sampling_rate)
        spec_noisy = single_sided_spectrum(u_noisy, self.sampling_rate)

        peaks = find_peaks(spec_clean, self.n_peaks)
        for f, a in peaks:
            logger.info("Peak at %.3f Hz, amplitude %.4f (noisy: %.4f)", f, a, spec_noisy.amplitude_at(f))
        self.spectra = (spec_clean, spec_noisy)
        return {
            "t": t,
            "u_clean": u_clean,
            "u_noisy": u_noisy,
            "frequency": spec_clean.frequency,
            "amplitude_clean": spec_clean.amplitude,
            "amplitude_noisy": spec_noisy.amplitude,
            "peak_frequencies": np.array([f for f, _ in peaks]),
            "peak_amplitudes": np.array([a for _, a in peaks]),
        }

    def plot(self, result: Dict[str, Any]) -> None:
        spec_clean, spec_noisy = self.spectra
        tones = " and ".join(
            f"a {f:g} Hz sinusoid of amplitude {a:g}" for f, a in zip(self.frequencies, self.amplitudes)
        )
        plot_signal_spectra(
            result["t"],
            result["u_clean"],
            result["u_noisy"],
            spec_clean,
            spec_noisy,
            n_show=self.n_show,
            reference_levels=self.amplitudes,
            annotations=self.frequencies,
            title=f"Signal with {tones}",
            outpath=self.output_path(self.name),
        )
