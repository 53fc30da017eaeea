#!/usr/bin/env python3
"""Amplitude spectrum of a 50 Hz + 120 Hz signal, clean and corrupted by noise."""

import logging

from specol import run_problem

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


def main() -> None:
    problem, result = run_problem("dft", outdir="/tmp/specol/dft")
    for f, a in zip(result["peak_frequencies"], result["peak_amplitudes"]):
        logger.info("%6.1f Hz: %.3f", f, a)


if __name__ == "__main__":
    main()
