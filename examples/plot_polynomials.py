#!/usr/bin/env python3
"""Plot the degree-6 Lagrange basis on uniform, Chebyshev-Gauss and Chebyshev-Gauss-Lobatto grids."""

import logging

from specol import run_problem

logging.basicConfig(level=logging.INFO)


def main() -> None:
    run_problem("basis", outdir="/tmp/specol/basis", save=False)


if __name__ == "__main__":
    main()
