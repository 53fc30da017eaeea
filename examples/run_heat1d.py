#!/usr/bin/env python3
"""Integrate u_t = u_xx from t = 0 to 0.1 on a degree-8 Chebyshev-Gauss-Lobatto grid."""

import logging

from specol import run_problem

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


def main() -> None:
    problem, result = run_problem("heat1d", outdir="/tmp/specol/heat1d")
    print(result["stats"])
    logger.info("max diff at t=%g: %.6e", result["t1"], result["max_error"])


if __name__ == "__main__":
    main()
