#!/usr/bin/env python3
"""Solve u'' - 4u' + 4u = e^x + C with u(-1) = u(1) = 0 on a degree-4 grid."""

import logging

from specol import run_problem

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


def main() -> None:
    problem, result = run_problem("bvp1d", outdir="/tmp/specol/bvp1d")
    logger.info("max diff = %.6e", result["max_error"])


if __name__ == "__main__":
    main()
