#!/usr/bin/env python3
"""Nodal error of the boundary-value and heat problems as the degree grows."""

import logging

from specol import run_problem

logging.basicConfig(level=logging.WARNING)


def main() -> None:
    print(f"{'N':>4} {'bvp1d':>12} {'heat1d':>12}")
    for N in (4, 6, 8, 10, 12, 16):
        config = {"grid": {"N": N}}
        _, bvp = run_problem("bvp1d", config=config, plot=False, save=False)
        _, heat = run_problem("heat1d", config=config, plot=False, save=False)
        print(f"{N:>4} {bvp['max_error']:12.3e} {heat['max_error']:12.3e}")


if __name__ == "__main__":
    main()
