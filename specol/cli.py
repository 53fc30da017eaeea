"""Command-line interface for specol."""

import argparse
import logging
import os
import sys

from .problems import ProblemRegistry


def main(argv=None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="specol",
        description="Spectral collocation drivers (barycentric Lagrange interpolation)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  specol bvp1d
  specol heat1d --config configs/heat1d.yaml
  specol basis --outdir /tmp/specol_basis
  specol dft --no-plot -v
        """,
    )

    available_problems = ProblemRegistry.list_problems()
    parser.add_argument(
        "problem",
        choices=available_problems,
        help=f"Problem to run. Available: {', '.join(available_problems)}",
    )
    parser.add_argument("--config", type=str, help="Path to YAML/JSON configuration file")
    parser.add_argument("--outdir", type=str, help="Override output directory")
    parser.add_argument("--no-plot", action="store_true", help="Skip figure generation")
    parser.add_argument("--no-save", action="store_true", help="Skip writing the .npz solution")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    logger = logging.getLogger("specol")

    try:
        problem = ProblemRegistry.create_problem(name=args.problem, config_path=args.config)

        if args.outdir:
            problem.outdir = os.path.abspath(args.outdir)

        logger.debug("Output directory: %s", problem.outdir)
        problem.run(
            plot=False if args.no_plot else None,
            save=False if args.no_save else None,
        )

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
