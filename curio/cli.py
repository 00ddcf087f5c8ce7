import argparse
import asyncio
import json
import sys

from .config import get_settings
from .core.logging import configure_logging
from .jobs.runner import JOBS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="curio", description="Run Curio background jobs once")
    parser.add_argument("job", choices=sorted(JOBS), help="Job to run")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings())

    stats = asyncio.run(JOBS[args.job]())
    if stats is None:
        return 1
    print(json.dumps(stats, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
