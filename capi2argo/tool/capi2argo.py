"""Command line tool for converting CAPI kubeconfig secrets into Argo CD clusters."""

import argparse
import asyncio
import logging
import sys
import traceback

from capi2argo.exceptions import Capi2ArgoException
from . import convert

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for registering CAPI clusters with Argo CD.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    convert.ConvertAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """capi2argo command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except Capi2ArgoException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("capi2argo error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
