#!/usr/bin/env python3
"""Deployment gate CLI entrypoint."""

import argparse

from deploygate.commands.wait import register_wait_command
from deploygate.logging_setup import setup_cli_logging


def main():
    parser = argparse.ArgumentParser(description="Wait for GitHub deployments of a commit to succeed")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every API request")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_wait_command(subparsers)

    args = parser.parse_args()
    setup_cli_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
