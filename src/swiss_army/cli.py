"""CLI entry point for swiss-army-exec.

Parses arguments, runs one command through the executor, and prints what
the child wrote.  The exit status mirrors the child's.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Dict, List

from .debug import debug_enabled
from .runner import ExecError, Executor


def _parse_env(pairs: List[str], parser: argparse.ArgumentParser) -> Dict[str, str]:
    env = dict(os.environ)
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            parser.error(f"--env expects KEY=VALUE, got {pair!r}")
        env[key] = value
    return env


def parse_args(argv=None) -> argparse.Namespace:
    """Build the argument parser and return parsed arguments."""
    parser = argparse.ArgumentParser(
        prog="swiss-army-exec",
        description="Run a command, stream its output, and report what it wrote.",
    )
    parser.add_argument("command", help='Program and arguments separated by spaces, e.g. "yarn install"')
    parser.add_argument(
        "--flag",
        action="append",
        default=[],
        metavar="NAME",
        help="Append --<kebab-name> to the command (repeatable), e.g. --flag noLockfile",
    )
    parser.add_argument("--cwd", default=None, help="Working directory for the command (default: current directory)")
    parser.add_argument("--env", action="append", default=[], metavar="KEY=VALUE", help="Extra environment variable (repeatable)")
    parser.add_argument("--stream", action="store_true", help="Echo stdout as it arrives")
    parser.add_argument("--json", action="store_true", help="Print result, errors and return code as JSON")
    parser.add_argument(
        "--debug",
        action="store_true",
        default=debug_enabled(),
        help="Trace arguments and output to stderr (default: $SWISS_ARMY_DEBUG)",
    )

    args = parser.parse_args(argv)
    args.env = _parse_env(args.env, parser)
    return args


def main(argv=None) -> None:
    """Entry point: run the command and forward its output."""
    args = parse_args(argv)

    def echo(chunk: str) -> None:
        sys.stdout.write(chunk)
        sys.stdout.flush()

    executor = Executor(debug=args.debug)
    try:
        out = executor.run_sync(
            args.command,
            args={name: True for name in args.flag},
            cwd=args.cwd,
            env=args.env,
            progress=echo if args.stream and not args.json else None,
        )
    except ExecError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.errors:
            print(e.errors, file=sys.stderr)
        sys.exit(2)

    if args.json:
        print(json.dumps({"result": out.result, "errors": out.errors, "returncode": out.returncode}, indent=2))
    else:
        if not args.stream and out.result:
            sys.stdout.write(out.result)
        if out.errors:
            sys.stderr.write(out.errors)

    if out.returncode:
        sys.exit(out.returncode if out.returncode > 0 else 128 - out.returncode)


if __name__ == "__main__":
    main()
