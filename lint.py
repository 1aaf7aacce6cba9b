#!/usr/bin/env python3
"""Format and lint the RSS Aggregator sources with Ruff.

Runs ``ruff format`` followed by ``ruff check --fix`` on the given paths.
"""

import argparse
import glob
import os
import subprocess
import sys

DEFAULT_PATHS = ["src", "tests", "run_tests.py", "setup.py", "lint.py"]


def collect_files(paths):
    """Expand directories and glob patterns into a sorted list of Python files."""
    found = []
    for path in paths:
        if os.path.isdir(path):
            found.extend(glob.glob(os.path.join(path, "**", "*.py"), recursive=True))
        elif path.endswith(".py") and os.path.isfile(path):
            found.append(path)
        else:
            found.extend(glob.glob(path, recursive=True))
    return sorted({f for f in found if os.path.isfile(f)})


def run_ruff(args):
    """Run a ruff subcommand, echoing its output. Returns the exit code."""
    command = ["ruff"] + args
    print(f"Running: ruff {args[0]} ({len(args) - 1} arguments)")
    result = subprocess.run(command, capture_output=True, text=True)
    if result.stdout:
        print(result.stdout)
    if result.stderr:
        print(result.stderr, file=sys.stderr)
    return result.returncode


def main():
    """Parse arguments and run the formatter and linter."""
    parser = argparse.ArgumentParser(description="Run Ruff formatter and linter on the codebase")
    parser.add_argument(
        "--paths",
        nargs="+",
        default=DEFAULT_PATHS,
        help="Paths to format and lint (default: src tests and the root scripts)",
    )
    parser.add_argument(
        "--statistics", action="store_true", help="Show statistics during the check phase"
    )
    args = parser.parse_args()

    target_files = collect_files(args.paths)
    if not target_files:
        print("No Python files found to format or lint.")
        return 0

    print("\n--- Ruff format ---")
    if run_ruff(["format"] + target_files) != 0:
        # Formatting failures are reported by the check phase as well
        print("\nFormatter failed.", file=sys.stderr)

    print("\n--- Ruff check ---")
    check_args = ["check", "--fix"] + target_files
    if args.statistics:
        check_args.append("--statistics")
    if run_ruff(check_args) != 0:
        print("\nRuff check found errors (even after attempting fixes).", file=sys.stderr)
        return 1

    print("\nRuff format and check passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
