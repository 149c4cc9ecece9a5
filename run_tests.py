#!/usr/bin/env python
"""Test runner for FactorialHR SDK."""

import sys
import subprocess
import argparse


def main():
    """Run the test suite, optionally restricted to one layer."""
    parser = argparse.ArgumentParser(description="Run FactorialHR SDK tests")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--unit", action="store_true", help="Run tests/unit only")
    group.add_argument("--integration", action="store_true", help="Run tests marked as integration only")
    parser.add_argument("--coverage", action="store_true", help="Report coverage of factorial_hr_sdk")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args()

    cmd = ["pytest"]

    if args.unit:
        cmd.append("tests/unit")
    elif args.integration:
        cmd.extend(["-m", "integration"])

    if args.verbose:
        cmd.append("-vv")

    if args.coverage:
        cmd.extend(["--cov=factorial_hr_sdk", "--cov-report=term-missing"])

    print(f"Running: {' '.join(cmd)}")
    return subprocess.run(cmd).returncode


if __name__ == "__main__":
    sys.exit(main())
