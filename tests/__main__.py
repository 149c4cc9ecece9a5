"""Run the test suite with ``python -m tests``; extra arguments go to pytest."""

import sys
from pathlib import Path

import pytest


def main() -> int:
    args = sys.argv[1:] or [str(Path(__file__).parent), "--tb=short"]
    return pytest.main(args)


if __name__ == "__main__":
    sys.exit(main())
