"""Developer utility to refresh tracking data and run the unit test suite."""

from __future__ import annotations
from tracking import t

import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _run(cmd: list[str]) -> int:
    t("scripts.run_checks._run")
    return subprocess.run(cmd, cwd=PROJECT_ROOT).returncode


def main() -> None:
    """Refresh the function inventory, then run the unit tests."""

    t("scripts.run_checks.main")
    steps = (
        ("function inventory", [sys.executable, "-m", "tracking.inventory"]),
        ("unit tests", [sys.executable, "-m", "pytest", "tests/unit", "-q"]),
    )

    for label, cmd in steps:
        print(f"Running {label}...")
        if _run(cmd) != 0:
            print(f"{label} failed")
            sys.exit(1)

    print("All checks passed.")


if __name__ == "__main__":
    main()
