#!/usr/bin/env python3
"""Write or verify requirements.txt from the runtime dependencies in pyproject.toml.

Usage::

    python scripts/sync_requirements.py          # rewrite requirements.txt
    python scripts/sync_requirements.py --check  # fail when it is stale
"""

from __future__ import annotations

import argparse
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
REQUIREMENTS = ROOT / "requirements.txt"
HEADER = (
    "# Generated from pyproject.toml (runtime dependencies)\n"
    "# Do not edit manually; run: python scripts/sync_requirements.py\n"
)


def _declared() -> list[str]:
    pyproject = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))
    # Test tooling lives in the `test` extra and stays out of requirements.txt.
    return sorted(dep.strip() for dep in pyproject["project"]["dependencies"] if dep.strip())


def _pinned() -> list[str]:
    if not REQUIREMENTS.exists():
        return []
    lines = (line.split("#", 1)[0].strip() for line in REQUIREMENTS.read_text(encoding="utf-8").splitlines())
    return sorted(line for line in lines if line)


def main() -> None:
    """Regenerate requirements.txt, or compare it with ``--check``."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--check", action="store_true", help="Only verify, do not write.")
    args = parser.parse_args()

    declared = _declared()
    if not args.check:
        REQUIREMENTS.write_text(HEADER + "\n".join(declared) + "\n", encoding="utf-8")
        print(f"Wrote {len(declared)} requirements to {REQUIREMENTS.name}")
        return

    pinned = _pinned()
    missing = sorted(set(declared) - set(pinned))
    unknown = sorted(set(pinned) - set(declared))
    if missing or unknown:
        report = ["requirements.txt is out of sync with pyproject.toml."]
        report += [f"- missing: {entry}" for entry in missing]
        report += [f"- unexpected: {entry}" for entry in unknown]
        report.append("Run: python scripts/sync_requirements.py")
        raise SystemExit("\n".join(report))
    print("Dependency sync check passed.")


if __name__ == "__main__":
    main()
