#!/usr/bin/env python3
"""Check that ambientwatch.__version__ matches the pyproject.toml version."""

import re
import sys
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def package_version() -> str:
    text = (ROOT / "ambientwatch" / "__init__.py").read_text(encoding="utf-8")
    match = re.search(r'^__version__\s*=\s*"([^"]+)"', text, re.MULTILINE)
    return match.group(1) if match else ""


def project_version() -> str:
    with open(ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f).get("project", {}).get("version", "")


def main() -> int:
    init_ver = package_version()
    project_ver = project_version()

    if not init_ver:
        print("ERROR: no __version__ in ambientwatch/__init__.py")
        return 1
    if not project_ver:
        print("ERROR: no [project] version in pyproject.toml")
        return 1
    if init_ver != project_ver:
        print(f"VERSION MISMATCH: ambientwatch {init_ver} vs pyproject.toml {project_ver}")
        return 1

    print(f"version OK: {init_ver}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
