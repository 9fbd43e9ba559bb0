#!/usr/bin/env python3
"""Check the AmbientWatch string tables.

Both tables must define the same keys, and every literal key passed to
``t()`` in the package must exist in them.

Exit code 0 = all OK, 1 = problems found.
"""

import ast
import sys
from pathlib import Path

PACKAGE = Path(__file__).resolve().parent.parent / "ambientwatch"
TABLES = ("strings_en.py", "strings_fi.py")
# Keys looked up indirectly through data tables rather than t("...") literals
INDIRECT_PREFIXES = ("series_", "status_", "tui_mode_", "card_", "level_")


def table_keys(path: Path) -> set[str]:
    """Keys of the module-level STRINGS dict."""
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    for node in tree.body:
        if isinstance(node, ast.AnnAssign):
            target, value = node.target, node.value
        elif isinstance(node, ast.Assign) and len(node.targets) == 1:
            target, value = node.targets[0], node.value
        else:
            continue
        if isinstance(target, ast.Name) and target.id == "STRINGS" and isinstance(value, ast.Dict):
            return {k.value for k in value.keys if isinstance(k, ast.Constant) and isinstance(k.value, str)}
    return set()


def used_keys(package: Path) -> dict[str, set[str]]:
    """Literal first arguments of t() calls, per source file."""
    found: dict[str, set[str]] = {}
    for path in sorted(package.glob("*.py")):
        if path.name in TABLES:
            continue
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for node in ast.walk(tree):
            if (
                isinstance(node, ast.Call)
                and isinstance(node.func, ast.Name)
                and node.func.id == "t"
                and node.args
                and isinstance(node.args[0], ast.Constant)
                and isinstance(node.args[0].value, str)
            ):
                found.setdefault(node.args[0].value, set()).add(path.name)
    return found


def main() -> int:
    paths = [PACKAGE / name for name in TABLES]
    missing_files = [p for p in paths if not p.exists()]
    if missing_files:
        print("String files not found: " + ", ".join(str(p) for p in missing_files))
        return 1

    en_keys, fi_keys = (table_keys(p) for p in paths)
    ok = True

    for label, keys in (("strings_en.py", fi_keys - en_keys), ("strings_fi.py", en_keys - fi_keys)):
        if keys:
            ok = False
            print(f"Keys missing from {label} ({len(keys)}):")
            for key in sorted(keys):
                print(f"  - {key}")

    used = used_keys(PACKAGE)
    undefined = {k: files for k, files in used.items() if k not in en_keys}
    if undefined:
        ok = False
        print(f"Keys used but not defined ({len(undefined)}):")
        for key in sorted(undefined):
            print(f"  - {key} ({', '.join(sorted(undefined[key]))})")

    unused = {k for k in en_keys - set(used) if not k.startswith(INDIRECT_PREFIXES)}
    if unused:
        print(f"Warning: keys never looked up directly ({len(unused)}):")
        for key in sorted(unused):
            print(f"  - {key}")

    if ok:
        print(f"i18n OK: {len(en_keys)} keys in sync, {len(used)} in use")

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
