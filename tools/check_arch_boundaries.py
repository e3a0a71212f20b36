"""Run the import-layering checks without pytest (pre-commit, quick CI step)."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path


def main() -> int:
    repo_root = Path(__file__).resolve().parents[1]
    test_path = repo_root / "tests" / "test_arch_boundaries.py"
    if not test_path.is_file():
        print("[chuff] tests/test_arch_boundaries.py non trovato", file=sys.stderr)
        return 3

    try:
        spec = importlib.util.spec_from_file_location("arch_boundaries", test_path)
        mod = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = mod
        spec.loader.exec_module(mod)
    except Exception as e:
        print(f"[chuff] errore inatteso: {e}", file=sys.stderr)
        return 3

    checks = [
        ("test_sources_are_found", mod.test_sources_are_found),
        ("test_no_low_level_imports_orchestrator", mod.test_no_low_level_imports_orchestrator),
    ]
    for layer, allowed in mod.LAYER_RULES:
        checks.append((f"layer {layer}", lambda layer=layer, allowed=allowed: mod.check_layer(layer, allowed)))

    failed = 0
    for name, fn in checks:
        try:
            fn()
        except AssertionError as e:
            failed += 1
            print(f"FAIL {name}\n{e}", file=sys.stderr)
        else:
            print(f"ok   {name}")

    if failed:
        return 2
    print("OK: architecture boundaries respected.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
