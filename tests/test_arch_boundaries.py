from __future__ import annotations

import ast
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
PACKAGE_ROOT = "chuff"

# High-level orchestrator modules.
# LOW-level code (core/engine/settings/codec_spec) must NEVER import these.
#
# IMPORTANT:
#   codec_spec and settings are contracts, not ORCH: cli reads them, engine
#   reads settings.
ORCH_PREFIXES: tuple[str, ...] = (
    "chuff.cli",
    "chuff.__main__",
    "chuff.verify",
    "chuff.bench",
)

# layer -> packages it may import
LAYER_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    # the pure codec: no files, threads or containers
    ("chuff.core", ("chuff.core", "chuff.errors")),
    ("chuff.engine", ("chuff.core", "chuff.engine", "chuff.errors", "chuff.settings")),
)


def _under(mod: str, prefix: str) -> bool:
    return mod == prefix or mod.startswith(prefix + ".")


def _module_name(py: Path) -> str:
    parts = list(py.relative_to(SRC_DIR).with_suffix("").parts)
    if parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)


def _package_imports() -> list[tuple[str, str, Path, int]]:
    """(importer, imported, file, lineno) for every chuff -> chuff import."""
    edges: list[tuple[str, str, Path, int]] = []
    for py in sorted((SRC_DIR / PACKAGE_ROOT).rglob("*.py")):
        mod = _module_name(py)
        pkg = mod if py.name == "__init__.py" else mod.rpartition(".")[0]
        tree = ast.parse(py.read_text(encoding="utf-8"), filename=str(py))
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                targets = [a.name for a in node.names]
            elif isinstance(node, ast.ImportFrom):
                if node.level:
                    base = pkg.split(".")[: len(pkg.split(".")) - node.level + 1]
                    targets = [".".join(base + ([node.module] if node.module else []))]
                else:
                    targets = [node.module or ""]
            else:
                continue
            for dst in targets:
                if _under(dst, PACKAGE_ROOT) and dst != mod:
                    edges.append((mod, dst, py, node.lineno))
    return edges


def _format(violations: list[tuple[str, str, Path, int]]) -> str:
    return "\n".join(f"  {f}:{ln}  {src}  ->  {dst}" for src, dst, f, ln in violations)


def check_layer(layer: str, allowed: tuple[str, ...]) -> None:
    violations = [
        e
        for e in _package_imports()
        if _under(e[0], layer) and not any(_under(e[1], a) for a in allowed)
    ]
    assert not violations, f"{layer} imports outside {allowed}:\n" + _format(violations)


def test_sources_are_found() -> None:
    assert (SRC_DIR / PACKAGE_ROOT / "cli.py").is_file(), f"Expected package at: {SRC_DIR}"
    assert _package_imports()


def test_no_low_level_imports_orchestrator() -> None:
    """
    Hard dependency direction:
      ORCH (cli, verify, bench) -> may depend on LOW
      LOW                       -> must NOT depend on ORCH
    """

    def is_orch(m: str) -> bool:
        return any(_under(m, p) for p in ORCH_PREFIXES)

    violations = [e for e in _package_imports() if not is_orch(e[0]) and is_orch(e[1])]
    assert not violations, "Forbidden imports detected (LOW -> ORCH):\n" + _format(violations)


@pytest.mark.parametrize("layer, allowed", LAYER_RULES)
def test_layer_imports(layer: str, allowed: tuple[str, ...]) -> None:
    check_layer(layer, allowed)
