"""Typed errors for chuff.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_TRUNCATED = 11
EXIT_INCONSISTENT = 12
EXIT_VERIFY_MISMATCH = 13


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (invalid args, invalid codec spec, etc.)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (malformed trie, corrupt record, unexpected error)"),
    ExitCodeInfo(EXIT_TRUNCATED, "TRUNCATED", "Container truncated inside a record (strict mode)"),
    ExitCodeInfo(EXIT_INCONSISTENT, "INCONSISTENT", "Declared lengths do not match the record contents"),
    ExitCodeInfo(EXIT_VERIFY_MISMATCH, "VERIFY_MISMATCH", "Restored text differs from the original"),
)

_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE: do not edit manually.\n")
    lines.append("> Source of truth: `src/chuff/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Most internal errors extend `ChuffError` and carry an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append(
        "- `decompress` is tolerant by default: a container cut inside a record ends the stream. "
        "Use `--strict` to get exit code 11 instead.\n"
    )
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class ChuffError(Exception):
    """Base error for chuff."""

    exit_code: int = EXIT_GENERIC


class UsageError(ChuffError):
    exit_code = EXIT_USAGE


class EmptyInputError(ChuffError):
    """A code tree was requested for a chunk with zero symbols."""


class CorruptPayload(ChuffError):
    exit_code = EXIT_GENERIC


class MalformedTrieError(CorruptPayload):
    pass


class TruncatedRecordError(CorruptPayload):
    exit_code = EXIT_TRUNCATED


class InconsistentLengthError(CorruptPayload):
    exit_code = EXIT_INCONSISTENT


class VerifyMismatch(ChuffError):
    exit_code = EXIT_VERIFY_MISMATCH
