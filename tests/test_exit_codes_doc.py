from __future__ import annotations

from pathlib import Path

from chuff.errors import (
    EXIT_CODES,
    EXIT_GENERIC,
    EXIT_TRUNCATED,
    CorruptPayload,
    EmptyInputError,
    InconsistentLengthError,
    MalformedTrieError,
    TruncatedRecordError,
    UsageError,
    VerifyMismatch,
    exit_code_info,
    render_exit_codes_markdown,
)


def test_exit_codes_doc_is_up_to_date() -> None:
    doc = Path(__file__).resolve().parents[1] / "docs" / "exit_codes.md"
    assert doc.read_text(encoding="utf-8") == render_exit_codes_markdown(), (
        "docs/exit_codes.md is stale: run scripts/gen_exit_codes_md.py"
    )


def test_exit_codes_are_unique() -> None:
    codes = [e.code for e in EXIT_CODES]
    assert len(codes) == len(set(codes))
    assert exit_code_info(EXIT_TRUNCATED).name == "TRUNCATED"
    assert exit_code_info(99) is None


def test_exception_exit_codes() -> None:
    assert UsageError().exit_code == 2
    assert EmptyInputError().exit_code == EXIT_GENERIC
    assert MalformedTrieError().exit_code == EXIT_GENERIC
    assert CorruptPayload().exit_code == EXIT_GENERIC
    assert TruncatedRecordError().exit_code == 11
    assert InconsistentLengthError().exit_code == 12
    assert VerifyMismatch().exit_code == 13
