from __future__ import annotations

from pathlib import Path

import pytest

from chuff.engine.files import compress_file
from chuff.errors import CorruptPayload, InconsistentLengthError, TruncatedRecordError, VerifyMismatch
from chuff.verify import verify_container_file, verify_files


def _container(tmp_path: Path, text: str, chunk_size: int = 4) -> Path:
    inp = tmp_path / "in.txt"
    out = tmp_path / "in.chuff"
    inp.write_text(text, encoding="utf-8")
    compress_file(inp, out, chunk_size=chunk_size)
    return out


def test_verify_files_counts_lines(tmp_path: Path) -> None:
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("uno\ndue\ntre\n", encoding="utf-8")
    b.write_text("uno\ndue\ntre\n", encoding="utf-8")
    assert verify_files(a, b) == 3


def test_verify_files_reports_first_mismatching_line(tmp_path: Path) -> None:
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("uno\ndue\ntre\n", encoding="utf-8")
    b.write_text("uno\nDUE\ntre\n", encoding="utf-8")
    with pytest.raises(VerifyMismatch, match="riga 2"):
        verify_files(a, b)


def test_verify_files_line_endings_matter(tmp_path: Path) -> None:
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_bytes(b"uno\r\ndue\n")
    b.write_bytes(b"uno\ndue\n")
    with pytest.raises(VerifyMismatch, match="riga 1"):
        verify_files(a, b)


def test_verify_files_different_lengths(tmp_path: Path) -> None:
    a = tmp_path / "a.txt"
    b = tmp_path / "b.txt"
    a.write_text("uno\ndue\n", encoding="utf-8")
    b.write_text("uno\n", encoding="utf-8")
    with pytest.raises(VerifyMismatch, match="lunghezze diverse"):
        verify_files(a, b)


def test_verify_container_light_and_full(tmp_path: Path) -> None:
    path = _container(tmp_path, "aaaabbbbcccd")

    for full in (False, True):
        rep = verify_container_file(path, full=full)
        assert rep.complete
        assert rep.total_symbols == 12
        assert [c.index for c in rep.chunks] == [0, 1, 2]
        assert rep.container_bytes == path.stat().st_size

    d = rep.as_dict()
    assert d["chunks"] == 3
    assert d["symbols"] == 12
    assert d["truncated"] is False
    # "cccd": c=1 d=0 -> two leaves, code length 1
    assert rep.chunks[2].max_code_len == 1


def test_verify_container_incomplete_is_not_an_error(tmp_path: Path) -> None:
    path = _container(tmp_path, "aaaabbbb")
    raw = path.read_bytes()
    # drop the whole second record: "bbbb" is 8 + 3 + 4 + 1 bytes
    path.write_bytes(raw[: len(raw) - 16])

    rep = verify_container_file(path)
    assert not rep.complete
    assert rep.symbols == 4
    assert not rep.truncated


def test_verify_container_truncated_record(tmp_path: Path) -> None:
    path = _container(tmp_path, "aaaabbbb")
    path.write_bytes(path.read_bytes()[:-2])

    with pytest.raises(TruncatedRecordError):
        verify_container_file(path)

    rep = verify_container_file(path, strict=False)
    assert rep.truncated
    assert rep.symbols == 4


def test_full_verify_catches_short_payload(tmp_path: Path) -> None:
    path = _container(tmp_path, "abcdefgh", chunk_size=8)
    raw = bytearray(path.read_bytes())
    # bump the declared length of the only record past what the payload holds,
    # and the header total with it
    raw[0:8] = (40).to_bytes(8, "big")
    raw[12:16] = (40).to_bytes(4, "big")
    path.write_bytes(bytes(raw))

    verify_container_file(path, full=False)
    with pytest.raises(InconsistentLengthError):
        verify_container_file(path, full=True)


def test_verify_container_bad_trie(tmp_path: Path) -> None:
    path = _container(tmp_path, "abab")
    raw = bytearray(path.read_bytes())
    raw[16] = 0x09
    path.write_bytes(bytes(raw))

    with pytest.raises(CorruptPayload):
        verify_container_file(path)
