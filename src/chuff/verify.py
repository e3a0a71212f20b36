"""Verification helpers.

We implement:
  - file diff: compare original and restored text line by line
  - container verify: walk every record of a container file

Policy: light by default (headers, tries, payload lengths), --full also
decodes every chunk.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from pathlib import Path

from chuff.core.chunk_codec import ChunkCodec
from chuff.core.trie import trie_depth
from chuff.core.trie_io import deserialize_trie
from chuff.engine.container import HEADER_LEN, ContainerReader
from chuff.errors import InconsistentLengthError, VerifyMismatch


@dataclass(frozen=True)
class ChunkInfo:
    index: int
    length: int
    trie_bytes: int
    payload_bytes: int
    max_code_len: int

    @property
    def record_bytes(self) -> int:
        return 4 + 4 + self.trie_bytes + 4 + self.payload_bytes


@dataclass(frozen=True)
class ContainerReport:
    total_symbols: int
    symbols: int
    chunks: list[ChunkInfo]
    truncated: bool

    @property
    def complete(self) -> bool:
        return self.symbols == self.total_symbols

    @property
    def container_bytes(self) -> int:
        return HEADER_LEN + sum(c.record_bytes for c in self.chunks)

    def as_dict(self) -> dict:
        return {
            "total_symbols": self.total_symbols,
            "symbols": self.symbols,
            "chunks": len(self.chunks),
            "trie_bytes": sum(c.trie_bytes for c in self.chunks),
            "payload_bytes": sum(c.payload_bytes for c in self.chunks),
            "container_bytes": self.container_bytes,
            "complete": self.complete,
            "truncated": self.truncated,
        }


def verify_files(original: Path, restored: Path, *, encoding: str = "utf-8") -> int:
    """Compare two text files line by line. Returns the number of lines checked."""
    lineno = 0
    with open(original, "r", encoding=encoding, errors="surrogateescape", newline="") as fa:
        with open(restored, "r", encoding=encoding, errors="surrogateescape", newline="") as fb:
            for la, lb in itertools.zip_longest(fa, fb):
                lineno += 1
                if la is None or lb is None:
                    raise VerifyMismatch(f"i file hanno lunghezze diverse (riga {lineno})")
                if la != lb:
                    raise VerifyMismatch(f"verifica fallita alla riga {lineno}")
    return lineno


def verify_container_file(path: Path, *, full: bool = False, strict: bool = True) -> ContainerReport:
    """Walk a container file.

    Light: every trie must parse. Full: every chunk must also decode to
    exactly its declared length. A container ending between records is
    reported as incomplete, not as an error.
    """
    codec = ChunkCodec()
    infos: list[ChunkInfo] = []

    with Path(path).open("rb") as fp:
        reader = ContainerReader(fp, strict=strict)
        for rec in reader:
            root = deserialize_trie(rec.trie)
            if full:
                out = codec.decode(rec)
                if len(out) != rec.length:
                    raise InconsistentLengthError(
                        f"chunk {rec.index}: decodificati {len(out)} simboli su {rec.length}"
                    )
            infos.append(
                ChunkInfo(
                    index=rec.index,
                    length=rec.length,
                    trie_bytes=len(rec.trie),
                    payload_bytes=rec.payload_len,
                    max_code_len=trie_depth(root),
                )
            )

        return ContainerReport(
            total_symbols=reader.total_symbols,
            symbols=reader.symbols_read,
            chunks=infos,
            truncated=reader.truncated,
        )
