"""chuff container.

Layout (big endian):
  [TOTAL(u64)] then, repeated until TOTAL symbols are covered:
  [INDEX(u32)|LENGTH(u32)|TRIE(preorder)|PAYLOAD_LEN(u32)|PAYLOAD]

No magic, no version byte. Payloads are always ceil(nbits/8) bytes long
(see core/bits.py).

Reading policy:
  - EOF exactly between two records is a normal end (partial/streamed file).
  - EOF inside a record: tolerant readers stop there, strict readers raise
    TruncatedRecordError.
"""

from __future__ import annotations

import io
from typing import BinaryIO, Iterable, Iterator, List, Optional, Tuple

from chuff.core.chunk_codec import ChunkRecord
from chuff.core.trie_io import read_trie
from chuff.errors import (
    CorruptPayload,
    InconsistentLengthError,
    TruncatedRecordError,
    UsageError,
)

HEADER_LEN = 8


def pack_record(rec: ChunkRecord) -> bytes:
    out = bytearray()
    out += rec.index.to_bytes(4, "big")
    out += rec.length.to_bytes(4, "big")
    out += rec.trie
    out += len(rec.payload).to_bytes(4, "big")
    out += rec.payload
    return bytes(out)


class ContainerWriter:
    """Streaming writer.

    With total_symbols=None the header is a placeholder patched by close(),
    which needs a seekable stream.
    """

    def __init__(self, fp: BinaryIO, total_symbols: Optional[int] = None):
        self._fp = fp
        self._declared = total_symbols
        self._written = 0
        self._last_index: Optional[int] = None
        self._closed = False
        self._header_pos = 0

        if total_symbols is None:
            if not fp.seekable():
                raise UsageError("container: totale non noto e stream non seekable")
            self._header_pos = fp.tell()
            fp.write(b"\x00" * HEADER_LEN)
        else:
            if total_symbols < 0 or total_symbols > 0xFFFFFFFFFFFFFFFF:
                raise ValueError(f"totale simboli fuori range u64: {total_symbols}")
            fp.write(int(total_symbols).to_bytes(HEADER_LEN, "big"))

    @property
    def symbols_written(self) -> int:
        return self._written

    def write(self, rec: ChunkRecord) -> int:
        """Append one record, return the bytes written."""
        if self._closed:
            raise ValueError("ContainerWriter: write su writer chiuso")
        if rec.length == 0:
            raise InconsistentLengthError(f"chunk {rec.index}: record vuoto non ammesso")
        if self._last_index is not None and rec.index <= self._last_index:
            raise CorruptPayload(
                f"chunk index non crescente: {rec.index} dopo {self._last_index}"
            )
        blob = pack_record(rec)
        self._fp.write(blob)
        self._last_index = rec.index
        self._written += rec.length
        return len(blob)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._declared is None:
            end = self._fp.tell()
            self._fp.seek(self._header_pos)
            self._fp.write(self._written.to_bytes(HEADER_LEN, "big"))
            self._fp.seek(end)
        elif self._declared != self._written:
            raise InconsistentLengthError(
                f"totale dichiarato {self._declared} ma scritti {self._written} simboli"
            )
        self._fp.flush()

    def __enter__(self) -> "ContainerWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()


class _RecordTruncated(Exception):
    pass


class ContainerReader:
    """Streaming reader: one ChunkRecord at a time, never the whole file."""

    def __init__(self, fp: BinaryIO, *, strict: bool = False):
        self._fp = fp
        self.strict = bool(strict)
        self.symbols_read = 0
        self.records_read = 0
        self.truncated = False

        head = fp.read(HEADER_LEN)
        if len(head) != HEADER_LEN:
            raise TruncatedRecordError(f"header troncato ({len(head)} byte su {HEADER_LEN})")
        self.total_symbols = int.from_bytes(head, "big")

    @property
    def complete(self) -> bool:
        return self.symbols_read == self.total_symbols

    def _read_exact(self, n: int, what: str) -> bytes:
        b = self._fp.read(n)
        if len(b) != n:
            raise _RecordTruncated(f"record troncato ({what}: {len(b)} byte su {n})")
        return b

    def _read_trie_bytes(self) -> bytes:
        # keep the raw bytes: ChunkRecord stores the serialized trie
        raw = bytearray()

        def _read(n: int) -> bytes:
            b = self._read_exact(n, "trie")
            raw.extend(b)
            return b

        read_trie(_read)
        return bytes(raw)

    def _read_record(self, first: bytes) -> ChunkRecord:
        head = first + self._read_exact(8 - len(first), "header chunk")
        index = int.from_bytes(head[0:4], "big")
        length = int.from_bytes(head[4:8], "big")
        trie = self._read_trie_bytes()
        plen = int.from_bytes(self._read_exact(4, "payload_len"), "big")
        payload = self._read_exact(plen, "payload")
        return ChunkRecord(index=index, length=length, trie=trie, payload=payload)

    def __iter__(self) -> Iterator[ChunkRecord]:
        last_index: Optional[int] = None
        while self.symbols_read < self.total_symbols:
            first = self._fp.read(1)
            if not first:
                # clean end between records
                return
            try:
                rec = self._read_record(first)
            except _RecordTruncated as e:
                if self.strict:
                    raise TruncatedRecordError(str(e)) from None
                self.truncated = True
                return

            if rec.length == 0:
                raise InconsistentLengthError(f"chunk {rec.index}: lunghezza dichiarata 0")
            if self.symbols_read + rec.length > self.total_symbols:
                raise InconsistentLengthError(
                    f"chunk {rec.index}: {self.symbols_read + rec.length} simboli "
                    f"oltre il totale dichiarato {self.total_symbols}"
                )
            if last_index is not None and rec.index <= last_index:
                raise CorruptPayload(f"chunk index non crescente: {rec.index} dopo {last_index}")

            last_index = rec.index
            self.symbols_read += rec.length
            self.records_read += 1
            yield rec

        if self.strict and self._fp.read(1):
            raise CorruptPayload("dati in eccesso dopo l'ultimo chunk")


def pack_container(records: Iterable[ChunkRecord], total_symbols: Optional[int] = None) -> bytes:
    recs = list(records)
    if total_symbols is None:
        total_symbols = sum(r.length for r in recs)
    buf = io.BytesIO()
    with ContainerWriter(buf, total_symbols=total_symbols) as w:
        for r in recs:
            w.write(r)
    return buf.getvalue()


def unpack_container(blob: bytes, *, strict: bool = False) -> Tuple[int, List[ChunkRecord]]:
    reader = ContainerReader(io.BytesIO(blob), strict=strict)
    return reader.total_symbols, list(reader)
