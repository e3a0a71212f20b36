"""Whole-stream orchestration: text file <-> chuff container.

The chunker feeds the chunk codec one chunk at a time; with jobs > 1 a batch
of `jobs` chunks is encoded/decoded on a thread pool and written back in
chunk-index order, so memory stays bounded by `jobs` chunks.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, TextIO

from chuff.core.chunk_codec import ChunkCodec
from chuff.core.symbols import SymbolTextDecoder
from chuff.engine.chunker import CHUNK_SIZE_MAX, iter_symbol_chunks
from chuff.engine.container import HEADER_LEN, ContainerReader, ContainerWriter
from chuff.errors import UsageError
from chuff.settings import Settings

Report = Callable[[str], None]


@dataclass
class CompressStats:
    chunks: int = 0
    symbols: int = 0
    bytes_out: int = HEADER_LEN
    aborted: bool = False

    @property
    def bits_per_symbol(self) -> float:
        if self.symbols == 0:
            return 0.0
        return (self.bytes_out * 8) / self.symbols


@dataclass
class DecompressStats:
    chunks: int = 0
    symbols: int = 0
    total_symbols: int = 0
    truncated: bool = False

    @property
    def complete(self) -> bool:
        return self.symbols == self.total_symbols


def _batches(it, n: int):
    while True:
        batch = list(itertools.islice(it, n))
        if not batch:
            return
        yield batch


def compress_stream(
    text_fp: TextIO,
    out_fp: BinaryIO,
    *,
    chunk_size: int,
    jobs: int = 1,
    stop: threading.Event | None = None,
    report: Report | None = None,
) -> CompressStats:
    """Compress a text stream into a container written on a seekable binary stream.

    `stop` is checked between chunks (between batches when jobs > 1). On abort
    the header is patched with the symbols actually written, so the result is
    a complete, valid container of the prefix. The same holds when an
    exception (KeyboardInterrupt included) escapes mid-stream: the header is
    patched before it propagates.
    """
    if chunk_size <= 0 or chunk_size > CHUNK_SIZE_MAX:
        raise UsageError(f"chunk_size non valido: {chunk_size} (1..{CHUNK_SIZE_MAX})")
    codec = ChunkCodec()
    stats = CompressStats()
    jobs = max(1, int(jobs))
    writer = ContainerWriter(out_fp)
    index = 0

    chunks = iter_symbol_chunks(text_fp, chunk_size)
    ex = ThreadPoolExecutor(max_workers=jobs) if jobs > 1 else None
    try:
        while True:
            if stop is not None and stop.is_set():
                stats.aborted = True
                break
            batch = list(itertools.islice(chunks, jobs))
            if not batch:
                break
            indices = range(index, index + len(batch))
            if ex is not None:
                records = list(ex.map(codec.encode, batch, indices))
            else:
                records = [codec.encode(c, i) for c, i in zip(batch, indices)]
            index += len(batch)

            for rec in records:
                n = writer.write(rec)
                stats.chunks += 1
                stats.symbols += rec.length
                stats.bytes_out += n
                if report is not None:
                    report(
                        f"chunk {rec.index}: {rec.length} simboli, trie {len(rec.trie)} byte, "
                        f"payload {rec.payload_len} byte ({(n * 8) / rec.length:.3f} bit/simbolo)"
                    )
    except BaseException:
        # never leave the zero placeholder in front of records already written
        writer.close()
        raise
    finally:
        if ex is not None:
            ex.shutdown()

    writer.close()
    return stats


def decompress_stream(
    in_fp: BinaryIO,
    text_fp: TextIO,
    *,
    strict: bool = False,
    jobs: int = 1,
    report: Report | None = None,
) -> DecompressStats:
    codec = ChunkCodec()
    reader = ContainerReader(in_fp, strict=strict)
    decoder = SymbolTextDecoder()
    stats = DecompressStats(total_symbols=reader.total_symbols)
    jobs = max(1, int(jobs))

    ex = ThreadPoolExecutor(max_workers=jobs) if jobs > 1 else None
    try:
        for batch in _batches(iter(reader), jobs):
            if ex is not None:
                decoded = list(ex.map(codec.decode, batch))
            else:
                decoded = [codec.decode(r) for r in batch]
            for rec, symbols in zip(batch, decoded):
                text_fp.write(decoder.feed(symbols))
                stats.chunks += 1
                stats.symbols += len(symbols)
                if report is not None:
                    report(f"chunk {rec.index}: {len(symbols)} simboli decodificati")
    finally:
        if ex is not None:
            ex.shutdown()

    text_fp.write(decoder.finish())
    stats.truncated = reader.truncated
    if report is not None and not stats.complete:
        report(
            f"container incompleto: {stats.symbols} simboli su {stats.total_symbols}"
            + (" (record troncato)" if stats.truncated else "")
        )
    return stats


def compress_file(
    input_path: str | Path,
    output_path: str | Path,
    *,
    chunk_size: int | None = None,
    jobs: int | None = None,
    encoding: str | None = None,
    stop: threading.Event | None = None,
    report: Report | None = None,
    settings: Settings | None = None,
) -> CompressStats:
    s = settings if settings is not None else Settings.from_env()
    with open(input_path, "r", encoding=encoding or s.encoding, errors="surrogateescape", newline="") as fin:
        with open(output_path, "wb") as fout:
            return compress_stream(
                fin,
                fout,
                chunk_size=int(chunk_size or s.chunk_size),
                jobs=int(jobs or s.jobs),
                stop=stop,
                report=report,
            )


def decompress_file(
    input_path: str | Path,
    output_path: str | Path,
    *,
    strict: bool | None = None,
    jobs: int | None = None,
    encoding: str | None = None,
    report: Report | None = None,
    settings: Settings | None = None,
) -> DecompressStats:
    """Decompress a container to a text file.

    The container does not record the text encoding: pass the one used on
    compress to get the original bytes back.
    """
    s = settings if settings is not None else Settings.from_env()
    with open(input_path, "rb") as fin:
        with open(output_path, "w", encoding=encoding or s.encoding, errors="surrogateescape", newline="") as fout:
            return decompress_stream(
                fin,
                fout,
                strict=s.strict if strict is None else bool(strict),
                jobs=int(jobs or s.jobs),
                report=report,
            )
