from __future__ import annotations

from typing import Iterator, List, TextIO

from chuff.core.symbols import text_to_symbols

CHUNK_SIZE_MAX = 0xFFFFFFFF


def iter_symbol_chunks(fp: TextIO, chunk_size: int) -> Iterator[List[int]]:
    """
    Slice a text stream into chunks of exactly chunk_size symbols (last one shorter).

    Text is read chunk_size characters at a time; astral characters expand to
    two symbols, so the tail of one read is carried over to the next chunk.
    A surrogate pair may end up split across two chunks: symbols are code
    units, the decoder rejoins them.
    """
    if chunk_size <= 0 or chunk_size > CHUNK_SIZE_MAX:
        raise ValueError(f"chunk_size non valido: {chunk_size}")

    pending: List[int] = []
    while True:
        text = fp.read(chunk_size)
        if not text:
            break
        pending.extend(text_to_symbols(text))
        while len(pending) >= chunk_size:
            yield pending[:chunk_size]
            del pending[:chunk_size]

    if pending:
        yield pending
