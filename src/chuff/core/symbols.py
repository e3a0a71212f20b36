"""Text <-> 16-bit symbols (UTF-16 code units).

Astral characters become two symbols (surrogate pair). Lone surrogates are
carried through untouched ("surrogatepass"), which is what lets text read with
errors="surrogateescape" round-trip byte for byte.
"""

from __future__ import annotations

import codecs
import struct
from collections.abc import Sequence

_UTF16 = "utf-16-be"
_ERRORS = "surrogatepass"

_HIGH_FIRST = "\ud800"
_HIGH_LAST = "\udbff"
_REPLACEMENT = "\ufffd"


def text_to_symbols(text: str) -> list[int]:
    raw = text.encode(_UTF16, _ERRORS)
    return list(struct.unpack(f">{len(raw) // 2}H", raw))


def symbols_to_bytes(symbols: Sequence[int]) -> bytes:
    return struct.pack(f">{len(symbols)}H", *symbols)


def symbols_to_text(symbols: Sequence[int]) -> str:
    return symbols_to_bytes(symbols).decode(_UTF16, _ERRORS)


class SymbolTextDecoder:
    """Incremental symbols -> text.

    Keeps a high surrogate at the end of one chunk until the next chunk
    supplies its low half. A high surrogate still pending at finish() (the
    stream was cut inside a pair) comes out as U+FFFD: no text codec can
    write it, surrogateescape included.
    """

    def __init__(self) -> None:
        self._dec = codecs.getincrementaldecoder(_UTF16)(errors=_ERRORS)

    def feed(self, symbols: Sequence[int]) -> str:
        return self._dec.decode(symbols_to_bytes(symbols), final=False)

    def finish(self) -> str:
        tail = self._dec.decode(b"", final=True)
        return "".join(_REPLACEMENT if _HIGH_FIRST <= ch <= _HIGH_LAST else ch for ch in tail)
