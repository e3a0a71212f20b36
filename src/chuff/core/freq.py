from __future__ import annotations

from collections.abc import Iterable

SYMBOL_MAX = 0xFFFF


def build_freq_table(symbols: Iterable[int]) -> dict[int, int]:
    """Count occurrences of each 16-bit symbol in one chunk.

    Empty input gives an empty table; building a trie from it is the caller's bug.
    """
    freq: dict[int, int] = {}
    for sym in symbols:
        if sym < 0 or sym > SYMBOL_MAX:
            raise ValueError(f"simbolo fuori range (16 bit): {sym}")
        freq[sym] = freq.get(sym, 0) + 1
    return freq
