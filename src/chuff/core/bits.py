"""Bit packing for Huffman payloads.

Bit order is LSB-first: bit i of the logical sequence lives in byte i // 8 at
position i % 8. Padding bits in the last byte are written as zero and are
never interpreted on decode, because decoding stops after N leaf descents.
"""

from __future__ import annotations

from collections.abc import Sequence

from chuff.core.trie import Internal, Leaf, Node
from chuff.errors import CorruptPayload, InconsistentLengthError


def pack_bits(bits: str) -> bytes:
    """'0'/'1' string -> bytes, LSB-first."""
    out = bytearray((len(bits) + 7) // 8)
    for i in range(0, len(bits), 8):
        group = bits[i:i + 8]
        out[i // 8] = int(group[::-1], 2)
    return bytes(out)


def pack_symbols(symbols: Sequence[int], codes: dict[int, str]) -> tuple[bytes, int]:
    """Encode symbols with a code table.

    Returns (payload, nbits) with len(payload) == ceil(nbits / 8).
    """
    try:
        bits = "".join(codes[s] for s in symbols)
    except KeyError as e:
        raise ValueError(f"simbolo senza codice: {e.args[0]}") from e
    return pack_bits(bits), len(bits)


def unpack_symbols(payload: bytes, root: Node, n: int) -> list[int]:
    """Decode exactly n symbols by walking the trie bit by bit.

    A single-leaf root consumes one '0' bit per symbol, as written by the encoder.
    """
    if n < 0:
        raise ValueError("numero di simboli negativo")

    total_bits = len(payload) * 8
    out: list[int] = []
    pos = 0

    if isinstance(root, Leaf):
        if n > total_bits:
            raise InconsistentLengthError(
                f"payload troppo corto: attesi {n} bit, disponibili {total_bits}"
            )
        for i in range(n):
            if (payload[i >> 3] >> (i & 7)) & 1:
                raise CorruptPayload(f"bit 1 inatteso in posizione {i} (trie a foglia singola)")
        return [root.symbol] * n

    for k in range(n):
        node: Node = root
        while isinstance(node, Internal):
            if pos >= total_bits:
                raise InconsistentLengthError(
                    f"payload esaurito dopo {k} simboli su {n} ({total_bits} bit)"
                )
            bit = (payload[pos >> 3] >> (pos & 7)) & 1
            node = node.right if bit else node.left
            pos += 1
        out.append(node.symbol)

    return out
