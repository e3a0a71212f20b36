from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from chuff.core.bits import pack_symbols, unpack_symbols
from chuff.core.codec_base import Codec
from chuff.core.freq import build_freq_table
from chuff.core.trie import build_code_table, build_trie
from chuff.core.trie_io import deserialize_trie, serialize_trie
from chuff.errors import InconsistentLengthError

U32_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class ChunkRecord:
    index: int      # sequence number of the chunk, ascending in the container
    length: int     # symbols in the chunk (N)
    trie: bytes     # preorder-serialized code tree
    payload: bytes  # bit-packed codes, LSB-first

    @property
    def payload_len(self) -> int:
        return len(self.payload)


def _check_u32(value: int, what: str) -> None:
    if value < 0 or value > U32_MAX:
        raise ValueError(f"{what} fuori range u32: {value}")


class ChunkCodec(Codec):
    """Independent Huffman code per chunk: frequencies -> trie -> codes -> bits."""

    codec_id = "huffman16"

    def encode(self, chunk: Sequence[int], index: int = 0) -> ChunkRecord:
        _check_u32(index, "chunk_index")
        _check_u32(len(chunk), "chunk_length")

        freq = build_freq_table(chunk)
        root = build_trie(freq)  # EmptyInputError on an empty chunk
        codes = build_code_table(root)
        payload, _nbits = pack_symbols(chunk, codes)
        _check_u32(len(payload), "payload_len")

        return ChunkRecord(index=index, length=len(chunk), trie=serialize_trie(root), payload=payload)

    def decode(self, record: ChunkRecord) -> list[int]:
        if record.length == 0:
            raise InconsistentLengthError(f"chunk {record.index}: lunghezza dichiarata 0")
        root = deserialize_trie(record.trie)
        return unpack_symbols(record.payload, root, record.length)


_DEFAULT_CODEC = ChunkCodec()


def encode_chunk(chunk: Sequence[int], index: int = 0) -> ChunkRecord:
    return _DEFAULT_CODEC.encode(chunk, index)


def decode_chunk(record: ChunkRecord) -> list[int]:
    return _DEFAULT_CODEC.decode(record)
