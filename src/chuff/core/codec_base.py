from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chuff.core.chunk_codec import ChunkRecord


class Codec(ABC):
    """
    Minimal interface for a per-chunk codec.

    encode/decode are the only operations the container layer relies on:
    one chunk of symbols in, one self-contained record out (and back).
    """

    codec_id: str

    @abstractmethod
    def encode(self, chunk: Sequence[int], index: int = 0) -> "ChunkRecord":
        raise NotImplementedError

    @abstractmethod
    def decode(self, record: "ChunkRecord") -> list[int]:
        raise NotImplementedError
