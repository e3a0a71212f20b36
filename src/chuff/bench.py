"""Size comparison against general-purpose compressors.

Informational only: chunked Huffman has no cross-chunk model, so zlib/zstd
will usually win on real text. zstd is skipped when 'zstandard' is missing.
"""

from __future__ import annotations

import io
import time
import zlib
from pathlib import Path
from typing import Any

from chuff.engine.files import compress_stream

try:
    import zstandard as zstd  # type: ignore
except Exception:  # pragma: no cover
    zstd = None


def _have_zstd() -> bool:
    return zstd is not None


def _entry(name: str, size: int, original: int, seconds: float) -> dict[str, Any]:
    return {
        "codec": name,
        "bytes": int(size),
        "ratio": (size / original) if original else 0.0,
        "seconds": round(seconds, 6),
    }


def run_bench(path: Path, *, chunk_size: int, encoding: str = "utf-8", zstd_level: int = 19) -> dict[str, Any]:
    raw = Path(path).read_bytes()
    results: list[dict[str, Any]] = []

    t0 = time.perf_counter()
    out = io.BytesIO()
    text = io.StringIO(raw.decode(encoding, errors="surrogateescape"), newline="")
    stats = compress_stream(text, out, chunk_size=chunk_size)
    results.append(_entry("chuff", len(out.getvalue()), len(raw), time.perf_counter() - t0))

    t0 = time.perf_counter()
    results.append(_entry("zlib-9", len(zlib.compress(raw, 9)), len(raw), time.perf_counter() - t0))

    if _have_zstd():
        t0 = time.perf_counter()
        c = zstd.ZstdCompressor(level=int(zstd_level))
        results.append(
            _entry(f"zstd-{zstd_level}", len(c.compress(raw)), len(raw), time.perf_counter() - t0)
        )

    return {
        "input": str(path),
        "input_bytes": len(raw),
        "symbols": stats.symbols,
        "chunks": stats.chunks,
        "chunk_size": int(chunk_size),
        "results": results,
    }
