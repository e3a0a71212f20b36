"""Runtime defaults from the environment.

  - CHUFF_CHUNK_SIZE=1048576  symbols per chunk
  - CHUFF_JOBS=1              worker threads for encode/decode
  - CHUFF_ENCODING=utf-8      text encoding of input/output files
  - CHUFF_STRICT=0            1 = truncated containers are an error
"""

from __future__ import annotations

import os
from dataclasses import dataclass

CHUNK_SIZE_DEFAULT = 1024 * 1024
JOBS_DEFAULT = 1
ENCODING_DEFAULT = "utf-8"


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    v = v.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)).strip())
    except Exception:
        return default


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return v.strip()


@dataclass(frozen=True)
class Settings:
    chunk_size: int = CHUNK_SIZE_DEFAULT
    jobs: int = JOBS_DEFAULT
    encoding: str = ENCODING_DEFAULT
    strict: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        chunk_size = _env_int("CHUFF_CHUNK_SIZE", CHUNK_SIZE_DEFAULT)
        if chunk_size <= 0:
            chunk_size = CHUNK_SIZE_DEFAULT
        return cls(
            chunk_size=chunk_size,
            jobs=max(1, _env_int("CHUFF_JOBS", JOBS_DEFAULT)),
            encoding=_env_str("CHUFF_ENCODING", ENCODING_DEFAULT),
            strict=_env_bool("CHUFF_STRICT", False),
        )
