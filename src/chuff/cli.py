"""chuff CLI.

This is the stable CLI entrypoint (console-script: ``chuff``, also ``python -m chuff``).

Settings precedence: CLI flag > --config spec > CHUFF_* environment > default.
"""

from __future__ import annotations

import argparse
import json
import sys
import tempfile
from dataclasses import replace
from pathlib import Path

from chuff.codec_spec import CodecSpecError, load_codec_spec
from chuff.errors import EXIT_GENERIC, EXIT_USAGE, ChuffError
from chuff.settings import Settings


def _pkg_version() -> str:
    try:
        from importlib.metadata import PackageNotFoundError, version

        try:
            return version("chuff")
        except PackageNotFoundError:
            # source checkout without installed metadata
            return "0+unknown"
    except Exception:
        return "0+unknown"


def _err(msg: str) -> None:
    print(f"[chuff] {msg}", file=sys.stderr)


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")
    p.add_argument("--verbose", action="store_true", help="Per-chunk progress on stderr")


def _add_settings_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--config",
        default=None,
        help="Codec spec JSON (@file.json or inline JSON). CLI flags still win.",
    )
    p.add_argument("--jobs", type=int, default=None, help="Worker threads (default: 1)")
    p.add_argument("--encoding", default=None, help="Text encoding (default: utf-8)")


def _resolve_settings(ns: argparse.Namespace) -> Settings:
    s = Settings.from_env()
    if getattr(ns, "config", None):
        s = load_codec_spec(str(ns.config)).apply(s)
    over: dict = {}
    if getattr(ns, "chunk_size", None) is not None:
        over["chunk_size"] = int(ns.chunk_size)
    if getattr(ns, "jobs", None) is not None:
        over["jobs"] = max(1, int(ns.jobs))
    if getattr(ns, "encoding", None):
        over["encoding"] = str(ns.encoding)
    if getattr(ns, "strict", False):
        over["strict"] = True
    return replace(s, **over) if over else s


def _reporter(ns: argparse.Namespace):
    if not getattr(ns, "verbose", False):
        return None
    return _err


def _print_stats(original: Path, compressed: Path, chunks: int, symbols: int) -> None:
    size_orig = original.stat().st_size
    size_comp = compressed.stat().st_size

    print("=== chuff stats ===")
    print(f"Input      : {original} ({size_orig} byte, {symbols} simboli)")
    print(f"Container  : {compressed} ({size_comp} byte, {chunks} chunk)")
    if symbols == 0:
        print("Input vuoto: niente statistiche sensate")
        print("===================")
        return
    print(f"Rapporto   : {size_comp / size_orig:.3f} (1.0 = nessuna compressione)")
    print(f"Bit/simbolo: {(size_comp * 8) / symbols:.3f} (16.0 = non compresso)")
    print("===================")


def _cmd_compress(ns: argparse.Namespace) -> int:
    from chuff.engine.files import compress_file

    s = _resolve_settings(ns)
    stats = compress_file(ns.input, ns.output, settings=s, report=_reporter(ns))
    _print_stats(ns.input, ns.output, stats.chunks, stats.symbols)
    return 0


def _cmd_decompress(ns: argparse.Namespace) -> int:
    from chuff.engine.files import decompress_file

    s = _resolve_settings(ns)
    stats = decompress_file(ns.input, ns.output, settings=s, report=_reporter(ns))
    if not stats.complete:
        _err(
            f"attenzione: container incompleto ({stats.symbols} simboli su {stats.total_symbols})"
        )
    print(f"Decompressione completata: {ns.output} ({stats.symbols} simboli, {stats.chunks} chunk)")
    return 0


def _cmd_roundtrip(ns: argparse.Namespace) -> int:
    from chuff.engine.files import compress_file, decompress_file
    from chuff.verify import verify_files

    s = _resolve_settings(ns)
    report = _reporter(ns)
    with tempfile.TemporaryDirectory(prefix="chuff-") as td:
        comp = Path(td) / "compressed.bin"
        back = Path(td) / "decompressed.txt"
        cstats = compress_file(ns.input, comp, settings=s, report=report)
        _print_stats(ns.input, comp, cstats.chunks, cstats.symbols)
        decompress_file(comp, back, settings=s, strict=True, report=report)
        lines = verify_files(ns.input, back, encoding=s.encoding)
    print(f"OK ({lines} righe verificate)")
    return 0


def _cmd_verify(ns: argparse.Namespace) -> int:
    from chuff.verify import verify_container_file

    rep = verify_container_file(ns.input, full=bool(ns.full))
    if ns.json:
        obj = {"schema": "chuff.verify.v1", "ok": True, "target": str(ns.input), "full": bool(ns.full)}
        obj.update(rep.as_dict())
        obj["version"] = _pkg_version()
        print(json.dumps(obj, ensure_ascii=False, separators=(",", ":")))
        return 0
    if not rep.complete:
        print(f"OK (incompleto: {rep.symbols} simboli su {rep.total_symbols})")
    else:
        print("OK")
    return 0


def _cmd_diff(ns: argparse.Namespace) -> int:
    from chuff.verify import verify_files

    lines = verify_files(ns.a, ns.b, encoding=ns.encoding)
    print(f"OK ({lines} righe identiche)")
    return 0


def _cmd_stats(ns: argparse.Namespace) -> int:
    from chuff.verify import verify_container_file

    rep = verify_container_file(ns.input, full=False)
    if ns.json:
        obj = rep.as_dict()
        obj["per_chunk"] = [
            {
                "index": c.index,
                "length": c.length,
                "trie_bytes": c.trie_bytes,
                "payload_bytes": c.payload_bytes,
                "max_code_len": c.max_code_len,
            }
            for c in rep.chunks
        ]
        print(json.dumps(obj, ensure_ascii=False, separators=(",", ":")))
        return 0

    print(f"{'chunk':>6} {'simboli':>10} {'trie':>8} {'payload':>10} {'maxlen':>6} {'bit/sym':>8}")
    for c in rep.chunks:
        print(
            f"{c.index:>6} {c.length:>10} {c.trie_bytes:>8} {c.payload_bytes:>10} "
            f"{c.max_code_len:>6} {(c.record_bytes * 8) / c.length:>8.3f}"
        )
    print(f"totale: {rep.symbols}/{rep.total_symbols} simboli, {rep.container_bytes} byte")
    return 0


def _cmd_bench(ns: argparse.Namespace) -> int:
    from chuff.bench import run_bench

    s = _resolve_settings(ns)
    res = run_bench(ns.input, chunk_size=s.chunk_size, encoding=s.encoding)
    if ns.json:
        print(json.dumps(res, ensure_ascii=False, separators=(",", ":")))
        return 0
    print(f"input: {res['input']} ({res['input_bytes']} byte, {res['chunks']} chunk)")
    for r in res["results"]:
        print(f"  {r['codec']:<10} {r['bytes']:>10} byte  ratio={r['ratio']:.3f}  {r['seconds']:.3f}s")
    return 0


def _cmd_config_validate(ns: argparse.Namespace) -> int:
    # load is the validation
    load_codec_spec(str(ns.spec))
    print("OK")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="chuff", description="Chunked 16-bit Huffman text compressor")
    p.add_argument("--version", action="version", version=f"chuff {_pkg_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_c = sub.add_parser("compress", help="Compress a text file into a container")
    p_c.add_argument("input", type=Path)
    p_c.add_argument("output", type=Path)
    p_c.add_argument("--chunk-size", type=int, default=None, help="Symbols per chunk (default: 1048576)")
    _add_settings_args(p_c)
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Decompress a container into a text file")
    p_d.add_argument("input", type=Path)
    p_d.add_argument("output", type=Path)
    p_d.add_argument(
        "--strict", action="store_true", help="A record cut by EOF is an error (exit 11)"
    )
    _add_settings_args(p_d)
    _add_common_args(p_d)

    p_r = sub.add_parser("roundtrip", help="Compress, decompress and verify line by line")
    p_r.add_argument("input", type=Path)
    p_r.add_argument("--chunk-size", type=int, default=None)
    _add_settings_args(p_r)
    _add_common_args(p_r)

    p_v = sub.add_parser("verify", help="Verify a container file")
    p_v.add_argument("input", type=Path)
    p_v.add_argument("--full", action="store_true", help="Also decode every chunk")
    p_v.add_argument("--json", action="store_true", help="Machine-readable output")
    _add_common_args(p_v)

    p_diff = sub.add_parser("diff", help="Compare two text files line by line")
    p_diff.add_argument("a", type=Path)
    p_diff.add_argument("b", type=Path)
    p_diff.add_argument("--encoding", default="utf-8")
    _add_common_args(p_diff)

    p_s = sub.add_parser("stats", help="Per-chunk table of a container")
    p_s.add_argument("input", type=Path)
    p_s.add_argument("--json", action="store_true")
    _add_common_args(p_s)

    p_b = sub.add_parser("bench", help="Compare container size with zlib/zstd")
    p_b.add_argument("input", type=Path)
    p_b.add_argument("--chunk-size", type=int, default=None)
    p_b.add_argument("--json", action="store_true")
    _add_settings_args(p_b)
    _add_common_args(p_b)

    p_cv = sub.add_parser("config-validate", help="Validate a codec spec (v1)")
    p_cv.add_argument("spec", help="Codec spec JSON (@file.json or inline JSON)")
    _add_common_args(p_cv)

    return p


_COMMANDS = {
    "compress": _cmd_compress,
    "decompress": _cmd_decompress,
    "roundtrip": _cmd_roundtrip,
    "verify": _cmd_verify,
    "diff": _cmd_diff,
    "stats": _cmd_stats,
    "bench": _cmd_bench,
    "config-validate": _cmd_config_validate,
}


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        return _COMMANDS[ns.cmd](ns)

    except SystemExit:
        raise
    except CodecSpecError as e:
        if getattr(ns, "debug", False):
            raise
        _err(str(e))
        return EXIT_USAGE
    except ChuffError as e:
        if getattr(ns, "debug", False):
            raise
        _err(str(e))
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        _err(f"error: {e}")
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
