from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .artifacts import write_restyle_manifest_json
from .contracts import MIB, RestyleConfig, RestyleEngineName
from .module import RestyleSession
from .sources import SourceFile


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="restyle-pdf",
        description="Refit every page of a content PDF onto the page size of a style PDF.",
    )
    p.add_argument("--content", required=True, type=Path, help="Content PDF (pages to refit).")
    p.add_argument("--style", required=True, type=Path, help="Style PDF (its first page sets the page size).")
    out = p.add_mutually_exclusive_group()
    out.add_argument("--out", type=Path, default=None, help="Output PDF file.")
    out.add_argument(
        "--out-dir",
        type=Path,
        default=None,
        help="Output directory; the file is named resultado_<YYYY-MM-DD>.pdf. Default: current directory.",
    )
    p.add_argument("--max-size-mb", type=float, default=10.0, help="Per-file size limit in MiB (default: 10).")
    p.add_argument(
        "--engine",
        choices=[e.value for e in RestyleEngineName],
        default=RestyleEngineName.PYPDFIUM2.value,
        help="PDF backend.",
    )
    p.add_argument("--out-manifest", type=Path, default=None, help="Optional JSON summary of the run.")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    return p


def _declare(path: Path) -> SourceFile | None:
    try:
        return SourceFile.from_path(path)
    except OSError as e:
        print(f"Cannot open {path}: {e.strerror or e}", file=sys.stderr)
        return None


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    config = RestyleConfig(
        max_source_bytes=int(args.max_size_mb * MIB),
        engine=RestyleEngineName(args.engine),
    )
    session = RestyleSession(config)

    content = _declare(args.content)
    style = _declare(args.style)
    if content is None or style is None:
        return 2

    accepted = session.select_content(content) and session.select_style(style)
    if not accepted:
        if session.error is not None:
            print(session.error.message, file=sys.stderr)
        return 2

    result = session.run()
    if args.out_manifest is not None:
        write_restyle_manifest_json(result=result, out_manifest=args.out_manifest)

    if not result.ok:
        error = result.error
        if error is not None:
            code = "" if error.code is None else f"[{error.code.value}] "
            print(f"{code}{error.message}", file=sys.stderr)
        return 2

    written = session.save_result(out_file=args.out, out_dir=args.out_dir)
    print(written)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
