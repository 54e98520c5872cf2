from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any

from .contracts import ErrorCode, RestyleResult
from .engines.base import PdfEngine
from .errors import SaveError, describe_exception

SAVE_ERROR_MESSAGE = "Error generating the final PDF. Please try again."


def serialize_document(engine: PdfEngine, doc: Any) -> bytes:
    try:
        return engine.save(doc=doc)
    except Exception as e:
        raise SaveError(SAVE_ERROR_MESSAGE, code=ErrorCode.SAVE_ERROR, detail=describe_exception(e)) from e


def _today() -> dt.date:
    return dt.date.today()


def result_filename(day: dt.date | None = None, *, prefix: str = "resultado") -> str:
    """
    Download name for a result: `<prefix>_<YYYY-MM-DD>.pdf`.
    """

    d = day if day is not None else _today()
    return f"{prefix}_{d.isoformat()}.pdf"


def write_result_pdf(
    *,
    result: RestyleResult,
    out_file: Path | None = None,
    out_dir: Path | None = None,
    prefix: str = "resultado",
) -> Path:
    """
    Write a successful result's PDF bytes.

    `out_file` wins over `out_dir`; with neither, the file lands in the current
    directory under its dated download name.
    """

    if not result.ok or result.pdf_bytes is None:
        raise ValueError("Only successful results carry a PDF to write")

    if out_file is None:
        out_file = (out_dir if out_dir is not None else Path.cwd()) / result_filename(prefix=prefix)

    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_bytes(result.pdf_bytes)
    return out_file


def serialize_restyle_result(result: RestyleResult) -> str:
    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_restyle_manifest_json(*, result: RestyleResult, out_manifest: Path) -> None:
    out_manifest.parent.mkdir(parents=True, exist_ok=True)
    out_manifest.write_text(serialize_restyle_result(result), encoding="utf-8")
