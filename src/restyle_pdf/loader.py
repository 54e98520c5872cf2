from __future__ import annotations

import logging
from typing import Any

from .contracts import ErrorCode, SourceRole
from .engines.base import PdfEngine
from .errors import EmptyDocumentError, ParseError, ReadError, describe_exception
from .sources import SourceFile

logger = logging.getLogger(__name__)

_READ_CODES = {
    SourceRole.CONTENT: ErrorCode.CONTENT_READ_ERROR,
    SourceRole.STYLE: ErrorCode.STYLE_READ_ERROR,
}
_PARSE_CODES = {
    SourceRole.CONTENT: ErrorCode.CONTENT_PARSE_ERROR,
    SourceRole.STYLE: ErrorCode.STYLE_PARSE_ERROR,
}
_EMPTY_CODES = {
    SourceRole.CONTENT: ErrorCode.CONTENT_EMPTY,
    SourceRole.STYLE: ErrorCode.STYLE_EMPTY,
}


def read_source(source: SourceFile, *, role: SourceRole) -> bytes:
    try:
        return source.read_bytes()
    except Exception as e:
        raise ReadError(
            f"Error reading the {role.value} PDF. The file may be corrupted.",
            code=_READ_CODES[role],
            detail=describe_exception(e),
        ) from e


def parse_document(engine: PdfEngine, data: bytes, *, role: SourceRole) -> Any:
    try:
        return engine.load(data=data)
    except Exception as e:
        raise ParseError(
            f"The {role.value} file is not a valid PDF or is corrupted.",
            code=_PARSE_CODES[role],
            detail=describe_exception(e),
        ) from e


def require_pages(engine: PdfEngine, doc: Any, *, role: SourceRole) -> int:
    """
    Return the page count, rejecting empty documents.

    A page count the engine cannot report counts as a parse failure.
    """

    try:
        count = engine.page_count(doc=doc)
    except Exception as e:
        raise ParseError(
            f"The {role.value} file is not a valid PDF or is corrupted.",
            code=_PARSE_CODES[role],
            detail=describe_exception(e),
        ) from e

    if count < 1:
        raise EmptyDocumentError(f"The {role.value} PDF is empty.", code=_EMPTY_CODES[role])
    logger.debug("%s document has %d page(s)", role.value, count)
    return count
