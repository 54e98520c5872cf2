from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .contracts import ErrorCode
from .engines.base import PdfEngine, close_documents
from .errors import PageProcessingError, describe_exception
from .fit import compute_fit

logger = logging.getLogger(__name__)

PAGE_PROCESSING_MESSAGE = "Error processing the PDF pages. Please check that the files are valid."


@dataclass(frozen=True, slots=True)
class Composite:
    doc: Any
    target_size: tuple[float, float]
    page_count: int


def target_page_size(engine: PdfEngine, style_doc: Any) -> tuple[float, float]:
    """
    The output page size: the style document's first page.

    Any further style pages are ignored.
    """

    return engine.page_size(doc=style_doc, index=0)


def build_composite(engine: PdfEngine, content_doc: Any, style_doc: Any) -> Composite:
    """
    Build a new document with one page per content page, each sized like the
    style document's first page and holding the content page contain-fitted and
    centered. Neither input document is modified.
    """

    try:
        target_w, target_h = target_page_size(engine, style_doc)
        out = engine.create()
    except Exception as e:
        raise PageProcessingError(
            PAGE_PROCESSING_MESSAGE,
            code=ErrorCode.PAGE_PROCESSING_ERROR,
            detail=describe_exception(e),
        ) from e

    try:
        n_pages = engine.page_count(doc=content_doc)
        for index in range(n_pages):
            source_w, source_h = engine.page_size(doc=content_doc, index=index)
            fit = compute_fit(source_w, source_h, target_w, target_h)

            page = engine.new_page(doc=out, width=target_w, height=target_h)
            embedded = engine.embed_page(dest=out, source=content_doc, index=index)
            engine.draw_page(page=page, embedded=embedded, fit=fit)

            logger.debug(
                "page %d: %.2fx%.2f -> %.2fx%.2f scale=%.4f offset=(%.2f, %.2f)",
                index + 1,
                source_w,
                source_h,
                target_w,
                target_h,
                fit.scale,
                fit.offset_x,
                fit.offset_y,
            )
    except Exception as e:
        close_documents(engine, [out])
        raise PageProcessingError(
            PAGE_PROCESSING_MESSAGE,
            code=ErrorCode.PAGE_PROCESSING_ERROR,
            detail=describe_exception(e),
        ) from e

    return Composite(doc=out, target_size=(target_w, target_h), page_count=n_pages)
