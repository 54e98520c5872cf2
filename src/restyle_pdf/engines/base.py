from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..contracts import FitTransform

logger = logging.getLogger(__name__)


class PdfEngine(ABC):
    """
    PDF capability interface used by the restyle pipeline.

    Document, page and embedded-page handles are opaque to the pipeline; only the
    engine that produced a handle may be given it back.

    Engines must:
    - Leave source documents untouched (embedding copies, never moves)
    - Report page sizes in PDF points
    - Raise on failure; the pipeline classifies the exception per stage
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def load(self, *, data: bytes) -> Any:
        raise NotImplementedError

    @abstractmethod
    def create(self) -> Any:
        raise NotImplementedError

    @abstractmethod
    def page_count(self, *, doc: Any) -> int:
        raise NotImplementedError

    @abstractmethod
    def page_size(self, *, doc: Any, index: int) -> tuple[float, float]:
        """
        Return (width, height) of the zero-indexed page, in points.
        """

        raise NotImplementedError

    @abstractmethod
    def new_page(self, *, doc: Any, width: float, height: float) -> Any:
        """
        Append an empty page of the given size and return its handle.
        """

        raise NotImplementedError

    @abstractmethod
    def embed_page(self, *, dest: Any, source: Any, index: int) -> Any:
        """
        Capture page `index` of `source` as a reusable drawable form owned by `dest`.
        """

        raise NotImplementedError

    @abstractmethod
    def draw_page(self, *, page: Any, embedded: Any, fit: FitTransform) -> None:
        """
        Draw `embedded` onto `page`, scaled uniformly by `fit.scale` with its
        lower-left corner at (fit.offset_x, fit.offset_y).
        """

        raise NotImplementedError

    @abstractmethod
    def save(self, *, doc: Any) -> bytes:
        raise NotImplementedError

    def close(self, *, doc: Any) -> None:
        """
        Release a document handle. Default: nothing to release.
        """

        return None


def close_documents(engine: PdfEngine, docs: list[Any]) -> None:
    """
    Close handles in reverse order of opening. A failing close is logged, never
    raised, so it cannot replace the error that led to the cleanup.
    """

    for doc in reversed(docs):
        try:
            engine.close(doc=doc)
        except Exception as e:
            logger.debug("ignoring failure while closing a document: %r", e)
