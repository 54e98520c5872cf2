from __future__ import annotations

import io
from typing import Any

from ..contracts import FitTransform

from .base import PdfEngine


class _EmptyPdf:
    """
    Stand-in for a well-formed PDF with no pages, which PDFium refuses to open.
    """

    def __len__(self) -> int:
        return 0

    def close(self) -> None:
        return None


class Pypdfium2Engine(PdfEngine):
    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        try:
            import pypdfium2 as pdfium  # type: ignore

            return getattr(pdfium, "__version__", None)
        except Exception:
            return None

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise RuntimeError(
                "Missing dependency: pypdfium2 is required to restyle PDFs."
            ) from e

    def load(self, *, data: bytes) -> Any:
        pdfium = self._require_pdfium()
        try:
            return pdfium.PdfDocument(bytes(data))
        except pdfium.PdfiumError as e:
            # PDFium reports "success" when the file parsed but has zero pages.
            if getattr(e, "err_code", None) == pdfium.raw.FPDF_ERR_SUCCESS:
                return _EmptyPdf()
            raise

    def create(self) -> Any:
        pdfium = self._require_pdfium()
        return pdfium.PdfDocument.new()

    def page_count(self, *, doc: Any) -> int:
        return len(doc)

    def page_size(self, *, doc: Any, index: int) -> tuple[float, float]:
        width, height = doc.get_page_size(index)
        return float(width), float(height)

    def new_page(self, *, doc: Any, width: float, height: float) -> Any:
        return doc.new_page(width, height)

    def embed_page(self, *, dest: Any, source: Any, index: int) -> Any:
        # The XObject is a form attached to dest's resources; source is only read.
        return source.page_as_xobject(index, dest)

    def draw_page(self, *, page: Any, embedded: Any, fit: FitTransform) -> None:
        pdfium = self._require_pdfium()

        form = embedded.as_pageobject()
        # Scale about the origin first, then move the lower-left corner into place.
        matrix = pdfium.PdfMatrix().scale(fit.scale, fit.scale).translate(fit.offset_x, fit.offset_y)
        form.transform(matrix)
        page.insert_obj(form)
        page.gen_content()

    def save(self, *, doc: Any) -> bytes:
        buf = io.BytesIO()
        doc.save(buf)
        return buf.getvalue()

    def close(self, *, doc: Any) -> None:
        doc.close()
