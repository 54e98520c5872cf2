"""
PDF engines for the restyle pipeline.

The public API lives in `restyle_pdf.*`; engines only wrap a PDF library.
"""

from .base import PdfEngine, close_documents
from .pypdfium2_engine import Pypdfium2Engine

__all__ = ["PdfEngine", "Pypdfium2Engine", "close_documents"]
