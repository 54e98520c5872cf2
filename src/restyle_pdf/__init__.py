"""
PDF restyling: refit every page of a content PDF onto the page size of a style PDF.

Pipeline (one run at a time):
- Validating: both files present, declared as PDF, within the size limit
- Loading: read and parse both files; neither may be empty
- Building: one output page per content page, sized like the style PDF's first
  page, with the content page contain-fitted and centered
- Serializing: composite PDF -> bytes

Failures surface as exactly one RestyleError tagged with its ErrorCode.
"""

from .contracts import (
    ErrorCode,
    FitTransform,
    PipelineStage,
    RestyleConfig,
    RestyleEngineName,
    RestyleError,
    RestyleResult,
    SourceRole,
)
from .errors import PipelineBusyError
from .fit import compute_fit
from .module import RestyleSession, run_restyle
from .sources import SourceFile

__all__ = [
    "ErrorCode",
    "FitTransform",
    "PipelineBusyError",
    "PipelineStage",
    "RestyleConfig",
    "RestyleEngineName",
    "RestyleError",
    "RestyleResult",
    "RestyleSession",
    "SourceFile",
    "SourceRole",
    "compute_fit",
    "run_restyle",
]
