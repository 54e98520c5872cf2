from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

MIB = 1024 * 1024
PDF_MEDIA_TYPE = "application/pdf"


class RestyleEngineName(str, Enum):
    """
    PDF backend identifiers.
    """

    PYPDFIUM2 = "pypdfium2"


class SourceRole(str, Enum):
    CONTENT = "content"
    STYLE = "style"


class PipelineStage(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    LOADING = "loading"
    BUILDING = "building"
    SERIALIZING = "serializing"
    DONE = "done"
    FAILED = "failed"


class ErrorCode(str, Enum):
    CONTENT_READ_ERROR = "CONTENT_READ_ERROR"
    STYLE_READ_ERROR = "STYLE_READ_ERROR"
    CONTENT_PARSE_ERROR = "CONTENT_PARSE_ERROR"
    STYLE_PARSE_ERROR = "STYLE_PARSE_ERROR"
    CONTENT_EMPTY = "CONTENT_EMPTY"
    STYLE_EMPTY = "STYLE_EMPTY"
    PAGE_PROCESSING_ERROR = "PAGE_PROCESSING_ERROR"
    SAVE_ERROR = "SAVE_ERROR"


@dataclass(frozen=True, slots=True)
class FitTransform:
    scale: float
    offset_x: float
    offset_y: float


@dataclass(frozen=True, slots=True)
class RestyleError:
    # None => untagged (pre-flight validation or unexpected failure)
    code: ErrorCode | None
    message: str
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class RestyleResult:
    ok: bool
    stage: PipelineStage
    pdf_bytes: bytes | None = None
    error: RestyleError | None = None
    page_count: int = 0
    target_size: tuple[float, float] | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """
        JSON-ready view of the run. The PDF itself is summarized (length + SHA-256),
        never embedded.
        """

        out: dict[str, Any] = {
            "ok": self.ok,
            "stage": self.stage.value,
            "page_count": self.page_count,
            "target_size": None if self.target_size is None else list(self.target_size),
            "error": None,
            "result": None,
            "meta": dict(self.meta),
        }
        if self.error is not None:
            out["error"] = {
                "code": None if self.error.code is None else self.error.code.value,
                "message": self.error.message,
                "detail": self.error.detail,
            }
        if self.pdf_bytes is not None:
            out["result"] = {
                "byte_length": len(self.pdf_bytes),
                "sha256": hashlib.sha256(self.pdf_bytes).hexdigest(),
            }
        return out


@dataclass(frozen=True, slots=True)
class RestyleConfig:
    """
    Restyle configuration.

    All settings are passed explicitly; nothing here reads the environment.
    """

    max_source_bytes: int = 10 * MIB
    accepted_media_type: str = PDF_MEDIA_TYPE
    engine: RestyleEngineName = RestyleEngineName.PYPDFIUM2
    output_prefix: str = "resultado"

    def __post_init__(self) -> None:
        if self.max_source_bytes <= 0:
            raise ValueError("max_source_bytes must be a positive integer")
        if not self.accepted_media_type:
            raise ValueError("accepted_media_type must be a non-empty string")
        if not self.output_prefix or "/" in self.output_prefix or "\\" in self.output_prefix:
            raise ValueError("output_prefix must be a non-empty file name prefix")

    @property
    def max_source_mb(self) -> float:
        return self.max_source_bytes / MIB
