from __future__ import annotations

from .contracts import ErrorCode, RestyleError

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while processing the PDFs."


class RestyleStageError(Exception):
    """
    A failure classified at a pipeline stage boundary.

    `code` is None for untagged failures (pre-flight validation).
    `detail` carries the underlying library message, when there is one.
    """

    def __init__(self, message: str, *, code: ErrorCode | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.detail = detail

    def to_error(self) -> RestyleError:
        return RestyleError(code=self.code, message=self.message, detail=self.detail)


class SourceValidationError(RestyleStageError):
    pass


class ReadError(RestyleStageError):
    pass


class ParseError(RestyleStageError):
    pass


class EmptyDocumentError(RestyleStageError):
    pass


class PageProcessingError(RestyleStageError):
    pass


class SaveError(RestyleStageError):
    pass


class PipelineBusyError(RuntimeError):
    pass


class InvalidPageSizeError(ValueError):
    pass


def describe_exception(e: BaseException) -> str:
    return str(e) or type(e).__name__
