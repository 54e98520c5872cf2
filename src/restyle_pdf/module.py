from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable

from .artifacts import serialize_document, write_result_pdf
from .builder import build_composite
from .contracts import (
    PipelineStage,
    RestyleConfig,
    RestyleEngineName,
    RestyleError,
    RestyleResult,
    SourceRole,
)
from .engines import PdfEngine, Pypdfium2Engine, close_documents
from .errors import (
    UNEXPECTED_ERROR_MESSAGE,
    PipelineBusyError,
    RestyleStageError,
    SourceValidationError,
    describe_exception,
)
from .loader import parse_document, read_source, require_pages
from .sources import SourceFile, validate_pair, validate_source

logger = logging.getLogger(__name__)

StageListener = Callable[[PipelineStage], None]


def _get_engine(engine: RestyleEngineName) -> PdfEngine:
    if engine == RestyleEngineName.PYPDFIUM2:
        return Pypdfium2Engine()
    raise ValueError(f"Unsupported PDF engine: {engine}")


def run_restyle(
    *,
    config: RestyleConfig,
    content: SourceFile | None,
    style: SourceFile | None,
    engine: PdfEngine | None = None,
    on_stage: StageListener | None = None,
) -> RestyleResult:
    """
    Preferred programmatic entrypoint.

    Input: the content and style files (either may be missing; that fails validation)
    Output: a RestyleResult carrying the composite PDF bytes, or exactly one error
    tagged with the stage that produced it. Stage failures never raise.
    """

    eng = engine if engine is not None else _get_engine(config.engine)
    meta: dict[str, Any] = {"backend": eng.backend_id(), "backend_version": eng.backend_version()}

    stage = PipelineStage.VALIDATING

    def enter(next_stage: PipelineStage) -> None:
        nonlocal stage
        stage = next_stage
        logger.debug("restyle stage -> %s", next_stage.value)
        if on_stage is not None:
            on_stage(next_stage)

    opened: list[Any] = []
    page_count = 0
    target_size: tuple[float, float] | None = None

    try:
        enter(PipelineStage.VALIDATING)
        content_file, style_file = validate_pair(content, style, config=config)

        enter(PipelineStage.LOADING)
        content_bytes = read_source(content_file, role=SourceRole.CONTENT)
        style_bytes = read_source(style_file, role=SourceRole.STYLE)

        content_doc = parse_document(eng, content_bytes, role=SourceRole.CONTENT)
        opened.append(content_doc)
        style_doc = parse_document(eng, style_bytes, role=SourceRole.STYLE)
        opened.append(style_doc)

        page_count = require_pages(eng, content_doc, role=SourceRole.CONTENT)
        require_pages(eng, style_doc, role=SourceRole.STYLE)

        enter(PipelineStage.BUILDING)
        composite = build_composite(eng, content_doc, style_doc)
        opened.append(composite.doc)
        target_size = composite.target_size

        enter(PipelineStage.SERIALIZING)
        pdf_bytes = serialize_document(eng, composite.doc)
    except RestyleStageError as e:
        failed_at = stage
        logger.warning(
            "restyle failed at %s: code=%s message=%s detail=%s",
            failed_at.value,
            None if e.code is None else e.code.value,
            e.message,
            e.detail,
        )
        enter(PipelineStage.FAILED)
        return RestyleResult(ok=False, stage=failed_at, error=e.to_error(), meta=meta)
    except Exception as e:
        failed_at = stage
        logger.exception("unexpected failure at %s", failed_at.value)
        enter(PipelineStage.FAILED)
        return RestyleResult(
            ok=False,
            stage=failed_at,
            error=RestyleError(code=None, message=UNEXPECTED_ERROR_MESSAGE, detail=describe_exception(e)),
            meta=meta,
        )
    finally:
        close_documents(eng, opened)

    enter(PipelineStage.DONE)
    logger.info(
        "restyled %d page(s) onto %.2fx%.2f pt, %d bytes",
        page_count,
        target_size[0],
        target_size[1],
        len(pdf_bytes),
    )
    return RestyleResult(
        ok=True,
        stage=PipelineStage.DONE,
        pdf_bytes=pdf_bytes,
        page_count=page_count,
        target_size=target_size,
        meta=meta,
    )


class RestyleSession:
    """
    Interactive front for the pipeline: holds the two file selections and the
    single active result or error.

    Only one run may be in flight. `run()` while another run is in progress
    raises PipelineBusyError; so does changing a selection mid-run. Selections
    made from several threads outside a run are applied one at a time.
    """

    def __init__(self, config: RestyleConfig | None = None, *, engine: PdfEngine | None = None) -> None:
        self.config = config if config is not None else RestyleConfig()
        self._engine = engine
        # Guards the fields below; never held while the pipeline runs.
        self._lock = threading.Lock()
        self._running = False
        self._selections: dict[SourceRole, SourceFile | None] = {
            SourceRole.CONTENT: None,
            SourceRole.STYLE: None,
        }
        self._state = PipelineStage.IDLE
        self._result: RestyleResult | None = None
        self._error: RestyleError | None = None

    @property
    def state(self) -> PipelineStage:
        return self._state

    @property
    def running(self) -> bool:
        return self._running

    @property
    def content(self) -> SourceFile | None:
        return self._selections[SourceRole.CONTENT]

    @property
    def style(self) -> SourceFile | None:
        return self._selections[SourceRole.STYLE]

    @property
    def error(self) -> RestyleError | None:
        return self._error

    @property
    def result(self) -> RestyleResult | None:
        return self._result

    @property
    def result_bytes(self) -> bytes | None:
        return None if self._result is None else self._result.pdf_bytes

    @property
    def can_run(self) -> bool:
        return self.content is not None and self.style is not None and not self.running

    def select_content(self, source: SourceFile) -> bool:
        return self._select(SourceRole.CONTENT, source)

    def select_style(self, source: SourceFile) -> bool:
        return self._select(SourceRole.STYLE, source)

    def _select(self, role: SourceRole, source: SourceFile) -> bool:
        """
        Accept or reject a new selection for `role`.

        Accepted: replaces the selection and clears any result and error.
        Rejected: the previous selection stays; the validation error becomes active.
        """

        with self._lock:
            if self._running:
                raise PipelineBusyError("Cannot change the file selection while a run is in progress")

            try:
                validate_source(source, role=role, config=self.config)
            except SourceValidationError as e:
                logger.warning("rejected %s file %r: %s (%s)", role.value, source.name, e.message, e.detail)
                self._error = e.to_error()
                return False

            self._selections[role] = source
            self._error = None
            self._result = None
            self._state = PipelineStage.IDLE
            return True

    def _enter(self, stage: PipelineStage) -> None:
        self._state = stage

    def run(self) -> RestyleResult:
        with self._lock:
            if self._running:
                raise PipelineBusyError("A restyle run is already in progress")
            self._running = True
            self._result = None
            self._error = None
            content, style = self.content, self.style

        result: RestyleResult | None = None
        try:
            result = run_restyle(
                config=self.config,
                content=content,
                style=style,
                engine=self._engine,
                on_stage=self._enter,
            )
        finally:
            with self._lock:
                self._running = False
                if result is not None:
                    if result.ok:
                        self._result = result
                    else:
                        self._error = result.error
        return result

    def save_result(self, *, out_file: Path | None = None, out_dir: Path | None = None) -> Path:
        """
        Hand the current result to disk under its download name (or `out_file`).
        """

        if self._result is None:
            raise ValueError("No result to save; run the pipeline first")
        return write_result_pdf(
            result=self._result,
            out_file=out_file,
            out_dir=out_dir,
            prefix=self.config.output_prefix,
        )
