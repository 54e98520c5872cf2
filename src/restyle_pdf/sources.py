from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from .contracts import RestyleConfig, SourceRole
from .errors import SourceValidationError

NOT_A_PDF_MESSAGE = "The selected file is not a valid PDF."
MISSING_FILES_MESSAGE = "Please select both PDF files before processing."


@dataclass(frozen=True, slots=True)
class SourceFile:
    """
    A user-supplied file for the content or style role.

    `size` and `media_type` are what the file declares; the bytes themselves are
    only read when the pipeline asks for them (`read_bytes`).
    """

    name: str
    size: int
    media_type: str | None
    data: bytes | None = None
    path: Path | None = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.path is None):
            raise TypeError("SourceFile needs exactly one of data or path")

    @classmethod
    def from_bytes(cls, data: bytes, *, name: str, media_type: str | None) -> SourceFile:
        return cls(name=name, size=len(data), media_type=media_type, data=bytes(data))

    @classmethod
    def from_path(cls, path: Path) -> SourceFile:
        """
        Declare a file from disk. The media type comes from the file name, the
        same way a browser file picker declares it.
        """

        p = Path(path).expanduser()
        media_type, _ = mimetypes.guess_type(p.name)
        return cls(name=p.name, size=p.stat().st_size, media_type=media_type, path=p)

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise TypeError("SourceFile needs exactly one of data or path")
        return self.path.read_bytes()


def _oversize_message(role: SourceRole, config: RestyleConfig) -> str:
    return f"The {role.value} PDF must be smaller than {config.max_source_mb:g}MB."


def check_media_type(source: SourceFile, *, config: RestyleConfig) -> None:
    if not source.media_type or source.media_type != config.accepted_media_type:
        raise SourceValidationError(
            NOT_A_PDF_MESSAGE,
            detail=f"{source.name}: declared media type {source.media_type!r}",
        )


def check_size(source: SourceFile, *, role: SourceRole, config: RestyleConfig) -> None:
    if source.size > config.max_source_bytes:
        raise SourceValidationError(
            _oversize_message(role, config),
            detail=f"{source.name}: {source.size} bytes > {config.max_source_bytes}",
        )


def validate_source(source: SourceFile, *, role: SourceRole, config: RestyleConfig) -> SourceFile:
    """
    Pre-flight acceptance check. Never reads the file's bytes.
    """

    check_media_type(source, config=config)
    check_size(source, role=role, config=config)
    return source


def validate_pair(
    content: SourceFile | None,
    style: SourceFile | None,
    *,
    config: RestyleConfig,
) -> tuple[SourceFile, SourceFile]:
    if content is None or style is None:
        raise SourceValidationError(MISSING_FILES_MESSAGE)
    validate_source(content, role=SourceRole.CONTENT, config=config)
    validate_source(style, role=SourceRole.STYLE, config=config)
    return content, style
