"""File boundary helpers: decoded line sources, encoded sinks, output naming."""

from pathlib import Path
from typing import IO, Union

from ..models.core import DEFAULT_ENCODING, DEFAULT_OUTPUT_SUFFIX


PathLike = Union[str, Path]


def cleaned_output_path(file_path: PathLike, suffix: str = DEFAULT_OUTPUT_SUFFIX) -> Path:
    """Sibling path with the suffix inserted before the final extension.

    bank.ofx -> bank_cleaned.ofx, statement -> statement_cleaned,
    a.b.ofx -> a.b_cleaned.ofx, .ofx -> _cleaned.ofx
    """
    path = Path(file_path)
    if not path.suffix and path.name.startswith('.'):
        # A bare dotfile name is all extension
        return path.with_name(f"{suffix}{path.name}")
    return path.with_name(f"{path.stem}{suffix}{path.suffix}")


def open_line_source(file_path: PathLike, encoding: str = DEFAULT_ENCODING) -> IO[str]:
    """Open a file for reading as decoded lines.

    Line terminators are passed through untranslated so that rewritten
    files keep their original line endings.
    """
    return open(file_path, 'r', encoding=encoding, newline='')


def open_line_sink(file_path: PathLike, encoding: str = DEFAULT_ENCODING) -> IO[str]:
    """Create (or truncate) a file for writing encoded lines verbatim"""
    return open(file_path, 'w', encoding=encoding, newline='')
