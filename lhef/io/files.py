from __future__ import annotations

import gzip
import io
from pathlib import Path
from typing import IO, Union

from .reader import Reader
from .writer import DEFAULT_VERSION, Writer

PathLike = Union[str, Path]


def open_text(path: PathLike) -> IO[str]:
    """Open an event file for reading, decompressing ``.gz`` files."""
    p = Path(path)
    if p.suffix == ".gz":
        return io.TextIOWrapper(gzip.open(p, "rb"), encoding="utf-8", errors="replace")
    return open(p, "r", encoding="utf-8", errors="replace")


def open_output(path: PathLike) -> IO[str]:
    """Open an event file for writing, compressing ``.gz`` files."""
    p = Path(path)
    if p.suffix == ".gz":
        return gzip.open(p, "wt", encoding="utf-8")
    return open(p, "w", encoding="utf-8")


def open_reader(path: PathLike) -> Reader:
    """Reader owning the file at ``path``; closed by ``Reader.close()``."""
    f = open_text(path)
    try:
        return Reader(f, close_stream=True)
    except BaseException:
        f.close()
        raise


def open_writer(path: PathLike, version: str = DEFAULT_VERSION) -> Writer:
    """Writer owning the file at ``path``; finished and closed by ``Writer.close()``."""
    f = open_output(path)
    try:
        return Writer(f, version, close_stream=True)
    except BaseException:
        f.close()
        raise
