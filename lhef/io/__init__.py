from __future__ import annotations

from .files import open_output, open_reader, open_text, open_writer
from .reader import Reader
from .writer import Writer, WriterState

__all__ = ["Reader", "Writer", "WriterState", "open_text", "open_output", "open_reader", "open_writer"]
