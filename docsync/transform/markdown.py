# docsync/transform/markdown.py
"""
Reference transformer: plain-text formats to markdown.

- .txt: "# <filename>" heading, then one paragraph per blank-line separated
  block with inner line breaks joined by spaces
- .csv: markdown table (first row is the header, short rows padded); a
  single row becomes a bullet list; an empty file becomes "*Empty CSV file*"
- .md: copied through unchanged

Rich formats (docx, pdf, spreadsheets) belong in their own transformers.
"""

from __future__ import annotations

import csv
import io
import re
from pathlib import Path
from typing import Callable, Dict, FrozenSet, List

from docsync.core.exceptions import TransformError, UnsupportedFileError
from docsync.logging.logger import get_logger
from docsync.logging.tags import TRANSFORM

from .base import TransformResult

logger = get_logger(__name__)

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")


def text_to_markdown(text: str, file_name: str) -> str:
    parts = [f"# {file_name}", ""]
    for paragraph in _PARAGRAPH_SPLIT.split(text):
        clean = paragraph.strip().replace("\r\n", " ").replace("\n", " ")
        if clean:
            parts.extend([clean, ""])
    return "\n".join(parts) + "\n"


def _cell(value: str) -> str:
    return value.strip().replace("|", "\\|").replace("\n", " ")


def csv_to_markdown(text: str, file_name: str) -> str:
    rows: List[List[str]] = [
        row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)
    ]
    lines = [f"# {file_name}", ""]

    if not rows:
        lines.extend(["*Empty CSV file*", ""])
        return "\n".join(lines) + "\n"

    if len(rows) == 1:
        lines.extend(f"- {_cell(cell)}" for cell in rows[0])
        lines.append("")
        return "\n".join(lines) + "\n"

    width = max(len(row) for row in rows)
    padded = [[_cell(c) for c in row] + [""] * (width - len(row)) for row in rows]
    header, body = padded[0], padded[1:]
    lines.append("| " + " | ".join(header) + " |")
    lines.append("| " + " | ".join("---" for _ in header) + " |")
    for row in body:
        lines.append("| " + " | ".join(row) + " |")
    lines.append("")
    return "\n".join(lines) + "\n"


def passthrough(text: str, file_name: str) -> str:
    return text


class MarkdownTransformer:
    """
    Converts .txt, .csv and .md files to markdown.

    Usage:
        transformer = MarkdownTransformer()
        if transformer.is_eligible(path):
            result = transformer.transform(path, out_path)
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding
        self._converters: Dict[str, Callable[[str, str], str]] = {
            ".txt": text_to_markdown,
            ".csv": csv_to_markdown,
            ".md": passthrough,
        }

    @property
    def supported_extensions(self) -> FrozenSet[str]:
        return frozenset(self._converters)

    def is_eligible(self, path: str) -> bool:
        return Path(path).suffix.lower() in self._converters

    def transform(self, input_path: str, output_path: str) -> TransformResult:
        src = Path(input_path)
        ext = src.suffix.lower()
        converter = self._converters.get(ext)
        if converter is None:
            raise UnsupportedFileError(f"Unsupported file format: {ext}", input_path=input_path)

        logger.debug(f"{TRANSFORM} Converting {input_path} -> {output_path}")
        try:
            text = src.read_text(encoding=self._encoding)
            markdown = converter(text, src.name)
            out = Path(output_path)
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(markdown, encoding="utf-8")
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise TransformError(f"Conversion of {src.name} failed: {e}", input_path=input_path) from e

        return TransformResult(
            success=True,
            input_path=input_path,
            output_path=output_path,
            size=len(markdown),
        )


__all__ = ["MarkdownTransformer", "text_to_markdown", "csv_to_markdown"]
