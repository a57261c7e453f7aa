# docsync/transform/base.py
"""Contract between the engine and a format-specific converter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class TransformResult:
    """Outcome of converting one file."""

    success: bool
    input_path: str
    output_path: str
    size: Optional[int] = None
    error: Optional[str] = None


@runtime_checkable
class Transformer(Protocol):
    """
    Protocol for converting one source file into one output file.

    Implementations may raise on failure or return a TransformResult with
    success=False; the engine treats both as a failed result.
    """

    @property
    def supported_extensions(self) -> FrozenSet[str]:
        """Lowercase extensions (with dot) this transformer accepts."""
        ...

    def is_eligible(self, path: str) -> bool:
        """True if path can be transformed."""
        ...

    def transform(self, input_path: str, output_path: str) -> TransformResult:
        """Produce output_path from input_path."""
        ...


__all__ = ["TransformResult", "Transformer"]
