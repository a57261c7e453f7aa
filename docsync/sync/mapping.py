# docsync/sync/mapping.py
"""
Source -> output path mapping.

    output_path(src, source_root, output_root, ".md")
        == output_root / relative(source_root, src.parent) / (src.stem + ".md")

Two sources in one directory that differ only by extension (report.csv,
report.txt) map to the same output. find_collisions() reports those groups.
"""

from __future__ import annotations

import os
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Union

PathLike = Union[str, Path]


def canonical_path(path: PathLike) -> str:
    """
    Normalized absolute path used as the key everywhere in the engine.

    Symlinks are not resolved: the key names the entry that was observed.
    """
    return os.path.normpath(os.path.abspath(os.fspath(path)))


def output_path(
    source_path: PathLike,
    source_root: PathLike,
    output_root: PathLike,
    target_ext: str = ".md",
) -> Path:
    """
    Map a source file to its output location.

    Raises:
        ValueError: If source_path is not inside source_root.
    """
    src = Path(canonical_path(source_path))
    rel = src.relative_to(canonical_path(source_root))
    return Path(output_root) / rel.parent / f"{rel.stem}{target_ext}"


def find_collisions(
    source_paths: Iterable[PathLike],
    source_root: PathLike,
    output_root: PathLike,
    target_ext: str = ".md",
) -> Dict[Path, List[str]]:
    """Group sources by output path, keeping only groups with more than one member."""
    groups: Dict[Path, List[str]] = defaultdict(list)
    for src in source_paths:
        groups[output_path(src, source_root, output_root, target_ext)].append(
            canonical_path(src)
        )
    return {out: sorted(srcs) for out, srcs in groups.items() if len(srcs) > 1}


__all__ = ["canonical_path", "output_path", "find_collisions"]
