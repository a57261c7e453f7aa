# docsync/transform/__init__.py
"""
Transform collaborators.

The engine only needs is_eligible(path) and transform(input, output); the
MarkdownTransformer here is the reference implementation for plain-text
formats.
"""

from .base import Transformer, TransformResult
from .markdown import MarkdownTransformer

__all__ = ["Transformer", "TransformResult", "MarkdownTransformer"]
