"""Clause segmentation for the Legal Review pipeline."""

from .segmenter import ClauseSegmenter, validate_spans

__all__ = [
    "ClauseSegmenter",
    "validate_spans",
]
