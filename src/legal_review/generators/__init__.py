"""Export generators for analysis runs."""

from .document_exporter import DocumentExporter
from .text_exporter import TextExporter

__all__ = [
    "DocumentExporter",
    "TextExporter",
]
