"""Export of revised documents to .docx format."""

import io
import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from docx import Document as DocxDocument
from docx.enum.text import WD_COLOR_INDEX
from docx.shared import Pt, RGBColor

from ..models.document import AppliedChange, ComposedDocument


logger = logging.getLogger(__name__)

_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")


class DocumentExporter:
    """
    Exports composed documents to .docx.

    Two flavours are produced from the same composed document:

    - ``tracked``: replaced clause text is highlighted, preceded by the
      struck-through original and followed by a small annotation.
    - ``clean``: the final text only, with no revision marks.
    """

    def __init__(self, output_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the document exporter.

        Args:
            output_dir: Default directory for exported files.
        """
        self.output_dir = Path(output_dir) if output_dir else None

    def build(self, composed: ComposedDocument, tracked: bool = True):
        """
        Build a python-docx document for the composed text.

        Args:
            composed: Output of the document composer.
            tracked: Whether to render revision marks.

        Returns:
            ``docx.document.Document``.
        """
        doc = DocxDocument()
        doc.add_heading("Revised Document", level=1)
        doc.core_properties.title = f"Revised {composed.document_id}"

        for page in composed.pages:
            doc.add_heading(f"Page {page.number}", level=2)
            pending = [c for c in composed.changes if c.page == page.number]
            for block in _BLOCK_SPLIT_RE.split(page.text):
                if not block.strip():
                    continue
                pending = self._add_block(doc, block, pending, tracked)
        return doc

    def to_bytes(self, composed: ComposedDocument, tracked: bool = True) -> bytes:
        """Render the document into .docx bytes."""
        buffer = io.BytesIO()
        self.build(composed, tracked=tracked).save(buffer)
        return buffer.getvalue()

    def export(
        self,
        composed: ComposedDocument,
        output_path: Optional[Union[str, Path]] = None,
        tracked: bool = True,
    ) -> str:
        """
        Export the composed document to a .docx file.

        Args:
            composed: Output of the document composer.
            output_path: Target file. Defaults to a name derived from the
                run id inside ``output_dir``.
            tracked: Whether to render revision marks.

        Returns:
            Path to the exported file.
        """
        if output_path is None:
            if self.output_dir is None:
                raise ValueError("output_path is required when no output_dir is configured")
            flavour = "tracked" if tracked else "clean"
            output_path = self.output_dir / f"revised_{composed.run_id[:8]}_{flavour}.docx"

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.build(composed, tracked=tracked).save(str(path))

        logger.info(f"Exported revised document to: {path}")
        return str(path)

    def _add_block(
        self,
        doc,
        block: str,
        pending: List[AppliedChange],
        tracked: bool,
    ) -> List[AppliedChange]:
        """Add one paragraph, marking changes found in it. Returns unmatched changes."""
        para = doc.add_paragraph()
        if not tracked:
            para.add_run(block)
            return pending

        cursor = 0
        remaining = []
        for change in pending:
            index = block.find(change.new_text, cursor) if change.new_text else -1
            if index < 0:
                remaining.append(change)
                continue
            if index > cursor:
                para.add_run(block[cursor:index])

            deleted = para.add_run(change.original_text)
            deleted.font.strike = True
            deleted.font.color.rgb = RGBColor(255, 0, 0)
            para.add_run(" ")

            inserted = para.add_run(change.new_text)
            inserted.font.highlight_color = WD_COLOR_INDEX.BRIGHT_GREEN
            self._add_annotation(para, change)
            cursor = index + len(change.new_text)

        if cursor < len(block):
            para.add_run(block[cursor:])
        return remaining

    @staticmethod
    def _add_annotation(para, change: AppliedChange) -> None:
        label = "EDITED" if change.edited else "ACCEPTED"
        run = para.add_run(f" [{change.clause_label} | {label}]")
        run.font.size = Pt(8)
        run.font.color.rgb = RGBColor(128, 128, 128)
        run.italic = True
