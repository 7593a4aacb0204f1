"""Rule-based clause segmentation.

Splits positioned page text into candidate clause spans. Segmentation is
purely a function of the input text and the segmenter's settings, so the
same document always yields the same span boundaries.
"""

import logging
import re
from typing import Iterable, List, Sequence, Tuple, Union

from ..exceptions import SegmentationError
from ..models.document import Document, TextSpan


logger = logging.getLogger(__name__)

# One or more blank lines separate blocks; CRLF line endings count too.
_BLANK_LINE_RE = re.compile(r"\r?\n[ \t\r]*\n(?:[ \t\r]*\n)*")

# Numbered headings that open a new clause when they start a line.
_HEADING_RE = re.compile(
    r"^[ \t]*(?:"
    r"\d+(?:\.\d+)*[.)]"  # 1.  1.1.  2)
    r"|\([a-z0-9]{1,4}\)"  # (a)  (iv)  (12)
    r"|section\s+\d+(?:\.\d+)*"  # Section 4, Section 4.2
    r"|article\s+(?:[ivxlc]+|\d+)\b"  # Article IV, Article 7
    r")[ \t]",
    re.IGNORECASE | re.MULTILINE,
)

_SENTENCE_BREAK_RE = re.compile(r"(?<=[.;!?])\s+(?=[A-Z(\"'])")


class ClauseSegmenter:
    """
    Splits document pages into ordered, non-overlapping clause spans.

    Rules, applied per page:

    1. Split into blocks at blank lines.
    2. Split blocks at numbered headings (``1.``, ``1.1``, ``(a)``,
       ``Section 4``, ``Article IV``) found at the start of a line.
    3. Split blocks longer than ``max_clause_chars`` at sentence
       boundaries.
    4. Trim surrounding whitespace and drop empty spans.
    """

    def __init__(self, max_clause_chars: int = 1200):
        if max_clause_chars <= 0:
            raise ValueError("max_clause_chars must be positive")
        self.max_clause_chars = max_clause_chars

    def segment(
        self,
        pages: Union[Document, Iterable[Tuple[int, str]]],
    ) -> List[TextSpan]:
        """
        Segment pages into clause spans.

        Args:
            pages: A Document, or ordered ``(page_number, text)`` pairs.

        Returns:
            Spans ordered by (page, start). Empty when the document has no
            extractable text.
        """
        if isinstance(pages, Document):
            pairs = pages.page_pairs()
        else:
            pairs = list(pages)

        spans: List[TextSpan] = []
        for page_number, text in pairs:
            spans.extend(self._segment_page(page_number, text or ""))

        spans.sort(key=lambda s: s.sort_key)
        logger.debug(f"Segmented {len(pairs)} pages into {len(spans)} spans")
        return spans

    def _segment_page(self, page_number: int, text: str) -> List[TextSpan]:
        spans = []
        for block_start, block_end in self._blocks(text):
            for start, end in self._split_headings(text, block_start, block_end):
                for s, e in self._split_long(text, start, end):
                    span = self._trimmed(page_number, text, s, e)
                    if span is not None:
                        spans.append(span)
        return spans

    @staticmethod
    def _blocks(text: str) -> List[Tuple[int, int]]:
        blocks = []
        position = 0
        for match in _BLANK_LINE_RE.finditer(text):
            blocks.append((position, match.start()))
            position = match.end()
        blocks.append((position, len(text)))
        return blocks

    @staticmethod
    def _split_headings(text: str, start: int, end: int) -> List[Tuple[int, int]]:
        cuts = [start]
        for match in _HEADING_RE.finditer(text, start, end):
            # Only cut where the heading is at a real line start.
            if match.start() > start and text[match.start() - 1] == "\n":
                cuts.append(match.start())
        cuts.append(end)
        return [(cuts[i], cuts[i + 1]) for i in range(len(cuts) - 1)]

    def _split_long(self, text: str, start: int, end: int) -> List[Tuple[int, int]]:
        if end - start <= self.max_clause_chars:
            return [(start, end)]

        pieces = []
        piece_start = start
        last_break = None
        for match in _SENTENCE_BREAK_RE.finditer(text, start, end):
            if (
                match.start() - piece_start > self.max_clause_chars
                and last_break is not None
                and last_break > piece_start
            ):
                pieces.append((piece_start, last_break))
                piece_start = last_break
            last_break = match.start()
        if (
            end - piece_start > self.max_clause_chars
            and last_break is not None
            and last_break > piece_start
        ):
            pieces.append((piece_start, last_break))
            piece_start = last_break
        pieces.append((piece_start, end))
        return pieces

    @staticmethod
    def _trimmed(page_number: int, text: str, start: int, end: int):
        chunk = text[start:end]
        stripped = chunk.strip()
        if not stripped:
            return None
        lead = len(chunk) - len(chunk.lstrip())
        new_start = start + lead
        new_end = new_start + len(stripped)
        return TextSpan(page=page_number, start=new_start, end=new_end, text=stripped)


def validate_spans(spans: Sequence[TextSpan]) -> None:
    """
    Check the document-level span invariants.

    Spans must be ordered by (page, start), non-empty, and pairwise
    non-overlapping within a page.

    Raises:
        SegmentationError: If any invariant is violated.
    """
    previous = None
    for index, span in enumerate(spans):
        if span.end <= span.start or not span.text.strip():
            raise SegmentationError(
                "Empty clause span",
                location=f"page {span.page}, offset {span.start}",
                details={"index": index},
            )
        if previous is not None:
            if span.sort_key < previous.sort_key:
                raise SegmentationError(
                    "Clause spans are not ordered by page and offset",
                    location=f"page {span.page}, offset {span.start}",
                    details={"index": index},
                )
            if span.page == previous.page and span.start < previous.end:
                raise SegmentationError(
                    "Overlapping clause spans",
                    location=f"page {span.page}, offset {span.start}",
                    details={
                        "index": index,
                        "previous": [previous.start, previous.end],
                        "current": [span.start, span.end],
                    },
                )
        previous = span
