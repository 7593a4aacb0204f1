"""Unit tests for clause segmentation."""

import pytest

from legal_review.exceptions import SegmentationError
from legal_review.models.document import Document, TextSpan
from legal_review.segmentation import ClauseSegmenter
from legal_review.segmentation.segmenter import validate_spans


class TestClauseSegmenter:
    """Tests for splitting page text into clause spans."""

    def test_blank_lines_separate_clauses(self):
        text = "First clause text here.\n\nSecond clause text here."
        spans = ClauseSegmenter().segment([(1, text)])

        assert [s.text for s in spans] == ["First clause text here.", "Second clause text here."]
        for span in spans:
            assert text[span.start:span.end] == span.text

    def test_crlf_blank_lines_separate_clauses(self):
        lf = "Payment is due within thirty days.\n\nEither party may terminate this agreement."
        crlf = lf.replace("\n", "\r\n")

        lf_spans = ClauseSegmenter().segment([(1, lf)])
        crlf_spans = ClauseSegmenter().segment([(1, crlf)])

        assert [s.text for s in crlf_spans] == [s.text for s in lf_spans]
        assert len(crlf_spans) == 2
        for span in crlf_spans:
            assert crlf[span.start:span.end] == span.text

    def test_crlf_headings_split_blocks(self):
        text = "1. Payment is due monthly.\r\n2. Either party may terminate."
        spans = ClauseSegmenter().segment([(1, text)])
        assert [s.text for s in spans] == [
            "1. Payment is due monthly.",
            "2. Either party may terminate.",
        ]

    def test_numbered_headings_split_blocks(self):
        text = "1. Payment is due monthly.\n2. Either party may terminate.\n(a) With notice."
        spans = ClauseSegmenter().segment([(1, text)])

        assert [s.text for s in spans] == [
            "1. Payment is due monthly.",
            "2. Either party may terminate.",
            "(a) With notice.",
        ]

    def test_section_and_article_headings(self):
        text = "Section 4 Term of the agreement.\nArticle IV Governing law."
        spans = ClauseSegmenter().segment([(1, text)])
        assert len(spans) == 2
        assert spans[1].text.startswith("Article IV")

    def test_numbers_inside_a_line_do_not_split(self):
        text = "Payment is due within 30 days. 2 copies shall be kept."
        spans = ClauseSegmenter().segment([(1, text)])
        assert len(spans) == 1

    def test_long_blocks_split_at_sentences(self):
        sentence = "The supplier shall deliver the goods on time. "
        text = sentence * 10
        spans = ClauseSegmenter(max_clause_chars=100).segment([(1, text)])

        assert len(spans) > 1
        assert all(len(s.text) <= 100 for s in spans)
        validate_spans(spans)

    def test_spans_are_trimmed(self):
        text = "   \n  Indented clause text.  \n\n"
        spans = ClauseSegmenter().segment([(3, text)])

        assert len(spans) == 1
        span = spans[0]
        assert span.page == 3
        assert span.text == "Indented clause text."
        assert text[span.start:span.end] == span.text

    def test_empty_pages_produce_no_spans(self):
        spans = ClauseSegmenter().segment([(1, ""), (2, "   \n\n  ")])
        assert spans == []

    def test_spans_ordered_across_pages(self):
        document = Document.from_pages("doc", [(1, "A clause.\n\nB clause."), (2, "C clause.")])
        spans = ClauseSegmenter().segment(document)

        assert [s.sort_key for s in spans] == sorted(s.sort_key for s in spans)
        assert [s.page for s in spans] == [1, 1, 2]

    def test_deterministic(self):
        text = "1. One.\n2. Two.\n\nThree is a paragraph."
        segmenter = ClauseSegmenter()
        assert segmenter.segment([(1, text)]) == segmenter.segment([(1, text)])

    def test_invalid_max_chars(self):
        with pytest.raises(ValueError):
            ClauseSegmenter(max_clause_chars=0)


class TestValidateSpans:
    """Tests for the span invariants."""

    def test_valid_spans(self):
        validate_spans([
            TextSpan(page=1, start=0, end=5, text="abcde"),
            TextSpan(page=1, start=7, end=9, text="fg"),
            TextSpan(page=2, start=0, end=3, text="hij"),
        ])

    def test_overlap_rejected(self):
        with pytest.raises(SegmentationError, match="Overlapping"):
            validate_spans([
                TextSpan(page=1, start=0, end=10, text="0123456789"),
                TextSpan(page=1, start=5, end=12, text="5678901"),
            ])

    def test_out_of_order_rejected(self):
        with pytest.raises(SegmentationError, match="not ordered"):
            validate_spans([
                TextSpan(page=2, start=0, end=3, text="abc"),
                TextSpan(page=1, start=0, end=3, text="abc"),
            ])

    def test_empty_span_rejected(self):
        with pytest.raises(SegmentationError, match="Empty"):
            validate_spans([TextSpan(page=1, start=4, end=4, text="")])
