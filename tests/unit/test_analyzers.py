"""Unit tests for the built-in analysis capabilities."""

import pytest

from legal_review.analyzers import (
    ClausePatternClassifier,
    PlainLanguageTranslator,
    RuleBasedRiskScorer,
    TemplateRewriteEngine,
)
from legal_review.analyzers.translator import complexity_band, count_syllables, reading_ease
from legal_review.config import ConfigurationManager
from legal_review.interfaces.capabilities import RiskAssessment
from legal_review.models.enums import ClauseType, Complexity, RiskLevel


LIABILITY = (
    "Client agrees to unlimited liability for any damages, including "
    "consequential damages, arising from breach of this Agreement."
)
PAYMENT = "Payment terms are Net 30 days from invoice date."
TERMINATION = (
    "Either party may terminate this Agreement at any time without cause by "
    "providing thirty (30) days written notice."
)
IP = (
    "All intellectual property created under this Agreement shall belong "
    "exclusively to the Company."
)
GOVERNING_LAW = (
    "This Agreement shall be governed by the laws of Delaware, and any disputes "
    "shall be resolved through binding arbitration in Delaware."
)
COMPANY_INDEMNIFIES = (
    "The Company shall indemnify and hold harmless the Client from any claims "
    "arising from the performance of this Agreement."
)


@pytest.fixture(scope="module")
def config_manager():
    return ConfigurationManager.with_defaults()


class TestClausePatternClassifier:
    """Tests for keyword and heading based classification."""

    def test_classifies_payment_terms(self):
        result = ClausePatternClassifier().classify(PAYMENT)
        assert result.clause_type is ClauseType.PAYMENT_TERMS
        assert result.confidence == 99

    def test_classifies_liability(self):
        result = ClausePatternClassifier().classify(LIABILITY)
        assert result.clause_type is ClauseType.LIABILITY
        assert result.confidence == 99

    def test_classifies_termination(self):
        result = ClausePatternClassifier().classify(TERMINATION)
        assert result.clause_type is ClauseType.TERMINATION
        assert result.confidence == 90

    def test_heading_counts(self):
        text = "Governing Law\nThe courts of Ontario apply to this contract."
        result = ClausePatternClassifier().classify(text)
        assert result.clause_type is ClauseType.GOVERNING_LAW

    def test_short_text_is_other_with_zero_confidence(self):
        result = ClausePatternClassifier().classify("Net 30.")
        assert result.clause_type is ClauseType.OTHER
        assert result.confidence == 0

    def test_text_without_letters(self):
        result = ClausePatternClassifier().classify("1234567890 ---- 1234567890 ----")
        assert result.clause_type is ClauseType.OTHER
        assert result.confidence == 0

    def test_unmatched_text(self):
        result = ClausePatternClassifier().classify(
            "Lorem ipsum dolor sit amet, consectetur adipiscing elit."
        )
        assert result.clause_type is ClauseType.OTHER
        assert result.confidence == ClausePatternClassifier.UNMATCHED_CONFIDENCE

    def test_extract_keywords(self):
        keywords = ClausePatternClassifier().extract_keywords(LIABILITY, ClauseType.LIABILITY)
        assert "unlimited liability" in keywords
        assert "breach" in keywords

    def test_rank_best_first(self):
        ranking = ClausePatternClassifier().rank(LIABILITY)
        assert ranking[0][0] is ClauseType.LIABILITY
        assert ranking[0][1] >= ranking[1][1]


class TestRuleBasedRiskScorer:
    """Tests for weighted rule risk scoring."""

    @pytest.mark.parametrize("text,clause_type,score,level", [
        (LIABILITY, ClauseType.LIABILITY, 95, RiskLevel.HIGH),
        (IP, ClauseType.INTELLECTUAL_PROPERTY, 88, RiskLevel.HIGH),
        (TERMINATION, ClauseType.TERMINATION, 65, RiskLevel.MEDIUM),
        (GOVERNING_LAW, ClauseType.GOVERNING_LAW, 45, RiskLevel.MEDIUM),
        (COMPANY_INDEMNIFIES, ClauseType.INDEMNIFICATION, 15, RiskLevel.SAFE),
        (PAYMENT, ClauseType.PAYMENT_TERMS, 20, RiskLevel.SAFE),
    ])
    def test_sample_scores(self, config_manager, text, clause_type, score, level):
        result = RuleBasedRiskScorer(config_manager).score(text, clause_type)
        assert result.risk_score == score
        assert result.risk_level is level

    def test_explanation_and_recommendations_from_matched_rules(self, config_manager):
        result = RuleBasedRiskScorer(config_manager).score(LIABILITY, ClauseType.LIABILITY)

        assert result.explanation == "Exposes the party to unlimited financial liability."
        assert result.recommendations == (
            "Cap liability to a specific dollar amount",
            "Exclude consequential damages",
        )
        assert result.impact == "Financial exposure could be catastrophic"
        assert result.confidence == 80

    def test_rules_only_apply_to_their_clause_types(self, config_manager):
        scorer = RuleBasedRiskScorer(config_manager)
        matched = scorer.matching_rules(LIABILITY, ClauseType.PAYMENT_TERMS)
        assert [r.id for r in matched] == []

    def test_short_text_gets_base_score_and_zero_confidence(self, config_manager):
        result = RuleBasedRiskScorer(config_manager).score("Too short.", ClauseType.LIABILITY)
        assert result.risk_score == 45
        assert result.confidence == 0

    def test_score_is_clamped(self, config_manager):
        scorer = RuleBasedRiskScorer(
            config_manager, base_scores={ClauseType.LIABILITY: 90}
        )
        result = scorer.score(LIABILITY, ClauseType.LIABILITY)
        assert result.risk_score == 100

    def test_custom_thresholds(self, config_manager):
        scorer = RuleBasedRiskScorer(config_manager, medium_at=10, high_at=20)
        result = scorer.score(PAYMENT, ClauseType.PAYMENT_TERMS)
        assert result.risk_level is RiskLevel.HIGH


class TestReadability:
    def test_syllables(self):
        assert count_syllables("cat") == 1
        assert count_syllables("agreement") == 3
        assert count_syllables("") == 0

    def test_reading_ease_bounds(self):
        assert reading_ease("") == 0
        assert 0 <= reading_ease(LIABILITY) <= 100
        assert reading_ease("The cat sat on the mat.") > reading_ease(LIABILITY)

    def test_complexity_band(self):
        assert complexity_band(65) is Complexity.LOW
        assert complexity_band(45) is Complexity.MEDIUM
        assert complexity_band(10) is Complexity.HIGH


class TestPlainLanguageTranslator:
    """Tests for glossary-based translation."""

    def test_glossary_substitutions(self, config_manager):
        translator = PlainLanguageTranslator(config_manager)
        text, count = translator.simplify(
            "The Client shall indemnify the Company prior to termination."
        )
        assert text == "The Client will pay back the Company before termination."
        assert count == 3

    def test_longest_phrase_wins(self, config_manager):
        translator = PlainLanguageTranslator(config_manager)
        text, count = translator.simplify("The Company shall indemnify and hold harmless the Client.")
        assert "cover the costs of and protect" in text
        assert count == 2

    def test_empty_replacement_collapses_spaces(self, config_manager):
        text, _ = PlainLanguageTranslator(config_manager).simplify("The Client hereby agrees.")
        assert text == "The Client agrees."

    def test_semicolons_split_sentences(self, config_manager):
        text, _ = PlainLanguageTranslator(config_manager).simplify(
            "Payment is due monthly; late fees apply."
        )
        assert text == "Payment is due monthly. Late fees apply."

    def test_translate_result(self, config_manager):
        result = PlainLanguageTranslator(config_manager).translate(
            LIABILITY, ClauseType.LIABILITY
        )
        assert "indirect losses" in result.simplified_text
        assert 0 <= result.readability_score <= 100
        assert result.complexity in set(Complexity)
        assert result.confidence == 55

    def test_translate_empty_text(self, config_manager):
        result = PlainLanguageTranslator(config_manager).translate("   ", ClauseType.OTHER)
        assert result.simplified_text == ""
        assert result.readability_score == 0
        assert result.confidence == 0


class TestTemplateRewriteEngine:
    """Tests for template-driven rewrites."""

    def _risk(self, score=80):
        return RiskAssessment(risk_level=RiskLevel.from_score(score), risk_score=score)

    def test_whole_clause_rewrite(self, config_manager):
        proposal = TemplateRewriteEngine(config_manager).rewrite(
            LIABILITY, ClauseType.LIABILITY, self._risk(95)
        )
        assert proposal is not None
        assert proposal.suggested_text.startswith("Client's liability for damages")
        assert proposal.suggested_text.endswith("excluding consequential damages.")
        assert proposal.confidence == TemplateRewriteEngine.WHOLE_CLAUSE_CONFIDENCE
        assert len(proposal.benefits) == 3

    def test_substitution_rewrite(self, config_manager):
        proposal = TemplateRewriteEngine(config_manager).rewrite(
            TERMINATION, ClauseType.TERMINATION, self._risk(65)
        )
        assert proposal.suggested_text == (
            "Either party may terminate this Agreement without cause by providing sixty "
            "(60) days written notice, with the terminating party providing reasonable "
            "transition assistance."
        )
        assert proposal.confidence == TemplateRewriteEngine.SUBSTITUTION_CONFIDENCE

    def test_no_matching_template(self, config_manager):
        proposal = TemplateRewriteEngine(config_manager).rewrite(
            PAYMENT, ClauseType.PAYMENT_TERMS, self._risk(20)
        )
        assert proposal is None

    def test_templates_are_scoped_by_type(self, config_manager):
        proposal = TemplateRewriteEngine(config_manager).rewrite(
            LIABILITY, ClauseType.PAYMENT_TERMS, self._risk(95)
        )
        assert proposal is None

    def test_empty_text(self, config_manager):
        assert TemplateRewriteEngine(config_manager).rewrite("", ClauseType.LIABILITY, self._risk()) is None
