"""Plain-English translation of legal clauses.

Translation is glossary driven: configured legal phrases are replaced with
plain equivalents (longest phrase first), long sentences joined by
semicolons are split, and a Flesch reading-ease score is reported for the
result.
"""

import logging
import re
from typing import List, Optional, Tuple

from ..config.config_manager import ConfigurationManager
from ..interfaces.capabilities import AnalysisContext, ITranslator, TranslationResult
from ..models.enums import ClauseType, Complexity


logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'\-]*")
_SENTENCE_END_RE = re.compile(r"[.!?]+(?:\s|$)")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")
_SPACES_RE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([,.;:!?])")
_SEMICOLON_RE = re.compile(r";\s+(?=[A-Za-z])")


def count_syllables(word: str) -> int:
    """Rough English syllable count based on vowel groups."""
    word = word.lower().strip("'-")
    if not word:
        return 0
    groups = len(_VOWEL_GROUP_RE.findall(word))
    if word.endswith("e") and not word.endswith(("le", "ee")) and groups > 1:
        groups -= 1
    return max(1, groups)


def reading_ease(text: str) -> int:
    """
    Flesch reading-ease score clamped to [0, 100].

    Higher is easier. Text without words scores 0.
    """
    words = _WORD_RE.findall(text or "")
    if not words:
        return 0
    sentences = max(1, len(_SENTENCE_END_RE.findall(text.strip() + " ")))
    syllables = sum(count_syllables(w) for w in words)
    score = 206.835 - 1.015 * (len(words) / sentences) - 84.6 * (syllables / len(words))
    return int(round(max(0.0, min(100.0, score))))


def complexity_band(score: int) -> Complexity:
    """Map a reading-ease score of original wording to a complexity band."""
    if score >= 60:
        return Complexity.LOW
    if score >= 30:
        return Complexity.MEDIUM
    return Complexity.HIGH


class PlainLanguageTranslator(ITranslator):
    """
    Glossary-based plain-language translator.

    Uses the plain-language mappings from a ConfigurationManager; the
    built-in glossary is used when none is given.
    """

    BASE_CONFIDENCE = 50
    SUBSTITUTION_CONFIDENCE = 5
    MAX_CONFIDENCE = 95

    def __init__(self, config_manager: Optional[ConfigurationManager] = None):
        self.config_manager = config_manager or ConfigurationManager.with_defaults()
        self._glossary = self._build_glossary()
        self._pattern = self._build_pattern(self._glossary)

    def _build_glossary(self) -> List[Tuple[str, str]]:
        terms = []
        for mapping in self.config_manager.configuration.plain_language_mappings:
            for term in mapping.get_all_terms():
                terms.append((term.lower(), mapping.plain_term))
        # Longest phrases first so "indemnify and hold harmless" wins over "indemnify"
        terms.sort(key=lambda item: (-len(item[0]), item[0]))
        return terms

    @staticmethod
    def _build_pattern(glossary: List[Tuple[str, str]]) -> Optional["re.Pattern[str]"]:
        if not glossary:
            return None
        alternatives = "|".join(re.escape(term) for term, _ in glossary)
        return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)

    def translate(
        self,
        text: str,
        clause_type: ClauseType,
        context: Optional[AnalysisContext] = None,
    ) -> TranslationResult:
        """
        Translate a clause into plain English.

        Args:
            text: Clause text.
            clause_type: Type assigned by the classifier.
            context: Unused; accepted for interface compatibility.

        Returns:
            TranslationResult. The complexity band describes the original
            wording; the readability score describes the translation.
        """
        if not text or not _WORD_RE.search(text):
            return TranslationResult(
                simplified_text=(text or "").strip(),
                readability_score=0,
                complexity=Complexity.HIGH,
                confidence=0,
            )

        simplified, substitutions = self.simplify(text)
        readability = reading_ease(simplified)
        complexity = complexity_band(reading_ease(text))

        logger.debug(
            f"Translated {clause_type.value} clause with {substitutions} substitutions "
            f"(readability {readability})"
        )

        return TranslationResult(
            simplified_text=simplified,
            readability_score=readability,
            complexity=complexity,
            confidence=min(
                self.MAX_CONFIDENCE,
                self.BASE_CONFIDENCE + self.SUBSTITUTION_CONFIDENCE * substitutions,
            ),
        )

    def simplify(self, text: str) -> Tuple[str, int]:
        """
        Apply glossary substitutions and sentence splitting.

        Returns:
            Tuple of (simplified text, number of substitutions made).
        """
        lookup = dict(self._glossary)
        count = 0

        def replace(match: "re.Match[str]") -> str:
            nonlocal count
            count += 1
            plain = lookup[match.group(0).lower()]
            if plain and match.group(0)[0].isupper():
                return plain[0].upper() + plain[1:]
            return plain

        result = " ".join(text.split())
        if self._pattern is not None:
            result = self._pattern.sub(replace, result)

        result = _SEMICOLON_RE.sub(lambda m: ". ", result)
        result = _SPACES_RE.sub(" ", result)
        result = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", result).strip()
        return self._capitalize_sentences(result), count

    @staticmethod
    def _capitalize_sentences(text: str) -> str:
        def upper(match: "re.Match[str]") -> str:
            return match.group(1) + match.group(2).upper()

        text = re.sub(r"(^|[.!?]\s+)([a-z])", upper, text)
        return text
