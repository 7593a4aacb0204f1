"""Template-based clause rewriting."""

import logging
from typing import Optional

from ..config.config_manager import ConfigurationManager
from ..interfaces.capabilities import (
    AnalysisContext,
    IRewriteEngine,
    RewriteProposal,
    RiskAssessment,
)
from ..models.enums import ClauseType


logger = logging.getLogger(__name__)


def _normalize(text: str) -> str:
    return " ".join(text.split()).casefold()


class TemplateRewriteEngine(IRewriteEngine):
    """
    Rewrite engine driven by configured RewritingTemplates.

    Templates for the clause type are tried in configuration order and
    the first one that matches and actually changes the text wins.
    """

    WHOLE_CLAUSE_CONFIDENCE = 85
    SUBSTITUTION_CONFIDENCE = 75

    def __init__(self, config_manager: Optional[ConfigurationManager] = None):
        self.config_manager = config_manager or ConfigurationManager.with_defaults()

    def rewrite(
        self,
        text: str,
        clause_type: ClauseType,
        risk: RiskAssessment,
        context: Optional[AnalysisContext] = None,
    ) -> Optional[RewriteProposal]:
        """
        Propose a rewrite for a flagged clause.

        Returns:
            RewriteProposal, or None when no template matches or the
            rewrite is identical to the original.
        """
        if not text or not text.strip():
            return None

        for template in self.config_manager.get_templates_by_type(clause_type.value):
            rewritten = self.config_manager.apply_rewriting_template(template, text)
            if rewritten is None or _normalize(rewritten) == _normalize(text):
                continue

            logger.debug(f"Template '{template.id}' rewrote {clause_type.value} clause")
            return RewriteProposal(
                suggested_text=rewritten.strip(),
                reasoning=template.reasoning,
                benefits=list(template.benefits),
                confidence=(
                    self.WHOLE_CLAUSE_CONFIDENCE
                    if template.replace_whole_clause
                    else self.SUBSTITUTION_CONFIDENCE
                ),
            )

        return None
