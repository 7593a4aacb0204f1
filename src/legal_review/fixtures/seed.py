"""Seed data: the sample service agreement shown in the review console."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..models.document import Document
from ..models.enums import ClauseType, Complexity, RiskLevel


@dataclass(frozen=True)
class SeedClause:
    """One sample clause with the analysis results it should produce."""
    text: str
    clause_type: ClauseType
    confidence: int
    page: int
    risk_level: RiskLevel
    risk_score: int
    explanation: str
    recommendations: Tuple[str, ...]
    impact: str
    simplified_text: str
    readability_score: int
    complexity: Complexity
    suggested_text: Optional[str] = None
    reasoning: str = ""
    benefits: Tuple[str, ...] = field(default_factory=tuple)


SAMPLE_DOCUMENT_ID = "sample-service-agreement"

SEED_CLAUSES: List[SeedClause] = [
    SeedClause(
        text=(
            "The Company shall indemnify and hold harmless the Client from any claims "
            "arising from the performance of this Agreement."
        ),
        clause_type=ClauseType.INDEMNIFICATION,
        confidence=95,
        page=1,
        risk_level=RiskLevel.SAFE,
        risk_score=15,
        explanation=(
            "This clause protects the client by requiring the company to cover legal "
            "costs and damages from third-party claims related to the company's performance."
        ),
        recommendations=(
            "Ensure indemnification covers all relevant scenarios",
            "Consider mutual indemnification for certain situations",
        ),
        impact="Good protection for client against third-party claims",
        simplified_text=(
            "If someone makes a claim because of the Company's work, the Company will "
            "pay for it and protect the Client."
        ),
        readability_score=85,
        complexity=Complexity.MEDIUM,
    ),
    SeedClause(
        text="Payment terms are Net 30 days from invoice date.",
        clause_type=ClauseType.PAYMENT_TERMS,
        confidence=99,
        page=1,
        risk_level=RiskLevel.SAFE,
        risk_score=10,
        explanation="Standard payment window with a clear due date.",
        recommendations=("Confirm late payment consequences are stated",),
        impact="Predictable cash flow for both parties",
        simplified_text="Each invoice must be paid within 30 days of its date.",
        readability_score=96,
        complexity=Complexity.LOW,
    ),
    SeedClause(
        text=(
            "Either party may terminate this Agreement at any time without cause by "
            "providing thirty (30) days written notice."
        ),
        clause_type=ClauseType.TERMINATION,
        confidence=92,
        page=2,
        risk_level=RiskLevel.MEDIUM,
        risk_score=65,
        explanation=(
            "While termination flexibility can be beneficial, 30 days may not provide "
            "sufficient time to transition services or find alternatives."
        ),
        recommendations=(
            "Extend notice period to 60-90 days",
            "Add termination for convenience vs. cause distinctions",
            "Include transition assistance requirements",
        ),
        impact="Potential service disruption with limited transition time",
        simplified_text=(
            "Either side can end this agreement by giving the other side 30 days "
            "written notice."
        ),
        readability_score=92,
        complexity=Complexity.MEDIUM,
        suggested_text=(
            "Either party may terminate this Agreement without cause by providing sixty "
            "(60) days written notice, with the terminating party providing reasonable "
            "transition assistance."
        ),
        reasoning=(
            "Extending the notice period and requiring transition assistance provides "
            "more stability and smoother handovers when the agreement ends."
        ),
        benefits=(
            "More time to find alternative arrangements",
            "Ensures proper knowledge transfer",
            "Reduces business disruption",
        ),
    ),
    SeedClause(
        text=(
            "All intellectual property created under this Agreement shall belong "
            "exclusively to the Company."
        ),
        clause_type=ClauseType.INTELLECTUAL_PROPERTY,
        confidence=89,
        page=2,
        risk_level=RiskLevel.HIGH,
        risk_score=88,
        explanation=(
            "Client loses all rights to work product and innovations, even those built "
            "on client's existing IP or created with client resources."
        ),
        recommendations=(
            "Negotiate shared IP ownership",
            "Retain rights to pre-existing IP",
            "Include work-for-hire provisions for client-funded development",
        ),
        impact="Loss of valuable intellectual property rights",
        simplified_text=(
            "Anything created while doing this work belongs only to the Company."
        ),
        readability_score=88,
        complexity=Complexity.HIGH,
        suggested_text=(
            "Intellectual property created under this Agreement shall be jointly owned "
            "by both parties, with each party retaining rights to their pre-existing "
            "intellectual property."
        ),
        reasoning=(
            "The original clause gives the company complete ownership of all IP, even if "
            "built on the client's existing assets. Joint ownership provides fairer "
            "distribution of rights."
        ),
        benefits=(
            "Protects client's pre-existing intellectual property",
            "Ensures fair sharing of newly created IP",
            "Allows both parties to benefit from innovations",
        ),
    ),
    SeedClause(
        text=(
            "Client agrees to unlimited liability for any damages, including "
            "consequential damages, arising from breach of this Agreement."
        ),
        clause_type=ClauseType.LIABILITY,
        confidence=98,
        page=3,
        risk_level=RiskLevel.HIGH,
        risk_score=95,
        explanation=(
            "This clause exposes the client to unlimited financial liability, including "
            "consequential damages which can be extremely costly and unpredictable."
        ),
        recommendations=(
            "Cap liability to a specific dollar amount",
            "Exclude consequential damages",
            "Add mutual liability limitations",
        ),
        impact="Financial exposure could be catastrophic",
        simplified_text=(
            "If the Client breaks this agreement, the Client must pay for all resulting "
            "damages, with no upper limit."
        ),
        readability_score=80,
        complexity=Complexity.HIGH,
        suggested_text=(
            "Client's liability for damages arising from breach of this Agreement shall "
            "be limited to the total amount paid under this Agreement in the twelve (12) "
            "months preceding the breach, excluding consequential damages."
        ),
        reasoning=(
            "The original clause exposes the client to unlimited financial risk. The "
            "suggested revision caps liability at a reasonable amount and excludes "
            "unpredictable consequential damages."
        ),
        benefits=(
            "Limits financial exposure to a predictable amount",
            "Excludes hard-to-calculate consequential damages",
            "Provides better risk management for the client",
        ),
    ),
    SeedClause(
        text=(
            "The Client acknowledges and agrees that time is of the essence with respect "
            "to the performance of the Company's obligations hereunder."
        ),
        clause_type=ClauseType.PERFORMANCE,
        confidence=90,
        page=3,
        risk_level=RiskLevel.SAFE,
        risk_score=20,
        explanation="Deadlines are strict, which favours the Client.",
        recommendations=("Define the deadlines the clause refers to",),
        impact="Clear expectations on delivery timing",
        simplified_text=(
            "The Client agrees that the Company must complete their work on time."
        ),
        readability_score=95,
        complexity=Complexity.LOW,
    ),
    SeedClause(
        text=(
            "This Agreement shall be governed by the laws of Delaware, and any disputes "
            "shall be resolved through binding arbitration in Delaware."
        ),
        clause_type=ClauseType.GOVERNING_LAW,
        confidence=94,
        page=4,
        risk_level=RiskLevel.MEDIUM,
        risk_score=45,
        explanation=(
            "Dispute resolution in Delaware may be inconvenient and costly if client is "
            "located elsewhere. Binding arbitration limits legal recourse options."
        ),
        recommendations=(
            "Negotiate jurisdiction closer to client's location",
            "Consider mediation before arbitration",
            "Allow for court proceedings for certain types of disputes",
        ),
        impact="Increased legal costs and limited dispute resolution options",
        simplified_text=(
            "Delaware law applies, and disagreements go to a private arbitrator in "
            "Delaware instead of a court."
        ),
        readability_score=82,
        complexity=Complexity.MEDIUM,
        suggested_text=(
            "This Agreement shall be governed by the laws of [Client's State], and "
            "disputes shall first be addressed through mediation, with arbitration as a "
            "secondary option if mediation fails."
        ),
        reasoning=(
            "Using the client's local jurisdiction reduces travel costs and legal "
            "complexity. Adding mediation before arbitration provides more resolution "
            "options."
        ),
        benefits=(
            "Reduces legal costs and travel requirements",
            "Provides more flexible dispute resolution options",
            "Uses familiar local legal framework",
        ),
    ),
    SeedClause(
        text=(
            "In the event of any dispute arising out of or relating to this Agreement, "
            "the parties agree to first attempt to resolve such dispute through good faith "
            "negotiations. If such negotiations fail to resolve the dispute within sixty "
            "(60) days, the dispute shall be resolved through binding arbitration "
            "administered by the American Arbitration Association."
        ),
        clause_type=ClauseType.DISPUTE_RESOLUTION,
        confidence=91,
        page=4,
        risk_level=RiskLevel.SAFE,
        risk_score=30,
        explanation="Negotiation comes first, with a neutral arbitrator as the fallback.",
        recommendations=("Specify where the arbitration takes place",),
        impact="Structured path to resolving disagreements",
        simplified_text=(
            "If there's a disagreement about this contract, both sides will first try to "
            "work it out by talking. If they can't solve it in 60 days, they'll use a "
            "neutral arbitrator to make the final decision."
        ),
        readability_score=90,
        complexity=Complexity.MEDIUM,
    ),
]


def sample_pages(seeds: Optional[List[SeedClause]] = None) -> List[Tuple[int, str]]:
    """
    Build ordered ``(page_number, text)`` pairs from seed clauses.

    Clauses on the same page are separated by a blank line, so the
    segmenter recovers each seed clause as one span.
    """
    by_page: Dict[int, List[str]] = {}
    for seed in seeds if seeds is not None else SEED_CLAUSES:
        by_page.setdefault(seed.page, []).append(seed.text)
    return [(page, "\n\n".join(texts)) for page, texts in sorted(by_page.items())]


def sample_document(
    document_id: str = SAMPLE_DOCUMENT_ID,
    seeds: Optional[List[SeedClause]] = None,
) -> Document:
    """The sample agreement as an ingested Document."""
    return Document.from_pages(
        document_id, sample_pages(seeds), filename="service-agreement.pdf"
    )
