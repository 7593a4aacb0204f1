"""Built-in configuration shipped with the package.

The data uses the same shapes as the JSON files read by
``ConfigurationManager.load_from_directory`` so it can be saved,
edited and reloaded.
"""

DEFAULT_PLAIN_LANGUAGE = {
    "mappings": [
        {"id": "pl_indemnify_hold", "legal_term": "indemnify and hold harmless",
         "plain_term": "cover the costs of and protect"},
        {"id": "pl_hold_harmless", "legal_term": "hold harmless", "plain_term": "protect"},
        {"id": "pl_indemnify", "legal_term": "indemnify", "plain_term": "pay back"},
        {"id": "pl_including_not_limited", "legal_term": "including but not limited to",
         "plain_term": "including", "variations": ["including without limitation"]},
        {"id": "pl_hereunder", "legal_term": "hereunder", "plain_term": "under this agreement"},
        {"id": "pl_herein", "legal_term": "herein", "plain_term": "in this agreement"},
        {"id": "pl_hereby", "legal_term": "hereby", "plain_term": ""},
        {"id": "pl_notwithstanding", "legal_term": "notwithstanding", "plain_term": "despite"},
        {"id": "pl_prior_to", "legal_term": "prior to", "plain_term": "before"},
        {"id": "pl_in_the_event", "legal_term": "in the event that", "plain_term": "if",
         "variations": ["in the event of"]},
        {"id": "pl_pursuant", "legal_term": "pursuant to", "plain_term": "under"},
        {"id": "pl_whereupon", "legal_term": "whereupon", "plain_term": "after which"},
        {"id": "pl_shall", "legal_term": "shall", "plain_term": "will"},
        {"id": "pl_terminate", "legal_term": "terminate", "plain_term": "end"},
        {"id": "pl_consequential", "legal_term": "consequential damages",
         "plain_term": "indirect losses"},
        {"id": "pl_time_essence", "legal_term": "time is of the essence",
         "plain_term": "deadlines are strict"},
        {"id": "pl_governed_by", "legal_term": "governed by the laws of",
         "plain_term": "follows the laws of"},
        {"id": "pl_binding_arbitration", "legal_term": "binding arbitration",
         "plain_term": "a neutral arbitrator's final decision"},
        {"id": "pl_without_cause", "legal_term": "without cause", "plain_term": "for any reason"},
        {"id": "pl_written_notice", "legal_term": "written notice", "plain_term": "notice in writing"},
        {"id": "pl_sole_exclusive", "legal_term": "sole and exclusive property",
         "plain_term": "property only"},
        {"id": "pl_either_party", "legal_term": "either party", "plain_term": "either side"},
        {"id": "pl_the_parties", "legal_term": "the parties", "plain_term": "both sides"},
        {"id": "pl_acknowledges_agrees", "legal_term": "acknowledges and agrees",
         "plain_term": "agrees"},
    ]
}


DEFAULT_RISK_RULES = {
    "rules": [
        {
            "id": "rr_unlimited_liability", "name": "Unlimited liability",
            "pattern": r"\bunlimited liability\b|\bwithout (any )?limitation of liability\b",
            "weight": 35, "clause_types": ["liability", "indemnification"], "priority": 10,
            "explanation": "Exposes the party to unlimited financial liability.",
            "recommendation": "Cap liability to a specific dollar amount",
            "impact": "Financial exposure could be catastrophic",
        },
        {
            "id": "rr_consequential_damages", "name": "Consequential damages included",
            "pattern": r"\bincluding consequential damages\b",
            "weight": 15, "clause_types": ["liability", "indemnification"], "priority": 20,
            "explanation": "Consequential damages can be extremely costly and unpredictable.",
            "recommendation": "Exclude consequential damages",
        },
        {
            "id": "rr_liability_cap", "name": "Liability cap",
            "pattern": r"\b(limited to|shall not exceed|capped at)\b",
            "weight": -25, "clause_types": ["liability"], "priority": 30,
            "explanation": "Liability is capped at a predictable amount.",
        },
        {
            "id": "rr_exclusive_ip", "name": "Exclusive IP assignment",
            "pattern": r"\bexclusive(ly)?\b",
            "weight": 48, "clause_types": ["intellectual_property"], "priority": 10,
            "explanation": "All rights to work product are assigned to one party, "
                           "even those built on the other party's existing IP.",
            "recommendation": "Negotiate shared IP ownership",
            "impact": "Loss of valuable intellectual property rights",
        },
        {
            "id": "rr_preexisting_ip", "name": "Pre-existing IP retained",
            "pattern": r"\b(jointly owned|pre-existing intellectual property)\b",
            "weight": -25, "clause_types": ["intellectual_property"], "priority": 30,
            "explanation": "Each party keeps its pre-existing intellectual property.",
        },
        {
            "id": "rr_termination_without_cause", "name": "Termination without cause",
            "pattern": r"\bwithout cause\b",
            "weight": 20, "clause_types": ["termination"], "priority": 10,
            "explanation": "The agreement can be ended at any time without a reason.",
            "recommendation": "Add termination for convenience vs. cause distinctions",
            "impact": "Potential service disruption with limited transition time",
        },
        {
            "id": "rr_short_notice", "name": "Short notice period",
            "pattern": r"\b(thirty|fifteen|ten|seven)\b(\s*\(\d+\))?\s*days|\b(30|15|10|7)\s*days",
            "weight": 10, "clause_types": ["termination"], "priority": 20,
            "explanation": "The notice period may not leave enough time to transition.",
            "recommendation": "Extend notice period to 60-90 days",
        },
        {
            "id": "rr_transition_assistance", "name": "Transition assistance",
            "pattern": r"\btransition assistance\b",
            "weight": -15, "clause_types": ["termination"], "priority": 30,
            "explanation": "Transition assistance is required on termination.",
        },
        {
            "id": "rr_automatic_renewal", "name": "Automatic renewal",
            "pattern": r"\bautomatic(ally)? renew",
            "weight": 20, "clause_types": ["termination"], "priority": 20,
            "explanation": "The agreement renews unless actively cancelled.",
            "recommendation": "Require affirmative renewal or a reminder notice",
        },
        {
            "id": "rr_binding_arbitration", "name": "Binding arbitration",
            "pattern": r"\bbinding arbitration\b",
            "weight": 25, "clause_types": ["governing_law", "dispute_resolution"], "priority": 10,
            "explanation": "Binding arbitration limits legal recourse options.",
            "recommendation": "Consider mediation before arbitration",
            "impact": "Increased legal costs and limited dispute resolution options",
        },
        {
            "id": "rr_mediation_first", "name": "Mediation or negotiation first",
            "pattern": r"\b(mediation|good faith negotiations?)\b",
            "weight": -10, "clause_types": ["governing_law", "dispute_resolution"], "priority": 30,
            "explanation": "Disputes are first addressed through negotiation or mediation.",
        },
        {
            "id": "rr_company_indemnifies", "name": "Counterparty indemnifies",
            "pattern": r"\bthe company shall indemnify\b",
            "weight": -15, "clause_types": ["indemnification"], "priority": 20,
            "explanation": "Protects the client by requiring the company to cover "
                           "third-party claims related to its performance.",
            "recommendation": "Ensure indemnification covers all relevant scenarios",
            "impact": "Good protection for client against third-party claims",
        },
        {
            "id": "rr_client_indemnifies", "name": "Client indemnifies",
            "pattern": r"\b(the )?client (shall|agrees to) indemnify\b",
            "weight": 30, "clause_types": ["indemnification"], "priority": 10,
            "explanation": "The client must cover the other party's losses.",
            "recommendation": "Consider mutual indemnification",
            "impact": "Open-ended exposure to third-party claims",
        },
        {
            "id": "rr_late_payment_penalty", "name": "Late payment penalty",
            "pattern": r"\blate (payment )?(fee|penalt(y|ies)|charge)",
            "weight": 20, "clause_types": ["payment_terms"], "priority": 20,
            "explanation": "Late payments attract penalties.",
            "recommendation": "Negotiate a grace period before penalties apply",
        },
        {
            "id": "rr_time_essence", "name": "Time is of the essence",
            "pattern": r"\btime is of the essence\b",
            "weight": 25, "clause_types": ["performance"], "priority": 10,
            "explanation": "Any delay may be treated as a material breach.",
            "recommendation": "Add a cure period for missed deadlines",
        },
        {
            "id": "rr_sole_discretion", "name": "Sole discretion",
            "pattern": r"\bsole discretion\b",
            "weight": 15, "priority": 40,
            "explanation": "One party can act unilaterally.",
            "recommendation": "Require decisions to be reasonable and in good faith",
        },
        {
            "id": "rr_waiver", "name": "Waiver of rights",
            "pattern": r"\bwaives?\b",
            "weight": 15, "priority": 40,
            "explanation": "Rights are waived.",
            "recommendation": "Limit the scope of the waiver",
        },
        {
            "id": "rr_mutual", "name": "Mutual obligation",
            "pattern": r"\bmutual(ly)?\b",
            "weight": -10, "priority": 50,
            "explanation": "Obligations apply to both parties.",
        },
    ]
}


DEFAULT_TEMPLATES = {
    "templates": [
        {
            "id": "tpl_cap_liability", "name": "Cap unlimited liability",
            "source_pattern": r"(?P<party>\b[A-Z][A-Za-z]*)(?:'s)? (?:agrees to|shall have|assumes) unlimited liability",
            "replacement_template": (
                "{party}'s liability for damages arising from breach of this Agreement "
                "shall be limited to the total amount paid under this Agreement in the "
                "twelve (12) months preceding the breach, excluding consequential damages."
            ),
            "clause_type": "liability", "replace_whole_clause": True,
            "reasoning": "The original clause exposes the party to unlimited financial risk. "
                         "The suggested revision caps liability at a reasonable amount and "
                         "excludes unpredictable consequential damages.",
            "benefits": [
                "Limits financial exposure to a predictable amount",
                "Excludes hard-to-calculate consequential damages",
                "Provides better risk management for the client",
            ],
        },
        {
            "id": "tpl_exclude_consequential", "name": "Exclude consequential damages",
            "source_pattern": r"including consequential damages",
            "replacement_template": "excluding consequential damages",
            "clause_type": "liability",
            "reasoning": "Consequential damages are hard to predict and can dwarf the contract value.",
            "benefits": ["Excludes hard-to-calculate consequential damages"],
        },
        {
            "id": "tpl_joint_ip", "name": "Joint IP ownership",
            "source_pattern": r"intellectual property .*(?:belong|property of) .*exclusive",
            "replacement_template": (
                "Intellectual property created under this Agreement shall be jointly owned "
                "by both parties, with each party retaining rights to their pre-existing "
                "intellectual property."
            ),
            "clause_type": "intellectual_property", "replace_whole_clause": True,
            "reasoning": "The original clause gives one party complete ownership of all IP, "
                         "even if built on the other party's existing assets. Joint ownership "
                         "provides fairer distribution of rights.",
            "benefits": [
                "Protects client's pre-existing intellectual property",
                "Ensures fair sharing of newly created IP",
                "Allows both parties to benefit from innovations",
            ],
        },
        {
            "id": "tpl_extend_notice", "name": "Extend termination notice",
            "source_pattern": r"(?:at any time )?without cause by providing (?:thirty \(30\)|30) days(?:'|’)? written notice",
            "replacement_template": (
                "without cause by providing sixty (60) days written notice, with the "
                "terminating party providing reasonable transition assistance"
            ),
            "clause_type": "termination",
            "reasoning": "Extending the notice period and requiring transition assistance "
                         "provides more stability and smoother handovers when the agreement ends.",
            "benefits": [
                "More time to find alternative arrangements",
                "Ensures proper knowledge transfer",
                "Reduces business disruption",
            ],
        },
        {
            "id": "tpl_local_law_mediation", "name": "Local law with mediation",
            "source_pattern": r"governed by the laws of (?P<state>[A-Z][A-Za-z ]+?), and any disputes shall be resolved through binding arbitration",
            "replacement_template": (
                "This Agreement shall be governed by the laws of [Client's State], and "
                "disputes shall first be addressed through mediation, with arbitration as "
                "a secondary option if mediation fails."
            ),
            "clause_type": "governing_law", "replace_whole_clause": True,
            "reasoning": "Using the client's local jurisdiction reduces travel costs and legal "
                         "complexity. Adding mediation before arbitration provides more "
                         "resolution options.",
            "benefits": [
                "Reduces legal costs and travel requirements",
                "Provides more flexible dispute resolution options",
                "Uses familiar local legal framework",
            ],
        },
        {
            "id": "tpl_mediation_first", "name": "Mediation before arbitration",
            "source_pattern": r"shall be resolved through binding arbitration",
            "replacement_template": (
                "shall first be addressed through mediation, with binding arbitration "
                "only if mediation fails"
            ),
            "clause_type": "dispute_resolution",
            "reasoning": "Mediation is cheaper and faster than arbitration and keeps more "
                         "options open.",
            "benefits": [
                "Provides more flexible dispute resolution options",
                "Reduces legal costs",
            ],
        },
        {
            "id": "tpl_cure_period", "name": "Cure period for deadlines",
            "source_pattern": r"time is of the essence",
            "replacement_template": (
                "deadlines are important, and a missed deadline may be cured within "
                "ten (10) business days after written notice"
            ),
            "clause_type": "performance",
            "reasoning": "A cure period prevents a minor delay from becoming a material breach.",
            "benefits": ["Avoids termination over minor delays"],
        },
        {
            "id": "tpl_mutual_indemnity", "name": "Mutual indemnification",
            "source_pattern": r"(?:the )?client (?:shall|agrees to) indemnify",
            "replacement_template": "each party shall indemnify the other",
            "clause_type": "indemnification",
            "reasoning": "Mutual indemnification balances exposure to third-party claims.",
            "benefits": ["Balances exposure to third-party claims"],
        },
    ]
}
