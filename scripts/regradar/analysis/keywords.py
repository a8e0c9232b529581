"""
Keyword tables for regulation classification, scoring and translation.

All keywords are matched as lower-case substrings of the item's title and
description unless noted otherwise.
"""

from typing import Dict, List, Tuple

from ..models import BusinessImpactArea

# Classification (checked in this order: enforcement, then final rule)
ENFORCEMENT_KEYWORDS: List[str] = [
    "charges",
    "settles",
    "enforcement",
    "violation",
    "penalty",
    "fine",
    "cease and desist",
    "administrative proceeding",
    "sanctions",
]

FINAL_RULE_KEYWORDS: List[str] = [
    "final rule",
    "adopts",
    "effective date",
    "compliance date",
    "new requirements",
    "amendments to",
]

# Severity signals
HIGH_IMPACT_KEYWORDS: List[str] = [
    "cryptocurrency",
    "digital asset",
    "broker-dealer",
    "investment adviser",
    "custody",
    "aml",
    "kyc",
    "consumer protection",
    "systemic risk",
]

URGENCY_KEYWORDS: List[str] = ["immediate", "emergency", "temporary", "interim"]

# Business impact areas
IMPACT_AREA_KEYWORDS: Dict[BusinessImpactArea, List[str]] = {
    BusinessImpactArea.OPERATIONS: [
        "compliance",
        "procedures",
        "policies",
        "training",
        "supervision",
        "customer",
        "client",
        "onboarding",
        "kyc",
        "aml",
        "due diligence",
    ],
    BusinessImpactArea.REPORTING: [
        "disclosure",
        "filing",
        "report",
        "record",
        "documentation",
        "audit",
        "examination",
        "books and records",
        "quarterly",
        "annual",
    ],
    BusinessImpactArea.TECHNOLOGY: [
        "cybersecurity",
        "system",
        "technology",
        "data",
        "electronic",
        "digital",
        "software",
        "platform",
        "infrastructure",
        "security",
    ],
}

# Subjects used when describing what a regulation is about
FINTECH_KEYWORDS: List[str] = [
    "payment",
    "digital asset",
    "cryptocurrency",
    "fintech",
    "broker-dealer",
    "investment adviser",
    "custody",
    "aml",
    "kyc",
    "consumer protection",
    "money transmission",
    "virtual currency",
    "blockchain",
    "defi",
    "robo-advisor",
    "peer-to-peer",
    "crowdfunding",
    "alternative trading",
]

GENERAL_SUBJECTS: List[str] = [
    "securities",
    "trading",
    "investment",
    "financial services",
    "disclosure",
    "reporting",
    "compliance",
    "market",
]

# Feed relevance filter
FINTECH_RELEVANCE_KEYWORDS: List[str] = [
    "payment",
    "digital asset",
    "cryptocurrency",
    "fintech",
    "broker-dealer",
    "investment adviser",
    "custody",
    "aml",
    "kyc",
    "consumer protection",
    "bitcoin",
    "blockchain",
    "crypto",
    "digital currency",
    "virtual currency",
    "money transmission",
    "payment processor",
    "electronic payment",
    "mobile payment",
    "peer-to-peer",
    "p2p",
    "lending",
    "crowdfunding",
]

COMPLEXITY_INDICATORS: List[str] = [
    "system",
    "technology",
    "reporting",
    "multiple",
    "comprehensive",
]

# Legal phrase -> plain phrase, applied in order as whole-word,
# case-insensitive replacements.
TERM_MAPPINGS: List[Tuple[str, str]] = [
    ("pursuant to", "according to"),
    ("shall", "must"),
    ("shall not", "cannot"),
    ("shall be", "must be"),
    ("shall pay", "must pay"),
    ("notwithstanding", "despite"),
    ("heretofore", "previously"),
    ("hereinafter", "from now on"),
    ("aforementioned", "mentioned above"),
    ("thereunder", "under that"),
    ("whereas", "since"),
    ("provided that", "as long as"),
    ("in accordance with", "following"),
    ("with respect to", "regarding"),
    ("in connection with", "related to"),
    ("subject to", "depending on"),
    ("compliance with", "following"),
    ("violation of", "breaking the rules of"),
    ("shall be mandatory", "is required"),
    ("must comply", "must follow"),
    ("enforcement action", "penalty or fine"),
    ("cease and desist", "stop immediately"),
    ("monetary penalty", "fine"),
    ("civil penalty", "fine"),
    ("administrative proceeding", "regulatory investigation"),
    ("consent order", "agreement to fix problems"),
    ("undertaking", "promise to do something"),
    ("remedial action", "steps to fix problems"),
    ("hereby adopts", "has created"),
    ("the Commission", "the SEC"),
    ("Commission", "SEC"),
]

LEGAL_QUALIFIERS: List[str] = [
    "without limitation",
    "including but not limited to",
    "inter alia",
    "among other things",
    "as applicable",
    "as appropriate",
]


def contains_any(text: str, keywords: List[str]) -> bool:
    """Whether any keyword occurs in the (already lower-cased) text."""
    return any(keyword in text for keyword in keywords)


def count_matches(text: str, keywords: List[str]) -> int:
    """Number of distinct keywords occurring in the (already lower-cased) text."""
    return sum(1 for keyword in keywords if keyword in text)
