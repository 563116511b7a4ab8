"""Classification and priority tables for news articles."""

from typing import List, Tuple

# Evaluated in order; the first category with a keyword in the text wins.
CATEGORY_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    ("venture-capital", ("venture", "startup", "funding")),
    ("carbon-markets", ("carbon", "emissions", "pricing")),
    ("public-markets", ("bond", "public market", "stock")),
    ("policy-regulation", ("policy", "regulation", "government")),
    ("technology", ("technology", "innovation", "breakthrough")),
    ("biodiversity", ("biodiversity", "nature", "ecosystem")),
]

DEFAULT_CATEGORY = "esg-sustainability"

CATEGORIES: Tuple[str, ...] = tuple(name for name, _ in CATEGORY_RULES) + (DEFAULT_CATEGORY,)

BASE_SCORE = 50
REPUTATION_BONUS = 20
REPUTABLE_SOURCES: Tuple[str, ...] = ("Environmental Finance", "Carbon Pulse", "Bloomberg Green")

# Each keyword counts once, however often it appears.
PRIORITY_KEYWORDS: List[Tuple[str, int]] = [
    ("breakthrough", 10),
    ("record", 10),
    ("first", 10),
    ("largest", 10),
    ("major", 10),
    ("significant", 10),
    ("investment", 10),
    ("funding", 10),
    ("merger", 10),
    ("acquisition", 10),
    ("ipo", 10),
    ("regulation", 10),
]

MIN_SCORE = 0
MAX_SCORE = 100
