"""Article classification and priority scoring."""

from .rules import CATEGORIES, CATEGORY_RULES, DEFAULT_CATEGORY, PRIORITY_KEYWORDS
from .scorers import CategoryClassifier, PriorityScorer, calculate_priority_score, categorize_article

__all__ = [
    "CATEGORIES",
    "CATEGORY_RULES",
    "DEFAULT_CATEGORY",
    "PRIORITY_KEYWORDS",
    "CategoryClassifier",
    "PriorityScorer",
    "calculate_priority_score",
    "categorize_article",
]
