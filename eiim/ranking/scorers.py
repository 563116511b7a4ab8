"""Category classification and priority scoring for articles."""

from typing import Iterable, Optional, Sequence, Tuple

from .rules import (
    BASE_SCORE,
    CATEGORY_RULES,
    DEFAULT_CATEGORY,
    MAX_SCORE,
    MIN_SCORE,
    PRIORITY_KEYWORDS,
    REPUTABLE_SOURCES,
    REPUTATION_BONUS,
)


def _searchable(title: str, content: str) -> str:
    return f"{title or ''} {content or ''}".lower()


class CategoryClassifier:
    """Assign exactly one category by ordered keyword containment."""

    def __init__(
        self,
        rules: Sequence[Tuple[str, Iterable[str]]] = CATEGORY_RULES,
        default: str = DEFAULT_CATEGORY,
    ) -> None:
        """
        Initialize category classifier.

        Args:
            rules: Ordered (category, keywords) pairs; first match wins
            default: Category used when nothing matches
        """
        self.rules = [(category, tuple(k.lower() for k in keywords)) for category, keywords in rules]
        self.default = default

    def classify(self, title: str, content: str) -> str:
        """Return the category for an article."""
        text = _searchable(title, content)
        for category, keywords in self.rules:
            if any(keyword in text for keyword in keywords):
                return category
        return self.default


class PriorityScorer:
    """Integer priority from source reputation and keyword bonuses."""

    def __init__(
        self,
        base_score: int = BASE_SCORE,
        reputable_sources: Iterable[str] = REPUTABLE_SOURCES,
        reputation_bonus: int = REPUTATION_BONUS,
        keyword_bonuses: Sequence[Tuple[str, int]] = PRIORITY_KEYWORDS,
    ) -> None:
        """
        Initialize priority scorer.

        Args:
            base_score: Starting score
            reputable_sources: Exact source names that earn the reputation bonus
            reputation_bonus: Bonus for a reputable source
            keyword_bonuses: (keyword, bonus) pairs, each applied at most once
        """
        self.base_score = base_score
        self.reputable_sources = frozenset(reputable_sources)
        self.reputation_bonus = reputation_bonus
        self.keyword_bonuses = [(k.lower(), bonus) for k, bonus in keyword_bonuses]

    def score(self, title: str, content: str, source: Optional[str]) -> int:
        """Score an article, clamped to [0, 100]."""
        score = self.base_score

        if source in self.reputable_sources:
            score += self.reputation_bonus

        text = _searchable(title, content)
        for keyword, bonus in self.keyword_bonuses:
            if keyword in text:
                score += bonus

        return max(MIN_SCORE, min(MAX_SCORE, int(score)))


_default_classifier = CategoryClassifier()
_default_scorer = PriorityScorer()


def categorize_article(title: str, content: str) -> str:
    """Categorize with the default rule table."""
    return _default_classifier.classify(title, content)


def calculate_priority_score(title: str, content: str, source: Optional[str]) -> int:
    """Score with the default keyword table."""
    return _default_scorer.score(title, content, source)
