"""Deterministic local output used when the LLM is unavailable."""

from datetime import date, datetime, timezone
from typing import Sequence

from ..ingestion.text import extractive_summary
from ..models import FALLBACK_MODEL, Article
from .models import BriefDraft
from .prompts import article_gist, group_by_category

MAX_ITEMS_PER_CATEGORY = 3


def fallback_summary(content: str, title: str = "") -> str:
    """Extractive summary over sentences longer than 50 characters, else the title."""
    summary = extractive_summary(content, min_sentence_length=50)
    if summary:
        return summary
    return title.strip() or "Summary unavailable."


def fallback_brief(articles: Sequence[Article], brief_date: date) -> str:
    """Markdown brief assembled from the grouped articles."""
    groups = group_by_category(articles)
    categories = ", ".join(groups.keys())

    lines = [
        "# Daily Environmental Impact Investing Brief",
        f"*{brief_date.strftime('%A, %B %d, %Y')}*",
        "",
        "## Executive Summary",
        "",
        f"Collected {len(articles)} articles from environmental finance sources "
        f"covering {categories}. AI analysis is unavailable, so this brief lists "
        "the highest-priority items per category.",
        "",
        "## Key Developments by Category",
    ]

    for category, items in groups.items():
        lines.append("")
        lines.append(f"### {category.replace('-', ' ').title()}")
        for article in items[:MAX_ITEMS_PER_CATEGORY]:
            gist = article_gist(article)
            lines.append(f"- **{article.title}** ({article.source})" + (f": {gist}" if gist else ""))

    top = max(articles, key=lambda a: a.priority_score)
    lines.extend([
        "",
        "## Market Implications",
        "",
        f"Most active area: {next(iter(groups))}. Highest-priority item: "
        f"{top.title} (score {top.priority_score}).",
    ])
    return "\n".join(lines)


def fallback_brief_draft(articles: Sequence[Article], brief_date: date, max_categories: int = 5) -> BriefDraft:
    return BriefDraft(
        content=fallback_brief(articles, brief_date),
        article_count=len(articles),
        top_categories=list(group_by_category(articles).keys())[:max_categories],
        generated_at=datetime.now(timezone.utc),
        ai_model=FALLBACK_MODEL,
    )


def fallback_trend_analysis(data_points: int, data_type: str) -> str:
    return (
        f"Basic trend analysis for {data_type}: {data_points} data points analyzed. "
        "Detailed AI analysis unavailable, please check API configuration."
    )
