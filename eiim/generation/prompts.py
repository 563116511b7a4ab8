"""Prompt builders for the summarization endpoint."""

import json
from collections import OrderedDict
from typing import Any, Dict, List, Sequence

from ..models import Article, MetricRecord

SUMMARY_CONTENT_CHARS = 2000
BRIEF_ITEM_SUMMARY_CHARS = 200


def group_by_category(articles: Sequence[Article]) -> "OrderedDict[str, List[Article]]":
    """Group articles by category, keeping first-seen order."""
    groups: "OrderedDict[str, List[Article]]" = OrderedDict()
    for article in articles:
        groups.setdefault(article.category or "general", []).append(article)
    return groups


def article_gist(article: Article, max_chars: int = BRIEF_ITEM_SUMMARY_CHARS) -> str:
    """The article's summary, or the start of its content."""
    if article.summary:
        return article.summary
    return (article.content or "")[:max_chars]


def build_summary_prompt(title: str, content: str) -> str:
    return f"""Summarize this environmental finance article in exactly 100 words, focusing on investment implications, key metrics, and market impact. Be concise and investor-focused.

Title: {title}
Content: {content[:SUMMARY_CONTENT_CHARS]}..."""


def build_brief_prompt(articles: Sequence[Article]) -> str:
    groups = group_by_category(articles)

    sections = []
    for category, items in groups.items():
        lines = "\n".join(f"- {a.title} ({a.source}): {article_gist(a)}" for a in items)
        sections.append(f"\n{category.upper()}:\n{lines}")

    return f"""Create a comprehensive daily morning brief for environmental impact investors from these {len(articles)} articles.

Structure the brief with:
1. Executive Summary (2-3 sentences highlighting the most important developments)
2. Key Developments by Category
3. Market Implications
4. Investment Outlook

Focus on:
- Investment opportunities and risks
- Market movements and trends
- Policy changes affecting investments
- Technology breakthroughs with commercial potential
- Regional focus: 60% US/North America, 40% global

Articles by category:
{"".join(sections)}

Keep the brief professional, concise, and actionable for investors."""


def build_trend_prompt(data: Sequence[Dict[str, Any]], data_type: str) -> str:
    if data_type == "carbon_prices":
        lines = "\n".join(
            f"{d.get('market')}: {d.get('price')} {d.get('currency')} ({d.get('timestamp')})"
            for d in data
        )
        return f"""Analyze this carbon pricing data for trends, patterns, and investment implications:

{lines}

Include:
- Price movement analysis
- Volatility assessment
- Market correlation insights
- Policy impact evaluation
- Investment recommendations"""

    sample = json.dumps(list(data[:10]), default=str)
    return f"Analyze this {data_type} data for trends and investment implications: {sample}"


def build_anomaly_prompt(metrics: Sequence[MetricRecord]) -> str:
    lines = "\n".join(
        f"{m.metric_name}: {m.value.display()} {m.unit} ({m.period_start.date()} to {m.period_end.date()})"
        for m in metrics
    )
    return f"""Review these environmental investment metrics for anomalies or significant changes that warrant investor attention:

{lines}

Identify:
1. Unusual patterns or outliers
2. Significant percentage changes
3. Correlation breaks
4. Market disruption signals

Format as brief alerts with severity levels (LOW/MEDIUM/HIGH) and investment implications."""
