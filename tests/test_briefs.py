from datetime import date

from conftest import ScriptedProvider, make_article
from eiim.generation import SummarizationClient
from eiim.models import DailyBrief
from eiim.pipeline import BriefAssembler

DAY = date(2024, 5, 1)


def _seed(article_store, categories):
    for i, category in enumerate(categories):
        article_store.insert(make_article(f"https://e.com/{i}", title=f"Story {i}", category=category))


def test_no_articles_means_no_brief(article_store, brief_store):
    assembler = BriefAssembler(article_store, brief_store)
    assert assembler.generate_brief_for_date(DAY) is None
    assert brief_store.rows == {}


def test_unsummarized_articles_are_excluded(article_store, brief_store):
    article_store.insert(make_article(summary=None))
    assert BriefAssembler(article_store, brief_store).generate_brief_for_date(DAY) is None


def test_fallback_brief_without_summarizer(article_store, brief_store):
    _seed(article_store, ["technology", "carbon-markets"])

    brief = BriefAssembler(article_store, brief_store).generate_brief_for_date(DAY)

    assert brief.is_fallback
    assert brief.article_count == 2
    assert brief.content.startswith("# Daily Environmental Impact Investing Brief")
    assert brief_store.inserts == 1


def test_top_categories_capped_in_first_seen_order(article_store, brief_store):
    categories = [
        "venture-capital", "carbon-markets", "public-markets", "policy-regulation",
        "technology", "biodiversity", "esg-sustainability",
    ]
    _seed(article_store, categories)

    brief = BriefAssembler(article_store, brief_store).generate_brief_for_date(DAY)

    assert brief.top_categories == categories[:5]


def test_existing_brief_is_returned_without_llm_call(article_store, brief_store):
    _seed(article_store, ["technology"])
    existing = DailyBrief(brief_date=DAY, content="Earlier brief", article_count=1, ai_model_used="m")
    brief_store.rows[DAY] = existing
    provider = ScriptedProvider()
    assembler = BriefAssembler(article_store, brief_store, summarizer=SummarizationClient(provider))

    assert assembler.generate_brief_for_date(DAY) is existing
    assert provider.calls == []
    assert brief_store.inserts == 0


def test_force_replaces_existing_brief(article_store, brief_store, cache):
    _seed(article_store, ["technology"])
    brief_store.rows[DAY] = DailyBrief(brief_date=DAY, content="Earlier brief", article_count=1)
    provider = ScriptedProvider(reply="# Fresh brief")
    summarizer = SummarizationClient(provider, cache=cache, analysis_model="test/analysis")
    assembler = BriefAssembler(article_store, brief_store, summarizer=summarizer)

    first = assembler.generate_brief_for_date(DAY, force=True)
    provider.reply = "# Fresher brief"
    second = assembler.generate_brief_for_date(DAY, force=True)

    assert first.content == "# Fresh brief"
    assert second.content == "# Fresher brief"
    assert second.ai_model_used == "test/analysis"
    assert brief_store.replaces == 2
    assert brief_store.rows[DAY].content == "# Fresher brief"


def test_only_articles_near_the_date_are_used(article_store, brief_store):
    _seed(article_store, ["technology"])
    assert BriefAssembler(article_store, brief_store).generate_brief_for_date(date(2024, 6, 1)) is None
