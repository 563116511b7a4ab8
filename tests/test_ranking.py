import pytest

from eiim.ranking import (
    CATEGORIES,
    CategoryClassifier,
    PriorityScorer,
    calculate_priority_score,
    categorize_article,
)


@pytest.mark.parametrize(
    "title,content,expected",
    [
        ("Startup raises seed round", "", "venture-capital"),
        ("EU allowance prices climb", "Carbon allowances rallied.", "carbon-markets"),
        ("Green bond demand", "", "public-markets"),
        ("New government plan", "", "policy-regulation"),
        ("Battery innovation", "", "technology"),
        ("Coral reef ecosystem restored", "", "biodiversity"),
        ("Quarterly sustainability report", "", "esg-sustainability"),
    ],
)
def test_categorize_article(title, content, expected):
    assert categorize_article(title, content) == expected


def test_first_matching_rule_wins():
    # "funding" (venture) and "carbon" both present; venture-capital is first in the table.
    assert categorize_article("Carbon removal funding", "") == "venture-capital"


def test_categorization_is_case_insensitive():
    assert categorize_article("VENTURE Capital", "") == "venture-capital"


def test_every_input_gets_a_known_category():
    for title in ["", "x", "Policy", "random words only"]:
        assert categorize_article(title, None) in CATEGORIES


def test_custom_rules_and_default():
    classifier = CategoryClassifier(rules=[("water", ["aquifer"])], default="other")
    assert classifier.classify("Aquifer recharge", "") == "water"
    assert classifier.classify("Wind farm", "") == "other"


def test_base_score():
    assert calculate_priority_score("Quiet day", "Nothing to see", "Unknown Blog") == 50


def test_reputation_bonus():
    assert calculate_priority_score("Quiet day", "", "Carbon Pulse") == 70


def test_keywords_count_once_each():
    assert calculate_priority_score("Record record record", "", "Unknown") == 60
    assert calculate_priority_score("Breakthrough", "funding", "Unknown") == 70


def test_score_clamped_to_100():
    text = "breakthrough record first largest major significant investment funding merger acquisition ipo regulation"
    assert calculate_priority_score(text, "", "Bloomberg Green") == 100


def test_score_clamped_to_zero():
    scorer = PriorityScorer(base_score=-40)
    assert scorer.score("Quiet", "", None) == 0


def test_custom_reputable_sources():
    scorer = PriorityScorer(reputable_sources=["My Feed"])
    assert scorer.score("Quiet", "", "My Feed") == 70
    assert scorer.score("Quiet", "", "Carbon Pulse") == 50
