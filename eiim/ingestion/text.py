"""Plain-text helpers for scraped content."""

from bs4 import BeautifulSoup


def clean_html(text: str) -> str:
    """Strip markup and collapse whitespace."""
    if not text:
        return ""
    if "<" not in text and "&" not in text:
        return " ".join(text.split())
    soup = BeautifulSoup(text, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return " ".join(soup.get_text(" ").split())


def extractive_summary(
    content: str,
    min_sentence_length: int = 30,
    max_sentences: int = 3,
    fallback_chars: int = 200,
) -> str:
    """
    First few substantial sentences of the content.

    Sentences are split on '.', and only those longer than
    min_sentence_length count. With none, the first fallback_chars characters
    are returned with an ellipsis.
    """
    if not content:
        return ""
    sentences = [s.strip() for s in content.split(".") if len(s.strip()) > min_sentence_length]
    if sentences:
        return ". ".join(sentences[:max_sentences]) + "."
    if len(content) <= fallback_chars:
        return content
    return content[:fallback_chars] + "..."
