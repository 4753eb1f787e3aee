"""Content post-processing: whitespace cleanup, word counts, excerpts and language hints."""

import re
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

# Three or more consecutive newlines collapse to a single blank line
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")

_WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_EXCERPT_WORDS = 50

# Marker words per language.  Order matters: ties go to the earlier entry.
_LANGUAGE_PATTERNS: Dict[str, List[re.Pattern]] = {
    "en": [re.compile(rf"\b{w}\b", re.IGNORECASE) for w in ("the", "and", "of", "is")],
    "es": [re.compile(rf"\b{w}\b", re.IGNORECASE) for w in ("el", "la", "de", "que")],
    "fr": [re.compile(rf"\b{w}\b", re.IGNORECASE) for w in ("le", "la", "de", "et")],
    "de": [re.compile(rf"\b{w}\b", re.IGNORECASE) for w in ("der", "die", "das", "und")],
}


def clean_content(content: Optional[str]) -> str:
    """Collapse runs of blank lines and trim the ends of *content*."""
    if not content:
        return ""
    return _EXCESS_NEWLINES_RE.sub("\n\n", content).strip()


def count_words(content: Optional[str]) -> int:
    if not content:
        return 0
    return len(content.split())


def strip_html(html: Optional[str]) -> str:
    """Return the visible text of *html* with whitespace collapsed.

    ``<script>`` and ``<style>`` subtrees are dropped along with their
    contents.  lxml recovers from broken markup, so this never raises on
    malformed input.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(["script", "style"]):
        tag.decompose()
    return _WHITESPACE_RE.sub(" ", soup.get_text(" ")).strip()


def truncate(text: str, max_length: int, suffix: str = "...") -> str:
    """Cut *text* to at most *max_length* characters, ending with *suffix*."""
    if len(text) <= max_length:
        return text
    return text[: max(max_length - len(suffix), 0)] + suffix


def generate_excerpt(content: str, max_words: int = DEFAULT_EXCERPT_WORDS) -> str:
    """Return the first *max_words* words of *content* followed by ``...``.

    Content that already fits is returned unchanged.
    """
    words = content.split()
    if len(words) <= max_words:
        return content
    return " ".join(words[:max_words]) + "..."


def detect_language(content: Optional[str]) -> Optional[str]:
    """Guess the language of *content* from a handful of marker words.

    Only English, Spanish, French and German are known; anything else (or
    text with no marker words) yields ``None``.
    """
    if not content:
        return None

    best_lang: Optional[str] = None
    best_score = 0
    for lang, patterns in _LANGUAGE_PATTERNS.items():
        score = sum(1 for pattern in patterns if pattern.search(content))
        if score > best_score:
            best_lang, best_score = lang, score
    return best_lang


def calculate_similarity(first: str, second: str) -> float:
    """Jaccard similarity of the lowercase word sets of two documents."""
    words_a = set(first.lower().split())
    words_b = set(second.lower().split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)
