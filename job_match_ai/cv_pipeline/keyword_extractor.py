"""Frequency-based keyword extraction from resume text. Pure and deterministic."""

import re
from collections import Counter
from typing import List

from job_match_ai.config import MAX_KEYWORDS

MIN_TOKEN_LENGTH = 3

_TOKEN_RE = re.compile(r"\b\w+\b")

STOPWORDS: frozenset = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "also", "am", "an",
        "and", "any", "are", "as", "at", "be", "because", "been", "before", "being",
        "below", "between", "both", "but", "by", "can", "could", "did", "do", "does",
        "doing", "down", "during", "each", "etc", "few", "for", "from", "further", "had",
        "has", "have", "having", "he", "her", "here", "hers", "herself", "him", "himself",
        "his", "how", "i", "if", "in", "into", "is", "it", "its", "itself", "just", "me",
        "more", "most", "my", "myself", "no", "nor", "not", "now", "of", "off", "on",
        "once", "only", "or", "other", "our", "ours", "ourselves", "out", "over", "own",
        "same", "she", "should", "so", "some", "such", "than", "that", "the", "their",
        "theirs", "them", "themselves", "then", "there", "these", "they", "this", "those",
        "through", "to", "too", "under", "until", "up", "using", "used", "very", "was",
        "we", "well", "were", "what", "when", "where", "which", "while", "who", "whom",
        "why", "will", "with", "within", "would", "you", "your", "yours", "yourself",
        "yourselves", "including", "various", "via", "per", "across",
    }
)


def tokenize(text: str) -> List[str]:
    """Lowercase and split on word boundaries."""
    return _TOKEN_RE.findall((text or "").lower())


def extract_keywords(text: str, max_keywords: int = MAX_KEYWORDS) -> List[str]:
    """
    Return up to max_keywords terms ranked by frequency.
    Stopwords and tokens of length <= 2 are dropped; ties keep first-occurrence order.
    Empty or whitespace-only text yields an empty list.
    """
    tokens = [
        t for t in tokenize(text)
        if len(t) >= MIN_TOKEN_LENGTH and t not in STOPWORDS
    ]
    if not tokens:
        return []
    # Counter keeps insertion order and most_common sorts stably, so ties stay in first-seen order
    counts = Counter(tokens)
    return [term for term, _ in counts.most_common(max_keywords)]
