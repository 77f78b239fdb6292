"""Turn a free-text customer query into normalized search terms."""

import re
from typing import Iterable, List, Optional

from src.matching.vocabulary import DEFAULT_VOCABULARY, MatchingVocabulary

_PUNCTUATION = re.compile(r"[^\w\s]")


def _dedupe(terms: Iterable[str]) -> List[str]:
    """Drop repeated terms, keeping first-seen order."""
    return list(dict.fromkeys(terms))


def extract_search_terms(
    query: str, vocabulary: Optional[MatchingVocabulary] = None
) -> List[str]:
    """Extract search terms from a user query.

    Combines four signals, in this order:

    1. an age bucket ("3 year old" -> kids, child),
    2. gender words in English or Hinglish,
    3. category synonyms expanded to canonical keywords,
    4. any remaining token of three or more characters that is not a stop word.

    Returns:
        Lowercase terms in order of first appearance. Empty when nothing in
        the query is searchable; never raises for any input string.
    """
    vocab = vocabulary or DEFAULT_VOCABULARY
    if not query:
        return []

    text = query.lower()
    terms: List[str] = []

    age_match = vocab.age_pattern.search(text)
    if age_match:
        terms.extend(vocab.age_bucket(vocab.parse_age(age_match.group(1))))

    if vocab.boy_pattern.search(text):
        terms.append("boys")
    if vocab.girl_pattern.search(text):
        terms.append("girls")

    for synonym in vocab.category_synonyms:
        if synonym.pattern.search(text):
            terms.extend(synonym.keywords)

    stop_words = set(vocab.stop_words)
    for word in _PUNCTUATION.sub("", text).split():
        if len(word) >= vocab.min_term_length and word not in stop_words:
            terms.append(word)

    return _dedupe(terms)
